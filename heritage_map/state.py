"""
Application state for one map session.

The state starts ``UNLOADED``, moves to ``LOADED`` or ``LOAD_FAILED`` on the
single load attempt, and is read-only afterwards. Event handlers
(filter changes, marker selection) read only this object.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from pathlib import Path

from heritage_map.errors import LoadError, StateError
from heritage_map.filters import FilterSelection, country_options, filter_sites, matches
from heritage_map.models import SiteRecord, TypeBreakdown
from heritage_map.repository import DEFAULT_TIMEOUT, load_sites
from heritage_map.stats import SiteStatistics, compute_statistics

logger = logging.getLogger(__name__)


class LoadStatus(str, Enum):
    UNLOADED = "unloaded"
    LOADED = "loaded"
    LOAD_FAILED = "load_failed"


@dataclass(slots=True, frozen=True)
class SiteSelection:
    index: int
    site: SiteRecord
    country_statistics: TypeBreakdown | None


class AppState:
    def __init__(
        self,
        source: str | Path,
        show_country_panel: bool = True,
        timeout_seconds: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.source = source
        self.show_country_panel = show_country_panel
        self.timeout_seconds = timeout_seconds
        self.status = LoadStatus.UNLOADED
        self.error: LoadError | None = None
        self._sites: tuple[SiteRecord, ...] = ()
        self._statistics: SiteStatistics | None = None
        self._countries: list[str] = []

    @classmethod
    def from_sites(cls, sites: list[SiteRecord] | tuple[SiteRecord, ...], show_country_panel: bool = True) -> "AppState":
        """Build an already-loaded state from in-memory records."""
        state = cls(source="<memory>", show_country_panel=show_country_panel)
        state._populate(tuple(sites))
        return state

    @property
    def is_loaded(self) -> bool:
        return self.status is LoadStatus.LOADED

    @property
    def sites(self) -> tuple[SiteRecord, ...]:
        self.require_loaded()
        return self._sites

    @property
    def statistics(self) -> SiteStatistics:
        self.require_loaded()
        if self._statistics is None:
            raise StateError("Site statistics are missing from a loaded state")
        return self._statistics

    @property
    def countries(self) -> list[str]:
        self.require_loaded()
        return list(self._countries)

    def load(self) -> bool:
        if self.status is not LoadStatus.UNLOADED:
            raise StateError(f"Site data already loaded once (state: {self.status.value})")
        try:
            sites = load_sites(self.source, timeout=self.timeout_seconds)
        except LoadError as exc:
            self.status = LoadStatus.LOAD_FAILED
            self.error = exc
            logger.error(f"Error loading UNESCO sites from {self.source}: {exc}")
            return False
        self._populate(sites)
        return True

    def require_loaded(self) -> None:
        if self.status is not LoadStatus.LOADED:
            raise StateError(f"Site data is not loaded (state: {self.status.value})")

    def apply_filter(self, selection: FilterSelection) -> list[SiteRecord]:
        return filter_sites(self.sites, selection)

    def select_site(self, index: int) -> SiteSelection:
        sites = self.sites
        if index < 0 or index >= len(sites):
            raise IndexError(f"No site at index {index}")
        site = sites[index]
        country_statistics = self.statistics.for_country(site.country) if self.show_country_panel else None
        return SiteSelection(index=index, site=site, country_statistics=country_statistics)

    def apply_filter_indexed(self, selection: FilterSelection) -> list[tuple[int, SiteRecord]]:
        """Like apply_filter, keeping each record's position in the loaded collection."""
        return [(index, site) for index, site in enumerate(self.sites) if matches(site, selection)]

    def _populate(self, sites: tuple[SiteRecord, ...]) -> None:
        self._statistics = compute_statistics(sites)
        self._sites = sites
        self._countries = country_options(sites)
        self.status = LoadStatus.LOADED
