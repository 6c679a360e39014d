from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from heritage_map.errors import InvalidSelectionError
from heritage_map.models import SiteRecord
from heritage_map.site_types import ALL, SITE_TYPES, normalize_site_type


@dataclass(slots=True, frozen=True)
class FilterSelection:
    site_type: str = ALL
    country: str = ALL

    @classmethod
    def from_values(cls, site_type: str | None = None, country: str | None = None) -> "FilterSelection":
        """Build a selection from raw selector values; blank values mean ``all``."""
        type_value = (site_type or "").strip()
        if not type_value or type_value.casefold() == ALL:
            normalized_type = ALL
        else:
            normalized_type = normalize_site_type(type_value)
            if normalized_type is None:
                raise InvalidSelectionError(f"Unknown site type filter: {site_type!r}")

        country_value = (country or "").strip()
        if not country_value or country_value.casefold() == ALL:
            country_value = ALL
        return cls(site_type=normalized_type, country=country_value)

    def to_dict(self) -> dict[str, str]:
        return {"type": self.site_type, "country": self.country}


def matches(site: SiteRecord, selection: FilterSelection) -> bool:
    type_match = selection.site_type == ALL or site.site_type == selection.site_type
    country_match = selection.country == ALL or site.country == selection.country
    return type_match and country_match


def filter_sites(sites: Iterable[SiteRecord], selection: FilterSelection) -> list[SiteRecord]:
    return [site for site in sites if matches(site, selection)]


def country_options(sites: Iterable[SiteRecord]) -> list[str]:
    return sorted({site.country for site in sites})


def type_options() -> list[str]:
    return [ALL, *SITE_TYPES]
