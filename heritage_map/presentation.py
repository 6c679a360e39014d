from __future__ import annotations

from dataclasses import dataclass
import html
import json
import logging
from typing import Iterable

from bs4 import BeautifulSoup

from heritage_map.errors import MissingPanelError
from heritage_map.filters import type_options
from heritage_map.models import SiteRecord, TypeBreakdown
from heritage_map.site_types import TYPE_COLORS, type_color
from heritage_map.state import AppState

logger = logging.getLogger(__name__)

MARKER_RADIUS = 8
MAP_CENTER = (20.0, 0.0)
MAP_ZOOM = 2

MAP_PANEL_ID = "map"
TYPE_FILTER_ID = "typeFilter"
COUNTRY_FILTER_ID = "countryFilter"
SITE_DETAILS_ID = "siteDetails"
COUNTRY_STATS_ID = "countryStats"
STATS_SUMMARY_ID = "statsSummary"

REQUIRED_PANEL_IDS = (
    MAP_PANEL_ID,
    TYPE_FILTER_ID,
    COUNTRY_FILTER_ID,
    SITE_DETAILS_ID,
    COUNTRY_STATS_ID,
    STATS_SUMMARY_ID,
)


@dataclass(slots=True, frozen=True)
class PanelConfig:
    show_country_panel: bool = True

    def required_ids(self) -> tuple[str, ...]:
        if self.show_country_panel:
            return REQUIRED_PANEL_IDS
        return tuple(panel_id for panel_id in REQUIRED_PANEL_IDS if panel_id != COUNTRY_STATS_ID)


def marker_for(site: SiteRecord, index: int) -> dict[str, object]:
    longitude, latitude = site.coordinates
    return {
        "id": index,
        "name": site.name,
        "type": site.site_type,
        "country": site.country,
        "inscribed_year": site.inscribed_year,
        "description": site.description,
        # Leaflet takes [lat, lng]; the data file stores [lng, lat].
        "lat": latitude,
        "lng": longitude,
        "color": type_color(site.site_type),
        "radius": MARKER_RADIUS,
        "popup_html": popup_html(site),
    }


def build_markers(indexed_sites: Iterable[tuple[int, SiteRecord]]) -> list[dict[str, object]]:
    return [marker_for(site, index) for index, site in indexed_sites]


def popup_html(site: SiteRecord) -> str:
    lines = [
        f"<h3>{html.escape(site.name)}</h3>",
        f"<p><strong>Type:</strong> {html.escape(site.site_type)}</p>",
        f"<p><strong>Country:</strong> {html.escape(site.country)}</p>",
    ]
    if site.inscribed_year is not None:
        lines.append(f"<p><strong>Inscribed:</strong> {site.inscribed_year}</p>")
    if site.description:
        lines.append(f"<p>{html.escape(site.description)}</p>")
    return '<div class="site-details">' + "".join(lines) + "</div>"


def site_details_text(site: SiteRecord) -> str:
    lines = [
        site.name,
        f"Type: {site.site_type}",
        f"Country: {site.country}",
    ]
    if site.inscribed_year is not None:
        lines.append(f"Inscribed: {site.inscribed_year}")
    if site.description:
        lines.append(site.description)
    return "\n".join(lines)


def site_details(site: SiteRecord) -> dict[str, object]:
    return {
        "name": site.name,
        "type": site.site_type,
        "country": site.country,
        "inscribed_year": site.inscribed_year,
        "description": site.description,
        "text": site_details_text(site),
    }


def summary_text(breakdown: TypeBreakdown) -> str:
    return (
        f"Total: {breakdown.total} · Cultural: {breakdown.cultural} · "
        f"Natural: {breakdown.natural} · Mixed: {breakdown.mixed}"
    )


def country_statistics_text(country: str, breakdown: TypeBreakdown) -> str:
    return f"{country}\n{summary_text(breakdown)}"


def json_script_literal(value: object) -> str:
    return json.dumps(value).replace("</", "<\\/")


def missing_panels(page_html: str, config: PanelConfig) -> list[str]:
    soup = BeautifulSoup(page_html, "html.parser")
    return [panel_id for panel_id in config.required_ids() if soup.find(id=panel_id) is None]


def ensure_panels(page_html: str, config: PanelConfig) -> None:
    missing = missing_panels(page_html, config)
    if missing:
        logger.error(f"Rendered page lacks required panels: {', '.join(missing)}")
        raise MissingPanelError(missing)


def page_context(heritage: AppState, panels: PanelConfig, static_mode: bool = False) -> dict[str, object]:
    """Template context shared by the preview server and the static site builder.

    An unloaded or failed state still renders the page shell with the
    selectors disabled and the load error shown.
    """
    loaded = heritage.is_loaded
    context: dict[str, object] = {
        "static_mode": static_mode,
        "loaded": loaded,
        "load_error": str(heritage.error) if heritage.error else "",
        "show_country_panel": panels.show_country_panel,
        "type_options": type_options(),
        "type_colors": TYPE_COLORS,
        "map_center": list(MAP_CENTER),
        "map_zoom": MAP_ZOOM,
        "countries": [],
        "summary": None,
        "summary_text": "",
        "markers_json": "[]",
        "country_stats_json": "{}",
        "overall_stats_json": "null",
    }
    if not loaded:
        return context

    statistics = heritage.statistics
    context.update(
        {
            "countries": heritage.countries,
            "summary": statistics.overall.to_dict(),
            "summary_text": summary_text(statistics.overall),
            "markers_json": json_script_literal(build_markers(enumerate(heritage.sites))),
            "overall_stats_json": json_script_literal(statistics.overall.to_dict()),
        }
    )
    if static_mode:
        context["country_stats_json"] = json_script_literal(statistics.to_dict()["countries"])
    return context
