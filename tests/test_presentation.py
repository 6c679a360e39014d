import pytest

from heritage_map.errors import MissingPanelError
from heritage_map.models import SiteRecord, TypeBreakdown
from heritage_map.presentation import (
    PanelConfig,
    build_markers,
    country_statistics_text,
    ensure_panels,
    marker_for,
    missing_panels,
    page_context,
    popup_html,
    site_details_text,
    summary_text,
)
from heritage_map.state import AppState


def test_marker_swaps_longitude_latitude(scenario_sites) -> None:
    marker = marker_for(scenario_sites[2], 2)

    assert scenario_sites[2].coordinates == (-72.54, -13.16)
    assert marker["lat"] == -13.16
    assert marker["lng"] == -72.54
    assert marker["id"] == 2


def test_marker_color_depends_only_on_type(scenario_sites) -> None:
    colors = [marker["color"] for marker in build_markers(enumerate(scenario_sites))]

    assert colors == ["#e74c3c", "#27ae60", "#e74c3c"]
    mixed = SiteRecord(name="M", site_type="Mixed", country="X", description="", longitude=0.0, latitude=0.0)
    assert marker_for(mixed, 0)["color"] == "#8e44ad"


def test_popup_escapes_text_and_omits_unknown_year() -> None:
    site = SiteRecord(
        name="<b>Fort</b>",
        site_type="Cultural",
        country="X & Y",
        description="Walls",
        longitude=0.0,
        latitude=0.0,
    )

    html = popup_html(site)

    assert "&lt;b&gt;Fort&lt;/b&gt;" in html
    assert "X &amp; Y" in html
    assert "Inscribed" not in html


def test_site_details_text_includes_optional_year(scenario_sites) -> None:
    assert site_details_text(scenario_sites[0]).splitlines() == [
        "Old Town",
        "Type: Cultural",
        "Country: CountryA",
        "Inscribed: 1991",
        "Walled old town.",
    ]
    assert "Inscribed" not in site_details_text(scenario_sites[1])


def test_statistics_texts() -> None:
    breakdown = TypeBreakdown(total=1, cultural=1, natural=0, mixed=0)

    assert summary_text(breakdown) == "Total: 1 · Cultural: 1 · Natural: 0 · Mixed: 0"
    assert country_statistics_text("CountryB", breakdown).splitlines()[0] == "CountryB"


def test_missing_panels_respects_country_panel_config() -> None:
    page = (
        '<div id="map"></div><select id="typeFilter"></select><select id="countryFilter"></select>'
        '<div id="siteDetails"></div><div id="statsSummary"></div>'
    )

    assert missing_panels(page, PanelConfig(show_country_panel=True)) == ["countryStats"]
    assert missing_panels(page, PanelConfig(show_country_panel=False)) == []
    with pytest.raises(MissingPanelError) as excinfo:
        ensure_panels(page, PanelConfig())
    assert excinfo.value.missing == ["countryStats"]


def test_page_context_for_unloaded_state_disables_data(tmp_path) -> None:
    context = page_context(AppState(tmp_path / "missing.json"), PanelConfig())

    assert context["loaded"] is False
    assert context["countries"] == []
    assert context["markers_json"] == "[]"


def test_page_context_escapes_script_breakout(scenario_sites) -> None:
    sites = [*scenario_sites]
    sites[0] = SiteRecord(
        name="</script><script>alert(1)</script>",
        site_type="Cultural",
        country="CountryA",
        description="",
        longitude=1.0,
        latitude=2.0,
    )

    context = page_context(AppState.from_sites(sites), PanelConfig(), static_mode=True)

    assert "</script>" not in str(context["markers_json"])
    assert "CountryB" in str(context["country_stats_json"])
