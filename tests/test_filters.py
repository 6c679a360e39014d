import pytest

from heritage_map.errors import InvalidSelectionError
from heritage_map.filters import FilterSelection, country_options, filter_sites, type_options


def test_filter_all_all_returns_full_set_in_order(scenario_sites) -> None:
    visible = filter_sites(scenario_sites, FilterSelection())

    assert visible == scenario_sites


def test_filter_by_type_preserves_input_order(scenario_sites) -> None:
    visible = filter_sites(scenario_sites, FilterSelection(site_type="Cultural"))

    assert visible == [scenario_sites[0], scenario_sites[2]]


def test_filter_by_country(scenario_sites) -> None:
    visible = filter_sites(scenario_sites, FilterSelection(country="CountryB"))

    assert visible == [scenario_sites[2]]


def test_filter_combines_type_and_country(scenario_sites) -> None:
    visible = filter_sites(scenario_sites, FilterSelection(site_type="Natural", country="CountryA"))

    assert visible == [scenario_sites[1]]


def test_filter_without_matches_returns_empty(scenario_sites) -> None:
    assert filter_sites(scenario_sites, FilterSelection(site_type="Mixed")) == []
    assert filter_sites(scenario_sites, FilterSelection(site_type="Natural", country="CountryB")) == []
    assert filter_sites(scenario_sites, FilterSelection(country="Atlantis")) == []


def test_filter_is_idempotent(scenario_sites) -> None:
    selection = FilterSelection(site_type="Cultural", country="CountryA")

    assert filter_sites(scenario_sites, selection) == filter_sites(scenario_sites, selection)


def test_selection_from_values_normalizes_input() -> None:
    assert FilterSelection.from_values("natural", "CountryA") == FilterSelection("Natural", "CountryA")
    assert FilterSelection.from_values("ALL", "") == FilterSelection()
    assert FilterSelection.from_values(None, None) == FilterSelection()


def test_selection_from_values_rejects_unknown_type() -> None:
    with pytest.raises(InvalidSelectionError):
        FilterSelection.from_values("Industrial", "all")


def test_selector_options(scenario_sites) -> None:
    assert type_options() == ["all", "Cultural", "Natural", "Mixed"]
    assert country_options(list(reversed(scenario_sites))) == ["CountryA", "CountryB"]
