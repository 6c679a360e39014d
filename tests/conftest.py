"""Shared fixtures for heritage map tests."""

import json
from pathlib import Path

import pytest

from heritage_map.models import SiteRecord

SAMPLE_DATA_FILE = Path(__file__).resolve().parent.parent / "data" / "unesco-sites.json"


def make_feature(name, site_type, country, lng=10.0, lat=20.0, description="", inscribed_year=None):
    properties = {"name": name, "type": site_type, "country": country, "description": description}
    if inscribed_year is not None:
        properties["inscribed_year"] = inscribed_year
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [lng, lat]},
        "properties": properties,
    }


def write_collection(path: Path, features) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"type": "FeatureCollection", "features": list(features)}), encoding="utf-8")
    return path


SCENARIO_FEATURES = [
    make_feature("Old Town", "Cultural", "CountryA", lng=2.35, lat=48.85, description="Walled old town.", inscribed_year=1991),
    make_feature("Great Lake", "Natural", "CountryA", lng=6.15, lat=46.2, description="Glacial lake."),
    make_feature("Temple Hill", "Cultural", "CountryB", lng=-72.54, lat=-13.16, description="Hilltop temple.", inscribed_year=1983),
]


@pytest.fixture
def scenario_sites() -> list[SiteRecord]:
    return [
        SiteRecord(name="Old Town", site_type="Cultural", country="CountryA", description="Walled old town.",
                   longitude=2.35, latitude=48.85, inscribed_year=1991),
        SiteRecord(name="Great Lake", site_type="Natural", country="CountryA", description="Glacial lake.",
                   longitude=6.15, latitude=46.2),
        SiteRecord(name="Temple Hill", site_type="Cultural", country="CountryB", description="Hilltop temple.",
                   longitude=-72.54, latitude=-13.16, inscribed_year=1983),
    ]


@pytest.fixture
def scenario_file(tmp_path: Path) -> Path:
    return write_collection(tmp_path / "data" / "unesco-sites.json", SCENARIO_FEATURES)
