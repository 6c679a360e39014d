"""
Site repository for the UNESCO World Heritage data file.

Reads the GeoJSON-like document (a local path or an http(s) URL) exactly
once and turns every feature into an immutable SiteRecord, preserving
the order of the ``features`` array.
"""

from __future__ import annotations

import html
import json
import logging
from pathlib import Path
import re

import requests
from bs4 import BeautifulSoup

from heritage_map.errors import LoadError, UnrecognizedSiteTypeError
from heritage_map.models import SiteRecord
from heritage_map.site_types import normalize_site_type

logger = logging.getLogger(__name__)

REQUEST_HEADERS = {"Accept": "application/geo+json, application/json"}
DEFAULT_TIMEOUT = 30.0


def is_remote(source: str | Path) -> bool:
    return str(source).startswith(("http://", "https://"))


def fetch_document(source: str | Path, timeout: float = DEFAULT_TIMEOUT) -> object:
    """Fetch and decode the data document. No retry is attempted."""
    if is_remote(source):
        url = str(source)
        try:
            response = requests.get(url, headers=REQUEST_HEADERS, timeout=timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            raise LoadError(f"Failed to fetch {url}: {exc}", source=url) from exc
        except ValueError as exc:
            raise LoadError(f"Invalid JSON from {url}: {exc}", source=url) from exc

    path = Path(source)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(f"Failed to read {path}: {exc}", source=str(path)) from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise LoadError(f"Invalid JSON in {path}: {exc}", source=str(path)) from exc


def load_sites(source: str | Path, timeout: float = DEFAULT_TIMEOUT) -> tuple[SiteRecord, ...]:
    payload = fetch_document(source, timeout=timeout)
    sites = parse_feature_collection(payload, source=str(source))
    logger.info(f"Loaded {len(sites)} heritage sites from {source}")
    return sites


def parse_feature_collection(payload: object, source: str | None = None) -> tuple[SiteRecord, ...]:
    if not isinstance(payload, dict) or not isinstance(payload.get("features"), list):
        raise LoadError("Data document has no 'features' array", source=source)
    return tuple(_parse_feature(feature, index, source) for index, feature in enumerate(payload["features"]))


def _parse_feature(feature: object, index: int, source: str | None) -> SiteRecord:
    if not isinstance(feature, dict):
        raise LoadError(f"Feature {index} is not an object", source=source)

    properties = feature.get("properties")
    geometry = feature.get("geometry")
    if not isinstance(properties, dict) or not isinstance(geometry, dict):
        raise LoadError(f"Feature {index} is missing properties or geometry", source=source)

    raw_type = properties.get("type")
    site_type = normalize_site_type(raw_type) if isinstance(raw_type, str) else None
    if site_type is None:
        raise UnrecognizedSiteTypeError(raw_type, index=index, source=source)

    longitude, latitude = _parse_coordinates(geometry.get("coordinates"), index, source)

    name = _clean_text(properties.get("name"))
    country = _clean_text(properties.get("country"))
    if not name or not country:
        raise LoadError(f"Feature {index} is missing a name or country", source=source)

    return SiteRecord(
        name=name,
        site_type=site_type,
        country=country,
        description=_plain_description(properties.get("description")),
        longitude=longitude,
        latitude=latitude,
        inscribed_year=_parse_year(properties.get("inscribed_year"), index, source),
    )


def _parse_coordinates(value: object, index: int, source: str | None) -> tuple[float, float]:
    if not isinstance(value, (list, tuple)) or len(value) < 2:
        raise LoadError(f"Feature {index} has no [longitude, latitude] pair", source=source)
    if isinstance(value[0], bool) or isinstance(value[1], bool):
        raise LoadError(f"Feature {index} has non-numeric coordinates", source=source)
    try:
        longitude, latitude = float(value[0]), float(value[1])
    except (TypeError, ValueError) as exc:
        raise LoadError(f"Feature {index} has non-numeric coordinates", source=source) from exc
    if not (-180.0 <= longitude <= 180.0 and -90.0 <= latitude <= 90.0):
        raise LoadError(f"Feature {index} coordinates out of range: {value!r}", source=source)
    return longitude, latitude


def _parse_year(value: object, index: int, source: str | None) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise LoadError(f"Feature {index} has an invalid inscribed_year", source=source)
    if isinstance(value, float) and not value.is_integer():
        raise LoadError(f"Feature {index} has a non-integral inscribed_year: {value!r}", source=source)
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise LoadError(f"Feature {index} has an invalid inscribed_year: {value!r}", source=source) from exc


def _clean_text(value: object) -> str:
    if value is None:
        return ""
    unescaped = html.unescape(str(value))
    return re.sub(r"\s+", " ", unescaped).strip()


def _plain_description(value: object) -> str:
    # Upstream descriptions sometimes carry <p>/<em> markup.
    if value is None:
        return ""
    text = BeautifulSoup(str(value), "html.parser").get_text(" ")
    return _clean_text(text)
