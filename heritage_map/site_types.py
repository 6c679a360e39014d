from __future__ import annotations

from typing import Final

ALL: Final[str] = "all"

CULTURAL: Final[str] = "Cultural"
NATURAL: Final[str] = "Natural"
MIXED: Final[str] = "Mixed"

SITE_TYPES: Final[tuple[str, ...]] = (CULTURAL, NATURAL, MIXED)

TYPE_COLORS: Final[dict[str, str]] = {
    CULTURAL: "#e74c3c",
    NATURAL: "#27ae60",
    MIXED: "#8e44ad",
}


def normalize_site_type(value: str | None) -> str | None:
    """Return the canonical spelling of a site type, or ``None`` if unrecognized."""
    if value is None:
        return None
    lowered = value.strip().casefold()
    for site_type in SITE_TYPES:
        if site_type.casefold() == lowered:
            return site_type
    return None


def type_color(site_type: str) -> str:
    return TYPE_COLORS[site_type]
