from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Iterable

from heritage_map.errors import UnrecognizedSiteTypeError
from heritage_map.models import SiteRecord, TypeBreakdown
from heritage_map.site_types import CULTURAL, MIXED, NATURAL, SITE_TYPES


@dataclass(slots=True, frozen=True)
class SiteStatistics:
    overall: TypeBreakdown
    by_country: dict[str, TypeBreakdown] = field(default_factory=dict)

    def for_country(self, country: str) -> TypeBreakdown:
        return self.by_country.get(country, TypeBreakdown())

    def to_dict(self) -> dict[str, object]:
        return {
            "overall": self.overall.to_dict(),
            "countries": {country: breakdown.to_dict() for country, breakdown in self.by_country.items()},
        }


def compute_breakdown(sites: Iterable[SiteRecord]) -> TypeBreakdown:
    counts: Counter[str] = Counter()
    for site in sites:
        if site.site_type not in SITE_TYPES:
            raise UnrecognizedSiteTypeError(site.site_type)
        counts[site.site_type] += 1
    return _breakdown_from_counts(counts)


def compute_country_breakdowns(sites: Iterable[SiteRecord]) -> dict[str, TypeBreakdown]:
    grouped: dict[str, Counter[str]] = defaultdict(Counter)
    for site in sites:
        if site.site_type not in SITE_TYPES:
            raise UnrecognizedSiteTypeError(site.site_type)
        grouped[site.country][site.site_type] += 1
    return {country: _breakdown_from_counts(grouped[country]) for country in sorted(grouped)}


def compute_statistics(sites: Iterable[SiteRecord]) -> SiteStatistics:
    records = list(sites)
    return SiteStatistics(
        overall=compute_breakdown(records),
        by_country=compute_country_breakdowns(records),
    )


def _breakdown_from_counts(counts: Counter[str]) -> TypeBreakdown:
    cultural = counts.get(CULTURAL, 0)
    natural = counts.get(NATURAL, 0)
    mixed = counts.get(MIXED, 0)
    return TypeBreakdown(
        total=cultural + natural + mixed,
        cultural=cultural,
        natural=natural,
        mixed=mixed,
    )
