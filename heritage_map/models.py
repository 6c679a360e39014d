from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class SiteRecord:
    name: str
    site_type: str
    country: str
    description: str
    longitude: float
    latitude: float
    inscribed_year: int | None = None

    @property
    def coordinates(self) -> tuple[float, float]:
        return (self.longitude, self.latitude)

    def to_properties(self) -> dict[str, object]:
        properties: dict[str, object] = {
            "name": self.name,
            "type": self.site_type,
            "country": self.country,
            "description": self.description,
        }
        if self.inscribed_year is not None:
            properties["inscribed_year"] = self.inscribed_year
        return properties

    def to_feature(self) -> dict[str, object]:
        return {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [self.longitude, self.latitude]},
            "properties": self.to_properties(),
        }


@dataclass(slots=True, frozen=True)
class TypeBreakdown:
    total: int = 0
    cultural: int = 0
    natural: int = 0
    mixed: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "cultural": self.cultural,
            "natural": self.natural,
            "mixed": self.mixed,
        }
