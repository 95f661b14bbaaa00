from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Coordinates:
    lat: float
    lon: float

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lon": self.lon}


@dataclass(frozen=True, slots=True)
class PlaceRecord:
    """Canonical, immutable representation of a catalogued place."""

    id: str
    name: str
    kind: str
    city: str | None = None
    country: str | None = None
    coords: Coordinates | None = None
    alt_names: tuple[str, ...] = ()

    @property
    def all_names(self) -> tuple[str, ...]:
        return (self.name, *self.alt_names)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind,
            "city": self.city,
            "country": self.country,
            "coords": self.coords.to_dict() if self.coords else None,
            "alt_names": list(self.alt_names),
        }


@dataclass(frozen=True, slots=True)
class MatchFactors:
    """Per-signal breakdown behind a confidence value."""

    name_score: float
    location_score: float
    kind_match: bool
    city_match: bool
    country_match: bool
    distance_km: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name_score": self.name_score,
            "location_score": self.location_score,
            "kind_match": self.kind_match,
            "city_match": self.city_match,
            "country_match": self.country_match,
            "distance_km": self.distance_km,
        }


@dataclass(frozen=True, slots=True)
class PotentialDuplicate:
    """A candidate place with an attached confidence score and its reasoning."""

    place: PlaceRecord
    confidence: float
    factors: MatchFactors
    reasoning: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "place": self.place.to_dict(),
            "confidence": self.confidence,
            "factors": self.factors.to_dict(),
            "reasoning": list(self.reasoning),
        }


@dataclass(frozen=True, slots=True)
class DuplicateDetectionResult:
    original_place: PlaceRecord
    potential_duplicates: tuple[PotentialDuplicate, ...]
    has_high_confidence_duplicates: bool
    total_candidates: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "original_place": self.original_place.to_dict(),
            "potential_duplicates": [match.to_dict() for match in self.potential_duplicates],
            "has_high_confidence_duplicates": self.has_high_confidence_duplicates,
            "total_candidates": self.total_candidates,
        }


@dataclass(frozen=True, slots=True)
class DuplicateCluster:
    """A group of places that likely refer to the same real-world place."""

    cluster_id: str
    places: tuple[PlaceRecord, ...]
    avg_confidence: float

    @property
    def place_ids(self) -> list[str]:
        return [place.id for place in self.places]

    def to_dict(self) -> dict[str, Any]:
        return {
            "cluster_id": self.cluster_id,
            "places": [place.to_dict() for place in self.places],
            "avg_confidence": self.avg_confidence,
        }
