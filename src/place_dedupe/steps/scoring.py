from __future__ import annotations

from dataclasses import dataclass

from place_dedupe.config import DEFAULT_DETECTION_CONFIG, DetectionConfig
from place_dedupe.interfaces import LocationScorer, NameScorer
from place_dedupe.models import MatchFactors, PlaceRecord
from place_dedupe.steps.similarity import (
    LocationSimilarity,
    NameSimilarity,
    city_match,
    country_match,
    distance_km,
    kind_match,
)

SAME_LOCATION_SCORE = 0.8
NEARBY_LOCATION_SCORE = 0.5
SOME_NAME_SIMILARITY = 0.5
LOW_SIMILARITY_CONFIDENCE = 0.3


@dataclass(frozen=True, slots=True)
class ScoredMatch:
    confidence: float
    factors: MatchFactors
    reasoning: tuple[str, ...]


class ConfidenceScorer:
    """Weighted average of the name, location and categorical signals.

    The scorer never filters: a pair with no name or location evidence still
    gets whatever confidence the categorical matches earn it.
    """

    def __init__(
        self,
        name_similarity: NameScorer | None = None,
        location_similarity: LocationScorer | None = None,
    ) -> None:
        self._name_similarity = name_similarity or NameSimilarity()
        self._location_similarity = location_similarity or LocationSimilarity()

    def score(
        self,
        target: PlaceRecord,
        candidate: PlaceRecord,
        config: DetectionConfig = DEFAULT_DETECTION_CONFIG,
    ) -> ScoredMatch:
        distance = distance_km(target.coords, candidate.coords)
        factors = MatchFactors(
            name_score=self._name_similarity.best_score(target.all_names, candidate.all_names),
            location_score=self._location_similarity.score(
                target.coords, candidate.coords, config.location_threshold_km
            ),
            kind_match=kind_match(target.kind, candidate.kind),
            city_match=city_match(target.city, candidate.city),
            country_match=country_match(target.country, candidate.country),
            distance_km=distance,
        )
        confidence = weighted_confidence(
            factors, config, has_location=distance is not None
        )
        return ScoredMatch(
            confidence=confidence,
            factors=factors,
            reasoning=build_reasoning(target, factors, confidence, config),
        )


def weighted_confidence(
    factors: MatchFactors,
    config: DetectionConfig,
    has_location: bool = True,
) -> float:
    weights = config.weights
    location_weight = weights.location
    if config.redistribute_missing_location and not has_location:
        location_weight = 0.0

    terms = (
        (weights.name, factors.name_score),
        (location_weight, factors.location_score),
        (weights.kind, 1.0 if factors.kind_match else 0.0),
        (weights.city, 1.0 if factors.city_match else 0.0),
        (weights.country, 1.0 if factors.country_match else 0.0),
    )
    total_weight = sum(weight for weight, _ in terms)
    if total_weight <= 0:
        return 0.0

    weighted = sum(weight * value for weight, value in terms)
    return min(1.0, max(0.0, weighted / total_weight))


def build_reasoning(
    target: PlaceRecord,
    factors: MatchFactors,
    confidence: float,
    config: DetectionConfig,
) -> tuple[str, ...]:
    reasoning: list[str] = []

    if factors.name_score >= 1.0:
        reasoning.append("Names are identical")
    elif factors.name_score >= config.name_threshold:
        reasoning.append("Names are very similar")
    elif factors.name_score > SOME_NAME_SIMILARITY:
        reasoning.append("Names have some similarity")

    if factors.location_score >= SAME_LOCATION_SCORE:
        reasoning.append("Same location")
    elif factors.location_score > NEARBY_LOCATION_SCORE:
        reasoning.append("Locations are nearby")
    elif factors.location_score > 0:
        reasoning.append(f"Within {config.location_threshold_km:g} km of each other")

    if factors.kind_match:
        reasoning.append(f"Both are {target.kind}")
    if factors.city_match:
        reasoning.append(f"Both in {target.city}")
    if factors.country_match:
        reasoning.append(f"Both in country {target.country}")

    if confidence <= LOW_SIMILARITY_CONFIDENCE or not reasoning:
        reasoning.append("Low similarity detected")

    return tuple(reasoning)
