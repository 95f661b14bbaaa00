from collections.abc import Sequence

import pytest

from conftest import make_place
from place_dedupe.config import DEFAULT_DETECTION_CONFIG, DetectionConfig, MatchWeights
from place_dedupe.models import Coordinates
from place_dedupe.steps.scoring import ConfidenceScorer


def test_identical_record_scores_full_confidence(sagrada) -> None:
    scored = ConfidenceScorer().score(sagrada, sagrada, DEFAULT_DETECTION_CONFIG)

    assert scored.confidence == pytest.approx(1.0)
    assert scored.factors.name_score == 1.0
    assert scored.factors.location_score == 1.0
    assert scored.factors.kind_match
    assert scored.factors.city_match
    assert scored.factors.country_match


def test_sagrada_variants_are_high_confidence(sagrada, sagrada_basilica) -> None:
    scored = ConfidenceScorer().score(sagrada, sagrada_basilica)

    assert scored.confidence >= 0.85
    assert scored.factors.name_score == 1.0
    assert scored.factors.location_score >= 0.9
    assert scored.factors.distance_km is not None and scored.factors.distance_km < 0.05
    assert not scored.factors.kind_match
    assert scored.reasoning == (
        "Names are identical",
        "Same location",
        "Both in Barcelona",
        "Both in country ES",
    )


def test_scores_are_symmetric(sagrada, sagrada_basilica, park_guell) -> None:
    scorer = ConfidenceScorer()
    for left, right in [(sagrada, sagrada_basilica), (sagrada, park_guell), (park_guell, sagrada_basilica)]:
        assert scorer.score(left, right).confidence == scorer.score(right, left).confidence


def test_same_name_far_apart_keeps_name_signal() -> None:
    left = make_place("a", "Blue Lantern", kind="cafe", coords=Coordinates(lat=41.3874, lon=2.1686))
    right = make_place("b", "Blue Lantern", kind="cafe", coords=Coordinates(lat=41.4773, lon=2.1686))

    scored = ConfidenceScorer().score(left, right, DetectionConfig(location_threshold_km=0.5))

    assert scored.factors.location_score == 0.0
    assert scored.factors.distance_km == pytest.approx(10.0, abs=0.1)
    assert scored.confidence == pytest.approx(0.7)
    assert "Names are identical" in scored.reasoning


def test_categorical_matches_alone_give_nonzero_confidence() -> None:
    left = make_place("a", "Blue Lantern", kind="cafe", coords=None)
    right = make_place("b", "Golden Crown", kind="cafe", coords=None)

    scored = ConfidenceScorer().score(left, right)

    assert scored.factors.location_score == 0.0
    assert scored.confidence > 0.3
    assert "Both are cafe" in scored.reasoning


def test_unrelated_places_report_low_similarity(sagrada, eiffel_tower) -> None:
    scored = ConfidenceScorer().score(sagrada, eiffel_tower)

    assert scored.confidence < 0.3
    assert scored.reasoning[-1] == "Low similarity detected"


def test_location_within_threshold_is_described() -> None:
    left = make_place("a", "Blue Lantern")
    right = make_place("b", "Blue Lantern", coords=Coordinates(lat=41.4036 + 0.3 / 111.195, lon=2.1744))

    scored = ConfidenceScorer().score(left, right)

    assert scored.factors.location_score == pytest.approx(0.4, abs=0.01)
    assert "Within 0.5 km of each other" in scored.reasoning


def test_missing_coordinates_can_redistribute_location_weight() -> None:
    left = make_place("a", "Blue Lantern", coords=None)
    right = make_place("b", "Blue Lantern")

    plain = ConfidenceScorer().score(left, right, DEFAULT_DETECTION_CONFIG)
    adaptive = ConfidenceScorer().score(
        left, right, DetectionConfig(redistribute_missing_location=True)
    )

    assert plain.confidence == pytest.approx(0.7)
    assert adaptive.confidence == pytest.approx(1.0)
    assert adaptive.factors.distance_km is None


def test_zero_weights_give_zero_confidence(sagrada) -> None:
    config = DetectionConfig(weights=MatchWeights(name=0, location=0, kind=0, city=0, country=0))
    assert ConfidenceScorer().score(sagrada, sagrada, config).confidence == 0.0


def test_negative_weights_are_ignored(sagrada, sagrada_basilica) -> None:
    config = DetectionConfig(weights=MatchWeights(name=1.0, location=-5.0, kind=-1.0, city=0.0, country=0.0))
    scored = ConfidenceScorer().score(sagrada, sagrada_basilica, config)
    assert scored.confidence == pytest.approx(scored.factors.name_score)


class _FixedNameScorer:
    def score(self, left: str, right: str) -> float:
        return 0.5

    def best_score(self, left_names: Sequence[str], right_names: Sequence[str]) -> float:
        return 0.5


def test_name_scorer_is_pluggable(sagrada, sagrada_basilica) -> None:
    scored = ConfidenceScorer(name_similarity=_FixedNameScorer()).score(sagrada, sagrada_basilica)
    assert scored.factors.name_score == 0.5
    assert "Names are very similar" not in scored.reasoning


def test_missing_weights_score_with_defaults(sagrada, sagrada_basilica) -> None:
    scorer = ConfidenceScorer()
    fallback = scorer.score(sagrada, sagrada_basilica, DetectionConfig(weights=None))
    assert fallback.confidence == scorer.score(sagrada, sagrada_basilica).confidence
