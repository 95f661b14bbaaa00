import asyncio

from conftest import make_place
from place_dedupe.config import DetectionConfig
from place_dedupe.models import PlaceRecord
from place_dedupe.steps.detection import (
    abatch_detect_duplicates,
    batch_detect_duplicates,
    detect_duplicates,
)
from place_dedupe.steps.scoring import ConfidenceScorer
from place_dedupe.steps.similarity import NameSimilarity


def test_no_candidates_gives_empty_result(sagrada) -> None:
    result = detect_duplicates(sagrada, [])

    assert result.original_place == sagrada
    assert result.potential_duplicates == ()
    assert result.has_high_confidence_duplicates is False
    assert result.total_candidates == 0


def test_every_candidate_is_returned_best_first(sagrada, barcelona_places) -> None:
    candidates = barcelona_places[1:]
    result = detect_duplicates(sagrada, candidates)

    assert result.total_candidates == 3
    assert len(result.potential_duplicates) == 3
    confidences = [match.confidence for match in result.potential_duplicates]
    assert confidences == sorted(confidences, reverse=True)
    assert result.potential_duplicates[0].place.id == "place-2"
    assert result.potential_duplicates[-1].place.id == "place-4"
    assert result.has_high_confidence_duplicates is True


def test_equal_confidences_keep_candidate_order(sagrada) -> None:
    twins = [make_place(f"twin-{idx}", "Sagrada Familia") for idx in range(4)]
    result = detect_duplicates(sagrada, twins)
    assert [match.place.id for match in result.potential_duplicates] == [
        "twin-0",
        "twin-1",
        "twin-2",
        "twin-3",
    ]


def test_high_confidence_flag_is_strictly_above_point_eight(sagrada) -> None:
    far = make_place("far", "Sagrada Familia", coords=None)
    result = detect_duplicates(sagrada, [far])

    # name 0.4 + categories 0.3, no location evidence.
    assert result.potential_duplicates[0].confidence < 0.8
    assert result.has_high_confidence_duplicates is False


def test_target_is_not_filtered_from_candidates(sagrada) -> None:
    result = detect_duplicates(sagrada, [sagrada])
    assert result.potential_duplicates[0].place.id == sagrada.id
    assert result.total_candidates == 1


def test_detection_is_repeatable(sagrada, barcelona_places) -> None:
    first = detect_duplicates(sagrada, barcelona_places)
    second = detect_duplicates(sagrada, barcelona_places)
    assert first == second


def test_batch_compares_each_place_with_the_others(barcelona_places) -> None:
    results = batch_detect_duplicates(barcelona_places)

    assert list(results) == ["place-1", "place-2", "place-3", "place-4"]
    for place_id, result in results.items():
        assert result.original_place.id == place_id
        assert result.total_candidates == 3
        assert place_id not in {match.place.id for match in result.potential_duplicates}


def test_batch_with_single_place_has_no_candidates(sagrada) -> None:
    results = batch_detect_duplicates([sagrada])
    assert results["place-1"].total_candidates == 0


def test_batch_on_empty_input() -> None:
    assert batch_detect_duplicates([]) == {}


def test_parallel_batch_matches_sequential(barcelona_places) -> None:
    config = DetectionConfig(location_threshold_km=5.0)
    sequential = batch_detect_duplicates(barcelona_places, config)
    parallel = batch_detect_duplicates(barcelona_places, config, max_workers=4)
    assert list(parallel) == list(sequential)
    assert parallel == sequential


def test_batch_reports_progress(barcelona_places) -> None:
    calls: list[tuple[int, int]] = []
    batch_detect_duplicates(barcelona_places, on_progress=lambda done, total: calls.append((done, total)))
    assert calls == [(1, 4), (2, 4), (3, 4), (4, 4)]


def test_async_batch_matches_sync(barcelona_places) -> None:
    expected = batch_detect_duplicates(barcelona_places)
    actual = asyncio.run(abatch_detect_duplicates(barcelona_places))
    assert actual == expected


def test_batch_excludes_by_position_not_id() -> None:
    first = PlaceRecord(id="dup", name="Blue Lantern", kind="cafe")
    second = PlaceRecord(id="dup", name="Blue Lantern", kind="cafe", city="Lisbon")

    results = batch_detect_duplicates([first, second])

    # The later place wins the shared key but was still compared against the first.
    assert list(results) == ["dup"]
    assert results["dup"].original_place is second
    assert results["dup"].potential_duplicates[0].place is first


def test_async_batch_uses_supplied_scorer(barcelona_places) -> None:
    class _ExactNames(NameSimilarity):
        def score(self, left: str, right: str) -> float:
            return 1.0 if left == right else 0.0

    scorer = ConfidenceScorer(name_similarity=_ExactNames())
    results = asyncio.run(abatch_detect_duplicates(barcelona_places, scorer=scorer))

    park_match = next(
        match for match in results["place-1"].potential_duplicates if match.place.id == "place-3"
    )
    assert park_match.factors.name_score == 0.0
    assert results == batch_detect_duplicates(barcelona_places, scorer=scorer)
