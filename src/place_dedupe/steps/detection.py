from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from functools import partial

from loguru import logger

from place_dedupe.config import DEFAULT_DETECTION_CONFIG, DetectionConfig
from place_dedupe.models import DuplicateDetectionResult, PlaceRecord, PotentialDuplicate
from place_dedupe.steps.scoring import ConfidenceScorer

# Fixed bar for "high confidence", independent of the configurable minimum.
HIGH_CONFIDENCE_THRESHOLD = 0.8

ProgressCallback = Callable[[int, int], None]


def detect_duplicates(
    target: PlaceRecord,
    candidates: Sequence[PlaceRecord],
    config: DetectionConfig = DEFAULT_DETECTION_CONFIG,
    scorer: ConfidenceScorer | None = None,
) -> DuplicateDetectionResult:
    """Score ``target`` against every candidate, best match first.

    Every candidate is represented in the result regardless of confidence so
    callers can apply their own threshold afterwards. The target itself is not
    filtered out of ``candidates``.
    """
    scorer = scorer or ConfidenceScorer()

    matches: list[PotentialDuplicate] = []
    for candidate in candidates:
        scored = scorer.score(target, candidate, config)
        matches.append(
            PotentialDuplicate(
                place=candidate,
                confidence=scored.confidence,
                factors=scored.factors,
                reasoning=scored.reasoning,
            )
        )

    # list.sort is stable: equal confidences keep candidate order.
    matches.sort(key=lambda match: match.confidence, reverse=True)

    return DuplicateDetectionResult(
        original_place=target,
        potential_duplicates=tuple(matches),
        has_high_confidence_duplicates=any(
            match.confidence > HIGH_CONFIDENCE_THRESHOLD for match in matches
        ),
        total_candidates=len(candidates),
    )


def batch_detect_duplicates(
    places: Sequence[PlaceRecord],
    config: DetectionConfig = DEFAULT_DETECTION_CONFIG,
    *,
    max_workers: int | None = None,
    on_progress: ProgressCallback | None = None,
    scorer: ConfidenceScorer | None = None,
) -> dict[str, DuplicateDetectionResult]:
    """Run pairwise detection for every place against all the others.

    The result is keyed by place id in input order. With ``max_workers > 1``
    targets are scored on a thread pool; the output is identical to the
    sequential run. If two places share an id the later one wins.
    """
    scorer = scorer or ConfidenceScorer()
    places = tuple(places)
    total = len(places)
    logger.debug(f"Batch duplicate detection: places={total}, max_workers={max_workers or 1}")

    def _detect(idx: int) -> DuplicateDetectionResult:
        others = places[:idx] + places[idx + 1 :]
        return detect_duplicates(places[idx], others, config, scorer)

    results: dict[str, DuplicateDetectionResult] = {}

    if not max_workers or max_workers <= 1 or total <= 1:
        for idx, place in enumerate(places):
            results[place.id] = _detect(idx)
            if on_progress:
                on_progress(idx + 1, total)
        return results

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(_detect, idx) for idx in range(total)]
        for idx, future in enumerate(futures):
            results[places[idx].id] = future.result()
            if on_progress:
                on_progress(idx + 1, total)

    return results


async def abatch_detect_duplicates(
    places: Sequence[PlaceRecord],
    config: DetectionConfig = DEFAULT_DETECTION_CONFIG,
    *,
    max_workers: int | None = None,
    on_progress: ProgressCallback | None = None,
    scorer: ConfidenceScorer | None = None,
) -> dict[str, DuplicateDetectionResult]:
    """Asyncio wrapper: runs the batch in the default executor so the loop stays free."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        None,
        partial(
            batch_detect_duplicates,
            places,
            config,
            max_workers=max_workers,
            on_progress=on_progress,
            scorer=scorer,
        ),
    )
