from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from loguru import logger

from place_dedupe.config import DEFAULT_DETECTION_CONFIG, DetectionConfig
from place_dedupe.interfaces import RecordCleaner
from place_dedupe.models import DuplicateCluster, PlaceRecord
from place_dedupe.steps.cleanup import PlaceCleaner
from place_dedupe.steps.clustering import filter_dismissed_clusters, find_duplicate_clusters
from place_dedupe.steps.detection import ProgressCallback, batch_detect_duplicates
from place_dedupe.steps.scoring import ConfidenceScorer


class LocalDedupePipeline:
    """Local runner: cap input, batch-detect, cluster, then drop dismissed clusters.

    This plays the caller's part around the engine, so the candidate cap and the
    dismissed-pair filter live here rather than in the detection steps.
    """

    def __init__(
        self,
        min_cluster_size: int = 2,
        min_confidence: float = 0.6,
        dismissed_pairs: Iterable[tuple[str, str]] = (),
        max_candidates: int | None = 1000,
        max_workers: int | None = None,
        cleaner: RecordCleaner | None = None,
        scorer: ConfidenceScorer | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self._min_cluster_size = min_cluster_size
        self._min_confidence = min_confidence
        self._dismissed_pairs = [tuple(pair) for pair in dismissed_pairs]
        self._max_candidates = max_candidates
        self._max_workers = max_workers
        self._cleaner = cleaner or PlaceCleaner()
        self._scorer = scorer or ConfidenceScorer()
        self._on_progress = on_progress

    def run(
        self,
        places: Sequence[PlaceRecord],
        config: DetectionConfig | None = None,
    ) -> list[DuplicateCluster]:
        config = config or DEFAULT_DETECTION_CONFIG
        capped = self._cap(places)

        logger.info(f"Detecting duplicates across {len(capped)} places")
        batch_results = batch_detect_duplicates(
            capped,
            config,
            max_workers=self._max_workers,
            on_progress=self._on_progress,
            scorer=self._scorer,
        )
        clusters = find_duplicate_clusters(
            batch_results,
            min_cluster_size=self._min_cluster_size,
            min_confidence=self._min_confidence,
        )
        kept = filter_dismissed_clusters(clusters, self._dismissed_pairs)
        if len(kept) != len(clusters):
            logger.info(f"Dropped {len(clusters) - len(kept)} clusters containing dismissed pairs")
        logger.info(f"Found {len(kept)} duplicate clusters")
        return kept

    def run_rows(
        self,
        rows: Sequence[Mapping[str, Any]],
        config: DetectionConfig | None = None,
    ) -> list[DuplicateCluster]:
        return self.run(self._cleaner.clean(rows), config)

    def _cap(self, places: Sequence[PlaceRecord]) -> list[PlaceRecord]:
        if self._max_candidates is None or len(places) <= self._max_candidates:
            return list(places)
        logger.warning(
            f"Capping input from {len(places)} to {self._max_candidates} places; "
            "pre-filter the catalogue to compare the rest"
        )
        return list(places[: self._max_candidates])
