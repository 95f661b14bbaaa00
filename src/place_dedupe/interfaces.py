from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence

from place_dedupe.config import DetectionConfig
from place_dedupe.models import Coordinates, DuplicateCluster, PlaceRecord


class RecordCleaner(Protocol):
    """Step 1: coerce raw rows into canonical place records."""

    def clean(self, rows: Sequence[Mapping[str, Any]]) -> list[PlaceRecord]:
        ...


class NameScorer(Protocol):
    """Step 2a: similarity of two place names in [0, 1]."""

    def score(self, left: str, right: str) -> float:
        ...

    def best_score(self, left_names: Sequence[str], right_names: Sequence[str]) -> float:
        ...


class LocationScorer(Protocol):
    """Step 2b: proximity of two coordinate pairs in [0, 1]."""

    def score(
        self,
        left: Coordinates | None,
        right: Coordinates | None,
        threshold_km: float,
    ) -> float:
        ...


class DedupePipeline(Protocol):
    """Unified pipeline interface: place records in, duplicate clusters out."""

    def run(self, places: Sequence[PlaceRecord], config: DetectionConfig | None = None) -> list[DuplicateCluster]:
        ...
