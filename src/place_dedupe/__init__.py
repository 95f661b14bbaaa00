"""Duplicate detection and clustering for catalogued place records."""

from place_dedupe.config import DEFAULT_DETECTION_CONFIG, DetectionConfig, MatchWeights
from place_dedupe.models import (
    Coordinates,
    DuplicateCluster,
    DuplicateDetectionResult,
    MatchFactors,
    PlaceRecord,
    PotentialDuplicate,
)
from place_dedupe.steps import (
    abatch_detect_duplicates,
    batch_detect_duplicates,
    detect_duplicates,
    filter_dismissed_clusters,
    find_duplicate_clusters,
)

__all__ = [
    "DEFAULT_DETECTION_CONFIG",
    "DetectionConfig",
    "MatchWeights",
    "Coordinates",
    "DuplicateCluster",
    "DuplicateDetectionResult",
    "MatchFactors",
    "PlaceRecord",
    "PotentialDuplicate",
    "detect_duplicates",
    "batch_detect_duplicates",
    "abatch_detect_duplicates",
    "find_duplicate_clusters",
    "filter_dismissed_clusters",
]
