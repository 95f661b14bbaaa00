from place_dedupe.steps.cleanup import PlaceCleaner
from place_dedupe.steps.clustering import filter_dismissed_clusters, find_duplicate_clusters
from place_dedupe.steps.detection import (
    abatch_detect_duplicates,
    batch_detect_duplicates,
    detect_duplicates,
)
from place_dedupe.steps.scoring import ConfidenceScorer, ScoredMatch
from place_dedupe.steps.similarity import (
    LocationSimilarity,
    NameSimilarity,
    SbertNameSimilarity,
    haversine_km,
    normalize_name,
)

__all__ = [
    "PlaceCleaner",
    "ConfidenceScorer",
    "ScoredMatch",
    "LocationSimilarity",
    "NameSimilarity",
    "SbertNameSimilarity",
    "haversine_km",
    "normalize_name",
    "detect_duplicates",
    "batch_detect_duplicates",
    "abatch_detect_duplicates",
    "find_duplicate_clusters",
    "filter_dismissed_clusters",
]
