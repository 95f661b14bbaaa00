from place_dedupe.datasets.profiles import PLACE_COLUMNS
from place_dedupe.datasets.reference import ReferenceDatasetGenerator

__all__ = ["PLACE_COLUMNS", "ReferenceDatasetGenerator"]
