from __future__ import annotations

import math
import re
import unicodedata
from collections.abc import Sequence
from math import sqrt

from rapidfuzz.distance import Levenshtein

from place_dedupe.models import Coordinates

EARTH_RADIUS_KM = 6371.0

# Two words count as the same word above this Levenshtein similarity.
WORD_MATCH_THRESHOLD = 0.8

_GENERIC_PREFIX = re.compile(
    r"^(?:the|la|le|el|basilica de|church of|cathedral of|temple of)\s+"
)
_GENERIC_SUFFIX = re.compile(r"\s+(?:church|cathedral|basilica|temple|mosque)$")
_SEPARATORS = re.compile(r"[-_/]+")
_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: str | None) -> str:
    """Normalize a place name for comparison.

    Decomposes and drops accents, lowercases, removes punctuation, collapses
    whitespace, then strips one generic leading and trailing word
    ("The ...", "Basilica de ...", "... Cathedral").
    """
    if not name:
        return ""

    text = unicodedata.normalize("NFKD", name)
    text = "".join(c for c in text if not unicodedata.combining(c))
    text = text.lower()
    text = _SEPARATORS.sub(" ", text)
    text = _PUNCTUATION.sub("", text)
    text = _WHITESPACE.sub(" ", text).strip()

    text = _GENERIC_PREFIX.sub("", text)
    text = _GENERIC_SUFFIX.sub("", text)
    return text.strip()


class NameSimilarity:
    """Default name scorer: best of edit-distance, word-overlap and token-set measures."""

    def score(self, left: str, right: str) -> float:
        norm_left = normalize_name(left)
        norm_right = normalize_name(right)

        trivial = _trivial_score(left, right, norm_left, norm_right)
        if trivial is not None:
            return trivial

        return max(
            Levenshtein.normalized_similarity(norm_left, norm_right),
            max(_word_similarity(norm_left, norm_right), _word_similarity(norm_right, norm_left)),
            _token_similarity(norm_left, norm_right),
        )

    def best_score(self, left_names: Sequence[str], right_names: Sequence[str]) -> float:
        """Highest score over every combination of primary and alternative names."""
        best = 0.0
        for left in left_names:
            for right in right_names:
                best = max(best, self.score(left, right))
                if best >= 1.0:
                    return 1.0
        return best


class SbertNameSimilarity(NameSimilarity):
    """Sentence-Transformers name scorer (SBERT), for multilingual name variants."""

    def __init__(self, model_name: str = "paraphrase-multilingual-MiniLM-L12-v2") -> None:
        try:
            from sentence_transformers import SentenceTransformer
        except ImportError as exc:
            raise ImportError(
                "SBERT backend requires sentence-transformers. "
                "Install with: pip install sentence-transformers"
            ) from exc
        self._model = SentenceTransformer(model_name)

    def score(self, left: str, right: str) -> float:
        norm_left = normalize_name(left)
        norm_right = normalize_name(right)

        trivial = _trivial_score(left, right, norm_left, norm_right)
        if trivial is not None:
            return trivial

        vectors = self._model.encode(
            [norm_left, norm_right],
            normalize_embeddings=True,
            convert_to_numpy=True,
            show_progress_bar=False,
        )
        cosine = _dot(vectors[0].tolist(), vectors[1].tolist())
        return min(1.0, max(0.0, cosine))


def _trivial_score(left: str | None, right: str | None, norm_left: str, norm_right: str) -> float | None:
    """Shortcut for blank or identical names; punctuation-only names match nothing."""
    raw_left = (left or "").strip()
    raw_right = (right or "").strip()
    if not raw_left and not raw_right:
        return 1.0
    if not norm_left or not norm_right:
        return 0.0
    if norm_left == norm_right:
        return 1.0
    return None


def _word_similarity(left: str, right: str) -> float:
    """Dice coefficient over words; near-identical words count by their similarity."""
    left_words = left.split()
    right_words = right.split()
    if not left_words or not right_words:
        return 0.0

    used = [False] * len(right_words)
    matched = 0.0
    for word in left_words:
        for idx, other in enumerate(right_words):
            if used[idx]:
                continue
            similarity = Levenshtein.normalized_similarity(word, other)
            if similarity > WORD_MATCH_THRESHOLD:
                used[idx] = True
                matched += similarity
                break
    return (2 * matched) / (len(left_words) + len(right_words))


def _token_similarity(left: str, right: str) -> float:
    """Jaccard overlap of tokens longer than two characters."""
    left_tokens = {token for token in left.split() if len(token) > 2}
    right_tokens = {token for token in right.split() if len(token) > 2}
    if not left_tokens or not right_tokens:
        return 0.0
    return len(left_tokens & right_tokens) / len(left_tokens | right_tokens)


def _dot(left: Sequence[float], right: Sequence[float]) -> float:
    return sum(a * b for a, b in zip(left, right))


def is_valid_coordinates(coords: Coordinates | None) -> bool:
    if coords is None:
        return False
    lat, lon = coords.lat, coords.lon
    if not (isinstance(lat, (int, float)) and isinstance(lon, (int, float))):
        return False
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180


def haversine_km(left: Coordinates, right: Coordinates) -> float:
    """Great-circle distance between two points in kilometers."""
    lat1 = math.radians(left.lat)
    lat2 = math.radians(right.lat)
    delta_lat = math.radians(right.lat - left.lat)
    delta_lon = math.radians(right.lon - left.lon)

    a = math.sin(delta_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(delta_lon / 2) ** 2
    c = 2 * math.atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_km(left: Coordinates | None, right: Coordinates | None) -> float | None:
    """Haversine distance, or ``None`` when either side has no usable coordinates."""
    if not is_valid_coordinates(left) or not is_valid_coordinates(right):
        return None
    return haversine_km(left, right)  # type: ignore[arg-type]


class LocationSimilarity:
    """Linear proximity score: 1.0 at the same point, 0.0 at or beyond the threshold."""

    def score(
        self,
        left: Coordinates | None,
        right: Coordinates | None,
        threshold_km: float,
    ) -> float:
        distance = distance_km(left, right)
        if distance is None:
            return 0.0
        return proximity_score(distance, threshold_km)


def proximity_score(distance: float, threshold_km: float) -> float:
    if threshold_km <= 0:
        return 1.0 if distance == 0 else 0.0
    return min(1.0, max(0.0, 1.0 - distance / threshold_km))


def kind_match(left: str | None, right: str | None) -> bool:
    return _same_value(left, right)


def city_match(left: str | None, right: str | None) -> bool:
    return _same_value(left, right)


def country_match(left: str | None, right: str | None) -> bool:
    return _same_value(left, right)


def _same_value(left: str | None, right: str | None) -> bool:
    """Case-insensitive equality; a blank value on either side never matches."""
    if left is None or right is None:
        return False
    left_text = str(left).strip().casefold()
    right_text = str(right).strip().casefold()
    if not left_text or not right_text:
        return False
    return left_text == right_text
