from __future__ import annotations

import json
import math
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping

from place_dedupe.errors import InputError

MAX_LOCATION_THRESHOLD_KM = 50.0

# Accepted spellings for each config key; upstream query parameters arrive camelCased.
_CONFIG_ALIASES = {
    "name_threshold": ("name_threshold", "nameThreshold"),
    "location_threshold_km": ("location_threshold_km", "locationThresholdKm"),
    "min_confidence_score": ("min_confidence_score", "minConfidenceScore"),
    "redistribute_missing_location": ("redistribute_missing_location", "redistributeMissingLocation"),
}


def _clamp(value: object, low: float, high: float, default: float) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    return min(high, max(low, number))


def _as_bool(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


@dataclass(frozen=True)
class MatchWeights:
    """Relative weight of each signal. Scores are normalized by the weight total."""

    name: float = 0.4
    location: float = 0.3
    kind: float = 0.1
    city: float = 0.1
    country: float = 0.1

    def __post_init__(self) -> None:
        for weight in fields(self):
            clamped = _clamp(getattr(self, weight.name), 0.0, 1.0, 0.0)
            object.__setattr__(self, weight.name, clamped)

    @property
    def total(self) -> float:
        return self.name + self.location + self.kind + self.city + self.country

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, object]) -> "MatchWeights":
        known = {weight.name for weight in fields(cls)}
        return cls(**{key: value for key, value in mapping.items() if key in known})  # type: ignore[arg-type]


@dataclass(frozen=True)
class DetectionConfig:
    """Thresholds and weights for duplicate detection.

    Values arrive from loosely validated sources, so they are clamped into
    range on construction instead of being rejected.
    """

    name_threshold: float = 0.8
    location_threshold_km: float = 0.5
    min_confidence_score: float = 0.6
    weights: MatchWeights = field(default_factory=MatchWeights)
    redistribute_missing_location: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "name_threshold", _clamp(self.name_threshold, 0.0, 1.0, 0.8))
        object.__setattr__(
            self,
            "location_threshold_km",
            _clamp(self.location_threshold_km, 0.0, MAX_LOCATION_THRESHOLD_KM, 0.5),
        )
        object.__setattr__(
            self, "min_confidence_score", _clamp(self.min_confidence_score, 0.0, 1.0, 0.6)
        )
        if isinstance(self.weights, Mapping):
            object.__setattr__(self, "weights", MatchWeights.from_mapping(self.weights))
        elif not isinstance(self.weights, MatchWeights):
            object.__setattr__(self, "weights", MatchWeights())
        object.__setattr__(
            self, "redistribute_missing_location", _as_bool(self.redistribute_missing_location)
        )

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any],
        base: "DetectionConfig | None" = None,
    ) -> "DetectionConfig":
        """Build a config from a loose mapping, filling gaps from ``base``."""
        base = base or DEFAULT_DETECTION_CONFIG
        values: dict[str, Any] = {
            "name_threshold": base.name_threshold,
            "location_threshold_km": base.location_threshold_km,
            "min_confidence_score": base.min_confidence_score,
            "redistribute_missing_location": base.redistribute_missing_location,
        }
        for key, aliases in _CONFIG_ALIASES.items():
            for alias in aliases:
                if alias in mapping:
                    values[key] = mapping[alias]
                    break

        weights = base.weights
        raw_weights = mapping.get("weights")
        if isinstance(raw_weights, Mapping):
            merged = {weight.name: getattr(base.weights, weight.name) for weight in fields(MatchWeights)}
            merged.update(raw_weights)
            weights = MatchWeights.from_mapping(merged)

        return cls(weights=weights, **values)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name_threshold": self.name_threshold,
            "location_threshold_km": self.location_threshold_km,
            "min_confidence_score": self.min_confidence_score,
            "weights": {weight.name: getattr(self.weights, weight.name) for weight in fields(MatchWeights)},
            "redistribute_missing_location": self.redistribute_missing_location,
        }


DEFAULT_DETECTION_CONFIG = DetectionConfig()


def load_detection_config(path: Path | None) -> DetectionConfig:
    """Read a JSON config file; ``None`` yields the default config."""
    if path is None:
        return DEFAULT_DETECTION_CONFIG
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except FileNotFoundError as exc:
        raise InputError(f"Config file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise InputError(f"Config file is not valid JSON: {path} ({exc})") from exc
    if not isinstance(payload, Mapping):
        raise InputError(f"Config file must contain a JSON object: {path}")
    return DetectionConfig.from_mapping(payload)
