from __future__ import annotations

import math
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from loguru import logger

from place_dedupe.models import Coordinates, PlaceRecord

ALT_NAME_SEPARATOR = "|"

_LAT_KEYS = ("lat", "latitude")
_LON_KEYS = ("lon", "lng", "longitude")


class PlaceCleaner:
    """Coerce loosely typed rows (CSV, JSON, LLM output) into ``PlaceRecord``s.

    ``transforms`` maps a field name to a callable applied to that raw value
    before coercion, e.g. ``{"kind": str.lower}``. Rows without an id are
    skipped; unusable coordinates become ``None``.
    """

    def __init__(self, transforms: dict[str, Callable[[Any], Any]] | None = None) -> None:
        self._transforms = transforms or {}

    def clean(self, rows: Sequence[Mapping[str, Any]]) -> list[PlaceRecord]:
        cleaned: list[PlaceRecord] = []
        for row in rows:
            attrs = dict(row)
            for field, transform in self._transforms.items():
                if field in attrs and attrs[field] is not None:
                    attrs[field] = transform(attrs[field])

            record = self._to_record(attrs)
            if record is None:
                logger.warning(f"Skipping place row without an id: {_preview(row)}")
                continue
            cleaned.append(record)
        return cleaned

    def _to_record(self, attrs: Mapping[str, Any]) -> PlaceRecord | None:
        place_id = _text(attrs.get("id"))
        if not place_id:
            return None
        return PlaceRecord(
            id=place_id,
            name=_text(attrs.get("name")) or "",
            kind=_text(attrs.get("kind")) or "",
            city=_text(attrs.get("city")),
            country=_text(attrs.get("country")),
            coords=parse_coordinates(attrs),
            alt_names=parse_alt_names(attrs.get("alt_names", attrs.get("altNames"))),
        )


def parse_coordinates(attrs: Mapping[str, Any]) -> Coordinates | None:
    """Read ``coords: {lat, lon}`` or flat lat/lon columns; invalid values give ``None``."""
    raw = attrs.get("coords")
    if isinstance(raw, Mapping):
        lat = _first(raw, _LAT_KEYS)
        lon = _first(raw, _LON_KEYS)
    else:
        lat = _first(attrs, _LAT_KEYS)
        lon = _first(attrs, _LON_KEYS)

    if lat is None or lon is None:
        return None
    try:
        lat = float(lat)
        lon = float(lon)
    except (TypeError, ValueError):
        return None

    if not (math.isfinite(lat) and math.isfinite(lon)):
        return None
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        return None
    return Coordinates(lat=lat, lon=lon)


def parse_alt_names(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        parts = value.split(ALT_NAME_SEPARATOR)
    elif isinstance(value, (list, tuple)):
        parts = [str(part) for part in value if part is not None]
    else:
        return ()
    return tuple(part.strip() for part in parts if part and part.strip())


def _first(mapping: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = mapping.get(key)
        if value is not None and value != "":
            return value
    return None


def _text(value: object) -> str | None:
    if value is None:
        return None
    text = " ".join(str(value).split())
    return text or None


def _preview(row: Mapping[str, Any]) -> str:
    return ", ".join(f"{key}={value!r}" for key, value in list(row.items())[:4])
