from __future__ import annotations

import random
import unicodedata

from place_dedupe.datasets.profiles import (
    CITY_CENTRES,
    KIND_CONFUSIONS,
    LANDMARK_PROFILES,
    NAME_ADJECTIVES,
    NAME_NOUNS,
    VENUE_KINDS,
)
from place_dedupe.models import Coordinates, PlaceRecord

# ~0.0003 degrees is roughly 30 m of latitude.
_DUPLICATE_JITTER_DEG = 0.0003
# Synthetic venues are spread within ~5 km of their city centre.
_VENUE_SPREAD_DEG = 0.045


class ReferenceDatasetGenerator:
    """Generate synthetic place catalogues (with intentional dupes) for tests and benchmarks."""

    def __init__(self, seed: int = 7) -> None:
        self._rng = random.Random(seed)

    def generate(self, size: int, duplicate_rate: float = 0.15) -> list[PlaceRecord]:
        if size <= 0:
            return []

        duplicate_rate = min(1.0, max(0.0, duplicate_rate))
        unique_count = int(size * (1.0 - duplicate_rate))
        unique_count = max(1, min(unique_count, size))

        records: list[PlaceRecord] = []
        for i in range(unique_count):
            records.append(self._unique_place(i))

        while len(records) < size:
            source = self._rng.choice(records[:unique_count])
            records.append(self._perturb(source, f"place_{len(records):06d}"))

        self._rng.shuffle(records)
        return records

    def _unique_place(self, idx: int) -> PlaceRecord:
        place_id = f"place_{idx:06d}"
        if idx < len(LANDMARK_PROFILES):
            name, kind, city, country, lat, lon, alt_names = LANDMARK_PROFILES[idx]
            return PlaceRecord(
                id=place_id,
                name=name,
                kind=kind,
                city=city,
                country=country,
                coords=Coordinates(lat=lat, lon=lon),
                alt_names=alt_names,
            )

        city, country, lat, lon = self._rng.choice(CITY_CENTRES)
        name = f"{self._rng.choice(NAME_ADJECTIVES)} {self._rng.choice(NAME_NOUNS)}"
        if self._rng.random() < 0.5:
            name = f"The {name}"
        return PlaceRecord(
            id=place_id,
            name=name,
            kind=self._rng.choice(VENUE_KINDS),
            city=city,
            country=country,
            coords=Coordinates(
                lat=round(lat + self._rng.uniform(-_VENUE_SPREAD_DEG, _VENUE_SPREAD_DEG), 6),
                lon=round(lon + self._rng.uniform(-_VENUE_SPREAD_DEG, _VENUE_SPREAD_DEG), 6),
            ),
        )

    def _perturb(self, source: PlaceRecord, place_id: str) -> PlaceRecord:
        mutation = self._rng.choice(["name", "location", "fields", "mixed"])

        name = source.name
        kind = source.kind
        city = source.city
        country = source.country
        coords = source.coords

        if mutation in {"name", "mixed"}:
            name = self._name_variant(source)

        if mutation in {"location", "mixed"} and coords is not None:
            if self._rng.random() < 0.25:
                coords = None
            else:
                coords = Coordinates(
                    lat=round(coords.lat + self._rng.uniform(-_DUPLICATE_JITTER_DEG, _DUPLICATE_JITTER_DEG), 6),
                    lon=round(coords.lon + self._rng.uniform(-_DUPLICATE_JITTER_DEG, _DUPLICATE_JITTER_DEG), 6),
                )

        if mutation in {"fields", "mixed"}:
            roll = self._rng.random()
            if roll < 0.3:
                city = None
            elif roll < 0.5:
                country = None
            elif roll < 0.7 and city:
                city = city.upper()
            else:
                kind = KIND_CONFUSIONS.get(kind, kind)

        return PlaceRecord(
            id=place_id,
            name=name,
            kind=kind,
            city=city,
            country=country,
            coords=coords,
        )

    def _name_variant(self, source: PlaceRecord) -> str:
        name = source.name
        variant = self._rng.choice(["alt", "case", "accents", "prefix", "typo"])

        if variant == "alt" and source.alt_names:
            return self._rng.choice(source.alt_names)
        if variant == "case":
            return self._rng.choice([name.upper(), name.lower()])
        if variant == "accents":
            decomposed = unicodedata.normalize("NFKD", name)
            stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
            return stripped if stripped != name else name.replace(" ", "  ")
        if variant == "prefix":
            if name.lower().startswith("the "):
                return name[4:]
            return f"The {name}"
        if len(name) > 6:
            drop_at = self._rng.randrange(1, len(name) - 1)
            return name[:drop_at] + name[drop_at + 1 :]
        return name
