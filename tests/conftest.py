"""Shared place fixtures for the duplicate detection tests."""

import pytest
from loguru import logger

from place_dedupe.models import Coordinates, PlaceRecord


@pytest.fixture(autouse=True)
def _reset_logging():
    # The CLI points loguru at the current stderr, which capsys closes after each test.
    yield
    logger.remove()


def make_place(place_id: str, name: str, **overrides) -> PlaceRecord:
    fields = {
        "kind": "landmark",
        "city": "Barcelona",
        "country": "ES",
        "coords": Coordinates(lat=41.4036, lon=2.1744),
    }
    fields.update(overrides)
    return PlaceRecord(id=place_id, name=name, **fields)


@pytest.fixture
def sagrada() -> PlaceRecord:
    return make_place(
        "place-1",
        "Sagrada Familia",
        alt_names=("Basílica de la Sagrada Família",),
    )


@pytest.fixture
def sagrada_basilica() -> PlaceRecord:
    # ~37 m from the first record, as an OCR import would place it.
    return make_place(
        "place-2",
        "Basílica de la Sagrada Família",
        kind="church",
        coords=Coordinates(lat=41.4039, lon=2.1746),
    )


@pytest.fixture
def park_guell() -> PlaceRecord:
    return make_place(
        "place-3",
        "Park Güell",
        kind="park",
        coords=Coordinates(lat=41.4145, lon=2.1527),
        alt_names=("Parc Güell",),
    )


@pytest.fixture
def eiffel_tower() -> PlaceRecord:
    return make_place(
        "place-4",
        "Eiffel Tower",
        city="Paris",
        country="FR",
        coords=Coordinates(lat=48.8584, lon=2.2945),
    )


@pytest.fixture
def barcelona_places(sagrada, sagrada_basilica, park_guell, eiffel_tower) -> list[PlaceRecord]:
    return [sagrada, sagrada_basilica, park_guell, eiffel_tower]
