from __future__ import annotations


class PlaceDedupeError(Exception):
    """Base error for the runner and CLI layers. The engine itself never raises."""


class InputError(PlaceDedupeError):
    """Input file is missing, unreadable, or references an unknown place."""
