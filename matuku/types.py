"""Common type aliases and enumerations.

The five environmental condition enums carry the exact labels written to the
CSV export, so their values double as the serialized form. ``LocateFn`` and
``SunsetFn`` are the narrow collaborator seams consumed by
:mod:`matuku.location`.
"""

from enum import StrEnum
from typing import Callable, Tuple

BoomEventID = str
"""Opaque, globally unique boom event identifier (a UUID4 string)."""

Timestamp = str
"""Local clock time formatted ``HH:MM:SS``."""

LocateFn = Callable[[], Tuple[float, float]]
SunsetFn = Callable[[float, float], str]


class SessionStatus(StrEnum):
    """Session lifecycle. Transitions only move forward (or reset)."""

    SETUP = "SETUP"
    ACTIVE = "ACTIVE"
    FINISHED = "FINISHED"


class NoiseLevel(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class WindStrength(StrEnum):
    CALM = "Calm"
    LIGHT = "Light"
    MODERATE = "Moderate"
    STRONG = "Strong"


class MoonVisibility(StrEnum):
    VISIBLE = "Visible"
    NOT_VISIBLE = "Not Visible"


class CloudCover(StrEnum):
    CLEAR = "Clear (0-25%)"
    PARTIAL = "Partially Cloudy (25-75%)"
    OVERCAST = "Overcast (75-100%)"


class RainPresence(StrEnum):
    NONE = "No Rain"
    LIGHT_DRIZZLE = "Light Drizzle"
    RAIN = "Rain"


class StartStatus(StrEnum):
    """Outcome of a request to start the session."""

    STARTED = "STARTED"
    MISSING_OBSERVER_ID = "MISSING_OBSERVER_ID"
    NOT_IN_SETUP = "NOT_IN_SETUP"
    INVALID_CONDITIONS = "INVALID_CONDITIONS"
