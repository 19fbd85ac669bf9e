"""Compass bearing resolution.

Converts a pointer position on the compass dial, or a discrete key nudge,
into a grid-snapped bearing and names it with a 16-point compass label.

Conventions:

* Pointer offsets ``(dx, dy)`` are measured from the dial centre in screen
  space, so positive ``dy`` points *down*. 0 deg is north (up) and angles grow
  clockwise.
* Snapping rounds half up (``175`` -> ``180``), matching the dial; Python's
  ``round`` would send exact halves to the even multiple instead.
* Discrete input always lands on the grid: the start value is snapped before
  the step is added.

All functions are pure; storing the value is the caller's job.
"""

import math
from typing import Dict, Iterable

from matuku.components import BoomEvent
from matuku.config import BEARING_STEP

DIRECTIONS = (
    "N", "NNE", "NE", "ENE",
    "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW",
    "W", "WNW", "NW", "NNW",
)  # fmt: skip

SECTOR_SIZE = 360 / len(DIRECTIONS)

KEY_NUDGES: Dict[str, int] = {
    "ArrowUp": 1,
    "ArrowRight": 1,
    "ArrowDown": -1,
    "ArrowLeft": -1,
}
"""Key name -> number of grid steps."""


def pointer_to_heading(dx: float, dy: float) -> float:
    """Return the unsnapped heading in [0, 360) for a pointer offset."""
    return (math.degrees(math.atan2(dx, -dy)) + 360) % 360


def snap_angle(angle: float, step: int = BEARING_STEP) -> int:
    """Snap ``angle`` to the nearest multiple of ``step`` in [0, 360)."""
    snapped = math.floor(angle / step + 0.5) * step
    return int(snapped % 360)


def resolve_pointer(dx: float, dy: float, step: int = BEARING_STEP) -> int:
    """Pointer offset -> snapped bearing."""
    return snap_angle(pointer_to_heading(dx, dy), step)


def nudge(value: float, delta_steps: int, step: int = BEARING_STEP) -> int:
    """Move ``value`` by ``delta_steps`` grid steps, wrapping at 360."""
    return (snap_angle(value, step) + delta_steps * step) % 360


def resolve_key(value: float, key: str, step: int = BEARING_STEP) -> int:
    """Apply a key press to ``value``; unrecognized keys only snap."""
    return nudge(value, KEY_NUDGES.get(key, 0), step)


def clamp_bearing_input(value: float, step: int = BEARING_STEP) -> int:
    """Clamp typed input into [0, 360] and snap (360 wraps to 0)."""
    return snap_angle(min(360.0, max(0.0, float(value))), step)


def direction_label(angle: float) -> str:
    """Return the 16-point compass label for ``angle``.

    Each label owns a 22.5 deg sector centred on its direction; a value
    exactly on a boundary belongs to the clockwise (higher) sector.
    """
    normalized = angle % 360
    index = math.floor((normalized + SECTOR_SIZE / 2) / SECTOR_SIZE) % len(DIRECTIONS)
    return DIRECTIONS[index]


def latest_bearings(boom_logs: Iterable[BoomEvent]) -> Dict[str, int]:
    """Most recent bearing per bittern id.

    ``boom_logs`` is expected newest first (as stored on ``State``); events
    without an identity are skipped.
    """
    latest: Dict[str, int] = {}
    for event in boom_logs:
        if event.bittern_id and event.bittern_id not in latest:
            latest[event.bittern_id] = event.compass_bearing
    return latest
