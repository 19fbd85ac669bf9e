"""Flat CSV export of a session.

One row per boom event, in the stored (newest first) order. Every row repeats
the session metadata and carries the environmental snapshot that was in
force when the call was heard.

Snapshot join:
    The snapshot with the greatest timestamp <= the call timestamp wins (ties
    go to the one appended last). Calls heard before every snapshot fall back
    to the first snapshot recorded. Lookup is a binary search over the
    snapshots sorted by timestamp.

Boundary conditions:
    * Timestamps are compared as zero-padded ``HH:MM:SS`` strings. That order
      is only chronological within one calendar day, so a session running
      past midnight joins post-midnight calls to the wrong snapshot.
    * Values are wrapped in double quotes but embedded quotes are *not*
      escaped. An observer id or bittern id containing ``"`` yields a
      malformed row.
"""

import logging
from bisect import bisect_right
from datetime import date
from typing import List, Optional, Sequence

from matuku.components import BoomEvent, EnvironmentalSnapshot
from matuku.config import EXPORT_FILENAME_PREFIX
from matuku.state import State
from matuku.types import Timestamp
from matuku.utils.clock import date_str

logger = logging.getLogger(__name__)

CSV_HEADERS = (
    "Observer_ID",
    "Session_Date",
    "Station_Lat",
    "Station_Lon",
    "Session_Start_Time",
    "Sunset_Time",
    "Env_Timestamp",
    "Noise_Level",
    "Wind_Strength",
    "Moon_Visibility",
    "Cloud_Cover",
    "Rain_Presence",
    "Call_Timestamp",
    "Boom_Count",
    "Compass_Bearing",
    "Est_Distance_M",
    "Bittern_ID",
)

LINE_SEPARATOR = "\n"


class SnapshotIndex:
    """Timestamp-sorted view of a snapshot sequence for repeated lookups."""

    def __init__(self, snapshots: Sequence[EnvironmentalSnapshot]) -> None:
        self._first = snapshots[0] if snapshots else None
        # sorted() is stable, so equal timestamps keep append order
        self._ordered = sorted(snapshots, key=lambda s: s.timestamp)
        self._keys = [s.timestamp for s in self._ordered]

    def find(self, call_timestamp: Timestamp) -> Optional[EnvironmentalSnapshot]:
        """Return the snapshot in force at ``call_timestamp``.

        Returns None only when the index is empty.
        """
        index = bisect_right(self._keys, call_timestamp)
        if index == 0:
            return self._first
        return self._ordered[index - 1]


def find_environment(
    snapshots: Sequence[EnvironmentalSnapshot], call_timestamp: Timestamp
) -> Optional[EnvironmentalSnapshot]:
    """One-off :meth:`SnapshotIndex.find`."""
    return SnapshotIndex(snapshots).find(call_timestamp)


def format_value(value: object) -> str:
    """Render a cell value the way the field app always has.

    Integral floats drop their ``.0`` (``100.0`` -> ``100``); ``None`` is empty.
    """
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _quote(value: object) -> str:
    return f'"{format_value(value)}"'


def _environment_cells(env: Optional[EnvironmentalSnapshot]) -> List[object]:
    if env is None:
        return [""] * 6
    return [
        env.timestamp,
        env.noise_level,
        env.wind_strength,
        env.moon_visibility,
        env.cloud_cover,
        env.rain_presence,
    ]


def build_row(
    state: State, boom: BoomEvent, index: Optional[SnapshotIndex] = None
) -> List[object]:
    """Cells for one boom event, in ``CSV_HEADERS`` order."""
    if index is None:
        index = SnapshotIndex(state.environmental_logs)
    env = index.find(boom.call_timestamp)
    return [
        state.observer_id,
        state.session_date,
        state.station_lat,
        state.station_lon,
        state.session_start_time,
        state.sunset_time,
        *_environment_cells(env),
        boom.call_timestamp,
        boom.boom_count,
        boom.compass_bearing,
        boom.est_distance_m,
        boom.bittern_id,
    ]


def generate_csv(state: State) -> str:
    """Serialize ``state`` to CSV text.

    Args:
        state (State): Session snapshot to export.

    Returns:
        str: Header line plus one line per boom event, joined with ``\\n`` and
            without a trailing newline. Only the header when there are no
            boom events.
    """
    index = SnapshotIndex(state.environmental_logs)
    lines = [",".join(CSV_HEADERS)]
    for boom in state.boom_logs:
        cells = build_row(state, boom, index)
        lines.append(",".join(_quote(cell) for cell in cells))
    logger.debug("Exported %d boom rows", len(lines) - 1)
    return LINE_SEPARATOR.join(lines)


def export_filename(export_date: date) -> str:
    """``matuku_session_<YYYY-MM-DD>.csv`` for ``export_date``."""
    return f"{EXPORT_FILENAME_PREFIX}{date_str(export_date)}.csv"
