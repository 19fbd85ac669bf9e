"""Boom event component.

One observed call. Events live in ``State.boom_logs`` newest first and are
owned exclusively by the session; nothing else holds a reference to them.
"""

from dataclasses import dataclass

from matuku.types import BoomEventID, Timestamp


@dataclass(frozen=True)
class BoomEvent:
    """A logged call instance.

    Attributes:
        id: Unique identifier, generated by the caller (UUID4).
        call_timestamp: Local time of the call (``HH:MM:SS``).
        boom_count: Number of booms in the call (>= 1).
        compass_bearing: Grid-snapped bearing in degrees, 0-359.
        est_distance_m: Estimated distance in metres (>= 0).
        bittern_id: Identity the call is attributed to; may be empty.
    """

    id: BoomEventID
    call_timestamp: Timestamp
    boom_count: int = 1
    compass_bearing: int = 0
    est_distance_m: float = 100
    bittern_id: str = ""
