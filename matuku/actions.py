"""Session actions.

Each legal mutation of :class:`matuku.state.State` is one frozen dataclass
here. Actions carry every value the transition needs, including clock
readings, so :func:`matuku.step.step` stays pure and replayable.
"""

from dataclasses import dataclass
from typing import Union

from matuku.components import BoomEvent, BoomEventPatch, EnvironmentalSnapshot
from matuku.types import BoomEventID, Timestamp


@dataclass(frozen=True)
class SetObserverId:
    observer_id: str


@dataclass(frozen=True)
class SetLocation:
    lat: float
    lon: float


@dataclass(frozen=True)
class SetSunsetTime:
    sunset_time: str


@dataclass(frozen=True)
class AddEnvironmentalSnapshot:
    snapshot: EnvironmentalSnapshot


@dataclass(frozen=True)
class StartSession:
    """Move SETUP -> ACTIVE, stamping ``started_at`` as the start time."""

    started_at: Timestamp


@dataclass(frozen=True)
class AddBoomEvent:
    """Prepend ``event``. The caller guarantees ``event.id`` is unique."""

    event: BoomEvent


@dataclass(frozen=True)
class UpdateBoomEvent:
    event_id: BoomEventID
    patch: BoomEventPatch


@dataclass(frozen=True)
class DeleteBoomEvent:
    event_id: BoomEventID


@dataclass(frozen=True)
class EndSession:
    """Move ACTIVE -> FINISHED."""


@dataclass(frozen=True)
class ResetSession:
    """Discard everything and start over in SETUP dated ``session_date``."""

    session_date: str


@dataclass(frozen=True)
class SelectBitternId:
    """Make ``bittern_id`` the sticky default (blank values are ignored)."""

    bittern_id: str


@dataclass(frozen=True)
class IncrementBitternId:
    """Advance the ``B<n>`` counter by one."""


Action = Union[
    SetObserverId,
    SetLocation,
    SetSunsetTime,
    AddEnvironmentalSnapshot,
    StartSession,
    AddBoomEvent,
    UpdateBoomEvent,
    DeleteBoomEvent,
    EndSession,
    ResetSession,
    SelectBitternId,
    IncrementBitternId,
]
