"""Core immutable session ``State`` dataclass.

This module defines the frozen :class:`State` object holding everything a
field session records: the session metadata, the environmental snapshot
sequence, the boom event sequence and the bittern identity bookkeeping. All
transitions are pure functions that take a previous ``State`` plus an action
and return a *new* ``State``; nothing is mutated in place. The
:class:`matuku.controller.SessionController` owns the current value.

Design notes:

* Sequences are **persistent vectors** (``pyrsistent.PVector``). ``boom_logs``
    is kept newest first; ``environmental_logs`` in append order.
* ``status`` only moves SETUP -> ACTIVE -> FINISHED. Going back means building
    a fresh ``State`` via :func:`initial_state`.
* The identity fields (``bittern_ids``, ``next_bittern_id``,
    ``last_selected_bittern_id``) are persisted next to the session data so a
    reload keeps the sticky default.

See :mod:`matuku.step` for how actions are dispatched onto this structure.
"""

from dataclasses import dataclass
from typing import Any, Optional

from pyrsistent import PVector, pmap, pvector
from pyrsistent.typing import PMap

from matuku.components import BoomEvent, EnvironmentalSnapshot
from matuku.config import FIRST_BITTERN_NUMBER
from matuku.types import BoomEventID, SessionStatus
from matuku.utils.clock import today_str


@dataclass(frozen=True)
class State:
    """Immutable session state.

    Instances are *value objects*; every transition creates a new ``State``.
    Only persistent, serializable data belongs here. Transient editor values
    (the identity being typed, the open form) stay with the caller.

    Attributes:
        session_date (str): Session date, ``YYYY-MM-DD``.
        observer_id (str): Observer name / code. May be empty only in SETUP.
        station_lat (float): Station latitude in decimal degrees.
        station_lon (float): Station longitude in decimal degrees.
        session_start_time (str): ``HH:MM:SS`` stamp set when the session starts.
        sunset_time (str): Sunset as reported by the astronomy collaborator.
        status (SessionStatus): Lifecycle phase.
        environmental_logs (PVector[EnvironmentalSnapshot]): Snapshots in append order.
        boom_logs (PVector[BoomEvent]): Boom events, newest first.
        bittern_ids (PVector[str]): Registry of selected identities in append order.
        next_bittern_id (int): Running counter used when generating ``B<n>`` ids.
        last_selected_bittern_id (str): Sticky default identity ("" if none).
    """

    session_date: str
    observer_id: str = ""
    station_lat: float = 0.0
    station_lon: float = 0.0
    session_start_time: str = ""
    sunset_time: str = ""
    status: SessionStatus = SessionStatus.SETUP

    environmental_logs: PVector[EnvironmentalSnapshot] = pvector()
    boom_logs: PVector[BoomEvent] = pvector()

    # Identity tracking
    bittern_ids: PVector[str] = pvector()
    next_bittern_id: int = FIRST_BITTERN_NUMBER
    last_selected_bittern_id: str = ""

    def find_boom_event(self, event_id: BoomEventID) -> Optional[BoomEvent]:
        """Return the event with ``event_id`` or None."""
        return next((e for e in self.boom_logs if e.id == event_id), None)

    @property
    def description(self) -> PMap[str, Any]:
        """Sparse view of the populated fields.

        Empty sequences and empty strings are skipped. Useful for log lines
        and debugging without dumping every default.

        Returns:
            PMap[str, Any]: Persistent map of field name to value.
        """
        description: PMap[str, Any] = pmap()
        for field in self.__dataclass_fields__:
            value = getattr(self, field)
            if isinstance(value, (str, type(pvector()))) and len(value) == 0:
                continue
            description = description.set(field, value)
        return description


def initial_state(session_date: Optional[str] = None) -> State:
    """Return a fresh SETUP ``State`` dated ``session_date`` (default: today)."""
    return State(session_date=session_date if session_date is not None else today_str())
