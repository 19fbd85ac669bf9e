"""Session setup and lifecycle systems.

Setup fields (observer id, location, sunset) are writable only while the
session is in SETUP. Lifecycle transitions only move forward:
SETUP -> ACTIVE -> FINISHED. Anything else returns the state unchanged.
"""

import logging
from dataclasses import replace

from matuku.components import EnvironmentalSnapshot
from matuku.state import State, initial_state
from matuku.types import SessionStatus, Timestamp

logger = logging.getLogger(__name__)

_SNAPSHOT_STATUSES = (SessionStatus.SETUP, SessionStatus.ACTIVE)


def is_setup(state: State) -> bool:
    return state.status == SessionStatus.SETUP


def set_observer_id(state: State, observer_id: str) -> State:
    if not is_setup(state):
        return state
    return replace(state, observer_id=observer_id)


def set_location(state: State, lat: float, lon: float) -> State:
    if not is_setup(state):
        return state
    return replace(state, station_lat=float(lat), station_lon=float(lon))


def set_sunset_time(state: State, sunset_time: str) -> State:
    if not is_setup(state):
        return state
    return replace(state, sunset_time=sunset_time)


def add_environmental_snapshot(state: State, snapshot: EnvironmentalSnapshot) -> State:
    """Append ``snapshot``; accepted during SETUP and ACTIVE."""
    if state.status not in _SNAPSHOT_STATUSES:
        return state
    return replace(state, environmental_logs=state.environmental_logs.append(snapshot))


def start_session(state: State, started_at: Timestamp) -> State:
    """SETUP -> ACTIVE.

    Observer id validation belongs to the caller; see
    :meth:`matuku.controller.SessionController.start_session`.
    """
    if not is_setup(state):
        return state
    logger.info("Session started at %s by %r", started_at, state.observer_id)
    return replace(state, status=SessionStatus.ACTIVE, session_start_time=started_at)


def end_session(state: State) -> State:
    """ACTIVE -> FINISHED."""
    if state.status != SessionStatus.ACTIVE:
        return state
    logger.info("Session ended with %d boom events", len(state.boom_logs))
    return replace(state, status=SessionStatus.FINISHED)


def reset_session(state: State, session_date: str) -> State:
    """Return a brand new SETUP state; identity bookkeeping is reset too."""
    logger.info("Session reset (previous status %s)", state.status)
    return initial_state(session_date)
