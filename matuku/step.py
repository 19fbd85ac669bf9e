"""State reducer.

This module routes a single action to the system that implements it. The
exported :func:`step` is the only mutation entry point for a session and is
pure: it returns a *new* :class:`matuku.state.State`, or the
very same object when the action does not apply in the current status.

Status gating (high level):

1. Setup actions (observer id, location, sunset) apply only in SETUP.
2. Environmental snapshots apply in SETUP and ACTIVE.
3. ``StartSession`` needs SETUP; ``EndSession`` needs ACTIVE.
4. Boom event and identity actions apply in every status.
5. ``ResetSession`` always applies and yields a fresh SETUP state.
"""

import logging

from matuku.actions import (
    Action,
    AddBoomEvent,
    AddEnvironmentalSnapshot,
    DeleteBoomEvent,
    EndSession,
    IncrementBitternId,
    ResetSession,
    SelectBitternId,
    SetLocation,
    SetObserverId,
    SetSunsetTime,
    StartSession,
    UpdateBoomEvent,
)
from matuku.state import State
from matuku.systems.boom import add_boom_event, delete_boom_event, update_boom_event
from matuku.systems.identity import increment_bittern_id, select_bittern_id
from matuku.systems.session import (
    add_environmental_snapshot,
    end_session,
    reset_session,
    set_location,
    set_observer_id,
    set_sunset_time,
    start_session,
)

logger = logging.getLogger(__name__)


def step(state: State, action: Action) -> State:
    """Apply one action.

    Args:
        state (State): Previous immutable session state.
        action (Action): Action dataclass instance from :mod:`matuku.actions`.

    Returns:
        State: Next state. The input object is returned unchanged when the
            action is not legal in ``state.status`` or refers to an unknown
            boom event.

    Raises:
        ValueError: If ``action`` is not a recognized action.
    """
    next_state = _dispatch(state, action)
    if next_state is state:
        logger.debug("%s had no effect", type(action).__name__)
    return next_state


def _dispatch(state: State, action: Action) -> State:
    if isinstance(action, SetObserverId):
        return set_observer_id(state, action.observer_id)
    if isinstance(action, SetLocation):
        return set_location(state, action.lat, action.lon)
    if isinstance(action, SetSunsetTime):
        return set_sunset_time(state, action.sunset_time)
    if isinstance(action, AddEnvironmentalSnapshot):
        return add_environmental_snapshot(state, action.snapshot)
    if isinstance(action, StartSession):
        return start_session(state, action.started_at)
    if isinstance(action, AddBoomEvent):
        return add_boom_event(state, action.event)
    if isinstance(action, UpdateBoomEvent):
        return update_boom_event(state, action.event_id, action.patch)
    if isinstance(action, DeleteBoomEvent):
        return delete_boom_event(state, action.event_id)
    if isinstance(action, EndSession):
        return end_session(state)
    if isinstance(action, ResetSession):
        return reset_session(state, action.session_date)
    if isinstance(action, SelectBitternId):
        return select_bittern_id(state, action.bittern_id)
    if isinstance(action, IncrementBitternId):
        return increment_bittern_id(state)
    raise ValueError("Action is not valid")


def step_all(state: State, *actions: Action) -> State:
    """Fold ``actions`` over ``state`` in order."""
    for action in actions:
        state = step(state, action)
    return state
