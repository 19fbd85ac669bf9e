"""Boom event systems.

Add prepends (newest first). Update applies a :class:`BoomEventPatch` to the
matching event and never touches its id. Update and delete on an unknown id
return the state unchanged, so deleting twice is harmless.
"""

from dataclasses import replace
from typing import Optional

from pyrsistent import pvector

from matuku.components import BoomEvent, BoomEventPatch
from matuku.state import State
from matuku.types import BoomEventID


def add_boom_event(state: State, event: BoomEvent) -> State:
    return replace(state, boom_logs=pvector([event]) + state.boom_logs)


def _index_of(state: State, event_id: BoomEventID) -> Optional[int]:
    return next(
        (i for i, event in enumerate(state.boom_logs) if event.id == event_id), None
    )


def update_boom_event(
    state: State, event_id: BoomEventID, patch: BoomEventPatch
) -> State:
    """Apply ``patch`` to the event with ``event_id`` (no-op if absent)."""
    index = _index_of(state, event_id)
    if index is None or patch.is_empty():
        return state
    updated = patch.apply(state.boom_logs[index])
    return replace(state, boom_logs=state.boom_logs.set(index, updated))


def delete_boom_event(state: State, event_id: BoomEventID) -> State:
    """Remove the event with ``event_id`` (no-op if absent)."""
    index = _index_of(state, event_id)
    if index is None:
        return state
    return replace(state, boom_logs=state.boom_logs.delete(index))
