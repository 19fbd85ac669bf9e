# tests/systems/test_session_system.py

from typing import Callable

import pytest

from matuku.state import State, initial_state
from matuku.systems.session import (
    add_environmental_snapshot,
    end_session,
    reset_session,
    set_location,
    set_observer_id,
    set_sunset_time,
    start_session,
)
from matuku.types import SessionStatus
from tests.test_utils import make_active_state, make_boom, make_snapshot, make_state


def test_setup_fields_apply_in_setup() -> None:
    state = make_state()
    state = set_observer_id(state, "KM")
    state = set_location(state, -36.8, 174.7)
    state = set_sunset_time(state, "18:42")
    assert state.observer_id == "KM"
    assert (state.station_lat, state.station_lon) == (-36.8, 174.7)
    assert state.sunset_time == "18:42"
    assert state.status == SessionStatus.SETUP


def test_set_location_stores_floats() -> None:
    state = set_location(make_state(), 1, 2)
    assert isinstance(state.station_lat, float)
    assert isinstance(state.station_lon, float)


@pytest.mark.parametrize("status", [SessionStatus.ACTIVE, SessionStatus.FINISHED])
@pytest.mark.parametrize(
    "mutate",
    [
        lambda s: set_observer_id(s, "someone else"),
        lambda s: set_location(s, 10.0, 10.0),
        lambda s: set_sunset_time(s, "20:00"),
    ],
)
def test_setup_fields_ignored_after_setup(
    status: SessionStatus, mutate: Callable[[State], State]
) -> None:
    state = make_state(status=status, observer_id="KM")
    assert mutate(state) is state


def test_snapshot_append_order() -> None:
    first = make_snapshot("19:00:00")
    second = make_snapshot("19:30:00")
    state = add_environmental_snapshot(make_state(), first)
    state = add_environmental_snapshot(state, second)
    assert list(state.environmental_logs) == [first, second]


def test_snapshot_accepted_while_active_but_not_finished() -> None:
    active = make_active_state()
    later = make_snapshot("20:00:00")
    assert add_environmental_snapshot(active, later).environmental_logs[-1] == later
    finished = make_state(status=SessionStatus.FINISHED)
    assert add_environmental_snapshot(finished, later) is finished


def test_start_session_stamps_time() -> None:
    state = start_session(make_state(observer_id="KM"), "19:02:03")
    assert state.status == SessionStatus.ACTIVE
    assert state.session_start_time == "19:02:03"


@pytest.mark.parametrize("status", [SessionStatus.ACTIVE, SessionStatus.FINISHED])
def test_start_session_only_from_setup(status: SessionStatus) -> None:
    state = make_state(status=status, session_start_time="19:00:00")
    assert start_session(state, "21:00:00") is state


def test_end_session_only_from_active() -> None:
    setup = make_state()
    assert end_session(setup) is setup
    finished = end_session(make_active_state())
    assert finished.status == SessionStatus.FINISHED
    assert end_session(finished) is finished


def test_lifecycle_never_goes_backward() -> None:
    state = make_state(observer_id="KM")
    seen = [state.status]
    for transition in (
        lambda s: start_session(s, "19:00:00"),
        end_session,
        lambda s: start_session(s, "22:00:00"),
        end_session,
    ):
        state = transition(state)
        seen.append(state.status)
    order = [SessionStatus.SETUP, SessionStatus.ACTIVE, SessionStatus.FINISHED]
    assert [order.index(s) for s in seen] == sorted(order.index(s) for s in seen)
    assert state.status == SessionStatus.FINISHED


def test_reset_session_returns_fresh_state() -> None:
    state = make_active_state(
        booms=[make_boom("a")], bittern_ids=["B1"], next_bittern_id=4
    )
    reset = reset_session(end_session(state), "2025-10-05")
    assert reset == initial_state("2025-10-05")
    assert reset.status == SessionStatus.SETUP
    assert len(reset.boom_logs) == 0
    assert reset.next_bittern_id == 1
