# tests/integration/test_step_integration.py

import logging

import pytest

from matuku.actions import (
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
from matuku.components import BoomEventPatch
from matuku.export import generate_csv
from matuku.state import initial_state
from matuku.step import step, step_all
from matuku.types import SessionStatus
from tests.test_utils import make_boom, make_snapshot


def _full_session():
    state = initial_state("2025-10-04")
    return step_all(
        state,
        SetObserverId("KM"),
        SetLocation(-36.8485, 174.7633),
        SetSunsetTime("18:42"),
        AddEnvironmentalSnapshot(make_snapshot("19:00:00")),
        StartSession("19:00:05"),
        SelectBitternId("B1"),
        AddBoomEvent(make_boom("a", "19:10:00", bittern_id="B1")),
        AddBoomEvent(make_boom("b", "19:12:00", bittern_id="B1")),
        UpdateBoomEvent("b", BoomEventPatch(compass_bearing=40, bittern_id="B2")),
        SelectBitternId("B2"),
        IncrementBitternId(),
        AddBoomEvent(make_boom("c", "19:20:00")),
        DeleteBoomEvent("c"),
    )


def test_full_session_flow() -> None:
    state = _full_session()
    assert state.status == SessionStatus.ACTIVE
    assert state.observer_id == "KM"
    assert state.session_start_time == "19:00:05"
    assert [e.id for e in state.boom_logs] == ["b", "a"]
    assert state.boom_logs[0].compass_bearing == 40
    assert list(state.bittern_ids) == ["B1", "B2"]
    assert state.last_selected_bittern_id == "B2"
    assert state.next_bittern_id == 2


def test_setup_actions_ignored_once_active() -> None:
    state = _full_session()
    assert step(state, SetObserverId("someone")) is state
    assert step(state, StartSession("21:00:00")) is state


def test_end_then_reset() -> None:
    finished = step(_full_session(), EndSession())
    assert finished.status == SessionStatus.FINISHED
    assert step(finished, EndSession()) is finished
    fresh = step(finished, ResetSession("2025-10-05"))
    assert fresh == initial_state("2025-10-05")


def test_reset_then_start_keeps_setup_until_observer_set() -> None:
    fresh = step(step(_full_session(), EndSession()), ResetSession("2025-10-05"))
    assert fresh.observer_id == ""
    started = step_all(fresh, SetObserverId("KM"), StartSession("19:00:00"))
    assert started.status == SessionStatus.ACTIVE


def test_export_row_count_matches_events() -> None:
    state = _full_session()
    assert len(generate_csv(state).split("\n")) - 1 == len(state.boom_logs)


def test_unknown_action_raises() -> None:
    with pytest.raises(ValueError):
        step(initial_state("2025-10-04"), "START")  # type: ignore[arg-type]


def test_step_all_without_actions_returns_input() -> None:
    state = initial_state("2025-10-04")
    assert step_all(state) is state


@pytest.mark.parametrize(
    "action",
    [
        DeleteBoomEvent("missing"),
        UpdateBoomEvent("missing", BoomEventPatch(boom_count=2)),
        EndSession(),
    ],
)
def test_noop_actions_are_logged(
    action: object, caplog: pytest.LogCaptureFixture
) -> None:
    state = initial_state("2025-10-04")
    with caplog.at_level(logging.DEBUG, logger="matuku.step"):
        assert step(state, action) is state  # type: ignore[arg-type]
    assert f"{type(action).__name__} had no effect" in caplog.text
