# tests/systems/test_identity_system.py

import pytest

from matuku.systems.identity import increment_bittern_id, select_bittern_id
from tests.test_utils import make_active_state


def test_select_registers_and_becomes_sticky() -> None:
    state = select_bittern_id(make_active_state(), "B1")
    assert list(state.bittern_ids) == ["B1"]
    assert state.last_selected_bittern_id == "B1"


def test_select_existing_does_not_duplicate() -> None:
    state = make_active_state(bittern_ids=["B1", "B2"], last_selected_bittern_id="B2")
    state = select_bittern_id(state, "B1")
    assert list(state.bittern_ids) == ["B1", "B2"]
    assert state.last_selected_bittern_id == "B1"


def test_select_trims_whitespace() -> None:
    state = select_bittern_id(make_active_state(), "  B3 ")
    assert state.last_selected_bittern_id == "B3"
    assert list(state.bittern_ids) == ["B3"]


@pytest.mark.parametrize("blank", ["", "   "])
def test_select_blank_is_noop(blank: str) -> None:
    state = make_active_state(last_selected_bittern_id="B1", bittern_ids=["B1"])
    assert select_bittern_id(state, blank) is state


def test_select_current_again_is_noop() -> None:
    state = make_active_state(last_selected_bittern_id="B1", bittern_ids=["B1"])
    assert select_bittern_id(state, "B1") is state


def test_increment_counter() -> None:
    state = increment_bittern_id(increment_bittern_id(make_active_state()))
    assert state.next_bittern_id == 3
