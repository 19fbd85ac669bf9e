"""Bittern identity bookkeeping systems.

Selecting (or typing) a non-blank identity makes it the sticky default and
registers it, once, in ``State.bittern_ids``. The ``B<n>`` counter only moves
forward.
"""

from dataclasses import replace

from matuku.state import State


def select_bittern_id(state: State, bittern_id: str) -> State:
    """Register ``bittern_id`` as the sticky default.

    Whitespace is trimmed; blank values leave the state unchanged.
    """
    bittern_id = bittern_id.strip()
    if not bittern_id:
        return state
    bittern_ids = state.bittern_ids
    if bittern_id not in bittern_ids:
        bittern_ids = bittern_ids.append(bittern_id)
    if (
        bittern_ids is state.bittern_ids
        and state.last_selected_bittern_id == bittern_id
    ):
        return state
    return replace(
        state, bittern_ids=bittern_ids, last_selected_bittern_id=bittern_id
    )


def increment_bittern_id(state: State) -> State:
    return replace(state, next_bittern_id=state.next_bittern_id + 1)
