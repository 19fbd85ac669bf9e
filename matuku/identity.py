"""Bittern identity resolution.

Observers label individual birds with short codes (``B1``, ``B2``, ...). The
helpers here merge the known codes into a display list, pick the sticky
default for the next log entry and mint fresh codes that never collide with
ones typed by hand.

Ordering is numeric on the digits embedded in each code, so ``B10`` sorts
after ``B2``. Codes without digits count as 0.
"""

import re
from typing import Iterable, List, Optional, Sequence

from matuku.config import BITTERN_ID_PREFIX, FIRST_BITTERN_NUMBER
from matuku.state import State

_NON_DIGITS = re.compile(r"\D")
_GENERATED_ID = re.compile(r"B(\d+)", re.IGNORECASE)


def identity_number(identifier: str) -> int:
    """Return the integer formed by the digits of ``identifier`` (0 if none)."""
    digits = _NON_DIGITS.sub("", identifier)
    return int(digits) if digits else 0


def resolve_default(
    last_selected: Optional[str], known_ids: Sequence[str], next_counter: int
) -> str:
    """Identity offered for the next log entry.

    Precedence: the sticky selection, then the most recently registered id,
    then a fresh ``B<n>`` built from the counter (never below ``B1``).
    """
    if last_selected:
        return last_selected
    if known_ids:
        return known_ids[-1]
    return f"{BITTERN_ID_PREFIX}{max(FIRST_BITTERN_NUMBER, next_counter)}"


def merge_and_sort(
    known_ids: Iterable[str], current_edit_value: Optional[str] = None
) -> List[str]:
    """Known ids plus the value being edited, deduplicated and numerically sorted.

    Blank values are dropped. Ties keep first-seen order.
    """
    candidates = [*known_ids, current_edit_value or ""]
    merged = dict.fromkeys(c for c in candidates if c.strip())
    return sorted(merged, key=identity_number)


def generate_next(known_ids: Iterable[str], next_counter: int) -> str:
    """Mint a ``B<n>`` code above every existing ``B<n>`` and the counter."""
    highest = 0
    for identifier in known_ids:
        match = _GENERATED_ID.search(identifier)
        if match:
            highest = max(highest, int(match.group(1)))
    return f"{BITTERN_ID_PREFIX}{max(highest + 1, next_counter)}"


def known_bittern_ids(state: State) -> List[str]:
    """Registered ids followed by any others seen on boom events.

    Boom events are scanned oldest first so the result stays in the order
    identities first appeared.
    """
    seen = [*state.bittern_ids, *(e.bittern_id for e in reversed(state.boom_logs))]
    return list(dict.fromkeys(i for i in seen if i.strip()))


def default_bittern_id(state: State) -> str:
    """:func:`resolve_default` applied to ``state``."""
    return resolve_default(
        state.last_selected_bittern_id, state.bittern_ids, state.next_bittern_id
    )


def next_bittern_id(state: State) -> str:
    """:func:`generate_next` applied to ``state``."""
    return generate_next(known_bittern_ids(state), state.next_bittern_id)
