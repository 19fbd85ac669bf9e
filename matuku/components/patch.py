"""Partial update for :class:`matuku.components.BoomEvent`.

Every field is optional; ``None`` means "leave unchanged". The event ``id``
is not a field, so a patch never re-keys an event.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

from matuku.components.boom import BoomEvent
from matuku.types import Timestamp


@dataclass(frozen=True)
class BoomEventPatch:
    """Explicit optional-field patch.

    Attributes:
        call_timestamp: New call time, or None.
        boom_count: New boom count, or None.
        compass_bearing: New bearing, or None.
        est_distance_m: New distance, or None.
        bittern_id: New identity, or None. An empty string clears the identity.
    """

    call_timestamp: Optional[Timestamp] = None
    boom_count: Optional[int] = None
    compass_bearing: Optional[int] = None
    est_distance_m: Optional[float] = None
    bittern_id: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        """Return only the fields this patch sets."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def is_empty(self) -> bool:
        return not self.changes()

    def apply(self, event: BoomEvent) -> BoomEvent:
        """Return ``event`` with the set fields replaced."""
        changes = self.changes()
        if not changes:
            return event
        return replace(event, **changes)
