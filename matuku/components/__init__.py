"""matuku.components
=================

Immutable value objects stored on :class:`matuku.state.State`.

Records are plain frozen ``@dataclass`` instances with no behavior beyond
their fields; transitions live in :mod:`matuku.systems`. Import them from
here::

    from matuku.components import BoomEvent, BoomEventPatch, EnvironmentalSnapshot
"""

from .boom import BoomEvent
from .environment import EnvironmentalSnapshot
from .patch import BoomEventPatch

__all__ = [
    "BoomEvent",
    "BoomEventPatch",
    "EnvironmentalSnapshot",
]
