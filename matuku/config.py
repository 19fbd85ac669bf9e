"""Package-wide defaults.

Values here mirror what the field form pre-fills and what the storage layer
keys on. ``LogDefaults`` is injected into :class:`matuku.controller.SessionController`
so tests can pin alternative defaults.
"""

from dataclasses import dataclass

STORAGE_KEY = "matuku-session-storage"
"""Key under which the whole session blob is persisted."""

BEARING_STEP = 10
"""Compass grid resolution in degrees."""

BITTERN_ID_PREFIX = "B"

FIRST_BITTERN_NUMBER = 1

EXPORT_FILENAME_PREFIX = "matuku_session_"


@dataclass(frozen=True)
class LogDefaults:
    """Field values given to a freshly logged boom event.

    Attributes:
        boom_count: Booms heard in the call.
        compass_bearing: Initial bearing in degrees (on the grid).
        est_distance_m: Initial distance estimate in metres.
    """

    boom_count: int = 1
    compass_bearing: int = 0
    est_distance_m: float = 100
