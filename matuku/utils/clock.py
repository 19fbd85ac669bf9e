"""Local clock formatting helpers.

Timestamps are zero-padded 24-hour ``HH:MM:SS`` strings, so string order and
chronological order agree within a single calendar day.
"""

from datetime import date, datetime
from typing import Callable, Optional

Clock = Callable[[], datetime]

TIME_FORMAT = "%H:%M:%S"


def local_now() -> datetime:
    """Return the current local wall-clock time."""
    return datetime.now()


def time_str(moment: datetime) -> str:
    """Format ``moment`` as ``HH:MM:SS``."""
    return moment.strftime(TIME_FORMAT)


def date_str(day: date) -> str:
    """Format ``day`` as ISO ``YYYY-MM-DD``."""
    return day.isoformat()


def today_str(clock: Optional[Clock] = None) -> str:
    """Return the ISO date of ``clock()`` (defaults to the local clock)."""
    return date_str((clock or local_now)().date())

