"""Station location and sunset lookup.

Geolocation and sunset computation are external collaborators. They are
called through two narrow callables:

* ``LocateFn``: ``() -> (lat, lon)``; raises on failure, or is ``None`` when
    the platform has no geolocation at all.
* ``SunsetFn``: ``(lat, lon) -> "HH:MM"``; raises on failure.

:func:`resolve_location` never raises for collaborator failures. It folds
them into a human readable ``status`` string and falls back to the default
station coordinates (0, 0) so setup can proceed.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from matuku.types import LocateFn, SunsetFn

logger = logging.getLogger(__name__)

DEFAULT_LAT = 0.0
DEFAULT_LON = 0.0

STATUS_WAITING = "Waiting for GPS..."
STATUS_UNSUPPORTED = "Geolocation not supported"


@dataclass(frozen=True)
class LocationResult:
    """Outcome of a location + sunset lookup.

    Attributes:
        lat: Station latitude (0.0 on failure).
        lon: Station longitude (0.0 on failure).
        sunset_time: Sunset string, empty if unknown.
        status: Display status describing the outcome.
        located: True if the coordinates came from the locator.
    """

    lat: float = DEFAULT_LAT
    lon: float = DEFAULT_LON
    sunset_time: str = ""
    status: str = STATUS_WAITING
    located: bool = False


def format_fix(lat: float, lon: float) -> str:
    return f"Lat: {lat:.4f}, Lon: {lon:.4f}"


def is_location_error(status: str) -> bool:
    """True for statuses that should prompt a manual retry."""
    return status.startswith("GPS Error") or status == STATUS_UNSUPPORTED


def resolve_location(
    locate: Optional[LocateFn], sunset: Optional[SunsetFn] = None
) -> LocationResult:
    """Locate the station and look up its sunset time.

    Args:
        locate: Geolocation collaborator, or None if unavailable.
        sunset: Astronomy collaborator, or None to skip the lookup.

    Returns:
        LocationResult: Coordinates, sunset and status. Failures are reported
            in ``status``; the coordinates then stay at (0, 0).
    """
    if locate is None:
        return LocationResult(status=STATUS_UNSUPPORTED)
    try:
        lat, lon = locate()
    except Exception as exc:  # collaborator boundary: any failure becomes a status
        logger.warning("Geolocation failed: %s", exc)
        return LocationResult(status=f"GPS Error: {exc}")

    status = format_fix(lat, lon)
    sunset_time = ""
    if sunset is not None:
        try:
            sunset_time = sunset(lat, lon)
        except Exception as exc:  # collaborator boundary
            logger.warning("Sunset lookup failed at %s: %s", status, exc)
            status = f"{status} (Sunset lookup failed: {exc})"
    return LocationResult(
        lat=float(lat), lon=float(lon), sunset_time=sunset_time, status=status, located=True
    )
