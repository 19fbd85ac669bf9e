"""Session persistence.

The whole :class:`matuku.state.State` is stored as one JSON blob under a
fixed key in a key-value backend. Two backends ship here:

* :class:`MemoryStorage` keeps blobs in a dict (tests, throwaway sessions).
* :class:`JsonFileStorage` writes one ``<key>.json`` file per key into a
    directory.

Any object with ``get_item`` / ``set_item`` / ``remove_item`` works; see
:class:`KeyValueStorage`.

Load contract: a missing or malformed blob yields a fresh default ``State``
instead of an error. Save errors (``OSError``) propagate to the caller, which
decides whether they matter.

Blob layout::

    {"version": 1, "state": {"session_date": "...", ..., "boom_logs": [...]}}
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol

from pyrsistent import pvector

from matuku.components import BoomEvent, EnvironmentalSnapshot
from matuku.config import FIRST_BITTERN_NUMBER, STORAGE_KEY
from matuku.state import State, initial_state
from matuku.types import (
    CloudCover,
    MoonVisibility,
    NoiseLevel,
    RainPresence,
    SessionStatus,
    WindStrength,
)

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class KeyValueStorage(Protocol):
    """Minimal string key-value backend."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """In-process storage backed by a dict."""

    def __init__(self, items: Optional[Mapping[str, str]] = None) -> None:
        self.items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class JsonFileStorage:
    """One UTF-8 ``<key>.json`` file per key inside ``directory``.

    Writes go to a temporary sibling first and are then renamed over the
    target, so a crash mid-write leaves the previous blob intact.
    """

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)

    def remove_item(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)


# --- Serialization ---


def snapshot_to_dict(snapshot: EnvironmentalSnapshot) -> Dict[str, Any]:
    return {
        "timestamp": snapshot.timestamp,
        "noise_level": snapshot.noise_level.value,
        "wind_strength": snapshot.wind_strength.value,
        "moon_visibility": snapshot.moon_visibility.value,
        "cloud_cover": snapshot.cloud_cover.value,
        "rain_presence": snapshot.rain_presence.value,
    }


def snapshot_from_dict(data: Mapping[str, Any]) -> EnvironmentalSnapshot:
    return EnvironmentalSnapshot(
        timestamp=_expect(data["timestamp"], str),
        noise_level=NoiseLevel(data["noise_level"]),
        wind_strength=WindStrength(data["wind_strength"]),
        moon_visibility=MoonVisibility(data["moon_visibility"]),
        cloud_cover=CloudCover(data["cloud_cover"]),
        rain_presence=RainPresence(data["rain_presence"]),
    )


def boom_event_to_dict(event: BoomEvent) -> Dict[str, Any]:
    return {
        "id": event.id,
        "call_timestamp": event.call_timestamp,
        "boom_count": event.boom_count,
        "compass_bearing": event.compass_bearing,
        "est_distance_m": event.est_distance_m,
        "bittern_id": event.bittern_id,
    }


def boom_event_from_dict(data: Mapping[str, Any]) -> BoomEvent:
    return BoomEvent(
        id=_expect(data["id"], str),
        call_timestamp=_expect(data["call_timestamp"], str),
        boom_count=_expect(data["boom_count"], int),
        compass_bearing=_expect(data["compass_bearing"], int),
        est_distance_m=_expect(data["est_distance_m"], (int, float)),
        bittern_id=_expect(data["bittern_id"], str),
    )


def state_to_dict(state: State) -> Dict[str, Any]:
    """JSON-ready dict of every persisted ``State`` field."""
    return {
        "session_date": state.session_date,
        "observer_id": state.observer_id,
        "station_lat": state.station_lat,
        "station_lon": state.station_lon,
        "session_start_time": state.session_start_time,
        "sunset_time": state.sunset_time,
        "status": state.status.value,
        "environmental_logs": [snapshot_to_dict(s) for s in state.environmental_logs],
        "boom_logs": [boom_event_to_dict(e) for e in state.boom_logs],
        "bittern_ids": list(state.bittern_ids),
        "next_bittern_id": state.next_bittern_id,
        "last_selected_bittern_id": state.last_selected_bittern_id,
    }


def state_from_dict(data: Mapping[str, Any]) -> State:
    """Inverse of :func:`state_to_dict`.

    Identity fields are optional so blobs written before identity tracking
    still load.

    Raises:
        KeyError: A required field is missing.
        TypeError: A field has the wrong JSON type.
        ValueError: An enumerated field holds an unknown label.
    """
    bittern_ids = data.get("bittern_ids", [])
    return State(
        session_date=_expect(data["session_date"], str),
        observer_id=_expect(data["observer_id"], str),
        station_lat=float(_expect(data["station_lat"], (int, float))),
        station_lon=float(_expect(data["station_lon"], (int, float))),
        session_start_time=_expect(data["session_start_time"], str),
        sunset_time=_expect(data["sunset_time"], str),
        status=SessionStatus(data["status"]),
        environmental_logs=pvector(
            snapshot_from_dict(s) for s in _expect(data["environmental_logs"], list)
        ),
        boom_logs=pvector(
            boom_event_from_dict(e) for e in _expect(data["boom_logs"], list)
        ),
        bittern_ids=pvector(_expect(i, str) for i in _expect(bittern_ids, list)),
        next_bittern_id=_expect(
            data.get("next_bittern_id", FIRST_BITTERN_NUMBER), int
        ),
        last_selected_bittern_id=_expect(data.get("last_selected_bittern_id", ""), str),
    )


def _expect(value: Any, typ: type | tuple[type, ...]) -> Any:
    # bool is an int subclass but never a valid number here
    if isinstance(value, bool) or not isinstance(value, typ):
        raise TypeError(f"Expected {typ}, got {type(value).__name__}")
    return value


# --- Storage round trip ---


def dumps_state(state: State) -> str:
    return json.dumps({"version": SCHEMA_VERSION, "state": state_to_dict(state)})


def loads_state(raw: str) -> State:
    envelope = _expect(json.loads(raw), dict)
    return state_from_dict(_expect(envelope["state"], dict))


def save_state(
    storage: KeyValueStorage, state: State, key: str = STORAGE_KEY
) -> None:
    """Write ``state`` under ``key``. Backend errors propagate."""
    storage.set_item(key, dumps_state(state))


def load_state(
    storage: KeyValueStorage,
    key: str = STORAGE_KEY,
    session_date: Optional[str] = None,
) -> State:
    """Read the state stored under ``key``.

    Args:
        storage: Backend to read from.
        key: Storage key.
        session_date: Date for the default state built when nothing usable
            is stored (defaults to today).

    Returns:
        State: The stored state, or a fresh SETUP state if the blob is absent,
            unreadable or malformed.
    """
    try:
        raw = storage.get_item(key)
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read %r, starting fresh: %s", key, exc)
        return initial_state(session_date)
    if raw is None:
        return initial_state(session_date)
    try:
        return loads_state(raw)
    except (KeyError, TypeError, ValueError) as exc:
        # json.JSONDecodeError is a ValueError
        logger.warning("Stored session %r is malformed, starting fresh: %s", key, exc)
        return initial_state(session_date)


def clear_state(storage: KeyValueStorage, key: str = STORAGE_KEY) -> None:
    storage.remove_item(key)
