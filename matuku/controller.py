"""Session controller.

``SessionController`` is the single writer of a field session. It owns the
current :class:`matuku.state.State`, turns user intents into actions (adding
clock stamps, UUIDs and defaults), runs them through :func:`matuku.step.step`
and persists the result after every change.

Persistence is fire-and-forget: a failing write is logged and the in-memory
state keeps moving. Nothing here raises for collaborator, storage or
unknown-id problems; outcomes are reported as return values.

Examples
--------
>>> from matuku.controller import SessionController
>>> from matuku.persistence import MemoryStorage
>>> session = SessionController(storage=MemoryStorage())
>>> session.set_observer_id("KM")
>>> session.start_session()
<StartStatus.STARTED: 'STARTED'>
>>> event = session.log_boom()
"""

import logging
import uuid
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from matuku.actions import (
    Action,
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
from matuku.bearing import clamp_bearing_input
from matuku.components import BoomEvent, BoomEventPatch, EnvironmentalSnapshot
from matuku.config import STORAGE_KEY, LogDefaults
from matuku.export import export_filename, generate_csv
from matuku.identity import (
    default_bittern_id,
    known_bittern_ids,
    merge_and_sort,
    next_bittern_id,
)
from matuku.location import LocationResult, resolve_location
from matuku.persistence import KeyValueStorage, load_state, save_state
from matuku.state import State, initial_state
from matuku.step import step
from matuku.types import (
    BoomEventID,
    LocateFn,
    SessionStatus,
    StartStatus,
    SunsetFn,
)
from matuku.utils.clock import Clock, local_now, time_str, today_str

logger = logging.getLogger(__name__)


def new_event_id() -> BoomEventID:
    return str(uuid.uuid4())


def normalize_patch(patch: BoomEventPatch) -> BoomEventPatch:
    """Pull the numeric fields of ``patch`` back into their valid ranges.

    ``boom_count`` is at least 1, ``compass_bearing`` is clamped and snapped
    like typed dial input, and ``est_distance_m`` is at least 0.
    """
    changes: Dict[str, Any] = {}
    if patch.boom_count is not None:
        changes["boom_count"] = max(1, int(patch.boom_count))
    if patch.compass_bearing is not None:
        changes["compass_bearing"] = clamp_bearing_input(patch.compass_bearing)
    if patch.est_distance_m is not None:
        changes["est_distance_m"] = max(0, patch.est_distance_m)
    return replace(patch, **changes)


class SessionController:
    """Owner of the current session state.

    Args:
        storage: Key-value backend to load from and persist to. ``None`` keeps
            the session in memory only.
        key: Storage key for the session blob.
        clock: Zero-arg callable returning the current local ``datetime``.
        defaults: Field values for freshly logged boom events.
        id_factory: Zero-arg callable producing unique boom event ids.
        state: Explicit starting state; skips loading from ``storage``.
    """

    def __init__(
        self,
        storage: Optional[KeyValueStorage] = None,
        key: str = STORAGE_KEY,
        clock: Clock = local_now,
        defaults: LogDefaults = LogDefaults(),
        id_factory: Callable[[], BoomEventID] = new_event_id,
        state: Optional[State] = None,
    ) -> None:
        self.storage = storage
        self.key = key
        self.clock = clock
        self.defaults = defaults
        self.id_factory = id_factory
        if state is None:
            today = today_str(clock)
            state = (
                load_state(storage, key, session_date=today)
                if storage is not None
                else initial_state(today)
            )
            logger.debug("Session opened: %s", dict(state.description))
        self._state = state

    @property
    def state(self) -> State:
        return self._state

    @property
    def status(self) -> SessionStatus:
        return self._state.status

    def dispatch(self, action: Action) -> State:
        """Apply ``action`` and persist if anything changed."""
        next_state = step(self._state, action)
        if next_state is not self._state:
            self._state = next_state
            self._persist()
        return self._state

    def _persist(self) -> None:
        if self.storage is None:
            return
        try:
            save_state(self.storage, self._state, self.key)
        except OSError as exc:
            logger.warning("Could not persist session to %r: %s", self.key, exc)

    def _now(self) -> str:
        return time_str(self.clock())

    # -------- Setup --------

    def set_observer_id(self, observer_id: str) -> None:
        self.dispatch(SetObserverId(observer_id))

    def set_location(self, lat: float, lon: float) -> None:
        self.dispatch(SetLocation(lat, lon))

    def set_sunset_time(self, sunset_time: str) -> None:
        self.dispatch(SetSunsetTime(sunset_time))

    def locate(
        self, locate: Optional[LocateFn], sunset: Optional[SunsetFn] = None
    ) -> LocationResult:
        """Run the location collaborators and store whatever they produced.

        Returns the :class:`LocationResult` so the caller can show its status.
        Failed lookups leave the station at (0, 0).
        """
        result = resolve_location(locate, sunset)
        if result.located:
            self.set_location(result.lat, result.lon)
        if result.sunset_time:
            self.set_sunset_time(result.sunset_time)
        return result

    def record_conditions(self, **conditions: Any) -> Optional[EnvironmentalSnapshot]:
        """Append an environmental snapshot stamped with the current time.

        ``conditions`` are :class:`EnvironmentalSnapshot` fields other than
        ``timestamp``, as enum members or label strings; omitted ones take the
        setup form defaults.

        Returns:
            Optional[EnvironmentalSnapshot]: The recorded snapshot, or None if
                a label is outside its closed set (nothing is recorded).
        """
        snapshot = self._snapshot(conditions)
        if snapshot is not None:
            self.dispatch(AddEnvironmentalSnapshot(snapshot))
        return snapshot

    def _snapshot(self, conditions: Dict[str, Any]) -> Optional[EnvironmentalSnapshot]:
        try:
            return EnvironmentalSnapshot(timestamp=self._now(), **conditions)
        except ValueError as exc:
            logger.warning("Rejected environmental conditions %r: %s", conditions, exc)
            return None

    # -------- Lifecycle --------

    def start_session(self, **conditions: Any) -> StartStatus:
        """Validate, record the opening conditions and go ACTIVE.

        Args:
            **conditions: Opening environmental conditions, as for
                :meth:`record_conditions`.

        Returns:
            StartStatus: ``STARTED`` on success. Otherwise the state is left
                untouched and the status says why: ``NOT_IN_SETUP`` if the
                session already started, ``MISSING_OBSERVER_ID`` for a blank
                observer id, ``INVALID_CONDITIONS`` for an unknown label.
        """
        if self._state.status != SessionStatus.SETUP:
            return StartStatus.NOT_IN_SETUP
        if not self._state.observer_id.strip():
            logger.info("Start refused: observer id is empty")
            return StartStatus.MISSING_OBSERVER_ID
        snapshot = self._snapshot(conditions)
        if snapshot is None:
            return StartStatus.INVALID_CONDITIONS
        self.dispatch(AddEnvironmentalSnapshot(snapshot))
        self.dispatch(StartSession(started_at=self._now()))
        return StartStatus.STARTED

    def end_session(self) -> None:
        self.dispatch(EndSession())

    def reset_session(self) -> None:
        """Throw the session away and begin a new SETUP dated today."""
        self.dispatch(ResetSession(session_date=today_str(self.clock)))

    # -------- Boom events --------

    def log_boom(self) -> BoomEvent:
        """Log a call heard now, attributed to the sticky default identity.

        Returns the new event so the caller can open it for editing.
        """
        bittern_id = default_bittern_id(self._state)
        self.select_bittern_id(bittern_id)
        defaults = normalize_patch(
            BoomEventPatch(
                boom_count=self.defaults.boom_count,
                compass_bearing=self.defaults.compass_bearing,
                est_distance_m=self.defaults.est_distance_m,
                bittern_id=bittern_id,
            )
        )
        event = defaults.apply(
            BoomEvent(id=self.id_factory(), call_timestamp=self._now())
        )
        self.dispatch(AddBoomEvent(event))
        return event

    def update_boom(self, event_id: BoomEventID, patch: BoomEventPatch) -> None:
        """Apply ``patch`` after :func:`normalize_patch`.

        A non-blank identity in it becomes the sticky default.
        """
        patch = normalize_patch(patch)
        self.dispatch(UpdateBoomEvent(event_id, patch))
        if patch.bittern_id:
            self.select_bittern_id(patch.bittern_id)

    def delete_boom(self, event_id: BoomEventID) -> None:
        self.dispatch(DeleteBoomEvent(event_id))

    # -------- Identities --------

    def select_bittern_id(self, bittern_id: str) -> None:
        self.dispatch(SelectBitternId(bittern_id))

    def new_bittern_id(self) -> str:
        """Mint, select and return a fresh ``B<n>`` identity."""
        bittern_id = next_bittern_id(self._state)
        self.select_bittern_id(bittern_id)
        self.dispatch(IncrementBitternId())
        return bittern_id

    def available_bittern_ids(self, edit_value: str = "") -> List[str]:
        """Identities to offer in the picker, numerically ordered."""
        return merge_and_sort(known_bittern_ids(self._state), edit_value)

    # -------- Export --------

    def export_csv(self) -> Tuple[str, str]:
        """Return ``(filename, csv_text)`` for the current state."""
        return export_filename(self.clock().date()), generate_csv(self._state)

    def write_export(self, directory: str | Path) -> Path:
        """Write the CSV into ``directory`` and return its path.

        Raises:
            OSError: If the file cannot be written.
        """
        filename, text = self.export_csv()
        path = Path(directory) / filename
        path.write_text(text, encoding="utf-8")
        logger.info("Exported %d boom events to %s", len(self._state.boom_logs), path)
        return path

    def export_and_end(self, directory: str | Path) -> Path:
        """Write the export, then finish the session."""
        path = self.write_export(directory)
        self.end_session()
        return path
