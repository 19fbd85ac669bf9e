from dataclasses import dataclass, field
from datetime import datetime, timedelta
from itertools import count
from typing import Iterable, Iterator, Sequence

from pyrsistent import pvector

from matuku.components import BoomEvent, EnvironmentalSnapshot
from matuku.state import State
from matuku.types import (
    CloudCover,
    MoonVisibility,
    NoiseLevel,
    RainPresence,
    SessionStatus,
    WindStrength,
)

SESSION_DATE = "2025-10-04"


def make_snapshot(
    timestamp: str,
    noise_level: NoiseLevel = NoiseLevel.LOW,
    wind_strength: WindStrength = WindStrength.CALM,
    moon_visibility: MoonVisibility = MoonVisibility.NOT_VISIBLE,
    cloud_cover: CloudCover = CloudCover.CLEAR,
    rain_presence: RainPresence = RainPresence.NONE,
) -> EnvironmentalSnapshot:
    return EnvironmentalSnapshot(
        timestamp=timestamp,
        noise_level=noise_level,
        wind_strength=wind_strength,
        moon_visibility=moon_visibility,
        cloud_cover=cloud_cover,
        rain_presence=rain_presence,
    )


def make_boom(
    event_id: str,
    call_timestamp: str = "19:15:00",
    *,
    boom_count: int = 1,
    compass_bearing: int = 0,
    est_distance_m: float = 100,
    bittern_id: str = "",
) -> BoomEvent:
    return BoomEvent(
        id=event_id,
        call_timestamp=call_timestamp,
        boom_count=boom_count,
        compass_bearing=compass_bearing,
        est_distance_m=est_distance_m,
        bittern_id=bittern_id,
    )


def make_state(
    *,
    status: SessionStatus = SessionStatus.SETUP,
    observer_id: str = "",
    snapshots: Sequence[EnvironmentalSnapshot] = (),
    booms: Sequence[BoomEvent] = (),
    bittern_ids: Iterable[str] = (),
    next_bittern_id: int = 1,
    last_selected_bittern_id: str = "",
    session_date: str = SESSION_DATE,
    station_lat: float = 0.0,
    station_lon: float = 0.0,
    session_start_time: str = "",
    sunset_time: str = "",
) -> State:
    """State builder; ``booms`` are given newest first, as stored."""
    return State(
        session_date=session_date,
        observer_id=observer_id,
        station_lat=station_lat,
        station_lon=station_lon,
        session_start_time=session_start_time,
        sunset_time=sunset_time,
        status=status,
        environmental_logs=pvector(snapshots),
        boom_logs=pvector(booms),
        bittern_ids=pvector(bittern_ids),
        next_bittern_id=next_bittern_id,
        last_selected_bittern_id=last_selected_bittern_id,
    )


def make_active_state(**kwargs: object) -> State:
    """An ACTIVE session with one opening snapshot at 19:00:00."""
    kwargs.setdefault("observer_id", "KM")
    kwargs.setdefault("session_start_time", "19:00:00")
    kwargs.setdefault("snapshots", [make_snapshot("19:00:00")])
    return make_state(status=SessionStatus.ACTIVE, **kwargs)  # type: ignore[arg-type]


@dataclass
class FakeClock:
    """Deterministic clock; each call advances by ``tick``."""

    now: datetime = datetime(2025, 10, 4, 19, 0, 0)
    tick: timedelta = timedelta(seconds=1)
    calls: int = 0

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.tick
        self.calls += 1
        return current

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@dataclass
class SequentialIds:
    """Predictable boom event ids: ``boom-1``, ``boom-2``, ..."""

    prefix: str = "boom-"
    _counter: Iterator[int] = field(default_factory=lambda: count(1))

    def __call__(self) -> str:
        return f"{self.prefix}{next(self._counter)}"
