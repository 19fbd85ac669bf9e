"""Environmental snapshot component.

One recorded set of ambient conditions. Snapshots are appended to
``State.environmental_logs`` and never edited afterwards; the CSV export joins
each boom event to the latest snapshot taken at or before its call time.
"""

from dataclasses import dataclass

from matuku.types import (
    CloudCover,
    MoonVisibility,
    NoiseLevel,
    RainPresence,
    Timestamp,
    WindStrength,
)


@dataclass(frozen=True)
class EnvironmentalSnapshot:
    """Ambient conditions at a point in time.

    Defaults match the setup form's initial selection. Condition fields
    accept their enum member or its label string.

    Attributes:
        timestamp: Local time the snapshot was taken (``HH:MM:SS``).
        noise_level: Background noise.
        wind_strength: Wind.
        moon_visibility: Whether the moon is visible.
        cloud_cover: Cloud cover band.
        rain_presence: Rain.
    """

    timestamp: Timestamp
    noise_level: NoiseLevel = NoiseLevel.LOW
    wind_strength: WindStrength = WindStrength.CALM
    moon_visibility: MoonVisibility = MoonVisibility.NOT_VISIBLE
    cloud_cover: CloudCover = CloudCover.CLEAR
    rain_presence: RainPresence = RainPresence.NONE

    def __post_init__(self) -> None:
        # Labels may arrive as plain strings; unknown ones raise ValueError.
        object.__setattr__(self, "noise_level", NoiseLevel(self.noise_level))
        object.__setattr__(self, "wind_strength", WindStrength(self.wind_strength))
        object.__setattr__(
            self, "moon_visibility", MoonVisibility(self.moon_visibility)
        )
        object.__setattr__(self, "cloud_cover", CloudCover(self.cloud_cover))
        object.__setattr__(self, "rain_presence", RainPresence(self.rain_presence))
