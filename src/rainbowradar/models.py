"""Data model definitions — explicit boundaries between input, compute, and render layers."""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class InvalidCoordinateError(ValueError):
    """Latitude or longitude outside the valid range."""


@dataclass(frozen=True)
class QueryInput:
    """Raw user input. Not yet validated."""

    address: str  # Free-form place name ("Ben Nevis", "Reykjavik harbour")
    when: str | None = None  # "YYYY-MM-DD HH:MM" local time string; None means now


@dataclass(frozen=True)
class GeoPoint:
    """A position on the globe. Validated on construction."""

    lat: float  # Latitude (decimal degrees, [-90, 90])
    lng: float  # Longitude (decimal degrees, [-180, 180))

    def __post_init__(self) -> None:
        if not (math.isfinite(self.lat) and -90.0 <= self.lat <= 90.0):
            raise InvalidCoordinateError(f"Latitude out of range: {self.lat}")
        if not (math.isfinite(self.lng) and -180.0 <= self.lng < 180.0):
            raise InvalidCoordinateError(f"Longitude out of range: {self.lng}")


@dataclass(frozen=True)
class ObserverContext:
    """Result of geocoding + timezone conversion. Input to the evaluation pass."""

    center: GeoPoint
    utc_dt: datetime  # UTC datetime (with tzinfo=utc)
    address_display: str  # Normalized address returned by geocoder (for display)


@dataclass(frozen=True)
class SolarPosition:
    """Sun position seen from one observer at one instant."""

    elevation_deg: float  # Degrees above the horizon, [-90, 90]
    azimuth_deg: float  # Degrees from North, clockwise, [0, 360)


@dataclass(frozen=True)
class ScalarRain:
    """Rain reported as a bare rate."""

    mm_per_hour: float


@dataclass(frozen=True)
class AccumulatedRain:
    """Rain reported as the accumulation over the last hour ({"1h": x})."""

    mm_per_hour: float


RainMeasurement = ScalarRain | AccumulatedRain | None


@dataclass(frozen=True)
class WeatherSample:
    """One weather observation or forecast hour. Every field is optional."""

    rain: RainMeasurement = None
    cloud_cover_pct: float | None = None  # [0, 100]
    visibility_m: float | None = None
    condition_code: int | None = None  # OpenWeatherMap condition id (500 = light rain)


@dataclass(frozen=True)
class WeatherForecast:
    """Current conditions plus hourly samples indexed by hour offset from now."""

    current: WeatherSample
    hourly: tuple[WeatherSample, ...] = ()

    def sample_for_offset(self, hour_offset: int) -> WeatherSample:
        """Hourly sample for the offset, or the current sample if there is none."""
        if 0 <= hour_offset < len(self.hourly):
            return self.hourly[hour_offset]
        return self.current


@dataclass(frozen=True)
class RainbowFactors:
    """Individual weights of the rainbow score, each in [0, 1]."""

    delta_theta: float  # Degrees between cell bearing and antisolar azimuth, [0, 180]
    rain_rate: float  # Resolved rain rate (mm/h)
    w_azi: float
    w_sun: float
    w_rain: float
    w_cloud: float
    w_vis: float


@dataclass(frozen=True)
class GridCell:
    """A scored sample point around the observer."""

    point: GeoPoint
    bearing_deg: float  # Bearing from the center, [0, 360)
    score: float  # Rainbow probability score, [0, 1]


class EvaluationStatus(Enum):
    FAVORABLE = "favorable"
    SUN_OUT_OF_RANGE = "sun-out-of-range"
    NO_RESULTS = "no-results"


@dataclass(frozen=True)
class EvaluationResult:
    """The sole input to renderers. Fully computed state."""

    cells: tuple[GridCell, ...]
    status: EvaluationStatus
    sun: SolarPosition  # Shared by every cell of the pass
