"""Rainbow probability score — a multi-factor heuristic, not an optical model.

A primary bow is centred on the antisolar point with a 42° radius, so it can
only stand above the horizon while the sun is between 0° and 42° elevation.
Inside that band the score is a weighted geometric mean of five weights:

    score = w_azi^0.4 · w_sun^0.8 · w_rain^1.2 · w_cloud^0.6 · w_vis^0.4
"""

import math

from rainbowradar.geo import angular_difference, bearing_degrees
from rainbowradar.models import (
    AccumulatedRain,
    GeoPoint,
    RainbowFactors,
    ScalarRain,
    SolarPosition,
    WeatherSample,
)
from rainbowradar.sun import antisolar_azimuth

RAINBOW_ANGLE_DEG = 42.0
AZIMUTH_SIGMA_DEG = 18.0
SATURATING_RAIN_MM_H = 2.0

# Stand-in rate when only a drizzle/rain condition code is known. Tunable guess.
PRECIPITATION_CODE_RAIN_RATE = 0.2
_PRECIPITATION_CODE_BANDS = ((300, 400), (500, 600))

DEFAULT_CLOUD_COVER_PCT = 50.0
CLOUD_PEAK_PCT = 50.0
CLOUD_WIDTH_PCT = 30.0
DEFAULT_VISIBILITY_M = 10_000.0
FULL_VISIBILITY_M = 10_000.0

EXP_AZI = 0.4
EXP_SUN = 0.8
EXP_RAIN = 1.2
EXP_CLOUD = 0.6
EXP_VIS = 0.4


def is_sun_in_rainbow_band(sun: SolarPosition) -> bool:
    """True when the sun is above the horizon and below the rainbow angle."""
    return 0.0 < sun.elevation_deg < RAINBOW_ANGLE_DEG


def is_precipitation_code(code: int | None) -> bool:
    """OpenWeatherMap drizzle (3xx) or rain (5xx) condition."""
    if code is None:
        return False
    return any(lo <= code < hi for lo, hi in _PRECIPITATION_CODE_BANDS)


def resolve_rain_rate(weather: WeatherSample) -> float:
    """Collapse the rain measurement into one rate in mm/h.

    Priority: bare rate, then hourly accumulation, then the condition-code
    stand-in when no non-zero rate was reported, else 0.
    """
    rate = 0.0
    if isinstance(weather.rain, (ScalarRain, AccumulatedRain)):
        rate = weather.rain.mm_per_hour
    if not rate and is_precipitation_code(weather.condition_code):
        rate = PRECIPITATION_CODE_RAIN_RATE
    return rate


def rainbow_factors(
    bearing_deg: float, sun: SolarPosition, weather: WeatherSample
) -> RainbowFactors:
    """Every weight of the score for one direction, without gating."""
    delta_theta = angular_difference(bearing_deg, antisolar_azimuth(sun))
    rain_rate = resolve_rain_rate(weather)

    cloud = (
        weather.cloud_cover_pct
        if weather.cloud_cover_pct is not None
        else DEFAULT_CLOUD_COVER_PCT
    )
    visibility = (
        weather.visibility_m
        if weather.visibility_m is not None
        else DEFAULT_VISIBILITY_M
    )

    return RainbowFactors(
        delta_theta=delta_theta,
        rain_rate=rain_rate,
        w_azi=math.exp(-((delta_theta / AZIMUTH_SIGMA_DEG) ** 2)),
        w_sun=max(0.0, 1.0 - sun.elevation_deg / RAINBOW_ANGLE_DEG),
        w_rain=max(0.0, min(1.0, rain_rate / SATURATING_RAIN_MM_H)),
        w_cloud=math.exp(-(((cloud - CLOUD_PEAK_PCT) / CLOUD_WIDTH_PCT) ** 2)),
        w_vis=max(0.0, min(1.0, visibility / FULL_VISIBILITY_M)),
    )


def combine(factors: RainbowFactors) -> float:
    """Weighted geometric mean of the factors, clamped to [0, 1]."""
    value = (
        factors.w_azi**EXP_AZI
        * factors.w_sun**EXP_SUN
        * factors.w_rain**EXP_RAIN
        * factors.w_cloud**EXP_CLOUD
        * factors.w_vis**EXP_VIS
    )
    return max(0.0, min(1.0, value))


def score_bearing(
    bearing_deg: float, sun: SolarPosition, weather: WeatherSample
) -> float:
    """Score for a direction already expressed as a bearing from the observer."""
    if not is_sun_in_rainbow_band(sun):
        return 0.0
    return combine(rainbow_factors(bearing_deg, sun, weather))


def score(
    center: GeoPoint, cell: GeoPoint, sun: SolarPosition, weather: WeatherSample
) -> float:
    """Rainbow probability score in [0, 1] for the direction center → cell.

    Args:
        center: Observer location.
        cell: Sample point.
        sun: Sun position at the observer, computed once per pass.
        weather: Weather for the requested hour. Missing fields use defaults.

    Returns:
        0.0 when the sun is at or below the horizon or at or above 42°,
        otherwise the combined score.
    """
    return score_bearing(bearing_degrees(center, cell), sun, weather)
