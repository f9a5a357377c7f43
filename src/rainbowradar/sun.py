"""Solar position — NOAA low-precision algorithm (valid 1900-2099, ~0.01°).

Public functions take and return degrees; trigonometry runs in radians.
Everything is computed in UTC. Naive datetimes are taken to be UTC already.
"""

import math
from datetime import datetime

from pytz import utc

from rainbowradar.geo import normalize_degrees
from rainbowradar.models import GeoPoint, SolarPosition

_UNIX_EPOCH_JD = 2440587.5
_J2000_JD = 2451545.0
_DAYS_PER_CENTURY = 36525.0


def _as_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return utc.localize(instant)
    return instant.astimezone(utc)


def julian_day(instant: datetime) -> float:
    """Julian Day (fractional) of a UTC instant."""
    return _as_utc(instant).timestamp() / 86400.0 + _UNIX_EPOCH_JD


def julian_century(jd: float) -> float:
    """Julian centuries since J2000.0."""
    return (jd - _J2000_JD) / _DAYS_PER_CENTURY


def _mean_longitude(t: float) -> float:
    return normalize_degrees(280.46646 + 36000.76983 * t + 0.0003032 * t * t)


def _mean_anomaly(t: float) -> float:
    return normalize_degrees(357.52911 + 35999.05029 * t - 0.0001537 * t * t)


def _eccentricity(t: float) -> float:
    return 0.016708634 - 0.000042037 * t - 0.0000001267 * t * t


def _ascending_node(t: float) -> float:
    return 125.04 - 1934.136 * t


def _apparent_longitude(t: float) -> float:
    m = math.radians(_mean_anomaly(t))
    center = (
        (1.914602 - 0.004817 * t - 0.000014 * t * t) * math.sin(m)
        + (0.019993 - 0.000101 * t) * math.sin(2 * m)
        + 0.000289 * math.sin(3 * m)
    )
    true_longitude = _mean_longitude(t) + center
    return (
        true_longitude - 0.00569 - 0.00478 * math.sin(math.radians(_ascending_node(t)))
    )


def _apparent_obliquity(t: float) -> float:
    seconds = 21.448 - t * (46.815 + t * (0.00059 - t * 0.001813))
    mean_obliquity = 23.0 + (26.0 + seconds / 60.0) / 60.0
    return mean_obliquity + 0.00256 * math.cos(math.radians(_ascending_node(t)))


def solar_declination(t: float) -> float:
    """Sun declination (degrees) at Julian century t."""
    epsilon = math.radians(_apparent_obliquity(t))
    lam = math.radians(_apparent_longitude(t))
    return math.degrees(math.asin(math.sin(epsilon) * math.sin(lam)))


def equation_of_time(t: float) -> float:
    """True minus mean solar time, in minutes."""
    epsilon = math.radians(_apparent_obliquity(t))
    l0 = math.radians(_mean_longitude(t))
    m = math.radians(_mean_anomaly(t))
    e = _eccentricity(t)
    y = math.tan(epsilon / 2) ** 2
    return 4.0 * math.degrees(
        y * math.sin(2 * l0)
        - 2 * e * math.sin(m)
        + 4 * e * y * math.sin(m) * math.cos(2 * l0)
        - 0.5 * y * y * math.sin(4 * l0)
        - 1.25 * e * e * math.sin(2 * m)
    )


def compute_position(observer: GeoPoint, instant_utc: datetime) -> SolarPosition:
    """Sun elevation and azimuth for an observer at a UTC instant.

    Args:
        observer: Observer location.
        instant_utc: The instant. Aware datetimes are converted to UTC.

    Returns:
        SolarPosition with elevation in [-90, 90] and azimuth (0=N, clockwise)
        in [0, 360).
    """
    instant = _as_utc(instant_utc)
    t = julian_century(julian_day(instant))

    delta = math.radians(solar_declination(t))

    clock_minutes = (
        instant.hour * 60 + instant.minute + (instant.second + instant.microsecond / 1e6) / 60
    )
    true_solar_time = (clock_minutes + equation_of_time(t) + 4.0 * observer.lng) % 1440.0
    hour_angle = math.radians(true_solar_time / 4.0 - 180.0)

    phi = math.radians(observer.lat)
    sin_elevation = math.sin(phi) * math.sin(delta) + math.cos(phi) * math.cos(
        delta
    ) * math.cos(hour_angle)
    elevation = math.degrees(math.asin(max(-1.0, min(1.0, sin_elevation))))

    azimuth = math.degrees(
        math.atan2(
            -math.sin(hour_angle),
            math.tan(delta) * math.cos(phi) - math.sin(phi) * math.cos(hour_angle),
        )
    )
    return SolarPosition(elevation_deg=elevation, azimuth_deg=normalize_degrees(azimuth))


def antisolar_azimuth(sun: SolarPosition) -> float:
    """Bearing of the point opposite the sun, where a rainbow is centred."""
    return (sun.azimuth_deg + 180.0) % 360.0
