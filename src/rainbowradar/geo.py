"""Great-circle geometry and local flat-earth offsets."""

import math

from rainbowradar.models import GeoPoint

EARTH_RADIUS_M = 6_371_000.0


def normalize_degrees(angle: float) -> float:
    """Map any angle into [0, 360)."""
    r = angle % 360.0
    # -1e-15 % 360 rounds up to 360.0
    return 0.0 if r >= 360.0 else r


def angular_difference(a: float, b: float) -> float:
    """Smallest circular distance between two bearings, in [0, 180]."""
    delta = abs(normalize_degrees(a) - normalize_degrees(b))
    return min(delta, 360.0 - delta)


def distance_meters(a: GeoPoint, b: GeoPoint) -> float:
    """Haversine distance on a spherical Earth."""
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    dphi = math.radians(b.lat - a.lat)
    dlambda = math.radians(b.lng - a.lng)

    h = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def bearing_degrees(a: GeoPoint, b: GeoPoint) -> float:
    """Initial great-circle bearing from a to b (0=N, 90=E), in [0, 360).

    Identical points give 0 via atan2(0, 0).
    """
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    dlambda = math.radians(b.lng - a.lng)
    y = math.sin(dlambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(
        dlambda
    )
    return normalize_degrees(math.degrees(math.atan2(y, x)))


def offset_to_point(origin: GeoPoint, dx_m: float, dy_m: float) -> GeoPoint:
    """Shift origin by dx (east) and dy (north) meters.

    Flat-earth approximation: meant for offsets of tens of kilometres, with no
    long-distance correction. Longitude wraps across the antimeridian and
    latitude is clamped at the poles.
    """
    dlat = math.degrees(dy_m / EARTH_RADIUS_M)
    dlng = math.degrees(dx_m / (EARTH_RADIUS_M * math.cos(math.radians(origin.lat))))
    lat = max(-90.0, min(90.0, origin.lat + dlat))
    lng = origin.lng + dlng
    if not -180.0 <= lng < 180.0:
        lng = normalize_degrees(lng + 180.0) - 180.0
    return GeoPoint(lat=lat, lng=lng)
