"""Sampling grid — a circular crop of a square lattice around the observer."""

import math

from rainbowradar.geo import offset_to_point
from rainbowradar.models import GeoPoint

DEFAULT_RADIUS_M = 25_000.0
COARSE_SPACING_M = 2_000.0
FINE_SPACING_M = 1_500.0
FINE_SPACING_MIN_ZOOM = 13


class InvalidGridConfigError(ValueError):
    """Non-positive grid radius or spacing."""


def spacing_for_zoom(zoom: int) -> float:
    """Lattice spacing used at a given map zoom level."""
    return FINE_SPACING_M if zoom >= FINE_SPACING_MIN_ZOOM else COARSE_SPACING_M


def build_grid(
    center: GeoPoint, radius_m: float, spacing_m: float
) -> tuple[GeoPoint, ...]:
    """Lattice points within radius_m of center, spacing_m apart.

    Rows run south to north (iy outer) and each row west to east (ix inner).
    The crop uses the planar offset hypot(dx, dy), not a geodesic distance,
    and the lattice is projected with the flat-earth offset. Both are
    approximations for small radii.

    Args:
        center: Grid center (the observer).
        radius_m: Crop radius in meters. Must be > 0.
        spacing_m: Lattice spacing in meters. Must be > 0.

    Returns:
        Tuple of GeoPoints in row-major order.

    Raises:
        InvalidGridConfigError: If radius or spacing is not a positive number.
    """
    if not (math.isfinite(radius_m) and radius_m > 0):
        raise InvalidGridConfigError(f"radius_m must be > 0, got {radius_m}")
    if not (math.isfinite(spacing_m) and spacing_m > 0):
        raise InvalidGridConfigError(f"spacing_m must be > 0, got {spacing_m}")

    steps = math.ceil(radius_m * 2 / spacing_m)
    half = steps // 2

    points: list[GeoPoint] = []
    for iy in range(-half, half + 1):
        for ix in range(-half, half + 1):
            dx = ix * spacing_m
            dy = iy * spacing_m
            if math.hypot(dx, dy) <= radius_m:
                points.append(offset_to_point(center, dx, dy))
    return tuple(points)
