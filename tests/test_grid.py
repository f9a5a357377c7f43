"""Tests for the circular sampling grid."""

import math

import pytest

from rainbowradar.geo import EARTH_RADIUS_M, offset_to_point
from rainbowradar.grid import (
    COARSE_SPACING_M,
    FINE_SPACING_M,
    InvalidGridConfigError,
    build_grid,
    spacing_for_zoom,
)
from rainbowradar.models import GeoPoint


def _planar_offset(center: GeoPoint, point: GeoPoint) -> tuple[float, float]:
    """Invert the flat-earth offset back to (dx, dy) meters."""
    dy = math.radians(point.lat - center.lat) * EARTH_RADIUS_M
    dx = math.radians(point.lng - center.lng) * EARTH_RADIUS_M * math.cos(
        math.radians(center.lat)
    )
    return dx, dy


class TestBuildGrid:
    def test_small_grid_is_a_cross_in_row_major_order(self, equator):
        """3x3 lattice cropped to radius 1000 keeps the center and its 4 neighbours."""
        grid = build_grid(equator, 1000, 1000)
        expected = tuple(
            offset_to_point(equator, dx, dy)
            for dx, dy in [(0, -1000), (-1000, 0), (0, 0), (1000, 0), (0, 1000)]
        )
        assert grid == expected

    def test_point_count(self, equator):
        assert len(build_grid(equator, 25_000, 2_000)) == 489

    def test_deterministic(self):
        center = GeoPoint(lat=47.37, lng=8.54)
        assert build_grid(center, 25_000, 2_000) == build_grid(center, 25_000, 2_000)

    @pytest.mark.parametrize("radius,spacing", [(25_000, 2_000), (25_000, 1_500), (5_000, 700)])
    def test_points_within_radius(self, radius, spacing):
        center = GeoPoint(lat=10.0, lng=20.0)
        grid = build_grid(center, radius, spacing)
        assert grid
        for point in grid:
            dx, dy = _planar_offset(center, point)
            assert math.hypot(dx, dy) <= radius + 1e-6

    def test_rows_run_south_to_north(self):
        center = GeoPoint(lat=-33.9, lng=18.4)
        lats = [p.lat for p in build_grid(center, 10_000, 2_000)]
        assert lats == sorted(lats)

    def test_center_included(self):
        center = GeoPoint(lat=64.1, lng=-21.9)
        assert center in build_grid(center, 3_000, 1_000)

    def test_spacing_larger_than_radius(self, equator):
        """ceil(2R/S) = 1 gives half = 0: only the center remains."""
        assert build_grid(equator, 500, 2_000) == (equator,)

    @pytest.mark.parametrize(
        "radius,spacing",
        [(0, 1000), (-1, 1000), (1000, 0), (1000, -5), (math.nan, 1000), (1000, math.inf)],
    )
    def test_invalid_config(self, equator, radius, spacing):
        with pytest.raises(InvalidGridConfigError):
            build_grid(equator, radius, spacing)

    def test_invalid_config_is_value_error(self, equator):
        with pytest.raises(ValueError):
            build_grid(equator, 0, 0)


class TestSpacingForZoom:
    def test_fine_at_high_zoom(self):
        assert spacing_for_zoom(13) == FINE_SPACING_M
        assert spacing_for_zoom(17) == FINE_SPACING_M

    def test_coarse_below(self):
        assert spacing_for_zoom(12) == COARSE_SPACING_M
        assert spacing_for_zoom(2) == COARSE_SPACING_M
