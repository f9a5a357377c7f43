"""Shared pytest fixtures."""

from datetime import datetime

import pytest
from pytz import utc

from rainbowradar.models import GeoPoint, ScalarRain, WeatherSample


@pytest.fixture
def equator() -> GeoPoint:
    return GeoPoint(lat=0.0, lng=0.0)


@pytest.fixture
def equinox_morning() -> datetime:
    """Sun roughly 13° above the eastern horizon at (0°, 0°)."""
    return utc.localize(datetime(2024, 3, 20, 7, 0))


@pytest.fixture
def june_solstice_noon() -> datetime:
    return utc.localize(datetime(2024, 6, 20, 12, 0))


@pytest.fixture
def rainy() -> WeatherSample:
    """Peak conditions: saturating rain, half cloud cover, full visibility."""
    return WeatherSample(
        rain=ScalarRain(mm_per_hour=2.0),
        cloud_cover_pct=50.0,
        visibility_m=10_000.0,
        condition_code=501,
    )
