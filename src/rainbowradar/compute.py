"""Evaluation layer — geocoding, one rainbow evaluation pass over the grid."""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

import httpx
from pytz import timezone, utc
from pytz.exceptions import InvalidTimeError
from timezonefinder import TimezoneFinder

from rainbowradar.geo import bearing_degrees
from rainbowradar.grid import COARSE_SPACING_M, DEFAULT_RADIUS_M, build_grid
from rainbowradar.models import (
    EvaluationResult,
    EvaluationStatus,
    GeoPoint,
    GridCell,
    InvalidCoordinateError,
    ObserverContext,
    QueryInput,
    SolarPosition,
    WeatherForecast,
    WeatherSample,
)
from rainbowradar.scoring import is_sun_in_rainbow_band, score_bearing
from rainbowradar.sun import compute_position
from rainbowradar.weather import fetch_weather

logger = logging.getLogger(__name__)

_tf = TimezoneFinder()

# Matches the Now / +1h / +2h choices offered by the front ends.
MAX_HOUR_OFFSET = 2


class GeocodingError(Exception):
    """Geocoder call failure."""


def _geocode_nominatim(address: str) -> tuple[float, float, str] | None:
    """Nominatim (OpenStreetMap) geocoder. Returns (lat, lng, display_name) or None."""
    params = {"q": address, "format": "json", "limit": 1}
    headers = {"User-Agent": "RainbowRadar/1.0", "Accept-Language": "en"}
    resp = httpx.get(
        "https://nominatim.openstreetmap.org/search",
        params=params,
        headers=headers,
        timeout=10,
    )
    resp.raise_for_status()
    results = resp.json()
    if not results:
        return None
    r = results[0]
    return float(r["lat"]), float(r["lon"]), r["display_name"]


def locate_address(address: str) -> tuple[GeoPoint, str]:
    """Resolve a place name to a point and the geocoder's display name.

    Raises:
        GeocodingError: On API error or when the address cannot be found.
    """
    try:
        result = _geocode_nominatim(address)
    except httpx.HTTPError as e:
        raise GeocodingError(f"Geocoding failed: {e}") from e
    if result is None:
        raise GeocodingError(f"Address not found: {address}")
    lat, lng, address_display = result
    try:
        center = GeoPoint(lat=lat, lng=lng)
    except InvalidCoordinateError as e:
        raise GeocodingError(f"Geocoder returned an invalid point: {e}") from e
    return center, address_display


def geocode_address(address: str, when: str) -> ObserverContext:
    """Resolve an address string and local time string to an ObserverContext.

    Args:
        address: Place name or address in any language.
        when: Local time string in "YYYY-MM-DD HH:MM" format.

    Returns:
        ObserverContext containing the center point, UTC datetime, and
        normalized address.

    Raises:
        GeocodingError: On API error, when address/timezone cannot be found,
            or when `when` is malformed or falls in a DST gap or overlap.
    """
    try:
        dt = datetime.strptime(when, "%Y-%m-%d %H:%M")
    except ValueError as e:
        raise GeocodingError(f"Invalid local time {when!r}: {e}") from e

    center, address_display = locate_address(address)

    tz_str = _tf.timezone_at(lat=center.lat, lng=center.lng)
    if tz_str is None:
        raise GeocodingError(f"Timezone not found: lat={center.lat}, lng={center.lng}")
    local_tz = timezone(tz_str)
    try:
        utc_dt = local_tz.localize(dt, is_dst=None).astimezone(utc)
    except InvalidTimeError as e:
        raise GeocodingError(f"Ambiguous or skipped local time in {tz_str}: {e}") from e

    return ObserverContext(
        center=center, utc_dt=utc_dt, address_display=address_display
    )


def score_grid(
    center: GeoPoint,
    grid: tuple[GeoPoint, ...],
    sun: SolarPosition,
    weather: WeatherSample,
) -> tuple[GridCell, ...]:
    """Score every grid point against one shared sun position.

    Cells scoring 0 are dropped; grid order is kept.
    """
    cells: list[GridCell] = []
    for point in grid:
        bearing = bearing_degrees(center, point)
        value = score_bearing(bearing, sun, weather)
        if value > 0:
            cells.append(GridCell(point=point, bearing_deg=bearing, score=value))
    return tuple(cells)


def evaluate(
    center: GeoPoint,
    instant_utc: datetime,
    radius_m: float,
    spacing_m: float,
    weather_for_hour_offset: Callable[[int], WeatherSample],
    hour_offset: int = 0,
) -> EvaluationResult:
    """Run one evaluation pass around an observer.

    The sun position is computed once and reused for every cell. When the sun
    is outside the rainbow band no grid is built and no weather is requested.

    Args:
        center: Observer location.
        instant_utc: Instant to evaluate (already shifted by hour_offset).
        radius_m: Grid radius in meters.
        spacing_m: Grid spacing in meters.
        weather_for_hour_offset: Weather provider. Fallback to current
            conditions is the provider's own policy.
        hour_offset: Hour offset passed to the weather provider.

    Returns:
        EvaluationResult with retained cells and a status.

    Raises:
        InvalidGridConfigError: If radius or spacing is not positive.
    """
    sun = compute_position(center, instant_utc)
    if not is_sun_in_rainbow_band(sun):
        logger.debug("Sun elevation %.2f° outside rainbow band", sun.elevation_deg)
        return EvaluationResult(
            cells=(), status=EvaluationStatus.SUN_OUT_OF_RANGE, sun=sun
        )

    grid = build_grid(center, radius_m, spacing_m)
    weather = weather_for_hour_offset(hour_offset)
    cells = score_grid(center, grid, sun, weather)
    logger.debug("Scored %d/%d cells around %s", len(cells), len(grid), center)

    status = EvaluationStatus.FAVORABLE if cells else EvaluationStatus.NO_RESULTS
    return EvaluationResult(cells=cells, status=status, sun=sun)


def evaluate_forecast(
    context: ObserverContext,
    forecast: WeatherForecast,
    hour_offset: int = 0,
    radius_m: float = DEFAULT_RADIUS_M,
    spacing_m: float = COARSE_SPACING_M,
) -> EvaluationResult:
    """Evaluate hour_offset hours after the context time using a fetched forecast."""
    if not 0 <= hour_offset <= MAX_HOUR_OFFSET:
        raise ValueError(f"hour_offset must be in [0, {MAX_HOUR_OFFSET}], got {hour_offset}")
    instant = context.utc_dt + timedelta(hours=hour_offset)
    return evaluate(
        context.center,
        instant,
        radius_m,
        spacing_m,
        forecast.sample_for_offset,
        hour_offset=hour_offset,
    )


def run(
    query: QueryInput,
    hour_offset: int = 0,
    radius_m: float = DEFAULT_RADIUS_M,
    spacing_m: float = COARSE_SPACING_M,
    now: datetime | None = None,
) -> tuple[ObserverContext, EvaluationResult]:
    """Top-level entry point: geocode, fetch weather, evaluate.

    The forecast is fetched now and its hourly entries count from now, so the
    evaluated instant must lie within MAX_HOUR_OFFSET hours from now. The
    sun and the weather sample always refer to the same hour.

    Args:
        query: User input. `when` is a local time or None for now.
        hour_offset: Hours after the query time.
        radius_m: Grid radius in meters.
        spacing_m: Grid spacing in meters.
        now: Current instant; defaults to the system clock.

    Returns:
        The resolved ObserverContext (at the query time) and the
        EvaluationResult for the query time plus hour_offset.

    Raises:
        GeocodingError: If the address or local time cannot be resolved.
        ValueError: If the evaluated instant is outside the forecast window.
        WeatherUnavailableError: If weather cannot be fetched.
    """
    now = (now or datetime.now(utc)).astimezone(utc)
    if query.when is None:
        center, address_display = locate_address(query.address)
        context = ObserverContext(
            center=center, utc_dt=now, address_display=address_display
        )
    else:
        context = geocode_address(query.address, query.when)

    instant = context.utc_dt + timedelta(hours=hour_offset)
    weather_offset = round((instant - now).total_seconds() / 3600)
    if not 0 <= weather_offset <= MAX_HOUR_OFFSET:
        raise ValueError(
            f"{instant:%Y-%m-%d %H:%M} UTC is {weather_offset}h from now; "
            f"forecasts cover 0 to {MAX_HOUR_OFFSET}h ahead"
        )

    forecast = fetch_weather(context.center)
    return context, evaluate(
        context.center,
        instant,
        radius_m,
        spacing_m,
        forecast.sample_for_offset,
        hour_offset=weather_offset,
    )
