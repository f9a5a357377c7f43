"""Weather boundary — OpenWeatherMap One Call 3.0 fetch and parsing."""

import logging
import os
from typing import Any

import httpx

from rainbowradar.models import (
    AccumulatedRain,
    GeoPoint,
    RainMeasurement,
    ScalarRain,
    WeatherForecast,
    WeatherSample,
)

logger = logging.getLogger(__name__)

ONE_CALL_URL = "https://api.openweathermap.org/data/3.0/onecall"


class WeatherUnavailableError(Exception):
    """Weather provider call failure or unusable payload."""


def _number(value: Any) -> float | None:
    # bool is an int subclass but never a measurement
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return None


def _parse_rain(raw: Any) -> RainMeasurement:
    """Rain arrives either as a bare number or as {"1h": mm}."""
    scalar = _number(raw)
    if scalar is not None:
        return ScalarRain(mm_per_hour=scalar)
    if isinstance(raw, dict):
        hourly = _number(raw.get("1h"))
        if hourly is not None:
            return AccumulatedRain(mm_per_hour=hourly)
    return None


def parse_weather_sample(payload: dict[str, Any]) -> WeatherSample:
    """Translate one One Call data point (current or hourly entry)."""
    conditions = payload.get("weather") or []
    code: int | None = None
    if conditions and isinstance(conditions[0], dict):
        raw_id = _number(conditions[0].get("id"))
        code = int(raw_id) if raw_id is not None else None

    return WeatherSample(
        rain=_parse_rain(payload.get("rain")),
        cloud_cover_pct=_number(payload.get("clouds")),
        visibility_m=_number(payload.get("visibility")),
        condition_code=code,
    )


def parse_one_call(payload: dict[str, Any]) -> WeatherForecast:
    """Translate a full One Call response into a WeatherForecast.

    Raises:
        WeatherUnavailableError: If the payload has no `current` block.
    """
    current = payload.get("current")
    if not isinstance(current, dict):
        raise WeatherUnavailableError("One Call payload has no 'current' block")
    hourly = tuple(
        parse_weather_sample(entry)
        for entry in payload.get("hourly") or []
        if isinstance(entry, dict)
    )
    return WeatherForecast(current=parse_weather_sample(current), hourly=hourly)


def fetch_weather(center: GeoPoint, api_key: str | None = None) -> WeatherForecast:
    """Fetch current + hourly weather for a location.

    Args:
        center: Location to query.
        api_key: OpenWeatherMap key. Defaults to the OWM_API_KEY environment variable.

    Returns:
        Parsed WeatherForecast.

    Raises:
        WeatherUnavailableError: On missing key, HTTP error, or malformed response.
    """
    key = api_key or os.environ.get("OWM_API_KEY")
    if not key:
        raise WeatherUnavailableError("OWM_API_KEY is not set")

    params = {
        "lat": center.lat,
        "lon": center.lng,
        "units": "metric",
        "exclude": "minutely,alerts",
        "appid": key,
    }
    try:
        resp = httpx.get(ONE_CALL_URL, params=params, timeout=10)
        resp.raise_for_status()
        payload = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("One Call request failed for %s: %s", center, e)
        raise WeatherUnavailableError(f"OWM error: {e}") from e

    if not isinstance(payload, dict):
        raise WeatherUnavailableError("One Call payload is not an object")
    forecast = parse_one_call(payload)
    logger.debug(
        "Fetched weather for %s: %d hourly samples", center, len(forecast.hourly)
    )
    return forecast
