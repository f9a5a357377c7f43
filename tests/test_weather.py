"""Tests for the One Call weather adapter. No network: httpx.get is replaced."""

import httpx
import pytest

from rainbowradar import weather
from rainbowradar.models import (
    AccumulatedRain,
    GeoPoint,
    ScalarRain,
    WeatherForecast,
    WeatherSample,
)
from rainbowradar.weather import (
    ONE_CALL_URL,
    WeatherUnavailableError,
    fetch_weather,
    parse_one_call,
    parse_weather_sample,
)

ONE_CALL_PAYLOAD = {
    "lat": 64.14,
    "lon": -21.94,
    "timezone": "Atlantic/Reykjavik",
    "current": {
        "dt": 1723650000,
        "clouds": 40,
        "visibility": 10000,
        "weather": [{"id": 803, "description": "broken clouds"}],
    },
    "hourly": [
        {"dt": 1723650000, "clouds": 40, "visibility": 10000, "weather": [{"id": 803}]},
        {"dt": 1723653600, "rain": {"1h": 0.8}, "clouds": 55, "weather": [{"id": 500}]},
        {"dt": 1723657200, "rain": 1.6, "clouds": 70, "visibility": 6000, "weather": [{"id": 501}]},
    ],
}


def _response(status: int, payload) -> httpx.Response:
    return httpx.Response(
        status, json=payload, request=httpx.Request("GET", ONE_CALL_URL)
    )


class TestParseWeatherSample:
    def test_accumulated_rain(self):
        sample = parse_weather_sample(ONE_CALL_PAYLOAD["hourly"][1])
        assert sample == WeatherSample(
            rain=AccumulatedRain(0.8),
            cloud_cover_pct=55.0,
            visibility_m=None,
            condition_code=500,
        )

    def test_scalar_rain(self):
        sample = parse_weather_sample(ONE_CALL_PAYLOAD["hourly"][2])
        assert sample.rain == ScalarRain(1.6)
        assert sample.visibility_m == 6000.0
        assert sample.condition_code == 501

    def test_empty_point_is_all_defaults(self):
        assert parse_weather_sample({}) == WeatherSample()

    @pytest.mark.parametrize(
        "payload",
        [
            {"rain": {"3h": 2.0}},
            {"rain": "heavy"},
            {"rain": True},
            {"weather": []},
            {"weather": ["rain"]},
            {"clouds": None},
        ],
    )
    def test_unusable_fields_are_dropped(self, payload):
        assert parse_weather_sample(payload) == WeatherSample()


class TestParseOneCall:
    def test_current_and_hourly(self):
        forecast = parse_one_call(ONE_CALL_PAYLOAD)
        assert forecast.current.condition_code == 803
        assert len(forecast.hourly) == 3
        assert forecast.hourly[2].rain == ScalarRain(1.6)

    def test_missing_hourly(self):
        forecast = parse_one_call({"current": {"clouds": 10}})
        assert forecast.hourly == ()
        assert forecast.current.cloud_cover_pct == 10.0

    def test_missing_current_raises(self):
        with pytest.raises(WeatherUnavailableError):
            parse_one_call({"hourly": []})


class TestSampleForOffset:
    def test_hourly_entry_used_when_present(self):
        forecast = parse_one_call(ONE_CALL_PAYLOAD)
        assert forecast.sample_for_offset(1).rain == AccumulatedRain(0.8)

    def test_falls_back_to_current(self):
        current = WeatherSample(cloud_cover_pct=20.0)
        forecast = WeatherForecast(current=current, hourly=(WeatherSample(),))
        assert forecast.sample_for_offset(0) == WeatherSample()
        assert forecast.sample_for_offset(1) is current
        assert forecast.sample_for_offset(-1) is current


class TestFetchWeather:
    def test_success(self, monkeypatch: pytest.MonkeyPatch):
        calls = []

        def fake_get(url, params=None, timeout=None, **kwargs):
            calls.append((url, params))
            return _response(200, ONE_CALL_PAYLOAD)

        monkeypatch.setattr(weather.httpx, "get", fake_get)
        forecast = fetch_weather(GeoPoint(lat=64.14, lng=-21.94), api_key="k")

        assert len(forecast.hourly) == 3
        url, params = calls[0]
        assert url == ONE_CALL_URL
        assert params["lat"] == 64.14
        assert params["lon"] == -21.94
        assert params["units"] == "metric"
        assert params["exclude"] == "minutely,alerts"
        assert params["appid"] == "k"

    def test_key_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        seen = {}

        def fake_get(url, params=None, timeout=None, **kwargs):
            seen.update(params)
            return _response(200, ONE_CALL_PAYLOAD)

        monkeypatch.setenv("OWM_API_KEY", "from-env")
        monkeypatch.setattr(weather.httpx, "get", fake_get)
        fetch_weather(GeoPoint(lat=0.0, lng=0.0))
        assert seen["appid"] == "from-env"

    def test_missing_key(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("OWM_API_KEY", raising=False)
        with pytest.raises(WeatherUnavailableError):
            fetch_weather(GeoPoint(lat=0.0, lng=0.0))

    def test_http_error(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(
            weather.httpx, "get", lambda *a, **kw: _response(401, {"cod": 401})
        )
        with pytest.raises(WeatherUnavailableError):
            fetch_weather(GeoPoint(lat=0.0, lng=0.0), api_key="bad")

    def test_transport_error(self, monkeypatch: pytest.MonkeyPatch):
        def fake_get(*args, **kwargs):
            raise httpx.ConnectError("unreachable")

        monkeypatch.setattr(weather.httpx, "get", fake_get)
        with pytest.raises(WeatherUnavailableError):
            fetch_weather(GeoPoint(lat=0.0, lng=0.0), api_key="k")

    def test_non_object_payload(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(weather.httpx, "get", lambda *a, **kw: _response(200, []))
        with pytest.raises(WeatherUnavailableError):
            fetch_weather(GeoPoint(lat=0.0, lng=0.0), api_key="k")
