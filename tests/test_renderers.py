"""Smoke tests for the chart renderers and UI strings."""

from datetime import datetime

import matplotlib

matplotlib.use("Agg")

import plotly.graph_objects as go  # noqa: E402
import pytest  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402
from pytz import utc  # noqa: E402

from rainbowradar.compute import evaluate  # noqa: E402
from rainbowradar.i18n import t  # noqa: E402
from rainbowradar.models import (  # noqa: E402
    EvaluationResult,
    EvaluationStatus,
    ObserverContext,
    SolarPosition,
)
from rainbowradar.renderers.plotly_2d import render_plotly_chart  # noqa: E402
from rainbowradar.renderers.static import render_static_chart, save_static_chart  # noqa: E402


@pytest.fixture
def context(equator, equinox_morning) -> ObserverContext:
    return ObserverContext(center=equator, utc_dt=equinox_morning, address_display="Null Island")


@pytest.fixture
def favorable(equator, equinox_morning, rainy) -> EvaluationResult:
    return evaluate(equator, equinox_morning, 10_000, 2_000, lambda _: rainy)


@pytest.fixture
def empty() -> EvaluationResult:
    return EvaluationResult(
        cells=(),
        status=EvaluationStatus.SUN_OUT_OF_RANGE,
        sun=SolarPosition(elevation_deg=66.0, azimuth_deg=1.0),
    )


class TestPlotly:
    def test_traces(self, equator, favorable):
        fig = render_plotly_chart(equator, favorable)
        assert isinstance(fig, go.Figure)
        cells, direction, observer = fig.data
        assert len(cells.x) == len(favorable.cells)
        assert list(observer.x) == [equator.lng]
        assert len(direction.x) == 2

    def test_empty_result(self, equator, empty):
        fig = render_plotly_chart(equator, empty)
        assert len(fig.data[0].x) == 0


class TestStatic:
    def test_render(self, context, favorable):
        assert isinstance(render_static_chart(context, favorable), Figure)

    def test_render_empty(self, context, empty):
        assert isinstance(render_static_chart(context, empty), Figure)

    def test_save(self, tmp_path, context, favorable):
        path = save_static_chart(context, favorable, tmp_path / "radar.png")
        assert path.exists()
        assert path.stat().st_size > 0


class TestI18n:
    def test_known_key(self):
        assert t("status_no_results", "en") == "No likely rainbow areas nearby."

    def test_falls_back_to_english(self):
        assert t("error_weather", "fr") == "Weather unavailable."

    def test_unknown_key(self):
        assert t("no_such_key", "ko") == "no_such_key"
