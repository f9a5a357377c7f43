"""RainbowRadar — Streamlit app showing where a rainbow is likely around you."""

import datetime
import html
import logging

import streamlit as st
from dotenv import load_dotenv
from pytz import utc
from streamlit_js_eval import get_geolocation, streamlit_js_eval

load_dotenv()

from rainbowradar.compute import (  # noqa: E402
    MAX_HOUR_OFFSET,
    GeocodingError,
    evaluate,
    locate_address,
)
from rainbowradar.grid import DEFAULT_RADIUS_M, spacing_for_zoom  # noqa: E402
from rainbowradar.i18n import t  # noqa: E402
from rainbowradar.models import (  # noqa: E402
    EvaluationStatus,
    GeoPoint,
    InvalidCoordinateError,
)
from rainbowradar.renderers.plotly_2d import render_plotly_chart  # noqa: E402
from rainbowradar.sun import antisolar_azimuth  # noqa: E402
from rainbowradar.weather import WeatherUnavailableError, fetch_weather  # noqa: E402

logger = logging.getLogger(__name__)

# --- Language detection (browser-first via streamlit-js-eval) ---
# On the first run the JS call returns None; the rerun triggered by
# streamlit_js_eval fills it in.
if "lang" not in st.session_state:
    _browser_lang: str | None = streamlit_js_eval(
        js_expressions="navigator.language", key="_lang_detect", height=0
    )
    if _browser_lang is not None:
        st.session_state.lang = "ko" if _browser_lang.lower().startswith("ko") else "en"

_lang: str = st.session_state.get("lang", "en")

st.set_page_config(
    page_title=t("page_title", _lang),
    page_icon="🌈",
    layout="wide",
    initial_sidebar_state="collapsed",
)

# --- Session state initialization ---

if "center" not in st.session_state:
    st.session_state.center = None
if "place_label" not in st.session_state:
    st.session_state.place_label = ""
if "forecast" not in st.session_state:
    st.session_state.forecast = None
if "forecast_center" not in st.session_state:
    st.session_state.forecast_center = None
if "error_msg" not in st.session_state:
    st.session_state.error_msg = None

st.markdown(
    """
    <style>
    html, body, [data-testid="stAppViewContainer"], [data-testid="stMain"] {
        background-color: #1b1b1b !important;
    }
    [data-testid="stHeader"], [data-testid="stToolbar"] {
        display: none !important;
    }
    iframe[src*="streamlit_js_eval"] { display: none !important; }
    .status-box {
        background: rgba(0, 0, 0, 0.65);
        border-radius: 8px;
        padding: 0.6rem 1rem;
        color: #e8e8e8;
    }
    </style>
    """,
    unsafe_allow_html=True,
)

# --- Geolocation ---
_location = get_geolocation()
_geolocated: GeoPoint | None = None
if isinstance(_location, dict) and "coords" in _location:
    coords = _location["coords"]
    try:
        _geolocated = GeoPoint(
            lat=float(coords["latitude"]), lng=float(coords["longitude"])
        )
    except InvalidCoordinateError as e:
        logger.warning("Browser reported an invalid position: %s", e)
        st.session_state.error_msg = t("error_geolocation", _lang)
    if _geolocated is not None and st.session_state.center is None:
        st.session_state.center = _geolocated
        st.session_state.place_label = f"{_geolocated.lat:.4f}, {_geolocated.lng:.4f}"
elif isinstance(_location, dict) and "error" in _location:
    st.session_state.error_msg = html.escape(
        str(_location["error"].get("message") or t("error_geolocation", _lang))
    )

# --- Top bar: search + locate me ---
col1, col2, col3 = st.columns([5, 1, 1])
with col1:
    query = st.text_input(
        t("label_place", _lang), value="", label_visibility="collapsed"
    )
with col2:
    searched = st.button(t("btn_search", _lang), use_container_width=True)
with col3:
    locate = st.button(
        t("btn_locate", _lang), use_container_width=True, disabled=_geolocated is None
    )

if searched and query.strip():
    try:
        st.session_state.center, st.session_state.place_label = locate_address(query)
        st.session_state.error_msg = None
    except GeocodingError as e:
        st.session_state.error_msg = t("error_address", _lang).format(error=html.escape(str(e)))
if locate and _geolocated is not None:
    st.session_state.center = _geolocated
    st.session_state.place_label = f"{_geolocated.lat:.4f}, {_geolocated.lng:.4f}"
    st.session_state.error_msg = None

center: GeoPoint | None = st.session_state.center

if center is None:
    st.markdown(
        f"<div class='status-box'>{t('placeholder', _lang)}</div>",
        unsafe_allow_html=True,
    )
    if st.session_state.error_msg:
        st.error(st.session_state.error_msg)
    st.stop()

# --- Controls: time offset + zoom ---
ctrl1, ctrl2 = st.columns(2)
with ctrl1:
    hour_offset: int = st.radio(
        t("label_offset", _lang),
        options=list(range(MAX_HOUR_OFFSET + 1)),
        format_func=lambda h: t("offset_now", _lang)
        if h == 0
        else t("offset_hours", _lang).format(hours=h),
        horizontal=True,
    )
with ctrl2:
    zoom: int = st.slider(t("label_zoom", _lang), min_value=8, max_value=16, value=12)

# --- Weather (fetched once per center) ---
if st.session_state.forecast_center != center:
    with st.spinner(t("loading_weather", _lang)):
        try:
            st.session_state.forecast = fetch_weather(center)
            st.session_state.forecast_center = center
        except WeatherUnavailableError as e:
            logger.warning("Weather fetch failed for %s: %s", center, e)
            st.session_state.forecast = None
            st.session_state.forecast_center = None

forecast = st.session_state.forecast
if forecast is None:
    st.markdown(
        f"<div class='status-box'>{t('error_weather', _lang)}</div>",
        unsafe_allow_html=True,
    )
    st.stop()

# --- Evaluation pass ---
instant = datetime.datetime.now(utc) + datetime.timedelta(hours=hour_offset)
result = evaluate(
    center,
    instant,
    DEFAULT_RADIUS_M,
    spacing_for_zoom(zoom),
    forecast.sample_for_offset,
    hour_offset=hour_offset,
)

if result.status is EvaluationStatus.SUN_OUT_OF_RANGE:
    status_msg = t("status_sun_out_of_range", _lang)
elif result.status is EvaluationStatus.NO_RESULTS:
    status_msg = t("status_no_results", _lang)
else:
    status_msg = t("status_favorable", _lang).format(bearing=antisolar_azimuth(result.sun))

st.plotly_chart(
    render_plotly_chart(center, result, legend_title=t("legend_title", _lang)),
    use_container_width=True,
    config={"scrollZoom": True, "displayModeBar": False},
)
st.markdown(
    f"<div class='status-box'><b>{html.escape(st.session_state.place_label)}</b> · "
    f"{status_msg}<br><small>"
    + t("sun_caption", _lang).format(
        elevation=result.sun.elevation_deg, azimuth=result.sun.azimuth_deg
    )
    + "</small></div>",
    unsafe_allow_html=True,
)
if st.session_state.error_msg:
    st.error(st.session_state.error_msg)
