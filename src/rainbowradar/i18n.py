"""Simple two-language (ko/en) translation helper."""

_STRINGS: dict[str, dict[str, str]] = {
    "page_title": {
        "ko": "무지개 레이더",
        "en": "RainbowRadar",
    },
    "label_place": {
        "ko": "장소",
        "en": "Location",
    },
    "btn_search": {
        "ko": "검색",
        "en": "Search",
    },
    "btn_locate": {
        "ko": "내 위치",
        "en": "Locate me",
    },
    "label_offset": {
        "ko": "시각",
        "en": "Time",
    },
    "offset_now": {
        "ko": "지금",
        "en": "Now",
    },
    "offset_hours": {
        "ko": "+{hours}시간",
        "en": "+{hours}h",
    },
    "label_zoom": {
        "ko": "확대 수준",
        "en": "Zoom",
    },
    "legend_title": {
        "ko": "무지개 가능성",
        "en": "Rainbow likelihood",
    },
    "placeholder": {
        "ko": "위치를 허용하거나 장소를 검색해 주변 무지개 예보를 확인하세요",
        "en": "Enable location to center the map and compute a local rainbow forecast.",
    },
    "loading_weather": {
        "ko": "날씨를 불러오는 중",
        "en": "Loading weather...",
    },
    "status_sun_out_of_range": {
        "ko": "조건이 좋지 않아요 (해가 너무 낮거나 높아요).",
        "en": "Conditions unfavorable (Sun too low/high).",
    },
    "status_no_results": {
        "ko": "근처에 무지개가 뜰 만한 곳이 없어요.",
        "en": "No likely rainbow areas nearby.",
    },
    "status_favorable": {
        "ko": "해 반대편 {bearing:.0f}° 방향을 보세요.",
        "en": "Look towards {bearing:.0f}°, opposite the sun.",
    },
    "error_weather": {
        "ko": "날씨 정보를 가져올 수 없어요.",
        "en": "Weather unavailable.",
    },
    "error_address": {
        "ko": "장소를 찾을 수 없어요. ({error})",
        "en": "No results. ({error})",
    },
    "error_geolocation": {
        "ko": "이 브라우저는 위치 정보를 지원하지 않아요.",
        "en": "Geolocation is not supported by this browser.",
    },
    "sun_caption": {
        "ko": "태양 고도 {elevation:.1f}° · 방위 {azimuth:.0f}°",
        "en": "Sun elevation {elevation:.1f}° · azimuth {azimuth:.0f}°",
    },
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key
