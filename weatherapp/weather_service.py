# ABOUTME: Service layer for OpenWeatherMap current-weather and 5-day forecast calls.
# ABOUTME: Maps upstream payloads to CurrentConditions / RawForecastSample and failures to FetchError.

import logging

import httpx

from weatherapp.deps import WeatherDeps
from weatherapp.errors import ApiError, EmptyBodyError, NetworkError
from weatherapp.models import CurrentConditions, IconId, RawForecastSample

logger = logging.getLogger(__name__)

WEATHER_PATH = "weather"
FORECAST_PATH = "forecast"

DEFAULT_ICON_CODE = "01d"
UNKNOWN_CONDITION = "Unknown"

ICON_CODES: dict[str, IconId] = {
    "01d": IconId.SUNNY,
    "01n": IconId.SUNNY,
    "02d": IconId.CLOUDS,
    "02n": IconId.CLOUDS,
    "03d": IconId.CLOUDS,
    "03n": IconId.CLOUDS,
    "04d": IconId.CLOUDS,
    "04n": IconId.CLOUDS,
    "09d": IconId.RAIN,
    "09n": IconId.RAIN,
    "10d": IconId.RAIN,
    "10n": IconId.RAIN,
    "11d": IconId.STORM,
    "11n": IconId.STORM,
}


def map_icon_code(code: str | None) -> IconId:
    """Map an OpenWeatherMap icon code (e.g. "10n") to an IconId; unknown codes show clouds."""
    return ICON_CODES.get(code or "", IconId.CLOUDS)


async def get_current_by_city(deps: WeatherDeps, city_query: str, units: str | None = None) -> CurrentConditions:
    """Fetch current conditions for a city name as the upstream indexes it."""
    data = await _get_json(deps, WEATHER_PATH, {"q": city_query}, units)
    return parse_current(data)


async def get_current_by_coordinates(
    deps: WeatherDeps,
    lat: float,
    lon: float,
    units: str | None = None,
) -> CurrentConditions:
    """Fetch current conditions at a coordinate."""
    data = await _get_json(deps, WEATHER_PATH, {"lat": lat, "lon": lon}, units)
    return parse_current(data)


async def get_forecast_by_coordinates(
    deps: WeatherDeps,
    lat: float,
    lon: float,
    units: str | None = None,
) -> list[RawForecastSample]:
    """Fetch the 5-day / 3-hour forecast at a coordinate."""
    data = await _get_json(deps, FORECAST_PATH, {"lat": lat, "lon": lon}, units)
    return parse_forecast(data)


async def _get_json(deps: WeatherDeps, path: str, query: dict, units: str | None) -> dict:
    """Issue one GET and return the decoded JSON object, raising FetchError on any failure."""
    url = f"{deps.base_url.rstrip('/')}/{path}"
    params = {**query, "units": units or deps.units, "appid": deps.api_key}
    try:
        resp = await deps.http_client.get(url, params=params)
    except httpx.RequestError as e:
        logger.warning("Request to /%s failed (%s): %s", path, _describe(query), e)
        raise NetworkError(str(e) or type(e).__name__) from e

    if not resp.is_success:
        error = ApiError(resp.status_code, _error_message(resp))
        logger.warning("Upstream /%s returned %s (%s)", path, error.message, _describe(query))
        raise error

    if not resp.content:
        logger.warning("Upstream /%s returned an empty body (%s)", path, _describe(query))
        raise EmptyBodyError("empty body")
    try:
        data = resp.json()
    except ValueError as e:
        logger.warning("Upstream /%s returned invalid JSON (%s)", path, _describe(query))
        raise EmptyBodyError(str(e)) from e
    if not isinstance(data, dict) or not data:
        raise EmptyBodyError("body is not a JSON object")

    logger.debug("Upstream /%s succeeded (%s)", path, _describe(query))
    return data


def _error_message(resp: httpx.Response) -> str:
    """Prefer the upstream's own {"message": ...} over the HTTP reason phrase."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return resp.reason_phrase or resp.text


def _describe(query: dict) -> str:
    return ", ".join(f"{k}={v}" for k, v in query.items())


def parse_current(data: dict) -> CurrentConditions:
    """Map a /weather response body into CurrentConditions."""
    try:
        weather = _first_weather(data)
        main = data["main"]
        sys = data.get("sys") or {}
        coord = data.get("coord") or {}
        wind = data.get("wind") or {}
        return CurrentConditions(
            city_display_name=data.get("name", ""),
            temperature_c=main["temp"],
            humidity_pct=main.get("humidity", 0),
            condition_label=weather.get("main", UNKNOWN_CONDITION),
            wind_speed_ms=wind.get("speed", 0.0),
            visibility_m=data.get("visibility", 0),
            sunrise_epoch_s=sys.get("sunrise", 0),
            sunset_epoch_s=sys.get("sunset", 0),
            temp_min_c=main.get("temp_min", main["temp"]),
            temp_max_c=main.get("temp_max", main["temp"]),
            icon_id=map_icon_code(weather.get("icon", DEFAULT_ICON_CODE)),
            observed_at_epoch_s=data.get("dt", 0),
            description=weather.get("description"),
            country=sys.get("country"),
            latitude=coord.get("lat"),
            longitude=coord.get("lon"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise EmptyBodyError(f"unexpected /weather payload: {e}") from e


def parse_forecast(data: dict) -> list[RawForecastSample]:
    """Map a /forecast response body into one RawForecastSample per 3-hour slice."""
    items = data.get("list")
    if not isinstance(items, list):
        raise EmptyBodyError("forecast payload has no 'list'")
    try:
        return [_parse_sample(item) for item in items]
    except (KeyError, TypeError, ValueError) as e:
        raise EmptyBodyError(f"unexpected /forecast payload: {e}") from e


def _parse_sample(item: dict) -> RawForecastSample:
    weather = _first_weather(item)
    main = item["main"]
    return RawForecastSample(
        epoch_s=item["dt"],
        temp_c=main["temp"],
        temp_min_c=main.get("temp_min", main["temp"]),
        temp_max_c=main.get("temp_max", main["temp"]),
        humidity_pct=main.get("humidity", 0),
        condition_label=weather.get("main", UNKNOWN_CONDITION),
        icon_code=weather.get("icon", DEFAULT_ICON_CODE),
        wind_speed_ms=(item.get("wind") or {}).get("speed", 0.0),
        visibility_m=item.get("visibility", 0),
    )


def _first_weather(data: dict) -> dict:
    """Return weather[0], or an empty dict when the array is missing or empty."""
    weather = data.get("weather") or []
    return weather[0] if weather else {}
