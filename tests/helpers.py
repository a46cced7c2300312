# ABOUTME: Builders for OpenWeatherMap payloads and mock httpx clients used across tests.
# ABOUTME: Payload shapes mirror the upstream /weather and /forecast responses.

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import httpx

from weatherapp.deps import WeatherDeps

ICT = timezone(timedelta(hours=7))


def make_response(json_data=None, status_code: int = 200, **kwargs) -> httpx.Response:
    """Build a real httpx.Response bound to a dummy request."""
    if json_data is not None:
        kwargs["json"] = json_data
    return httpx.Response(status_code=status_code, request=httpx.Request("GET", "https://test"), **kwargs)


def mock_client(json_data=None, status_code: int = 200) -> httpx.AsyncClient:
    """Create a mock httpx.AsyncClient that returns the given JSON response."""
    mock = AsyncMock(spec=httpx.AsyncClient)
    mock.get.return_value = make_response(json_data, status_code)
    return mock


def make_deps(client: httpx.AsyncClient) -> WeatherDeps:
    return WeatherDeps(http_client=client, api_key="test-key", base_url="https://api.test/data/2.5")


def current_payload(name: str = "Hanoi", temp: float = 30.2, main: str = "Clear", icon: str = "01d") -> dict:
    """A /weather response body shaped like OpenWeatherMap's."""
    return {
        "coord": {"lat": 21.0245, "lon": 105.8412},
        "weather": [{"id": 800, "main": main, "description": "clear sky", "icon": icon}],
        "main": {"temp": temp, "feels_like": 34.0, "temp_min": 29.0, "temp_max": 31.5, "pressure": 1009, "humidity": 70},
        "visibility": 10000,
        "wind": {"speed": 3.6, "deg": 120},
        "clouds": {"all": 0},
        "dt": 1760850000,
        "sys": {"country": "VN", "sunrise": 1760827000, "sunset": 1760869000},
        "timezone": 25200,
        "id": 1581130,
        "name": name,
        "cod": 200,
    }


def forecast_item(when: datetime, temp: float, main: str = "Clouds", icon: str = "03d") -> dict:
    """One 3-hour entry of a /forecast response body."""
    return {
        "dt": int(when.timestamp()),
        "main": {"temp": temp, "temp_min": temp - 1, "temp_max": temp + 1, "humidity": 80},
        "weather": [{"id": 802, "main": main, "description": "scattered clouds", "icon": icon}],
        "clouds": {"all": 40},
        "wind": {"speed": 2.1, "deg": 90},
        "visibility": 10000,
        "pop": 0.2,
        "sys": {"pod": "d"},
        "dt_txt": when.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
    }


def forecast_payload(items: list[dict]) -> dict:
    return {"cod": "200", "message": 0, "cnt": len(items), "list": items, "city": {"name": "Hanoi"}}
