# ABOUTME: Dependency container for the weather service functions using Pydantic BaseModel.
# ABOUTME: Holds the httpx.AsyncClient, API key and endpoint used to call OpenWeatherMap.

import httpx
from pydantic import BaseModel, ConfigDict

from weatherapp.config import OPENWEATHER_BASE_URL, Settings


class WeatherDeps(BaseModel):
    """Everything a weather_service call needs besides its own arguments."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    http_client: httpx.AsyncClient
    api_key: str
    base_url: str = OPENWEATHER_BASE_URL
    units: str = "metric"

    @classmethod
    def from_settings(cls, settings: Settings, http_client: httpx.AsyncClient | None = None) -> "WeatherDeps":
        return cls(
            http_client=http_client or create_http_client(settings.http_timeout),
            api_key=settings.require_api_key(),
            base_url=settings.base_url,
            units=settings.units,
        )


def create_http_client(timeout: float = 10.0) -> httpx.AsyncClient:
    """Create an httpx client for single-attempt upstream calls.

    No retry transport is installed: a failed request surfaces immediately and the
    caller decides whether to start a fresh fetch.
    """
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout))
