# ABOUTME: Runtime settings loaded from the environment and an optional .env file.
# ABOUTME: Holds the OpenWeatherMap key, endpoint, default cities and fan-out policy.

import logging
import os
from datetime import tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from weatherapp.errors import ConfigError
from weatherapp.normalize import DEFAULT_CITIES

OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"


class Settings(BaseModel):
    """Configuration for the weather data layer."""

    api_key: str = ""
    base_url: str = OPENWEATHER_BASE_URL
    units: str = "metric"
    timezone: str | None = None
    default_cities: list[str] = Field(default_factory=lambda: list(DEFAULT_CITIES))
    fallback_city: str | None = None
    stagger_seconds: float = Field(default=0.5, ge=0)
    max_concurrency: int = Field(default=4, ge=1)
    http_timeout: float = Field(default=10.0, gt=0)
    latitude: float | None = None
    longitude: float | None = None
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "Settings":
        """Build settings from environment variables, after loading a .env file if present."""
        load_dotenv(env_file)
        raw = {
            "api_key": os.environ.get("OPENWEATHER_API_KEY", ""),
            "base_url": os.environ.get("OPENWEATHER_BASE_URL", OPENWEATHER_BASE_URL),
            "units": os.environ.get("WEATHER_UNITS", "metric"),
            "timezone": os.environ.get("WEATHER_TIMEZONE") or None,
            "fallback_city": os.environ.get("WEATHER_FALLBACK_CITY") or None,
            "stagger_seconds": os.environ.get("WEATHER_STAGGER_SECONDS", 0.5),
            "max_concurrency": os.environ.get("WEATHER_MAX_CONCURRENCY", 4),
            "http_timeout": os.environ.get("WEATHER_HTTP_TIMEOUT", 10.0),
            "latitude": os.environ.get("WEATHER_LATITUDE") or None,
            "longitude": os.environ.get("WEATHER_LONGITUDE") or None,
            "log_level": os.environ.get("WEATHER_LOG_LEVEL", "WARNING"),
        }
        cities = os.environ.get("WEATHER_DEFAULT_CITIES")
        if cities:
            raw["default_cities"] = [c.strip() for c in cities.split(",") if c.strip()]
        try:
            return cls(**raw)
        except ValidationError as e:
            raise ConfigError(f"Invalid weather settings: {e}") from e

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigError("OPENWEATHER_API_KEY is not set")
        return self.api_key

    def effective_timezone(self) -> tzinfo | None:
        """The zone used to bucket forecast samples into calendar days.

        None when WEATHER_TIMEZONE is unset, meaning the system local zone with its
        UTC offset looked up per instant, so DST changes inside the window are honored.
        """
        if not self.timezone:
            return None
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigError(f"Unknown timezone: {self.timezone}") from e
