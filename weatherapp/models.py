# ABOUTME: Pydantic models for normalized weather payloads and per-city fetch states.
# ABOUTME: Defines CurrentConditions, forecast samples, daily summaries and the FetchState union.

from enum import Enum
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class IconId(str, Enum):
    """Icon shown for a weather condition."""

    SUNNY = "sunny"
    CLOUDS = "clouds"
    RAIN = "rain"
    STORM = "storm"


class Coordinates(BaseModel):
    """A device or city position in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float


class CurrentConditions(BaseModel):
    """Current weather for one place, derived from a /weather response."""

    model_config = ConfigDict(frozen=True)

    city_display_name: str
    temperature_c: float
    humidity_pct: int
    condition_label: str
    wind_speed_ms: float
    visibility_m: int
    sunrise_epoch_s: int
    sunset_epoch_s: int
    temp_min_c: float
    temp_max_c: float
    icon_id: IconId
    observed_at_epoch_s: int
    description: str | None = None
    country: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class RawForecastSample(BaseModel):
    """One 3-hour slice from the /forecast endpoint."""

    model_config = ConfigDict(frozen=True)

    epoch_s: int
    temp_c: float
    temp_min_c: float
    temp_max_c: float
    humidity_pct: int
    condition_label: str
    icon_code: str
    wind_speed_ms: float
    visibility_m: int


class DailyForecast(BaseModel):
    """Summary of one calendar day of forecast samples."""

    model_config = ConfigDict(frozen=True)

    date_epoch_s: int
    temp_min_c: float
    temp_max_c: float
    condition_label: str
    icon_id: IconId


class LocationWeather(BaseModel):
    """Payload stored for the device-location slot: current conditions plus the daily window."""

    model_config = ConfigDict(frozen=True)

    current: CurrentConditions
    daily: list[DailyForecast]


class Pending(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["pending"] = "pending"


class Success(BaseModel, Generic[T]):
    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    payload: T


class Error(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["error"] = "error"
    message: str


FetchState = Pending | Success | Error
