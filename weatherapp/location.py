# ABOUTME: Device-location boundary consumed by the location-based weather fetch.
# ABOUTME: Defines the LocationResolver protocol and a resolver backed by configured coordinates.

from typing import Protocol

from weatherapp.config import Settings
from weatherapp.errors import LocationUnavailableError
from weatherapp.models import Coordinates


class LocationResolver(Protocol):
    async def get_current_location(self) -> Coordinates:
        """Return the device position or raise a LocationError subclass."""
        ...


class StaticLocationResolver:
    """Resolves to a fixed position, or fails as unavailable when none is configured."""

    def __init__(self, coordinates: Coordinates | None = None):
        self.coordinates = coordinates

    @classmethod
    def from_settings(cls, settings: Settings) -> "StaticLocationResolver":
        if settings.latitude is None or settings.longitude is None:
            return cls(None)
        return cls(Coordinates(lat=settings.latitude, lon=settings.longitude))

    async def get_current_location(self) -> Coordinates:
        if self.coordinates is None:
            raise LocationUnavailableError()
        return self.coordinates
