# ABOUTME: Orchestrates city and device-location fetches and records their outcome in the store.
# ABOUTME: Fans out default-city fetches with a staggered start and bounded concurrency.

import asyncio
import logging
import time
from collections.abc import Callable, Iterable

from weatherapp.aggregator import aggregate_daily
from weatherapp.config import Settings
from weatherapp.deps import WeatherDeps
from weatherapp.errors import FetchError, LocationError
from weatherapp.location import LocationResolver, StaticLocationResolver
from weatherapp.models import FetchState, LocationWeather
from weatherapp.normalize import LOCATION_KEY, display_name, normalize_city_name, query_for_key
from weatherapp.store import WeatherStore
from weatherapp.weather_service import (
    get_current_by_city,
    get_current_by_coordinates,
    get_forecast_by_coordinates,
)

logger = logging.getLogger(__name__)


class WeatherBoard:
    """Entry point for UI code: start fetches here, read results from `store`.

    Each fetch writes only its own key, so one city's failure never touches another
    city's slot. Fetch errors end up as Error states; they are not raised.
    """

    def __init__(
        self,
        deps: WeatherDeps,
        store: WeatherStore | None = None,
        resolver: LocationResolver | None = None,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.deps = deps
        self.store = store or WeatherStore()
        self.settings = settings or Settings(api_key=deps.api_key, base_url=deps.base_url, units=deps.units)
        self.resolver = resolver or StaticLocationResolver.from_settings(self.settings)
        self.clock = clock

    async def fetch_city(self, city: str) -> str | None:
        """Fetch current conditions for a free-text city name.

        Returns the store key the result was written under, or None for a blank query.
        """
        key = normalize_city_name(city)
        if not key:
            logger.warning("Ignoring blank city query %r", city)
            return None
        query = query_for_key(key)
        logger.debug("Fetching weather for %s (key %r, input %r)", query, key, city)

        token = self.store.begin_fetch(key)
        try:
            current = await get_current_by_city(self.deps, query)
        except FetchError as e:
            logger.warning("Weather for %s failed: %s", query, e.message)
            self.store.resolve_error(key, e.message, token)
        else:
            logger.info("Weather for %s: %.1f°C, %s", query, current.temperature_c, current.condition_label)
            self.store.resolve_success(key, current, token)
        return key

    async def fetch_location(self) -> None:
        """Fetch current conditions and the daily forecast window at the device location.

        A location failure is written to the location slot and, when a fallback
        city is configured, followed by a fetch for that city.
        """
        tz = self.settings.effective_timezone()
        token = self.store.begin_fetch(LOCATION_KEY)
        try:
            coords = await self.resolver.get_current_location()
        except LocationError as e:
            logger.warning("Device location unavailable: %s", e)
            self.store.resolve_error(LOCATION_KEY, f"Location error: {e}", token)
            if self.settings.fallback_city:
                logger.info("Falling back to %s", self.settings.fallback_city)
                await self.fetch_city(self.settings.fallback_city)
            return

        requests = [
            asyncio.create_task(get_current_by_coordinates(self.deps, coords.lat, coords.lon)),
            asyncio.create_task(get_forecast_by_coordinates(self.deps, coords.lat, coords.lon)),
        ]
        try:
            current, samples = await asyncio.gather(*requests)
        except FetchError as e:
            logger.warning("Weather at %.4f,%.4f failed: %s", coords.lat, coords.lon, e.message)
            self.store.resolve_error(LOCATION_KEY, e.message, token)
            return
        finally:
            # gather leaves the sibling running when one request fails.
            for task in requests:
                task.cancel()
            await asyncio.gather(*requests, return_exceptions=True)

        daily = aggregate_daily(samples, reference_epoch_s=int(self.clock()), tz=tz)
        self.store.resolve_success(LOCATION_KEY, LocationWeather(current=current, daily=daily), token)

    async def fetch_cities(self, cities: Iterable[str]) -> list[str | None]:
        """Fetch several cities concurrently.

        Launches are staggered by `stagger_seconds` and at most `max_concurrency`
        requests are in flight at once. Returns the store key for each input.
        """
        semaphore = asyncio.Semaphore(self.settings.max_concurrency)

        async def run(index: int, city: str) -> str | None:
            await asyncio.sleep(index * self.settings.stagger_seconds)
            async with semaphore:
                return await self.fetch_city(city)

        return list(await asyncio.gather(*(run(i, city) for i, city in enumerate(cities))))

    async def fetch_default_cities(self) -> list[str | None]:
        return await self.fetch_cities(self.settings.default_cities)

    def city_states(self, keys: Iterable[str]) -> list[tuple[str, str, FetchState | None]]:
        """(key, display name, state) for each key, in the given order."""
        snapshot = self.store.snapshot()
        return [(key, display_name(key), snapshot.get(key)) for key in keys]
