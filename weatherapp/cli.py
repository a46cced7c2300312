# ABOUTME: Command-line entry point that fetches cities and/or the device location.
# ABOUTME: Prints one line per store slot and exits non-zero when any slot ended in error.

import argparse
import asyncio
import logging
import sys
from datetime import tzinfo

from weatherapp.aggregator import local_date_of
from weatherapp.board import WeatherBoard
from weatherapp.config import Settings
from weatherapp.deps import WeatherDeps
from weatherapp.errors import ConfigError
from weatherapp.models import CurrentConditions, Error, FetchState, LocationWeather, Success


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weatherapp",
        description="Fetch current weather and a 5-day forecast from OpenWeatherMap",
    )
    parser.add_argument(
        "--city", action="append", default=[], help="City to fetch (repeatable); defaults to the configured list"
    )
    parser.add_argument("--location", action="store_true", help="Also fetch weather at the configured device location")
    parser.add_argument("--env-file", default=None, help="Path to a .env file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env(args.env_file)
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else settings.log_level.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        return asyncio.run(_run(settings, args.city, args.location))
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2


async def _run(settings: Settings, cities: list[str], with_location: bool) -> int:
    tz = settings.effective_timezone()
    deps = WeatherDeps.from_settings(settings)
    async with deps.http_client:
        board = WeatherBoard(deps, settings=settings)
        await board.fetch_cities(cities or settings.default_cities)
        if with_location:
            await board.fetch_location()

    failed = False
    for _key, name, state in board.city_states(board.store.snapshot().keys()):
        failed = failed or isinstance(state, Error)
        print(format_state(name, state, tz))
    return 1 if failed else 0


def format_state(name: str, state: FetchState | None, tz: tzinfo | None) -> str:
    """Render one store slot as display text."""
    if isinstance(state, Error):
        return f"{name}: error: {state.message}"
    if not isinstance(state, Success):
        return f"{name}: loading"
    payload = state.payload
    if isinstance(payload, LocationWeather):
        lines = [format_current(name, payload.current)]
        for day in payload.daily:
            lines.append(
                f"  {local_date_of(day, tz).isoformat()}  "
                f"{day.temp_min_c:.0f}..{day.temp_max_c:.0f}°C  {day.condition_label}"
            )
        return "\n".join(lines)
    return format_current(name, payload)


def format_current(name: str, current: CurrentConditions) -> str:
    return (
        f"{name}: {current.temperature_c:.1f}°C {current.condition_label} "
        f"(min {current.temp_min_c:.0f} / max {current.temp_max_c:.0f}), "
        f"humidity {current.humidity_pct}%, wind {current.wind_speed_ms:.1f} m/s"
    )


if __name__ == "__main__":
    sys.exit(main())
