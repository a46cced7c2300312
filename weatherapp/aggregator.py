# ABOUTME: Reduces 3-hourly forecast samples into a fixed-length window of daily summaries.
# ABOUTME: Buckets by local calendar date in an explicit timezone and pads missing days.

import time
from datetime import date, datetime, tzinfo
from itertools import groupby

from weatherapp.models import DailyForecast, IconId, RawForecastSample
from weatherapp.weather_service import UNKNOWN_CONDITION, map_icon_code

DEFAULT_WINDOW_DAYS = 5
SECONDS_PER_DAY = 86_400


def aggregate_daily(
    samples: list[RawForecastSample],
    window_days: int = DEFAULT_WINDOW_DAYS,
    reference_epoch_s: int | None = None,
    tz: tzinfo | None = None,
) -> list[DailyForecast]:
    """Summarize forecast samples into exactly `window_days` daily entries.

    Samples are grouped by their calendar date in `tz` (the system local zone,
    resolved per instant, when omitted). Each day keeps the min/max temperature
    over its samples and the condition of its chronologically first sample. Days before the reference date
    are dropped; missing trailing days are filled with placeholder entries dated
    `reference_epoch_s + i days`.
    """
    if reference_epoch_s is None:
        reference_epoch_s = int(time.time())
    today = _local_date(reference_epoch_s, tz)

    ordered = sorted(samples, key=lambda s: s.epoch_s)
    days = [
        summarize_day(list(group))
        for day, group in groupby(ordered, key=lambda s: _local_date(s.epoch_s, tz))
        if day >= today
    ]
    window = days[:window_days]

    for i in range(len(window), window_days):
        window.append(placeholder_day(reference_epoch_s + i * SECONDS_PER_DAY))
    return window


def summarize_day(samples: list[RawForecastSample]) -> DailyForecast:
    """Reduce one day's samples (chronologically ordered) to a DailyForecast."""
    first = samples[0]
    temps = [s.temp_c for s in samples]
    return DailyForecast(
        date_epoch_s=first.epoch_s,
        temp_min_c=min(temps),
        temp_max_c=max(temps),
        condition_label=first.condition_label,
        icon_id=map_icon_code(first.icon_code),
    )


def placeholder_day(epoch_s: int) -> DailyForecast:
    return DailyForecast(
        date_epoch_s=epoch_s,
        temp_min_c=0.0,
        temp_max_c=0.0,
        condition_label=UNKNOWN_CONDITION,
        icon_id=IconId.SUNNY,
    )


def _local_date(epoch_s: int, tz: tzinfo | None) -> date:
    # With tz=None fromtimestamp uses the platform localtime, which applies DST per instant.
    return datetime.fromtimestamp(epoch_s, tz=tz).date()


def local_date_of(forecast: DailyForecast, tz: tzinfo | None) -> date:
    """Calendar date a DailyForecast falls on in `tz` (None for the system local zone)."""
    return _local_date(forecast.date_epoch_s, tz)
