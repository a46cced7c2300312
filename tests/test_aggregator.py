# ABOUTME: Contract tests for daily forecast aggregation.
# ABOUTME: Validates local-date bucketing, min/max reduction, past-day dropping and placeholder padding.

import time
from datetime import date, datetime, timedelta, timezone

import pytest

from tests.helpers import ICT
from weatherapp.aggregator import SECONDS_PER_DAY, aggregate_daily, local_date_of, summarize_day
from weatherapp.models import IconId, RawForecastSample

REFERENCE = datetime(2026, 10, 19, 8, 0, tzinfo=ICT)
REFERENCE_S = int(REFERENCE.timestamp())


def sample(when: datetime, temp: float, label: str = "Clouds", icon: str = "03d") -> RawForecastSample:
    return RawForecastSample(
        epoch_s=int(when.timestamp()),
        temp_c=temp,
        temp_min_c=temp,
        temp_max_c=temp,
        humidity_pct=75,
        condition_label=label,
        icon_code=icon,
        wind_speed_ms=2.0,
        visibility_m=10000,
    )


def every_three_hours(start: datetime, count: int) -> list[RawForecastSample]:
    return [sample(start + timedelta(hours=3 * i), 20.0 + i % 8) for i in range(count)]


class TestAggregateShape:
    @pytest.mark.parametrize("count", [0, 1, 8, 40, 50])
    def test_always_five_entries(self, count):
        """The window always has exactly five entries.

        Implementation: Aggregates 0, 1, 8, 40 and 50 three-hourly samples.
        Passing implies: Callers never special-case short forecast lists.
        """
        samples = every_three_hours(REFERENCE, count)
        assert len(aggregate_daily(samples, reference_epoch_s=REFERENCE_S, tz=ICT)) == 5

    def test_custom_window(self):
        """window_days controls the output length.

        Implementation: Aggregates with window_days=3 and 7.
        Passing implies: The window is a parameter, not a constant.
        """
        samples = every_three_hours(REFERENCE, 16)
        assert len(aggregate_daily(samples, window_days=3, reference_epoch_s=REFERENCE_S, tz=ICT)) == 3
        assert len(aggregate_daily(samples, window_days=7, reference_epoch_s=REFERENCE_S, tz=ICT)) == 7

    def test_empty_input_is_all_placeholders(self):
        """No samples gives five zero-valued "Unknown" days dated from the reference.

        Implementation: Aggregates an empty list.
        Passing implies: A forecast outage still renders a full calendar row.
        """
        result = aggregate_daily([], reference_epoch_s=REFERENCE_S, tz=ICT)

        assert [d.date_epoch_s for d in result] == [REFERENCE_S + i * SECONDS_PER_DAY for i in range(5)]
        for day in result:
            assert day.temp_min_c == 0
            assert day.temp_max_c == 0
            assert day.condition_label == "Unknown"
            assert day.icon_id is IconId.SUNNY


class TestAggregateValues:
    def test_min_max_over_the_day(self):
        """A day's min and max come from all its samples.

        Implementation: Aggregates three samples at 20, 25 and 18 degrees on one day.
        Passing implies: The daily range covers every 3-hour slice.
        """
        samples = [
            sample(REFERENCE.replace(hour=9), 20.0),
            sample(REFERENCE.replace(hour=12), 25.0),
            sample(REFERENCE.replace(hour=15), 18.0),
        ]
        today = aggregate_daily(samples, reference_epoch_s=REFERENCE_S, tz=ICT)[0]
        assert today.temp_min_c == 18
        assert today.temp_max_c == 25

    def test_condition_from_first_sample(self):
        """Label and icon come from the chronologically first sample, not a vote.

        Implementation: Supplies one storm slice followed by two clear ones, out of order.
        Passing implies: "First sample of the day" resolves representativeness.
        """
        samples = [
            sample(REFERENCE.replace(hour=12), 30.0, "Clear", "01d"),
            sample(REFERENCE.replace(hour=15), 31.0, "Clear", "01d"),
            sample(REFERENCE.replace(hour=9), 27.0, "Thunderstorm", "11d"),
        ]
        today = aggregate_daily(samples, reference_epoch_s=REFERENCE_S, tz=ICT)[0]
        assert today.condition_label == "Thunderstorm"
        assert today.icon_id is IconId.STORM
        assert today.date_epoch_s == int(REFERENCE.replace(hour=9).timestamp())

    def test_days_sorted_ascending(self):
        """Days come out in calendar order regardless of input order.

        Implementation: Supplies samples for three days in reverse.
        Passing implies: The calendar row reads left to right.
        """
        samples = [sample(REFERENCE + timedelta(days=d), 20.0 + d) for d in (2, 1, 0)]
        result = aggregate_daily(samples, reference_epoch_s=REFERENCE_S, tz=ICT)
        assert [local_date_of(d, ICT).day for d in result[:3]] == [19, 20, 21]

    def test_past_days_are_dropped(self):
        """Samples dated before the reference day are ignored.

        Implementation: Supplies one sample yesterday and one today.
        Passing implies: The window starts at today.
        """
        samples = [
            sample(REFERENCE - timedelta(days=1), 5.0, "Rain", "10d"),
            sample(REFERENCE, 22.0, "Clear", "01d"),
        ]
        result = aggregate_daily(samples, reference_epoch_s=REFERENCE_S, tz=ICT)
        assert result[0].temp_max_c == 22.0
        assert result[0].condition_label == "Clear"
        assert all(d.temp_min_c != 5.0 for d in result)

    def test_missing_days_are_padded_at_the_tail(self):
        """Two real days are followed by three placeholders.

        Implementation: Supplies samples for today and tomorrow only.
        Passing implies: Placeholders are dated reference + index days.
        """
        samples = [sample(REFERENCE, 20.0), sample(REFERENCE + timedelta(days=1), 21.0)]
        result = aggregate_daily(samples, reference_epoch_s=REFERENCE_S, tz=ICT)

        assert result[1].temp_max_c == 21.0
        for i in range(2, 5):
            assert result[i].condition_label == "Unknown"
            assert result[i].date_epoch_s == REFERENCE_S + i * SECONDS_PER_DAY

    def test_buckets_by_effective_timezone(self):
        """The same instants bucket differently in different zones.

        Implementation: Aggregates 16:00 and 18:00 UTC samples in UTC and in UTC+7.
        Passing implies: Day boundaries follow the configured zone, not UTC.
        """
        late = datetime(2026, 10, 19, 16, 0, tzinfo=timezone.utc)
        later = datetime(2026, 10, 19, 18, 0, tzinfo=timezone.utc)
        samples = [sample(late, 10.0), sample(later, 30.0)]
        reference = int(datetime(2026, 10, 19, 0, 0, tzinfo=timezone.utc).timestamp())

        in_utc = aggregate_daily(samples, reference_epoch_s=reference, tz=timezone.utc)
        in_ict = aggregate_daily(samples, reference_epoch_s=reference, tz=ICT)

        assert (in_utc[0].temp_min_c, in_utc[0].temp_max_c) == (10.0, 30.0)
        assert in_utc[1].condition_label == "Unknown"
        # 16:00 UTC is 23:00 on the 19th in UTC+7; 18:00 UTC is already the 20th.
        assert (in_ict[0].temp_min_c, in_ict[0].temp_max_c) == (10.0, 10.0)
        assert (in_ict[1].temp_min_c, in_ict[1].temp_max_c) == (30.0, 30.0)

    @pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")
    def test_system_zone_honors_dst_change(self, monkeypatch):
        """Without an explicit zone, each instant uses the local offset in force at that instant.

        Implementation: Switches the process to Central European rules and aggregates
        across the 2026-10-25 end of summer time.
        Passing implies: Days after a DST change are not bucketed an hour off.
        """
        monkeypatch.setenv("TZ", "CET-1CEST,M3.5.0,M10.5.0/3")
        time.tzset()
        try:
            reference = datetime(2026, 10, 24, 10, 0, tzinfo=timezone.utc)
            samples = [
                sample(reference, 10.0),
                # 00:30 on the 25th in summer time (UTC+2).
                sample(datetime(2026, 10, 24, 22, 30, tzinfo=timezone.utc), 30.0),
                # 23:30 on the 25th in winter time (UTC+1).
                sample(datetime(2026, 10, 25, 22, 30, tzinfo=timezone.utc), 20.0),
            ]
            result = aggregate_daily(samples, reference_epoch_s=int(reference.timestamp()))

            assert (result[0].temp_min_c, result[0].temp_max_c) == (10.0, 10.0)
            assert (result[1].temp_min_c, result[1].temp_max_c) == (20.0, 30.0)
            assert local_date_of(result[1], None) == date(2026, 10, 25)
            assert result[2].condition_label == "Unknown"
        finally:
            monkeypatch.undo()
            time.tzset()


class TestSummarizeDay:
    def test_uses_temp_not_slice_extremes(self):
        """Daily range is built from each slice's temp reading.

        Implementation: Summarizes a slice whose temp_min/temp_max differ from temp.
        Passing implies: Min/max track the forecast temperature curve.
        """
        s = RawForecastSample(
            epoch_s=REFERENCE_S,
            temp_c=24.0,
            temp_min_c=20.0,
            temp_max_c=28.0,
            humidity_pct=60,
            condition_label="Clouds",
            icon_code="04d",
            wind_speed_ms=1.0,
            visibility_m=9000,
        )
        day = summarize_day([s])
        assert day.temp_min_c == day.temp_max_c == 24.0
        assert day.icon_id is IconId.CLOUDS
