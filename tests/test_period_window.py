"""Unit tests for named analytics windows."""

import pytest
from datetime import date, datetime, timezone

from common.utils import BadRequestException
from moodlog.services.analytics import PERIODS, resolve_period


def utc(year, month, day):
    return datetime(year, month, day, tzinfo=timezone.utc)


class TestResolvePeriod:
    @pytest.mark.parametrize(
        "period,start",
        [
            ("week", utc(2025, 6, 4)),
            ("month", utc(2025, 5, 11)),
            ("3months", utc(2025, 3, 11)),
            ("year", utc(2024, 6, 11)),
        ],
    )
    def test_bounded_windows(self, today, period, start):
        window = resolve_period(period, today=today)

        assert window.period == period
        assert window.start == start
        # end is the start of tomorrow, exclusive
        assert window.end == utc(2025, 6, 12)

    def test_all_is_unbounded(self, today):
        window = resolve_period("all", today=today)
        assert window.start is None
        assert window.end is None
        assert window.to_dict() == {"start": None, "end": None}

    def test_month_clamps_to_shorter_month(self):
        window = resolve_period("month", today=date(2025, 3, 31))
        assert window.start == utc(2025, 2, 28)

    def test_year_from_leap_day(self):
        window = resolve_period("year", today=date(2024, 2, 29))
        assert window.start == utc(2023, 2, 28)

    def test_windows_are_utc(self, today):
        window = resolve_period("week", today=today)
        assert window.start.tzinfo == timezone.utc
        assert window.end.tzinfo == timezone.utc

    @pytest.mark.parametrize("period", ["", "day", "WEEK", "6months"])
    def test_unknown_period_is_rejected(self, today, period):
        with pytest.raises(BadRequestException) as exc_info:
            resolve_period(period, today=today)

        assert exc_info.value.status_code == 400
        assert exc_info.value.code == "INVALID_PERIOD"

    def test_known_periods(self):
        assert PERIODS == ("week", "month", "3months", "year", "all")
