"""Tests for local-calendar period helpers."""

import pytest
from datetime import date, datetime, timezone

from pocket_ledger.ledger import (
    is_in_period,
    period_start,
    recent_months,
    shift_month,
    start_of_day,
    start_of_month,
    start_of_week,
    to_local,
)
from pocket_ledger.models.ledger import Period


# Wednesday
WEDNESDAY = datetime(2024, 3, 13, 15, 30)


class TestToLocal:
    """Tests for converting moments to naive local time."""

    def test_naive_datetime_unchanged(self):
        assert to_local(WEDNESDAY) == WEDNESDAY

    def test_date_becomes_midnight(self):
        assert to_local(date(2024, 3, 13)) == datetime(2024, 3, 13, 0, 0)

    def test_aware_datetime_converted_to_local_zone(self):
        """Test aware datetimes end up naive in the system zone."""
        aware = datetime(2024, 3, 13, 12, 0, tzinfo=timezone.utc)
        local = to_local(aware)
        assert local.tzinfo is None
        assert local == aware.astimezone().replace(tzinfo=None)


class TestPeriodStarts:
    """Tests for day / week / month boundaries."""

    def test_start_of_day(self):
        assert start_of_day(WEDNESDAY) == date(2024, 3, 13)

    def test_start_of_week_monday(self):
        """Test ISO weeks start on Monday."""
        assert start_of_week(WEDNESDAY, first_weekday=0) == date(2024, 3, 11)

    def test_start_of_week_sunday(self):
        """Test a Sunday-first calendar."""
        assert start_of_week(WEDNESDAY, first_weekday=6) == date(2024, 3, 10)

    def test_start_of_week_on_first_day(self):
        assert start_of_week(datetime(2024, 3, 11, 0, 1), first_weekday=0) == date(2024, 3, 11)

    def test_start_of_month(self):
        assert start_of_month(WEDNESDAY) == date(2024, 3, 1)

    def test_period_start_dispatch(self):
        assert period_start(WEDNESDAY, Period.DAY) == date(2024, 3, 13)
        assert period_start(WEDNESDAY, Period.WEEK, 0) == date(2024, 3, 11)
        assert period_start(WEDNESDAY, Period.MONTH) == date(2024, 3, 1)


class TestIsInPeriod:
    """Tests for the shared period predicate."""

    def test_same_day(self):
        assert is_in_period(datetime(2024, 3, 13, 0, 0), Period.DAY, WEDNESDAY)
        assert not is_in_period(datetime(2024, 3, 12, 23, 59), Period.DAY, WEDNESDAY)

    def test_week_boundary_follows_first_weekday(self):
        """Test Sunday belongs to the previous ISO week but the next Sunday-first week."""
        sunday = datetime(2024, 3, 10, 9, 0)
        assert not is_in_period(sunday, Period.WEEK, WEDNESDAY, first_weekday=0)
        assert is_in_period(sunday, Period.WEEK, WEDNESDAY, first_weekday=6)

    def test_month_is_calendar_month(self):
        """Test "this month" is the calendar month, not the last 30 days."""
        assert is_in_period(datetime(2024, 3, 1), Period.MONTH, WEDNESDAY)
        assert not is_in_period(datetime(2024, 2, 29, 23, 0), Period.MONTH, WEDNESDAY)

    def test_same_month_other_year(self):
        assert not is_in_period(datetime(2023, 3, 13), Period.MONTH, WEDNESDAY)

    def test_missing_date_in_no_period(self):
        for period in Period:
            assert is_in_period(None, period, WEDNESDAY) is False


class TestMonthSelector:
    """Tests for month arithmetic used by the month selector."""

    @pytest.mark.parametrize(
        "offset,expected",
        [
            (0, date(2024, 1, 1)),
            (-1, date(2023, 12, 1)),
            (11, date(2024, 12, 1)),
            (12, date(2025, 1, 1)),
            (-25, date(2021, 12, 1)),
        ],
    )
    def test_shift_month(self, offset, expected):
        assert shift_month(date(2024, 1, 15), offset) == expected

    def test_recent_months_oldest_first(self):
        assert recent_months(date(2024, 3, 5), 3) == [
            date(2024, 1, 1),
            date(2024, 2, 1),
            date(2024, 3, 1),
        ]

    def test_recent_months_default_count(self):
        """Test the default count comes from settings."""
        months = recent_months(date(2024, 3, 5))
        assert len(months) == 12
        assert months[-1] == date(2024, 3, 1)
        assert months[0] == date(2023, 4, 1)
