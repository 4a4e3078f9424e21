"""
Tests for the calendar resolver.
"""

import pytest
from datetime import date

from workforce_metrics.calendar import (
    available_hours,
    day_capacity,
    is_available,
    iter_days,
    trailing_working_days,
    working_days,
)
from workforce_metrics.config import MetricsPolicy


class TestWorkingDays:
    """Tests for weekday counting."""

    def test_full_week(self):
        """Monday to Sunday holds five working days."""
        assert working_days(date(2024, 1, 1), date(2024, 1, 7)) == 5

    def test_weekend_only(self):
        assert working_days(date(2024, 1, 6), date(2024, 1, 7)) == 0

    def test_single_day(self):
        assert working_days(date(2024, 1, 3), date(2024, 1, 3)) == 1

    def test_end_before_start(self):
        """Reversed range is empty, not an error."""
        assert working_days(date(2024, 1, 7), date(2024, 1, 1)) == 0
        assert list(iter_days(date(2024, 1, 7), date(2024, 1, 1))) == []

    def test_iter_days_inclusive(self):
        days = list(iter_days(date(2024, 1, 30), date(2024, 2, 2)))
        assert days[0] == date(2024, 1, 30)
        assert days[-1] == date(2024, 2, 2)
        assert len(days) == 4

    def test_trailing_working_days(self):
        """Last seven weekdays of a two-week range, oldest first."""
        days = trailing_working_days(date(2024, 1, 1), date(2024, 1, 14), 7)
        assert len(days) == 7
        assert days[0] == date(2024, 1, 4)
        assert days[-1] == date(2024, 1, 12)

    def test_trailing_working_days_short_range(self):
        days = trailing_working_days(date(2024, 1, 4), date(2024, 1, 7), 7)
        assert days == [date(2024, 1, 4), date(2024, 1, 5)]


class TestAvailability:
    """Tests for shift-aware availability."""

    def test_no_shifts_counts_every_day(self):
        """Days without a roster entry count as general shifts, weekends included."""
        result = available_hours(date(2024, 1, 1), date(2024, 1, 7))
        assert result.available_hours == 56
        assert result.available_days == 7
        assert result.leave_count == 0

    def test_leave_and_holiday(self):
        shift_map = {date(2024, 1, 2): "L", date(2024, 1, 3): "H", date(2024, 1, 4): "N"}
        result = available_hours(date(2024, 1, 1), date(2024, 1, 5), shift_map)
        assert result.available_hours == 24
        assert result.available_days == 3
        assert result.leave_count == 1

    def test_lowercase_codes(self):
        result = available_hours(date(2024, 1, 1), date(2024, 1, 1), {date(2024, 1, 1): "l"})
        assert result.available_hours == 0
        assert result.leave_count == 1
        assert not result.has_available_days

    def test_end_before_start_is_zero(self):
        result = available_hours(date(2024, 1, 5), date(2024, 1, 1))
        assert result.available_hours == 0
        assert result.leave_count == 0
        assert result.available_days == 0

    def test_custom_hours_per_day(self):
        policy = MetricsPolicy(standard_hours_per_day=7.5)
        result = available_hours(date(2024, 1, 1), date(2024, 1, 2), policy=policy)
        assert result.available_hours == pytest.approx(15.0)

    def test_day_capacity(self):
        shift_map = {date(2024, 1, 1): "H"}
        assert day_capacity(date(2024, 1, 1), shift_map) == 0
        assert day_capacity(date(2024, 1, 2), shift_map) == 8

    def test_is_available(self):
        assert is_available("G")
        assert is_available("M")
        assert is_available("X")  # unknown codes are working days
        assert not is_available("H")
        assert not is_available("L")
