"""
Tests for the time-bucket aggregator.
"""

import pytest
from datetime import date, timedelta

from workforce_metrics.buckets import (
    DailyHours,
    Granularity,
    aggregate,
    daily_series_from_logs,
    period_label,
    period_labels,
)

from conftest import make_log


def quarter_hour_series(start, days, offset=0):
    """Daily values that are exact multiples of 0.25h."""
    return [DailyHours(start + timedelta(days=i), 0.25 * ((i + offset) % 7)) for i in range(days)]


class TestPeriodLabels:
    """Tests for period labelling."""

    def test_week_label_is_monday(self):
        assert period_label(date(2024, 1, 3), Granularity.WEEK) == "2024-01-01"
        assert period_label(date(2024, 1, 7), Granularity.WEEK) == "2024-01-01"
        assert period_label(date(2024, 1, 8), Granularity.WEEK) == "2024-01-08"

    def test_week_label_across_year(self):
        assert period_label(date(2024, 1, 1), Granularity.WEEK) == "2024-01-01"
        assert period_label(date(2023, 1, 1), Granularity.WEEK) == "2022-12-26"

    def test_month_label(self):
        assert period_label(date(2024, 2, 29), Granularity.MONTH) == "2024-02"

    def test_day_label(self):
        assert period_label(date(2024, 2, 29), Granularity.DAY) == "2024-02-29"

    def test_labels_ordered_and_distinct(self):
        labels = period_labels(date(2024, 1, 3), date(2024, 1, 17), Granularity.WEEK)
        assert labels == ["2024-01-01", "2024-01-08", "2024-01-15"]

        months = period_labels(date(2024, 1, 20), date(2024, 3, 2), Granularity.MONTH)
        assert months == ["2024-01", "2024-02", "2024-03"]


class TestAggregate:
    """Tests for aggregate."""

    def test_weekly_rows(self):
        series = {
            "Alice": [DailyHours(date(2024, 1, 1), 8), DailyHours(date(2024, 1, 9), 4)],
            "Bob": [DailyHours(date(2024, 1, 2), 2.5)],
        }
        result = aggregate(series, date(2024, 1, 1), date(2024, 1, 14), Granularity.WEEK)

        assert result.periods == ["2024-01-01", "2024-01-08"]
        assert result.series_names == ["Alice", "Bob"]
        assert result.rows == [
            {"period": "2024-01-01", "Alice": 8, "Bob": 2.5},
            {"period": "2024-01-08", "Alice": 4, "Bob": 0.0},
        ]

    def test_total_conserved_across_granularities(self):
        start, end = date(2024, 1, 1), date(2024, 3, 31)
        series = {
            "Alice": quarter_hour_series(start, 91),
            "Bob": quarter_hour_series(start, 91, offset=3),
        }

        totals = {
            granularity: aggregate(series, start, end, granularity)
            for granularity in Granularity
        }

        for name in series:
            expected = sum(point.hours for point in series[name])
            for result in totals.values():
                assert result.total_for(name) == pytest.approx(expected)

    def test_zero_series_excluded(self):
        series = {
            "Alice": [DailyHours(date(2024, 1, 1), 3)],
            "Idle": [DailyHours(date(2024, 1, 1), 0)],
            "Empty": [],
        }
        result = aggregate(series, date(2024, 1, 1), date(2024, 1, 7))
        assert result.series_names == ["Alice"]

    def test_points_outside_range_ignored(self):
        series = {
            "Alice": [DailyHours(date(2023, 12, 31), 5), DailyHours(date(2024, 1, 2), 1)],
            "Late": [DailyHours(date(2024, 1, 8), 5)],
        }
        result = aggregate(series, date(2024, 1, 1), date(2024, 1, 7), Granularity.DAY)

        assert result.series_names == ["Alice"]
        assert result.total_for("Alice") == 1
        assert len(result.periods) == 7

    def test_to_dict_rounds(self):
        series = {"Alice": [DailyHours(date(2024, 1, 1), 1 / 3)]}
        data = aggregate(series, date(2024, 1, 1), date(2024, 1, 1), Granularity.MONTH).to_dict()

        assert data["granularity"] == "month"
        assert data["rows"] == [{"period": "2024-01", "Alice": 0.33}]


class TestDailySeries:
    """Tests for building daily series."""

    def test_from_logs(self):
        logs = [
            make_log("a@example.com", "p1", date(2024, 1, 2), 1.5),
            make_log("a@example.com", "p2", date(2024, 1, 1), 2),
            make_log("a@example.com", "p1", date(2024, 1, 2), 0.5),
            make_log("b@example.com", "p1", date(2024, 1, 1), 4),
        ]
        series = daily_series_from_logs(logs, lambda log: log.user_email)

        assert series["a@example.com"] == [
            DailyHours(date(2024, 1, 1), 2.0),
            DailyHours(date(2024, 1, 2), 2.0),
        ]
        assert series["b@example.com"] == [DailyHours(date(2024, 1, 1), 4.0)]
