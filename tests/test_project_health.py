"""
Tests for project health and the capacity forecaster.
"""

import pytest
from datetime import date

from workforce_metrics.config import MetricsPolicy
from workforce_metrics.predictor import CapacityForecaster
from workforce_metrics.project_health import (
    HealthStatus,
    ProjectHealth,
    ProjectHealthAnalyzer,
    ProjectHealthSummary,
)
from workforce_metrics.scope import DateRange, FilterSpec

from conftest import make_log


class TestProjectHealthAnalyzer:
    """Tests for ProjectHealthAnalyzer class."""

    def test_fte_and_effort_share(self, work_logs, projects, users, teams, week_filter):
        summary = ProjectHealthAnalyzer().analyze(work_logs, projects, users, teams, week_filter)
        apollo, gemini = summary.projects

        assert apollo.project_name == "Apollo"
        assert apollo.total_hours == pytest.approx(40)
        assert apollo.fte == pytest.approx(1.0)
        assert apollo.effort_share == pytest.approx(50)
        assert apollo.user_count == 1
        assert apollo.status == HealthStatus.AT_CAPACITY

        assert gemini.fte == pytest.approx(0.5)
        assert gemini.effort_share == pytest.approx(25)
        assert gemini.status == HealthStatus.MODERATE

    def test_summary(self, work_logs, projects, users, teams, week_filter):
        summary = ProjectHealthAnalyzer().analyze(work_logs, projects, users, teams, week_filter)

        assert summary.total_projects == 2
        assert summary.total_fte == pytest.approx(1.5)
        assert summary.total_hours == pytest.approx(60)
        assert summary.average_effort_share == pytest.approx(37.5)
        assert summary.capacity_utilization == pytest.approx(0.75)
        assert summary.projects_at_capacity == 1
        assert summary.projects_moderate == 1
        assert summary.projects_under_capacity == 0
        assert summary.team_size == 2
        assert summary.working_days == 5

    def test_utilization_trend(self, work_logs, projects, users, teams, week_filter):
        summary = ProjectHealthAnalyzer().analyze(work_logs, projects, users, teams, week_filter)
        gemini = summary.projects[1]

        assert len(gemini.utilization_trend) == 5
        assert gemini.utilization_trend[0].hours == pytest.approx(5)
        assert gemini.utilization_trend[0].utilization == pytest.approx(62.5)
        assert gemini.utilization_trend[2].hours == 0

    def test_forecast_from_trailing_days(self, work_logs, projects, users, teams, week_filter):
        """Gemini averages 4h over the week (one empty day), leaving a 4h gap."""
        summary = ProjectHealthAnalyzer().analyze(work_logs, projects, users, teams, week_filter)
        forecast = summary.projects[1].capacity_forecast

        assert len(forecast) == 30
        assert forecast[0].date == date(2024, 1, 6)
        assert forecast[-1].date == date(2024, 2, 4)
        assert forecast[0].projected_hours == pytest.approx(4)
        assert forecast[0].capacity_gap == pytest.approx(4)

    def test_team_filter_shrinks_capacity(self, work_logs, projects, users, teams, work_week):
        filters = FilterSpec(date_range=work_week, selected_teams=("t1",))
        summary = ProjectHealthAnalyzer().analyze(work_logs, projects, users, teams, filters)
        apollo, gemini = summary.projects

        assert summary.team_size == 1
        assert apollo.effort_share == pytest.approx(100)
        assert gemini.total_hours == 0
        assert gemini.status == HealthStatus.UNDER_CAPACITY

    def test_project_filter_by_id(self, work_logs, projects, users, teams, work_week):
        filters = FilterSpec(date_range=work_week, selected_projects=("p1",))
        summary = ProjectHealthAnalyzer().analyze(work_logs, projects, users, teams, filters)

        assert [p.project_name for p in summary.projects] == ["Apollo"]

    def test_weekend_range(self, projects, users):
        """No working days means zero FTE and effort share, not an error."""
        filters = FilterSpec(date_range=DateRange(date(2024, 1, 6), date(2024, 1, 7)))
        logs = [make_log("alice@example.com", "p1", date(2024, 1, 6), 4)]
        summary = ProjectHealthAnalyzer().analyze(logs, projects, users, [], filters)
        apollo = summary.projects[0]

        assert apollo.total_hours == pytest.approx(4)
        assert apollo.fte == 0
        assert apollo.effort_share == 0
        assert apollo.capacity_forecast[0].projected_hours == 0

    def test_no_users_in_scope(self, work_logs, projects, week_filter):
        summary = ProjectHealthAnalyzer().analyze(work_logs, projects, [], [], week_filter)
        assert all(p.effort_share == 0 for p in summary.projects)
        assert all(p.average_hours_per_user == 0 for p in summary.projects)


class TestProjectHealth:
    """Tests for ProjectHealth classification and serialization."""

    def test_status_boundaries(self):
        assert ProjectHealth("p", "P", fte=1.0).status == HealthStatus.AT_CAPACITY
        assert ProjectHealth("p", "P", fte=0.5).status == HealthStatus.MODERATE
        assert ProjectHealth("p", "P", fte=0.49).status == HealthStatus.UNDER_CAPACITY

    def test_average_hours_per_user(self):
        assert ProjectHealth("p", "P", total_hours=30, user_count=4).average_hours_per_user == 7.5

    def test_to_dict(self):
        project = ProjectHealth("p1", "Apollo", total_hours=10 / 3, fte=1 / 12, user_count=1)
        data = project.to_dict()

        assert data["total_hours"] == 3.33
        assert data["fte"] == 0.08
        assert data["status"] == "under capacity"

    def test_empty_summary(self):
        summary = ProjectHealthSummary()
        assert summary.capacity_utilization == 0
        assert summary.average_effort_share == 0


class TestCapacityForecaster:
    """Tests for the flat-trend forecast."""

    def test_flat_forecast(self):
        """Six hours on every weekday projects 6h with a 2h gap for 30 days."""
        start, end = date(2024, 1, 1), date(2024, 1, 14)
        daily = {day: 6.0 for day in DateRange(start, end).days() if day.weekday() < 5}

        points = CapacityForecaster().forecast(daily, start, end)

        assert len(points) == 30
        assert all(p.projected_hours == pytest.approx(6) for p in points)
        assert all(p.capacity_gap == pytest.approx(2) for p in points)
        assert points[0].date == date(2024, 1, 15)

    def test_only_trailing_window_counts(self):
        """Hours before the trailing seven weekdays are ignored."""
        start, end = date(2024, 1, 1), date(2024, 1, 12)
        daily = {date(2024, 1, 1): 80.0, date(2024, 1, 12): 7.0}

        avg = CapacityForecaster().average_daily_hours(daily, start, end)
        assert avg == pytest.approx(1.0)

    def test_gap_never_negative(self):
        start = end = date(2024, 1, 1)
        points = CapacityForecaster().forecast({start: 12.0}, start, end)
        assert points[0].capacity_gap == 0

    def test_custom_horizon(self):
        policy = MetricsPolicy(forecast_days=7)
        points = CapacityForecaster(policy).forecast({}, date(2024, 1, 1), date(2024, 1, 5))
        assert len(points) == 7
        assert points[0].projected_hours == 0
        assert points[0].capacity_gap == 8
