"""Shared fixtures for Workforce Metrics tests."""

import pytest
from datetime import date, datetime

from workforce_metrics.engine import Snapshot
from workforce_metrics.integrations import (
    IssueRecord,
    Project,
    ShiftScheduleEntry,
    Team,
    User,
    WorkLogRecord,
)
from workforce_metrics.scope import DateRange, FilterSpec


HOUR = 3600


def make_log(email, project_id, day, hours, categories=None):
    """Work log starting at 09:00 on ``day``."""
    return WorkLogRecord(
        user_email=email,
        project_id=project_id,
        start_time=datetime(day.year, day.month, day.day, 9, 0),
        logged_duration_seconds=int(hours * HOUR),
        category_selections=categories or {},
    )


def make_issue(key, status, created, updated, assignee=None, priority=None, project="Apollo"):
    return IssueRecord(
        key=key,
        project_key=key.split("-")[0],
        project_name=project,
        status_name=status,
        created_at=created,
        updated_at=updated,
        assignee_email=assignee,
        priority_name=priority,
    )


@pytest.fixture
def work_week():
    """Monday 2024-01-01 to Friday 2024-01-05."""
    return DateRange(date(2024, 1, 1), date(2024, 1, 5))


@pytest.fixture
def week_filter(work_week):
    return FilterSpec(date_range=work_week)


@pytest.fixture
def users():
    return [
        User(email="alice@example.com", full_name="Alice"),
        User(email="bob@example.com", full_name="Bob"),
    ]


@pytest.fixture
def projects():
    return [
        Project(id="p1", name="Apollo"),
        Project(id="p2", name="Gemini"),
    ]


@pytest.fixture
def teams():
    return [
        Team(id="t1", name="Platform", members=frozenset({"alice@example.com"})),
        Team(id="t2", name="Apps", members=frozenset({"bob@example.com"})),
    ]


@pytest.fixture
def work_logs(work_week):
    """Alice logs 8h every weekday on Apollo; Bob logs 5h on four days on Gemini."""
    logs = [
        make_log("alice@example.com", "p1", day, 8, {"Work Type": "Development"})
        for day in work_week.days()
    ]
    logs += [
        make_log("bob@example.com", "p2", day, 5, {"Work Type": "Support"})
        for day in work_week.days()
        if day != date(2024, 1, 3)
    ]
    return logs


@pytest.fixture
def shifts():
    """Bob is on leave on Wednesday."""
    return [
        ShiftScheduleEntry("bob@example.com", date(2024, 1, 3), "L"),
        ShiftScheduleEntry("alice@example.com", date(2024, 1, 2), "M"),
    ]


@pytest.fixture
def issues():
    return [
        make_issue("APO-1", "Done", datetime(2024, 1, 1, 9), datetime(2024, 1, 3, 10),
                   assignee="alice@example.com", priority="High"),
        make_issue("APO-2", "Closed", datetime(2024, 1, 2, 9), datetime(2024, 1, 4, 8),
                   assignee="alice@example.com", priority=None),
        make_issue("GEM-1", "In Progress", datetime(2024, 1, 2, 9), datetime(2024, 1, 4, 9),
                   assignee="bob@example.com", priority="Low", project="Gemini"),
        make_issue("GEM-2", "To Do", datetime(2024, 1, 3, 9), datetime(2024, 1, 3, 9),
                   priority="Medium", project="Gemini"),
    ]


@pytest.fixture
def snapshot(work_logs, shifts, users, projects, teams, issues):
    return Snapshot.of(
        work_logs=work_logs,
        shifts=shifts,
        users=users,
        projects=projects,
        teams=teams,
        issues=issues,
    )
