"""
Workload Analyzer

Per-user utilization against shift-aware availability, with a team roll-up.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable, Optional

from .calendar import available_hours, day_capacity, iter_days
from .config import MetricsPolicy
from .grouping import UNKNOWN, group_by, sum_hours
from .integrations import (
    Project,
    ShiftScheduleEntry,
    Team,
    User,
    WorkLogRecord,
    shift_map_for,
)
from .scope import FilterSpec, project_index


logger = logging.getLogger(__name__)


class WorkloadStatus(Enum):
    """Utilization health status."""
    UNDERUTILIZED = "underutilized"  # below 60%
    OPTIMAL = "optimal"              # 60-120%
    OVERLOADED = "overloaded"        # above 120%


@dataclass
class DailyWorkload:
    """Logged hours and utilization for one calendar day."""
    date: date
    hours: float = 0.0
    utilization: float = 0.0

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "hours": round(self.hours, 2),
            "utilization": round(self.utilization, 2)
        }


@dataclass
class UserWorkload:
    """Complete workload picture for a team member."""
    email: str
    name: str

    total_logged_hours: float = 0.0
    available_hours: float = 0.0
    available_days: int = 0
    leave_count: int = 0

    project_distribution: dict[str, float] = field(default_factory=dict)
    work_type_distribution: dict[str, float] = field(default_factory=dict)
    daily_workload: list[DailyWorkload] = field(default_factory=list)
    shift_data: dict[date, str] = field(default_factory=dict)

    status_thresholds: tuple[float, float] = (60.0, 120.0)

    @property
    def utilization_rate(self) -> float:
        if self.available_hours <= 0:
            return 0.0
        return self.total_logged_hours / self.available_hours * 100

    @property
    def overtime_hours(self) -> float:
        return max(0.0, self.total_logged_hours - self.available_hours)

    @property
    def idle_hours(self) -> float:
        return max(0.0, self.available_hours - self.total_logged_hours)

    @property
    def has_work_logs(self) -> bool:
        return self.total_logged_hours > 0

    @property
    def status(self) -> WorkloadStatus:
        """Get workload status based on utilization."""
        underutilized_below, overloaded_above = self.status_thresholds
        if self.utilization_rate > overloaded_above:
            return WorkloadStatus.OVERLOADED
        elif self.utilization_rate < underutilized_below:
            return WorkloadStatus.UNDERUTILIZED
        return WorkloadStatus.OPTIMAL

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "email": self.email,
            "name": self.name,
            "hours": {
                "logged": round(self.total_logged_hours, 2),
                "available": round(self.available_hours, 2),
                "overtime": round(self.overtime_hours, 2),
                "idle": round(self.idle_hours, 2)
            },
            "utilization_rate": round(self.utilization_rate, 2),
            "leave_count": self.leave_count,
            "status": self.status.value,
            "project_distribution": {
                name: round(hours, 2) for name, hours in self.project_distribution.items()
            },
            "work_type_distribution": {
                name: round(hours, 2) for name, hours in self.work_type_distribution.items()
            },
            "daily_workload": [d.to_dict() for d in self.daily_workload],
            "shift_data": {day.isoformat(): code for day, code in sorted(self.shift_data.items())}
        }


@dataclass
class WorkloadSummary:
    """Summary of team workload."""
    members: list[UserWorkload] = field(default_factory=list)
    ranking_size: int = 5

    @property
    def team_size(self) -> int:
        return len(self.members)

    @property
    def active_members(self) -> int:
        return len([m for m in self.members if m.has_work_logs])

    @property
    def average_utilization(self) -> float:
        if not self.members:
            return 0.0
        return sum(m.utilization_rate for m in self.members) / len(self.members)

    @property
    def total_overtime(self) -> float:
        return sum(m.overtime_hours for m in self.members)

    @property
    def total_idle_hours(self) -> float:
        return sum(m.idle_hours for m in self.members)

    @property
    def total_leaves(self) -> int:
        return sum(m.leave_count for m in self.members)

    @property
    def top_contributors(self) -> list[UserWorkload]:
        """Highest utilization among members who logged any time."""
        contributors = [m for m in self.members if m.has_work_logs]
        ranked = sorted(contributors, key=lambda m: m.utilization_rate, reverse=True)
        return ranked[:self.ranking_size]

    @property
    def underutilized_members(self) -> list[UserWorkload]:
        """Lowest utilization among members with at least one available day."""
        rostered = [m for m in self.members if m.available_days > 0]
        ranked = sorted(rostered, key=lambda m: m.utilization_rate)
        return ranked[:self.ranking_size]

    @property
    def status_counts(self) -> dict[str, int]:
        counts = {status.value: 0 for status in WorkloadStatus}
        for member in self.members:
            counts[member.status.value] += 1
        return counts

    def get_member(self, email: str) -> Optional[UserWorkload]:
        for member in self.members:
            if member.email.lower() == email.lower():
                return member
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "summary": {
                "total_users": self.team_size,
                "active_members": self.active_members,
                "average_utilization": round(self.average_utilization, 2),
                "total_overtime": round(self.total_overtime, 2),
                "total_idle_hours": round(self.total_idle_hours, 2),
                "total_leaves": self.total_leaves,
                "status_counts": self.status_counts,
                "top_contributors": [
                    {"name": m.name, "hours": round(m.total_logged_hours, 2)}
                    for m in self.top_contributors
                ],
                "underutilized_members": [
                    {
                        "name": m.name,
                        "hours": round(m.total_logged_hours, 2),
                        "has_work_logs": m.has_work_logs
                    }
                    for m in self.underutilized_members
                ]
            },
            "members": [m.to_dict() for m in self.members]
        }


class WorkloadAnalyzer:
    """
    Analyzes logged time against each member's rostered availability.

    Usage:
        analyzer = WorkloadAnalyzer()
        summary = analyzer.analyze(
            work_logs=[WorkLogRecord(...)],
            users=[User(...)],
            shifts=[ShiftScheduleEntry(...)],
            filters=FilterSpec(...)
        )
    """

    def __init__(self, policy: Optional[MetricsPolicy] = None):
        self.policy = policy or MetricsPolicy()

    def _work_type_distribution(self, logs: list[WorkLogRecord]) -> dict[str, float]:
        """Hours per work-type category value."""
        seconds: dict[str, int] = {}
        for log in logs:
            for work_type in log.work_types(self.policy.work_type_markers):
                seconds[work_type] = seconds.get(work_type, 0) + log.logged_duration_seconds
        return {work_type: total / 3600 for work_type, total in seconds.items()}

    def _daily_workload(
        self,
        logs: list[WorkLogRecord],
        filters: FilterSpec,
        shift_map: dict[date, str]
    ) -> list[DailyWorkload]:
        """One entry per calendar day in range, including idle days."""
        by_day = group_by(logs, lambda log: log.work_date)
        result = []

        for day in iter_days(filters.date_range.start, filters.date_range.end):
            hours = sum_hours(by_day.get(day, []))
            capacity = day_capacity(day, shift_map, self.policy)
            utilization = hours / capacity * 100 if capacity > 0 else 0.0
            result.append(DailyWorkload(date=day, hours=hours, utilization=utilization))

        return result

    def analyze_member(
        self,
        user: User,
        work_logs: list[WorkLogRecord],
        shifts: Iterable[ShiftScheduleEntry],
        filters: FilterSpec,
        project_names: Optional[dict[str, str]] = None
    ) -> UserWorkload:
        """
        Analyze workload for a single team member.

        Args:
            user: Team member
            work_logs: Logs already restricted to the filter scope
            shifts: Shift entries (any user; filtered here)
            filters: Active filter
            project_names: Project name by project id

        Returns:
            UserWorkload with hours, availability and distributions
        """
        project_names = project_names or {}
        user_logs = [log for log in work_logs if log.user_email == user.email]
        shift_map = shift_map_for(user.email, shifts)

        availability = available_hours(
            filters.date_range.start,
            filters.date_range.end,
            shift_map,
            self.policy
        )

        projects = group_by(user_logs, lambda log: project_names.get(log.project_id, UNKNOWN))

        return UserWorkload(
            email=user.email,
            name=user.display_name,
            total_logged_hours=sum_hours(user_logs),
            available_hours=availability.available_hours,
            available_days=availability.available_days,
            leave_count=availability.leave_count,
            project_distribution={name: sum_hours(logs) for name, logs in projects.items()},
            work_type_distribution=self._work_type_distribution(user_logs),
            daily_workload=self._daily_workload(user_logs, filters, shift_map),
            shift_data=shift_map,
            status_thresholds=(self.policy.underutilized_below, self.policy.overloaded_above)
        )

    def analyze(
        self,
        work_logs: Iterable[WorkLogRecord],
        users: Iterable[User],
        shifts: Iterable[ShiftScheduleEntry],
        filters: FilterSpec,
        projects: Iterable[Project] = (),
        teams: Iterable[Team] = ()
    ) -> WorkloadSummary:
        """
        Analyze workload for every user in scope.

        Returns:
            WorkloadSummary with members in user input order
        """
        projects_by_id = project_index(projects)
        users_in_scope = filters.users_in_scope(users, teams)
        logs_in_scope = filters.work_logs_in_scope(work_logs, projects_by_id)
        shifts = list(shifts)
        project_names = {pid: project.name for pid, project in projects_by_id.items()}

        members = [
            self.analyze_member(user, logs_in_scope, shifts, filters, project_names)
            for user in users_in_scope
        ]

        summary = WorkloadSummary(members=members, ranking_size=self.policy.ranking_size)
        logger.debug(
            "Workload for %d users: average utilization %.2f%%",
            summary.team_size, summary.average_utilization
        )
        return summary


# Convenience function
def analyze_team_workload(
    work_logs: Iterable[WorkLogRecord],
    users: Iterable[User],
    shifts: Iterable[ShiftScheduleEntry],
    filters: FilterSpec,
    projects: Iterable[Project] = (),
    policy: Optional[MetricsPolicy] = None
) -> WorkloadSummary:
    """
    Quick function to analyze team workload.

    Example:
        summary = analyze_team_workload(logs, users, shifts, filters, projects)

        print(f"Team average: {summary.average_utilization:.2f}%")
        for member in summary.top_contributors:
            print(f"  {member.name}: {member.utilization_rate:.2f}%")
    """
    analyzer = WorkloadAnalyzer(policy=policy)
    return analyzer.analyze(work_logs, users, shifts, filters, projects)
