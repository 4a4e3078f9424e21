"""
Project Health Analyzer

Per-project FTE, share of team capacity, contributor counts, daily trend
and a capacity forecast.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable, Optional

from .calendar import iter_days
from .config import MetricsPolicy
from .grouping import group_by, sum_hours
from .integrations import Project, Team, User, WorkLogRecord
from .predictor import CapacityForecaster, ForecastPoint
from .scope import FilterSpec, project_index


logger = logging.getLogger(__name__)


class HealthStatus(Enum):
    """Project staffing level by FTE."""
    AT_CAPACITY = "at capacity"        # FTE >= 1
    MODERATE = "moderate"              # 0.5 <= FTE < 1
    UNDER_CAPACITY = "under capacity"  # FTE < 0.5


@dataclass
class TrendPoint:
    """Hours logged on a project for one day."""
    date: date
    hours: float
    utilization: float

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "hours": round(self.hours, 2),
            "utilization": round(self.utilization, 2)
        }


@dataclass
class ProjectHealth:
    """Health metrics for a single project."""
    project_id: str
    project_name: str
    total_hours: float = 0.0
    fte: float = 0.0
    effort_share: float = 0.0
    user_count: int = 0
    utilization_trend: list[TrendPoint] = field(default_factory=list)
    capacity_forecast: list[ForecastPoint] = field(default_factory=list)
    thresholds: tuple[float, float] = (1.0, 0.5)

    @property
    def average_hours_per_user(self) -> float:
        if self.user_count == 0:
            return 0.0
        return self.total_hours / self.user_count

    @property
    def status(self) -> HealthStatus:
        at_capacity, moderate = self.thresholds
        if self.fte >= at_capacity:
            return HealthStatus.AT_CAPACITY
        elif self.fte >= moderate:
            return HealthStatus.MODERATE
        return HealthStatus.UNDER_CAPACITY

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "project_id": self.project_id,
            "project_name": self.project_name,
            "total_hours": round(self.total_hours, 2),
            "fte": round(self.fte, 2),
            "effort_share": round(self.effort_share, 2),
            "user_count": self.user_count,
            "average_hours_per_user": round(self.average_hours_per_user, 2),
            "status": self.status.value,
            "utilization_trend": [p.to_dict() for p in self.utilization_trend],
            "capacity_forecast": [p.to_dict() for p in self.capacity_forecast]
        }


@dataclass
class ProjectHealthSummary:
    """Cross-project roll-up."""
    projects: list[ProjectHealth] = field(default_factory=list)
    team_size: int = 0
    working_days: int = 0

    @property
    def total_projects(self) -> int:
        return len(self.projects)

    @property
    def total_fte(self) -> float:
        return sum(p.fte for p in self.projects)

    @property
    def total_hours(self) -> float:
        return sum(p.total_hours for p in self.projects)

    @property
    def average_effort_share(self) -> float:
        if not self.projects:
            return 0.0
        return sum(p.effort_share for p in self.projects) / len(self.projects)

    @property
    def capacity_utilization(self) -> float:
        """Average FTE per project."""
        if not self.projects:
            return 0.0
        return self.total_fte / len(self.projects)

    def _count(self, status: HealthStatus) -> int:
        return len([p for p in self.projects if p.status == status])

    @property
    def projects_at_capacity(self) -> int:
        return self._count(HealthStatus.AT_CAPACITY)

    @property
    def projects_moderate(self) -> int:
        return self._count(HealthStatus.MODERATE)

    @property
    def projects_under_capacity(self) -> int:
        return self._count(HealthStatus.UNDER_CAPACITY)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "summary": {
                "total_projects": self.total_projects,
                "team_size": self.team_size,
                "working_days": self.working_days,
                "total_fte": round(self.total_fte, 2),
                "total_hours": round(self.total_hours, 2),
                "average_effort_share": round(self.average_effort_share, 2),
                "capacity_utilization": round(self.capacity_utilization, 2),
                "projects_at_capacity": self.projects_at_capacity,
                "projects_moderate": self.projects_moderate,
                "projects_under_capacity": self.projects_under_capacity
            },
            "projects": [p.to_dict() for p in self.projects]
        }


class ProjectHealthAnalyzer:
    """
    Measures how much of the team's capacity each project absorbs.

    Usage:
        analyzer = ProjectHealthAnalyzer()
        summary = analyzer.analyze(work_logs, projects, users, teams, filters)
    """

    def __init__(self, policy: Optional[MetricsPolicy] = None):
        self.policy = policy or MetricsPolicy()
        self.forecaster = CapacityForecaster(self.policy)

    def _daily_hours(self, logs: list[WorkLogRecord]) -> dict[date, float]:
        return {day: sum_hours(day_logs) for day, day_logs in group_by(logs, lambda log: log.work_date).items()}

    def analyze_project(
        self,
        project: Project,
        logs: list[WorkLogRecord],
        filters: FilterSpec,
        team_size: int
    ) -> ProjectHealth:
        """
        Compute health metrics for one project.

        Args:
            project: Project metadata
            logs: This project's logs within scope
            filters: Active filter
            team_size: Users in scope, contributors or not
        """
        hours_per_day = self.policy.standard_hours_per_day
        start, end = filters.date_range.start, filters.date_range.end
        working_days = filters.date_range.working_days

        total_hours = sum_hours(logs)
        standard_hours = hours_per_day * working_days
        team_capacity = team_size * standard_hours

        daily_hours = self._daily_hours(logs)
        trend = [
            TrendPoint(
                date=day,
                hours=daily_hours.get(day, 0.0),
                utilization=daily_hours.get(day, 0.0) / hours_per_day * 100
            )
            for day in iter_days(start, end)
        ]

        return ProjectHealth(
            project_id=project.id,
            project_name=project.name,
            total_hours=total_hours,
            fte=total_hours / standard_hours if standard_hours > 0 else 0.0,
            effort_share=total_hours / team_capacity * 100 if team_capacity > 0 else 0.0,
            user_count=len({log.user_email for log in logs}),
            utilization_trend=trend,
            capacity_forecast=self.forecaster.forecast(daily_hours, start, end),
            thresholds=(self.policy.at_capacity_fte, self.policy.moderate_fte)
        )

    def analyze(
        self,
        work_logs: Iterable[WorkLogRecord],
        projects: Iterable[Project],
        users: Iterable[User],
        teams: Iterable[Team],
        filters: FilterSpec
    ) -> ProjectHealthSummary:
        """
        Analyze every project in scope.

        Returns:
            ProjectHealthSummary with projects in metadata order
        """
        projects = list(projects)
        projects_by_id = project_index(projects)
        users_in_scope = filters.users_in_scope(users, teams)
        emails = {user.email for user in users_in_scope}

        logs = filters.work_logs_in_scope(work_logs, projects_by_id, emails)
        logs_by_project = group_by(logs, lambda log: log.project_id)

        health = [
            self.analyze_project(project, logs_by_project.get(project.id, []), filters, len(users_in_scope))
            for project in filters.projects_in_scope(projects)
        ]

        summary = ProjectHealthSummary(
            projects=health,
            team_size=len(users_in_scope),
            working_days=filters.date_range.working_days
        )
        logger.debug(
            "Project health for %d projects: %.2f FTE over %d working days",
            summary.total_projects, summary.total_fte, summary.working_days
        )
        return summary
