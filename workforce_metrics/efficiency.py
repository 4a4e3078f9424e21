"""
Efficiency Scorer

Combines logged hours with issue-tracker closures into productivity,
quality, workload-balance and response-time indices.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from .config import EfficiencyWeights, MetricsPolicy
from .grouping import UNKNOWN, group_by, sum_hours
from .integrations import IssueRecord, IssueState, Project, Team, User, WorkLogRecord
from .scope import FilterSpec, project_index


logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounding up."""
    return int(math.floor(value + 0.5))


def effort_output_ratio(hours: float, closed: int) -> float:
    return hours / closed if closed > 0 else 0.0


def productivity_index(tickets: float, hours: float) -> float:
    return tickets / hours if hours > 0 else 0.0


def workload_balance_index(per_user_hours: list[float]) -> float:
    """
    100 for a perfectly even spread, falling with the coefficient of
    variation (population standard deviation over mean). Never negative.
    """
    if not per_user_hours:
        return 0.0
    mean = sum(per_user_hours) / len(per_user_hours)
    if mean <= 0:
        return 0.0
    variance = sum((hours - mean) ** 2 for hours in per_user_hours) / len(per_user_hours)
    return max(0.0, (1 - math.sqrt(variance) / mean) * 100)


@dataclass
class QualityMetrics:
    """
    Quality sub-metrics.

    ticket_reopening_rate and resolution_accuracy are placeholder policy
    values, not computed; reopen and review history are not available.
    """
    ticket_reopening_rate: float
    first_response_time: float
    resolution_accuracy: float

    def to_dict(self) -> dict:
        return {
            "ticket_reopening_rate": round(self.ticket_reopening_rate, 2),
            "first_response_time": round(self.first_response_time, 2),
            "resolution_accuracy": round(self.resolution_accuracy, 2),
            "placeholders": ["ticket_reopening_rate", "resolution_accuracy"]
        }


@dataclass
class StatusBreakdown:
    """Issue counts by status family, priority and assignment."""
    open: int = 0
    in_progress: int = 0
    closed: int = 0
    other: int = 0
    by_priority: dict[str, int] = field(default_factory=dict)
    unassigned: int = 0

    @property
    def total(self) -> int:
        return self.open + self.in_progress + self.closed + self.other

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "open": self.open,
            "in_progress": self.in_progress,
            "closed": self.closed,
            "other": self.other,
            "by_priority": dict(self.by_priority),
            "unassigned": self.unassigned
        }


@dataclass
class UserEfficiency:
    """Efficiency ratios for one user."""
    user: str
    hours_logged: float
    tickets_closed: int
    weighted_tickets: float
    weights: EfficiencyWeights = field(default_factory=EfficiencyWeights, repr=False)

    @property
    def effort_output_ratio(self) -> float:
        return effort_output_ratio(self.hours_logged, self.tickets_closed)

    @property
    def productivity_index(self) -> float:
        """Closed tickets per hour, unweighted."""
        return productivity_index(self.tickets_closed, self.hours_logged)

    @property
    def quality_score(self) -> int:
        w = self.weights
        return round_half_up(
            self.productivity_index * w.user_quality_productivity +
            (100 - self.effort_output_ratio * w.effort_ratio_penalty) * w.user_quality_effort
        )

    def to_dict(self) -> dict:
        return {
            "user": self.user,
            "hours_logged": round(self.hours_logged, 2),
            "tickets_closed": self.tickets_closed,
            "effort_output_ratio": round(self.effort_output_ratio, 2),
            "productivity_index": round(self.productivity_index, 2),
            "quality_score": self.quality_score
        }


@dataclass
class ProjectEfficiency:
    """Efficiency ratios for one project."""
    project: str
    total_hours: float
    tickets_closed: int
    weighted_tickets: float

    @property
    def effort_output_ratio(self) -> float:
        return effort_output_ratio(self.total_hours, self.tickets_closed)

    @property
    def productivity_index(self) -> float:
        """Closed tickets per hour, unweighted."""
        return productivity_index(self.tickets_closed, self.total_hours)

    def to_dict(self) -> dict:
        return {
            "project": self.project,
            "total_hours": round(self.total_hours, 2),
            "tickets_closed": self.tickets_closed,
            "effort_output_ratio": round(self.effort_output_ratio, 2),
            "productivity_index": round(self.productivity_index, 2)
        }


@dataclass
class DailyEfficiency:
    """Hours logged and tickets closed on one day."""
    date: date
    hours_logged: float = 0.0
    tickets_closed: int = 0

    @property
    def efficiency(self) -> float:
        if self.hours_logged <= 0:
            return 0.0
        return self.tickets_closed / self.hours_logged

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "hours_logged": round(self.hours_logged, 2),
            "tickets_closed": self.tickets_closed,
            "efficiency": round(self.efficiency, 2)
        }


@dataclass
class EfficiencyReport:
    """Composite efficiency scores with per-entity breakdowns."""
    total_hours_logged: float = 0.0
    closed_tickets: int = 0
    weighted_tickets: float = 0.0
    per_user_hours: list[float] = field(default_factory=list)
    resolution_days: list[int] = field(default_factory=list)

    user_efficiency: list[UserEfficiency] = field(default_factory=list)
    project_efficiency: list[ProjectEfficiency] = field(default_factory=list)
    daily_efficiency: list[DailyEfficiency] = field(default_factory=list)
    status_breakdown: StatusBreakdown = field(default_factory=StatusBreakdown)
    quality_metrics: Optional[QualityMetrics] = None

    weights: EfficiencyWeights = field(default_factory=EfficiencyWeights, repr=False)

    @property
    def effort_output_ratio(self) -> float:
        return effort_output_ratio(self.total_hours_logged, self.closed_tickets)

    @property
    def productivity_index(self) -> float:
        return productivity_index(self.weighted_tickets, self.total_hours_logged)

    @property
    def workload_balance_index(self) -> float:
        return workload_balance_index(self.per_user_hours)

    @property
    def average_resolution_days(self) -> float:
        if not self.resolution_days:
            return 0.0
        return sum(self.resolution_days) / len(self.resolution_days)

    @property
    def quality_score(self) -> int:
        w = self.weights
        return round_half_up(
            self.productivity_index * w.quality_productivity +
            self.workload_balance_index * w.quality_balance +
            (100 - self.effort_output_ratio * w.effort_ratio_penalty) * w.quality_effort
        )

    @property
    def response_time_index(self) -> float:
        """100 when nothing closed; otherwise penalised per resolution day."""
        if not self.resolution_days:
            return 100.0
        return max(0.0, 100 - self.average_resolution_days * self.weights.resolution_day_penalty)

    @property
    def overall_efficiency(self) -> int:
        w = self.weights
        return round_half_up(
            self.productivity_index * w.productivity +
            self.workload_balance_index * w.workload_balance +
            self.quality_score * w.quality +
            self.response_time_index * w.response_time
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "scores": {
                "effort_output_ratio": round(self.effort_output_ratio, 2),
                "productivity_index": round(self.productivity_index, 2),
                "workload_balance_index": round(self.workload_balance_index, 2),
                "quality_score": self.quality_score,
                "response_time_index": round(self.response_time_index, 2),
                "overall_efficiency": self.overall_efficiency
            },
            "totals": {
                "hours_logged": round(self.total_hours_logged, 2),
                "closed_tickets": self.closed_tickets,
                "weighted_tickets": round(self.weighted_tickets, 2),
                "average_resolution_days": round(self.average_resolution_days, 2)
            },
            "user_efficiency": [u.to_dict() for u in self.user_efficiency],
            "project_efficiency": [p.to_dict() for p in self.project_efficiency],
            "daily_efficiency": [d.to_dict() for d in self.daily_efficiency],
            "status_breakdown": self.status_breakdown.to_dict(),
            "quality_metrics": self.quality_metrics.to_dict() if self.quality_metrics else None
        }


class EfficiencyScorer:
    """
    Scores effort against output for the filtered scope.

    Usage:
        scorer = EfficiencyScorer()
        report = scorer.score(work_logs, issues, projects, filters)
        print(report.overall_efficiency)
    """

    def __init__(self, policy: Optional[MetricsPolicy] = None):
        self.policy = policy or MetricsPolicy()
        self.weights = self.policy.efficiency

    def weighted_count(self, issues: Iterable[IssueRecord]) -> float:
        """Sum of priority weights over closed issues."""
        return sum(
            self.weights.priority_weight(issue.priority_name)
            for issue in issues
            if issue.is_closed
        )

    def status_breakdown(self, issues: list[IssueRecord]) -> StatusBreakdown:
        breakdown = StatusBreakdown()
        for issue in issues:
            state = issue.state
            if state == IssueState.OPEN:
                breakdown.open += 1
            elif state == IssueState.IN_PROGRESS:
                breakdown.in_progress += 1
            elif state == IssueState.CLOSED:
                breakdown.closed += 1
            else:
                breakdown.other += 1
            breakdown.by_priority[issue.priority_label] = breakdown.by_priority.get(issue.priority_label, 0) + 1
            if not issue.assignee_email:
                breakdown.unassigned += 1
        return breakdown

    def daily_efficiency(
        self,
        logs: list[WorkLogRecord],
        closed: list[IssueRecord]
    ) -> list[DailyEfficiency]:
        """Hours by log start date merged with closures by issue update date."""
        days: dict[date, DailyEfficiency] = {}
        for day, day_logs in group_by(logs, lambda log: log.work_date).items():
            days[day] = DailyEfficiency(date=day, hours_logged=sum_hours(day_logs))
        for issue in closed:
            day = issue.updated_at.date()
            entry = days.setdefault(day, DailyEfficiency(date=day))
            entry.tickets_closed += 1
        return [days[day] for day in sorted(days)]

    def score(
        self,
        work_logs: Iterable[WorkLogRecord],
        issues: Iterable[IssueRecord],
        projects: Iterable[Project],
        filters: FilterSpec,
        users: Optional[Iterable[User]] = None,
        teams: Iterable[Team] = ()
    ) -> EfficiencyReport:
        """
        Score efficiency over the filtered work logs and supplied issues.

        Issues are assumed to be scoped upstream by the tracker query.

        Args:
            work_logs: Work logs (filtered here by date range/projects)
            issues: Issue search results
            projects: Project metadata for naming
            filters: Active filter
            users: If given, logs are restricted to users in scope

        Returns:
            EfficiencyReport
        """
        projects_by_id = project_index(projects)
        emails = None
        if users is not None:
            emails = {user.email for user in filters.users_in_scope(users, teams)}

        logs = filters.work_logs_in_scope(work_logs, projects_by_id, emails)
        issues = list(issues)
        closed = [issue for issue in issues if issue.is_closed]

        logs_by_user = group_by(logs, lambda log: log.user_email)
        per_user_hours = {email: sum_hours(user_logs) for email, user_logs in logs_by_user.items()}

        closed_by_assignee = group_by(closed, lambda issue: issue.assignee_email)
        user_efficiency = [
            UserEfficiency(
                user=email,
                hours_logged=hours,
                tickets_closed=len(closed_by_assignee.get(email, [])),
                weighted_tickets=self.weighted_count(closed_by_assignee.get(email, [])),
                weights=self.weights
            )
            for email, hours in per_user_hours.items()
        ]

        project_names = {pid: project.name for pid, project in projects_by_id.items()}
        logs_by_project = group_by(logs, lambda log: project_names.get(log.project_id, UNKNOWN))
        closed_by_project = group_by(closed, lambda issue: issue.project_name)
        project_efficiency = [
            ProjectEfficiency(
                project=name,
                total_hours=sum_hours(project_logs),
                tickets_closed=len(closed_by_project.get(name, [])),
                weighted_tickets=self.weighted_count(closed_by_project.get(name, []))
            )
            for name, project_logs in logs_by_project.items()
        ]

        resolution_days = [issue.resolution_days for issue in closed]

        report = EfficiencyReport(
            total_hours_logged=sum_hours(logs),
            closed_tickets=len(closed),
            weighted_tickets=self.weighted_count(closed),
            per_user_hours=list(per_user_hours.values()),
            resolution_days=resolution_days,
            user_efficiency=user_efficiency,
            project_efficiency=project_efficiency,
            daily_efficiency=self.daily_efficiency(logs, closed),
            status_breakdown=self.status_breakdown(issues),
            weights=self.weights
        )
        report.quality_metrics = QualityMetrics(
            ticket_reopening_rate=self.policy.ticket_reopening_rate,
            first_response_time=report.average_resolution_days,
            resolution_accuracy=self.policy.resolution_accuracy
        )

        logger.debug(
            "Efficiency over %.2fh and %d closed tickets: overall %d",
            report.total_hours_logged, report.closed_tickets, report.overall_efficiency
        )
        return report
