"""
Metrics Engine

Single entry point mapping (filter, snapshot) to every metric object.
Nothing is cached; call again whenever the filter changes.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .analyzer import WorkloadAnalyzer, WorkloadSummary
from .buckets import Granularity, TimeBucketSeries, aggregate, daily_series_from_workloads
from .config import MetricsPolicy
from .efficiency import EfficiencyReport, EfficiencyScorer
from .integrations import (
    IssueRecord,
    Project,
    ShiftScheduleEntry,
    Team,
    User,
    WorkLogRecord,
)
from .project_health import ProjectHealthAnalyzer, ProjectHealthSummary
from .projections import CHARTS, TABLES
from .scope import FilterSpec


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Already-fetched raw collections for one refresh cycle."""
    work_logs: tuple = field(default_factory=tuple)
    shifts: tuple = field(default_factory=tuple)
    users: tuple = field(default_factory=tuple)
    projects: tuple = field(default_factory=tuple)
    teams: tuple = field(default_factory=tuple)
    issues: tuple = field(default_factory=tuple)

    @classmethod
    def of(
        cls,
        work_logs: list[WorkLogRecord] = (),
        shifts: list[ShiftScheduleEntry] = (),
        users: list[User] = (),
        projects: list[Project] = (),
        teams: list[Team] = (),
        issues: list[IssueRecord] = ()
    ) -> "Snapshot":
        return cls(
            work_logs=tuple(work_logs),
            shifts=tuple(shifts),
            users=tuple(users),
            projects=tuple(projects),
            teams=tuple(teams),
            issues=tuple(issues)
        )


@dataclass
class DashboardMetrics:
    """Every metric object for one filter."""
    filters: FilterSpec
    workload: WorkloadSummary
    project_health: ProjectHealthSummary
    efficiency: EfficiencyReport
    trends: TimeBucketSeries

    def chart(self, name: str) -> list[dict]:
        """
        Named chart projection.

        Raises:
            KeyError: for unknown chart names
        """
        attribute, builder = CHARTS[name]
        return builder(getattr(self, attribute))

    def table(self, name: str) -> list[dict]:
        attribute, builder = TABLES[name]
        return builder(getattr(self, attribute))

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "filters": self.filters.to_dict(),
            "workload": self.workload.to_dict(),
            "project_health": self.project_health.to_dict(),
            "efficiency": self.efficiency.to_dict(),
            "trends": self.trends.to_dict()
        }


def compute_workload(filters: FilterSpec, snapshot: Snapshot, policy: MetricsPolicy) -> WorkloadSummary:
    return WorkloadAnalyzer(policy).analyze(
        snapshot.work_logs, snapshot.users, snapshot.shifts, filters,
        projects=snapshot.projects, teams=snapshot.teams
    )


def compute_project_health(filters: FilterSpec, snapshot: Snapshot, policy: MetricsPolicy) -> ProjectHealthSummary:
    return ProjectHealthAnalyzer(policy).analyze(
        snapshot.work_logs, snapshot.projects, snapshot.users, snapshot.teams, filters
    )


def compute_efficiency(filters: FilterSpec, snapshot: Snapshot, policy: MetricsPolicy) -> EfficiencyReport:
    return EfficiencyScorer(policy).score(
        snapshot.work_logs, snapshot.issues, snapshot.projects, filters,
        users=snapshot.users, teams=snapshot.teams
    )


def compute_trends(
    workload: WorkloadSummary,
    filters: FilterSpec,
    granularity: Granularity = Granularity.WEEK
) -> TimeBucketSeries:
    return aggregate(
        daily_series_from_workloads(workload.members),
        filters.date_range.start,
        filters.date_range.end,
        granularity
    )


def compute_metrics(
    filters: FilterSpec,
    snapshot: Snapshot,
    policy: Optional[MetricsPolicy] = None,
    granularity: Granularity = Granularity.WEEK
) -> DashboardMetrics:
    """
    Compute every metric for a filter over a snapshot.

    Pure: identical inputs give equal results and nothing is mutated.

    Example:
        metrics = compute_metrics(filters, snapshot)
        print(metrics.workload.average_utilization)
        chart = metrics.chart("utilization")
    """
    policy = policy or MetricsPolicy()
    workload = compute_workload(filters, snapshot, policy)

    metrics = DashboardMetrics(
        filters=filters,
        workload=workload,
        project_health=compute_project_health(filters, snapshot, policy),
        efficiency=compute_efficiency(filters, snapshot, policy),
        trends=compute_trends(workload, filters, granularity)
    )
    logger.info(
        "Computed metrics for %s..%s: %d users, %d projects",
        filters.date_range.start, filters.date_range.end,
        metrics.workload.team_size, metrics.project_health.total_projects
    )
    return metrics
