"""
Chart and Table Projections

Flat ``{"name": ..., value...}`` rows ready for plotting, and per-entity
table rows for detail views. Values are rounded to 2 decimals here.
"""

from typing import Callable

from .analyzer import WorkloadSummary
from .buckets import TimeBucketSeries
from .efficiency import EfficiencyReport
from .project_health import ProjectHealthSummary


def _r(value: float) -> float:
    return round(value, 2)


def _distribution(totals: dict[str, float]) -> list[dict]:
    return [{"name": name, "value": _r(hours)} for name, hours in totals.items()]


# Workload charts

def utilization_chart(workload: WorkloadSummary) -> list[dict]:
    return [
        {"name": m.name, "utilization": _r(m.utilization_rate)}
        for m in workload.members
    ]


def workload_vs_available(workload: WorkloadSummary) -> list[dict]:
    return [
        {
            "name": m.name,
            "logged": _r(m.total_logged_hours),
            "available": _r(m.available_hours),
            "overtime": _r(m.overtime_hours),
            "idle": _r(m.idle_hours)
        }
        for m in workload.members
    ]


def leave_chart(workload: WorkloadSummary) -> list[dict]:
    return [
        {"name": m.name, "leaves": m.leave_count}
        for m in workload.members
        if m.leave_count > 0
    ]


def project_distribution_chart(workload: WorkloadSummary) -> list[dict]:
    """Team hours per project name across all members."""
    totals: dict[str, float] = {}
    for member in workload.members:
        for name, hours in member.project_distribution.items():
            totals[name] = totals.get(name, 0.0) + hours
    return _distribution(totals)


def work_type_chart(workload: WorkloadSummary) -> list[dict]:
    totals: dict[str, float] = {}
    for member in workload.members:
        for name, hours in member.work_type_distribution.items():
            totals[name] = totals.get(name, 0.0) + hours
    return _distribution(totals)


# Project health charts

def project_effort_chart(health: ProjectHealthSummary) -> list[dict]:
    return [
        {"name": p.project_name, "hours": _r(p.total_hours), "effort_share": _r(p.effort_share)}
        for p in health.projects
    ]


def project_fte_chart(health: ProjectHealthSummary) -> list[dict]:
    return [
        {"name": p.project_name, "fte": _r(p.fte), "status": p.status.value}
        for p in health.projects
    ]


def forecast_chart(health: ProjectHealthSummary) -> list[dict]:
    """Forecast points of every project, one row per project-day."""
    return [
        {
            "name": p.project_name,
            "date": point.date.isoformat(),
            "projected_hours": _r(point.projected_hours),
            "capacity_gap": _r(point.capacity_gap)
        }
        for p in health.projects
        for point in p.capacity_forecast
    ]


# Efficiency charts

def user_efficiency_chart(efficiency: EfficiencyReport) -> list[dict]:
    return [
        {
            "name": u.user,
            "hours": _r(u.hours_logged),
            "tickets_closed": u.tickets_closed,
            "productivity_index": _r(u.productivity_index)
        }
        for u in efficiency.user_efficiency
    ]


def project_efficiency_chart(efficiency: EfficiencyReport) -> list[dict]:
    return [
        {
            "name": p.project,
            "hours": _r(p.total_hours),
            "tickets_closed": p.tickets_closed,
            "effort_output_ratio": _r(p.effort_output_ratio)
        }
        for p in efficiency.project_efficiency
    ]


def daily_efficiency_chart(efficiency: EfficiencyReport) -> list[dict]:
    return [
        {
            "name": d.date.isoformat(),
            "hours": _r(d.hours_logged),
            "tickets_closed": d.tickets_closed,
            "efficiency": _r(d.efficiency)
        }
        for d in efficiency.daily_efficiency
    ]


# Trends

def trend_chart(trends: TimeBucketSeries) -> list[dict]:
    return [
        {"name": row["period"], **{k: _r(v) for k, v in row.items() if k != "period"}}
        for row in trends.rows
    ]


# Tables

def workload_table(workload: WorkloadSummary) -> list[dict]:
    return [
        {
            "user": m.name,
            "email": m.email,
            "logged_hours": _r(m.total_logged_hours),
            "available_hours": _r(m.available_hours),
            "utilization_rate": _r(m.utilization_rate),
            "overtime_hours": _r(m.overtime_hours),
            "idle_hours": _r(m.idle_hours),
            "leave_count": m.leave_count,
            "status": m.status.value
        }
        for m in workload.members
    ]


def project_health_table(health: ProjectHealthSummary) -> list[dict]:
    return [
        {
            "project": p.project_name,
            "total_hours": _r(p.total_hours),
            "fte": _r(p.fte),
            "effort_share": _r(p.effort_share),
            "user_count": p.user_count,
            "average_hours_per_user": _r(p.average_hours_per_user),
            "status": p.status.value
        }
        for p in health.projects
    ]


def efficiency_table(efficiency: EfficiencyReport) -> list[dict]:
    return [u.to_dict() for u in efficiency.user_efficiency]


# Chart name -> (metric attribute on DashboardMetrics, builder)
CHARTS: dict[str, tuple[str, Callable]] = {
    "utilization": ("workload", utilization_chart),
    "workload-vs-available": ("workload", workload_vs_available),
    "leaves": ("workload", leave_chart),
    "project-distribution": ("workload", project_distribution_chart),
    "work-types": ("workload", work_type_chart),
    "project-effort": ("project_health", project_effort_chart),
    "project-fte": ("project_health", project_fte_chart),
    "capacity-forecast": ("project_health", forecast_chart),
    "user-efficiency": ("efficiency", user_efficiency_chart),
    "project-efficiency": ("efficiency", project_efficiency_chart),
    "daily-efficiency": ("efficiency", daily_efficiency_chart),
    "trends": ("trends", trend_chart),
}

TABLES: dict[str, tuple[str, Callable]] = {
    "workload": ("workload", workload_table),
    "project-health": ("project_health", project_health_table),
    "efficiency": ("efficiency", efficiency_table),
}
