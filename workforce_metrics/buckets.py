"""
Time-Bucket Aggregator

Re-buckets per-day hour series into daily, weekly (Monday-aligned) or
monthly periods for multi-series comparison.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Iterable, Mapping

from .calendar import iter_days
from .grouping import group_by
from .integrations import WorkLogRecord


class Granularity(Enum):
    """Period size."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class DailyHours:
    """Hours for one entity on one day."""
    date: date
    hours: float


def period_label(day: date, granularity: Granularity) -> str:
    """Label of the period containing ``day``."""
    if granularity == Granularity.WEEK:
        return (day - timedelta(days=day.weekday())).isoformat()
    if granularity == Granularity.MONTH:
        return f"{day.year:04d}-{day.month:02d}"
    return day.isoformat()


def period_labels(start: date, end: date, granularity: Granularity) -> list[str]:
    """Ordered, distinct period labels spanning [start, end]."""
    labels: list[str] = []
    for day in iter_days(start, end):
        label = period_label(day, granularity)
        if not labels or labels[-1] != label:
            labels.append(label)
    return labels


@dataclass
class TimeBucketSeries:
    """Hours per period for each entity with activity in range."""
    granularity: Granularity
    periods: list[str] = field(default_factory=list)
    series_names: list[str] = field(default_factory=list)
    totals: dict[str, dict[str, float]] = field(default_factory=dict)

    @property
    def rows(self) -> list[dict]:
        """One row per period with every series' hours (0 if absent)."""
        return [
            {
                "period": period,
                **{name: self.totals[name].get(period, 0.0) for name in self.series_names}
            }
            for period in self.periods
        ]

    def total_for(self, name: str) -> float:
        return sum(self.totals.get(name, {}).values())

    def to_dict(self) -> dict:
        return {
            "granularity": self.granularity.value,
            "periods": list(self.periods),
            "series": list(self.series_names),
            "rows": [
                {key: (round(value, 2) if key != "period" else value) for key, value in row.items()}
                for row in self.rows
            ]
        }


def aggregate(
    series: Mapping[str, Iterable],
    start: date,
    end: date,
    granularity: Granularity = Granularity.WEEK
) -> TimeBucketSeries:
    """
    Accumulate each entity's daily hours into periods.

    Args:
        series: Entity name -> daily points (anything with .date and .hours)
        start: First day of the range
        end: Last day of the range (inclusive)
        granularity: Period size

    Returns:
        TimeBucketSeries; entities with no hours in range are left out
    """
    periods = period_labels(start, end, granularity)
    totals: dict[str, dict[str, float]] = {}

    for name, points in series.items():
        buckets: dict[str, float] = {}
        for point in points:
            if not start <= point.date <= end:
                continue
            label = period_label(point.date, granularity)
            buckets[label] = buckets.get(label, 0.0) + point.hours
        if sum(buckets.values()) > 0:
            totals[name] = buckets

    return TimeBucketSeries(
        granularity=granularity,
        periods=periods,
        series_names=list(totals),
        totals=totals
    )


def daily_series_from_workloads(workloads: Iterable) -> dict[str, list]:
    """
    Daily series keyed by member name from analyzed UserWorkloads.

    Members sharing a display name are keyed as "Name (email)" so no
    series replaces another.
    """
    workloads = list(workloads)
    name_counts: dict[str, int] = {}
    for member in workloads:
        name_counts[member.name] = name_counts.get(member.name, 0) + 1

    series = {}
    for member in workloads:
        key = member.name
        if name_counts[key] > 1:
            key = f"{member.name} ({member.email})"
        series[key] = list(member.daily_workload)
    return series


def daily_series_from_logs(
    work_logs: Iterable[WorkLogRecord],
    key: Callable[[WorkLogRecord], str]
) -> dict[str, list[DailyHours]]:
    """
    Daily hours per entity straight from work logs.

    Args:
        work_logs: Logs to bucket
        key: Entity name for a log (e.g. user email or project name)
    """
    series = {}
    for name, logs in group_by(work_logs, key).items():
        by_day: dict[date, int] = {}
        for log in logs:
            by_day[log.work_date] = by_day.get(log.work_date, 0) + log.logged_duration_seconds
        series[name] = [DailyHours(date=day, hours=seconds / 3600) for day, seconds in sorted(by_day.items())]
    return series
