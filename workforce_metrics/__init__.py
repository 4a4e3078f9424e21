"""
Workforce Metrics

Workload, project health and efficiency metrics computed from work logs,
shift rosters and issue-tracker data.
"""

__version__ = "1.0.0"

from .analyzer import (
    WorkloadAnalyzer,
    WorkloadSummary,
    UserWorkload,
    DailyWorkload,
    WorkloadStatus,
    analyze_team_workload
)

from .project_health import (
    ProjectHealthAnalyzer,
    ProjectHealthSummary,
    ProjectHealth,
    HealthStatus
)

from .predictor import (
    CapacityForecaster,
    ForecastPoint
)

from .efficiency import (
    EfficiencyScorer,
    EfficiencyReport,
    UserEfficiency,
    ProjectEfficiency,
    DailyEfficiency
)

from .buckets import (
    Granularity,
    TimeBucketSeries,
    aggregate
)

from .config import (
    Config,
    MetricsPolicy,
    EfficiencyWeights
)

from .scope import DateRange, FilterSpec
from .engine import Snapshot, DashboardMetrics, compute_metrics

__all__ = [
    # Version
    "__version__",

    # Workload
    "WorkloadAnalyzer",
    "WorkloadSummary",
    "UserWorkload",
    "DailyWorkload",
    "WorkloadStatus",
    "analyze_team_workload",

    # Project health
    "ProjectHealthAnalyzer",
    "ProjectHealthSummary",
    "ProjectHealth",
    "HealthStatus",
    "CapacityForecaster",
    "ForecastPoint",

    # Efficiency
    "EfficiencyScorer",
    "EfficiencyReport",
    "UserEfficiency",
    "ProjectEfficiency",
    "DailyEfficiency",

    # Trends
    "Granularity",
    "TimeBucketSeries",
    "aggregate",

    # Config and scope
    "Config",
    "MetricsPolicy",
    "EfficiencyWeights",
    "DateRange",
    "FilterSpec",

    # Engine
    "Snapshot",
    "DashboardMetrics",
    "compute_metrics",
]
