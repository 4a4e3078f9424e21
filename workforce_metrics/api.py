"""
FastAPI Backend for Workforce Metrics

Stateless REST API: every request carries its own filter and data
snapshot, and the response holds the computed metrics.
"""

import logging
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .buckets import Granularity
from .config import Config
from .engine import Snapshot, compute_metrics
from .integrations import (
    IssueRecord,
    Project,
    ShiftScheduleEntry,
    Team,
    User,
    WorkLogRecord,
    as_utc,
)
from .projections import CHARTS, TABLES
from .scope import DateRange, FilterSpec


logger = logging.getLogger(__name__)

config = Config()


# Pydantic models for API
class WorkLogIn(BaseModel):
    user_email: str
    project_id: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    logged_duration_seconds: int = Field(default=0, ge=0)
    category_selections: dict[str, str] = Field(default_factory=dict)


class ShiftIn(BaseModel):
    user_email: str
    shift_date: date
    shift_type: str = "G"


class UserIn(BaseModel):
    email: str
    full_name: str = ""


class ProjectIn(BaseModel):
    id: str
    name: str


class TeamIn(BaseModel):
    id: str
    name: str = ""
    members: list[str] = Field(default_factory=list)


class IssueIn(BaseModel):
    key: str
    project_key: str = ""
    project_name: str = ""
    status_name: str = ""
    created_at: datetime
    updated_at: datetime
    assignee_email: Optional[str] = None
    priority_name: Optional[str] = None


class FilterIn(BaseModel):
    start_date: date
    end_date: date
    selected_teams: list[str] = Field(default_factory=list)
    selected_projects: list[str] = Field(default_factory=list)
    selected_users: list[str] = Field(default_factory=list)

    def to_filter_spec(self) -> FilterSpec:
        return FilterSpec(
            date_range=DateRange(self.start_date, self.end_date),
            selected_teams=tuple(self.selected_teams),
            selected_projects=tuple(self.selected_projects),
            selected_users=tuple(self.selected_users)
        )


class SnapshotIn(BaseModel):
    work_logs: list[WorkLogIn] = Field(default_factory=list)
    shifts: list[ShiftIn] = Field(default_factory=list)
    users: list[UserIn] = Field(default_factory=list)
    projects: list[ProjectIn] = Field(default_factory=list)
    teams: list[TeamIn] = Field(default_factory=list)
    issues: list[IssueIn] = Field(default_factory=list)

    def to_snapshot(self) -> Snapshot:
        return Snapshot.of(
            work_logs=[
                WorkLogRecord(
                    user_email=log.user_email,
                    project_id=log.project_id,
                    start_time=as_utc(log.start_time),
                    end_time=as_utc(log.end_time) if log.end_time else None,
                    logged_duration_seconds=log.logged_duration_seconds,
                    category_selections=dict(log.category_selections)
                )
                for log in self.work_logs
            ],
            shifts=[
                ShiftScheduleEntry(s.user_email, s.shift_date, s.shift_type.upper())
                for s in self.shifts
            ],
            users=[User(u.email, u.full_name) for u in self.users],
            projects=[Project(p.id, p.name) for p in self.projects],
            teams=[Team(t.id, t.name, frozenset(t.members)) for t in self.teams],
            issues=[
                IssueRecord(**{
                    **issue.model_dump(),
                    "created_at": as_utc(issue.created_at),
                    "updated_at": as_utc(issue.updated_at)
                })
                for issue in self.issues
            ]
        )


class MetricsRequest(BaseModel):
    filters: FilterIn
    snapshot: SnapshotIn = Field(default_factory=SnapshotIn)


def _compute(request: MetricsRequest, granularity: Granularity = Granularity.WEEK):
    try:
        return compute_metrics(
            request.filters.to_filter_spec(),
            request.snapshot.to_snapshot(),
            policy=config.policy,
            granularity=granularity
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# Lifespan context manager
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Workforce Metrics API starting up (config: %s)", config.config_path)
    yield
    logger.info("Workforce Metrics API shutting down")


# Create FastAPI app
app = FastAPI(
    title="Workforce Metrics",
    description="API for workload, project health and efficiency metrics",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "charts": sorted(CHARTS),
        "tables": sorted(TABLES)
    }


@app.get("/api/policy")
async def get_policy():
    """Active policy constants."""
    return config.policy.to_dict()


@app.post("/api/metrics")
async def get_metrics(request: MetricsRequest, granularity: Granularity = Granularity.WEEK):
    """Every metric for the requested filter."""
    return _compute(request, granularity).to_dict()


@app.post("/api/workload")
async def get_workload(request: MetricsRequest):
    """Team workload summary and per-member breakdown."""
    return _compute(request).workload.to_dict()


@app.post("/api/project-health")
async def get_project_health(request: MetricsRequest):
    """Per-project FTE, effort share and capacity forecast."""
    return _compute(request).project_health.to_dict()


@app.post("/api/efficiency")
async def get_efficiency(request: MetricsRequest):
    """Composite efficiency scores."""
    return _compute(request).efficiency.to_dict()


@app.post("/api/trends")
async def get_trends(request: MetricsRequest, granularity: Granularity = Granularity.WEEK):
    """Per-member hours bucketed by day, week or month."""
    return _compute(request, granularity).trends.to_dict()


@app.post("/api/charts/{chart_name}")
async def get_chart(chart_name: str, request: MetricsRequest, granularity: Granularity = Granularity.WEEK):
    """Flat chart data for one named chart."""
    if chart_name not in CHARTS:
        raise HTTPException(status_code=404, detail=f"Chart {chart_name} not found")
    return {
        "chart": chart_name,
        "data": _compute(request, granularity).chart(chart_name)
    }


@app.post("/api/tables/{table_name}")
async def get_table(table_name: str, request: MetricsRequest):
    """Per-entity rows for one named table."""
    if table_name not in TABLES:
        raise HTTPException(status_code=404, detail=f"Table {table_name} not found")
    return {
        "table": table_name,
        "rows": _compute(request).table(table_name)
    }


# Run with: uvicorn workforce_metrics.api:app --reload
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
