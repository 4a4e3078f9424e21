"""
Work Log Records

Typed work-log rows and entity metadata, plus parsers for the rows
returned by the time-tracking store.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Mapping, Optional


@dataclass(frozen=True)
class User:
    """A tracked team member."""
    email: str
    full_name: str = ""

    @property
    def display_name(self) -> str:
        return self.full_name or self.email


@dataclass(frozen=True)
class Project:
    """A project work can be logged against."""
    id: str
    name: str


@dataclass(frozen=True)
class Team:
    """A named group of users."""
    id: str
    name: str = ""
    members: frozenset = field(default_factory=frozenset)


@dataclass(frozen=True)
class WorkLogRecord:
    """Represents one time-tracking entry."""
    user_email: str
    project_id: Optional[str]
    start_time: datetime
    logged_duration_seconds: int = 0
    end_time: Optional[datetime] = None
    category_selections: Mapping[str, str] = field(default_factory=dict)

    @property
    def hours(self) -> float:
        """Logged duration in hours (unrounded)."""
        return self.logged_duration_seconds / 3600

    @property
    def work_date(self):
        """Calendar day the entry is counted on."""
        return self.start_time.date()

    def work_types(self, markers: tuple = ("work type", "type")) -> list[str]:
        """
        Work-type values selected on this entry.

        Any category whose key contains one of ``markers``
        (case-insensitive) counts, so one entry may report several.
        """
        values = []
        for category, value in self.category_selections.items():
            category_lower = category.lower()
            if value and any(marker in category_lower for marker in markers):
                values.append(value)
        return values


def as_utc(value: datetime) -> datetime:
    """Treat timestamps without an offset as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_datetime(value) -> datetime:
    """Parse an ISO-8601 timestamp as stored upstream; naive values are UTC."""
    if isinstance(value, datetime):
        return as_utc(value)
    if not value:
        raise ValueError("Timestamp is required")
    try:
        return as_utc(datetime.fromisoformat(str(value).replace("Z", "+00:00")))
    except ValueError as e:
        raise ValueError(f"Invalid timestamp: {value!r}") from e


def parse_work_log(row: Mapping) -> WorkLogRecord:
    """
    Build a WorkLogRecord from a work_logs table row.

    Accepts either a flat ``project_id`` or the joined ``project`` object
    (``{"id": ..., "name": ...}``).

    Raises:
        ValueError: if the row has no user email, an invalid timestamp
            or a negative duration
    """
    user_email = row.get("user_email")
    if not user_email:
        raise ValueError("Work log row is missing user_email")

    project = row.get("project") or row.get("projects") or {}
    project_id = row.get("project_id") or project.get("id")

    duration = int(row.get("logged_duration_seconds") or 0)
    if duration < 0:
        raise ValueError(f"Negative logged duration for {user_email}: {duration}")

    end_time = row.get("end_time")

    return WorkLogRecord(
        user_email=user_email,
        project_id=str(project_id) if project_id is not None else None,
        start_time=parse_datetime(row.get("start_time")),
        end_time=parse_datetime(end_time) if end_time else None,
        logged_duration_seconds=duration,
        category_selections=dict(row.get("dynamic_category_selections") or {}),
    )


def parse_project(row: Mapping) -> Project:
    return Project(id=str(row["id"]), name=row.get("name") or "Unknown")


def parse_user(row: Mapping) -> User:
    return User(email=row["email"], full_name=row.get("full_name") or "")


def parse_team(row: Mapping) -> Team:
    return Team(
        id=str(row["id"]),
        name=row.get("name") or "",
        members=frozenset(row.get("members") or []),
    )
