"""
Issue Tracker Records

Issues returned by the Jira search, reduced to the fields the efficiency
metrics need.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, Mapping, Optional

from .worklogs import as_utc, parse_datetime


SEARCH_RESULT_LIMIT = 1000

NO_PRIORITY = "No Priority"
UNASSIGNED = "Unassigned"


class IssueState(Enum):
    """Status families matched against the status name."""
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"
    OTHER = "other"


# Checked in order; first family with a matching marker wins
STATUS_MARKERS = (
    (IssueState.CLOSED, ("closed", "done", "resolved")),
    (IssueState.IN_PROGRESS, ("progress", "development")),
    (IssueState.OPEN, ("open", "to do")),
)


def classify_status(status_name: Optional[str]) -> IssueState:
    """Classify a status name by case-insensitive substring match."""
    status = (status_name or "").lower()
    for state, markers in STATUS_MARKERS:
        if any(marker in status for marker in markers):
            return state
    return IssueState.OTHER


@dataclass(frozen=True)
class IssueRecord:
    """Represents a Jira issue."""
    key: str
    project_key: str
    project_name: str
    status_name: str
    created_at: datetime
    updated_at: datetime
    assignee_email: Optional[str] = None
    priority_name: Optional[str] = None

    @property
    def state(self) -> IssueState:
        return classify_status(self.status_name)

    @property
    def is_closed(self) -> bool:
        return self.state == IssueState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.state == IssueState.OPEN

    @property
    def is_in_progress(self) -> bool:
        return self.state == IssueState.IN_PROGRESS

    @property
    def priority_label(self) -> str:
        return self.priority_name or NO_PRIORITY

    @property
    def assignee_label(self) -> str:
        return self.assignee_email or UNASSIGNED

    @property
    def resolution_days(self) -> int:
        """Whole days between creation and last update (naive timestamps as UTC)."""
        return (as_utc(self.updated_at) - as_utc(self.created_at)).days


def parse_issue(issue: Mapping) -> IssueRecord:
    """
    Build an IssueRecord from a Jira search result issue.

    Raises:
        ValueError: if created/updated timestamps are missing or invalid
    """
    fields = issue.get("fields") or {}
    project = fields.get("project") or {}
    status = fields.get("status") or {}
    assignee = fields.get("assignee")
    priority = fields.get("priority")

    return IssueRecord(
        key=issue.get("key", ""),
        project_key=project.get("key", ""),
        project_name=project.get("name", ""),
        status_name=status.get("name", ""),
        created_at=parse_datetime(fields.get("created")),
        updated_at=parse_datetime(fields.get("updated")),
        assignee_email=assignee.get("emailAddress") if assignee else None,
        priority_name=priority.get("name") if priority else None,
    )


def normalize_search_results(
    issues: Iterable[IssueRecord],
    limit: int = SEARCH_RESULT_LIMIT
) -> list[IssueRecord]:
    """Order issues by last update (newest first) and cap at the search limit."""
    ordered = sorted(issues, key=lambda i: as_utc(i.updated_at), reverse=True)
    return ordered[:limit]
