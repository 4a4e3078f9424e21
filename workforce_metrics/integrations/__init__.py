"""
Workforce Metrics - Integrations

Typed records for the collections fetched by external collaborators:
- Work logs: time-tracking entries, users, projects, teams
- Shifts: roster codes per user and day
- Jira: issues from the tracker search
"""

from .worklogs import (
    WorkLogRecord,
    User,
    Project,
    Team,
    as_utc,
    parse_work_log,
    parse_user,
    parse_project,
    parse_team,
)
from .shifts import ShiftCode, ShiftScheduleEntry, parse_shift, shift_map_for
from .jira import (
    IssueRecord,
    IssueState,
    classify_status,
    parse_issue,
    normalize_search_results,
    SEARCH_RESULT_LIMIT,
    NO_PRIORITY,
    UNASSIGNED,
)

__all__ = [
    # Work logs
    "WorkLogRecord",
    "User",
    "Project",
    "Team",
    "as_utc",
    "parse_work_log",
    "parse_user",
    "parse_project",
    "parse_team",

    # Shifts
    "ShiftCode",
    "ShiftScheduleEntry",
    "parse_shift",
    "shift_map_for",

    # Jira
    "IssueRecord",
    "IssueState",
    "classify_status",
    "parse_issue",
    "normalize_search_results",
    "SEARCH_RESULT_LIMIT",
    "NO_PRIORITY",
    "UNASSIGNED",
]
