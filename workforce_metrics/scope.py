"""
Reporting Scope

The resolved dashboard filter: reporting window plus team, project and
user selections.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Mapping, Optional

from .calendar import iter_days, working_days
from .integrations import Project, Team, User, WorkLogRecord


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar date range."""
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def days(self) -> list[date]:
        return list(iter_days(self.start, self.end))

    @property
    def working_days(self) -> int:
        return working_days(self.start, self.end)

    def to_dict(self) -> dict:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class FilterSpec:
    """
    Dashboard filter. An empty selection means "no restriction".

    Projects may be selected by id or by name.
    """
    date_range: DateRange
    selected_teams: tuple = field(default_factory=tuple)
    selected_projects: tuple = field(default_factory=tuple)
    selected_users: tuple = field(default_factory=tuple)

    def includes_project(self, project: Project) -> bool:
        if not self.selected_projects:
            return True
        return project.id in self.selected_projects or project.name in self.selected_projects

    def includes_project_id(self, project_id, projects: Mapping[str, Project]) -> bool:
        if not self.selected_projects:
            return True
        project = projects.get(project_id)
        if project is None:
            return project_id in self.selected_projects
        return self.includes_project(project)

    def team_members(self, teams: Iterable[Team]) -> set[str]:
        """Union of members of the selected teams."""
        members = set()
        for team in teams:
            if team.id in self.selected_teams or team.name in self.selected_teams:
                members.update(team.members)
        return members

    def users_in_scope(self, users: Iterable[User], teams: Iterable[Team] = ()) -> list[User]:
        """
        Users matching both the user and the team selection, in input order.
        """
        in_scope = list(users)
        if self.selected_users:
            in_scope = [u for u in in_scope if u.email in self.selected_users]
        if self.selected_teams:
            members = self.team_members(teams)
            in_scope = [u for u in in_scope if u.email in members]
        return in_scope

    def projects_in_scope(self, projects: Iterable[Project]) -> list[Project]:
        return [p for p in projects if self.includes_project(p)]

    def work_logs_in_scope(
        self,
        work_logs: Iterable[WorkLogRecord],
        projects: Mapping[str, Project],
        user_emails: Optional[set[str]] = None
    ) -> list[WorkLogRecord]:
        """
        Work logs inside the date range and project restriction.

        Args:
            work_logs: Candidate logs
            projects: Project metadata keyed by id
            user_emails: If given, only logs by these users are kept
        """
        return [
            log for log in work_logs
            if self.date_range.contains(log.work_date)
            and self.includes_project_id(log.project_id, projects)
            and (user_emails is None or log.user_email in user_emails)
        ]

    def to_dict(self) -> dict:
        return {
            "date_range": self.date_range.to_dict(),
            "selected_teams": list(self.selected_teams),
            "selected_projects": list(self.selected_projects),
            "selected_users": list(self.selected_users),
        }


def project_index(projects: Iterable[Project]) -> dict[str, Project]:
    """Projects keyed by id."""
    return {project.id: project for project in projects}
