from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional

import pytest

from worklog_analytics.container import wire_container
from worklog_analytics.core.enums import Dimension, Role, TeamRole
from worklog_analytics.teams.model import Team, TeamMembership
from worklog_analytics.worklogs.model import FilterSet, WorkLogRecord, WorkLogRow
from worklog_analytics.worklogs.repository import GroupTotal

ORG_TZ = "Asia/Tokyo"


def make_log(
    worklog_id: int,
    user_id: int,
    work_date: date,
    hours: str,
    *,
    project_id: int = 1,
    category_id: int = 1,
    details: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> WorkLogRecord:
    return WorkLogRecord(
        worklog_id=worklog_id,
        user_id=user_id,
        work_date=work_date,
        hours=Decimal(hours),
        project_id=project_id,
        category_id=category_id,
        details=details,
        created_at=created_at or datetime.combine(work_date, datetime.min.time()) + timedelta(hours=18),
    )


@dataclass
class InMemoryWorkLogs:
    records: list[WorkLogRecord] = field(default_factory=list)
    projects: dict[int, str] = field(default_factory=lambda: {1: "Alpha", 2: "Beta"})
    categories: dict[int, str] = field(default_factory=lambda: {1: "Dev", 2: "Review"})
    users: dict[int, tuple[Optional[str], str]] = field(
        default_factory=lambda: {
            1: ("Alice", "alice@example.com"),
            2: (None, "bob@example.com"),
            3: ("Carol", "carol@example.com"),
        }
    )

    def add(self, *records: WorkLogRecord) -> "InMemoryWorkLogs":
        self.records.extend(records)
        return self

    def _matches(self, f: FilterSet, r: WorkLogRecord) -> bool:
        if f.user_ids and r.user_id not in f.user_ids:
            return False
        if not f.user_ids and f.user_id is not None and r.user_id != f.user_id:
            return False
        if f.start_date is not None and r.work_date < f.start_date:
            return False
        if f.end_date is not None and r.work_date > f.end_date:
            return False
        if f.project_ids and r.project_id not in f.project_ids:
            return False
        if not f.project_ids and f.project_id is not None and r.project_id != f.project_id:
            return False
        if f.category_ids and r.category_id not in f.category_ids:
            return False
        if not f.category_ids and f.category_id is not None and r.category_id != f.category_id:
            return False
        if f.search_text and f.search_text.lower() not in (r.details or "").lower():
            return False
        return True

    def _joined(self, r: WorkLogRecord) -> bool:
        return r.project_id in self.projects and r.category_id in self.categories and r.user_id in self.users

    def _rows(self, f: FilterSet) -> list[WorkLogRecord]:
        rows = [r for r in self.records if self._matches(f, r) and self._joined(r)]
        rows.sort(key=lambda r: (r.work_date, r.created_at, r.worklog_id), reverse=True)
        return rows

    def count(self, filters: FilterSet) -> int:
        return len(self._rows(filters))

    def list_page(self, filters: FilterSet, *, offset: int, limit: int):
        out = []
        for r in self._rows(filters)[offset : offset + limit]:
            name, email = self.users[r.user_id]
            out.append(
                WorkLogRow(
                    record=r,
                    project_name=self.projects[r.project_id],
                    category_name=self.categories[r.category_id],
                    user_name=name,
                    user_email=email,
                )
            )
        return out

    def _group(self, dimension: Dimension, r: WorkLogRecord):
        if dimension == Dimension.PROJECT:
            return (r.project_id, self.projects[r.project_id]) if r.project_id in self.projects else None
        if dimension == Dimension.CATEGORY:
            return (r.category_id, self.categories[r.category_id]) if r.category_id in self.categories else None
        if dimension == Dimension.USER:
            if r.user_id not in self.users:
                return None
            name, email = self.users[r.user_id]
            return r.user_id, name or email
        return r.work_date, r.work_date.isoformat()

    def group_totals(self, filters: FilterSet, dimension: Dimension):
        dimension = Dimension(dimension)
        groups: dict = {}
        for r in self.records:
            if not self._matches(filters, r):
                continue
            group = self._group(dimension, r)
            if group is None:
                continue
            groups.setdefault(group, []).append(r)

        return [
            GroupTotal(
                key=key,
                label=label,
                total_hours=sum((r.hours for r in rows), Decimal("0")),
                record_count=len(rows),
                member_count=len({r.user_id for r in rows}),
                working_days=len({r.work_date for r in rows}),
                last_date=max(r.work_date for r in rows),
            )
            for (key, label), rows in groups.items()
        ]

    def last_log_date(self, user_id: int) -> Optional[date]:
        dates = [r.work_date for r in self.records if r.user_id == user_id]
        return max(dates) if dates else None


@dataclass
class InMemoryTeams:
    memberships: list[TeamMembership] = field(default_factory=list)
    teams: dict[int, str] = field(default_factory=dict)

    def join(self, team_id: int, user_id: int, role: TeamRole = TeamRole.MEMBER) -> "InMemoryTeams":
        self.memberships.append(
            TeamMembership(team_id=team_id, team_name=self.teams[team_id], user_id=user_id, role=role)
        )
        return self

    def _ordered(self) -> list[TeamMembership]:
        return sorted(self.memberships, key=lambda m: m.team_id)

    def get_memberships_for_user(self, user_id: int):
        return [m for m in self._ordered() if m.user_id == user_id]

    def get_member_ids(self, team_ids: Iterable[int]):
        wanted = set(team_ids)
        return [m.user_id for m in self._ordered() if m.team_id in wanted]

    def get_by_id(self, team_id: int) -> Optional[Team]:
        if team_id not in self.teams:
            return None
        return Team(team_id=team_id, name=self.teams[team_id])


@dataclass
class InMemoryUsers:
    names: dict[int, str] = field(default_factory=lambda: {1: "Alice", 2: "bob@example.com", 3: "Carol"})

    def get_display_names(self, user_ids: Iterable[int]) -> dict[int, str]:
        return {uid: self.names[uid] for uid in user_ids if uid in self.names}


@pytest.fixture
def fixed_now() -> datetime:
    # Friday, org-local wall clock
    return datetime(2024, 3, 15, 10, 0, 0)


@pytest.fixture
def worklogs_repo() -> InMemoryWorkLogs:
    return InMemoryWorkLogs()


@pytest.fixture
def teams_repo() -> InMemoryTeams:
    teams = InMemoryTeams(teams={10: "Platform", 11: "Mobile", 12: "Empty"})
    teams.join(10, 1, TeamRole.LEADER).join(10, 2).join(10, 3)
    teams.join(11, 1).join(11, 4)
    return teams


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers()


@pytest.fixture
def container(worklogs_repo, teams_repo, users_repo):
    return wire_container(
        worklogs_repo=worklogs_repo,
        teams_repo=teams_repo,
        users_repo=users_repo,
        org_timezone=ORG_TZ,
    )


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    from worklog_analytics.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(user_id: int, role: Role = Role.USER):
        with client.session_transaction() as sess:
            sess["user_id"] = user_id
            sess["role"] = role.value
        return client

    return _login
