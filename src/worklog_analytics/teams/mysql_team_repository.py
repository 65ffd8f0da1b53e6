from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import TeamRole
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Team, TeamMembership
from .repository import TeamRepository


class MySQLTeamRepository(TeamRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_memberships_for_user(self, user_id: int) -> Sequence[TeamMembership]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT tm.team_id, t.name AS team_name, tm.user_id, tm.role
                FROM team_members tm
                JOIN teams t ON t.team_id = tm.team_id
                WHERE tm.user_id=%s
                ORDER BY tm.team_id ASC
                """,
                (int(user_id),),
            )
            rows = fetchall(cur)
            return [
                TeamMembership(
                    team_id=int(r["team_id"]),
                    team_name=r["team_name"],
                    user_id=int(r["user_id"]),
                    role=TeamRole(r["role"]) if r.get("role") else None,
                )
                for r in rows
            ]

    def get_member_ids(self, team_ids: Iterable[int]) -> Sequence[int]:
        ids = [int(t) for t in team_ids]
        if not ids:
            return []
        placeholders, params = in_clause(ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT DISTINCT user_id FROM team_members WHERE team_id IN ({placeholders}) ORDER BY user_id",
                params,
            )
            return [int(r["user_id"]) for r in fetchall(cur)]

    def get_by_id(self, team_id: int) -> Optional[Team]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT team_id, name FROM teams WHERE team_id=%s", (int(team_id),))
            r = fetchone(cur)
            if not r:
                return None
            return Team(team_id=int(r["team_id"]), name=r["name"])
