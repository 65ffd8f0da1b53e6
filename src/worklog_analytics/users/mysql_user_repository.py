from __future__ import annotations

from typing import Iterable

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .repository import UserRepository


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_display_names(self, user_ids: Iterable[int]) -> dict[int, str]:
        ids = [int(u) for u in user_ids]
        if not ids:
            return {}
        placeholders, params = in_clause(ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT user_id, full_name, email FROM users WHERE user_id IN ({placeholders})",
                params,
            )
            return {int(r["user_id"]): (r.get("full_name") or r["email"]) for r in fetchall(cur)}
