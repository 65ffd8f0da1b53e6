from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import Dimension
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import FilterSet, WorkLogRecord, WorkLogRow
from .repository import GroupTotal, WorkLogRepository

# count() and list_page() must see the same rows.
_ROW_JOINS = """
                JOIN projects p ON p.project_id = wl.project_id
                JOIN work_categories c ON c.category_id = wl.category_id
                JOIN users u ON u.user_id = wl.user_id
"""

_GROUPING = {
    Dimension.PROJECT: (
        "p.project_id",
        "p.name",
        "JOIN projects p ON p.project_id = wl.project_id",
    ),
    Dimension.CATEGORY: (
        "c.category_id",
        "c.name",
        "JOIN work_categories c ON c.category_id = wl.category_id",
    ),
    Dimension.USER: (
        "u.user_id",
        "COALESCE(u.full_name, u.email)",
        "JOIN users u ON u.user_id = wl.user_id",
    ),
    Dimension.DAY: ("wl.work_date", "wl.work_date", ""),
}


def _where(filters: FilterSet) -> tuple[str, list[object]]:
    clauses: list[str] = []
    params: list[object] = []

    if filters.user_ids:
        placeholders, ids = in_clause(filters.user_ids)
        clauses.append(f"wl.user_id IN ({placeholders})")
        params.extend(ids)
    elif filters.user_id is not None:
        clauses.append("wl.user_id=%s")
        params.append(int(filters.user_id))

    if filters.start_date is not None:
        clauses.append("wl.work_date >= %s")
        params.append(filters.start_date)
    if filters.end_date is not None:
        clauses.append("wl.work_date <= %s")
        params.append(filters.end_date)

    if filters.project_ids:
        placeholders, ids = in_clause(filters.project_ids)
        clauses.append(f"wl.project_id IN ({placeholders})")
        params.extend(ids)
    elif filters.project_id is not None:
        clauses.append("wl.project_id=%s")
        params.append(int(filters.project_id))

    if filters.category_ids:
        placeholders, ids = in_clause(filters.category_ids)
        clauses.append(f"wl.category_id IN ({placeholders})")
        params.extend(ids)
    elif filters.category_id is not None:
        clauses.append("wl.category_id=%s")
        params.append(int(filters.category_id))

    if filters.search_text:
        clauses.append("LOWER(wl.details) LIKE %s")
        params.append(f"%{_escape_like(filters.search_text.lower())}%")

    where = " AND ".join(clauses) if clauses else "1=1"
    return where, params


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class MySQLWorkLogRepository(WorkLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def count(self, filters: FilterSet) -> int:
        where, params = _where(filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS total
                FROM work_logs wl
                {_ROW_JOINS}
                WHERE {where}
                """,
                tuple(params),
            )
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def list_page(self, filters: FilterSet, *, offset: int, limit: int) -> Sequence[WorkLogRow]:
        where, params = _where(filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    wl.worklog_id, wl.user_id, wl.work_date, wl.hours,
                    wl.project_id, wl.category_id, wl.details, wl.created_at, wl.updated_at,
                    p.name AS project_name,
                    c.name AS category_name,
                    u.full_name AS user_name, u.email AS user_email
                FROM work_logs wl
                {_ROW_JOINS}
                WHERE {where}
                ORDER BY wl.work_date DESC, wl.created_at DESC, wl.worklog_id DESC
                LIMIT %s OFFSET %s
                """,
                (*params, int(limit), int(offset)),
            )
            return [
                WorkLogRow(
                    record=WorkLogRecord(
                        worklog_id=int(r["worklog_id"]),
                        user_id=int(r["user_id"]),
                        work_date=r["work_date"],
                        hours=Decimal(str(r["hours"])),
                        project_id=int(r["project_id"]),
                        category_id=int(r["category_id"]),
                        details=r.get("details"),
                        created_at=r["created_at"],
                        updated_at=r.get("updated_at"),
                    ),
                    project_name=r["project_name"],
                    category_name=r["category_name"],
                    user_name=r.get("user_name"),
                    user_email=r["user_email"],
                )
                for r in fetchall(cur)
            ]

    def group_totals(self, filters: FilterSet, dimension: Dimension) -> Sequence[GroupTotal]:
        key_col, label_col, join = _GROUPING[Dimension(dimension)]
        where, params = _where(filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    {key_col} AS group_key,
                    {label_col} AS group_label,
                    COALESCE(SUM(wl.hours), 0) AS total_hours,
                    COUNT(*) AS record_count,
                    COUNT(DISTINCT wl.user_id) AS member_count,
                    COUNT(DISTINCT wl.work_date) AS working_days,
                    MAX(wl.work_date) AS last_date
                FROM work_logs wl
                {join}
                WHERE {where}
                GROUP BY {key_col}, {label_col}
                """,
                tuple(params),
            )
            out: list[GroupTotal] = []
            for r in fetchall(cur):
                key = r["group_key"] if dimension == Dimension.DAY else int(r["group_key"])
                out.append(
                    GroupTotal(
                        key=key,
                        label=key.isoformat() if isinstance(key, date) else str(r["group_label"]),
                        total_hours=Decimal(str(r["total_hours"])),
                        record_count=int(r["record_count"]),
                        member_count=int(r["member_count"]),
                        working_days=int(r["working_days"]),
                        last_date=r.get("last_date"),
                    )
                )
            return out

    def last_log_date(self, user_id: int) -> Optional[date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT MAX(work_date) AS last_date FROM work_logs WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return row["last_date"] if row else None
