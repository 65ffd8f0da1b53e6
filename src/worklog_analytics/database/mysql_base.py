from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Tuple

import mysql.connector

from ..core.exceptions import InternalError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Read-only cursor on a fresh connection.

    Connector errors are logged with full detail and re-raised as InternalError,
    whose message is safe to return to clients.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        logger.exception("database connection failed")
        raise InternalError("Database unavailable") from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        logger.exception("database query failed")
        raise InternalError("Database query failed") from exc
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(values: Iterable[Any]) -> Tuple[str, Tuple[Any, ...]]:
    """Placeholders and params for ``col IN (...)``."""

    params = tuple(values)
    return ",".join(["%s"] * len(params)), params
