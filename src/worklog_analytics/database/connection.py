from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connect_timeout: int = 10

    @classmethod
    def from_settings(cls, settings: Mapping[str, object]) -> "DBConfig":
        """Build from a settings ``DB_CONFIG`` dict (port and timeout optional)."""

        return cls(
            host=str(settings["host"]),
            port=int(settings.get("port", 3306)),
            user=str(settings["user"]),
            password=str(settings.get("password", "")),
            database=str(settings["database"]),
            connect_timeout=int(settings.get("connect_timeout", 10)),
        )


class DatabaseConnection:
    """Process-wide connection factory for the work-log store.

    Each repository call opens its own short-lived connection. Sessions are
    autocommit since this service never writes, and use utf8mb4 so user and
    project names round-trip unchanged.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=self._config.port,
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            connection_timeout=self._config.connect_timeout,
            charset="utf8mb4",
            autocommit=True,
        )
