from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Global user role stored on the users table."""

    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


class TeamRole(str, Enum):
    LEADER = "leader"
    MEMBER = "member"
    VIEWER = "viewer"


class Scope(str, Enum):
    """Breadth of users whose work logs a query may return."""

    OWN = "own"
    TEAM = "team"
    ALL = "all"


class PeriodName(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    LAST_WEEK = "lastWeek"
    LAST_MONTH = "lastMonth"
    CUSTOM = "custom"


class Dimension(str, Enum):
    """Grouping key supported by the aggregation engine."""

    PROJECT = "project"
    CATEGORY = "category"
    USER = "user"
    DAY = "day"


class Purpose(str, Enum):
    VIEW = "view"
    EXPORT = "export"
