from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT


@dataclass(frozen=True)
class WorkLogRecord:
    """Domain entity: one work-log entry. Hours are bounded at write time."""

    worklog_id: int
    user_id: int
    work_date: date
    hours: Decimal
    project_id: int
    category_id: int
    details: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class WorkLogRow:
    """Read-model for listing and export: record joined with display fields."""

    record: WorkLogRecord
    project_name: str
    category_name: str
    user_name: Optional[str]
    user_email: str

    @property
    def user_display(self) -> str:
        return self.user_name or self.user_email


@dataclass(frozen=True)
class FilterSet:
    """Canonical, validated constraints for one retrieval / aggregation / export call.

    At most one of ``user_id`` / ``user_ids`` (and likewise for projects and
    categories) is set; the multi-value form is never an empty tuple.
    """

    user_id: Optional[int] = None
    user_ids: tuple[int, ...] = field(default_factory=tuple)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    project_id: Optional[int] = None
    project_ids: tuple[int, ...] = field(default_factory=tuple)
    category_id: Optional[int] = None
    category_ids: tuple[int, ...] = field(default_factory=tuple)
    search_text: Optional[str] = None
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class PaginationResult:
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> "PaginationResult":
        return cls(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit))


@dataclass(frozen=True)
class WorkLogPage:
    records: list[WorkLogRow]
    pagination: PaginationResult
