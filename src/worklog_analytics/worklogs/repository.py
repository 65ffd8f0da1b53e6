from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence, Union

from ..core.enums import Dimension
from .model import FilterSet, WorkLogRow


@dataclass(frozen=True)
class GroupTotal:
    """One group-by row from the store, before percentages are applied.

    ``key`` is the project/category/user id, or the date for the day dimension.
    """

    key: Union[int, date]
    label: str
    total_hours: Decimal
    record_count: int
    member_count: int = 0
    working_days: int = 0
    last_date: Optional[date] = None


class WorkLogRepository(Protocol):
    def count(self, filters: FilterSet) -> int:
        raise NotImplementedError

    def list_page(self, filters: FilterSet, *, offset: int, limit: int) -> Sequence[WorkLogRow]:
        """Rows ordered by work_date DESC, created_at DESC, id DESC."""

        raise NotImplementedError

    def group_totals(self, filters: FilterSet, dimension: Dimension) -> Sequence[GroupTotal]:
        """Sum hours / count rows per dimension key.

        Rows whose project, category or user no longer exists are left out of
        the matching dimension.
        """

        raise NotImplementedError

    def last_log_date(self, user_id: int) -> Optional[date]:
        raise NotImplementedError
