from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Union

from ..core.enums import Dimension
from ..core.exceptions import ValidationError
from ..worklogs.model import FilterSet
from ..worklogs.repository import GroupTotal, WorkLogRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregationBucket:
    key: Union[int, date]
    label: str
    total_hours: Decimal
    record_count: int
    percentage_of_total: float
    member_count: int = 0
    working_days: int = 0
    last_date: Optional[date] = None


@dataclass(frozen=True)
class AggregationResult:
    dimension: Dimension
    buckets: list[AggregationBucket]
    grand_total: Decimal

    @property
    def record_count(self) -> int:
        return sum(b.record_count for b in self.buckets)


def parse_dimension(value: Union[Dimension, str, None]) -> Dimension:
    try:
        return Dimension(value)
    except ValueError:
        raise ValidationError(f"Unknown dimension: {value!r}", field="dimension")


def _percentage(part: Decimal, total: Decimal) -> float:
    if total <= 0:
        return 0.0
    return float(part / total * 100)


def _bucket(group: GroupTotal, total: Decimal) -> AggregationBucket:
    return AggregationBucket(
        key=group.key,
        label=group.label,
        total_hours=group.total_hours,
        record_count=group.record_count,
        percentage_of_total=_percentage(group.total_hours, total),
        member_count=group.member_count,
        working_days=group.working_days,
        last_date=group.last_date,
    )


class AggregationEngine:
    """Group filtered work logs by one dimension and attach percentage shares.

    The grand total is the sum of the surviving buckets, so rows dropped from a
    dimension (deleted project, category or user) do not skew the percentages.
    """

    def __init__(self, worklogs: WorkLogRepository):
        self._worklogs = worklogs

    def aggregate(self, filters: FilterSet, dimension: Union[Dimension, str]) -> AggregationResult:
        dimension = parse_dimension(dimension)
        groups = list(self._worklogs.group_totals(filters, dimension))

        grand_total = sum((g.total_hours for g in groups), Decimal("0"))
        buckets = [_bucket(g, grand_total) for g in groups]

        if dimension == Dimension.DAY:
            buckets.sort(key=lambda b: b.key)
        else:
            buckets.sort(key=lambda b: (-b.total_hours, b.key))

        logger.debug("aggregated %d %s buckets, total=%s", len(buckets), dimension.value, grand_total)
        return AggregationResult(dimension=dimension, buckets=buckets, grand_total=grand_total)
