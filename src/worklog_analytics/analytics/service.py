from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

from ..core.constants import UNKNOWN_USER_NAME
from ..core.enums import Dimension, PeriodName
from ..core.exceptions import ValidationError
from ..periods.boundaries import Period, resolve_period
from ..scopes.model import ResolvedScope, Unscoped
from ..users.repository import UserRepository
from ..worklogs.filters import compile_filters
from ..worklogs.model import FilterSet, WorkLogRow
from ..worklogs.repository import WorkLogRepository
from ..worklogs.service import WorkLogQueryService
from .aggregation import AggregationEngine, AggregationResult

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")

# Periods whose summary cards all show the plain period total.
_SHORT_PERIODS = {PeriodName.TODAY, PeriodName.WEEK, PeriodName.LAST_WEEK}


@dataclass(frozen=True)
class PersonalStats:
    summary: dict
    by_project: list[dict]
    by_category: list[dict]
    by_user: list[dict]
    recent_logs: list[dict]
    trend: dict


@dataclass(frozen=True)
class ProjectStats:
    projects: list[dict]
    summary: dict


@dataclass(frozen=True)
class TeamStats:
    summary: dict
    by_member: list[dict]
    by_project: list[dict]
    activity_status: list[dict]


def _avg(total: Decimal, divisor: int) -> Decimal:
    if divisor <= 0:
        return Decimal("0.00")
    return (total / Decimal(divisor)).quantize(_CENT, rounding=ROUND_HALF_UP)


def _rows(result: AggregationResult, id_field: str, name_field: str, **extra_fields: str) -> list[dict]:
    out = []
    for b in result.buckets:
        row = {
            id_field: b.key,
            name_field: b.label,
            "total_hours": b.total_hours,
            "log_count": b.record_count,
            "percentage": b.percentage_of_total,
        }
        for out_name, attr in extra_fields.items():
            row[out_name] = getattr(b, attr)
        out.append(row)
    return out


def _daily(result: AggregationResult) -> list[dict]:
    return [{"date": b.key, "total_hours": b.total_hours} for b in result.buckets]


def _recent_row(row: WorkLogRow) -> dict:
    r = row.record
    return {
        "id": r.worklog_id,
        "date": r.work_date,
        "hours": r.hours,
        "project_name": row.project_name,
        "category_name": row.category_name,
        "user_name": row.user_display,
    }


class StatsService:
    """Dashboard composites, each built by composing ``AggregationEngine.aggregate`` calls."""

    def __init__(
        self,
        engine: AggregationEngine,
        queries: WorkLogQueryService,
        worklogs: WorkLogRepository,
        users: UserRepository,
        *,
        tz,
    ):
        self._engine = engine
        self._queries = queries
        self._worklogs = worklogs
        self._users = users
        self._tz = tz

    def _period(self, period, start_date, end_date, now) -> Period:
        return resolve_period(period, tz=self._tz, reference=now, start_date=start_date, end_date=end_date)

    @staticmethod
    def _in_period(filters: FilterSet, period: Period) -> FilterSet:
        return replace(filters, start_date=period.start_date, end_date=period.end_date)

    def personal_stats(
        self,
        scope: ResolvedScope,
        period: Union[PeriodName, str] = PeriodName.TODAY,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> PersonalStats:
        p = self._period(period, start_date, end_date, now)

        scoped = compile_filters({}, scope=scope)
        filters = self._in_period(scoped, p)

        by_project = self._engine.aggregate(filters, Dimension.PROJECT)
        by_category = self._engine.aggregate(filters, Dimension.CATEGORY)
        by_user = self._engine.aggregate(filters, Dimension.USER) if isinstance(scope, Unscoped) else None
        trend = self._engine.aggregate(filters, Dimension.DAY)

        total = trend.grand_total
        log_count = trend.record_count

        def card(hours: Decimal) -> dict:
            return {
                "total_hours": hours,
                "log_count": log_count,
                "period_start": p.start_date,
                "period_end": p.end_date,
            }

        if PeriodName(period) in _SHORT_PERIODS:
            cards = (card(total), card(total), card(total))
        else:
            # Weekly average divides by ceil(rangeDays / 7), even for short custom ranges.
            cards = (
                card(total),
                card(_avg(total, math.ceil(p.days / 7))),
                card(_avg(total, len(trend.buckets))),
            )

        return PersonalStats(
            summary={"card1": cards[0], "card2": cards[1], "card3": cards[2]},
            by_project=_rows(by_project, "project_id", "project_name"),
            by_category=_rows(by_category, "category_id", "category_name"),
            by_user=_rows(by_user, "user_id", "user_name") if by_user else [],
            recent_logs=[_recent_row(r) for r in self._queries.recent(scoped)],
            trend={"daily": _daily(trend)},
        )

    def project_stats(
        self,
        scope: ResolvedScope,
        period: Union[PeriodName, str] = PeriodName.WEEK,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        project_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> ProjectStats:
        p = self._period(period, start_date, end_date, now)
        filters = self._in_period(compile_filters({}, scope=scope), p)
        if project_id is not None:
            filters = replace(filters, project_id=int(project_id), project_ids=())

        projects = self._engine.aggregate(filters, Dimension.PROJECT)

        out: list[dict] = []
        for bucket in projects.buckets:
            per_project = replace(filters, project_id=bucket.key, project_ids=())
            members = self._engine.aggregate(per_project, Dimension.USER)
            categories = self._engine.aggregate(per_project, Dimension.CATEGORY)
            trend = self._engine.aggregate(per_project, Dimension.DAY)
            out.append(
                {
                    "project_id": bucket.key,
                    "project_name": bucket.label,
                    "total_hours": bucket.total_hours,
                    "log_count": bucket.record_count,
                    "percentage": bucket.percentage_of_total,
                    "member_count": len(members.buckets),
                    "by_member": _rows(members, "user_id", "user_name"),
                    "by_category": _rows(categories, "category_id", "category_name"),
                    "trend": {"daily": _daily(trend)},
                }
            )

        return ProjectStats(
            projects=out,
            summary={
                "total_projects": len(out),
                "total_hours": projects.grand_total,
                "total_logs": projects.record_count,
            },
        )

    def team_stats(
        self,
        member_ids: Iterable[int],
        period: Union[PeriodName, str] = PeriodName.WEEK,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> TeamStats:
        members = tuple(dict.fromkeys(int(m) for m in member_ids))
        if not members:
            raise ValidationError("User IDs are required for team stats", field="memberIds")

        p = self._period(period, start_date, end_date, now)
        filters = FilterSet(user_ids=members, start_date=p.start_date, end_date=p.end_date)

        totals = self._engine.aggregate(filters, Dimension.DAY)
        by_member = self._engine.aggregate(filters, Dimension.USER)
        by_project = self._engine.aggregate(filters, Dimension.PROJECT)

        # Activity is relative to "now", whatever range is being viewed.
        today = self._period(PeriodName.TODAY, None, None, now)
        this_week = self._period(PeriodName.WEEK, None, None, now)
        active_today = {b.key for b in self._engine.aggregate(self._in_period(filters, today), Dimension.USER).buckets}
        active_week = {b.key for b in self._engine.aggregate(self._in_period(filters, this_week), Dimension.USER).buckets}
        names = self._users.get_display_names(members)

        activity = [
            {
                "user_id": uid,
                "user_name": names.get(uid, UNKNOWN_USER_NAME),
                "has_log_today": uid in active_today,
                "has_log_this_week": uid in active_week,
                "last_log_date": self._worklogs.last_log_date(uid),
            }
            for uid in members
        ]

        logger.debug("team stats for %d members, total=%s", len(members), totals.grand_total)
        return TeamStats(
            summary={
                "total_hours": totals.grand_total,
                "average_hours_per_member": _avg(totals.grand_total, len(members)),
                "total_logs": totals.record_count,
                "period_start": p.start_date,
                "period_end": p.end_date,
            },
            by_member=_rows(
                by_member, "user_id", "user_name", last_log_date="last_date", working_days="working_days"
            ),
            by_project=_rows(by_project, "project_id", "project_name", member_count="member_count"),
            activity_status=activity,
        )
