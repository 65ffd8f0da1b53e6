"""Period boundary calculation in the organization timezone.

Boundaries are computed as wall-clock dates in the org timezone and only then
localized, so a "day" may be 23 or 25 hours long across a DST transition.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

import pytz

from ..common.datetime_utils import now_in
from ..core.enums import PeriodName
from ..core.exceptions import ValidationError

_DAY_START = time(0, 0, 0)
_DAY_END = time(23, 59, 59, 999999)


@dataclass(frozen=True)
class Period:
    start: datetime
    end: datetime

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()

    @property
    def days(self) -> int:
        """Number of calendar days covered, both ends inclusive."""
        return (self.end_date - self.start_date).days + 1


def _tz(tz):
    return pytz.timezone(tz) if isinstance(tz, str) else tz


def _local_day(tz, reference: Optional[datetime]) -> date:
    if reference is None:
        return now_in(tz).date()
    if reference.tzinfo is None:
        return reference.date()
    return reference.astimezone(tz).date()


def _span(tz, first: date, last: date) -> Period:
    return Period(
        start=tz.localize(datetime.combine(first, _DAY_START)),
        end=tz.localize(datetime.combine(last, _DAY_END)),
    )


def week_start(day: date) -> date:
    # isoweekday(): Monday=1 .. Sunday=7
    return day - timedelta(days=day.isoweekday() - 1)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    first = date(year, month, 1)
    if month == 12:
        next_first = date(year + 1, 1, 1)
    else:
        next_first = date(year, month + 1, 1)
    return first, next_first - timedelta(days=1)


def resolve_period(
    period: Union[PeriodName, str],
    *,
    tz,
    reference: Optional[datetime] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Period:
    """Resolve a named or custom period into absolute instants.

    ``reference`` defaults to now. Naive references are read as org-local wall
    clock; aware ones are converted into the org timezone first.
    """

    tz = _tz(tz)
    try:
        name = PeriodName(period)
    except ValueError:
        raise ValidationError(f"Unknown period: {period!r}", field="period")

    if name == PeriodName.CUSTOM:
        if start_date is None or end_date is None:
            missing = "startDate" if start_date is None else "endDate"
            raise ValidationError("Start and end dates are required for custom period", field=missing)
        if start_date > end_date:
            raise ValidationError("Start date must be before or equal to end date", field="startDate")
        return _span(tz, start_date, end_date)

    today = _local_day(tz, reference)

    if name == PeriodName.TODAY:
        return _span(tz, today, today)

    if name in (PeriodName.WEEK, PeriodName.LAST_WEEK):
        monday = week_start(today)
        if name == PeriodName.LAST_WEEK:
            monday -= timedelta(days=7)
        return _span(tz, monday, monday + timedelta(days=6))

    if name == PeriodName.MONTH:
        return _span(tz, *month_bounds(today.year, today.month))

    # lastMonth
    if today.month == 1:
        return _span(tz, *month_bounds(today.year - 1, 12))
    return _span(tz, *month_bounds(today.year, today.month - 1))
