from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional

import pytz

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date.

    Raises ValueError for anything else (including ``2024-1-5`` or datetimes).
    """
    if not isinstance(value, str) or not _ISO_DATE.match(value.strip()):
        raise ValueError(f"Invalid date string: {value!r}")
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


def try_parse_iso_date(value: Optional[str]) -> Optional[date]:
    if not value or not value.strip():
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        return None


def org_timezone(name: str):
    return pytz.timezone(name)


def now_in(tz) -> datetime:
    """Current time in the given timezone.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(pytz.UTC).astimezone(tz)
