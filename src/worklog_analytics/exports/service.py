from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Union

from ..auth.identity import Identity
from ..common.datetime_utils import try_parse_iso_date
from ..common.validators import parse_int
from ..core.constants import MAX_EXPORT_DAYS
from ..core.enums import Purpose, Scope
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..scopes.model import SingleUser
from ..scopes.policy import Capability, Relationship, can
from ..scopes.service import ScopeResolver, parse_scope
from ..worklogs.filters import apply_scope, compile_filters
from ..worklogs.model import WorkLogRow
from ..worklogs.service import WorkLogQueryService

logger = logging.getLogger(__name__)

EXPORT_HEADERS = ["日付", "ユーザー", "工数", "プロジェクト", "カテゴリ", "詳細"]

_HOURS = Decimal("0.01")


@dataclass(frozen=True)
class ExportFile:
    content: bytes
    filename: str
    mimetype: str = "text/csv; charset=utf-8"


def write_worklogs_csv(rows: Iterable[WorkLogRow]) -> bytes:
    """Serialize rows to CSV bytes with a UTF-8 BOM.

    Fields containing a comma, double quote or newline are quoted with inner
    quotes doubled; missing details become an empty trailing field.
    """

    out = io.StringIO()
    writer = csv.writer(out, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for row in rows:
        r = row.record
        writer.writerow(
            [
                r.work_date.strftime("%Y-%m-%d"),
                row.user_display,
                str(Decimal(r.hours).quantize(_HOURS)),
                row.project_name,
                row.category_name,
                r.details or "",
            ]
        )
    return out.getvalue().encode("utf-8-sig")


def export_filename(start: date, end: date) -> str:
    return f"work-logs-{start.isoformat()}_{end.isoformat()}.csv"


class CsvExportService:
    def __init__(self, queries: WorkLogQueryService, scopes: ScopeResolver):
        self._queries = queries
        self._scopes = scopes

    def _check_range(self, date_from: Optional[str], date_to: Optional[str]) -> tuple[date, date]:
        if not (date_from or "").strip() or not (date_to or "").strip():
            missing = "from" if not (date_from or "").strip() else "to"
            raise ValidationError("Start date and end date are required", field=missing)

        start = try_parse_iso_date(date_from)
        end = try_parse_iso_date(date_to)
        if start is None or end is None:
            raise ValidationError("Invalid date format. Use YYYY-MM-DD", field="from" if start is None else "to")

        if start > end:
            raise ValidationError("Start date must be before or equal to end date", field="from")
        if (end - start).days > MAX_EXPORT_DAYS:
            raise ValidationError("Date range cannot exceed 31 days (1 month)", field="to")
        return start, end

    def export(
        self,
        identity: Optional[Identity],
        *,
        date_from: Optional[str],
        date_to: Optional[str],
        scope: Union[Scope, str, None] = Scope.OWN,
        project_ids: Optional[str] = None,
        category_ids: Optional[str] = None,
        target_user_id: Union[int, str, None] = None,
    ) -> ExportFile:
        if identity is None:
            raise AuthenticationError("Unauthorized")

        start, end = self._check_range(date_from, date_to)
        target = parse_int(target_user_id, "userId")
        filters = compile_filters(
            {
                "startDate": start.isoformat(),
                "endDate": end.isoformat(),
                "projectIds": project_ids,
                "categoryIds": category_ids,
            },
            paginate=False,
        )

        requested = parse_scope(scope)
        if requested == Scope.ALL and not can(identity.role, Relationship.NONE, Capability.EXPORT_ALL):
            raise AuthorizationError("Forbidden: Only admins can export all users' work logs", reason="role")

        if target is not None and target != identity.user_id:
            if not can(identity.role, Relationship.NONE, Capability.EXPORT_USER):
                raise AuthorizationError("Forbidden: You can only export your own work logs", reason="owner")

        if target is not None:
            resolved = SingleUser(target)
        else:
            resolved = self._scopes.resolve(identity, requested, purpose=Purpose.EXPORT)

        page = self._queries.retrieve(apply_scope(filters, resolved))
        if page.pagination.total > len(page.records):
            logger.warning(
                "export truncated to %d of %d rows for user %s",
                len(page.records),
                page.pagination.total,
                identity.user_id,
            )

        logger.info("user %s exported %d work logs (%s..%s)", identity.user_id, len(page.records), start, end)
        return ExportFile(content=write_worklogs_csv(page.records), filename=export_filename(start, end))
