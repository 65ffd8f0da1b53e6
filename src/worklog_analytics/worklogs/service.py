from __future__ import annotations

import logging
from dataclasses import replace

from ..core.constants import RECENT_LOGS_LIMIT
from .model import FilterSet, PaginationResult, WorkLogPage, WorkLogRow
from .repository import WorkLogRepository

logger = logging.getLogger(__name__)


class WorkLogQueryService:
    """Paginated retrieval with a stable date DESC, created_at DESC order."""

    def __init__(self, worklogs: WorkLogRepository):
        self._worklogs = worklogs

    def retrieve(self, filters: FilterSet) -> WorkLogPage:
        total = self._worklogs.count(filters)
        pagination = PaginationResult.build(page=filters.page, limit=filters.limit, total=total)

        # Past the last page: still a valid pagination block, just no rows.
        if filters.offset >= total:
            rows: list[WorkLogRow] = []
        else:
            rows = list(self._worklogs.list_page(filters, offset=filters.offset, limit=filters.limit))

        logger.debug("retrieved %d/%d work logs (page %d)", len(rows), total, filters.page)
        return WorkLogPage(records=rows, pagination=pagination)

    def recent(self, filters: FilterSet, *, limit: int = RECENT_LOGS_LIMIT) -> list[WorkLogRow]:
        return list(self._worklogs.list_page(replace(filters, page=1, limit=limit), offset=0, limit=limit))
