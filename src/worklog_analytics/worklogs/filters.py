"""Compile raw query parameters into one canonical FilterSet.

Legacy clients send single-value ``projectId`` / ``categoryId``; newer ones send
comma-separated ``projectIds`` / ``categoryIds``. Precedence between the two is
decided in exactly one place, :func:`_resolve_ids`.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Mapping, Optional, TypeVar

from ..common.datetime_utils import parse_iso_date
from ..common.validators import parse_int, require_in_range, split_csv_ids
from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, EXPORT_ROW_LIMIT, MAX_PAGE_LIMIT
from ..core.exceptions import ValidationError
from ..scopes.model import ResolvedScope, SingleUser, Unscoped, UserSet
from .model import FilterSet

T = TypeVar("T")


class _Collector:
    """Runs field parsers and keeps every field-level error instead of stopping at the first."""

    def __init__(self):
        self.details: list[dict] = []

    def run(self, field: str, fn: Callable[[], T]) -> Optional[T]:
        try:
            return fn()
        except ValidationError as e:
            self.details.extend(e.details or [{"field": field, "message": str(e)}])
            return None

    def raise_if_any(self) -> None:
        if self.details:
            fields = ", ".join(d["field"] for d in self.details)
            raise ValidationError(f"Invalid query parameters: {fields}", details=self.details)


def _blank(value: Optional[str]) -> bool:
    return value is None or str(value).strip() == ""


def _parse_date(raw: Mapping[str, Optional[str]], field: str):
    value = raw.get(field)
    if _blank(value):
        return None
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"Invalid date format for {field}", field=field)


def _resolve_ids(
    raw: Mapping[str, Optional[str]], single_field: str, multi_field: str
) -> tuple[Optional[int], tuple[int, ...]]:
    """Non-empty multi-value wins; an empty one counts as absent and falls through to the single value."""

    many = split_csv_ids(raw.get(multi_field), multi_field)
    if many:
        return None, tuple(dict.fromkeys(many))
    return parse_int(raw.get(single_field), single_field), ()


def _apply_scope(scope: ResolvedScope, raw_user_id: Optional[int]) -> tuple[Optional[int], tuple[int, ...]]:
    if isinstance(scope, SingleUser):
        return scope.user_id, ()
    if isinstance(scope, UserSet):
        return None, tuple(scope.user_ids)
    if isinstance(scope, Unscoped):
        return None, ()
    return raw_user_id, ()


def compile_filters(
    raw: Mapping[str, Optional[str]],
    *,
    scope: Optional[ResolvedScope] = None,
    paginate: bool = True,
) -> FilterSet:
    """Build a FilterSet from query parameters.

    ``scope`` (from the scope resolver) always overrides a caller-supplied
    ``userId``. With ``paginate=False`` the export limit is used and paging
    parameters are ignored.
    """

    c = _Collector()

    start_date = c.run("startDate", lambda: _parse_date(raw, "startDate"))
    end_date = c.run("endDate", lambda: _parse_date(raw, "endDate"))

    projects = c.run("projectIds", lambda: _resolve_ids(raw, "projectId", "projectIds")) or (None, ())
    categories = c.run("categoryIds", lambda: _resolve_ids(raw, "categoryId", "categoryIds")) or (None, ())

    raw_user_id = None
    if scope is None:
        raw_user_id = c.run("userId", lambda: parse_int(raw.get("userId"), "userId"))

    if paginate:
        page = c.run(
            "page",
            lambda: require_in_range(parse_int(raw.get("page"), "page", default=DEFAULT_PAGE), "page", minimum=1),
        )
        limit = c.run(
            "limit",
            lambda: require_in_range(
                parse_int(raw.get("limit"), "limit", default=DEFAULT_PAGE_LIMIT),
                "limit",
                minimum=1,
                maximum=MAX_PAGE_LIMIT,
            ),
        )
    else:
        page, limit = DEFAULT_PAGE, EXPORT_ROW_LIMIT

    c.raise_if_any()

    search_text = raw.get("searchText")
    search_text = None if _blank(search_text) else str(search_text).strip()

    user_id, user_ids = _apply_scope(scope, raw_user_id)

    return FilterSet(
        user_id=user_id,
        user_ids=user_ids,
        start_date=start_date,
        end_date=end_date,
        project_id=projects[0],
        project_ids=projects[1],
        category_id=categories[0],
        category_ids=categories[1],
        search_text=search_text,
        page=page,
        limit=limit,
    )


def apply_scope(filters: FilterSet, scope: ResolvedScope) -> FilterSet:
    """Narrow an already validated FilterSet to a resolved scope."""

    user_id, user_ids = _apply_scope(scope, filters.user_id)
    return replace(filters, user_id=user_id, user_ids=user_ids)
