"""
Standardized pagination and sorting parameters for list endpoints.

Out-of-range values are clamped rather than rejected: a missing or
non-positive page becomes 1, a missing or non-positive limit becomes the
default, and anything above the ceiling becomes the ceiling.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Query

from models.config import settings

# Public sort keys and the column each maps to; "name" resolves per entity
SORT_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "name": None,
    "title": "title",
}
DEFAULT_SORT_BY = "createdAt"
DEFAULT_SORT_ORDER = "desc"


@dataclass(frozen=True)
class PageParams:
    page: int = 1
    limit: int = 10
    sort_by: str = DEFAULT_SORT_BY
    sort_order: str = DEFAULT_SORT_ORDER

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def clamp_page(page: Optional[int]) -> int:
    if page is None or page < 1:
        return 1
    return page


def clamp_limit(
    limit: Optional[int],
    default: int = settings.DEFAULT_PAGE_LIMIT,
    maximum: int = settings.MAX_PAGE_LIMIT,
) -> int:
    """
    Clamp a requested page size.

    Args:
        limit: Requested page size, possibly None or out of range
        default: Used when no usable value was requested
        maximum: Hard ceiling

    Returns:
        Page size in ``1..maximum``
    """
    if limit is None or limit < 1:
        limit = default
    return min(limit, maximum)


def make_page_params(
    page: Optional[int] = None,
    limit: Optional[int] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
) -> PageParams:
    if sort_by not in SORT_FIELDS:
        sort_by = DEFAULT_SORT_BY
    if sort_order not in ("asc", "desc"):
        sort_order = DEFAULT_SORT_ORDER
    return PageParams(
        page=clamp_page(page),
        limit=clamp_limit(limit),
        sort_by=sort_by,
        sort_order=sort_order,
    )


def get_page_params(
    page: Optional[int] = Query(None, description="Page number (1-based)"),
    limit: Optional[int] = Query(
        None, description="Items per page (default 10, capped at 100)"
    ),
    sort_by: Optional[str] = Query(
        None, alias="sortBy", description="createdAt, updatedAt, name or title"
    ),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc or desc"),
) -> PageParams:
    """FastAPI dependency reading ``page``, ``limit``, ``sortBy`` and ``sortOrder``."""
    return make_page_params(page, limit, sort_by, sort_order)


def build_order_by(
    model: type,
    params: PageParams,
    default_column: str = "created_at",
    name_column: Optional[str] = None,
) -> list[Any]:
    """
    ORDER BY expressions for a model.

    Unknown keys, or keys naming a column the model lacks, fall back to
    ``default_column`` descending. ``id`` is appended as a tie-breaker so
    pages are stable.
    """
    column_name = SORT_FIELDS.get(params.sort_by)
    if params.sort_by == "name":
        column_name = name_column
    if params.sort_by == DEFAULT_SORT_BY:
        column_name = default_column

    column = getattr(model, column_name, None) if column_name else None
    ascending = column is not None and params.sort_order == "asc"
    if column is None:
        column = getattr(model, default_column)

    if ascending:
        return [column.asc(), model.id.asc()]
    return [column.desc(), model.id.desc()]


def pagination_meta(page: int, limit: int, total: int) -> dict[str, int]:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }
