"""
Response envelope helpers.

Every response body is ``{success, message, timestamp, data?}``; failures
add ``correlationId`` and, for validation failures, ``errors``.
"""

from typing import Any, Iterable, Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel

import models.schemas as schemas
from helpers.time_utils import format_iso8601, utc_now


def ok(message: str, data: Any = None) -> schemas.ApiResponse:
    return schemas.ApiResponse(message=message, data=data)


def page(
    message: str,
    items: Iterable[Any],
    item_schema: type[BaseModel],
    pagination: dict[str, int],
) -> schemas.ApiResponse:
    """Envelope for a list endpoint: ``data = {items, pagination}``."""
    return schemas.ApiResponse(
        message=message,
        data=schemas.PaginatedData(
            items=[item_schema.model_validate(item) for item in items],
            pagination=schemas.Pagination(**pagination),
        ),
    )


def failure(
    status_code: int,
    message: str,
    correlation_id: Optional[str] = None,
    errors: Optional[list[dict[str, str]]] = None,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    content: dict[str, Any] = {
        "success": False,
        "message": message,
        "timestamp": format_iso8601(utc_now()),
    }
    if correlation_id:
        content["correlationId"] = correlation_id
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content, headers=headers)
