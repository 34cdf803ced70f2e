# travelbill/api/v1/envelope.py
"""
Response envelope shared by every v1 endpoint:

    {"status": "ok" | "error", "data": ..., "message": ..., "errors": [...]}

Billing errors raised by the domain are turned into the same shape by the
exception handlers registered in ``travelbill.main``.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from fastapi.responses import JSONResponse
from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    status: str = "ok"
    data: T | None = None
    message: str | None = None
    errors: list[dict[str, Any]] | None = None


class PaginatedData(BaseModel, Generic[T]):
    items: list[T]
    total: int
    limit: int
    offset: int
    has_more: bool


def ok(data: Any = None, message: str | None = None) -> dict:
    """Build a success response dict."""
    return ApiResponse(status="ok", data=data, message=message).model_dump()


def error(message: str, errors: list[dict[str, Any]] | None = None) -> dict:
    """Build an error response dict."""
    return ApiResponse(status="error", message=message, errors=errors).model_dump()


def error_response(status_code: int, message: str, errors: list[dict[str, Any]] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error(message, errors))


def paginated(items: list, total: int, limit: int, offset: int) -> dict:
    """Build a paginated success response dict."""
    page = PaginatedData(
        items=items,
        total=total,
        limit=limit,
        offset=offset,
        has_more=(offset + limit) < total,
    )
    return ApiResponse(status="ok", data=page).model_dump()
