"""Standard API response envelope returned by every REST route."""

from __future__ import annotations

from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Canonical API response envelope shared across routers."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    code: int = Field(..., description="HTTP-like status code signalling success or failure")
    success: bool = Field(..., description="Indicates whether the operation completed successfully")
    message: str = Field(..., description="Human readable summary for UI clients")
    data: Optional[T] = Field(None, description="Optional domain payload")
    meta: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Optional metadata, e.g. the state kind that was changed",
    )


def api_response(
    *,
    code: int = 200,
    message: str,
    data: T | None = None,
    meta: Dict[str, Any] | None = None,
) -> Dict[str, Any]:
    """Return a serialisable API envelope with a consistent schema."""

    envelope = ApiResponse[Any](
        code=code,
        success=code < 400,
        message=message,
        data=data,
        meta=meta,
    )
    return envelope.model_dump()


def ok(message: str, data: T | None = None, meta: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """Shortcut for successful responses."""

    return api_response(code=200, message=message, data=data, meta=meta)


def error(
    code: int,
    message: str,
    data: Any | None = None,
    meta: Dict[str, Any] | None = None,
) -> Dict[str, Any]:
    """Shortcut for error responses with caller-provided status codes."""

    if code < 400:
        raise ValueError("Error responses must use an error HTTP status code (>= 400)")
    return api_response(code=code, message=message, data=data, meta=meta)


__all__ = ["ApiResponse", "api_response", "ok", "error"]
