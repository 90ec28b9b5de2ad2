"""Utilities for formatting structured HTTP error responses."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import status

from core.exceptions import (
    ConfigurationError,
    NotFoundError,
    ServiceError,
    StorageError,
    ValidationError,
)
from core.pydantic_schemas import error as api_error


def _build_error_payload(
    *,
    error: str,
    context: Dict[str, Any] | None = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"error": error}
    if context:
        payload["context"] = context
    return payload


def format_validation_error(exc: ValidationError) -> Dict[str, Any]:
    """Return a standard payload for :class:`ValidationError`."""

    context = {"field": exc.field} if getattr(exc, "field", None) else None
    return _build_error_payload(error="validation_error", context=context)


def format_not_found_error(exc: NotFoundError) -> Dict[str, Any]:
    """Return a standard payload for :class:`NotFoundError`."""

    context = {"resource": exc.resource} if getattr(exc, "resource", None) else None
    return _build_error_payload(error="not_found", context=context)


def format_configuration_error(exc: ConfigurationError) -> Dict[str, Any]:
    """Return a standard payload for :class:`ConfigurationError`."""

    context = {"key": exc.key} if getattr(exc, "key", None) else None
    return _build_error_payload(error="configuration_error", context=context)


def format_storage_error(exc: StorageError) -> Dict[str, Any]:
    """Return a standard payload for :class:`StorageError`."""

    context = {"operation": exc.operation} if getattr(exc, "operation", None) else None
    return _build_error_payload(error="storage_error", context=context)


def build_error_response(exc: ServiceError) -> tuple[int, Dict[str, Any]]:
    """Map a service exception to an HTTP status code and API envelope."""

    if isinstance(exc, ValidationError):
        code, data = status.HTTP_400_BAD_REQUEST, format_validation_error(exc)
    elif isinstance(exc, NotFoundError):
        code, data = status.HTTP_404_NOT_FOUND, format_not_found_error(exc)
    elif isinstance(exc, ConfigurationError):
        code, data = status.HTTP_500_INTERNAL_SERVER_ERROR, format_configuration_error(exc)
    elif isinstance(exc, StorageError):
        code, data = status.HTTP_500_INTERNAL_SERVER_ERROR, format_storage_error(exc)
    else:
        code, data = status.HTTP_500_INTERNAL_SERVER_ERROR, _build_error_payload(error="service_error")

    return code, api_error(code=code, message=str(exc), data=data)


__all__ = [
    "build_error_response",
    "format_configuration_error",
    "format_not_found_error",
    "format_storage_error",
    "format_validation_error",
]
