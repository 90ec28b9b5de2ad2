"""Helpers for consistent WebSocket lifecycle logging."""
from __future__ import annotations

import logging

from fastapi import WebSocket

from core.observability.request_logging import render_payload_preview


logger = logging.getLogger(__name__)


def _format_client(websocket: WebSocket) -> str:
    client = getattr(websocket, "client", None)
    if not client:
        return "unknown"

    host = getattr(client, "host", None)
    port = getattr(client, "port", None)

    if host and port is not None:
        return f"{host}:{port}"
    if host:
        return host
    return "unknown"


def _format_path(websocket: WebSocket) -> str:
    url = getattr(websocket, "url", None)
    return getattr(url, "path", None) or "<unknown>"


def log_websocket_accepted(websocket: WebSocket, *, total_clients: int | None = None) -> None:
    """Log that a WebSocket connection has been accepted."""

    context = f" (clients={total_clients})" if total_clients is not None else ""
    logger.info(
        "✅ WebSocket connection established: %s from %s%s",
        _format_path(websocket),
        _format_client(websocket),
        context,
    )


def log_websocket_closed(websocket: WebSocket, *, code: int | None = None) -> None:
    """Log a remote close of a WebSocket connection."""

    logger.info(
        "WebSocket connection closed: %s from %s (code=%s)",
        _format_path(websocket),
        _format_client(websocket),
        code if code is not None else "<none>",
    )


def log_websocket_error(
    websocket: WebSocket,
    *,
    error: BaseException,
    context: str | None = None,
) -> None:
    """Log an error that occurred while handling a WebSocket connection."""

    path = _format_path(websocket)
    client_addr = _format_client(websocket)
    message = (
        f"WebSocket error for {path} from {client_addr}"
        if not context
        else f"WebSocket error ({context}) for {path} from {client_addr}"
    )
    logger.error("%s: %s", message, error, exc_info=error)


def log_websocket_message_ignored(websocket: WebSocket, *, reason: str, raw: object) -> None:
    """Debug-log an inbound frame that was dropped."""

    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(
        "Ignoring WebSocket message from %s (%s): %s",
        _format_client(websocket),
        reason,
        render_payload_preview(raw),
    )


__all__ = [
    "log_websocket_accepted",
    "log_websocket_closed",
    "log_websocket_error",
    "log_websocket_message_ignored",
]
