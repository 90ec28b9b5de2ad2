"""Observability helpers for request and WebSocket lifecycle logging."""

from .request_logging import (
    log_websocket_request,
    register_http_request_logging,
    render_payload_preview,
)
from .websocket_logging import (
    log_websocket_accepted,
    log_websocket_closed,
    log_websocket_error,
    log_websocket_message_ignored,
)

__all__ = [
    "log_websocket_accepted",
    "log_websocket_closed",
    "log_websocket_error",
    "log_websocket_message_ignored",
    "log_websocket_request",
    "register_http_request_logging",
    "render_payload_preview",
]
