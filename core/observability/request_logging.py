"""Request logging helpers for HTTP and WebSocket traffic."""
from __future__ import annotations

import json
import logging
import urllib.parse
from typing import Any, Iterable, Mapping

from fastapi import FastAPI, Request, WebSocket

_PAYLOAD_PREVIEW_LIMIT = 4096
_SENSITIVE_HEADERS = {"authorization", "cookie", "x-api-key", "proxy-authorization"}
# Paths to skip HTTP request logging (polled by clients)
_QUIET_PATH_PREFIXES = ("/health",)
# Auth entries, proxies and certs carry secrets in their bodies
_SENSITIVE_PAYLOAD_KEYS = {
    "access_token",
    "accesstoken",
    "api_key",
    "apikey",
    "authorization",
    "clientsecret",
    "client_secret",
    "cookie",
    "key",
    "passphrase",
    "password",
    "privatekey",
    "refresh_token",
    "refreshtoken",
    "secret",
    "token",
}
_TOKEN_PREVIEW_LENGTH = 12


def _redact_token(token_value: str) -> str:
    """Return a preview of sensitive tokens while hiding the rest."""

    if not isinstance(token_value, str):
        return "***"

    if len(token_value) <= _TOKEN_PREVIEW_LENGTH:
        return "***"

    preview = token_value[:_TOKEN_PREVIEW_LENGTH]
    return f"{preview}***"


def _format_client_address(client: tuple[str, int] | None) -> str:
    if not client:
        return "unknown"
    host, port = client
    return f"{host}:{port}" if port is not None else host


def _format_body_preview(body: bytes) -> str:
    if not body:
        return "<empty>"

    is_truncated = len(body) > _PAYLOAD_PREVIEW_LIMIT
    snippet = body[:_PAYLOAD_PREVIEW_LIMIT]

    try:
        text = snippet.decode("utf-8")
    except UnicodeDecodeError:
        return f"<binary {len(body)} bytes>"

    text = " ".join(text.split())
    if is_truncated:
        return f"{text}... ({len(body)} bytes)"
    return text


def _format_query(query: str) -> str:
    if not query:
        return "<none>"

    params = urllib.parse.parse_qs(query, keep_blank_values=True)
    redacted_params: dict[str, list[str]] = {}
    for key, values in params.items():
        if key.lower() in _SENSITIVE_PAYLOAD_KEYS:
            redacted_params[key] = [_redact_token(value) for value in values]
        else:
            redacted_params[key] = values

    return urllib.parse.urlencode(redacted_params, doseq=True)


def _mask_headers(headers: Iterable[tuple[str, str]]) -> Mapping[str, str]:
    masked: dict[str, str] = {}
    for key, value in headers:
        if key.lower() in _SENSITIVE_HEADERS:
            masked[key] = "***"
        else:
            masked[key] = value
    return masked


def _redact_payload(value: Any, *, depth: int = 8) -> Any:
    if depth <= 0:
        return "<max depth reached>"

    if isinstance(value, Mapping):
        redacted: dict[Any, Any] = {}
        for key, item in value.items():
            if str(key).lower() in _SENSITIVE_PAYLOAD_KEYS:
                redacted[key] = _redact_token(str(item)) if item else "***"
            else:
                redacted[key] = _redact_payload(item, depth=depth - 1)
        return redacted

    if isinstance(value, (list, tuple, set)):
        return [_redact_payload(item, depth=depth - 1) for item in value]

    return value


def _json_default(value: Any) -> str:
    return repr(value)


def render_payload_preview(payload: Any) -> str:
    """Return a redacted, length-limited preview for debug logging."""

    if payload is None:
        return "<none>"

    if isinstance(payload, (bytes, bytearray, str)):
        raw = payload.encode("utf-8", errors="ignore") if isinstance(payload, str) else bytes(payload)
        try:
            payload = json.loads(raw)
        except (ValueError, RecursionError):
            return _format_body_preview(raw)

    try:
        serialized = json.dumps(
            _redact_payload(payload),
            default=_json_default,
            ensure_ascii=False,
            separators=(",", ":"),
        )
    except (TypeError, ValueError, RecursionError):
        serialized = repr(payload)

    return _format_body_preview(serialized.encode("utf-8", errors="ignore"))


def register_http_request_logging(app: FastAPI, *, logger_name: str = "core.http") -> None:
    """Attach middleware that logs every HTTP request."""

    if getattr(app.state, "_http_request_logging_installed", False):  # pragma: no cover - idempotence
        return

    logger = logging.getLogger(logger_name)

    @app.middleware("http")
    async def _log_request(request: Request, call_next):  # type: ignore[override]
        path = request.url.path
        if any(path.startswith(prefix) for prefix in _QUIET_PATH_PREFIXES):
            return await call_next(request)

        client = request.client
        client_addr = _format_client_address((client.host, client.port) if client else None)
        logger.info("HTTP %s %s from %s", request.method, path, client_addr)

        if logger.isEnabledFor(logging.DEBUG):
            body = await request.body()
            if body:
                request._body = body  # type: ignore[attr-defined]  # Allow downstream handlers to re-read
            debug_parts: list[str] = []
            if request.url.query:
                debug_parts.append(f"query={_format_query(request.url.query)}")
            if body:
                debug_parts.append(f"body={render_payload_preview(body)}")
            logger.debug(
                "HTTP %s %s payload %s",
                request.method,
                path,
                "; ".join(debug_parts) if debug_parts else "<none>",
            )

        return await call_next(request)

    app.state._http_request_logging_installed = True


def log_websocket_request(
    websocket: WebSocket,
    *,
    logger: logging.Logger | None = None,
    label: str | None = None,
) -> None:
    """Log metadata about an inbound WebSocket request."""

    log = logger or logging.getLogger("core.websocket")
    name = label or "WebSocket"
    client = websocket.client
    client_addr = _format_client_address((client.host, client.port) if client else None)
    log.info("%s connection requested for %s from %s", name, websocket.url.path, client_addr)

    debug_parts: list[str] = []
    if websocket.url.query:
        debug_parts.append(f"query={_format_query(websocket.url.query)}")

    headers = _mask_headers(websocket.headers.items())
    if headers:
        debug_parts.append(f"headers={headers}")

    if debug_parts:
        log.debug("%s request details: %s", name, "; ".join(debug_parts))


__all__ = ["log_websocket_request", "register_http_request_logging", "render_payload_preview"]
