"""HTTP/WebSocket server configuration."""

from __future__ import annotations

from core.exceptions import ConfigurationError
from core.utils.env import get_env

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3456
DEFAULT_GREETING_MESSAGE = "Connected to Wave Client Server"

# Localhost origins are always accepted outside production (React/Vite/etc.)
LOCAL_ORIGIN_REGEX = r"^(https?|vscode-webview)://(localhost|127\.0\.0\.1)(:\d+)?$"


def get_host() -> str:
    return (get_env("WAVE_SERVER_HOST", default=DEFAULT_HOST) or DEFAULT_HOST).strip()


def get_port() -> int:
    """Return the bind port, validating ``WAVE_SERVER_PORT`` when set."""

    raw = get_env("WAVE_SERVER_PORT")
    if raw is None or not raw.strip():
        return DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"WAVE_SERVER_PORT must be an integer, got {raw!r}", key="WAVE_SERVER_PORT"
        ) from exc
    if not 0 < port < 65536:
        raise ConfigurationError(
            f"WAVE_SERVER_PORT out of range: {port}", key="WAVE_SERVER_PORT"
        )
    return port


def get_cors_origins() -> list[str]:
    raw = get_env("WAVE_CORS_ORIGINS", default="") or ""
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_greeting_message() -> str:
    return get_env("WAVE_GREETING_MESSAGE", default=DEFAULT_GREETING_MESSAGE) or DEFAULT_GREETING_MESSAGE


__all__ = [
    "DEFAULT_GREETING_MESSAGE",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "LOCAL_ORIGIN_REGEX",
    "get_cors_origins",
    "get_greeting_message",
    "get_host",
    "get_port",
]
