"""FastAPI dependencies exposing the process-wide event bus objects.

The registry and bus are created in ``main.lifespan`` and stored on
``app.state``; these helpers hand them to HTTP routes and WebSocket
endpoints alike.
"""

from __future__ import annotations

from starlette.requests import HTTPConnection

from core.config import Settings
from core.connections import ConnectionRegistry
from core.exceptions import ConfigurationError
from core.websocket import BroadcastBus


def _require_state(connection: HTTPConnection, name: str):
    value = getattr(connection.app.state, name, None)
    if value is None:
        raise ConfigurationError(
            f"Application state '{name}' is not initialised; is the lifespan running?",
            key=name,
        )
    return value


def get_app_settings(connection: HTTPConnection) -> Settings:
    return _require_state(connection, "settings")


def get_connection_registry(connection: HTTPConnection) -> ConnectionRegistry:
    return _require_state(connection, "connection_registry")


def get_broadcast_bus(connection: HTTPConnection) -> BroadcastBus:
    return _require_state(connection, "broadcast_bus")


__all__ = ["get_app_settings", "get_broadcast_bus", "get_connection_registry"]
