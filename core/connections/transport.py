"""Transport-level view of a registered WebSocket connection."""

from __future__ import annotations

from typing import Any, Protocol

from starlette.websockets import WebSocketState


class Connection(Protocol):
    """Minimal surface the registry and bus rely on.

    ``fastapi.WebSocket`` satisfies it; tests use lightweight fakes.
    """

    client_state: WebSocketState
    application_state: WebSocketState

    async def send_text(self, data: str) -> Any:  # pragma: no cover - protocol
        ...


def is_writable(connection: Connection) -> bool:
    """True while both sides of the socket still report ``CONNECTED``."""

    return (
        getattr(connection, "client_state", None) == WebSocketState.CONNECTED
        and getattr(connection, "application_state", None) == WebSocketState.CONNECTED
    )


__all__ = ["Connection", "is_writable"]
