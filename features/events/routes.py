"""WebSocket route pushing state-change events to connected clients."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, WebSocket

from core.config import Settings
from core.connections import ConnectionRegistry
from core.observability import log_websocket_request

from .dependencies import get_app_settings, get_connection_registry
from .lifecycle import ConnectionSession

logger = logging.getLogger(__name__)

websocket_router = APIRouter(tags=["events"])


@websocket_router.websocket("/ws")
async def state_events_endpoint(
    websocket: WebSocket,
    registry: ConnectionRegistry = Depends(get_connection_registry),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """Subscribe a client to banner and ``<kind>Changed`` events."""

    log_websocket_request(websocket, logger=logger, label="State events")

    session = ConnectionSession(
        websocket,
        registry,
        greeting_message=settings.greeting_message,
    )
    await session.run()


__all__ = ["state_events_endpoint", "websocket_router"]
