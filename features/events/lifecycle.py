"""Per-connection lifecycle for the state-events WebSocket.

Each accepted socket moves through ``CONNECTING -> OPEN -> CLOSED``:

- open: accept, register with the :class:`ConnectionRegistry`, then send the
  ``connected`` greeting to this socket only
- message: hand the frame to the keep-alive responder
- close / error: deregister; errors are logged, nothing is retried

``CLOSED`` is absorbing, so the registry is touched at most once on the way
out no matter how many close/error signals arrive.
"""

from __future__ import annotations

import logging
from enum import Enum

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect

from core.connections import ConnectionRegistry
from core.observability import log_websocket_accepted, log_websocket_closed, log_websocket_error
from core.websocket import build_greeting, encode_envelope

from .keepalive import handle_inbound_frame

logger = logging.getLogger(__name__)


class ConnectionPhase(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class ConnectionSession:
    """Drive one WebSocket from accept to deregistration."""

    def __init__(
        self,
        websocket: WebSocket,
        registry: ConnectionRegistry,
        *,
        greeting_message: str,
    ) -> None:
        self._websocket = websocket
        self._registry = registry
        self._greeting_message = greeting_message
        self.phase = ConnectionPhase.CONNECTING

    async def open(self) -> None:
        await self._websocket.accept()
        self._registry.register(self._websocket)
        self.phase = ConnectionPhase.OPEN
        log_websocket_accepted(self._websocket, total_clients=self._registry.size())
        await self._websocket.send_text(encode_envelope(build_greeting(self._greeting_message)))

    async def on_message(self, raw: str | bytes | None) -> None:
        if self.phase is not ConnectionPhase.OPEN:
            return
        await handle_inbound_frame(self._websocket, raw)

    def on_close(self, code: int | None = None) -> None:
        if self.phase is ConnectionPhase.CLOSED:
            return
        self.phase = ConnectionPhase.CLOSED
        self._registry.deregister(self._websocket)
        log_websocket_closed(self._websocket, code=code)

    def on_error(self, error: BaseException) -> None:
        if self.phase is ConnectionPhase.CLOSED:
            return
        self.phase = ConnectionPhase.CLOSED
        log_websocket_error(self._websocket, error=error, context="state events")
        self._registry.deregister(self._websocket)

    async def run(self) -> None:
        """Serve the connection until the client goes away."""

        try:
            await self.open()
            while self.phase is ConnectionPhase.OPEN:
                message = await self._websocket.receive()
                if message.get("type") == "websocket.disconnect":
                    self.on_close(message.get("code"))
                    break
                text = message.get("text")
                await self.on_message(text if text is not None else message.get("bytes"))
        except WebSocketDisconnect as exc:
            self.on_close(exc.code)
        except Exception as exc:
            self.on_error(exc)
        finally:
            # Cancellation or anything else that skipped the handlers above
            self.on_close()


__all__ = ["ConnectionPhase", "ConnectionSession"]
