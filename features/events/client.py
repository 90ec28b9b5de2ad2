"""Client for the state-events WebSocket.

Used by Python front-ends and tooling that want to react to server-side state
changes.  Reconnection is the client's job: after an unexpected close it
retries up to ``max_reconnect_attempts`` times, ``reconnect_delay`` seconds
apart, and a successful connect resets the counter.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

import websockets

from core.websocket import WSEvent

logger = logging.getLogger(__name__)

DEFAULT_MAX_RECONNECT_ATTEMPTS = 5
DEFAULT_RECONNECT_DELAY = 2.0

# Handlers registered for this key receive every event
ANY_EVENT = "*"

EventHandler = Callable[[Dict[str, Any]], Union[Awaitable[None], None]]


class StateEventsClient:
    """Subscribe to ``/ws`` and dispatch envelopes to handlers by ``type``."""

    def __init__(
        self,
        url: str,
        *,
        max_reconnect_attempts: int = DEFAULT_MAX_RECONNECT_ATTEMPTS,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        connect: Optional[Callable[..., Any]] = None,
    ) -> None:
        self._url = url
        self._max_reconnect_attempts = max_reconnect_attempts
        self._reconnect_delay = reconnect_delay
        self._connect = connect or websockets.connect
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)
        self._websocket: Any = None
        self._stopped = asyncio.Event()
        self.reconnect_attempts = 0

    @property
    def connected(self) -> bool:
        return self._websocket is not None

    def on(self, event_type: str, handler: EventHandler) -> None:
        """Register ``handler`` for ``event_type`` (or ``ANY_EVENT``)."""

        self._handlers[event_type].append(handler)

    async def ping(self) -> None:
        if self._websocket is None:
            raise RuntimeError("State events client is not connected")
        await self._websocket.send(json.dumps({"type": WSEvent.PING.value}))

    async def close(self) -> None:
        self._stopped.set()
        if self._websocket is not None:
            await self._websocket.close()

    async def run(self) -> None:
        """Connect and dispatch events until closed or out of reconnect attempts."""

        while not self._stopped.is_set():
            try:
                async with self._connect(self._url) as websocket:
                    self._websocket = websocket
                    self.reconnect_attempts = 0
                    logger.info("Connected to state events at %s", self._url)
                    await self._listen(websocket)
            except (OSError, websockets.WebSocketException) as exc:
                logger.warning("State events connection to %s failed: %s", self._url, exc)
            finally:
                self._websocket = None

            if self._stopped.is_set():
                break
            if self.reconnect_attempts >= self._max_reconnect_attempts:
                logger.error(
                    "Giving up on state events at %s after %d reconnect attempts",
                    self._url,
                    self.reconnect_attempts,
                )
                break

            self.reconnect_attempts += 1
            logger.info(
                "Reconnecting to state events in %.1fs (attempt %d/%d)",
                self._reconnect_delay,
                self.reconnect_attempts,
                self._max_reconnect_attempts,
            )
            await asyncio.sleep(self._reconnect_delay)

    async def _listen(self, websocket: Any) -> None:
        async for raw in websocket:
            try:
                message = json.loads(raw)
            except ValueError:
                logger.debug("Ignoring undecodable state event: %r", raw)
                continue
            if not isinstance(message, dict) or not isinstance(message.get("type"), str):
                logger.debug("Ignoring malformed state event: %r", message)
                continue
            await self._dispatch(message)

    async def _dispatch(self, message: Dict[str, Any]) -> None:
        handlers = [*self._handlers.get(message["type"], ()), *self._handlers.get(ANY_EVENT, ())]
        for handler in handlers:
            try:
                result = handler(message)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("State event handler failed for %s", message["type"])


__all__ = [
    "ANY_EVENT",
    "DEFAULT_MAX_RECONNECT_ATTEMPTS",
    "DEFAULT_RECONNECT_DELAY",
    "EventHandler",
    "StateEventsClient",
]
