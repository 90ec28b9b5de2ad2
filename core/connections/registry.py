"""In-memory registry of WebSocket connections subscribed to state events.

One instance is created per server process (see ``main.lifespan``) and handed
to the WebSocket endpoint and the broadcast bus.  The registry only tracks
membership: it never opens, closes or writes to a connection.

Membership is keyed by object identity.  ``fastapi.WebSocket`` is a
``Mapping`` and therefore unhashable, so connections are stored by ``id()``;
the registry keeps a reference to each member, which keeps its ``id`` stable
until it is deregistered.

All methods are synchronous and contain no suspension points, so on the
asyncio event loop each call is atomic with respect to other tasks.  Readers
that await while iterating must use :meth:`snapshot`.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, Tuple

from .transport import Connection

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """Identity-keyed set of live connections."""

    def __init__(self) -> None:
        self._connections: Dict[int, Connection] = {}

    def register(self, connection: Connection) -> None:
        """Add ``connection``; registering an existing member is a no-op."""

        key = id(connection)
        if key in self._connections:
            return
        self._connections[key] = connection
        logger.info("WebSocket client connected. Total clients: %d", len(self._connections))

    def deregister(self, connection: Connection) -> None:
        """Remove ``connection`` if present; absent members are ignored."""

        if self._connections.pop(id(connection), None) is None:
            return
        logger.info("WebSocket client disconnected. Total clients: %d", len(self._connections))

    def size(self) -> int:
        return len(self._connections)

    def snapshot(self) -> Tuple[Connection, ...]:
        """Return the current members as an immutable tuple."""

        return tuple(self._connections.values())

    def clear(self) -> None:
        """Drop every member (used when the server shuts down)."""

        dropped = len(self._connections)
        self._connections.clear()
        if dropped:
            logger.info("Connection registry cleared (%d clients dropped)", dropped)

    def __contains__(self, connection: object) -> bool:
        return self._connections.get(id(connection)) is connection

    def __len__(self) -> int:
        return len(self._connections)

    def __iter__(self) -> Iterator[Connection]:
        return iter(self.snapshot())


__all__ = ["ConnectionRegistry"]
