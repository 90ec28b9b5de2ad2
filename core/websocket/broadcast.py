"""Best-effort fan-out of envelopes to every registered connection."""

from __future__ import annotations

import logging

from core.connections import ConnectionRegistry, is_writable

from .envelopes import Envelope, build_banner, build_state_change, encode_envelope

logger = logging.getLogger(__name__)


class BroadcastBus:
    """Push envelopes to all connections in a :class:`ConnectionRegistry`.

    Delivery is at-most-once with no acknowledgement.  Connections that are
    not writable at iteration time are skipped but stay registered; removal
    is left to the connection lifecycle.  A failed send on one connection is
    logged and the remaining members are still attempted.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ConnectionRegistry:
        return self._registry

    async def broadcast(self, envelope: Envelope) -> int:
        """Send ``envelope`` to every writable member; return how many were sent."""

        payload = encode_envelope(envelope)
        event_type = envelope.event_type
        members = self._registry.snapshot()
        sent = 0

        for connection in members:
            # Removed while an earlier send was awaited
            if connection not in self._registry:
                continue
            if not is_writable(connection):
                logger.debug("Skipping non-writable WebSocket client for %s", event_type)
                continue
            try:
                await connection.send_text(payload)
            except Exception as exc:
                logger.warning("Failed to push %s to WebSocket client: %s", event_type, exc)
                continue
            sent += 1

        logger.debug("Broadcast %s to %d/%d clients", event_type, sent, len(members))
        return sent

    async def emit_banner(self, severity: str, message: str) -> int:
        return await self.broadcast(build_banner(severity, message))

    async def emit_state_change(self, kind: str) -> int:
        """Notify every client that state of ``kind`` changed."""

        return await self.broadcast(build_state_change(kind))


__all__ = ["BroadcastBus"]
