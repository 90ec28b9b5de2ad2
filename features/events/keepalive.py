"""Ping/pong responder for the state-events WebSocket.

Independent of the broadcast path: a pong goes only to the connection that
sent the ping.  No timeout is enforced for missing pings.
"""

from __future__ import annotations

from core.connections import Connection
from core.observability import log_websocket_message_ignored
from core.websocket import build_pong, current_timestamp_ms, decode_inbound, encode_envelope


async def handle_inbound_frame(connection: Connection, raw: str | bytes | None) -> bool:
    """Answer a ping on ``connection``; return ``True`` when a pong was sent.

    Frames that fail to decode, or decode to anything but a ping, are
    dropped without a reply.
    """

    result = decode_inbound(raw)
    if not result.ok:
        log_websocket_message_ignored(connection, reason=result.error or "unrecognised", raw=raw)
        return False

    await connection.send_text(encode_envelope(build_pong(current_timestamp_ms())))
    return True


__all__ = ["handle_inbound_frame"]
