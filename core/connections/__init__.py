"""Connection management for the state-events WebSocket.

Tracks which clients are currently connected so that state changes can be
pushed to all of them.
"""

from core.connections.registry import ConnectionRegistry
from core.connections.transport import Connection, is_writable

__all__ = [
    "Connection",
    "ConnectionRegistry",
    "is_writable",
]
