"""State-events feature: the ``/ws`` endpoint, keep-alive and client."""

from .routes import websocket_router

__all__ = ["websocket_router"]
