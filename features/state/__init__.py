"""Persisted application state: settings and the auth/proxy/cert/rule store."""

from .routes import router
from .service import STATE_KINDS, StateStore

__all__ = ["router", "STATE_KINDS", "StateStore"]
