"""FastAPI dependencies for the state feature."""

from __future__ import annotations

from starlette.requests import HTTPConnection

from core.exceptions import ConfigurationError
from features.state.service import StateStore


def get_state_store(connection: HTTPConnection) -> StateStore:
    """Return the :class:`StateStore` created during application startup."""

    store = getattr(connection.app.state, "state_store", None)
    if store is None:
        raise ConfigurationError("State store is not initialised", key="state_store")
    return store


__all__ = ["get_state_store"]
