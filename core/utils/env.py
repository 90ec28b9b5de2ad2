"""Common environment helpers used across the backend."""

from __future__ import annotations

import os

from core.exceptions import ConfigurationError

__all__ = ["get_env", "get_bool_env", "get_node_env", "is_local", "is_production"]

_TRUTHY = {"1", "true", "yes", "on"}


def get_env(key: str, default: str | None = None, *, required: bool = False) -> str | None:
    """Return an environment variable and optionally enforce its presence."""

    value = os.getenv(key, default)
    if required and value is None:
        raise ConfigurationError(f"Required environment variable {key} not set", key=key)
    return value


def get_bool_env(key: str, default: bool = False) -> bool:
    """Interpret an environment variable as a boolean flag."""

    raw = get_env(key)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def get_node_env() -> str:
    """Return the current runtime environment label."""

    return (get_env("NODE_ENV", default="local") or "local").strip()


def is_production() -> bool:
    """True when running in production."""

    return get_node_env() == "production"


def is_local() -> bool:
    """True when running locally."""

    return get_node_env() == "local"
