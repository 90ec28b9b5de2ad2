"""Utility helpers shared across core packages.

Kept limited to environment helpers so that ``core.config`` can import it
without pulling in feature modules.
"""

from .env import get_bool_env, get_env, get_node_env, is_local, is_production

__all__ = [
    "get_bool_env",
    "get_env",
    "get_node_env",
    "is_local",
    "is_production",
]
