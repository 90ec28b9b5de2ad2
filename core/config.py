"""Minimal environment variable loading and settings dataclass.

Domain-specific configuration lives in config/ subdirectories:
- Bind address, CORS and greeting text: config.server
- Data directory and store file layout: config.storage

This module only collects the cross-cutting values into a frozen
``Settings`` dataclass that the application factory and tests can inject.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from config import server as server_config
from config import storage as storage_config
from core.utils.env import get_node_env


@dataclass(frozen=True)
class Settings:
    """Dependency injection wrapper for server settings."""

    environment: str
    host: str
    port: int
    data_dir: Path
    greeting_message: str
    cors_origins: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def load_settings() -> Settings:
    """Build a ``Settings`` snapshot from the current environment."""

    return Settings(
        environment=get_node_env(),
        host=server_config.get_host(),
        port=server_config.get_port(),
        data_dir=storage_config.get_data_dir(),
        greeting_message=server_config.get_greeting_message(),
        cors_origins=tuple(server_config.get_cors_origins()),
    )


__all__ = [
    "Settings",
    "load_settings",
]
