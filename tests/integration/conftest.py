from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from core.config import Settings


@pytest.fixture()
def server_settings(tmp_path: Path) -> Settings:
    return Settings(
        environment="local",
        host="127.0.0.1",
        port=3456,
        data_dir=tmp_path / "waveclient",
        greeting_message="Connected to Wave Client Server",
    )


@pytest.fixture()
def wave_client(server_settings: Settings) -> Iterator[TestClient]:
    """Provide a client bound to a fully started application."""

    from main import create_app

    app = create_app(server_settings)
    with TestClient(app) as client:
        yield client
