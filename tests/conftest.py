"""Test configuration helpers."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable, Iterable

import pytest
from starlette.websockets import WebSocketState

# Explicitly opt-in to the async plugins we rely on. Some execution environments
# disable plugin auto-discovery via ``PYTEST_DISABLE_PLUGIN_AUTOLOAD`` which
# prevents ``pytest-asyncio`` and AnyIO's plugin from being loaded even if the
# packages are installed.
pytest_plugins = ("anyio", "pytest_asyncio")

# Ensure the repository root is importable so that ``import core`` and the other
# absolute imports used throughout the codebase succeed from any working directory.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


class FakeWebSocket:
    """Stand-in for ``fastapi.WebSocket`` recording every text frame sent."""

    def __init__(
        self,
        *,
        incoming: Iterable[dict[str, Any]] = (),
        send_error: BaseException | None = None,
        receive_error: BaseException | None = None,
    ) -> None:
        self.sent: list[str] = []
        self.accepted = False
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED
        self._incoming = list(incoming)
        self._send_error = send_error
        self._receive_error = receive_error

    async def accept(self) -> None:
        self.accepted = True

    async def send_text(self, data: str) -> None:
        if self._send_error is not None:
            raise self._send_error
        self.sent.append(data)

    async def receive(self) -> dict[str, Any]:
        if self._receive_error is not None:
            raise self._receive_error
        if self._incoming:
            return self._incoming.pop(0)
        self.client_state = WebSocketState.DISCONNECTED
        return {"type": "websocket.disconnect", "code": 1000}

    def messages(self) -> list[dict[str, Any]]:
        return [json.loads(frame) for frame in self.sent]


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def make_websocket() -> Callable[..., FakeWebSocket]:
    """Factory fixture building :class:`FakeWebSocket` instances."""

    def _factory(**kwargs: Any) -> FakeWebSocket:
        return FakeWebSocket(**kwargs)

    return _factory


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the server at an isolated data directory."""

    target = tmp_path / "waveclient"
    monkeypatch.setenv("WAVE_DATA_DIR", str(target))
    return target
