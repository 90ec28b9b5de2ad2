import pytest
from starlette.websockets import WebSocketState

from core.connections import ConnectionRegistry
from core.exceptions import ValidationError
from core.websocket import BroadcastBus, build_state_change


def _bus_with(*connections):
    registry = ConnectionRegistry()
    for connection in connections:
        registry.register(connection)
    return BroadcastBus(registry), registry


@pytest.mark.asyncio
async def test_broadcast_sends_identical_frame_to_every_member(make_websocket):
    ws_a = make_websocket()
    ws_b = make_websocket()
    bus, _ = _bus_with(ws_a, ws_b)

    sent = await bus.broadcast(build_state_change("settings", timestamp=10))

    assert sent == 2
    assert ws_a.sent == ['{"type":"settingsChanged","timestamp":10}']
    assert ws_a.sent == ws_b.sent


@pytest.mark.asyncio
async def test_broadcast_with_no_members_is_noop():
    bus, _ = _bus_with()

    assert await bus.emit_state_change("auths") == 0


@pytest.mark.asyncio
async def test_non_writable_member_is_skipped_but_kept(make_websocket):
    live = make_websocket()
    closing = make_websocket()
    closing.application_state = WebSocketState.DISCONNECTED
    bus, registry = _bus_with(live, closing)

    sent = await bus.emit_state_change("proxies")

    assert sent == 1
    assert closing.sent == []
    assert closing in registry
    assert live.messages()[0]["type"] == "proxiesChanged"


@pytest.mark.asyncio
async def test_send_failure_does_not_stop_delivery(make_websocket, caplog):
    broken = make_websocket(send_error=RuntimeError("socket gone"))
    healthy = make_websocket()
    bus, registry = _bus_with(broken, healthy)

    sent = await bus.emit_state_change("certs")

    assert sent == 1
    assert healthy.messages()[0]["type"] == "certsChanged"
    assert broken in registry
    assert "Failed to push certsChanged" in caplog.text


@pytest.mark.asyncio
async def test_member_removed_during_broadcast_is_skipped(make_websocket):
    registry = ConnectionRegistry()
    late = make_websocket()

    class DeregisteringWebSocket(type(late)):
        async def send_text(self, data):
            registry.deregister(late)
            await super().send_text(data)

    first = DeregisteringWebSocket()
    registry.register(first)
    registry.register(late)
    bus = BroadcastBus(registry)

    sent = await bus.emit_state_change("settings")

    assert sent == 1
    assert len(first.sent) == 1
    assert late.sent == []


@pytest.mark.asyncio
async def test_emit_banner_validates_before_sending(make_websocket):
    ws = make_websocket()
    bus, _ = _bus_with(ws)

    with pytest.raises(ValidationError):
        await bus.emit_banner("fatal", "nope")
    assert ws.sent == []

    await bus.emit_banner("success", "Saved")
    message = ws.messages()[0]
    assert message["type"] == "banner"
    assert message["data"] == {"severity": "success", "message": "Saved"}
    assert isinstance(message["timestamp"], int)
