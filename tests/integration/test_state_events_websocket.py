"""End-to-end behaviour of the ``/ws`` state events endpoint."""

import pytest

pytestmark = pytest.mark.integration


def _registry(client):
    return client.app.state.connection_registry


def test_connect_receives_greeting_only(wave_client):
    with wave_client.websocket_connect("/ws") as ws:
        greeting = ws.receive_json()

        assert greeting["type"] == "connected"
        assert greeting["data"] == {"message": "Connected to Wave Client Server"}
        assert isinstance(greeting["timestamp"], int)
        assert _registry(wave_client).size() == 1

    assert _registry(wave_client).size() == 0


def test_ping_pong_and_fan_out_across_clients(wave_client):
    with wave_client.websocket_connect("/ws") as ws_a:
        assert ws_a.receive_json()["type"] == "connected"

        with wave_client.websocket_connect("/ws") as ws_b:
            assert ws_b.receive_json()["type"] == "connected"

            ws_a.send_json({"type": "ping"})
            pong = ws_a.receive_json()
            assert pong["type"] == "pong"
            assert "data" not in pong

            response = wave_client.post("/api/settings", json={"maxRedirects": 3})
            assert response.status_code == 200

            # B never saw A's pong; its next frame is the broadcast
            change_a = ws_a.receive_json()
            change_b = ws_b.receive_json()
            assert change_a["type"] == "settingsChanged"
            assert change_a == change_b
            assert "data" not in change_a

        assert _registry(wave_client).size() == 1

        response = wave_client.post("/api/auths", json=[{"id": "a1", "type": "basic"}])
        assert response.status_code == 200
        assert ws_a.receive_json()["type"] == "authsChanged"


def test_unrecognised_frames_get_no_reply(wave_client):
    with wave_client.websocket_connect("/ws") as ws:
        ws.receive_json()

        ws.send_text("definitely not json")
        ws.send_json({"type": "banner", "data": {"severity": "info", "message": "hi"}})
        ws.send_json({"type": "ping"})

        # The first reply is the pong to the only ping sent
        assert ws.receive_json()["type"] == "pong"
        assert _registry(wave_client).size() == 1


def test_custom_greeting_message(tmp_path):
    from fastapi.testclient import TestClient

    from core.config import Settings
    from main import create_app

    settings = Settings(
        environment="local",
        host="127.0.0.1",
        port=3456,
        data_dir=tmp_path,
        greeting_message="Welcome back",
    )
    with TestClient(create_app(settings)) as client:
        with client.websocket_connect("/ws") as ws:
            assert ws.receive_json()["data"] == {"message": "Welcome back"}
