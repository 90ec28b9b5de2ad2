from core.connections import ConnectionRegistry


def test_register_is_idempotent(make_websocket):
    registry = ConnectionRegistry()
    ws = make_websocket()

    registry.register(ws)
    registry.register(ws)

    assert registry.size() == 1
    assert ws in registry


def test_deregister_absent_connection_is_noop(make_websocket):
    registry = ConnectionRegistry()
    member = make_websocket()
    stranger = make_websocket()
    registry.register(member)

    registry.deregister(stranger)
    registry.deregister(member)
    registry.deregister(member)

    assert registry.size() == 0
    assert member not in registry


def test_membership_uses_identity(make_websocket):
    registry = ConnectionRegistry()
    registered = make_websocket()
    lookalike = make_websocket()

    registry.register(registered)

    assert registered in registry
    assert lookalike not in registry


def test_snapshot_is_unaffected_by_later_changes(make_websocket):
    registry = ConnectionRegistry()
    ws_a = make_websocket()
    ws_b = make_websocket()
    registry.register(ws_a)
    registry.register(ws_b)

    snapshot = registry.snapshot()
    registry.deregister(ws_a)

    assert snapshot == (ws_a, ws_b)
    assert registry.snapshot() == (ws_b,)
    assert list(registry) == [ws_b]


def test_clear_drops_every_member(make_websocket):
    registry = ConnectionRegistry()
    for _ in range(3):
        registry.register(make_websocket())

    registry.clear()

    assert len(registry) == 0
    assert registry.snapshot() == ()
