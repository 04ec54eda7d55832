"""Tests for the realtime location broadcast channel."""

import asyncio
import json

from app.core.realtime import ConnectionManager


def location_update(sender, **extra):
    return {"type": "location_update", "sender": sender, "latitude": 1.0, "longitude": 2.0, **extra}


class TestRealtimeBroadcast:
    """Location updates are fanned out to every other session."""

    def test_fan_out_excludes_sender(self, client):
        with client.websocket_connect("/ws/a") as ws_a, \
                client.websocket_connect("/ws/b") as ws_b, \
                client.websocket_connect("/ws/c") as ws_c:
            ws_a.send_text(json.dumps(location_update("a")))
            assert ws_b.receive_json() == location_update("a")
            assert ws_c.receive_json() == location_update("a")

            # The next thing A sees is C's update, not an echo of its own
            ws_c.send_text(json.dumps(location_update("c")))
            assert ws_a.receive_json() == location_update("c")
            assert ws_b.receive_json() == location_update("c")

    def test_message_forwarded_verbatim(self, client):
        raw = '{"type": "location_update",   "member": "Alice", "extra": [1, 2]}'
        with client.websocket_connect("/ws/a") as ws_a, \
                client.websocket_connect("/ws/b") as ws_b:
            ws_a.send_text(raw)
            assert ws_b.receive_text() == raw

    def test_other_types_are_ignored(self, client):
        with client.websocket_connect("/ws/a") as ws_a, \
                client.websocket_connect("/ws/b") as ws_b:
            ws_a.send_text(json.dumps({"type": "chat", "text": "hi"}))
            ws_a.send_text(json.dumps(["location_update"]))
            ws_a.send_text(json.dumps(location_update("a", seq=2)))
            assert ws_b.receive_json() == location_update("a", seq=2)

    def test_malformed_payload_keeps_connection(self, client):
        with client.websocket_connect("/ws/a") as ws_a, \
                client.websocket_connect("/ws/b") as ws_b:
            ws_a.send_text("{not json")
            ws_a.send_text(json.dumps(location_update("a")))
            assert ws_b.receive_json() == location_update("a")

    def test_connections_are_counted(self, client):
        with client.websocket_connect("/ws/a"), client.websocket_connect("/ws/b"):
            assert client.get("/health").json()["active_connections"] == 2


class FakeWebSocket:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []
        self.accepted = False
        self.closed = False

    async def accept(self):
        self.accepted = True

    async def send_text(self, message):
        if self.fail:
            raise RuntimeError("socket gone")
        self.sent.append(message)

    async def close(self):
        self.closed = True


class TestConnectionManager:
    """Registry behaviour without a server."""

    def test_failed_send_drops_session(self):
        manager = ConnectionManager()
        healthy, broken, sender = FakeWebSocket(), FakeWebSocket(fail=True), FakeWebSocket()

        async def scenario():
            await manager.connect(healthy, "healthy")
            await manager.connect(broken, "broken")
            await manager.connect(sender, "sender")
            return await manager.handle_message("sender", json.dumps(location_update("sender")))

        assert asyncio.run(scenario()) is True
        assert healthy.sent == [json.dumps(location_update("sender"))]
        assert sender.sent == []
        assert set(manager.active_connections) == {"healthy", "sender"}

    def test_unrelayed_messages(self):
        manager = ConnectionManager()
        peer = FakeWebSocket()

        async def scenario():
            await manager.connect(peer, "peer")
            return [
                await manager.handle_message("x", "{broken"),
                await manager.handle_message("x", json.dumps({"type": "ping"})),
                await manager.handle_message("x", json.dumps("location_update")),
            ]

        assert asyncio.run(scenario()) == [False, False, False]
        assert peer.sent == []

    def test_close_all(self):
        manager = ConnectionManager()
        sockets = [FakeWebSocket(), FakeWebSocket()]

        async def scenario():
            for i, ws in enumerate(sockets):
                await manager.connect(ws, f"s{i}")
            await manager.close_all()

        asyncio.run(scenario())
        assert manager.active_connections == {}
        assert all(ws.closed for ws in sockets)

    def test_stale_disconnect_keeps_reconnected_session(self):
        manager = ConnectionManager()
        old, new, peer = FakeWebSocket(), FakeWebSocket(), FakeWebSocket()
        update = json.dumps(location_update("peer"))

        async def scenario():
            await manager.connect(old, "tab")
            await manager.connect(new, "tab")
            await manager.connect(peer, "peer")
            # The first socket's receive loop ends after the reconnect
            manager.disconnect("tab", old)
            await manager.handle_message("peer", update)

        asyncio.run(scenario())
        assert manager.active_connections["tab"] is new
        assert new.sent == [update]
        assert old.sent == []

    def test_disconnect_without_socket_drops_session(self):
        manager = ConnectionManager()
        ws = FakeWebSocket()

        asyncio.run(manager.connect(ws, "tab"))
        manager.disconnect("tab")
        manager.disconnect("tab")
        assert manager.active_connections == {}
