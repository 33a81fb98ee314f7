"""Tests for the WebSocket broadcast manager."""

import json

import pytest

from hotpot.api.websocket import WebSocketManager, encode_message


class FakeWebSocket:
    """Collects sent messages; optionally fails every send."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[dict] = []

    async def send(self, message: str) -> None:
        if self.fail:
            raise ConnectionError("client went away")
        self.sent.append(json.loads(message))


class TestWebSocketManager:
    """Test connection tracking and broadcasting."""

    @pytest.mark.asyncio
    async def test_connect_and_disconnect(self) -> None:
        manager = WebSocketManager()
        ws = FakeWebSocket()

        await manager.connect(ws)
        assert manager.connection_count == 1

        await manager.disconnect(ws)
        assert manager.connection_count == 0

    @pytest.mark.asyncio
    async def test_temp_update_message(self) -> None:
        manager = WebSocketManager()
        ws = FakeWebSocket()
        await manager.connect(ws)

        await manager.broadcast_temp_update(61.5, 990.0, False, 30.0)

        message = ws.sent[0]
        assert message["type"] == "temp_update"
        assert message["data"] == {
            "temperature": 61.5,
            "volume": 990.0,
            "is_boiling": False,
            "simulated_time_seconds": 30.0,
        }
        assert "timestamp" in message

    @pytest.mark.asyncio
    async def test_pot_update_message(self) -> None:
        manager = WebSocketManager()
        ws = FakeWebSocket()
        await manager.connect(ws)

        await manager.broadcast_pot_update("FOOD_REMOVED", {"id": "abc"})

        assert ws.sent[0]["data"] == {"change": "FOOD_REMOVED", "id": "abc"}

    @pytest.mark.asyncio
    async def test_failed_clients_dropped(self) -> None:
        manager = WebSocketManager()
        good = FakeWebSocket()
        bad = FakeWebSocket(fail=True)
        await manager.connect(good)
        await manager.connect(bad)

        await manager.broadcast_boil_update(True, 100.0, 800.0)

        assert manager.connection_count == 1
        assert good.sent[0]["type"] == "boil_update"

    @pytest.mark.asyncio
    async def test_disconnect_unknown_client_is_ignored(self) -> None:
        manager = WebSocketManager()
        await manager.connect(FakeWebSocket())

        await manager.disconnect(FakeWebSocket())

        assert manager.connection_count == 1

    @pytest.mark.asyncio
    async def test_broadcast_without_clients_is_noop(self) -> None:
        manager = WebSocketManager()
        await manager.broadcast_error("halted", "invariant")
        assert manager.connection_count == 0


class TestEncodeMessage:
    """Test the feed message format."""

    def test_envelope(self) -> None:
        message = json.loads(encode_message("error", {"message": "halted"}))

        assert message["type"] == "error"
        assert message["data"] == {"message": "halted"}
        assert isinstance(message["timestamp"], str)
