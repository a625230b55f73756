"""Tests for the relay service endpoints."""

from collections.abc import AsyncGenerator

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from starlette.websockets import WebSocketDisconnect

from commandtable.api.rooms import RoomRelay
from commandtable.main import app
from commandtable.multiplayer import is_valid_room_code


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestHealthEndpoint:
    async def test_health_returns_healthy(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestRoomCode:
    async def test_generates_valid_code(self, client: AsyncClient) -> None:
        response = await client.get("/rooms/code")

        assert response.status_code == 200
        assert is_valid_room_code(response.json()["roomCode"])


class TestRoomSocket:
    def test_frames_forwarded_to_other_clients(self) -> None:
        frame_b = '{"event":"presence_ping","payload":{}}'
        frame_a = '{"event":"player_leave","payload":{"playerId":"player-1"}}'

        # Entering the client shares one event loop between both sockets.
        with (
            TestClient(app) as test_client,
            test_client.websocket_connect("/rooms/abc234/ws") as a,
            test_client.websocket_connect("/rooms/ABC234/ws") as b,
        ):
            b.send_text(frame_b)
            assert a.receive_text() == frame_b

            a.send_text(frame_a)
            # b never sees its own frame echoed back
            assert b.receive_text() == frame_a

    def test_invalid_room_code_refused(self) -> None:
        test_client = TestClient(app)

        with pytest.raises(WebSocketDisconnect):
            with test_client.websocket_connect("/rooms/bad/ws") as websocket:
                websocket.receive_text()


class TestRoomRelay:
    def test_empty_rooms_are_dropped(self) -> None:
        relay = RoomRelay()
        socket = object()

        relay.add("ABC234", socket)  # type: ignore[arg-type]
        assert relay.occupancy("ABC234") == 1

        relay.remove("ABC234", socket)  # type: ignore[arg-type]
        assert relay.occupancy("ABC234") == 0
        assert relay.rooms == {}
