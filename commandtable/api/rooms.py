"""
Room relay.

Clients of one room connect to the same websocket endpoint; every text
frame a client sends is forwarded verbatim to every other client in the
room. The relay never parses, validates or stores frames: replication
policy lives entirely in the clients.
"""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from commandtable.multiplayer.room import (
    generate_room_code,
    is_valid_room_code,
    normalize_room_code,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rooms", tags=["rooms"])


class RoomCodeResponse(BaseModel):
    """A freshly generated room code."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    room_code: str


class RoomRelay:
    """Open sockets by room code."""

    def __init__(self) -> None:
        self.rooms: dict[str, list[WebSocket]] = {}

    def occupancy(self, room_code: str) -> int:
        return len(self.rooms.get(room_code, []))

    def add(self, room_code: str, websocket: WebSocket) -> None:
        self.rooms.setdefault(room_code, []).append(websocket)

    def remove(self, room_code: str, websocket: WebSocket) -> None:
        sockets = self.rooms.get(room_code, [])
        if websocket in sockets:
            sockets.remove(websocket)
        if not sockets:
            self.rooms.pop(room_code, None)

    async def forward(self, room_code: str, sender: WebSocket, frame: str) -> None:
        """Send a frame to every socket in the room except the sender."""
        dead: list[WebSocket] = []
        for websocket in list(self.rooms.get(room_code, [])):
            if websocket is sender:
                continue
            try:
                await websocket.send_text(frame)
            except (WebSocketDisconnect, RuntimeError):
                dead.append(websocket)
        for websocket in dead:
            self.remove(room_code, websocket)


relay = RoomRelay()


@router.get("/code", response_model=RoomCodeResponse, response_model_by_alias=True)
async def new_room_code() -> RoomCodeResponse:
    """Generate a room code that is not currently in use."""
    code = generate_room_code()
    while relay.occupancy(code):
        code = generate_room_code()
    return RoomCodeResponse(room_code=code)


@router.websocket("/{room_code}/ws")
async def room_socket(websocket: WebSocket, room_code: str) -> None:
    """
    Relay socket for one room.

    Frames are `{event, payload}` JSON text; they are forwarded without
    inspection. Invalid room codes are refused with 1008.
    """
    code = normalize_room_code(room_code)
    if not is_valid_room_code(code):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    relay.add(code, websocket)
    logger.info(
        "relay_client_connected",
        extra={"room_code": code, "clients": relay.occupancy(code)},
    )

    try:
        while True:
            frame = await websocket.receive_text()
            await relay.forward(code, websocket, frame)
    except WebSocketDisconnect:
        pass
    finally:
        relay.remove(code, websocket)
        logger.info(
            "relay_client_disconnected",
            extra={"room_code": code, "clients": relay.occupancy(code)},
        )
