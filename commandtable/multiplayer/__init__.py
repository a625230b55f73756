from commandtable.multiplayer.channel import (
    BroadcastChannel,
    ChannelError,
    ChannelFactory,
    InMemoryBroadcastHub,
    InMemoryChannel,
    MessageHandler,
    RelayChannel,
    default_channel_factory,
    relay_channel_factory,
)
from commandtable.multiplayer.messages import Event
from commandtable.multiplayer.room import (
    HOST_SEAT,
    MAX_SEATS,
    ROOM_CODE_ALPHABET,
    ROOM_CODE_LENGTH,
    SEAT_IDS,
    SeatId,
    generate_room_code,
    is_seat_id,
    is_valid_room_code,
    normalize_room_code,
)
from commandtable.multiplayer.synchronizer import MultiplayerSynchronizer, seat_label

__all__ = [
    "BroadcastChannel",
    "ChannelError",
    "ChannelFactory",
    "Event",
    "HOST_SEAT",
    "InMemoryBroadcastHub",
    "InMemoryChannel",
    "MAX_SEATS",
    "MessageHandler",
    "MultiplayerSynchronizer",
    "ROOM_CODE_ALPHABET",
    "ROOM_CODE_LENGTH",
    "RelayChannel",
    "SEAT_IDS",
    "SeatId",
    "default_channel_factory",
    "generate_room_code",
    "is_seat_id",
    "is_valid_room_code",
    "normalize_room_code",
    "relay_channel_factory",
    "seat_label",
]
