"""Room codes and seats."""

import random
from typing import Literal, get_args

# Visually ambiguous glyphs (O/0, I/1) are left out
ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
ROOM_CODE_LENGTH = 6

SeatId = Literal["player-1", "player-2", "player-3", "player-4"]

SEAT_IDS: tuple[SeatId, ...] = get_args(SeatId)
HOST_SEAT: SeatId = "player-1"
MAX_SEATS = len(SEAT_IDS)


def generate_room_code(rng: random.Random | None = None) -> str:
    """Generate a short, human-readable room code."""
    rng = rng or random.SystemRandom()
    return "".join(rng.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))


def normalize_room_code(code: str) -> str:
    return code.strip().upper()


def is_valid_room_code(code: str) -> bool:
    return len(code) == ROOM_CODE_LENGTH and all(c in ROOM_CODE_ALPHABET for c in code)


def is_seat_id(value: str) -> bool:
    return value in SEAT_IDS
