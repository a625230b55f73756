from dataclasses import dataclass
from enum import Enum


class LogActionType(str, Enum):
    """Categories used to color and filter the game log."""

    DRAW = "draw"
    PLAY = "play"
    TAP = "tap"
    LIFE = "life"
    GRAVEYARD = "graveyard"
    EXILE = "exile"
    MANA = "mana"
    TURN = "turn"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class GameLogEntry:
    """
    One line of the activity log.

    Attributes:
        id: Unique entry id (dedup key for replicated entries)
        turn: Turn number when the action happened
        timestamp: Milliseconds since the epoch
        action_type: Log category
        message: Rendered text; entries from peers arrive already privacy-filtered
        player_id: Seat the entry came from; None for local entries
    """

    id: str
    turn: int
    timestamp: int
    action_type: LogActionType
    message: str
    player_id: str | None = None
