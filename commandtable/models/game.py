from dataclasses import dataclass, field
from enum import Enum


class GamePhase(str, Enum):
    SETUP = "SETUP"
    MULLIGAN = "MULLIGAN"
    PLAYING = "PLAYING"


class RandomResultType(str, Enum):
    COIN = "coin"
    DIE = "die"
    PLANAR = "planar"


@dataclass(frozen=True, slots=True)
class RandomResult:
    """Outcome of the last coin flip or die roll, shown as a toast."""

    type: RandomResultType
    value: str | int
    label: str
    timestamp: int


@dataclass
class ImportResult:
    """
    Outcome of a deck import.

    Attributes:
        success: True if a new game was set up
        not_found: Card names the catalog could not resolve
        superseded: True if a newer import started before this one finished
    """

    success: bool
    not_found: list[str] = field(default_factory=list)
    superseded: bool = False
