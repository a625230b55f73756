"""
Per-seat player state.

PlayerState is the unit of replication: one seat's whole board, sent in
full on every change.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum

from commandtable.config import STARTING_LIFE
from commandtable.models.instance import CardInstance


class PlayerCounter(str, Enum):
    """Player-level counters. Values are PlayerCounters attribute names."""

    POISON = "poison"
    ENERGY = "energy"
    EXPERIENCE = "experience"
    RAD = "rad"
    TICKETS = "tickets"
    COMMANDER_TAX = "commander_tax"
    STORM_COUNT = "storm_count"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


@dataclass(slots=True)
class PlayerCounters:
    poison: int = 0
    energy: int = 0
    experience: int = 0
    rad: int = 0
    tickets: int = 0
    commander_tax: int = 0
    storm_count: int = 0

    def get(self, counter: PlayerCounter) -> int:
        return int(getattr(self, counter.value))

    def set(self, counter: PlayerCounter, value: int) -> None:
        setattr(self, counter.value, value)

    def clone(self) -> PlayerCounters:
        return PlayerCounters(**{f.name: getattr(self, f.name) for f in fields(self)})


class ManaColor(str, Enum):
    WHITE = "W"
    BLUE = "U"
    BLACK = "B"
    RED = "R"
    GREEN = "G"
    COLORLESS = "C"


def _empty_pool() -> dict[ManaColor, int]:
    return dict.fromkeys(ManaColor, 0)


@dataclass(slots=True)
class ManaPool:
    """Floating mana. Every bucket stays >= 0."""

    amounts: dict[ManaColor, int] = field(default_factory=_empty_pool)

    def __getitem__(self, color: ManaColor) -> int:
        return self.amounts.get(color, 0)

    def adjust(self, color: ManaColor, amount: int) -> int:
        """Add (or remove) mana, flooring at zero. Returns the new amount."""
        self.amounts[color] = max(0, self[color] + amount)
        return self.amounts[color]

    def clear(self) -> None:
        self.amounts = _empty_pool()

    @property
    def total(self) -> int:
        return sum(self.amounts.values())

    def clone(self) -> ManaPool:
        return ManaPool(amounts=dict(self.amounts))


@dataclass(frozen=True, slots=True)
class CardPosition:
    """Battlefield coordinates assigned by the layout collaborator."""

    x: float
    y: float


@dataclass(slots=True)
class PlayerState:
    """
    Everything one seat owns.

    Attributes:
        id: Seat id (player-1 .. player-4)
        name: Display name
        life: Life total
        counters: Player-level counters
        mana_pool: Floating mana
        cards: Every card instance this player owns, library in top-first order
        card_positions: Battlefield layout by card instance id
        commander_card_id: The only instance allowed in the command zone
        is_top_card_revealed: "Play with the top card revealed"
    """

    id: str
    name: str = ""
    life: int = STARTING_LIFE
    counters: PlayerCounters = field(default_factory=PlayerCounters)
    mana_pool: ManaPool = field(default_factory=ManaPool)
    cards: list[CardInstance] = field(default_factory=list)
    card_positions: dict[str, CardPosition] = field(default_factory=dict)
    commander_card_id: str | None = None
    is_top_card_revealed: bool = False

    def clone(self) -> PlayerState:
        return PlayerState(
            id=self.id,
            name=self.name,
            life=self.life,
            counters=self.counters.clone(),
            mana_pool=self.mana_pool.clone(),
            cards=[card.clone() for card in self.cards],
            card_positions=dict(self.card_positions),
            commander_card_id=self.commander_card_id,
            is_top_card_revealed=self.is_top_card_revealed,
        )
