"""
Card instances: physical copies of catalog cards on the table.

A CardInstance is the only mutable card record. Its `card` field points at
an immutable catalog Card that is shared, never copied.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum

from commandtable.models.card import Card
from commandtable.models.zone import Zone


def new_instance_id() -> str:
    """Generate a unique id for a physical card copy."""
    return str(uuid.uuid4())


class CounterKind(str, Enum):
    """Well-known counter kinds. OTHER carries a free-form tag."""

    PLUS_ONE = "+1/+1"
    MINUS_ONE = "-1/-1"
    LOYALTY = "loyalty"
    CHARGE = "charge"
    SHIELD = "shield"
    STUN = "stun"
    OIL = "oil"
    LORE = "lore"
    TIME = "time"
    FADE = "fade"
    AGE = "age"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class CounterType:
    """
    A counter type: a known kind, or OTHER with a custom tag.

    Use CounterType.parse() for user input; it maps known labels to their
    kind and anything else to OTHER.
    """

    kind: CounterKind
    tag: str | None = None

    def __post_init__(self) -> None:
        if self.kind is CounterKind.OTHER:
            if not self.tag:
                raise ValueError("Custom counters need a tag")
        elif self.tag is not None:
            raise ValueError(f"{self.kind.value} counters do not take a tag")

    @classmethod
    def other(cls, tag: str) -> CounterType:
        return cls(CounterKind.OTHER, tag)

    @classmethod
    def parse(cls, label: str) -> CounterType:
        """Map a label like "+1/+1" or "Loyalty" to a counter type."""
        normalized = label.strip()
        for kind in CounterKind:
            if kind is not CounterKind.OTHER and kind.value == normalized.lower():
                return cls(kind)
        return cls.other(normalized)

    @property
    def label(self) -> str:
        if self.kind is CounterKind.OTHER:
            return self.tag or ""
        return self.kind.value


@dataclass(slots=True)
class CardCounter:
    """A stack of counters of one type. count is always > 0."""

    type: CounterType
    count: int


@dataclass(slots=True)
class CardInstance:
    """
    One physical copy of a card in play.

    Attributes:
        id: Unique per physical copy
        card: Catalog card (shared, immutable)
        zone: Current location
        is_tapped: Tapped state; reset on every zone change
        counters: Ordered counters, one entry per type
        is_token: Tokens and duplicates; removed on match reset
        is_revealed: Face visible to all players
        attached_to_id: Parent this card is attached to
        attachment_ids: Cards attached to this one
    """

    id: str
    card: Card
    zone: Zone
    is_tapped: bool = False
    counters: list[CardCounter] = field(default_factory=list)
    is_token: bool = False
    is_revealed: bool = False
    attached_to_id: str | None = None
    attachment_ids: list[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.card.name

    def counter_count(self, counter_type: CounterType) -> int:
        for counter in self.counters:
            if counter.type == counter_type:
                return counter.count
        return 0

    def clone(self) -> CardInstance:
        """Structural copy: no list or counter is shared with the original."""
        return CardInstance(
            id=self.id,
            card=self.card,
            zone=self.zone,
            is_tapped=self.is_tapped,
            counters=[CardCounter(c.type, c.count) for c in self.counters],
            is_token=self.is_token,
            is_revealed=self.is_revealed,
            attached_to_id=self.attached_to_id,
            attachment_ids=list(self.attachment_ids),
        )
