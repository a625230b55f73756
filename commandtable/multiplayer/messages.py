"""
Broadcast wire messages.

Every message on the room channel is a JSON object `{event, payload}`.
Payload schemas are Pydantic models with camelCase aliases on the wire;
the nested `card` inside a card instance is the catalog's Scryfall-shaped
object.

Event catalog:
    player_state   {playerId, state, timestamp}     full board of one seat
    player_join    {userId, playerId, name, status, lastSeen}
    player_leave   {playerId}
    game_log       {entry, playerId}                already privacy-filtered
    presence_ping  {}                               asks seated peers to re-announce

Inbound payloads are untrusted: decode() validates them and raises
pydantic.ValidationError on anything malformed.
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from commandtable.models.card import Card
from commandtable.models.instance import CardCounter, CardInstance, CounterKind, CounterType
from commandtable.models.log import GameLogEntry, LogActionType
from commandtable.models.player import (
    CardPosition,
    ManaColor,
    ManaPool,
    PlayerCounters,
    PlayerState,
)
from commandtable.models.zone import Zone
from commandtable.multiplayer.room import SeatId


class Event(str, Enum):
    """Broadcast event names."""

    PLAYER_STATE = "player_state"
    PLAYER_JOIN = "player_join"
    PLAYER_LEAVE = "player_leave"
    GAME_LOG = "game_log"
    PRESENCE_PING = "presence_ping"


class WireModel(BaseModel):
    """Base for wire schemas: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


# =============================================================================
# STATE SCHEMAS
# =============================================================================


class CardCounterSchema(WireModel):
    kind: CounterKind
    tag: str | None = None
    count: int = Field(..., gt=0)

    @classmethod
    def from_domain(cls, counter: CardCounter) -> "CardCounterSchema":
        return cls(kind=counter.type.kind, tag=counter.type.tag, count=counter.count)

    def to_domain(self) -> CardCounter:
        return CardCounter(type=CounterType(self.kind, self.tag), count=self.count)


class CardInstanceSchema(WireModel):
    id: str
    card: dict[str, Any]
    zone: Zone
    is_tapped: bool = False
    counters: list[CardCounterSchema] = Field(default_factory=list)
    is_token: bool = False
    is_revealed: bool = False
    attached_to_id: str | None = None
    attachment_ids: list[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, instance: CardInstance) -> "CardInstanceSchema":
        return cls(
            id=instance.id,
            card=instance.card.to_scryfall(),
            zone=instance.zone,
            is_tapped=instance.is_tapped,
            counters=[CardCounterSchema.from_domain(c) for c in instance.counters],
            is_token=instance.is_token,
            is_revealed=instance.is_revealed,
            attached_to_id=instance.attached_to_id,
            attachment_ids=list(instance.attachment_ids),
        )

    def to_domain(self) -> CardInstance:
        return CardInstance(
            id=self.id,
            card=Card.from_scryfall(self.card),
            zone=self.zone,
            is_tapped=self.is_tapped,
            counters=[c.to_domain() for c in self.counters],
            is_token=self.is_token,
            is_revealed=self.is_revealed,
            attached_to_id=self.attached_to_id,
            attachment_ids=list(self.attachment_ids),
        )


class PlayerCountersSchema(WireModel):
    poison: int = 0
    energy: int = 0
    experience: int = 0
    rad: int = 0
    tickets: int = 0
    commander_tax: int = 0
    storm_count: int = 0


class CardPositionSchema(WireModel):
    x: float
    y: float


class PlayerStateSchema(WireModel):
    id: SeatId
    name: str = ""
    life: int
    counters: PlayerCountersSchema = Field(default_factory=PlayerCountersSchema)
    mana_pool: dict[ManaColor, int] = Field(default_factory=dict)
    cards: list[CardInstanceSchema] = Field(default_factory=list)
    card_positions: dict[str, CardPositionSchema] = Field(default_factory=dict)
    commander_card_id: str | None = None
    is_top_card_revealed: bool = False

    @classmethod
    def from_domain(cls, state: PlayerState) -> "PlayerStateSchema":
        counters = state.counters
        return cls(
            id=state.id,
            name=state.name,
            life=state.life,
            counters=PlayerCountersSchema(
                poison=counters.poison,
                energy=counters.energy,
                experience=counters.experience,
                rad=counters.rad,
                tickets=counters.tickets,
                commander_tax=counters.commander_tax,
                storm_count=counters.storm_count,
            ),
            mana_pool=dict(state.mana_pool.amounts),
            cards=[CardInstanceSchema.from_domain(card) for card in state.cards],
            card_positions={
                card_id: CardPositionSchema(x=pos.x, y=pos.y)
                for card_id, pos in state.card_positions.items()
            },
            commander_card_id=state.commander_card_id,
            is_top_card_revealed=state.is_top_card_revealed,
        )

    def to_domain(self) -> PlayerState:
        mana_pool = ManaPool()
        for color, amount in self.mana_pool.items():
            mana_pool.amounts[color] = max(0, amount)

        return PlayerState(
            id=self.id,
            name=self.name,
            life=self.life,
            counters=PlayerCounters(**self.counters.model_dump()),
            mana_pool=mana_pool,
            cards=[card.to_domain() for card in self.cards],
            card_positions={
                card_id: CardPosition(x=pos.x, y=pos.y)
                for card_id, pos in self.card_positions.items()
            },
            commander_card_id=self.commander_card_id,
            is_top_card_revealed=self.is_top_card_revealed,
        )


class GameLogEntrySchema(WireModel):
    id: str
    turn: int
    timestamp: int
    action_type: LogActionType
    message: str

    @classmethod
    def from_domain(cls, entry: GameLogEntry) -> "GameLogEntrySchema":
        return cls(
            id=entry.id,
            turn=entry.turn,
            timestamp=entry.timestamp,
            action_type=entry.action_type,
            message=entry.message,
        )

    def to_domain(self, player_id: str | None = None) -> GameLogEntry:
        return GameLogEntry(
            id=self.id,
            turn=self.turn,
            timestamp=self.timestamp,
            action_type=self.action_type,
            message=self.message,
            player_id=player_id,
        )


# =============================================================================
# MESSAGES
# =============================================================================


class PlayerStateMessage(WireModel):
    player_id: SeatId
    state: PlayerStateSchema
    timestamp: int


class PlayerJoinMessage(WireModel):
    user_id: str
    player_id: SeatId
    name: str
    status: Literal["connected"] = "connected"
    last_seen: int


class PlayerLeaveMessage(WireModel):
    player_id: SeatId


class GameLogMessage(WireModel):
    entry: GameLogEntrySchema
    player_id: SeatId


class PresencePingMessage(WireModel):
    pass


MESSAGE_TYPES: dict[Event, type[WireModel]] = {
    Event.PLAYER_STATE: PlayerStateMessage,
    Event.PLAYER_JOIN: PlayerJoinMessage,
    Event.PLAYER_LEAVE: PlayerLeaveMessage,
    Event.GAME_LOG: GameLogMessage,
    Event.PRESENCE_PING: PresencePingMessage,
}


def decode(event: Event, payload: dict[str, Any]) -> WireModel:
    """
    Validate an inbound payload.

    Raises:
        pydantic.ValidationError: If the payload does not match the event schema
    """
    return MESSAGE_TYPES[event].model_validate(payload)
