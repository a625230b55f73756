from commandtable.models.card import ATTACHMENT_TYPES, CARD_BACK_URL, Card
from commandtable.models.game import GamePhase, ImportResult, RandomResult, RandomResultType
from commandtable.models.instance import (
    CardCounter,
    CardInstance,
    CounterKind,
    CounterType,
    new_instance_id,
)
from commandtable.models.log import GameLogEntry, LogActionType
from commandtable.models.player import (
    CardPosition,
    ManaColor,
    ManaPool,
    PlayerCounter,
    PlayerCounters,
    PlayerState,
)
from commandtable.models.targeting import IDLE, Idle, Targeting, TargetingMode
from commandtable.models.zone import REORDERABLE_ZONES, Zone

__all__ = [
    "ATTACHMENT_TYPES",
    "CARD_BACK_URL",
    "Card",
    "CardCounter",
    "CardInstance",
    "CardPosition",
    "CounterKind",
    "CounterType",
    "GameLogEntry",
    "GamePhase",
    "IDLE",
    "Idle",
    "ImportResult",
    "LogActionType",
    "ManaColor",
    "ManaPool",
    "PlayerCounter",
    "PlayerCounters",
    "PlayerState",
    "REORDERABLE_ZONES",
    "RandomResult",
    "RandomResultType",
    "Targeting",
    "TargetingMode",
    "Zone",
    "new_instance_id",
]
