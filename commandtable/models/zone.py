from enum import Enum


class Zone(str, Enum):
    """The six places a card instance can be."""

    HAND = "hand"
    BATTLEFIELD = "battlefield"
    LIBRARY = "library"
    GRAVEYARD = "graveyard"
    EXILE = "exile"
    COMMAND_ZONE = "commandZone"


# Zones whose display order can be rearranged by the player
REORDERABLE_ZONES = frozenset({Zone.HAND, Zone.BATTLEFIELD})
