from commandtable.engine.attachments import AttachmentController
from commandtable.engine.game_log import GameLog
from commandtable.engine.history import GameSnapshot, HistoryManager
from commandtable.engine.library import LibraryOperations, deal_opening_hand
from commandtable.engine.randomizers import Randomizers
from commandtable.engine.resources import PlayerResources
from commandtable.engine.session import GameSession
from commandtable.engine.zones import ZoneEngine

__all__ = [
    "AttachmentController",
    "GameLog",
    "GameSession",
    "GameSnapshot",
    "HistoryManager",
    "LibraryOperations",
    "PlayerResources",
    "Randomizers",
    "ZoneEngine",
    "deal_opening_hand",
]
