"""
Game session: the single owner of one player's table state.

One GameSession exists per client. It holds the "proxy" fields that
describe whichever seat is being viewed (life, cards, counters, mana pool,
card positions, commander id, top-card-revealed flag) plus session-wide
state (turn, phase, log, history, targeting), and wires the engine
components to it:

    session.zones        ZoneEngine
    session.attachments  AttachmentController
    session.library      LibraryOperations
    session.resources    PlayerResources
    session.randomizers  Randomizers
    session.history      HistoryManager
    session.log          GameLog
    session.sync         MultiplayerSynchronizer

Every mutating component call follows the same protocol: check
`is_editable`, `history.record()`, mutate, log, `commit()`. commit()
hands the local board to the synchronizer for broadcast.

All mutation is synchronous. The only awaits are catalog lookups during
deck import, and no state is written until they have all completed.
"""

from __future__ import annotations

import logging
import random
from typing import Any

from commandtable.catalog import (
    DEMO_COMMANDER,
    DEMO_DECK,
    CardCatalog,
    CatalogError,
    ScryfallCatalog,
    import_deck_from_text,
    is_legendary_creature,
)
from commandtable.config import MAX_HISTORY, MAX_LOG_ENTRIES, OPENING_HAND_SIZE, STARTING_LIFE
from commandtable.engine.attachments import AttachmentController
from commandtable.engine.game_log import GameLog
from commandtable.engine.history import HistoryManager
from commandtable.engine.library import LibraryOperations, deal_opening_hand
from commandtable.engine.randomizers import Randomizers
from commandtable.engine.resources import PlayerResources
from commandtable.engine.zones import ZoneEngine
from commandtable.models.card import Card
from commandtable.models.game import GamePhase, ImportResult, RandomResult
from commandtable.models.instance import CardInstance, new_instance_id
from commandtable.models.log import LogActionType
from commandtable.models.player import CardPosition, ManaPool, PlayerCounters
from commandtable.models.targeting import IDLE, TargetingMode
from commandtable.models.zone import Zone
from commandtable.multiplayer.channel import ChannelFactory, default_channel_factory
from commandtable.multiplayer.synchronizer import MultiplayerSynchronizer

logger = logging.getLogger(__name__)

# Default for channel_factory: build one from settings.relay_url
FROM_SETTINGS: Any = object()


class GameSession:
    """
    Explicit state owner for one client.

    Args:
        catalog: Card source for deck import. Defaults to Scryfall
        channel_factory: Builds a broadcast channel for a room code.
            Defaults to a relay client when settings.relay_url is set.
            None means multiplayer is unavailable (solo play only)
        rng: Random source for shuffles and dice
        starting_life: Life total for a new game
        opening_hand_size: Cards drawn for a new game or mulligan
        history_limit: Undo/redo depth
        log_limit: Game log capacity
        user_id: Stable id announced in presence messages
    """

    def __init__(
        self,
        catalog: CardCatalog | None = None,
        *,
        channel_factory: ChannelFactory | None = FROM_SETTINGS,
        rng: random.Random | None = None,
        starting_life: int = STARTING_LIFE,
        opening_hand_size: int = OPENING_HAND_SIZE,
        history_limit: int = MAX_HISTORY,
        log_limit: int = MAX_LOG_ENTRIES,
        user_id: str | None = None,
    ) -> None:
        self.catalog = catalog or ScryfallCatalog()
        self.rng = rng or random.Random()
        self.starting_life = starting_life
        self.opening_hand_size = opening_hand_size

        # Proxy fields: the board of the seat being viewed
        self.life = starting_life
        self.counters = PlayerCounters()
        self.mana_pool = ManaPool()
        self.cards: list[CardInstance] = []
        self.card_positions: dict[str, CardPosition] = {}
        self.commander_card_id: str | None = None
        self.is_top_card_revealed = False

        self.turn = 1
        self.game_phase = GamePhase.SETUP
        self.game_started = False
        self.mulligan_count = 0
        self.is_loading = False
        self.error: str | None = None
        self.last_random_result: RandomResult | None = None
        self.targeting: TargetingMode = IDLE

        self._import_generation = 0

        self.log = GameLog(self, limit=log_limit)
        self.history = HistoryManager(self, limit=history_limit)
        self.zones = ZoneEngine(self)
        self.attachments = AttachmentController(self)
        self.library = LibraryOperations(self)
        self.resources = PlayerResources(self)
        self.randomizers = Randomizers(self)
        if channel_factory is FROM_SETTINGS:
            channel_factory = default_channel_factory()
        self.sync = MultiplayerSynchronizer(self, channel_factory, user_id=user_id)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def find_card(self, card_id: str) -> CardInstance | None:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def cards_in_zone(self, zone: Zone) -> list[CardInstance]:
        """Cards in a zone, in list order (top-first for the library)."""
        return [card for card in self.cards if card.zone is zone]

    @property
    def is_editable(self) -> bool:
        """False while looking at a remote seat's replicated board."""
        return self.sync.is_viewing_local

    def commit(self) -> None:
        """Called after every state change; replicates the local board if online."""
        self.sync.broadcast_player_state()

    # =========================================================================
    # DECK IMPORT
    # =========================================================================

    async def import_deck(self, commander_name: str, deck_text: str) -> ImportResult:
        """
        Import a commander and a deck list, and start a new game.

        The commander must resolve and the deck must yield at least one card;
        otherwise `error` is set and the current game is left untouched.
        Unresolved deck names do not block the import.

        If another import starts before this one finishes, this one returns
        a superseded result and writes nothing.
        """
        self._import_generation += 1
        generation = self._import_generation
        self.is_loading = True
        self.error = None

        try:
            commander_import = await import_deck_from_text(self.catalog, f"1 {commander_name}")
            if generation != self._import_generation:
                return ImportResult(success=False, superseded=True)

            if not commander_import.cards:
                return self._fail_import(
                    f'Commander "{commander_name}" not found', [commander_name]
                )

            deck_import = await import_deck_from_text(self.catalog, deck_text)
            if generation != self._import_generation:
                return ImportResult(success=False, superseded=True)

            if not deck_import.cards:
                return self._fail_import("No valid cards found in decklist", deck_import.not_found)
        except CatalogError as e:
            if generation != self._import_generation:
                return ImportResult(success=False, superseded=True)
            return self._fail_import(f"Failed to import deck: {e}", [])

        self.start_game(commander_import.cards[0], deck_import.cards)
        self.is_loading = False

        not_found = commander_import.not_found + deck_import.not_found
        logger.info(
            "deck_imported",
            extra={
                "commander": commander_import.cards[0].name,
                "deck_size": len(deck_import.cards),
                "not_found_count": len(not_found),
            },
        )
        return ImportResult(success=True, not_found=not_found)

    def _fail_import(self, error: str, not_found: list[str]) -> ImportResult:
        logger.warning("deck_import_failed", extra={"error": error})
        self.error = error
        self.is_loading = False
        return ImportResult(success=False, not_found=not_found)

    async def load_demo_deck(self) -> ImportResult:
        return await self.import_deck(DEMO_COMMANDER, DEMO_DECK)

    async def load_random_deck(self, count: int = 100) -> ImportResult:
        """
        Start a game from random commander-legal cards (needs a Scryfall catalog).

        Follows the same rules as import_deck: failures set `error` and leave
        the current game untouched, and a later import supersedes this one.
        """
        if not isinstance(self.catalog, ScryfallCatalog):
            return self._fail_import("Random decks need the Scryfall catalog", [])
        if count < 1:
            return self._fail_import("Random deck needs at least one card", [])

        self._import_generation += 1
        generation = self._import_generation
        self.is_loading = True
        self.error = None

        try:
            cards = await self.catalog.fetch_random_cards(count)
        except CatalogError as e:
            if generation != self._import_generation:
                return ImportResult(success=False, superseded=True)
            return self._fail_import(f"Failed to load random deck: {e}", [])

        if generation != self._import_generation:
            return ImportResult(success=False, superseded=True)
        if not cards:
            return self._fail_import("No cards returned for random deck", [])

        commander_index = next(
            (i for i, card in enumerate(cards) if is_legendary_creature(card)), 0
        )
        commander = cards[commander_index]
        deck = cards[:commander_index] + cards[commander_index + 1 :]
        self.start_game(commander, deck)
        self.is_loading = False

        logger.info(
            "random_deck_loaded",
            extra={"commander": commander.name, "deck_size": len(deck)},
        )
        return ImportResult(success=True)

    def start_game(self, commander: Card, deck: list[Card]) -> None:
        """
        Lay out a fresh game: commander in the command zone, the deck
        shuffled into the library and an opening hand drawn.
        """
        self.sync.view_local()

        commander_instance = CardInstance(
            id=new_instance_id(), card=commander, zone=Zone.COMMAND_ZONE
        )
        library = [
            CardInstance(id=new_instance_id(), card=card, zone=Zone.LIBRARY) for card in deck
        ]
        deal_opening_hand(library, self.opening_hand_size, self.rng)

        self.cards = [commander_instance, *library]
        self.commander_card_id = commander_instance.id
        self._reset_board()
        self.game_started = True
        self.history.clear()

        self.log.add(LogActionType.TURN, "=== New Game ===")
        self.commit()

    def _reset_board(self) -> None:
        self.life = self.starting_life
        self.turn = 1
        self.counters = PlayerCounters()
        self.mana_pool = ManaPool()
        self.card_positions = {}
        self.is_top_card_revealed = False
        self.last_random_result = None
        self.targeting = IDLE
        self.game_phase = GamePhase.MULLIGAN
        self.mulligan_count = 0

    # =========================================================================
    # MATCH LIFECYCLE
    # =========================================================================

    def reset_match(self) -> None:
        """
        Restart with the same deck: tokens removed, every card reset, the
        commander back in the command zone, a new shuffle and opening hand.
        History and log are cleared.
        """
        if not self.is_editable:
            return

        commander: CardInstance | None = None
        library: list[CardInstance] = []
        for card in self.cards:
            if card.is_token:
                continue
            card.is_tapped = False
            card.is_revealed = False
            card.counters = []
            card.attached_to_id = None
            card.attachment_ids = []
            if card.id == self.commander_card_id:
                card.zone = Zone.COMMAND_ZONE
                commander = card
            else:
                card.zone = Zone.LIBRARY
                library.append(card)

        deal_opening_hand(library, self.opening_hand_size, self.rng)
        self.cards = [commander, *library] if commander is not None else library
        self._reset_board()
        self.history.clear()
        self.log.clear()

        self.log.add(LogActionType.TURN, "=== New Game ===")
        self.commit()

    def return_to_menu(self) -> None:
        """Drop the current game entirely."""
        self.sync.view_local()

        self.cards = []
        self.commander_card_id = None
        self._reset_board()
        self.game_phase = GamePhase.SETUP
        self.game_started = False
        self.is_loading = False
        self.error = None
        self.history.clear()
        self.commit()
