"""
Library operations.

All of these work on the library sub-sequence of the card list: the
library cards, in list order, with index 0 as the top card. Other zones
are never reordered here.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from typing import TYPE_CHECKING

from commandtable.models.game import GamePhase
from commandtable.models.instance import CardInstance
from commandtable.models.log import LogActionType
from commandtable.models.zone import Zone

if TYPE_CHECKING:
    from commandtable.engine.session import GameSession

logger = logging.getLogger(__name__)


def deal_opening_hand(library: list[CardInstance], hand_size: int, rng: random.Random) -> None:
    """
    Shuffle a library in place and move its top cards to the hand.

    Dealt cards stay in the list (now with zone HAND) ahead of the rest.
    """
    rng.shuffle(library)
    for card in library[:hand_size]:
        card.zone = Zone.HAND


class LibraryOperations:
    def __init__(self, session: GameSession) -> None:
        self._session = session

    def _library(self) -> list[CardInstance]:
        return self._session.cards_in_zone(Zone.LIBRARY)

    @property
    def top_card(self) -> CardInstance | None:
        library = self._library()
        return library[0] if library else None

    def shuffle_library(self) -> None:
        """Randomly permute the library. Other zones are untouched."""
        session = self._session
        if not session.is_editable:
            return

        library = self._library()
        if not library:
            return

        session.history.record()
        others = [c for c in session.cards if c.zone is not Zone.LIBRARY]
        session.rng.shuffle(library)
        session.cards[:] = others + library

        session.log.add(LogActionType.OTHER, "Shuffled library")
        session.commit()

    # =========================================================================
    # DRAW / MILL
    # =========================================================================

    def draw_card(self) -> None:
        """Put the top card into the hand. No-op on an empty library."""
        session = self._session
        if not session.is_editable:
            return

        top = self.top_card
        if top is None:
            return

        session.zones.move_card(top.id, Zone.HAND)
        session.log.add(
            LogActionType.DRAW,
            f'Drew "{top.name}"',
            public_message="Drew a card",
        )

    def draw_cards(self, count: int) -> None:
        """Draw one at a time; stops early if the library runs out."""
        for _ in range(count):
            self.draw_card()

    def mill_card(self) -> None:
        """Put the top card into the graveyard. No-op on an empty library."""
        if not self._session.is_editable:
            return

        top = self.top_card
        if top is None:
            return

        self._session.zones.move_card(top.id, Zone.GRAVEYARD)

    def mill_cards(self, count: int) -> None:
        for _ in range(count):
            self.mill_card()

    # =========================================================================
    # TOP OF LIBRARY
    # =========================================================================

    def put_top_card_to_bottom(self) -> None:
        """Move the top card to the bottom. Needs at least two library cards."""
        session = self._session
        if not session.is_editable:
            return

        library = self._library()
        if len(library) < 2:
            return

        session.history.record()
        top = library[0]
        was_revealed = session.is_top_card_revealed
        others = [c for c in session.cards if c.zone is not Zone.LIBRARY]
        session.cards[:] = others + library[1:] + [top]
        session.is_top_card_revealed = False

        session.log.add(
            LogActionType.OTHER,
            f'"{top.name}" put on bottom of library',
            public_message=None if was_revealed else "Put the top card of library on the bottom",
        )
        session.commit()

    def toggle_top_card_revealed(self) -> None:
        """Flip the player-level "top card revealed" flag."""
        session = self._session
        if not session.is_editable:
            return

        session.is_top_card_revealed = not session.is_top_card_revealed
        session.commit()

    # =========================================================================
    # SCRY
    # =========================================================================

    def apply_scry_changes(
        self,
        new_top_order: Sequence[str] = (),
        to_bottom: Sequence[str] = (),
        to_graveyard: Sequence[str] = (),
        to_exile: Sequence[str] = (),
    ) -> None:
        """
        Rearrange inspected top cards.

        The library becomes [new_top_order..., untouched remainder...,
        to_bottom...]. Cards in to_graveyard / to_exile leave the library
        untapped. Every affected id is pulled out before reinsertion, so an
        id listed twice is placed once (first list wins).
        """
        session = self._session
        if not session.is_editable:
            return

        by_id = {card.id: card for card in session.cards}
        placed: set[str] = set()

        def take(ids: Sequence[str]) -> list[CardInstance]:
            taken = []
            for card_id in ids:
                if card_id in by_id and card_id not in placed:
                    placed.add(card_id)
                    taken.append(by_id[card_id])
            return taken

        top = take(new_top_order)
        bottom = take(to_bottom)
        graveyard = take(to_graveyard)
        exile = take(to_exile)
        if not placed:
            return

        session.history.record()

        remaining = [c for c in session.cards if c.id not in placed]
        library_rest = [c for c in remaining if c.zone is Zone.LIBRARY]
        others = [c for c in remaining if c.zone is not Zone.LIBRARY]

        for card in top + bottom:
            card.zone = Zone.LIBRARY
        for card in graveyard:
            card.zone = Zone.GRAVEYARD
            card.is_tapped = False
        for card in exile:
            card.zone = Zone.EXILE
            card.is_tapped = False

        session.cards[:] = others + graveyard + exile + top + library_rest + bottom

        summary = (
            f"Scry {len(placed)}: {len(top)} on top, {len(bottom)} on bottom"
            f", {len(graveyard)} to graveyard, {len(exile)} exiled"
        )
        session.log.add(LogActionType.OTHER, summary)
        session.commit()

    # =========================================================================
    # MULLIGAN
    # =========================================================================

    def mulligan(self) -> None:
        """Shuffle the hand into the library and draw a fresh opening hand."""
        session = self._session
        if not session.is_editable:
            return

        session.history.record()
        hand = session.cards_in_zone(Zone.HAND)
        for card in hand:
            card.zone = Zone.LIBRARY
        new_library = hand + self._library_excluding(hand)
        others = [c for c in session.cards if c.zone is not Zone.LIBRARY]

        deal_opening_hand(new_library, session.opening_hand_size, session.rng)
        session.cards[:] = others + new_library
        session.mulligan_count += 1
        session.game_phase = GamePhase.MULLIGAN

        session.log.add(
            LogActionType.OTHER, f"Took a mulligan (Total: {session.mulligan_count})"
        )
        session.commit()

    def _library_excluding(self, cards: list[CardInstance]) -> list[CardInstance]:
        ids = {card.id for card in cards}
        return [c for c in self._library() if c.id not in ids]

    def keep_hand(self, cards_to_bottom_ids: Sequence[str] = ()) -> None:
        """Keep the current hand, putting the chosen hand cards on the bottom."""
        session = self._session
        if not session.is_editable:
            return

        session.history.record()
        bottom_ids = set(cards_to_bottom_ids)
        bottomed = [c for c in session.cards_in_zone(Zone.HAND) if c.id in bottom_ids]
        for card in bottomed:
            card.zone = Zone.LIBRARY

        library = self._library_excluding(bottomed)
        others = [c for c in session.cards if c.zone is not Zone.LIBRARY]
        session.cards[:] = others + library + bottomed
        session.game_phase = GamePhase.PLAYING
        session.mulligan_count = 0

        session.log.add(
            LogActionType.OTHER, f"Kept hand. {len(bottomed)} card(s) put on bottom."
        )
        session.commit()
