"""
Zone engine.

Owns card movement between the six zones and per-card status (tap state,
counters, display order, tokens).

INVARIANTS enforced here:
- Only the commander instance may enter the command zone.
- A card leaving the battlefield takes its attachment links with it:
  it is detached from its parent, Auras on it go to the graveyard, and
  Equipment/Fortifications on it are unattached but stay put.
- Every zone change untaps the card.
- The library keeps a total order; index 0 is the top.

Invalid requests (unknown ids, blocked moves, out-of-range swaps) are
silent no-ops: the UI already hides those affordances.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

from commandtable.models.card import Card
from commandtable.models.instance import CardCounter, CardInstance, CounterType, new_instance_id
from commandtable.models.log import LogActionType
from commandtable.models.player import CardPosition
from commandtable.models.zone import REORDERABLE_ZONES, Zone

if TYPE_CHECKING:
    from commandtable.engine.session import GameSession

logger = logging.getLogger(__name__)

LibraryPosition = Literal["top", "bottom"]
ReorderDirection = Literal["left", "right"]


class ZoneEngine:
    """Card movement and per-card status for the viewed board."""

    def __init__(self, session: GameSession) -> None:
        self._session = session

    # =========================================================================
    # MOVEMENT
    # =========================================================================

    def move_card(
        self,
        card_id: str,
        to_zone: Zone | str,
        position: LibraryPosition = "top",
    ) -> None:
        """
        Move a card to another zone.

        Args:
            card_id: Instance to move
            to_zone: Destination zone
            position: "top" or "bottom"; only used when moving to the library
        """
        session = self._session
        if not session.is_editable:
            return

        to_zone = Zone(to_zone)
        if to_zone is Zone.COMMAND_ZONE and card_id != session.commander_card_id:
            logger.debug("move_blocked_non_commander", extra={"card_id": card_id})
            return

        card = session.find_card(card_id)
        if card is None:
            return

        from_zone = card.zone
        session.history.record()

        if from_zone is Zone.BATTLEFIELD and to_zone is not Zone.BATTLEFIELD:
            self._release_attachments(card)

        card.zone = to_zone
        card.is_tapped = False

        if to_zone is Zone.LIBRARY:
            self._splice_into_library(card, position)

        self._log_move(card, from_zone, to_zone, position)
        session.commit()

    def _release_attachments(self, card: CardInstance) -> None:
        """Break every attachment link of a card leaving the battlefield."""
        session = self._session

        if card.attached_to_id is not None:
            parent = session.find_card(card.attached_to_id)
            if parent is not None and card.id in parent.attachment_ids:
                parent.attachment_ids.remove(card.id)
            card.attached_to_id = None

        for attachment_id in card.attachment_ids:
            attachment = session.find_card(attachment_id)
            if attachment is None:
                continue
            attachment.attached_to_id = None
            if attachment.card.is_aura:
                # Auras are put into the graveyard when what they enchant leaves
                attachment.zone = Zone.GRAVEYARD
                attachment.is_tapped = False

        card.attachment_ids.clear()

    def _splice_into_library(self, card: CardInstance, position: LibraryPosition) -> None:
        cards = self._session.cards
        cards.remove(card)
        library = [c for c in cards if c.zone is Zone.LIBRARY]
        others = [c for c in cards if c.zone is not Zone.LIBRARY]

        if position == "bottom":
            library.append(card)
        else:
            library.insert(0, card)

        cards[:] = others + library

    def _log_move(
        self,
        card: CardInstance,
        from_zone: Zone,
        to_zone: Zone,
        position: LibraryPosition,
    ) -> None:
        log = self._session.log
        name = card.name

        if to_zone is Zone.BATTLEFIELD:
            log.add(LogActionType.PLAY, f'"{name}" entered the battlefield')
        elif to_zone is Zone.GRAVEYARD:
            log.add(LogActionType.GRAVEYARD, f'"{name}" went to the graveyard')
        elif to_zone is Zone.EXILE:
            log.add(LogActionType.EXILE, f'"{name}" was exiled')
        elif to_zone is Zone.HAND:
            # Draws log themselves with a privacy-filtered message
            if from_zone is not Zone.LIBRARY:
                log.add(LogActionType.DRAW, f'"{name}" returned to hand')
        elif to_zone is Zone.LIBRARY:
            public = None
            if from_zone in (Zone.HAND, Zone.LIBRARY):
                public = f"Put a card on {position} of library"
            log.add(
                LogActionType.OTHER,
                f'"{name}" put on {position} of library',
                public_message=public,
            )
        elif to_zone is Zone.COMMAND_ZONE:
            log.add(LogActionType.OTHER, f'"{name}" returned to command zone')

    # =========================================================================
    # TAP STATE
    # =========================================================================

    def _set_tapped(self, card_id: str, tapped: bool) -> None:
        session = self._session
        if not session.is_editable:
            return

        card = session.find_card(card_id)
        if card is None or card.is_tapped == tapped:
            return

        session.history.record()
        card.is_tapped = tapped
        verb = "Tapped" if tapped else "Untapped"
        session.log.add(LogActionType.TAP, f'{verb} "{card.name}"')
        session.commit()

    def tap_card(self, card_id: str) -> None:
        self._set_tapped(card_id, True)

    def untap_card(self, card_id: str) -> None:
        self._set_tapped(card_id, False)

    def toggle_tap(self, card_id: str) -> None:
        card = self._session.find_card(card_id)
        if card is not None:
            self._set_tapped(card_id, not card.is_tapped)

    def untap_all(self) -> None:
        """Untap every tapped permanent on the battlefield."""
        session = self._session
        if not session.is_editable:
            return

        tapped = [c for c in session.cards if c.zone is Zone.BATTLEFIELD and c.is_tapped]
        if not tapped:
            return

        session.history.record()
        for card in tapped:
            card.is_tapped = False
        session.log.add(LogActionType.TAP, f"Untapped all ({len(tapped)} permanents)")
        session.commit()

    # =========================================================================
    # COUNTERS
    # =========================================================================

    def adjust_card_counter(
        self,
        card_id: str,
        counter_type: CounterType | str,
        amount: int,
    ) -> None:
        """
        Add or remove counters of one type.

        A missing type is created on the first positive adjustment; an entry
        whose count drops to zero is removed.
        """
        session = self._session
        if not session.is_editable or amount == 0:
            return

        if isinstance(counter_type, str):
            counter_type = CounterType.parse(counter_type)

        card = session.find_card(card_id)
        if card is None:
            return

        existing = next((c for c in card.counters if c.type == counter_type), None)
        if existing is None and amount < 0:
            return

        session.history.record()
        if existing is None:
            existing = CardCounter(counter_type, 0)
            card.counters.append(existing)

        existing.count += amount
        new_count = max(existing.count, 0)
        if existing.count <= 0:
            card.counters.remove(existing)

        sign = "+" if amount > 0 else ""
        session.log.add(
            LogActionType.OTHER,
            f'"{card.name}": {sign}{amount} {counter_type.label} counter(s) → {new_count}',
        )
        session.commit()

    def add_card_counter(self, card_id: str, counter_type: CounterType | str) -> None:
        self.adjust_card_counter(card_id, counter_type, 1)

    def remove_card_counter(self, card_id: str, counter_type: CounterType | str) -> None:
        self.adjust_card_counter(card_id, counter_type, -1)

    # =========================================================================
    # ORDERING & LAYOUT
    # =========================================================================

    def reorder_card_in_zone(self, card_id: str, direction: ReorderDirection) -> None:
        """
        Swap a hand or battlefield card with its neighbor in the same zone.

        Swapping past either end is a no-op.
        """
        session = self._session
        if not session.is_editable:
            return

        card = session.find_card(card_id)
        if card is None or card.zone not in REORDERABLE_ZONES:
            return

        cards = session.cards
        zone_indexes = [i for i, c in enumerate(cards) if c.zone is card.zone]
        position = zone_indexes.index(cards.index(card))
        neighbor = position - 1 if direction == "left" else position + 1
        if neighbor < 0 or neighbor >= len(zone_indexes):
            return

        session.history.record()
        a, b = zone_indexes[position], zone_indexes[neighbor]
        cards[a], cards[b] = cards[b], cards[a]
        session.commit()

    def set_card_position(self, card_id: str, x: float, y: float) -> None:
        """Store a battlefield coordinate. Layout is not part of undo history."""
        session = self._session
        if not session.is_editable:
            return
        session.card_positions[card_id] = CardPosition(x=x, y=y)
        session.commit()

    # =========================================================================
    # TOKENS
    # =========================================================================

    def create_token(self, card: Card) -> CardInstance | None:
        """Put a new token onto the battlefield."""
        session = self._session
        if not session.is_editable:
            return None

        session.history.record()
        token = CardInstance(id=new_instance_id(), card=card, zone=Zone.BATTLEFIELD, is_token=True)
        session.cards.append(token)
        session.log.add(LogActionType.PLAY, f'Created token "{card.name}"')
        session.commit()
        return token

    def duplicate_card(self, card_id: str) -> CardInstance | None:
        """Create a token copy of a battlefield card, without its attachments."""
        session = self._session
        if not session.is_editable:
            return None

        original = session.find_card(card_id)
        if original is None or original.zone is not Zone.BATTLEFIELD:
            return None

        session.history.record()
        duplicate = original.clone()
        duplicate.id = new_instance_id()
        duplicate.is_token = True
        duplicate.attached_to_id = None
        duplicate.attachment_ids = []
        session.cards.append(duplicate)
        session.log.add(LogActionType.PLAY, f'Created a copy of "{original.name}"')
        session.commit()
        return duplicate
