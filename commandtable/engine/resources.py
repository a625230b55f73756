"""Life total, turn counter, player counters and the mana pool."""

from __future__ import annotations

from typing import TYPE_CHECKING

from commandtable.models.log import LogActionType
from commandtable.models.player import ManaColor, PlayerCounter
from commandtable.models.zone import Zone

if TYPE_CHECKING:
    from commandtable.engine.session import GameSession


class PlayerResources:
    def __init__(self, session: GameSession) -> None:
        self._session = session

    def set_life(self, life: int) -> None:
        session = self._session
        if not session.is_editable or life == session.life:
            return

        session.history.record()
        session.life = life
        session.log.add(LogActionType.LIFE, f"Life set to {life}")
        session.commit()

    def adjust_life(self, amount: int) -> None:
        session = self._session
        if not session.is_editable or amount == 0:
            return

        session.history.record()
        session.life += amount
        sign = "+" if amount >= 0 else ""
        session.log.add(LogActionType.LIFE, f"Life {sign}{amount} → {session.life}")
        session.commit()

    def next_turn(self) -> None:
        """Untap the battlefield, draw a card and advance the turn counter."""
        session = self._session
        if not session.is_editable:
            return

        session.history.record()
        for card in session.cards:
            if card.zone is Zone.BATTLEFIELD:
                card.is_tapped = False

        library = session.cards_in_zone(Zone.LIBRARY)
        drawn = library[0] if library else None
        if drawn is not None:
            drawn.zone = Zone.HAND

        session.turn += 1
        session.log.add(LogActionType.TURN, f"=== Turn {session.turn} ===")
        if drawn is not None:
            session.log.add(
                LogActionType.DRAW, f'Drew "{drawn.name}"', public_message="Drew a card"
            )
        session.commit()

    # =========================================================================
    # PLAYER COUNTERS
    # =========================================================================

    def set_counter(self, counter: PlayerCounter, value: int) -> None:
        session = self._session
        value = max(0, value)
        if not session.is_editable or session.counters.get(counter) == value:
            return

        session.history.record()
        session.counters.set(counter, value)
        session.log.add(LogActionType.OTHER, f"{counter.label} set to {value}")
        session.commit()

    def adjust_counter(self, counter: PlayerCounter, amount: int) -> None:
        self.set_counter(counter, self._session.counters.get(counter) + amount)

    # =========================================================================
    # MANA POOL
    # =========================================================================

    def adjust_mana(self, color: ManaColor, amount: int) -> None:
        """Add or spend floating mana. Buckets never go below zero."""
        session = self._session
        if not session.is_editable or amount == 0:
            return
        if amount < 0 and session.mana_pool[color] == 0:
            return

        session.history.record()
        total = session.mana_pool.adjust(color, amount)
        sign = "+" if amount > 0 else ""
        session.log.add(LogActionType.MANA, f"{{{color.value}}} {sign}{amount} → {total}")
        session.commit()

    def clear_mana_pool(self) -> None:
        session = self._session
        if not session.is_editable or session.mana_pool.total == 0:
            return

        session.history.record()
        session.mana_pool.clear()
        session.log.add(LogActionType.MANA, "Mana pool emptied")
        session.commit()
