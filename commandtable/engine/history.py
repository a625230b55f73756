"""
Snapshot-based undo/redo.

A snapshot covers exactly {cards, life, turn, counters, mana_pool}. The
game log, targeting mode and card positions are not part of history:
undo never rewrites the log or the layout.

INVARIANT: a snapshot shares no mutable object with live state. Cards,
counters and mana are cloned structurally on capture; a snapshot popped
off a stack is handed to live state whole and never referenced again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from commandtable.config import MAX_HISTORY
from commandtable.models.instance import CardInstance
from commandtable.models.player import ManaPool, PlayerCounters

if TYPE_CHECKING:
    from commandtable.engine.session import GameSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GameSnapshot:
    """Core mutable state at one point in time."""

    cards: tuple[CardInstance, ...]
    life: int
    turn: int
    counters: PlayerCounters
    mana_pool: ManaPool


class HistoryManager:
    """
    Past and future stacks of snapshots.

    Every mutating engine call invokes record() before it changes anything.
    Both stacks are capped at `limit` entries; the oldest fall off.
    """

    def __init__(self, session: GameSession, limit: int = MAX_HISTORY) -> None:
        self._session = session
        self.limit = limit
        self._past: list[GameSnapshot] = []
        self._future: list[GameSnapshot] = []

    @property
    def past_count(self) -> int:
        return len(self._past)

    @property
    def future_count(self) -> int:
        return len(self._future)

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    def create_snapshot(self) -> GameSnapshot:
        session = self._session
        return GameSnapshot(
            cards=tuple(card.clone() for card in session.cards),
            life=session.life,
            turn=session.turn,
            counters=session.counters.clone(),
            mana_pool=session.mana_pool.clone(),
        )

    def record(self) -> None:
        """Push the current state onto the past stack and drop the redo branch."""
        self._past.append(self.create_snapshot())
        del self._past[: -self.limit]
        self._future.clear()

    def clear(self) -> None:
        self._past.clear()
        self._future.clear()

    def _restore(self, snapshot: GameSnapshot) -> None:
        session = self._session
        session.cards = list(snapshot.cards)
        session.life = snapshot.life
        session.turn = snapshot.turn
        session.counters = snapshot.counters
        session.mana_pool = snapshot.mana_pool

    def undo(self) -> None:
        """Restore the most recent past snapshot. No-op with an empty past."""
        if not self._session.is_editable or not self._past:
            return

        previous = self._past.pop()
        self._future.append(self.create_snapshot())
        del self._future[: -self.limit]
        self._restore(previous)

        logger.debug("history_undo", extra={"past": len(self._past), "future": len(self._future)})
        self._session.commit()

    def redo(self) -> None:
        """Re-apply the most recently undone snapshot. No-op with an empty future."""
        if not self._session.is_editable or not self._future:
            return

        following = self._future.pop()
        self._past.append(self.create_snapshot())
        del self._past[: -self.limit]
        self._restore(following)

        logger.debug("history_redo", extra={"past": len(self._past), "future": len(self._future)})
        self._session.commit()
