"""
Append-only game log.

Local entries are rendered once, at the moment of the action. An action
that reveals hidden information (a draw) passes a separate public message;
listeners (the multiplayer broadcaster) receive the public form, so peers
never see what the local player drew.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Callable
from dataclasses import replace
from typing import TYPE_CHECKING

from commandtable.config import MAX_LOG_ENTRIES
from commandtable.models.log import GameLogEntry, LogActionType

if TYPE_CHECKING:
    from commandtable.engine.session import GameSession

LogListener = Callable[[GameLogEntry], None]


def now_ms() -> int:
    return int(time.time() * 1000)


class GameLog:
    """Bounded activity log with listeners for local entries."""

    def __init__(self, session: GameSession, limit: int = MAX_LOG_ENTRIES) -> None:
        self._session = session
        self.limit = limit
        self._entries: list[GameLogEntry] = []
        self._listeners: list[LogListener] = []

    @property
    def entries(self) -> list[GameLogEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def subscribe(self, listener: LogListener) -> None:
        self._listeners.append(listener)

    def _append(self, entry: GameLogEntry) -> None:
        self._entries.append(entry)
        del self._entries[: -self.limit]

    def add(
        self,
        action_type: LogActionType,
        message: str,
        *,
        public_message: str | None = None,
        broadcast: bool = True,
    ) -> GameLogEntry:
        """
        Append a local entry.

        Args:
            action_type: Log category
            message: Text shown locally
            public_message: Text shown to other players, if different
            broadcast: False for entries that only make sense locally

        Returns:
            The local entry
        """
        entry = GameLogEntry(
            id=str(uuid.uuid4()),
            turn=self._session.turn,
            timestamp=now_ms(),
            action_type=action_type,
            message=message,
        )
        self._append(entry)

        if broadcast:
            public = entry if public_message is None else replace(entry, message=public_message)
            for listener in self._listeners:
                listener(public)

        return entry

    def append_remote(self, entry: GameLogEntry) -> bool:
        """
        Append an entry received from a peer as-is.

        Returns:
            False if an entry with the same id is already present
        """
        if any(existing.id == entry.id for existing in self._entries):
            return False
        self._append(entry)
        return True

    def clear(self) -> None:
        self._entries.clear()
