"""Tests for the game log."""

from commandtable.catalog import StaticCardCatalog
from commandtable.engine import GameSession
from commandtable.models import GameLogEntry, LogActionType


class TestGameLog:
    def test_add_stamps_turn(self, session: GameSession) -> None:
        session.turn = 3

        entry = session.log.add(LogActionType.LIFE, "Life -2 → 38")

        assert entry.turn == 3
        assert entry.player_id is None
        assert session.log.entries == [entry]

    def test_capped(self, catalog: StaticCardCatalog) -> None:
        session = GameSession(catalog, log_limit=100)

        for i in range(120):
            session.log.add(LogActionType.OTHER, f"entry {i}")

        entries = session.log.entries
        assert len(entries) == 100
        assert entries[0].message == "entry 20"
        assert entries[-1].message == "entry 119"

    def test_listeners_get_public_message(self, session: GameSession) -> None:
        received: list[GameLogEntry] = []
        session.log.subscribe(received.append)

        local = session.log.add(LogActionType.DRAW, 'Drew "Sol Ring"', public_message="Drew a card")

        assert local.message == 'Drew "Sol Ring"'
        assert received[0].message == "Drew a card"
        assert received[0].id == local.id

    def test_local_only_entries_not_published(self, session: GameSession) -> None:
        received: list[GameLogEntry] = []
        session.log.subscribe(received.append)

        session.log.add(LogActionType.OTHER, "Bob joined as Player 2", broadcast=False)

        assert received == []
        assert len(session.log) == 1

    def test_append_remote_dedupes(self, session: GameSession) -> None:
        entry = GameLogEntry(
            id="remote-1",
            turn=2,
            timestamp=1_700_000_000_000,
            action_type=LogActionType.DRAW,
            message="Drew a card",
            player_id="player-2",
        )

        assert session.log.append_remote(entry)
        assert not session.log.append_remote(entry)
        assert session.log.entries == [entry]

    def test_entries_is_a_copy(self, session: GameSession) -> None:
        session.log.add(LogActionType.OTHER, "Shuffled library")

        session.log.entries.clear()

        assert len(session.log) == 1

    def test_clear(self, session: GameSession) -> None:
        session.log.add(LogActionType.OTHER, "Shuffled library")

        session.log.clear()

        assert session.log.entries == []
