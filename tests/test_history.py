"""Tests for undo/redo."""

from collections.abc import Callable

from commandtable.catalog import StaticCardCatalog
from commandtable.engine import GameSession, GameSnapshot
from commandtable.models import (
    Card,
    CardInstance,
    ManaColor,
    PlayerCounter,
    Targeting,
    Zone,
)

Place = Callable[..., CardInstance]


def core_state(session: GameSession) -> GameSnapshot:
    return session.history.create_snapshot()


class TestUndoRedo:
    def test_round_trip(
        self, session: GameSession, place: Place, forest: Card, elves: Card
    ) -> None:
        """Every undo restores the state before the matching action; redo reverses it."""
        for _ in range(5):
            place(forest, Zone.LIBRARY)
        creature = place(elves, Zone.HAND)

        actions: list[Callable[[], None]] = [
            lambda: session.zones.move_card(creature.id, Zone.BATTLEFIELD),
            lambda: session.zones.tap_card(creature.id),
            lambda: session.zones.add_card_counter(creature.id, "+1/+1"),
            lambda: session.library.draw_card(),
            lambda: session.resources.adjust_life(-7),
            lambda: session.resources.adjust_counter(PlayerCounter.POISON, 2),
            lambda: session.resources.adjust_mana(ManaColor.GREEN, 3),
            lambda: session.library.shuffle_library(),
            lambda: session.resources.next_turn(),
        ]

        states = [core_state(session)]
        for action in actions:
            action()
            states.append(core_state(session))

        for expected in reversed(states[:-1]):
            session.history.undo()
            assert core_state(session) == expected

        for expected in states[1:]:
            session.history.redo()
            assert core_state(session) == expected

    def test_undo_empty_is_noop(self, session: GameSession) -> None:
        before = core_state(session)

        session.history.undo()
        session.history.redo()

        assert core_state(session) == before

    def test_new_action_clears_redo(self, session: GameSession) -> None:
        session.resources.adjust_life(-1)
        session.history.undo()
        assert session.history.can_redo

        session.resources.adjust_life(-2)

        assert not session.history.can_redo

    def test_past_capped(self, catalog: StaticCardCatalog) -> None:
        session = GameSession(catalog, history_limit=50)

        for _ in range(60):
            session.resources.adjust_life(-1)

        assert session.history.past_count == 50

        for _ in range(60):
            session.history.undo()

        assert session.life == 30

    def test_log_positions_targeting_untouched(
        self, session: GameSession, place: Place, elves: Card
    ) -> None:
        creature = place(elves)
        session.zones.tap_card(creature.id)
        session.zones.set_card_position(creature.id, 10.0, 20.0)
        session.attachments.start_targeting(creature.id)
        log_length = len(session.log)

        session.history.undo()

        restored = session.find_card(creature.id)
        assert restored is not None
        assert not restored.is_tapped
        assert len(session.log) == log_length
        assert creature.id in session.card_positions
        assert session.targeting == Targeting(source_card_id=creature.id)

    def test_commander_id_not_restored(self, session: GameSession) -> None:
        session.commander_card_id = "first"
        session.resources.adjust_life(-1)
        session.commander_card_id = "second"

        session.history.undo()

        assert session.life == 40
        assert session.commander_card_id == "second"


class TestSnapshotIsolation:
    def test_snapshot_not_aliased(
        self, session: GameSession, place: Place, elves: Card
    ) -> None:
        creature = place(elves)
        session.zones.add_card_counter(creature.id, "+1/+1")
        snapshot = session.history.create_snapshot()

        creature.counters[0].count = 9
        creature.attachment_ids.append("x")
        session.mana_pool.adjust(ManaColor.RED, 4)
        session.counters.poison = 3

        restored = snapshot.cards[0]
        assert restored.counters[0].count == 1
        assert restored.attachment_ids == []
        assert snapshot.mana_pool[ManaColor.RED] == 0
        assert snapshot.counters.poison == 0

    def test_redo_snapshot_not_aliased_with_live_state(
        self, session: GameSession, place: Place, elves: Card
    ) -> None:
        creature = place(elves)
        session.zones.tap_card(creature.id)
        session.history.undo()

        session.cards[0].is_revealed = True
        session.history.redo()

        assert session.cards[0].is_tapped
        assert not session.cards[0].is_revealed
