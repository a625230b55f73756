"""Tests for domain models."""

import pytest

from commandtable.models import (
    CARD_BACK_URL,
    Card,
    CardCounter,
    CardInstance,
    CounterKind,
    CounterType,
    ManaColor,
    ManaPool,
    PlayerCounter,
    PlayerCounters,
    PlayerState,
    Zone,
)


@pytest.fixture
def scryfall_mdfc() -> dict:
    """A modal double-faced card as Scryfall returns it."""
    return {
        "id": "b1e4f5c2",
        "name": "Valki, God of Lies // Tibalt, Cosmic Impostor",
        "mana_cost": "{1}{B}",
        "rarity": "mythic",
        "set": "khm",
        "set_name": "Kaldheim",
        "card_faces": [
            {
                "name": "Valki, God of Lies",
                "type_line": "Legendary Creature — God",
                "image_uris": {"normal": "https://img/valki.jpg"},
            },
            {
                "name": "Tibalt, Cosmic Impostor",
                "type_line": "Legendary Planeswalker — Tibalt",
                "image_uris": {"normal": "https://img/tibalt.jpg"},
            },
        ],
    }


class TestCard:
    def test_from_scryfall_joins_face_types(self, scryfall_mdfc: dict) -> None:
        card = Card.from_scryfall(scryfall_mdfc)

        assert card.type_line == "Legendary Creature — God // Legendary Planeswalker — Tibalt"
        assert card.set_code == "khm"
        assert len(card.face_image_uris) == 2

    def test_image_url_falls_back_to_front_face(self, scryfall_mdfc: dict) -> None:
        card = Card.from_scryfall(scryfall_mdfc)

        assert card.image_url() == "https://img/valki.jpg"

    def test_image_url_card_back(self) -> None:
        card = Card(id="x", name="Mystery")

        assert card.image_url("large") == CARD_BACK_URL

    def test_scryfall_round_trip(self) -> None:
        card = Card(
            id="sol",
            name="Sol Ring",
            type_line="Artifact",
            mana_cost="{1}",
            image_uris={"normal": "https://img/sol.jpg"},
            produced_mana=("C",),
        )

        assert Card.from_scryfall(card.to_scryfall()) == card

    @pytest.mark.parametrize(
        ("type_line", "attachable", "aura"),
        [
            ("Artifact — Equipment", True, False),
            ("Enchantment — Aura", True, True),
            ("Artifact — Fortification", True, False),
            ("Legendary Enchantment Creature — Aura Spirit", True, True),
            ("Creature — Elf", False, False),
        ],
    )
    def test_attachment_types(self, type_line: str, attachable: bool, aura: bool) -> None:
        card = Card(id="x", name="X", type_line=type_line)

        assert card.is_attachment is attachable
        assert card.is_aura is aura


class TestCounterType:
    def test_parse_known_kind(self) -> None:
        assert CounterType.parse("Loyalty") == CounterType(CounterKind.LOYALTY)
        assert CounterType.parse("+1/+1") == CounterType(CounterKind.PLUS_ONE)

    def test_parse_custom(self) -> None:
        counter_type = CounterType.parse(" Bounty ")

        assert counter_type.kind is CounterKind.OTHER
        assert counter_type.label == "Bounty"

    def test_other_needs_tag(self) -> None:
        with pytest.raises(ValueError):
            CounterType(CounterKind.OTHER)

    def test_known_kind_rejects_tag(self) -> None:
        with pytest.raises(ValueError):
            CounterType(CounterKind.CHARGE, "extra")


class TestCardInstance:
    def test_clone_shares_nothing_mutable(self) -> None:
        original = CardInstance(
            id="i1",
            card=Card(id="c", name="Walking Ballista"),
            zone=Zone.BATTLEFIELD,
            counters=[CardCounter(CounterType(CounterKind.PLUS_ONE), 2)],
            attachment_ids=["eq"],
        )

        copy = original.clone()
        copy.counters[0].count = 7
        copy.attachment_ids.append("aura")

        assert original.counters[0].count == 2
        assert original.attachment_ids == ["eq"]
        assert copy.card is original.card


class TestPlayerState:
    def test_mana_pool_floors_at_zero(self) -> None:
        pool = ManaPool()

        assert pool.adjust(ManaColor.BLACK, -2) == 0
        assert pool.adjust(ManaColor.BLACK, 3) == 3
        assert pool.total == 3

    def test_counters_by_enum(self) -> None:
        counters = PlayerCounters()

        counters.set(PlayerCounter.STORM_COUNT, 4)

        assert counters.storm_count == 4
        assert counters.get(PlayerCounter.STORM_COUNT) == 4

    def test_clone_is_independent(self) -> None:
        state = PlayerState(id="player-1", name="Alice")
        state.mana_pool.adjust(ManaColor.WHITE, 1)

        copy = state.clone()
        copy.mana_pool.adjust(ManaColor.WHITE, 5)
        copy.counters.poison = 2

        assert state.mana_pool[ManaColor.WHITE] == 1
        assert state.counters.poison == 0
        assert copy == PlayerState(
            id="player-1",
            name="Alice",
            counters=PlayerCounters(poison=2),
            mana_pool=ManaPool({**dict.fromkeys(ManaColor, 0), ManaColor.WHITE: 6}),
        )
