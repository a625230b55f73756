import random
from collections.abc import Callable
from typing import Any

import pytest

from commandtable.catalog import StaticCardCatalog
from commandtable.engine import GameSession
from commandtable.models import Card, CardInstance, Zone, new_instance_id

PlaceCard = Callable[..., CardInstance]


@pytest.fixture
def atraxa() -> Card:
    return Card(
        id="atraxa",
        name="Atraxa, Praetors' Voice",
        type_line="Legendary Creature — Phyrexian Angel Horror",
        mana_cost="{G}{W}{U}{B}",
    )


@pytest.fixture
def elves() -> Card:
    return Card(id="elves", name="Llanowar Elves", type_line="Creature — Elf Druid")


@pytest.fixture
def grizzly_bears() -> Card:
    return Card(id="bears", name="Grizzly Bears", type_line="Creature — Bear")


@pytest.fixture
def rancor() -> Card:
    return Card(id="rancor", name="Rancor", type_line="Enchantment — Aura")


@pytest.fixture
def boots() -> Card:
    return Card(id="boots", name="Swiftfoot Boots", type_line="Artifact — Equipment")


@pytest.fixture
def sol_ring() -> Card:
    return Card(id="sol-ring", name="Sol Ring", type_line="Artifact", produced_mana=("C",))


@pytest.fixture
def command_tower() -> Card:
    return Card(id="command-tower", name="Command Tower", type_line="Land")


@pytest.fixture
def forest() -> Card:
    return Card(id="forest", name="Forest", type_line="Basic Land — Forest")


@pytest.fixture
def catalog(
    atraxa: Card,
    elves: Card,
    grizzly_bears: Card,
    rancor: Card,
    boots: Card,
    sol_ring: Card,
    command_tower: Card,
    forest: Card,
) -> StaticCardCatalog:
    return StaticCardCatalog(
        [atraxa, elves, grizzly_bears, rancor, boots, sol_ring, command_tower, forest]
    )


@pytest.fixture
def session(catalog: StaticCardCatalog) -> GameSession:
    """Offline session with a seeded random source."""
    return GameSession(catalog, rng=random.Random(42))


@pytest.fixture
def place(session: GameSession) -> PlaceCard:
    """Put a new card instance onto the session's board, appended in list order."""

    def _place(card: Card, zone: Zone = Zone.BATTLEFIELD, **kwargs: Any) -> CardInstance:
        instance = CardInstance(id=new_instance_id(), card=card, zone=zone, **kwargs)
        session.cards.append(instance)
        return instance

    return _place


@pytest.fixture
def commander(session: GameSession, place: PlaceCard, atraxa: Card) -> CardInstance:
    instance = place(atraxa, Zone.COMMAND_ZONE)
    session.commander_card_id = instance.id
    return instance
