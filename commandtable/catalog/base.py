"""
Card catalog contract.

The catalog is an external collaborator: it owns card definitions keyed
by name. The engine only asks it to resolve a list of exact names.
Resolution is partial: names that cannot be resolved are
reported back, never raised.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field

from commandtable.catalog.deck_list import parse_deck_list
from commandtable.models.card import Card

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Raised when the catalog backend cannot be reached or answers badly."""

    pass


class CardCatalog(ABC):
    """Source of immutable Card records."""

    @abstractmethod
    async def fetch_cards_by_names(self, names: list[str]) -> list[Card]:
        """
        Resolve exact card names.

        Args:
            names: Unique card names to look up

        Returns:
            Cards that were found, in any order. Missing names are simply
            absent from the result.

        Raises:
            CatalogError: If the backend fails as a whole
        """


class StaticCardCatalog(CardCatalog):
    """
    In-memory catalog for offline play and tests.

    Lookups are case-insensitive.
    """

    def __init__(self, cards: Iterable[Card] = ()) -> None:
        self._cards: dict[str, Card] = {}
        for card in cards:
            self.add(card)

    def add(self, card: Card) -> None:
        self._cards[card.name.lower()] = card

    def __len__(self) -> int:
        return len(self._cards)

    async def fetch_cards_by_names(self, names: list[str]) -> list[Card]:
        found = (self._cards.get(name.lower()) for name in names)
        return [card for card in found if card is not None]


@dataclass
class DeckImport:
    """Cards resolved from a deck list, one entry per copy."""

    cards: list[Card] = field(default_factory=list)
    not_found: list[str] = field(default_factory=list)


def _index_by_name(cards: list[Card]) -> dict[str, Card]:
    """Index cards by lowercase full name and by each face of split/MDFC names."""
    index: dict[str, Card] = {}
    for card in cards:
        key = card.name.lower()
        index.setdefault(key, card)
        if " // " in key:
            for face in key.split(" // "):
                index.setdefault(face, card)
    return index


async def import_deck_from_text(catalog: CardCatalog, deck_text: str) -> DeckImport:
    """
    Parse a deck list and resolve it against the catalog.

    Args:
        catalog: Card source
        deck_text: Raw deck list text

    Returns:
        DeckImport with one Card per copy (quantities expanded) and the
        names that could not be resolved.

    Raises:
        CatalogError: Propagated from the catalog backend
    """
    entries = parse_deck_list(deck_text)

    # Unique names, first spelling wins
    unique: dict[str, str] = {}
    for entry in entries:
        unique.setdefault(entry.name.lower(), entry.name)

    fetched = await catalog.fetch_cards_by_names(list(unique.values())) if unique else []
    by_name = _index_by_name(fetched)

    result = DeckImport()
    for entry in entries:
        card = by_name.get(entry.name.lower())
        if card is None:
            result.not_found.append(entry.name)
            continue
        result.cards.extend([card] * entry.quantity)

    if result.not_found:
        logger.info(
            "deck_names_unresolved",
            extra={
                "not_found_count": len(result.not_found),
                "not_found": result.not_found[:10],  # Log first 10
            },
        )

    return result
