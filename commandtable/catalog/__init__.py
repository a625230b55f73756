from commandtable.catalog.base import (
    CardCatalog,
    CatalogError,
    DeckImport,
    StaticCardCatalog,
    import_deck_from_text,
)
from commandtable.catalog.commanders import COMMON_COMMANDERS, is_legendary_creature
from commandtable.catalog.deck_list import DeckListEntry, expand_quantities, parse_deck_list
from commandtable.catalog.demo_deck import DEMO_COMMANDER, DEMO_DECK
from commandtable.catalog.scryfall import ScryfallCatalog, generate_fallback_cards

__all__ = [
    "COMMON_COMMANDERS",
    "CardCatalog",
    "CatalogError",
    "DEMO_COMMANDER",
    "DEMO_DECK",
    "DeckImport",
    "DeckListEntry",
    "ScryfallCatalog",
    "StaticCardCatalog",
    "expand_quantities",
    "generate_fallback_cards",
    "import_deck_from_text",
    "is_legendary_creature",
    "parse_deck_list",
]
