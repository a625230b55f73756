"""
Check a deck list against Scryfall.

Resolves the commander and every deck entry the same way a game import
does, and reports names that could not be resolved.

Usage:
    commandtable-check-deck "Atraxa, Praetors' Voice" deck.txt
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from commandtable.catalog import (
    CardCatalog,
    ScryfallCatalog,
    expand_quantities,
    import_deck_from_text,
    is_legendary_creature,
    parse_deck_list,
)

logger = logging.getLogger(__name__)


async def run_check(catalog: CardCatalog, commander_name: str, deck_text: str) -> bool:
    """
    Resolve a commander and deck list.

    Returns:
        True if the commander and every deck entry resolved
    """
    commander_import = await import_deck_from_text(catalog, f"1 {commander_name}")
    if not commander_import.cards:
        logger.error("Commander not found: %s", commander_name)
        return False

    commander = commander_import.cards[0]
    if not is_legendary_creature(commander):
        logger.warning("%s is not a legendary creature", commander.name)

    copies = len(expand_quantities(parse_deck_list(deck_text)))
    deck_import = await import_deck_from_text(catalog, deck_text)
    logger.info(
        "Resolved %d of %d cards for %s", len(deck_import.cards), copies, commander.name
    )

    for name in deck_import.not_found:
        logger.warning("Not found: %s", name)

    return not deck_import.not_found


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Check a deck list against Scryfall")
    parser.add_argument("commander", help="Commander card name")
    parser.add_argument("deck_file", type=Path, help="Deck list text file")
    args = parser.parse_args()

    deck_text = args.deck_file.read_text(encoding="utf-8")
    ok = asyncio.run(run_check(ScryfallCatalog(), args.commander, deck_text))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
