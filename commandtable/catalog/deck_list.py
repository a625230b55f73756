"""
Deck list parser.

THIS MODULE HANDLES SYNTAX ONLY.

Turns pasted deck list text into (name, quantity) entries. It does not
check that names exist; resolution against the card catalog happens in
`import_deck_from_text`, which reports unresolved names instead of failing.

Accepted line format: `<quantity>[x] <card name>`, e.g. "1 Sol Ring",
"2x Command Tower". A line without a leading quantity counts as one copy.
Blank lines, `//` and `#` comments, and bare "Sideboard" / "Commander"
section markers are skipped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# "4 Card Name" or "4x Card Name"
_ENTRY_PATTERN = re.compile(r"^(\d+)x?\s+(.+)$", re.IGNORECASE)

_COMMENT_PREFIXES = ("//", "#")

_SECTION_MARKERS: frozenset[str] = frozenset({"sideboard", "commander"})


@dataclass(frozen=True, slots=True)
class DeckListEntry:
    """One parsed deck list line."""

    name: str
    quantity: int


def _is_section_marker(text: str) -> bool:
    return text.lower().rstrip(":") in _SECTION_MARKERS


def parse_deck_list(text: str) -> list[DeckListEntry]:
    """
    Parse deck list text into entries, preserving line order.

    Args:
        text: Raw deck list, one card per line

    Returns:
        Entries in the order they appear. Duplicate names are kept as
        separate entries.
    """
    entries: list[DeckListEntry] = []

    for line in text.splitlines():
        stripped = line.strip()

        if not stripped or stripped.startswith(_COMMENT_PREFIXES):
            continue

        if _is_section_marker(stripped):
            continue

        match = _ENTRY_PATTERN.match(stripped)
        if match:
            quantity_str, name = match.groups()
            name = name.strip()
            if _is_section_marker(name):
                continue
            entries.append(DeckListEntry(name=name, quantity=int(quantity_str)))
        else:
            entries.append(DeckListEntry(name=stripped, quantity=1))

    return entries


def expand_quantities(entries: list[DeckListEntry]) -> list[str]:
    """Flatten entries into one name per copy."""
    return [entry.name for entry in entries for _ in range(entry.quantity)]
