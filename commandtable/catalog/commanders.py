from commandtable.models.card import Card

# Popular commanders that are recognized even if their type line is unusual
COMMON_COMMANDERS: frozenset[str] = frozenset(
    {
        "atraxa, praetors' voice",
        "muldrotha, the gravetide",
        "korvold, fae-cursed king",
        "edgar markov",
        "kenrith, the returned king",
        "golos, tireless pilgrim",
        "yuriko, the tiger's shadow",
        "teysa karlov",
        "krenko, mob boss",
        "gishath, sun's avatar",
    }
)


def is_legendary_creature(card: Card) -> bool:
    """Check whether a card could be a commander."""
    if card.name.lower() in COMMON_COMMANDERS:
        return True

    oracle_text = (card.oracle_text or "").lower()
    return (card.has_type("legendary") and card.has_type("creature")) or (
        "can be your commander" in oracle_text
    )
