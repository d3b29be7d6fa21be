"""
Shared MTG vocabulary tables used by both compilers.

Colors, color-pair names, card types, formats, number words and card
nicknames. Read-only, process-wide.
"""

# Color names and single-letter codes -> grammar color code
COLOR_CODES: dict[str, str] = {
    "white": "w",
    "blue": "u",
    "black": "b",
    "red": "r",
    "green": "g",
    "colorless": "c",
}

# Guild, shard, wedge and four-color names -> color codes
MULTICOLOR_NAMES: dict[str, str] = {
    "azorius": "wu",
    "dimir": "ub",
    "rakdos": "br",
    "gruul": "rg",
    "selesnya": "gw",
    "orzhov": "wb",
    "izzet": "ur",
    "golgari": "bg",
    "boros": "rw",
    "simic": "gu",
    "bant": "gwu",
    "esper": "wub",
    "grixis": "ubr",
    "jund": "brg",
    "naya": "rgw",
    "abzan": "wbg",
    "jeskai": "urw",
    "sultai": "bgu",
    "mardu": "rwb",
    "temur": "gur",
    "yore-tiller": "wubr",
    "glint-eye": "ubrg",
    "dune-brood": "brgw",
    "ink-treader": "rgwu",
    "witch-maw": "gwub",
}

# Card types and the subtypes users search for as if they were types
CARD_TYPES: tuple[str, ...] = (
    "creature",
    "artifact",
    "enchantment",
    "instant",
    "sorcery",
    "land",
    "planeswalker",
    "battle",
    "kindred",
    "equipment",
    "aura",
    "vehicle",
    "saga",
)

# Irregular plurals; every other type pluralizes with a trailing "s"
TYPE_PLURALS: dict[str, str] = {
    "sorcery": "sorceries",
}

FORMATS: dict[str, str] = {
    "commander": "commander",
    "edh": "commander",
    "cedh": "commander",
    "standard": "standard",
    "pioneer": "pioneer",
    "modern": "modern",
    "legacy": "legacy",
    "vintage": "vintage",
    "pauper": "pauper",
    "brawl": "brawl",
    "historic": "historic",
    "alchemy": "alchemy",
    "explorer": "explorer",
    "timeless": "timeless",
    "oathbreaker": "oathbreaker",
}

WORD_NUMBERS: dict[str, int] = {
    "zero": 0,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
}

# Community nicknames -> full card names
CARD_NICKNAMES: dict[str, str] = {
    "bob": "dark confidant",
    "steve": "sakura-tribe elder",
    "gary": "gray merchant of asphodel",
    "tim": "prodigal sorcerer",
    "sad robot": "solemn simulacrum",
    "mom": "mother of runes",
    "goyf": "tarmogoyf",
    "snappy": "snapcaster mage",
    "bolt": "lightning bolt",
    "stp": "swords to plowshares",
    "fow": "force of will",
}

# Words that carry no search meaning once everything else is resolved
STOP_WORDS: frozenset[str] = frozenset(
    {
        "a",
        "an",
        "the",
        "and",
        "or",
        "of",
        "to",
        "in",
        "for",
        "with",
        "that",
        "which",
        "who",
        "is",
        "are",
        "be",
        "can",
        "i",
        "me",
        "my",
        "show",
        "find",
        "search",
        "give",
        "get",
        "want",
        "need",
        "looking",
        "some",
        "any",
        "all",
        "good",
        "best",
        "cards",
        "card",
        "spells",
        "spell",
        "deck",
        "decks",
        "please",
        "legal",
        "playable",
    }
)


def plural(word: str) -> str:
    return TYPE_PLURALS.get(word, f"{word}s")
