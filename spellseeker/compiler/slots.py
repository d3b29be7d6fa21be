"""
Slot extraction for the deterministic compiler.

Pulls structured constraints (colors, types, numbers, price, release
year, rarity, format) out of normalized natural language. Each
extractor returns the fragments it produced and the text it left behind.
"""

import re
from dataclasses import dataclass, field
from datetime import date

from spellseeker.compiler.mappings import (
    CARD_TYPES,
    COLOR_CODES,
    FORMATS,
    MULTICOLOR_NAMES,
    WORD_NUMBERS,
    plural,
)

_WHITESPACE = re.compile(r"\s+")


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


@dataclass
class ExtractedSlots:
    """Everything the slot extractors found, in grammar-fragment form."""

    colors: list[str] = field(default_factory=list)
    color_fragments: list[str] = field(default_factory=list)
    types: list[str] = field(default_factory=list)
    type_fragments: list[str] = field(default_factory=list)
    excluded_types: list[str] = field(default_factory=list)
    constraints: list[str] = field(default_factory=list)
    format: str | None = None
    remaining: str = ""


# =============================================================================
# PRICE
# =============================================================================

_PRICE_BELOW = re.compile(
    r"\b(?:under|below|less than|cheaper than|at most)\s*\$\s*(\d+(?:\.\d+)?)",
    re.IGNORECASE,
)
_PRICE_ABOVE = re.compile(
    r"\b(?:over|above|more than|at least)\s*\$\s*(\d+(?:\.\d+)?)",
    re.IGNORECASE,
)
_PRICE_DOLLARS_BELOW = re.compile(
    r"\b(?:under|below|less than)\s+(\d+(?:\.\d+)?)\s*(?:dollars?|bucks?|usd)\b",
    re.IGNORECASE,
)
_BUDGET_WORDS = re.compile(r"\b(?:cheap|budget|affordable|inexpensive)\b", re.IGNORECASE)
_PRICEY_WORDS = re.compile(r"\b(?:expensive|costly|pricey)\b", re.IGNORECASE)

# Words that make a query about price, for affiliate display
PRICE_MENTION = re.compile(
    r"\$|\b(?:usd|price[ds]?|cheap|budget|affordable|inexpensive|expensive|pricey|dollars?)\b",
    re.IGNORECASE,
)


def extract_price(text: str) -> tuple[str | None, str]:
    """Return a ``usd`` fragment and the text without the price phrase."""
    for pattern, operator in (
        (_PRICE_BELOW, "<"),
        (_PRICE_DOLLARS_BELOW, "<"),
        (_PRICE_ABOVE, ">"),
    ):
        match = pattern.search(text)
        if match is not None:
            return f"usd{operator}{match.group(1)}", _collapse(pattern.sub(" ", text, count=1))

    if _BUDGET_WORDS.search(text):
        return "usd<5", _collapse(_BUDGET_WORDS.sub(" ", text))
    if _PRICEY_WORDS.search(text):
        return "usd>20", _collapse(_PRICEY_WORDS.sub(" ", text))
    return None, text


# =============================================================================
# NUMBERS
# =============================================================================

_NUMBER_WORDS = re.compile(rf"\b({'|'.join(WORD_NUMBERS)})\b", re.IGNORECASE)

_COMPARATOR_PHRASES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(\d+)\s+or\s+(?:less|fewer|lower|below)\b", re.IGNORECASE), r"<=\1"),
    (re.compile(r"(\d+)\s+or\s+(?:more|greater|higher|above)\b", re.IGNORECASE), r">=\1"),
    (re.compile(r"(\d+)\s+and\s+under\b", re.IGNORECASE), r"<=\1"),
    (re.compile(r"(\d+)\s+and\s+over\b", re.IGNORECASE), r">=\1"),
    (re.compile(r"\b(?:less|fewer)\s+than\s+(\d+)", re.IGNORECASE), r"<\1"),
    (re.compile(r"\b(?:more|greater)\s+than\s+(\d+)", re.IGNORECASE), r">\1"),
    (re.compile(r"\bunder\s+(\d+)", re.IGNORECASE), r"<\1"),
    (re.compile(r"\bover\s+(\d+)", re.IGNORECASE), r">\1"),
    (re.compile(r"\bat\s+least\s+(\d+)", re.IGNORECASE), r">=\1"),
    (re.compile(r"\bat\s+most\s+(\d+)", re.IGNORECASE), r"<=\1"),
)


def normalize_numbers(text: str) -> str:
    """Turn number words into digits and comparison phrases into operators."""
    normalized = _NUMBER_WORDS.sub(lambda m: str(WORD_NUMBERS[m.group(1).lower()]), text)
    for pattern, replacement in _COMPARATOR_PHRASES:
        normalized = pattern.sub(replacement, normalized)
    return _collapse(normalized)


_OPERATOR = r"(<=|>=|<|>|=)"

# Grammar key -> spoken aliases
NUMERIC_ALIASES: dict[str, tuple[str, ...]] = {
    "pow": ("power", "pow"),
    "tou": ("toughness", "tou"),
    "mv": ("mana value", "mana cost", "mana", "mv", "cmc", "costs?", "costing"),
}


def _numeric_patterns(aliases: tuple[str, ...]) -> tuple[tuple[re.Pattern[str], str | None], ...]:
    group = "|".join(aliases)
    flags = re.IGNORECASE
    return (
        # "3 mana or less" after an operator could not be attached
        (re.compile(rf"\b(\d+)\s*(?:{group})\s+or\s+(?:less|fewer)\b", flags), "<="),
        (re.compile(rf"\b(\d+)\s*(?:{group})\s+or\s+(?:more|greater)\b", flags), ">="),
        (re.compile(rf"\b(?:{group})\s*(?:of\s+)?{_OPERATOR}\s*(\d+)\b", flags), None),
        (re.compile(rf"{_OPERATOR}\s*(\d+)\s*(?:{group})\b", flags), None),
        (re.compile(rf"\b(\d+)\s*(?:{group})\b", flags), "="),
        (re.compile(rf"\b(?:{group})\s+(?:of\s+)?(\d+)\b", flags), "="),
    )


_NUMERIC_PATTERNS = {key: _numeric_patterns(aliases) for key, aliases in NUMERIC_ALIASES.items()}


def extract_numeric(text: str, key: str) -> tuple[str | None, str]:
    """
    Extract one numeric comparison for ``key`` ("mv", "pow" or "tou").

    Expects text already passed through normalize_numbers().
    """
    for pattern, fixed_operator in _NUMERIC_PATTERNS[key]:
        match = pattern.search(text)
        if match is None:
            continue
        groups = [g for g in match.groups() if g is not None]
        if fixed_operator is None:
            operator, value = groups[0], groups[1]
        else:
            operator, value = fixed_operator, groups[0]
        remaining = _collapse(text[: match.start()] + " " + text[match.end() :])
        return f"{key}{operator}{value}", remaining
    return None, text


# =============================================================================
# RELEASE YEAR AND RARITY
# =============================================================================

_YEAR_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\b(?:after|since|post)\s+(\d{4})\b", re.IGNORECASE), ">"),
    (re.compile(r"\b(?:before|pre)\s+(\d{4})\b", re.IGNORECASE), "<"),
    (re.compile(r"\b(?:released in|printed in|from|in)\s+(\d{4})\b", re.IGNORECASE), "="),
)
_RECENT_CARDS = re.compile(r"\b(?:recent|new)\s+cards?\b", re.IGNORECASE)
_OLD_CARDS = re.compile(r"\b(?:old|classic)\s+cards?\b", re.IGNORECASE)


def extract_year(text: str, today: date | None = None) -> tuple[str | None, str]:
    """Return a ``year`` fragment and the text without the date phrase."""
    for pattern, operator in _YEAR_PATTERNS:
        match = pattern.search(text)
        if match is not None:
            return f"year{operator}{match.group(1)}", _collapse(pattern.sub(" ", text, count=1))

    if _RECENT_CARDS.search(text):
        current = (today or date.today()).year
        return f"year>={current - 2}", _collapse(_RECENT_CARDS.sub(" ", text))
    if _OLD_CARDS.search(text):
        return "year<2003", _collapse(_OLD_CARDS.sub(" ", text))
    return None, text


RARITIES: dict[str, str] = {
    "mythic rares": "mythic",
    "mythic rare": "mythic",
    "mythics": "mythic",
    "mythic": "mythic",
    "uncommons": "uncommon",
    "uncommon": "uncommon",
    "commons": "common",
    "common": "common",
    "rares": "rare",
    "rare": "rare",
}

_RARITY = re.compile(rf"\b({'|'.join(RARITIES)})\b", re.IGNORECASE)


def extract_rarity(text: str) -> tuple[str | None, str]:
    match = _RARITY.search(text)
    if match is None:
        return None, text
    return f"r:{RARITIES[match.group(1).lower()]}", _collapse(_RARITY.sub(" ", text, count=1))


# =============================================================================
# FORMAT
# =============================================================================

_FORMAT = re.compile(
    rf"\b(?:(?:legal|playable)\s+in\s+|for\s+|in\s+)?({'|'.join(FORMATS)})(?:\s+legal)?\b",
    re.IGNORECASE,
)


def extract_format(text: str) -> tuple[str | None, str]:
    """Return the canonical format name and the text without it."""
    match = _FORMAT.search(text)
    if match is None:
        return None, text
    return FORMATS[match.group(1).lower()], _collapse(_FORMAT.sub(" ", text, count=1))


# =============================================================================
# COLORS
# =============================================================================

_COLOR_NAMES = "white|blue|black|red|green"
_IDENTITY_CONTEXT = re.compile(
    r"\b(?:commander deck|fits into|goes into|can go in|usable in|color identity|identity)\b",
    re.IGNORECASE,
)
_EXACT_CONTEXT = re.compile(r"\b(?:exactly|only|just|strictly)\b", re.IGNORECASE)
_MONO = re.compile(r"\bmono[-\s]?(white|blue|black|red|green)\b", re.IGNORECASE)
_COLOR_OR = re.compile(rf"\b({_COLOR_NAMES})\s+or\s+({_COLOR_NAMES})\b", re.IGNORECASE)
_COLOR_AND = re.compile(rf"\b({_COLOR_NAMES})\s+and\s+({_COLOR_NAMES})\b", re.IGNORECASE)
_COLOR_WORD = re.compile(rf"\b({_COLOR_NAMES}|colorless)\b", re.IGNORECASE)
_MULTICOLOR = re.compile(
    rf"\b({'|'.join(sorted(MULTICOLOR_NAMES, key=len, reverse=True))})\b", re.IGNORECASE
)


def extract_colors(text: str, for_commander: bool = False) -> tuple[list[str], list[str], str]:
    """
    Extract a color constraint.

    Returns (color codes, grammar fragments, remaining text). In a
    commander context colors constrain color identity rather than color.
    """
    identity = for_commander or _IDENTITY_CONTEXT.search(text) is not None
    exact = _EXACT_CONTEXT.search(text) is not None

    mono = _MONO.search(text)
    if mono is not None:
        code = COLOR_CODES[mono.group(1).lower()]
        return [code], [f"id={code}"], _collapse(_MONO.sub(" ", text, count=1))

    multicolor = _MULTICOLOR.search(text)
    if multicolor is not None:
        codes = MULTICOLOR_NAMES[multicolor.group(1).lower()]
        fragment = f"id={codes}" if exact else f"id<={codes}"
        return list(codes), [fragment], _collapse(_MULTICOLOR.sub(" ", text, count=1))

    either = _COLOR_OR.search(text)
    if either is not None:
        codes = [COLOR_CODES[either.group(1).lower()], COLOR_CODES[either.group(2).lower()]]
        if identity:
            fragment = f"id<={''.join(codes)}"
        else:
            fragment = f"(c:{codes[0]} or c:{codes[1]})"
        return codes, [fragment], _collapse(_COLOR_OR.sub(" ", text, count=1))

    both = _COLOR_AND.search(text)
    if both is not None:
        codes = [COLOR_CODES[both.group(1).lower()], COLOR_CODES[both.group(2).lower()]]
        if identity:
            operator = "=" if exact else "<="
            fragments = [f"id{operator}{''.join(codes)}"]
        else:
            fragments = [f"c:{code}" for code in codes]
        return codes, fragments, _collapse(_COLOR_AND.sub(" ", text, count=1))

    codes = []
    for match in _COLOR_WORD.finditer(text):
        code = COLOR_CODES[match.group(1).lower()]
        if code not in codes:
            codes.append(code)
    if not codes:
        return [], [], text

    remaining = _collapse(_COLOR_WORD.sub(" ", text))
    if codes == ["c"]:
        return codes, ["c=c"], remaining
    colored = [code for code in codes if code != "c"]
    if identity:
        return colored, [f"id<={''.join(colored)}"], remaining
    if exact and len(colored) == 1:
        return colored, [f"c={colored[0]}"], remaining
    return colored, [f"c:{code}" for code in colored], remaining


# =============================================================================
# TYPES
# =============================================================================

_MAIN_TYPES = ("artifact", "creature", "instant", "sorcery", "land", "enchantment", "planeswalker")
_MAIN_TYPE_WORD = rf"(?:{'|'.join(_MAIN_TYPES)}|sorceries)"
_TYPE_OR = re.compile(
    rf"\b{_MAIN_TYPE_WORD}s?(?:\s*,\s*{_MAIN_TYPE_WORD}s?)*\s*,?\s+or\s+{_MAIN_TYPE_WORD}s?\b",
    re.IGNORECASE,
)
_TYPE_IN_RUN = re.compile(rf"\b({'|'.join(_MAIN_TYPES)}|sorceries)", re.IGNORECASE)
_SPELLS = re.compile(r"\bspells?\b", re.IGNORECASE)

COMMON_SUBTYPES: tuple[str, ...] = (
    "elf",
    "goblin",
    "zombie",
    "vampire",
    "dragon",
    "angel",
    "demon",
    "spirit",
    "human",
    "wizard",
    "warrior",
    "soldier",
    "merfolk",
    "elemental",
    "sliver",
    "dinosaur",
    "knight",
    "cleric",
    "rogue",
    "pirate",
    "cat",
    "dog",
    "bird",
    "beast",
    "wolf",
)

_SUBTYPE_PLURALS = {"elf": "elves", "wolf": "wolves", "merfolk": "merfolk"}


def _type_word(type_name: str) -> str:
    return "sorcery" if type_name.lower() == "sorceries" else type_name.lower()


def extract_types(text: str) -> tuple[list[str], list[str], list[str], str]:
    """
    Extract type constraints.

    Returns (included types, grammar fragments, excluded types, remaining).
    "X or Y" becomes one OR group; "spells" means instant or sorcery.
    """
    included: list[str] = []
    either: list[str] = []
    excluded: list[str] = []
    remaining = text

    for match in list(_TYPE_OR.finditer(remaining)):
        for found in _TYPE_IN_RUN.findall(match.group(0)):
            type_name = _type_word(found)
            if type_name not in either:
                either.append(type_name)
    remaining = _collapse(_TYPE_OR.sub(" ", remaining))

    if _SPELLS.search(remaining) and "instant" not in either and "sorcery" not in either:
        either.extend(["instant", "sorcery"])
        remaining = _collapse(_SPELLS.sub(" ", remaining))

    for card_type in CARD_TYPES:
        negated = re.compile(
            rf"\b(?:(?:not|isn't|isnt|aren't|arent|no)\s+|non[-\s]?)"
            rf"(?:{card_type}|{plural(card_type)})\b",
            re.IGNORECASE,
        )
        if negated.search(remaining):
            excluded.append(card_type)
            remaining = _collapse(negated.sub(" ", remaining))

    for card_type in CARD_TYPES:
        if card_type in either or card_type in excluded:
            continue
        pattern = re.compile(rf"\b(?:{card_type}|{plural(card_type)})\b", re.IGNORECASE)
        if pattern.search(remaining):
            included.append(card_type)
            remaining = _collapse(pattern.sub(" ", remaining))

    for subtype in COMMON_SUBTYPES:
        spoken = _SUBTYPE_PLURALS.get(subtype, f"{subtype}s")
        pattern = re.compile(rf"\b(?:{subtype}|{spoken})\b", re.IGNORECASE)
        if pattern.search(remaining):
            included.append(subtype)
            remaining = _collapse(pattern.sub(" ", remaining))

    fragments = [f"t:{type_name}" for type_name in included]
    if either:
        fragments.append(f"({' or '.join(f't:{type_name}' for type_name in either)})")
    fragments.extend(f"-t:{type_name}" for type_name in excluded)

    return included + either, fragments, excluded, remaining


# =============================================================================
# ALL SLOTS
# =============================================================================


def extract_slots(text: str, today: date | None = None) -> ExtractedSlots:
    """Run every slot extractor in order over ``text``."""
    slots = ExtractedSlots()

    price, remaining = extract_price(text)
    remaining = normalize_numbers(remaining)

    for key in ("pow", "tou", "mv"):
        fragment, remaining = extract_numeric(remaining, key)
        if fragment:
            slots.constraints.append(fragment)

    year, remaining = extract_year(remaining, today)
    rarity, remaining = extract_rarity(remaining)
    slots.format, remaining = extract_format(remaining)

    slots.colors, slots.color_fragments, remaining = extract_colors(
        remaining, for_commander=slots.format == "commander"
    )
    slots.types, slots.type_fragments, slots.excluded_types, remaining = extract_types(remaining)

    slots.constraints.extend(fragment for fragment in (rarity, year, price) if fragment)
    if slots.format:
        slots.constraints.append(f"f:{slots.format}")

    slots.remaining = remaining
    return slots
