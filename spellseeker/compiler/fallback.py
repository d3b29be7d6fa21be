"""
Local fallback compiler.

Turns natural language into a best-effort grammar query using small,
fixed phrase tables and no network access. The search orchestrator uses
it when the remote translator times out or fails.

INVARIANTS:
- compile_fallback() is pure, synchronous and never raises
- User intent is never silently discarded: unmatched words become an
  oracle-text search, and input no rule matched is returned unchanged
"""

import logging
import re

from spellseeker.compiler.mappings import (
    CARD_TYPES,
    COLOR_CODES,
    FORMATS,
    KEYWORD_ABILITIES,
    MULTICOLOR_NAMES,
    STOP_WORDS,
    plural,
)

logger = logging.getLogger(__name__)

# =============================================================================
# FALLBACK TABLES
# =============================================================================

# Exact inputs with a hand-checked translation
PRETRANSLATED: dict[str, str] = {
    "dragons": "t:dragon",
    "mono red creatures": "id=r t:creature",
    "budget board wipes under $5": "otag:board-wipe usd<5",
    "commander staples under $3": "f:commander usd<3",
    "creatures with flying and deathtouch": "t:creature kw:flying kw:deathtouch",
    "green ramp spells that search for lands": (
        'c:g otag:ramp o:"search your library" o:"basic land"'
    ),
    "elf tribal payoffs for commander": (
        't:elf f:commander (o:"elf" o:"you control" or o:"elf" o:"+1/+1")'
    ),
    "utility lands for commander in esper under $5": (
        "t:land -t:basic id<=wub f:commander usd<5"
    ),
    "landfall cards legal in commander": "otag:landfall f:commander",
    "tribal lords legal in commander": "(otag:lord or otag:anthem) f:commander",
    "treasure token cards legal in commander": 'o:"treasure" o:"token" f:commander',
    "chaos cards legal in commander": '(o:"coin" or o:"random" or o:"chaos") f:commander',
}

# Community shorthand; matched longest phrase first
FALLBACK_SLANG: dict[str, str] = {
    "mana rocks": 't:artifact o:"add" o:"{"',
    "mana rock": 't:artifact o:"add" o:"{"',
    "mana dorks": 't:creature o:"add" o:"{"',
    "mana dork": 't:creature o:"add" o:"{"',
    "board wipes": "otag:board-wipe",
    "board wipe": "otag:board-wipe",
    "boardwipes": "otag:board-wipe",
    "boardwipe": "otag:board-wipe",
    "counterspells": "otag:counter",
    "counterspell": "otag:counter",
    "card draw": "otag:draw",
    "ramp": "otag:ramp",
    "removal": "otag:removal",
    "tutors": "otag:tutor",
    "tutor": "otag:tutor",
    "lifegain": "otag:lifegain",
    "mill": 'o:"mill"',
    "blink": "otag:blink",
    "flicker": "otag:flicker",
    "reanimation": "otag:reanimate",
    "reanimate": "otag:reanimate",
    "treasure tokens": 'o:"create" o:"treasure"',
    "treasure token": 'o:"create" o:"treasure"',
    "treasure": 'o:"treasure"',
    "aristocrats": 'o:"when" o:"dies"',
    "voltron": "(t:equipment or t:aura)",
    "spellslinger": "(t:instant or t:sorcery)",
    "tokens": 'o:"create" o:"token"',
    "sacrifice": 'o:"sacrifice"',
}

FALLBACK_KEYWORDS: tuple[str, ...] = (
    "first strike",
    "double strike",
    "flying",
    "trample",
    "deathtouch",
    "lifelink",
    "haste",
    "vigilance",
    "menace",
    "reach",
    "hexproof",
    "indestructible",
    "flash",
    "defender",
    "infect",
    "prowess",
    "ward",
    "cascade",
)

COST_WORDS: dict[str, str] = {
    "cheap": "mv<=3",
    "low": "mv<=2",
    "expensive": "mv>=6",
    "high": "mv>=5",
}

# Words that only glue a sentence together
_FILLER_WORDS = STOP_WORDS | frozenset(
    {
        "make",
        "makes",
        "produce",
        "produces",
        "bonus",
        "bonuses",
        "reward",
        "rewards",
        "casting",
        "give",
        "gives",
        "when",
        "die",
        "dies",
        "deal",
        "deals",
        "drain",
        "piece",
        "pieces",
    }
)

# Two-color guild names only; the client fallback does not know shards
_GUILD_NAMES = tuple(name for name, colors in MULTICOLOR_NAMES.items() if len(colors) == 2)

_WHITESPACE = re.compile(r"\s+")


def _word(text: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(text)}\b", re.IGNORECASE)


def _ordered_rules() -> tuple[tuple[re.Pattern[str], str], ...]:
    """Every (pattern, fragment) rule in the order they are tried."""
    rules: list[tuple[re.Pattern[str], str]] = []

    for phrase in sorted(FALLBACK_SLANG, key=len, reverse=True):
        rules.append((_word(phrase), FALLBACK_SLANG[phrase]))
    for name in _GUILD_NAMES:
        rules.append((_word(name), f"id<={MULTICOLOR_NAMES[name]}"))
    for name, code in COLOR_CODES.items():
        rules.append((_word(name), f"c:{code}"))
    for card_type in CARD_TYPES:
        rules.append(
            (
                re.compile(rf"\b(?:{card_type}|{plural(card_type)})\b", re.IGNORECASE),
                f"t:{card_type}",
            )
        )
    for name, format_name in FORMATS.items():
        rules.append((_word(name), f"f:{format_name}"))
    for keyword in FALLBACK_KEYWORDS:
        rules.append((_word(keyword), KEYWORD_ABILITIES[keyword]))
    for word, fragment in COST_WORDS.items():
        rules.append((_word(word), fragment))

    return tuple(rules)


_RULES = _ordered_rules()


def compile_fallback(text: str) -> str:
    """
    Compile natural language into a best-effort grammar query.

    Args:
        text: The user's natural-language query

    Returns:
        Grammar query built from the matched rules, plus any leftover
        words as a quoted oracle-text search. The trimmed input itself
        when no rule matched.

    Example:
        compile_fallback("cheap red creatures") -> "c:r t:creature mv<=3"
    """
    original = text.strip()
    lowered = original.lower()
    if not lowered:
        return ""

    if lowered in PRETRANSLATED:
        return PRETRANSLATED[lowered]

    parts: list[str] = []
    residual = lowered
    for pattern, fragment in _RULES:
        if pattern.search(residual):
            if fragment not in parts:
                parts.append(fragment)
            residual = pattern.sub(" ", residual)

    leftover = [
        word
        for word in _WHITESPACE.sub(" ", residual.replace('"', " ")).strip().split(" ")
        if word and word not in _FILLER_WORDS
    ]
    oracle_text = " ".join(leftover)
    if len(oracle_text) > 2:
        parts.append(f'o:"{oracle_text}"')

    if not parts:
        return original

    compiled = " ".join(parts)
    logger.debug("FALLBACK_COMPILED", extra={"input": original, "query": compiled})
    return compiled
