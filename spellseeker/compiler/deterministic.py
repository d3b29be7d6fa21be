"""
Deterministic natural-language compiler.

Combines the semantic mapping engine with slot extraction to build a
grammar query without any model call. What no table or extractor can
account for is reported as ``remaining`` so the translation service can
decide whether the generative tier is needed.

Pipeline:
    normalize -> resolve concepts -> extract slots -> strip stop words -> render
"""

import logging
import re
from dataclasses import dataclass
from datetime import date

from spellseeker.compiler.mappings import CARD_NICKNAMES, STOP_WORDS
from spellseeker.compiler.semantic import SemanticMappingEngine, default_engine
from spellseeker.compiler.slots import extract_slots
from spellseeker.models.translation import SearchIntent

logger = logging.getLogger(__name__)

# Spoken shorthand expanded before resolution; "etb"/"ltb" stay as written
SHORTHAND: dict[str, str] = {
    "cmc": "mana value",
    "mv": "mana value",
    "gy": "graveyard",
    "cmdr": "commander",
    "pw": "planeswalker",
    "pws": "planeswalkers",
}

_WHITESPACE = re.compile(r"\s+")
_SMART_QUOTES = str.maketrans({"“": '"', "”": '"', "‘": "'", "’": "'"})
_PUNCTUATION = re.compile(r"[,;!?]+|(?<!\d)\.(?!\d)")

_NICKNAMES = tuple(
    (re.compile(rf"\b{re.escape(nickname)}\b"), name)
    for nickname, name in sorted(CARD_NICKNAMES.items(), key=lambda item: -len(item[0]))
)
_SHORTHAND = tuple((re.compile(rf"\b{short}\b"), long) for short, long in SHORTHAND.items())

# Words that only glue a request together once the meaning has been taken out
_FILLER_WORDS = STOP_WORDS | frozenset(
    {"have", "has", "having", "it", "them", "they", "their", "this", "those", "these", "also"}
)

# Confidence reported for a query built entirely from the tables
COMPLETE_CONFIDENCE = 0.85
PARTIAL_CONFIDENCE = 0.5


@dataclass(frozen=True, slots=True)
class DeterministicTranslation:
    """Result of compiling one input without a model call."""

    query: str
    intent: SearchIntent
    remaining: str
    confidence: float

    @property
    def complete(self) -> bool:
        """True when every meaningful word was accounted for."""
        return bool(self.query) and not self.remaining


def normalize_input(text: str) -> str:
    """Lowercase, straighten quotes, and expand nicknames and shorthand."""
    normalized = text.translate(_SMART_QUOTES).lower().strip()
    for pattern, name in _NICKNAMES:
        normalized = pattern.sub(name, normalized)
    for pattern, long in _SHORTHAND:
        normalized = pattern.sub(long, normalized)
    return _WHITESPACE.sub(" ", normalized)


def strip_filler(text: str) -> str:
    """Remove punctuation and filler words; what is left is unresolved intent."""
    words = _PUNCTUATION.sub(" ", text).split()
    return " ".join(word for word in words if word not in _FILLER_WORDS)


def compile_deterministic(
    text: str,
    engine: SemanticMappingEngine = default_engine,
    today: date | None = None,
) -> DeterministicTranslation:
    """
    Compile natural language with the mapping tables and slot extractors.

    Args:
        text: Natural-language query
        engine: Mapping engine; tests pass one with a custom tag registry
        today: Reference date for relative phrases such as "recent cards"

    Returns:
        DeterministicTranslation. ``query`` may be partial when
        ``remaining`` is not empty.
    """
    normalized = normalize_input(text)

    resolution = engine.resolve(normalized)
    rendered = engine.render(resolution)
    slots = extract_slots(resolution.remaining, today)
    remaining = strip_filler(slots.remaining)

    parts: list[str] = []
    for fragment in (
        *slots.color_fragments,
        *slots.type_fragments,
        *rendered.fragments,
        *slots.constraints,
    ):
        if fragment not in parts:
            parts.append(fragment)
    query = " ".join(parts)

    intent = SearchIntent(
        colors=slots.colors,
        types=slots.types,
        excluded_types=slots.excluded_types,
        tags=list(rendered.tags),
        constraints=list(slots.constraints),
        warnings=list(rendered.warnings),
        remaining=remaining,
        deterministic_query=query,
    )

    confidence = COMPLETE_CONFIDENCE if query and not remaining else PARTIAL_CONFIDENCE
    logger.debug(
        "DETERMINISTIC_COMPILED",
        extra={
            "query": query,
            "remaining": remaining,
            "concepts": len(resolution.matches),
        },
    )
    return DeterministicTranslation(
        query=query,
        intent=intent,
        remaining=remaining,
        confidence=confidence,
    )
