"""
Semantic mapping engine.

Resolves natural-language concepts against the static mapping tables in
a fixed priority order:

    exact slang phrase -> tag-first pattern -> archetype -> cards-like -> keyword

Each stage consumes the text it matched, so the first table to claim a
phrase wins. Whatever no table claims is returned as ``remaining`` for
the caller to hand to a generative translator or search as oracle text.

Tag-first matches are resolved optimistically: rendering prefers the
oracle tag and falls back to the entry's oracle-text query only when the
tag is missing from the known vocabulary.

INVARIANTS:
- Resolution is synchronous and referentially transparent
- Mapping tables are never mutated
- Card names requested through "like X" are never split by earlier stages
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum

from spellseeker.compiler.mappings import (
    ARCHETYPES,
    ART_SUBJECT_PATTERN,
    CARDS_LIKE,
    KEYWORD_ABILITIES,
    SLANG_PHRASES,
    SPECIAL_KEYWORDS,
    TAG_FIRST_PATTERNS,
    art_subject,
)
from spellseeker.grammar.vocabulary import KNOWN_OTAGS

logger = logging.getLogger(__name__)


class MappingTable(str, Enum):
    """The table a concept was resolved from."""

    SLANG = "slang"
    TAG_FIRST = "tag_first"
    ART = "art"
    ARCHETYPE = "archetype"
    CARDS_LIKE = "cards_like"
    KEYWORD = "keyword"


@dataclass(frozen=True, slots=True)
class ConceptMatch:
    """
    One resolved concept.

    Literal table entries carry ``fragment``. Tag-first entries carry
    ``tag`` (possibly empty) and ``fallback`` and are rendered later.
    """

    table: MappingTable
    matched: str
    fragment: str | None = None
    tag: str | None = None
    fallback: str | None = None


@dataclass(frozen=True, slots=True)
class MappingResolution:
    """Concepts found in a text, in resolution order, plus what is left."""

    matches: tuple[ConceptMatch, ...]
    remaining: str
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RenderedConcepts:
    """Grammar fragments for a resolution, with the tags they use."""

    fragments: tuple[str, ...]
    tags: tuple[str, ...]
    warnings: tuple[str, ...]


# =============================================================================
# PRECOMPILED TABLE PATTERNS
# =============================================================================

_WHITESPACE = re.compile(r"\s+")
_OTAG_FRAGMENT = re.compile(r"\botag:([a-z0-9-]+)")


def _phrase(text: str) -> re.Pattern[str]:
    return re.compile(rf"(?<![\w-]){re.escape(text)}(?![\w-])", re.IGNORECASE)


_SLANG_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (phrase, _phrase(phrase)) for phrase in sorted(SLANG_PHRASES, key=len, reverse=True)
)

_LIKE_PREFIX = r"(?:(?:cards?|spells?|creatures?|effects?|things?)\s+)?(?:like|similar to)\s+"
_LIKE_SUFFIX = r"\s+(?:alternatives?|replacements?|substitutes?)"

_CARDS_LIKE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (
        name,
        re.compile(
            rf"\b{_LIKE_PREFIX}{re.escape(name)}(?![\w-])"
            rf"|(?<![\w-]){re.escape(name)}{_LIKE_SUFFIX}\b",
            re.IGNORECASE,
        ),
    )
    for name in sorted(CARDS_LIKE, key=len, reverse=True)
)

_UNKNOWN_LIKE = re.compile(
    rf"\b{_LIKE_PREFIX}(?P<name>[a-z][\w' ,-]*?)(?=\s+(?:in|for|that|with|under|from)\b|$)",
    re.IGNORECASE,
)

# "sacrifice a creature" is a verb phrase, not the sacrifice archetype
_SACRIFICE_VERB = re.compile(
    r"\bsacrifices?\s+(?:an?\s+)?(?:creature|land|artifact|enchantment|permanent)",
    re.IGNORECASE,
)
_GRAVEYARD_VERB = re.compile(r"\b(?:return|bring\s+back|reanimate|revive|from)\b", re.IGNORECASE)

_ARCHETYPE_GUARDS = r"(?<!\bto )(?<!\bcan )(?<!\bthat )(?<!\bwhich )(?<!\byou )"
_ARCHETYPE_LOOKAHEAD = r"(?!\s+(?:a|an|the|your|target|lands?|creatures?|artifacts?)\b)"

_ARCHETYPE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (
        name,
        re.compile(
            rf"{_ARCHETYPE_GUARDS}\b{re.escape(name)}\b{_ARCHETYPE_LOOKAHEAD}",
            re.IGNORECASE,
        ),
    )
    for name in ARCHETYPES
)

_TRIBAL_PAYOFF = re.compile(
    r"\b(?P<tribe>[a-z]+)\s+(?:tribal|typal)\s+(?:payoffs?|synerg(?:y|ies)|lords?|rewards?)\b",
    re.IGNORECASE,
)

_KEYWORD_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (
        fragment,
        re.compile(
            rf"\b(?:(?:with|has|have|having)\s+)?{re.escape(name)}\b",
            re.IGNORECASE,
        ),
    )
    for name, fragment in (*KEYWORD_ABILITIES.items(), *SPECIAL_KEYWORDS.items())
)


def _singular(word: str) -> str:
    if word.endswith("ves"):
        return word[:-3] + "f"
    if word.endswith("ies"):
        return word[:-3] + "y"
    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


def _consume(text: str, pattern: re.Pattern[str]) -> str:
    return _WHITESPACE.sub(" ", pattern.sub(" ", text)).strip()


# =============================================================================
# ENGINE
# =============================================================================


class SemanticMappingEngine:
    """
    Priority-ordered resolver over the mapping tables.

    ``known_tags`` is the tag registry used when rendering tag-first
    matches; it defaults to the grammar's known oracle tags.
    """

    def __init__(self, known_tags: frozenset[str] = KNOWN_OTAGS) -> None:
        self.known_tags = known_tags

    def resolve(self, text: str) -> MappingResolution:
        """Resolve every concept in ``text``; return matches and leftover text."""
        remaining = _WHITESPACE.sub(" ", text).strip()
        matches: list[ConceptMatch] = []
        warnings: list[str] = []

        # Card names requested through "like X" are set aside first so the
        # earlier stages cannot claim words inside them.
        remaining, cards_like = self._extract_cards_like(remaining, warnings)

        remaining = self._resolve_slang(remaining, matches)
        remaining = self._resolve_tag_first(remaining, matches)
        remaining = self._resolve_archetypes(remaining, matches)
        matches.extend(cards_like)
        remaining = self._resolve_keywords(remaining, matches)

        return MappingResolution(
            matches=tuple(matches),
            remaining=remaining,
            warnings=tuple(warnings),
        )

    def render(self, resolution: MappingResolution) -> RenderedConcepts:
        """
        Turn matches into grammar fragments.

        A tag-first match renders as ``otag:<tag>`` when the tag is known,
        as its fallback otherwise. A match with an unknown tag and no
        fallback is still rendered as a tag; the grammar validator drops it.
        """
        fragments: list[str] = []
        warnings = list(resolution.warnings)

        for match in resolution.matches:
            if match.tag is None:
                fragment = match.fragment or ""
            elif match.tag and match.tag in self.known_tags:
                fragment = f"otag:{match.tag}"
            elif match.fallback:
                fragment = match.fallback
                if match.tag:
                    warnings.append(
                        f"Oracle tag unavailable for {match.tag}; using oracle text fallback"
                    )
                    logger.debug(
                        "TAG_FALLBACK_USED",
                        extra={"tag": match.tag, "matched": match.matched},
                    )
            else:
                fragment = f"otag:{match.tag}"

            if fragment and fragment not in fragments:
                fragments.append(fragment)

        tags: list[str] = []
        for fragment in fragments:
            for tag in _OTAG_FRAGMENT.findall(fragment):
                if tag not in tags:
                    tags.append(tag)

        return RenderedConcepts(
            fragments=tuple(fragments),
            tags=tuple(tags),
            warnings=tuple(warnings),
        )

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def _extract_cards_like(
        self, text: str, warnings: list[str]
    ) -> tuple[str, list[ConceptMatch]]:
        found: list[ConceptMatch] = []
        for name, pattern in _CARDS_LIKE_PATTERNS:
            match = pattern.search(text)
            if match is None:
                continue
            found.append(
                ConceptMatch(
                    table=MappingTable.CARDS_LIKE,
                    matched=match.group(0),
                    fragment=CARDS_LIKE[name],
                )
            )
            text = _consume(text, pattern)

        unknown = _UNKNOWN_LIKE.search(text)
        if unknown is not None:
            warnings.append(f'No functional mapping for "{unknown.group("name").strip()}"')
        return text, found

    def _resolve_slang(self, text: str, matches: list[ConceptMatch]) -> str:
        for phrase, pattern in _SLANG_PATTERNS:
            if pattern.search(text):
                matches.append(
                    ConceptMatch(
                        table=MappingTable.SLANG,
                        matched=phrase,
                        fragment=SLANG_PHRASES[phrase],
                    )
                )
                text = _consume(text, pattern)
        return text

    def _resolve_tag_first(self, text: str, matches: list[ConceptMatch]) -> str:
        for entry in TAG_FIRST_PATTERNS:
            found = entry.pattern.search(text)
            if found is None:
                continue
            matches.append(
                ConceptMatch(
                    table=MappingTable.TAG_FIRST,
                    matched=found.group(0),
                    tag=entry.tag,
                    fallback=entry.fallback,
                )
            )
            text = _consume(text, entry.pattern)

        for found in list(ART_SUBJECT_PATTERN.finditer(text)):
            subject = found.group("subject") or found.group("shown")
            matches.append(
                ConceptMatch(
                    table=MappingTable.ART,
                    matched=found.group(0),
                    fragment=f"atag:{art_subject(subject)}",
                )
            )
        return _consume(text, ART_SUBJECT_PATTERN)

    def _resolve_archetypes(self, text: str, matches: list[ConceptMatch]) -> str:
        payoff = _TRIBAL_PAYOFF.search(text)
        if payoff is not None:
            tribe = _singular(payoff.group("tribe").lower())
            matches.append(
                ConceptMatch(
                    table=MappingTable.ARCHETYPE,
                    matched=payoff.group(0),
                    fragment=f'(o:"{tribe}" o:"you control" or o:"{tribe}" o:"+1/+1")',
                )
            )
            text = _consume(text, _TRIBAL_PAYOFF)

        skip_sacrifice = _SACRIFICE_VERB.search(text) is not None
        skip_graveyard = _GRAVEYARD_VERB.search(text) is not None and "graveyard" in text.lower()

        for name, pattern in _ARCHETYPE_PATTERNS:
            if name == "sacrifice" and skip_sacrifice:
                continue
            if name == "graveyard" and skip_graveyard:
                continue
            found = pattern.search(text)
            if found is None:
                continue
            matches.append(
                ConceptMatch(
                    table=MappingTable.ARCHETYPE,
                    matched=found.group(0),
                    fragment=ARCHETYPES[name],
                )
            )
            text = _consume(text, pattern)
        return text

    def _resolve_keywords(self, text: str, matches: list[ConceptMatch]) -> str:
        for fragment, pattern in _KEYWORD_PATTERNS:
            found = pattern.search(text)
            if found is None:
                continue
            matches.append(
                ConceptMatch(
                    table=MappingTable.KEYWORD,
                    matched=found.group(0),
                    fragment=fragment,
                )
            )
            text = _consume(text, pattern)
        return text


default_engine = SemanticMappingEngine()
