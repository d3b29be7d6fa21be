"""
Consistency check between the mapping tables and the tag registry.

The mapping tables name oracle tags directly. When the registry drifts,
the grammar validator deletes unknown tags at query time; this check
finds the drift up front instead.

Rules:
- Literal fragments (slang, archetypes, cards-like, whole-query phrases and
  the offline fallback tables) may only reference known tags
- A tag-first entry whose tag is unknown must carry an oracle fallback
"""

import logging
import re
from dataclasses import dataclass

from spellseeker.compiler.fallback import FALLBACK_SLANG, PRETRANSLATED
from spellseeker.compiler.mappings import (
    ARCHETYPES,
    CARDS_LIKE,
    PHRASE_TRANSLATIONS,
    SLANG_PHRASES,
    TAG_FIRST_PATTERNS,
)
from spellseeker.grammar.vocabulary import KNOWN_OTAGS

logger = logging.getLogger(__name__)

_OTAG_LITERAL = re.compile(r"\botag:([a-z0-9-]+)")


@dataclass(frozen=True, slots=True)
class MappingTagDrift:
    """One mapping entry that references a tag the registry does not know."""

    table: str
    entry: str
    tag: str


def check_mapping_tags(known_tags: frozenset[str] = KNOWN_OTAGS) -> list[MappingTagDrift]:
    """
    Find mapping entries that would rely on an unknown oracle tag.

    Returns:
        Every drifted entry; empty when the tables and registry agree.
    """
    drift: list[MappingTagDrift] = []

    literal_tables = {
        "slang": SLANG_PHRASES,
        "archetypes": ARCHETYPES,
        "cards_like": CARDS_LIKE,
        "phrases": {phrase: query for phrase, (query, _) in PHRASE_TRANSLATIONS.items()},
        "fallback_slang": FALLBACK_SLANG,
        "pretranslated": PRETRANSLATED,
    }
    for table, entries in literal_tables.items():
        for entry, fragment in entries.items():
            for tag in _OTAG_LITERAL.findall(fragment):
                if tag not in known_tags:
                    drift.append(MappingTagDrift(table=table, entry=entry, tag=tag))

    for pattern in TAG_FIRST_PATTERNS:
        if pattern.tag and pattern.tag not in known_tags and not pattern.fallback:
            drift.append(
                MappingTagDrift(table="tag_first", entry=pattern.pattern.pattern, tag=pattern.tag)
            )
        if pattern.fallback:
            for tag in _OTAG_LITERAL.findall(pattern.fallback):
                if tag not in known_tags:
                    drift.append(
                        MappingTagDrift(
                            table="tag_first",
                            entry=pattern.pattern.pattern,
                            tag=tag,
                        )
                    )

    for item in drift:
        logger.warning(
            "MAPPING_TAG_DRIFT",
            extra={"table": item.table, "entry": item.entry, "tag": item.tag},
        )
    return drift
