"""Static mapping tables for the natural-language compilers."""

from spellseeker.compiler.mappings.archetypes import ARCHETYPES
from spellseeker.compiler.mappings.cards_like import CARDS_LIKE
from spellseeker.compiler.mappings.keywords import KEYWORD_ABILITIES, SPECIAL_KEYWORDS
from spellseeker.compiler.mappings.phrases import PHRASE_TRANSLATIONS
from spellseeker.compiler.mappings.shared import (
    CARD_NICKNAMES,
    CARD_TYPES,
    COLOR_CODES,
    FORMATS,
    MULTICOLOR_NAMES,
    STOP_WORDS,
    TYPE_PLURALS,
    WORD_NUMBERS,
    plural,
)
from spellseeker.compiler.mappings.slang import SLANG_PHRASES
from spellseeker.compiler.mappings.tag_patterns import (
    ART_SUBJECT_PATTERN,
    ART_TAG_SUBJECTS,
    TAG_FIRST_PATTERNS,
    TagPattern,
    art_subject,
)

__all__ = [
    "ARCHETYPES",
    "ART_SUBJECT_PATTERN",
    "ART_TAG_SUBJECTS",
    "CARDS_LIKE",
    "CARD_NICKNAMES",
    "CARD_TYPES",
    "COLOR_CODES",
    "FORMATS",
    "KEYWORD_ABILITIES",
    "MULTICOLOR_NAMES",
    "PHRASE_TRANSLATIONS",
    "SLANG_PHRASES",
    "SPECIAL_KEYWORDS",
    "STOP_WORDS",
    "TAG_FIRST_PATTERNS",
    "TYPE_PLURALS",
    "TagPattern",
    "WORD_NUMBERS",
    "art_subject",
    "plural",
]
