from spellseeker.grammar.corrections import (
    CorrectedQuery,
    apply_auto_corrections,
    detect_quality_flags,
    remove_duplicate_parameters,
    sanitize_input_query,
)
from spellseeker.grammar.filters import (
    apply_translation_filters,
    build_filter_query,
    merge_query_with_filters,
)
from spellseeker.grammar.validator import tokenize, validate_query
from spellseeker.grammar.vocabulary import KNOWN_OTAGS, OTAG_ALIASES, VALID_SEARCH_KEYS

__all__ = [
    "KNOWN_OTAGS",
    "OTAG_ALIASES",
    "VALID_SEARCH_KEYS",
    "CorrectedQuery",
    "apply_auto_corrections",
    "apply_translation_filters",
    "build_filter_query",
    "detect_quality_flags",
    "merge_query_with_filters",
    "remove_duplicate_parameters",
    "sanitize_input_query",
    "tokenize",
    "validate_query",
]
