from spellseeker.models.failure import (
    ErrorResponse,
    FailureKind,
    InvalidQueryError,
    KnownError,
    TranslatorUnavailableError,
)
from spellseeker.models.query import (
    MANA_VALUE_SLIDER_MAX,
    FilterHints,
    SortField,
    ValidationResult,
)
from spellseeker.models.translation import (
    Explanation,
    SearchContext,
    SearchIntent,
    TranslateResponse,
    TranslationFilters,
    TranslationRequest,
    TranslationResult,
    TranslationSource,
)

__all__ = [
    "MANA_VALUE_SLIDER_MAX",
    "ErrorResponse",
    "Explanation",
    "FailureKind",
    "FilterHints",
    "InvalidQueryError",
    "KnownError",
    "SearchContext",
    "SearchIntent",
    "SortField",
    "TranslateResponse",
    "TranslationFilters",
    "TranslationRequest",
    "TranslationResult",
    "TranslationSource",
    "TranslatorUnavailableError",
    "ValidationResult",
]
