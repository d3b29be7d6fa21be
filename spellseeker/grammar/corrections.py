"""
Input screening and output quality corrections.

sanitize_input_query() screens natural-language input before any
translation work is spent on it. detect_quality_flags() and
apply_auto_corrections() clean up known weak spots in generated grammar
queries before they reach the validator.
"""

import logging
import re
from dataclasses import dataclass

from spellseeker.config import MAX_INPUT_LENGTH, MAX_INPUT_PARAMETERS, MIN_INPUT_LENGTH
from spellseeker.grammar.validator import tokenize
from spellseeker.models.failure import InvalidQueryError

logger = logging.getLogger(__name__)

# =============================================================================
# INPUT SCREENING
# =============================================================================

_WHITESPACE = re.compile(r"\s+")
_REPEATED_EMPTY_OPERATORS = re.compile(r"(?:\b[toc]:\s*){3,}(?=\s|$)", re.IGNORECASE)
_OPERATOR_SPAM = re.compile(r"(?:[toc]:){3,}", re.IGNORECASE)
_PARAMETER = re.compile(r"\b[a-zA-Z]+[:=<>]")
_EMPTY_OPERATOR = re.compile(r"(?:^|\s)[toc]:(?=\s|$)", re.IGNORECASE)
_REPEATED_CHARACTER = re.compile(r"(.)\1{5,}")


def remove_duplicate_parameters(query: str) -> str:
    """
    Drop repeated search parameters, keeping the first occurrence.

    Only ``key<op>value`` tokens, negations and groups are de-duplicated;
    bare words and connectives are kept as written. Comparison is
    case-insensitive and quoted phrases stay intact.
    """
    seen: set[str] = set()
    kept: list[str] = []
    for token in tokenize(query):
        if _PARAMETER.match(token) or token.startswith(("(", "-")):
            normalized = token.lower()
            if normalized in seen:
                continue
            seen.add(normalized)
        kept.append(token)
    return " ".join(kept)


def sanitize_input_query(query: str) -> str:
    """
    Screen a natural-language query before translation.

    Args:
        query: Raw user input

    Returns:
        The trimmed, de-duplicated input

    Raises:
        InvalidQueryError: If the input is too short, too long, or spam-shaped
    """
    trimmed = _WHITESPACE.sub(" ", query).strip()

    if len(trimmed) < MIN_INPUT_LENGTH:
        raise InvalidQueryError(f"too short (minimum {MIN_INPUT_LENGTH} characters)")
    if len(trimmed) > MAX_INPUT_LENGTH:
        raise InvalidQueryError(f"too long (maximum {MAX_INPUT_LENGTH} characters)")
    if _REPEATED_EMPTY_OPERATORS.search(trimmed):
        raise InvalidQueryError("repeated empty operators")
    if _OPERATOR_SPAM.search(trimmed):
        raise InvalidQueryError("malformed operator syntax")
    if len(_PARAMETER.findall(trimmed)) > MAX_INPUT_PARAMETERS:
        raise InvalidQueryError(f"too many search parameters (maximum {MAX_INPUT_PARAMETERS})")
    if _REPEATED_CHARACTER.search(trimmed):
        raise InvalidQueryError("repeated character spam")

    sanitized = _EMPTY_OPERATOR.sub(" ", trimmed)
    sanitized = remove_duplicate_parameters(_WHITESPACE.sub(" ", sanitized).strip())

    word_characters = sum(1 for char in sanitized if char.isalnum())
    if len(sanitized) > 10 and word_characters < len(sanitized) * 0.5:
        raise InvalidQueryError("too many special characters")
    if not sanitized:
        raise InvalidQueryError("nothing left to search for")

    return sanitized


# =============================================================================
# OUTPUT QUALITY CORRECTIONS
# =============================================================================


@dataclass(frozen=True, slots=True)
class _Correction:
    flag: str
    pattern: re.Pattern[str]
    replacement: str
    message: str


_CORRECTIONS: tuple[_Correction, ...] = (
    _Correction(
        flag="tag_alias",
        pattern=re.compile(r"\b(?:function|oracletag):", re.IGNORECASE),
        replacement="otag:",
        message="Normalized tag syntax to otag: for consistency",
    ),
    _Correction(
        flag="unnecessary_game_filter",
        pattern=re.compile(r"(?:^|\s)game:paper(?=\s|$)", re.IGNORECASE),
        replacement=" ",
        message='Removed unnecessary "game:paper" filter',
    ),
    _Correction(
        flag="verbose_etb_syntax",
        pattern=re.compile(r'o:"enters the battlefield"', re.IGNORECASE),
        replacement='o:"enters"',
        message="Simplified ETB syntax for broader results",
    ),
    _Correction(
        flag="verbose_ltb_syntax",
        pattern=re.compile(r'o:"leaves the battlefield"', re.IGNORECASE),
        replacement='o:"leaves"',
        message="Simplified LTB syntax for broader results",
    ),
    _Correction(
        flag="verbose_dies_syntax",
        pattern=re.compile(r'o:"when this creature dies"', re.IGNORECASE),
        replacement='o:"dies"',
        message='Simplified "dies" syntax for broader results',
    ),
)

_LONG_ORACLE_TEXT = re.compile(r'o:"[^"]{50,}"')
_NESTED_GROUP = re.compile(r"\([^()]*\([^()]*\)")
_EMPTY_GROUP = re.compile(r"\(\s*\)")


def detect_quality_flags(query: str) -> list[str]:
    """Name the known weaknesses present in a generated grammar query."""
    flags = [c.flag for c in _CORRECTIONS if c.pattern.search(query)]
    if _LONG_ORACLE_TEXT.search(query):
        flags.append("overly_long_oracle_text")
    if len(_NESTED_GROUP.findall(query)) > 1:
        flags.append("complex_nested_logic")
    return flags


@dataclass(frozen=True, slots=True)
class CorrectedQuery:
    """A grammar query after automatic corrections."""

    query: str
    corrections: tuple[str, ...]


def apply_auto_corrections(query: str) -> CorrectedQuery:
    """
    Rewrite known weak patterns in a generated grammar query.

    Only the correctable flags are acted on; long oracle text and nested
    logic are reported by detect_quality_flags() but left untouched.
    """
    corrected = query
    corrections: list[str] = []

    flags = set(detect_quality_flags(query))
    for correction in _CORRECTIONS:
        if correction.flag not in flags:
            continue
        updated = correction.pattern.sub(correction.replacement, corrected)
        if updated != corrected:
            corrections.append(correction.message)
            corrected = updated

    corrected = _EMPTY_GROUP.sub("", corrected)
    corrected = _WHITESPACE.sub(" ", corrected).strip()

    deduplicated = remove_duplicate_parameters(corrected)
    if deduplicated != corrected:
        corrections.append("Removed duplicate search parameters")
        corrected = deduplicated

    if corrections:
        logger.info(
            "QUERY_AUTO_CORRECTED",
            extra={"corrections": corrections, "flags": sorted(flags)},
        )

    return CorrectedQuery(query=corrected, corrections=tuple(corrections))
