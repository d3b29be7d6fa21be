"""
Structured filters rendered as grammar fragments.

Two filter sources are merged into queries here:
- FilterHints: the UI's color/type/mana-value/sort controls, merged on the
  edit-and-rerun path
- TranslationFilters: format/identity/mana-value limits sent with a
  translation request, applied by the server after translation
"""

import re

from spellseeker.models.query import MANA_VALUE_SLIDER_MAX, FilterHints
from spellseeker.models.translation import TranslationFilters

_COLOR_CONSTRAINT = re.compile(r"(?:^|[\s(-])(?:c|color)[:=<>!]", re.IGNORECASE)
_IDENTITY_CONSTRAINT = re.compile(r"(?:^|[\s(-])(?:id|identity|ci)[:=<>!]", re.IGNORECASE)
_MANA_VALUE_CONSTRAINT = re.compile(r"(?:^|[\s(-])(?:mv|cmc|manavalue)[:=<>!]", re.IGNORECASE)
_FORMAT_CONSTRAINT = re.compile(r"(?:^|[\s(-])(?:f|format|legal)[:=]", re.IGNORECASE)

_COLOR_CODES = frozenset("wubrgc")


def _any_of(fragments: list[str]) -> str:
    if len(fragments) == 1:
        return fragments[0]
    return f"({' or '.join(fragments)})"


def build_filter_query(hints: FilterHints | None) -> str:
    """
    Render UI filter state as a grammar fragment.

    Colors and types are each OR-ed together; a mana-value bound at the
    slider maximum is treated as unbounded.

    Example:
        FilterHints(colors=("r", "g"), types=("creature",), mana_value_range=(2, 5))
        -> "(c:r or c:g) t:creature mv>=2 mv<=5"
    """
    if hints is None:
        return ""

    parts: list[str] = []

    colors = [color.lower() for color in hints.colors if color.lower() in _COLOR_CODES]
    if colors:
        parts.append(_any_of(["c=c" if color == "c" else f"c:{color}" for color in colors]))

    if hints.types:
        parts.append(_any_of([f"t:{card_type.lower()}" for card_type in hints.types]))

    low, high = hints.mana_value_range
    if low > 0:
        parts.append(f"mv>={low}")
    if high < MANA_VALUE_SLIDER_MAX:
        parts.append(f"mv<={high}")

    if hints.sort_by is not None:
        parts.append(f"order:{hints.sort_by.value}")
        parts.append(f"dir:{'desc' if hints.sort_descending else 'asc'}")

    return " ".join(parts)


def merge_query_with_filters(query: str, hints: FilterHints | None) -> str:
    """
    Append UI filter fragments to a query without duplicating constraints.

    A fragment is skipped when the query already contains it, or when it is
    a color or mana-value bound and the query already sets one.
    """
    filter_query = build_filter_query(hints)
    if not filter_query:
        return query.strip()
    if not query.strip():
        return filter_query

    lowered = query.lower()
    additions: list[str] = []
    for fragment in _split_fragments(filter_query):
        fragment_lower = fragment.lower()
        if fragment_lower in lowered:
            continue
        if fragment_lower.lstrip("(").startswith("c") and _COLOR_CONSTRAINT.search(query):
            continue
        if fragment_lower.startswith("mv") and _MANA_VALUE_CONSTRAINT.search(query):
            continue
        additions.append(fragment)

    return " ".join([query.strip(), *additions]).strip()


def _split_fragments(filter_query: str) -> list[str]:
    """Split a rendered filter query on top-level spaces only."""
    fragments: list[str] = []
    depth = 0
    current: list[str] = []
    for char in filter_query:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == " " and depth == 0:
            fragments.append("".join(current))
            current = []
            continue
        current.append(char)
    if current:
        fragments.append("".join(current))
    return fragments


def apply_translation_filters(query: str, filters: TranslationFilters | None) -> str:
    """
    Add request-level format, identity and mana-value limits to a query.

    Each limit is added only when the query does not already constrain
    that dimension.
    """
    if filters is None or filters.is_empty():
        return query

    additions: list[str] = []
    if filters.format and not _FORMAT_CONSTRAINT.search(query):
        additions.append(f"f:{filters.format.lower()}")

    if filters.color_identity and not _IDENTITY_CONSTRAINT.search(query):
        identity = "".join(color.lower() for color in filters.color_identity)
        additions.append(f"id<={identity}")

    if filters.max_mana_value is not None and not _MANA_VALUE_CONSTRAINT.search(query):
        additions.append(f"mv<={filters.max_mana_value}")

    return " ".join([query.strip(), *additions]).strip()
