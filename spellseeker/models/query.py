"""
Grammar-side value types.

ValidationResult is what the grammar validator returns. FilterHints is
the structured filter state a user sets next to the search box (color
toggles, type toggles, mana-value slider, sort order).
"""

from dataclasses import dataclass
from enum import Enum

# Mana-value slider maximum; a bound at this value means "no upper bound".
MANA_VALUE_SLIDER_MAX = 16


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """
    Outcome of validating one grammar query.

    ``sanitized`` is always executable, even when ``valid`` is False.
    """

    valid: bool
    sanitized: str
    issues: tuple[str, ...] = ()


class SortField(str, Enum):
    """Result orderings the search backend understands."""

    NAME = "name"
    MANA_VALUE = "cmc"
    PRICE = "usd"
    RARITY = "rarity"
    RELEASED = "released"
    EDHREC = "edhrec"
    POWER = "power"


@dataclass(frozen=True, slots=True)
class FilterHints:
    """Structured filter state merged into a query on the re-run path."""

    colors: tuple[str, ...] = ()
    types: tuple[str, ...] = ()
    mana_value_range: tuple[int, int] = (0, MANA_VALUE_SLIDER_MAX)
    sort_by: SortField | None = None
    sort_descending: bool = False

    def is_empty(self) -> bool:
        return (
            not self.colors
            and not self.types
            and self.mana_value_range == (0, MANA_VALUE_SLIDER_MAX)
            and self.sort_by is None
        )
