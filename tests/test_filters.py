"""Tests for structured filter rendering and merging."""

from spellseeker.grammar.filters import (
    apply_translation_filters,
    build_filter_query,
    merge_query_with_filters,
)
from spellseeker.models.query import FilterHints, SortField
from spellseeker.models.translation import TranslationFilters


class TestBuildFilterQuery:
    def test_no_hints_renders_nothing(self) -> None:
        """No filter state means no fragment."""
        assert build_filter_query(None) == ""
        assert build_filter_query(FilterHints()) == ""

    def test_colors_types_and_range(self) -> None:
        """Colors and types are OR-ed; the range becomes two bounds."""
        hints = FilterHints(colors=("r", "g"), types=("creature",), mana_value_range=(2, 5))

        assert build_filter_query(hints) == "(c:r or c:g) t:creature mv>=2 mv<=5"

    def test_colorless(self) -> None:
        """Colorless renders as an exact color match."""
        assert build_filter_query(FilterHints(colors=("c",))) == "c=c"

    def test_slider_maximum_is_unbounded(self) -> None:
        """An upper bound at the slider maximum adds no constraint."""
        assert build_filter_query(FilterHints(mana_value_range=(3, 16))) == "mv>=3"

    def test_sort_order(self) -> None:
        """Sorting renders order and direction."""
        hints = FilterHints(sort_by=SortField.PRICE, sort_descending=True)

        assert build_filter_query(hints) == "order:usd dir:desc"


class TestMergeQueryWithFilters:
    def test_appends_missing_fragments(self) -> None:
        """Filter fragments the query lacks are appended."""
        merged = merge_query_with_filters("otag:ramp", FilterHints(colors=("g",)))

        assert merged == "otag:ramp c:g"

    def test_skips_constraints_already_set(self) -> None:
        """Existing color constraints and identical fragments are not duplicated."""
        hints = FilterHints(colors=("g",), types=("creature",))

        assert merge_query_with_filters("c:r t:creature", hints) == "c:r t:creature"

    def test_skips_mana_value_when_query_has_one(self) -> None:
        """A query's own mana-value bound wins."""
        hints = FilterHints(mana_value_range=(0, 4))

        assert merge_query_with_filters("otag:ramp mv<=2", hints) == "otag:ramp mv<=2"

    def test_empty_query_takes_filters(self) -> None:
        """An empty query becomes the filter fragment."""
        assert merge_query_with_filters("", FilterHints(colors=("r",))) == "c:r"

    def test_no_hints_returns_query(self) -> None:
        """Without hints the query is only trimmed."""
        assert merge_query_with_filters(" t:creature ", None) == "t:creature"


class TestApplyTranslationFilters:
    def test_all_filters_applied(self) -> None:
        """Format, identity and mana value are appended."""
        filters = TranslationFilters(
            format="Commander", color_identity=["G", "U"], max_mana_value=3
        )

        assert apply_translation_filters("otag:ramp", filters) == (
            "otag:ramp f:commander id<=gu mv<=3"
        )

    def test_existing_dimension_not_overridden(self) -> None:
        """A query's own format is kept."""
        filters = TranslationFilters(format="commander")

        assert apply_translation_filters("f:modern otag:ramp", filters) == "f:modern otag:ramp"

    def test_no_filters(self) -> None:
        """Missing or empty filters leave the query alone."""
        assert apply_translation_filters("otag:ramp", None) == "otag:ramp"
        assert apply_translation_filters("otag:ramp", TranslationFilters()) == "otag:ramp"
