"""Tests for the grammar validator."""

import pytest

from spellseeker.config import MAX_QUERY_LENGTH
from spellseeker.grammar.validator import (
    ISSUE_DANGLING_OR,
    ISSUE_EMPTY_GROUP,
    ISSUE_MISSING_QUOTE,
    ISSUE_MISSING_SLASH,
    ISSUE_OR_GROUPS,
    ISSUE_PT_MATH,
    ISSUE_TAG_ALIAS,
    ISSUE_TRUNCATED,
    ISSUE_UNBALANCED_PARENS,
    ISSUE_UNSAFE_CHARACTERS,
    ISSUE_YEAR_AS_SET,
    tokenize,
    validate_query,
)


class TestTokenize:
    def test_splits_on_spaces(self) -> None:
        """Plain tokens split on whitespace."""
        assert tokenize("t:creature c:r  mv<=3") == ["t:creature", "c:r", "mv<=3"]

    def test_quoted_value_is_one_token(self) -> None:
        """Spaces inside double quotes do not split."""
        assert tokenize('o:"draw a card" t:instant') == ['o:"draw a card"', "t:instant"]

    def test_regex_value_is_one_token(self) -> None:
        """Spaces inside a /regex/ value do not split."""
        assert tokenize("o:/draw a card/ t:instant") == ["o:/draw a card/", "t:instant"]

    def test_group_is_one_token(self) -> None:
        """A parenthesized group stays together."""
        assert tokenize("c:r (t:creature OR t:artifact)") == [
            "c:r",
            "(t:creature OR t:artifact)",
        ]


class TestValidQueries:
    @pytest.mark.parametrize(
        "query",
        [
            "t:creature c:r",
            'o:"draw a card" t:instant',
            "-(t:creature OR t:land)",
            "otag:removal f:commander usd<5",
            "id<=wu t:creature mv<=3",
        ],
    )
    def test_well_formed_query_unchanged(self, query: str) -> None:
        """Well-formed queries pass through untouched."""
        result = validate_query(query)

        assert result.valid is True
        assert result.sanitized == query
        assert result.issues == ()

    def test_whitespace_collapsed_without_issue(self) -> None:
        """Extra whitespace is normalized silently."""
        result = validate_query("  t:creature    c:r ")

        assert result.valid is True
        assert result.sanitized == "t:creature c:r"


class TestOrGroups:
    def test_top_level_or_run_grouped(self) -> None:
        """A bare OR run becomes exactly one parenthesized group."""
        result = validate_query("t:creature OR t:artifact OR t:enchantment")

        assert result.sanitized == "(t:creature OR t:artifact OR t:enchantment)"
        assert ISSUE_OR_GROUPS in result.issues
        assert result.valid is False

    def test_grouping_ignores_spacing(self) -> None:
        """Irregular spacing yields the same group."""
        result = validate_query("c:r   t:creature OR    t:artifact")

        assert result.sanitized == "c:r (t:creature OR t:artifact)"
        assert result.sanitized.count("(") == 1

    def test_dangling_or_removed(self) -> None:
        """Leading and trailing OR connectives are dropped."""
        result = validate_query("OR t:creature OR")

        assert result.sanitized == "t:creature"
        assert ISSUE_DANGLING_OR in result.issues


class TestVocabulary:
    def test_set_year_rewritten(self) -> None:
        """A four-digit year used as a set code becomes a year filter."""
        result = validate_query("e:2024")

        assert result.sanitized == "year=2024"
        assert ISSUE_YEAR_AS_SET in result.issues

    def test_unknown_key_removed(self) -> None:
        """Unknown keys are dropped and reported by name."""
        result = validate_query("foo:bar t:creature")

        assert result.sanitized == "t:creature"
        assert "Unknown search key(s): foo" in result.issues

    @pytest.mark.parametrize(
        ("query", "key"),
        [("foo_bar:baz t:elf", "foo_bar"), ("foo1:bar t:elf", "foo1"), ("x2>=3 t:elf", "x2")],
    )
    def test_keys_with_digits_or_underscores_checked(self, query: str, key: str) -> None:
        """Keys containing digits or underscores are checked like any other key."""
        result = validate_query(query)

        assert result.valid is False
        assert result.sanitized == "t:elf"
        assert f"Unknown search key(s): {key}" in result.issues

    def test_unknown_tag_removed(self) -> None:
        """Unknown oracle tags are dropped and reported."""
        result = validate_query("otag:not-a-real-tag t:creature")

        assert result.sanitized == "t:creature"
        assert "Unknown oracle tag(s): not-a-real-tag" in result.issues

    def test_tag_alias_rewritten(self) -> None:
        """function: is rewritten to otag:."""
        result = validate_query("function:removal")

        assert result.sanitized == "otag:removal"
        assert ISSUE_TAG_ALIAS in result.issues

    def test_unknown_tag_inside_group_leaves_rest(self) -> None:
        """Removing a group member keeps the remaining operand."""
        result = validate_query("(otag:removal OR otag:not-a-real-tag)")

        assert result.sanitized == "otag:removal"


class TestSyntaxRepairs:
    def test_missing_quote_closed(self) -> None:
        """An unterminated quote is closed."""
        result = validate_query('o:"draw a card')

        assert result.sanitized == 'o:"draw a card"'
        assert ISSUE_MISSING_QUOTE in result.issues

    def test_missing_regex_slash_closed(self) -> None:
        """An unterminated /regex/ value is closed before OR groups are folded."""
        result = validate_query("t:elf OR o:/draw")

        assert result.sanitized == "(t:elf OR o:/draw/)"
        assert ISSUE_MISSING_SLASH in result.issues

    def test_quote_inside_regex_not_counted(self) -> None:
        """A double quote inside a closed regex needs no partner."""
        result = validate_query('o:/say "hi/ t:elf')

        assert result.sanitized == 'o:/say "hi/ t:elf'
        assert result.issues == ()

    def test_unbalanced_parentheses_removed(self) -> None:
        """Parentheses that do not pair up are stripped."""
        result = validate_query("(t:creature c:r")

        assert result.sanitized == "t:creature c:r"
        assert ISSUE_UNBALANCED_PARENS in result.issues

    def test_empty_group_removed(self) -> None:
        """An empty group is dropped."""
        result = validate_query("t:creature ()")

        assert result.sanitized == "t:creature"
        assert ISSUE_EMPTY_GROUP in result.issues

    def test_power_toughness_math_removed(self) -> None:
        """pow+tou comparisons are not supported and are removed."""
        result = validate_query("t:creature pow+tou>=10")

        assert result.sanitized == "t:creature"
        assert ISSUE_PT_MATH in result.issues

    def test_unsafe_characters_removed(self) -> None:
        """Characters outside the grammar are stripped."""
        result = validate_query("t:creature @#")

        assert result.sanitized == "t:creature"
        assert ISSUE_UNSAFE_CHARACTERS in result.issues

    def test_long_query_truncated_at_token_boundary(self) -> None:
        """Over-long queries lose trailing tokens, never partial ones."""
        result = validate_query(" ".join(["o:dragon"] * 60))

        assert len(result.sanitized) <= MAX_QUERY_LENGTH
        assert result.sanitized.split() == ["o:dragon"] * 44
        assert ISSUE_TRUNCATED in result.issues


class TestIdempotence:
    @pytest.mark.parametrize(
        "query",
        [
            "t:creature OR t:artifact OR t:enchantment",
            "e:2024 foo:bar",
            'o:"draw a card',
            "(t:creature c:r",
            "OR otag:not-a-real-tag t:creature OR",
            "function:removal c:g OR c:u",
            "t:elf OR o:/draw",
            "o:/draw a card",
            "(t:elf OR o:/dr)aw",
            "o:/draw\\",
        ],
    )
    def test_revalidating_sanitized_is_stable(self, query: str) -> None:
        """Sanitized output validates cleanly and unchanged."""
        first = validate_query(query)
        second = validate_query(first.sanitized)

        assert second.sanitized == first.sanitized
        assert second.issues == ()
