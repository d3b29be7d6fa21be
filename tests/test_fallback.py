"""Tests for the local fallback compiler."""

from spellseeker.compiler.fallback import PRETRANSLATED, compile_fallback


class TestCompileFallback:
    def test_cheap_red_creatures(self) -> None:
        """Cost, color and type words all resolve with nothing left over."""
        compiled = compile_fallback("cheap red creatures")

        assert compiled == "c:r t:creature mv<=3"
        assert 'o:"' not in compiled

    def test_unmatched_words_become_oracle_text(self) -> None:
        """Words no rule claims are searched as oracle text, minus stop words."""
        compiled = compile_fallback("something with no keyword matches")

        assert compiled == 'o:"something no keyword matches"'

    def test_pretranslated_input_is_case_insensitive(self) -> None:
        """Exact inputs use their hand-checked translation."""
        assert compile_fallback("Mono Red Creatures") == PRETRANSLATED["mono red creatures"]

    def test_empty_input(self) -> None:
        """Blank input compiles to nothing."""
        assert compile_fallback("   ") == ""

    def test_guild_and_slang(self) -> None:
        """Slang resolves before guild names."""
        assert compile_fallback("gruul board wipes") == "otag:board-wipe id<=rg"

    def test_format_word(self) -> None:
        """Format names become legality filters."""
        assert compile_fallback("commander removal") == "otag:removal f:commander"

    def test_keyword_and_leftover(self) -> None:
        """Keywords use kw:, the rest becomes oracle text."""
        assert compile_fallback("flying dragons") == 'kw:flying o:"dragons"'

    def test_longest_slang_wins_without_duplicates(self) -> None:
        """Plural and singular slang yield one fragment."""
        assert compile_fallback("counterspell counterspells") == "otag:counter"

    def test_quotes_stripped_from_oracle_text(self) -> None:
        """User quotes never break the oracle-text fragment."""
        assert compile_fallback('cards that say "scry"') == 'o:"say scry"'

    def test_unresolvable_short_input_returned_unchanged(self) -> None:
        """Input with nothing usable is passed through."""
        assert compile_fallback("  xy ") == "xy"
