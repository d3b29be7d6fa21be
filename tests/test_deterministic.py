"""Tests for slot extraction and the deterministic compiler."""

from datetime import date

import pytest

from spellseeker.compiler.deterministic import (
    COMPLETE_CONFIDENCE,
    PARTIAL_CONFIDENCE,
    compile_deterministic,
    normalize_input,
)
from spellseeker.compiler.slots import (
    extract_colors,
    extract_numeric,
    extract_price,
    extract_rarity,
    extract_types,
    extract_year,
    normalize_numbers,
)


class TestPrice:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("dragons under $5", ("usd<5", "dragons")),
            ("lands under 10 dollars", ("usd<10", "lands")),
            ("budget removal", ("usd<5", "removal")),
            ("pricey dragons", ("usd>20", "dragons")),
            ("dragons", (None, "dragons")),
        ],
    )
    def test_extract_price(self, text: str, expected: tuple[str | None, str]) -> None:
        """Price phrases become usd bounds."""
        assert extract_price(text) == expected


class TestNumbers:
    def test_number_words_and_comparators(self) -> None:
        """Spoken numbers and comparisons become operators."""
        assert normalize_numbers("three or less") == "<=3"

    def test_power_comparison(self) -> None:
        """A comparison after the stat name is attached to it."""
        assert extract_numeric("power >=4", "pow") == ("pow>=4", "")

    def test_bare_cost(self) -> None:
        """"costs 2" is an exact mana value."""
        assert extract_numeric("costs 2", "mv") == ("mv=2", "")


class TestYearAndRarity:
    def test_before_year(self) -> None:
        """"before YYYY" is an upper year bound."""
        assert extract_year("cards before 2010") == ("year<2010", "cards")

    def test_recent_cards_relative_to_today(self) -> None:
        """"recent cards" covers the last two years."""
        assert extract_year("recent cards", today=date(2026, 10, 18)) == ("year>=2024", "")

    def test_rarity(self) -> None:
        """Rarity words map to r:."""
        assert extract_rarity("mythic rares") == ("r:mythic", "")


class TestColors:
    def test_two_colors_and(self) -> None:
        """"X and Y" requires both colors."""
        assert extract_colors("white and blue") == (["w", "u"], ["c:w", "c:u"], "")

    def test_exact_single_color(self) -> None:
        """"exactly red" is an exact color match."""
        codes, fragments, _ = extract_colors("exactly red")

        assert codes == ["r"]
        assert fragments == ["c=r"]

    def test_colorless(self) -> None:
        """Colorless is its own constraint."""
        assert extract_colors("colorless") == (["c"], ["c=c"], "")

    def test_guild_name_is_identity(self) -> None:
        """Guild names constrain color identity."""
        assert extract_colors("azorius") == (["w", "u"], ["id<=wu"], "")


class TestTypes:
    def test_spells_means_instant_or_sorcery(self) -> None:
        """"spells" becomes one instant-or-sorcery group."""
        types, fragments, excluded, remaining = extract_types("spells")

        assert fragments == ["(t:instant or t:sorcery)"]
        assert excluded == []
        assert remaining == ""


class TestNormalizeInput:
    def test_nicknames_and_quotes(self) -> None:
        """Nicknames expand and smart quotes straighten."""
        assert normalize_input("Show me “STP”") == 'show me "swords to plowshares"'

    def test_shorthand(self) -> None:
        """Spoken shorthand expands."""
        assert normalize_input("cmc 2 in gy") == "mana value 2 in graveyard"


class TestCompileDeterministic:
    def test_tag_concept_is_complete(self) -> None:
        """A single tag concept compiles completely."""
        translation = compile_deterministic("board wipes")

        assert translation.query == "otag:board-wipe"
        assert translation.complete is True
        assert translation.confidence == COMPLETE_CONFIDENCE
        assert translation.intent.tags == ["board-wipe"]

    def test_mono_color_is_exact_identity(self) -> None:
        """Mono colors pin the color identity."""
        translation = compile_deterministic("mono red creatures")

        assert translation.query == "id=r t:creature"
        assert translation.intent.colors == ["r"]
        assert translation.intent.types == ["creature"]

    def test_cheap_is_a_price_bound(self) -> None:
        """On the server, "cheap" means inexpensive to buy."""
        assert compile_deterministic("cheap red creatures").query == "c:r t:creature usd<5"

    def test_power_comparison(self) -> None:
        """Numeric stats follow the type."""
        assert compile_deterministic("creatures with power 4 or more").query == (
            "t:creature pow>=4"
        )

    def test_shorthand_mana_value(self) -> None:
        """cmc shorthand resolves to a mana-value bound."""
        assert compile_deterministic("creatures with cmc 2 or less").query == "t:creature mv<=2"

    def test_year_after_type(self) -> None:
        """Release years become year bounds."""
        assert compile_deterministic("dragons after 2020").query == "t:dragon year>2020"

    def test_commander_colors_use_identity(self) -> None:
        """Colors in a commander query constrain identity."""
        translation = compile_deterministic("red or green ramp for commander")

        assert translation.query == "id<=rg otag:ramp f:commander"
        assert translation.complete is True

    def test_negated_type(self) -> None:
        """"non-creature" excludes the type."""
        translation = compile_deterministic("non-creature artifacts")

        assert translation.query == "t:artifact -t:creature"
        assert translation.intent.excluded_types == ["creature"]

    def test_type_alternatives(self) -> None:
        """"X or Y" types form one group."""
        assert compile_deterministic("instants or sorceries").query == (
            "(t:instant or t:sorcery)"
        )

    def test_nickname_cards_like(self) -> None:
        """A nickname after "like" resolves to the card's equivalents."""
        translation = compile_deterministic("cards like bob")

        assert translation.query == 'o:"beginning of your upkeep" o:"draw" o:"life"'

    def test_unresolved_words_reported(self) -> None:
        """Words no table knows are left for the generative tier."""
        translation = compile_deterministic("creatures that explode dramatically")

        assert translation.query == "t:creature"
        assert translation.remaining == "explode dramatically"
        assert translation.complete is False
        assert translation.confidence == PARTIAL_CONFIDENCE
        assert translation.intent.remaining == "explode dramatically"
