"""Tests for the mapping-table / tag-registry consistency check."""

from spellseeker.compiler.consistency import MappingTagDrift, check_mapping_tags


class TestCheckMappingTags:
    def test_tables_agree_with_registry(self) -> None:
        """Every tag the tables name is registered or has a fallback."""
        assert check_mapping_tags() == []

    def test_literal_fragment_drift_reported(self) -> None:
        """A literal otag: the registry lacks is reported with its entry."""
        drift = check_mapping_tags(known_tags=frozenset({"ramp"}))

        assert MappingTagDrift(table="cards_like", entry="wrath of god", tag="board-wipe") in drift
        assert all(item.tag != "ramp" for item in drift)

    def test_tag_first_entries_with_fallback_not_reported(self) -> None:
        """Tag-first entries degrade to oracle text, so they never drift."""
        drift = check_mapping_tags(known_tags=frozenset())

        assert drift
        assert all(item.table != "tag_first" for item in drift)

    def test_phrase_and_fallback_tables_checked(self) -> None:
        """Whole-query phrases and the offline fallback tables are scanned too."""
        drift = check_mapping_tags(known_tags=frozenset({"ramp"}))

        assert MappingTagDrift(table="phrases", entry="board wipes", tag="board-wipe") in drift
        assert MappingTagDrift(table="fallback_slang", entry="tutor", tag="tutor") in drift
        assert (
            MappingTagDrift(
                table="pretranslated", entry="tribal lords legal in commander", tag="lord"
            )
            in drift
        )
