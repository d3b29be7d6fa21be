"""Tests for recent-search history."""

from spellseeker.services.search_history import SearchHistory


class TestSearchHistory:
    def test_most_recent_first(self) -> None:
        history = SearchHistory()
        history.add("elves")
        history.add("goblins")

        assert history.items() == ["goblins", "elves"]

    def test_readding_moves_to_front_with_new_spelling(self) -> None:
        """Duplicates are matched case-insensitively and keep the latest spelling."""
        history = SearchHistory()
        history.add("elves")
        history.add("goblins")
        history.add("  ELVES ")

        assert history.items() == ["ELVES", "goblins"]

    def test_bounded(self) -> None:
        """The oldest entries fall off past max_items."""
        history = SearchHistory(max_items=2)
        for query in ("elves", "goblins", "zombies"):
            history.add(query)

        assert history.items() == ["zombies", "goblins"]

    def test_blank_ignored(self) -> None:
        history = SearchHistory()
        history.add("   ")

        assert len(history) == 0

    def test_remove_and_contains(self) -> None:
        history = SearchHistory()
        history.add("Elves")

        assert "elves" in history
        assert history.remove("ELVES") is True
        assert history.remove("elves") is False
        assert "elves" not in history

    def test_clear(self) -> None:
        history = SearchHistory()
        history.add("elves")

        history.clear()

        assert history.items() == []
