"""Tests for the in-process translation cache."""

from spellseeker.models.translation import TranslationFilters, TranslationResult, TranslationSource
from spellseeker.services.translation_cache import TranslationCache, cache_key


def _result(query: str = "otag:ramp") -> TranslationResult:
    return TranslationResult(
        grammar_query=query,
        confidence=0.9,
        source=TranslationSource.DETERMINISTIC,
    )


class TestCacheKey:
    def test_query_normalized(self) -> None:
        """Case and spacing do not change the key."""
        assert cache_key("  Green   RAMP ") == cache_key("green ramp")

    def test_filters_change_key(self) -> None:
        """Different filters never share an entry."""
        plain = cache_key("green ramp")
        filtered = cache_key("green ramp", TranslationFilters(format="commander"))

        assert plain != filtered

    def test_filter_order_irrelevant(self) -> None:
        """Filters serialize with sorted keys."""
        first = cache_key("ramp", TranslationFilters(format="modern", max_mana_value=3))
        second = cache_key("ramp", TranslationFilters(max_mana_value=3, format="modern"))

        assert first == second

    def test_salt_changes_key(self) -> None:
        """A regenerate salt bypasses earlier answers."""
        assert cache_key("ramp", cache_salt="abc") != cache_key("ramp")


class TestTranslationCache:
    def test_set_and_get(self, clock) -> None:
        """Stored results are returned until they expire."""
        cache = TranslationCache(maxsize=10, ttl=30, timer=clock)
        cache.set("k", _result())

        clock.advance(10)

        assert cache.get("k") == _result()
        assert len(cache) == 1

    def test_entries_expire(self, clock) -> None:
        """Entries older than the TTL are gone."""
        cache = TranslationCache(maxsize=10, ttl=30, timer=clock)
        cache.set("k", _result())

        clock.advance(31)

        assert cache.get("k") is None

    def test_maxsize_evicts(self, clock) -> None:
        """The cache never holds more than maxsize entries."""
        cache = TranslationCache(maxsize=2, ttl=30, timer=clock)
        for index in range(3):
            cache.set(str(index), _result(f"mv={index}"))

        assert len(cache) == 2

    def test_clear(self, clock) -> None:
        cache = TranslationCache(maxsize=10, ttl=30, timer=clock)
        cache.set("k", _result())

        cache.clear()

        assert len(cache) == 0
        assert cache.get("k") is None
