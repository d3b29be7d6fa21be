"""Tests for the server-side translation pipeline."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from spellseeker.db.operations import add_translation_rule
from spellseeker.models.db import Base
from spellseeker.models.failure import InvalidQueryError, TranslatorUnavailableError
from spellseeker.models.translation import (
    SearchContext,
    TranslationFilters,
    TranslationRequest,
    TranslationSource,
)
from spellseeker.services.generative import GenerativeTranslation
from spellseeker.services.translation import (
    TranslationService,
    looks_like_grammar,
    normalize_query_for_matching,
)


@pytest.fixture
async def session():
    """In-memory SQLite session for the shared cache and rules."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session

    await engine.dispose()


def _generative(reply: GenerativeTranslation | None = None, error: Exception | None = None):
    generative = MagicMock()
    generative.translate = AsyncMock(return_value=reply, side_effect=error)
    return generative


class TestHelpers:
    def test_matching_ignores_order_case_and_punctuation(self) -> None:
        assert normalize_query_for_matching("Green, Flying DRAGONS!") == "dragons flying green"

    @pytest.mark.parametrize(
        ("query", "expected"),
        [
            ("t:dragon c:r", True),
            ("mv<=3 removal", True),
            ("-t:creature", True),
            ('o:"draw a card"', True),
            ("red dragons", False),
            ("cards like: lightning bolt", False),
        ],
    )
    def test_looks_like_grammar(self, query: str, expected: bool) -> None:
        assert looks_like_grammar(query) is expected


class TestTiers:
    async def test_hardcoded_pattern(self) -> None:
        """Stable phrases answer from the built-in table."""
        result = await TranslationService().translate(TranslationRequest(query="Board Wipes"))

        assert result.grammar_query == "otag:board-wipe"
        assert result.source == TranslationSource.PATTERN_MATCH
        assert result.explanation.confidence == 0.95

    async def test_raw_grammar_passthrough(self) -> None:
        """Input already in the grammar is validated and passed through."""
        result = await TranslationService().translate(TranslationRequest(query="t:dragon c:r"))

        assert result.grammar_query == "t:dragon c:r"
        assert result.source == TranslationSource.DETERMINISTIC
        assert result.explanation.confidence == 0.9

    async def test_deterministic_when_complete(self) -> None:
        """A fully resolved query never reaches the generative tier."""
        generative = _generative()
        service = TranslationService(generative=generative)

        result = await service.translate(TranslationRequest(query="mono red creatures"))

        assert result.grammar_query == "id=r t:creature"
        assert result.source == TranslationSource.DETERMINISTIC
        assert result.explanation.confidence == 0.85
        assert result.intent is not None
        assert result.intent.colors == ["r"]
        generative.translate.assert_not_called()

    async def test_generative_for_unresolved_words(self) -> None:
        """The generative tier sees the partial query and the leftover words."""
        generative = _generative(
            GenerativeTranslation(
                grammar_query="t:creature o:explode",
                explanation="Creatures that explode",
                confidence=0.8,
            )
        )
        service = TranslationService(generative=generative)
        context = SearchContext(previous_query="dragons", previous_grammar_query="t:dragon")

        result = await service.translate(
            TranslationRequest(query="creatures that explode dramatically", context=context)
        )

        assert result.grammar_query == "t:creature o:explode"
        assert result.source == TranslationSource.AI
        assert result.explanation.readable == "Creatures that explode"
        generative.translate.assert_awaited_once_with(
            "creatures that explode dramatically",
            partial_query="t:creature",
            remaining="explode dramatically",
            context=context,
        )

    async def test_generative_answers_are_corrected(self) -> None:
        """Automatic corrections apply to generative answers and are reported."""
        generative = _generative(
            GenerativeTranslation(
                grammar_query="function:removal c:r", explanation="", confidence=0.8
            )
        )
        service = TranslationService(generative=generative)

        result = await service.translate(TranslationRequest(query="red things that zap stuff"))

        assert result.grammar_query == "otag:removal c:r"
        assert "Normalized tag syntax to otag: for consistency" in (
            result.explanation.assumptions
        )

    async def test_unavailable_generative_uses_remainder(self) -> None:
        """Without the generative tier the leftover words become oracle text."""
        service = TranslationService(
            generative=_generative(error=TranslatorUnavailableError("circuit open"))
        )

        result = await service.translate(
            TranslationRequest(query="creatures that explode dramatically")
        )

        assert result.grammar_query == 't:creature o:"explode dramatically"'
        assert result.source == TranslationSource.DETERMINISTIC
        assert result.explanation.confidence == 0.4
        assert 'Searched "explode dramatically" as card text' in result.explanation.assumptions
        assert result.intent is not None
        assert result.intent.oracle_text == ["explode dramatically"]

    async def test_low_confidence_not_cached(self) -> None:
        """Answers below the cache threshold are not stored."""
        service = TranslationService()

        await service.translate(TranslationRequest(query="creatures that explode dramatically"))

        assert len(service.cache) == 0

    async def test_invalid_input_raises(self) -> None:
        """Input rejection is the one error callers see."""
        with pytest.raises(InvalidQueryError):
            await TranslationService().translate(TranslationRequest(query="ab"))


class TestPostProcessing:
    async def test_request_filters_applied(self) -> None:
        """Request filters are appended to the translated query."""
        request = TranslationRequest(
            query="mono red creatures",
            filters=TranslationFilters(format="commander"),
        )

        result = await TranslationService().translate(request)

        assert result.grammar_query == "id=r t:creature f:commander"

    async def test_price_words_show_affiliate(self) -> None:
        """Price-related queries flag affiliate display."""
        result = await TranslationService().translate(
            TranslationRequest(query="cheap red creatures")
        )

        assert result.grammar_query == "c:r t:creature usd<5"
        assert result.show_affiliate is True

    async def test_no_affiliate_without_price(self) -> None:
        result = await TranslationService().translate(
            TranslationRequest(query="mono red creatures")
        )

        assert result.show_affiliate is False


class TestCaching:
    async def test_second_request_hits_cache(self) -> None:
        """A repeated request is answered from the cache."""
        service = TranslationService()

        await service.translate(TranslationRequest(query="mono red creatures"))
        result = await service.translate(TranslationRequest(query="Mono  Red Creatures"))

        assert result.source == TranslationSource.CACHE
        assert result.grammar_query == "id=r t:creature"

    async def test_bypass_cache(self) -> None:
        """bypass_cache re-translates."""
        service = TranslationService()

        await service.translate(TranslationRequest(query="board wipes"))
        result = await service.translate(TranslationRequest(query="board wipes", bypass_cache=True))

        assert result.source == TranslationSource.PATTERN_MATCH

    async def test_salt_misses_cache(self) -> None:
        """A new salt never reuses an earlier answer."""
        service = TranslationService()

        await service.translate(TranslationRequest(query="board wipes"))
        result = await service.translate(TranslationRequest(query="board wipes", cache_salt="x1"))

        assert result.source == TranslationSource.PATTERN_MATCH
        assert len(service.cache) == 2


class TestDatabaseTiers:
    async def test_rule_matches_in_any_word_order(self, session: AsyncSession) -> None:
        """Database rules match order-insensitively."""
        await add_translation_rule(
            session,
            pattern="flying green dragons",
            grammar_query="t:dragon c:g kw:flying",
            description="Green flyers",
        )

        result = await TranslationService().translate(
            TranslationRequest(query="green dragons flying"), session
        )

        assert result.grammar_query == "t:dragon c:g kw:flying"
        assert result.source == TranslationSource.PATTERN_MATCH
        assert result.explanation.readable == "Using predefined rule: Green flyers"

    async def test_persistent_cache_shared_across_services(self, session: AsyncSession) -> None:
        """A second instance with an empty memory cache reads the database cache."""
        await TranslationService().translate(
            TranslationRequest(query="mono red creatures"), session
        )

        other = TranslationService()
        result = await other.translate(TranslationRequest(query="mono red creatures"), session)

        assert result.source == TranslationSource.CACHE
        assert result.grammar_query == "id=r t:creature"
        assert len(other.cache) == 1

    async def test_database_errors_do_not_fail_request(self) -> None:
        """Cache and rule lookups degrade to a miss when the database fails."""
        broken = MagicMock()
        broken.execute = AsyncMock(side_effect=SQLAlchemyError("database down"))

        result = await TranslationService().translate(
            TranslationRequest(query="mono red creatures"), broken
        )

        assert result.grammar_query == "id=r t:creature"
