"""
Server-side translation pipeline.

Turns one natural-language request into a validated grammar query,
trying the cheapest tier that can answer first:

    sanitize input
    -> cache (memory, then database)      unless bypass_cache
    -> pattern match (built-in, then database rules)
    -> raw grammar passthrough
    -> deterministic compiler             when it resolves everything
    -> generative tier                    for the unresolved remainder
    -> deterministic + remainder as oracle text, when generative is unavailable

Every answer then gets the request filters applied, automatic
corrections (generative answers only) and grammar validation. Answers
at or above the confidence threshold are cached.

INVARIANTS:
- Only input rejection (InvalidQueryError) escapes translate()
- Cache and rule lookups never fail a request; their errors are logged
- Every returned grammar query has been through the validator
"""

import logging
import re

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from spellseeker.compiler.deterministic import compile_deterministic
from spellseeker.compiler.fallback import compile_fallback
from spellseeker.compiler.mappings import PHRASE_TRANSLATIONS
from spellseeker.compiler.semantic import SemanticMappingEngine, default_engine
from spellseeker.compiler.slots import PRICE_MENTION
from spellseeker.config import settings
from spellseeker.db.operations import (
    cached_translation_to_result,
    get_active_rules,
    get_cached_translation,
    store_cached_translation,
)
from spellseeker.grammar.corrections import apply_auto_corrections, sanitize_input_query
from spellseeker.grammar.filters import apply_translation_filters
from spellseeker.grammar.validator import validate_query
from spellseeker.models.failure import TranslatorUnavailableError
from spellseeker.models.translation import (
    Explanation,
    SearchIntent,
    TranslationRequest,
    TranslationResult,
    TranslationSource,
)
from spellseeker.services.generative import GenerativeTranslator
from spellseeker.services.translation_cache import TranslationCache, cache_key

logger = logging.getLogger(__name__)

# Stable translations that never need a model
HARDCODED_TRANSLATIONS: dict[str, TranslationResult] = {
    phrase: TranslationResult(
        grammar_query=grammar_query,
        explanation=Explanation(readable=readable, confidence=0.95),
        source=TranslationSource.PATTERN_MATCH,
    )
    for phrase, (grammar_query, readable) in PHRASE_TRANSLATIONS.items()
}

RAW_GRAMMAR_CONFIDENCE = 0.9
REMAINDER_FALLBACK_CONFIDENCE = 0.4

_WHITESPACE = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^\w\s]")

_RAW_GRAMMAR_PATTERNS = (
    re.compile(r"\b[a-z]+(?:[:=]|[<>]=?)\S", re.IGNORECASE),
    re.compile(r"^-[a-z]+:", re.IGNORECASE),
    re.compile(r'\bo:"[^"]+"'),
)


def normalize_query_for_matching(query: str) -> str:
    """Lowercase, strip punctuation and sort words so word order does not matter."""
    words = _NON_WORD.sub("", _WHITESPACE.sub(" ", query.lower()).strip()).split()
    return " ".join(sorted(words))


def looks_like_grammar(query: str) -> bool:
    """True when the input is already written in the search grammar."""
    return any(pattern.search(query) for pattern in _RAW_GRAMMAR_PATTERNS)


class TranslationService:
    """The translate endpoint's pipeline, with injectable tiers for tests."""

    def __init__(
        self,
        generative: GenerativeTranslator | None = None,
        cache: TranslationCache | None = None,
        engine: SemanticMappingEngine = default_engine,
        min_cache_confidence: float = settings.cache_min_confidence,
        persistent_ttl_hours: int = settings.persistent_cache_ttl_hours,
    ) -> None:
        self.generative = generative
        self.cache = cache if cache is not None else TranslationCache()
        self.engine = engine
        self.min_cache_confidence = min_cache_confidence
        self.persistent_ttl_hours = persistent_ttl_hours

    async def translate(
        self,
        request: TranslationRequest,
        session: AsyncSession | None = None,
    ) -> TranslationResult:
        """
        Translate one request.

        Args:
            request: The translate request body
            session: Database session for the shared cache and rules;
                None skips both

        Raises:
            InvalidQueryError: If the input is rejected by the sanitizer
        """
        query = sanitize_input_query(request.query)
        key = cache_key(query, request.filters, request.cache_salt)

        if not request.bypass_cache:
            cached = await self._lookup_cache(key, session)
            if cached is not None:
                return cached

        result = await self._translate_uncached(query, request, session)

        if result.explanation.confidence >= self.min_cache_confidence:
            await self._store(key, query, result, session)

        logger.info(
            "QUERY_TRANSLATED",
            extra={
                "source": result.source.value,
                "confidence": result.explanation.confidence,
                "issues": len(result.validation_issues),
            },
        )
        return result

    # -------------------------------------------------------------------------
    # Cache
    # -------------------------------------------------------------------------

    async def _lookup_cache(
        self, key: str, session: AsyncSession | None
    ) -> TranslationResult | None:
        cached = self.cache.get(key)
        if cached is not None:
            return cached.model_copy(update={"source": TranslationSource.CACHE})

        if session is None:
            return None
        try:
            row = await get_cached_translation(session, key)
        except SQLAlchemyError:
            logger.warning("PERSISTENT_CACHE_READ_FAILED", exc_info=True)
            return None
        if row is None:
            return None

        logger.debug("TRANSLATION_CACHE_HIT", extra={"tier": "database"})
        result = cached_translation_to_result(row)
        self.cache.set(key, result)
        return result

    async def _store(
        self,
        key: str,
        query: str,
        result: TranslationResult,
        session: AsyncSession | None,
    ) -> None:
        self.cache.set(key, result)
        if session is None:
            return
        try:
            await store_cached_translation(
                session,
                key=key,
                normalized_query=_WHITESPACE.sub(" ", query.lower()),
                result=result,
                ttl_hours=self.persistent_ttl_hours,
            )
        except SQLAlchemyError:
            logger.warning("PERSISTENT_CACHE_WRITE_FAILED", exc_info=True)

    # -------------------------------------------------------------------------
    # Tiers
    # -------------------------------------------------------------------------

    async def _match_pattern(
        self, query: str, session: AsyncSession | None
    ) -> TranslationResult | None:
        hardcoded = HARDCODED_TRANSLATIONS.get(query.lower().strip())
        if hardcoded is not None:
            return hardcoded

        if session is None:
            return None
        try:
            rules = await get_active_rules(session)
        except SQLAlchemyError:
            logger.warning("TRANSLATION_RULES_READ_FAILED", exc_info=True)
            return None

        normalized = normalize_query_for_matching(query)
        for rule in rules:
            if normalize_query_for_matching(rule.pattern) == normalized:
                logger.info("TRANSLATION_RULE_MATCHED", extra={"rule_id": rule.id})
                return TranslationResult(
                    grammar_query=rule.grammar_query,
                    explanation=Explanation(
                        readable=f"Using predefined rule: {rule.description or rule.pattern}",
                        confidence=rule.confidence,
                    ),
                    source=TranslationSource.PATTERN_MATCH,
                )
        return None

    async def _translate_uncached(
        self,
        query: str,
        request: TranslationRequest,
        session: AsyncSession | None,
    ) -> TranslationResult:
        matched = await self._match_pattern(query, session)
        if matched is not None:
            return self._finalize(request, matched)

        if looks_like_grammar(query):
            raw = TranslationResult(
                grammar_query=query,
                explanation=Explanation(
                    readable="Query already uses search syntax",
                    confidence=RAW_GRAMMAR_CONFIDENCE,
                ),
                source=TranslationSource.DETERMINISTIC,
            )
            return self._finalize(request, raw)

        deterministic = compile_deterministic(query, engine=self.engine)
        intent = deterministic.intent

        if deterministic.complete:
            result = TranslationResult(
                grammar_query=deterministic.query,
                explanation=Explanation(
                    readable=f'Translated "{query}" with the built-in card vocabulary',
                    assumptions=intent.warnings,
                    confidence=deterministic.confidence,
                ),
                source=TranslationSource.DETERMINISTIC,
                intent=intent,
            )
            return self._finalize(request, result)

        try:
            if self.generative is None:
                raise TranslatorUnavailableError("generative tier not configured")
            reply = await self.generative.translate(
                query,
                partial_query=deterministic.query,
                remaining=deterministic.remaining,
                context=request.context,
            )
        except TranslatorUnavailableError as e:
            logger.info("GENERATIVE_UNAVAILABLE", extra={"reason": e.reason})
            return self._finalize(request, self._remainder_fallback(query, intent))

        result = TranslationResult(
            grammar_query=reply.grammar_query,
            explanation=Explanation(
                readable=reply.explanation or f'Translated "{query}"',
                assumptions=intent.warnings,
                confidence=reply.confidence,
            ),
            source=TranslationSource.AI,
            intent=intent,
        )
        return self._finalize(request, result)

    def _remainder_fallback(self, query: str, intent: SearchIntent) -> TranslationResult:
        """Deterministic query plus the unresolved words as oracle text."""
        parts = [intent.deterministic_query] if intent.deterministic_query else []
        remaining = intent.remaining.replace('"', "").strip()
        assumptions = list(intent.warnings)
        if remaining:
            parts.append(f'o:"{remaining}"')
            assumptions.append(f'Searched "{remaining}" as card text')

        grammar_query = " ".join(parts) or compile_fallback(query)
        return TranslationResult(
            grammar_query=grammar_query,
            explanation=Explanation(
                readable=f'Simplified translation of "{query}"',
                assumptions=assumptions,
                confidence=REMAINDER_FALLBACK_CONFIDENCE,
            ),
            source=TranslationSource.DETERMINISTIC,
            intent=intent.model_copy(update={"oracle_text": [remaining] if remaining else []}),
        )

    # -------------------------------------------------------------------------
    # Post-processing
    # -------------------------------------------------------------------------

    def _finalize(
        self,
        request: TranslationRequest,
        result: TranslationResult,
    ) -> TranslationResult:
        """Apply filters, corrections and validation to a tier's answer."""
        grammar_query = apply_translation_filters(result.grammar_query, request.filters)
        assumptions = list(result.explanation.assumptions)

        if result.source == TranslationSource.AI:
            corrected = apply_auto_corrections(grammar_query)
            grammar_query = corrected.query
            assumptions.extend(corrected.corrections)

        validation = validate_query(grammar_query)
        show_affiliate = (
            PRICE_MENTION.search(request.query) is not None or "usd" in validation.sanitized
        )

        return result.model_copy(
            update={
                "grammar_query": validation.sanitized,
                "explanation": result.explanation.model_copy(
                    update={"assumptions": assumptions}
                ),
                "validation_issues": list(validation.issues),
                "show_affiliate": show_affiliate,
            }
        )
