"""
Database operations for translation rules and the shared translation cache.
"""

import hashlib
from datetime import UTC, datetime, timedelta

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from spellseeker.models.db import CachedTranslationDB, TranslationRuleDB
from spellseeker.models.translation import Explanation, TranslationResult, TranslationSource

# Rules below this confidence are never used to short-circuit translation
MIN_RULE_CONFIDENCE = 0.8

# --- Translation Rules ---


async def get_active_rules(
    session: AsyncSession,
    min_confidence: float = MIN_RULE_CONFIDENCE,
) -> list[TranslationRuleDB]:
    """Get active rules at or above ``min_confidence``, newest first."""
    result = await session.execute(
        select(TranslationRuleDB)
        .where(TranslationRuleDB.is_active.is_(True))
        .where(TranslationRuleDB.confidence >= min_confidence)
        .order_by(TranslationRuleDB.created_at.desc(), TranslationRuleDB.id.desc())
    )
    return list(result.scalars().all())


async def add_translation_rule(
    session: AsyncSession,
    pattern: str,
    grammar_query: str,
    description: str | None = None,
    confidence: float = 0.9,
) -> TranslationRuleDB:
    """Create a new active translation rule."""
    rule = TranslationRuleDB(
        pattern=pattern,
        grammar_query=grammar_query,
        description=description,
        confidence=confidence,
        is_active=True,
    )
    session.add(rule)
    await session.flush()
    return rule


async def deactivate_translation_rule(session: AsyncSession, rule_id: int) -> bool:
    """
    Deactivate a rule.

    Returns:
        True if the rule existed
    """
    rule = await session.get(TranslationRuleDB, rule_id)
    if rule is None:
        return False
    rule.is_active = False
    await session.flush()
    return True


# --- Translation Cache ---


def hash_cache_key(key: str) -> str:
    """Hash a cache key to a fixed-length row key."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


async def get_cached_translation(
    session: AsyncSession,
    key: str,
    now: datetime | None = None,
) -> CachedTranslationDB | None:
    """
    Get an unexpired cached translation and count the hit.

    Returns None on a miss or when the row has expired.
    """
    now = now or datetime.now(UTC)
    result = await session.execute(
        select(CachedTranslationDB)
        .where(CachedTranslationDB.query_hash == hash_cache_key(key))
        .where(CachedTranslationDB.expires_at > now)
    )
    row = result.scalar_one_or_none()
    if row is None:
        return None

    row.hit_count += 1
    row.last_hit_at = now
    await session.flush()
    return row


async def store_cached_translation(
    session: AsyncSession,
    key: str,
    normalized_query: str,
    result: TranslationResult,
    ttl_hours: int,
    now: datetime | None = None,
) -> CachedTranslationDB:
    """
    Insert or refresh the cached translation for ``key``.

    A refresh replaces the stored query and explanation, resets the
    hit count and extends the expiry.
    """
    now = now or datetime.now(UTC)
    query_hash = hash_cache_key(key)
    existing = await session.execute(
        select(CachedTranslationDB).where(CachedTranslationDB.query_hash == query_hash)
    )
    row = existing.scalar_one_or_none()
    if row is None:
        row = CachedTranslationDB(query_hash=query_hash)
        session.add(row)

    row.normalized_query = normalized_query[:500]
    row.grammar_query = result.grammar_query
    row.explanation = result.explanation.model_dump()
    row.confidence = result.explanation.confidence
    row.show_affiliate = result.show_affiliate
    row.hit_count = 1
    row.expires_at = now + timedelta(hours=ttl_hours)

    await session.flush()
    return row


async def purge_expired_translations(session: AsyncSession, now: datetime | None = None) -> int:
    """
    Delete expired cache rows.

    Returns:
        Number of rows deleted
    """
    now = now or datetime.now(UTC)
    result = await session.execute(
        delete(CachedTranslationDB).where(CachedTranslationDB.expires_at <= now)
    )
    return result.rowcount or 0


def cached_translation_to_result(row: CachedTranslationDB) -> TranslationResult:
    """Convert a cache row to a TranslationResult with source ``cache``."""
    return TranslationResult(
        grammar_query=row.grammar_query,
        explanation=Explanation.model_validate(row.explanation or {}),
        source=TranslationSource.CACHE,
        show_affiliate=row.show_affiliate,
    )
