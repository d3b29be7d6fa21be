"""
In-process translation cache.

Keyed by the normalized query, the request filters and the cache salt,
so a regenerate request (new salt) never hits an earlier answer.
"""

import json
import logging
import re
import time
from collections.abc import Callable

from cachetools import TTLCache

from spellseeker.config import settings
from spellseeker.models.translation import TranslationFilters, TranslationResult

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def cache_key(
    query: str,
    filters: TranslationFilters | None = None,
    cache_salt: str | None = None,
) -> str:
    """Build the cache key: ``normalized query|filters json|salt``."""
    normalized = _WHITESPACE.sub(" ", query.lower()).strip()
    filter_json = json.dumps(
        filters.model_dump(exclude_none=True) if filters is not None else {},
        sort_keys=True,
    )
    return f"{normalized}|{filter_json}|{cache_salt or ''}"


class TranslationCache:
    """TTL-bounded map from cache key to translation result."""

    def __init__(
        self,
        maxsize: int = settings.cache_max_entries,
        ttl: float = settings.cache_ttl_seconds,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: TTLCache[str, TranslationResult] = TTLCache(
            maxsize=maxsize, ttl=ttl, timer=timer
        )

    def get(self, key: str) -> TranslationResult | None:
        result = self._entries.get(key)
        if result is not None:
            logger.debug("TRANSLATION_CACHE_HIT", extra={"tier": "memory"})
        return result

    def set(self, key: str, result: TranslationResult) -> None:
        self._entries[key] = result

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
