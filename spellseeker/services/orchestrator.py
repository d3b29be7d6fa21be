"""
Search orchestrator.

The client-side control loop between a search box and the remote
translator. One search() call produces at most one on_search callback:

    empty input          -> nothing
    cooldown active      -> notice only
    translator succeeds  -> translated query
    timeout / error      -> local fallback query, plus a notice
    rate limited         -> cooldown opened, notice only

INVARIANTS:
- Only the most recently started search may call back; stale results
  are discarded when they arrive
- While the cooldown is active no translator call is made
- History records a search when it starts, not when it succeeds
"""

import asyncio
import logging
import math
import re
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from spellseeker.compiler.fallback import compile_fallback
from spellseeker.config import settings
from spellseeker.grammar.filters import merge_query_with_filters
from spellseeker.grammar.validator import validate_query
from spellseeker.models.query import FilterHints, ValidationResult
from spellseeker.models.translation import (
    Explanation,
    SearchContext,
    TranslationFilters,
    TranslationRequest,
    TranslationResult,
    TranslationSource,
)
from spellseeker.services.search_history import SearchHistory

logger = logging.getLogger(__name__)

FALLBACK_CONFIDENCE = 0.3

TIMEOUT_NOTE = "Translation timed out; used a simplified keyword search"
ERROR_NOTE = "Translation service unavailable; used a simplified keyword search"

_RATE_LIMIT_MESSAGE = re.compile(r"\b429\b|rate|please wait", re.IGNORECASE)


class Translator(Protocol):
    async def translate(self, request: TranslationRequest) -> TranslationResult: ...


class NoticeLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class Notice:
    """A user-visible message about how a search was handled."""

    level: NoticeLevel
    message: str


SearchCallback = Callable[[str, TranslationResult | None, str | None], None]
NoticeCallback = Callable[[Notice], None]


def is_rate_limit_error(error: BaseException) -> bool:
    """True for HTTP 429 errors and errors whose message reads like a rate limit."""
    if getattr(error, "status_code", None) == 429:
        return True
    return _RATE_LIMIT_MESSAGE.search(str(error)) is not None


class SearchOrchestrator:
    """
    Drives searches for one search box.

    Args:
        translator: Anything with ``async translate(request)``, normally a
            TranslatorClient
        on_search: Called as ``on_search(grammar_query, result, natural_query)``
        on_notice: Receives user-visible notices
        history: Recent searches; a fresh one by default
        timeout: Seconds to wait for the translator before falling back
        cooldown: Seconds searches stay blocked after a rate-limit error
        clock: Monotonic time source; tests pass a fake
    """

    def __init__(
        self,
        translator: Translator,
        on_search: SearchCallback,
        on_notice: NoticeCallback | None = None,
        history: SearchHistory | None = None,
        timeout: float = settings.search_timeout_seconds,
        cooldown: float = settings.rate_limit_cooldown_seconds,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.translator = translator
        self.on_search = on_search
        self.on_notice = on_notice
        self.history = history if history is not None else SearchHistory()
        self.timeout = timeout
        self.cooldown = cooldown
        self.clock = clock

        self.context: SearchContext | None = None
        self.last_query: str | None = None
        self.last_result: TranslationResult | None = None
        self.last_filters: TranslationFilters | None = None
        self.active_filters: FilterHints | None = None
        self.searching = False

        self._token = 0
        self._locked_until: float | None = None
        self._tasks: set[asyncio.Task[TranslationResult]] = set()

    # -------------------------------------------------------------------------
    # Rate-limit window
    # -------------------------------------------------------------------------

    def cooldown_remaining(self) -> float:
        """Seconds left in the cooldown; clears the window once it has passed."""
        if self._locked_until is None:
            return 0.0
        remaining = self._locked_until - self.clock()
        if remaining <= 0:
            self._locked_until = None
            return 0.0
        return remaining

    def _open_cooldown(self) -> None:
        self._locked_until = self.clock() + self.cooldown
        logger.info("RATE_LIMIT_COOLDOWN_OPENED", extra={"cooldown": self.cooldown})

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    async def search(
        self,
        query: str,
        filters: TranslationFilters | None = None,
        bypass_cache: bool = False,
        cache_salt: str | None = None,
    ) -> None:
        """Translate ``query`` and call back with the query to execute."""
        query = query.strip()
        if not query:
            return

        remaining = self.cooldown_remaining()
        if remaining > 0:
            self._notify(
                NoticeLevel.WARNING,
                f"Please wait {math.ceil(remaining)} seconds before searching again.",
            )
            return

        self._token += 1
        token = self._token
        self.history.add(query)
        self.last_filters = filters
        self.searching = True

        request = TranslationRequest(
            query=query,
            filters=filters,
            bypass_cache=bypass_cache,
            cache_salt=cache_salt,
            context=self.context,
        )
        task = asyncio.create_task(self.translator.translate(request))
        self._tasks.add(task)

        try:
            done, _ = await asyncio.wait({task}, timeout=self.timeout)
            if not done:
                task.cancel()
                logger.warning("TRANSLATION_TIMED_OUT", extra={"timeout": self.timeout})
                self._commit_fallback(token, query, TIMEOUT_NOTE)
                return

            if task.cancelled():
                return

            error = task.exception()
            if error is None:
                self._commit(token, query, task.result())
            elif is_rate_limit_error(error):
                self._open_cooldown()
                self._notify(
                    NoticeLevel.WARNING,
                    f"Too many searches. Please wait {math.ceil(self.cooldown)} seconds.",
                )
            else:
                logger.warning(
                    "TRANSLATION_FAILED",
                    extra={"error": str(error), "error_type": type(error).__name__},
                )
                self._commit_fallback(token, query, ERROR_NOTE)
        finally:
            if not task.done():
                task.cancel()
            self._tasks.discard(task)
            if token == self._token:
                self.searching = False

    async def regenerate(self) -> None:
        """Re-translate the last search, skipping every cache."""
        if self.last_query is None:
            return
        await self.search(
            self.last_query,
            filters=self.last_filters,
            bypass_cache=True,
            cache_salt=uuid.uuid4().hex,
        )

    def rerun_edited(self, edited: str, hints: FilterHints | None = None) -> ValidationResult:
        """
        Run a hand-edited grammar query without the translator.

        Active filters are merged in first. An invalid query is reported,
        not corrected, and nothing is searched.
        """
        hints = hints if hints is not None else self.active_filters
        validation = validate_query(merge_query_with_filters(edited, hints))

        if not validation.valid or not validation.sanitized:
            self._notify(
                NoticeLevel.WARNING,
                "; ".join(validation.issues) or "The edited query is empty.",
            )
            return validation

        # An edit supersedes any translation still in flight
        self._token += 1
        self.searching = False
        result = None
        if self.last_result is not None:
            result = self.last_result.model_copy(
                update={"grammar_query": validation.sanitized, "validation_issues": []}
            )
            self.last_result = result
        self.on_search(validation.sanitized, result, self.last_query)
        return validation

    def set_filters(self, hints: FilterHints | None) -> None:
        self.active_filters = None if hints is None or hints.is_empty() else hints

    async def close(self) -> None:
        """Cancel outstanding translator calls."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self.searching = False

    # -------------------------------------------------------------------------
    # Commit
    # -------------------------------------------------------------------------

    def _is_current(self, token: int) -> bool:
        if token != self._token:
            logger.debug("SEARCH_SUPERSEDED", extra={"token": token, "current": self._token})
            return False
        return True

    def _commit(self, token: int, query: str, result: TranslationResult) -> None:
        if not self._is_current(token):
            return
        self.context = SearchContext(
            previous_query=query,
            previous_grammar_query=result.grammar_query,
        )
        self.last_query = query
        self.last_result = result
        self.on_search(result.grammar_query, result, query)

    def _commit_fallback(self, token: int, query: str, note: str) -> None:
        if not self._is_current(token):
            return
        validation = validate_query(compile_fallback(query))
        result = TranslationResult(
            grammar_query=validation.sanitized,
            explanation=Explanation(
                readable=f'Simplified search for "{query}"',
                assumptions=[note],
                confidence=FALLBACK_CONFIDENCE,
            ),
            source=TranslationSource.CLIENT_FALLBACK,
            validation_issues=list(validation.issues),
        )
        self.last_query = query
        self.last_result = result
        self._notify(NoticeLevel.INFO, f"{note}.")
        self.on_search(result.grammar_query, result, query)

    def _notify(self, level: NoticeLevel, message: str) -> None:
        logger.info("SEARCH_NOTICE", extra={"level": level.value, "notice": message})
        if self.on_notice is not None:
            self.on_notice(Notice(level=level, message=message))
