"""
Translator client.

Calls the remote translate endpoint on behalf of the search
orchestrator. Identical requests already in flight share one call,
and a small client-side throttle keeps a single user from hammering
the endpoint.

INVARIANTS:
- At most one network call per distinct request key is in flight
- Only successful calls count against the throttle
- bypass_cache requests skip both sharing and throttling
"""

import asyncio
import logging
import time
from collections import deque
from collections.abc import Callable
from typing import Any

import httpx
from pydantic import ValidationError

from spellseeker.config import settings
from spellseeker.models.failure import FailureKind, KnownError
from spellseeker.models.translation import TranslationRequest, TranslationResult
from spellseeker.services.translation_cache import cache_key

logger = logging.getLogger(__name__)

THROTTLE_WINDOW_SECONDS = 60.0


class TranslatorError(KnownError):
    """The remote translator failed or returned an unusable body."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message=message,
            status_code=status_code,
        )


class TranslatorRateLimitedError(TranslatorError):
    """The remote translator, or the client throttle, refused the request."""

    def __init__(self, message: str = "Rate limit exceeded. Please wait a moment."):
        super().__init__(message, status_code=429)
        self.kind = FailureKind.RATE_LIMITED


def _error_message(response: httpx.Response) -> str | None:
    """Pull ``error`` out of a failure body, if the body is JSON."""
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return None


class TranslatorClient:
    """
    Client for the translate endpoint.

    Sends TranslationRequests and returns TranslationResults.
    """

    def __init__(
        self,
        url: str | None = None,
        timeout: float = 30.0,
        max_requests_per_minute: int = settings.client_max_requests_per_minute,
        duplicate_window_seconds: float = settings.client_duplicate_window_seconds,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the translator client.

        Args:
            url: Translate endpoint URL. Defaults to settings.translator_url.
            timeout: Request timeout in seconds.
            max_requests_per_minute: Successful calls allowed per sliding minute.
            duplicate_window_seconds: An identical query inside this window is refused.
            clock: Monotonic time source; tests pass a fake.
        """
        self.url = url or settings.translator_url
        self.timeout = timeout
        self.max_requests_per_minute = max_requests_per_minute
        self.duplicate_window_seconds = duplicate_window_seconds
        self.clock = clock

        self._in_flight: dict[str, asyncio.Task[TranslationResult]] = {}
        self._recent: deque[float] = deque()
        self._last_query: str | None = None
        self._last_query_at = 0.0

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    async def translate(self, request: TranslationRequest) -> TranslationResult:
        """
        Translate one request.

        Raises:
            TranslatorRateLimitedError: If the throttle or the server refused it
            TranslatorError: If the call failed or the body was unusable
        """
        if request.bypass_cache:
            return await self._post(request)

        key = cache_key(request.query, request.filters, request.cache_salt)
        pending = self._in_flight.get(key)
        if pending is not None:
            logger.debug("TRANSLATION_SHARED", extra={"in_flight": len(self._in_flight)})
            return await asyncio.shield(pending)

        self._check_throttle(key)

        task = asyncio.create_task(self._post(request))
        self._in_flight[key] = task
        task.add_done_callback(lambda done: self._forget(key, done))
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Task[TranslationResult]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        # Mark the outcome retrieved; every waiter may have been cancelled
        if not task.cancelled():
            task.exception()

    # -------------------------------------------------------------------------
    # Throttle
    # -------------------------------------------------------------------------

    def _check_throttle(self, key: str) -> None:
        now = self.clock()
        while self._recent and now - self._recent[0] >= THROTTLE_WINDOW_SECONDS:
            self._recent.popleft()

        if len(self._recent) >= self.max_requests_per_minute:
            logger.info("CLIENT_THROTTLED", extra={"reason": "per_minute"})
            raise TranslatorRateLimitedError(
                "Rate limit: too many searches. Please wait a moment."
            )

        if self._last_query == key and now - self._last_query_at < self.duplicate_window_seconds:
            logger.info("CLIENT_THROTTLED", extra={"reason": "duplicate"})
            raise TranslatorRateLimitedError("Rate limit: duplicate search. Please wait a moment.")

    def _record_success(self, key: str) -> None:
        now = self.clock()
        self._recent.append(now)
        self._last_query = key
        self._last_query_at = now

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _post(self, request: TranslationRequest) -> TranslationResult:
        payload = request.model_dump(by_alias=True, exclude_none=True)
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.url, json=payload)
        except httpx.RequestError as e:
            logger.warning("TRANSLATOR_UNREACHABLE", extra={"error": str(e)})
            raise TranslatorError(f"Translator unreachable: {e}") from e

        if response.status_code == 429:
            raise TranslatorRateLimitedError(
                _error_message(response) or "Rate limit exceeded. Please wait a moment."
            )

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = _error_message(response) or f"HTTP {response.status_code}"
            raise TranslatorError(
                f"Translation failed: {message}", status_code=response.status_code
            ) from e

        result = self._parse(response)
        self._record_success(cache_key(request.query, request.filters, request.cache_salt))
        return result

    def _parse(self, response: httpx.Response) -> TranslationResult:
        try:
            data: Any = response.json()
        except ValueError as e:
            raise TranslatorError("Translator returned a non-JSON body") from e

        if not isinstance(data, dict):
            raise TranslatorError("Translator returned an unexpected body")
        if not data.get("success"):
            raise TranslatorError(str(data.get("error") or "Translation failed"))
        if not data.get("grammarQuery"):
            raise TranslatorError("Translator returned an empty query")

        try:
            return TranslationResult.model_validate({**data, "source": data.get("source") or "ai"})
        except ValidationError as e:
            raise TranslatorError("Translator returned a malformed result") from e
