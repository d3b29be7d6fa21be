"""
Cost controls: request rate limiting and the daily generative budget.

This module protects the translate endpoint from:
- Abuse via bursts of requests from a single IP
- Overload via bursts of requests across all clients
- Unexpected model costs via daily call and token caps
- Runaway costs via environment-level kill switch

INVARIANTS:
- Request limits are enforced BEFORE any translation work runs
- Request-limit exceedance is surfaced to the caller as HTTP 429
- Generative budget exceedance is NOT surfaced: the translation
  pipeline answers from the deterministic tier instead
- IP-based limits use hashed IPs for privacy in logs

ENFORCEMENT:
- Per-IP: max_requests_per_ip_per_minute over a sliding minute
- Global: max_requests_per_minute_global over a sliding minute
- Daily: max_llm_calls_per_day and max_llm_tokens_per_day, reset at midnight UTC
- Kill switch: LLM_ENABLED environment variable
"""

import hashlib
import logging
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from threading import Lock

from spellseeker.config import settings
from spellseeker.models.failure import FailureKind, KnownError

logger = logging.getLogger(__name__)

# Length of the sliding request window, in seconds
REQUEST_WINDOW_SECONDS = 60.0


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================


class RateLimitExceededError(KnownError):
    """
    Exception raised when a per-IP or global request limit is exceeded.

    Returns HTTP 429; the client opens its cooldown window on it.
    """

    def __init__(self, scope: str, limit: int):
        self.scope = scope
        self.limit = limit
        super().__init__(
            kind=FailureKind.RATE_LIMITED,
            message="Rate limit exceeded. Please wait a moment before searching again.",
            detail=f"{scope} limit: {limit}/minute",
            suggestion="Wait a few seconds, then search again.",
            status_code=429,
        )


class DailyBudgetExceededError(KnownError):
    """
    Exception raised when the daily generative budget is exhausted.

    Only the generative tier is affected; deterministic translation
    keeps working.
    """

    def __init__(self, limit_type: str, used: int, limit: int):
        self.limit_type = limit_type
        self.used = used
        self.limit = limit
        super().__init__(
            kind=FailureKind.BUDGET_EXCEEDED,
            message="The daily generative translation budget has been reached.",
            detail=f"Daily {limit_type}: {used}/{limit}",
            suggestion="This limit resets at midnight UTC.",
            status_code=503,
        )


class LLMDisabledError(KnownError):
    """
    Exception raised when the generative tier is disabled via environment.
    """

    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.SERVICE_UNAVAILABLE,
            message="Generative translation is currently disabled.",
            detail="LLM_ENABLED=false",
            suggestion="Queries are translated by the deterministic compiler only.",
            status_code=503,
        )


# =============================================================================
# THREAD-SAFE USAGE TRACKER
# =============================================================================


@dataclass
class UsageTracker:
    """
    Thread-safe tracker for request windows and daily generative usage.

    Tracks:
    - Per-IP request timestamps over a sliding minute
    - Global request timestamps over a sliding minute
    - Global generative call and token counts for the current UTC day
    """

    # Configuration
    max_requests_per_ip_per_minute: int = 30
    max_requests_per_minute_global: int = 600
    max_llm_calls_per_day: int = 2000
    max_tokens_per_day: int = 2_000_000
    clock: Callable[[], float] = time.monotonic

    # State
    _current_date: date = field(default_factory=lambda: datetime.now(UTC).date())
    _ip_requests: dict[str, deque[float]] = field(default_factory=dict)
    _global_requests: deque[float] = field(default_factory=deque)
    _last_sweep: float | None = None
    _llm_calls_today: int = 0
    _tokens_today: int = 0
    _lock: Lock = field(default_factory=Lock)

    def _maybe_reset(self) -> None:
        """Reset daily counters if we've crossed into a new day (UTC)."""
        today = datetime.now(UTC).date()
        if today != self._current_date:
            self._current_date = today
            self._llm_calls_today = 0
            self._tokens_today = 0
            logger.info(
                "DAILY_COUNTERS_RESET",
                extra={"new_date": today.isoformat()},
            )

    def _prune(self, window: deque[float], now: float) -> None:
        while window and now - window[0] >= REQUEST_WINDOW_SECONDS:
            window.popleft()

    def _sweep_idle_ips(self, now: float) -> None:
        """Forget IPs with no request in the last window, at most once per window."""
        if self._last_sweep is not None and now - self._last_sweep < REQUEST_WINDOW_SECONDS:
            return
        self._last_sweep = now
        idle = [
            ip_hash
            for ip_hash, window in self._ip_requests.items()
            if not window or now - window[-1] >= REQUEST_WINDOW_SECONDS
        ]
        for ip_hash in idle:
            del self._ip_requests[ip_hash]

    def hash_ip(self, ip_address: str) -> str:
        """
        Hash an IP address for privacy-safe logging.

        Uses SHA-256 truncated to 12 characters.
        """
        return hashlib.sha256(ip_address.encode()).hexdigest()[:12]

    def check_request_limits(self, ip_address: str) -> None:
        """
        Check and record one request against the per-IP and global windows.

        MUST be called BEFORE any translation work runs. A rejected
        request is not recorded.

        Raises:
            RateLimitExceededError: If either window is full
        """
        with self._lock:
            now = self.clock()
            ip_hash = self.hash_ip(ip_address)

            self._sweep_idle_ips(now)
            ip_window = self._ip_requests.get(ip_hash) or deque()
            self._prune(ip_window, now)
            self._prune(self._global_requests, now)

            if len(ip_window) >= self.max_requests_per_ip_per_minute:
                logger.warning(
                    "RATE_LIMIT_EXCEEDED",
                    extra={
                        "scope": "ip",
                        "ip_hash": ip_hash,
                        "requests_this_minute": len(ip_window),
                        "limit": self.max_requests_per_ip_per_minute,
                    },
                )
                raise RateLimitExceededError("Per-IP", self.max_requests_per_ip_per_minute)

            if len(self._global_requests) >= self.max_requests_per_minute_global:
                logger.warning(
                    "RATE_LIMIT_EXCEEDED",
                    extra={
                        "scope": "global",
                        "requests_this_minute": len(self._global_requests),
                        "limit": self.max_requests_per_minute_global,
                    },
                )
                raise RateLimitExceededError("Global", self.max_requests_per_minute_global)

            ip_window.append(now)
            self._ip_requests[ip_hash] = ip_window
            self._global_requests.append(now)

    def check_daily_budget(self) -> None:
        """
        Check if the daily generative budget is available.

        MUST be called BEFORE any model call.

        Raises:
            DailyBudgetExceededError: If daily limit exceeded
        """
        with self._lock:
            self._maybe_reset()

            if self._llm_calls_today >= self.max_llm_calls_per_day:
                logger.warning(
                    "DAILY_LLM_BUDGET_EXCEEDED",
                    extra={
                        "llm_calls_today": self._llm_calls_today,
                        "limit": self.max_llm_calls_per_day,
                    },
                )
                raise DailyBudgetExceededError(
                    limit_type="LLM calls",
                    used=self._llm_calls_today,
                    limit=self.max_llm_calls_per_day,
                )

            if self._tokens_today >= self.max_tokens_per_day:
                logger.warning(
                    "DAILY_TOKEN_BUDGET_EXCEEDED",
                    extra={
                        "tokens_today": self._tokens_today,
                        "limit": self.max_tokens_per_day,
                    },
                )
                raise DailyBudgetExceededError(
                    limit_type="tokens",
                    used=self._tokens_today,
                    limit=self.max_tokens_per_day,
                )

    def record_llm_call(self, input_tokens: int, output_tokens: int) -> None:
        """
        Record a model call and its token usage.

        MUST be called AFTER each model invocation, successful or not,
        when the provider reported usage.
        """
        with self._lock:
            self._maybe_reset()
            self._llm_calls_today += 1
            self._tokens_today += input_tokens + output_tokens

            logger.debug(
                "LLM_CALL_RECORDED",
                extra={
                    "llm_calls_today": self._llm_calls_today,
                    "tokens_today": self._tokens_today,
                },
            )

    def get_diagnostics(self) -> dict[str, int | str]:
        """
        Get current usage diagnostics.

        Returns:
            Dict with current usage and remaining budget.
        """
        with self._lock:
            self._maybe_reset()
            now = self.clock()
            self._prune(self._global_requests, now)
            return {
                "date": self._current_date.isoformat(),
                "requests_this_minute": len(self._global_requests),
                "tracked_ips": len(self._ip_requests),
                "llm_calls_today": self._llm_calls_today,
                "llm_calls_remaining": max(0, self.max_llm_calls_per_day - self._llm_calls_today),
                "tokens_today": self._tokens_today,
                "tokens_remaining": max(0, self.max_tokens_per_day - self._tokens_today),
                "requests_per_ip_limit": self.max_requests_per_ip_per_minute,
                "requests_global_limit": self.max_requests_per_minute_global,
                "llm_calls_limit": self.max_llm_calls_per_day,
                "tokens_limit": self.max_tokens_per_day,
            }


# =============================================================================
# GLOBAL TRACKER INSTANCE
# =============================================================================

# Singleton tracker instance
_usage_tracker: UsageTracker | None = None


def get_usage_tracker() -> UsageTracker:
    """Get the global usage tracker instance, configured from settings."""
    global _usage_tracker
    if _usage_tracker is None:
        _usage_tracker = UsageTracker(
            max_requests_per_ip_per_minute=settings.max_requests_per_ip_per_minute,
            max_requests_per_minute_global=settings.max_requests_per_minute_global,
            max_llm_calls_per_day=settings.max_llm_calls_per_day,
            max_tokens_per_day=settings.max_llm_tokens_per_day,
        )
    return _usage_tracker


def reset_usage_tracker() -> None:
    """Reset the global usage tracker (for testing)."""
    global _usage_tracker
    _usage_tracker = None


# =============================================================================
# LLM KILL SWITCH
# =============================================================================


def check_llm_enabled(llm_enabled: bool) -> None:
    """
    Check if the generative tier is enabled.

    Raises:
        LLMDisabledError: If disabled
    """
    if not llm_enabled:
        logger.info("LLM_DISABLED", extra={"llm_enabled": False})
        raise LLMDisabledError()


# =============================================================================
# COMBINED GUARD FUNCTIONS
# =============================================================================


def enforce_request_limits(ip_address: str) -> None:
    """
    Enforce request limits before any translation work.

    This is the single entry point for request-level checks; call it at
    the start of the translate endpoint.

    Raises:
        RateLimitExceededError: If the per-IP or global window is full
    """
    get_usage_tracker().check_request_limits(ip_address)


def enforce_generative_budget(llm_enabled: bool) -> None:
    """
    Enforce generative-tier guards before a model call.

    Order of checks:
    1. Kill switch (fastest, no state)
    2. Daily budget (global, quick)

    Raises:
        LLMDisabledError: If the generative tier is disabled
        DailyBudgetExceededError: If the daily budget is exhausted
    """
    check_llm_enabled(llm_enabled)
    get_usage_tracker().check_daily_budget()
