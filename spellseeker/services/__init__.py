"""
SpellSeeker services.

The server-side translation pipeline and its guards, and the
client-side search orchestrator with its translator client.
"""

from spellseeker.services.circuit_breaker import CircuitBreaker, CircuitState
from spellseeker.services.cost_controls import (
    DailyBudgetExceededError,
    LLMDisabledError,
    RateLimitExceededError,
    UsageTracker,
    enforce_request_limits,
    get_usage_tracker,
    reset_usage_tracker,
)
from spellseeker.services.generative import GenerativeTranslation, GenerativeTranslator
from spellseeker.services.orchestrator import (
    Notice,
    NoticeLevel,
    SearchOrchestrator,
    is_rate_limit_error,
)
from spellseeker.services.search_history import SearchHistory
from spellseeker.services.translation import TranslationService
from spellseeker.services.translation_cache import TranslationCache, cache_key
from spellseeker.services.translator_client import (
    TranslatorClient,
    TranslatorError,
    TranslatorRateLimitedError,
)

__all__ = [
    "CircuitBreaker",
    "CircuitState",
    "DailyBudgetExceededError",
    "GenerativeTranslation",
    "GenerativeTranslator",
    "LLMDisabledError",
    "Notice",
    "NoticeLevel",
    "RateLimitExceededError",
    "SearchHistory",
    "SearchOrchestrator",
    "TranslationCache",
    "TranslationService",
    "TranslatorClient",
    "TranslatorError",
    "TranslatorRateLimitedError",
    "UsageTracker",
    "cache_key",
    "enforce_request_limits",
    "get_usage_tracker",
    "is_rate_limit_error",
    "reset_usage_tracker",
]
