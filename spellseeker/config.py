from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "SpellSeeker"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/spellseeker"

    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"

    # Kill switch for the generative tier. When False every request is
    # answered by the deterministic compiler alone.
    llm_enabled: bool = True

    # Remote translator used by the client-side orchestrator
    translator_url: str = "http://localhost:8000/translate"

    # Orchestrator tuning knobs
    search_timeout_seconds: float = 15.0
    rate_limit_cooldown_seconds: float = 30.0
    max_history_items: int = 20

    # Client-side throttle in front of the remote translator
    client_max_requests_per_minute: int = 20
    client_duplicate_window_seconds: float = 0.5

    # Server-side cost controls
    max_requests_per_ip_per_minute: int = 30
    max_requests_per_minute_global: int = 600
    max_llm_calls_per_day: int = 2000
    max_llm_tokens_per_day: int = 2_000_000

    # Translation caches
    cache_ttl_seconds: int = 1800
    cache_max_entries: int = 1000
    persistent_cache_ttl_hours: int = 48
    cache_min_confidence: float = 0.7

    # Circuit breaker around the generative tier
    circuit_failure_threshold: int = 5
    circuit_reset_seconds: float = 60.0


settings = Settings()


# =============================================================================
# QUERY LENGTH LIMITS
# =============================================================================

# Longest grammar query the search backend accepts
MAX_QUERY_LENGTH = 400

# Longest natural-language input accepted by the translate endpoint
MAX_INPUT_LENGTH = 500

# Natural-language inputs shorter than this are rejected as noise
MIN_INPUT_LENGTH = 3

# More key:value parameters than this in one input is treated as spam
MAX_INPUT_PARAMETERS = 15
