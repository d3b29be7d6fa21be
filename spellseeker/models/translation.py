"""
Translation request/response models.

These are the wire shapes exchanged between the search orchestrator and
the translate endpoint. Field names are snake_case in Python and
camelCase on the wire.

INVARIANT: A TranslationResult is immutable once created. Substituting a
fallback produces a new result; it never edits one in place.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TranslationSource(str, Enum):
    """Which compiler tier produced the final grammar query."""

    CACHE = "cache"
    DETERMINISTIC = "deterministic"
    PATTERN_MATCH = "pattern_match"
    AI = "ai"
    CLIENT_FALLBACK = "client_fallback"


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Explanation(_WireModel):
    """Human-readable account of how a query was translated."""

    model_config = ConfigDict(frozen=True)

    readable: str = Field(default="", description="One-line summary of the query")
    assumptions: list[str] = Field(
        default_factory=list,
        description="Interpretations the translator had to make",
    )
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)


class SearchIntent(_WireModel):
    """Structured intent extracted by the deterministic compiler."""

    colors: list[str] = Field(default_factory=list)
    types: list[str] = Field(default_factory=list)
    excluded_types: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    constraints: list[str] = Field(
        default_factory=list,
        description="Numeric, price, format and date fragments",
    )
    oracle_text: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    remaining: str = Field(default="", description="Text no table could resolve")
    deterministic_query: str = Field(default="")


class TranslationResult(_WireModel):
    """The outcome of one accepted translation request."""

    model_config = ConfigDict(frozen=True)

    grammar_query: str
    explanation: Explanation = Field(default_factory=Explanation)
    source: TranslationSource = TranslationSource.AI
    validation_issues: list[str] = Field(default_factory=list)
    intent: SearchIntent | None = None
    show_affiliate: bool = False


class TranslationFilters(_WireModel):
    """External filters applied on top of a translated query."""

    format: str | None = None
    color_identity: list[str] | None = None
    max_mana_value: int | None = Field(default=None, ge=0)

    def is_empty(self) -> bool:
        return not (self.format or self.color_identity or self.max_mana_value is not None)


class SearchContext(_WireModel):
    """The previous search, passed along so follow-up queries can refine it."""

    previous_query: str
    previous_grammar_query: str


class TranslationRequest(_WireModel):
    """Request body for the translate endpoint."""

    query: str = Field(..., description="Natural-language card description")
    filters: TranslationFilters | None = None
    bypass_cache: bool = False
    cache_salt: str | None = None
    context: SearchContext | None = None


class TranslateResponse(TranslationResult):
    """Success body returned by the translate endpoint."""

    success: bool = True

    @classmethod
    def from_result(cls, result: TranslationResult) -> "TranslateResponse":
        return cls(**result.model_dump())
