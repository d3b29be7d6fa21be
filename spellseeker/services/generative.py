"""
Generative translation tier.

Asks Claude to translate whatever the deterministic compiler could not
resolve. The reply is a JSON object:

    {"grammarQuery": "...", "explanation": "...", "confidence": 0.0-1.0}

INVARIANTS:
- Every failure is raised as TranslatorUnavailableError; the translation
  service always recovers with the deterministic tier
- Kill switch, daily budget and circuit breaker are checked BEFORE the
  model is called
- Token usage is recorded for every call that reported it
"""

import json
import logging
from dataclasses import dataclass

import anthropic
from anthropic.types import MessageParam, TextBlock

from spellseeker.config import settings
from spellseeker.grammar.vocabulary import KNOWN_OTAGS
from spellseeker.models.failure import KnownError, TranslatorUnavailableError
from spellseeker.models.translation import SearchContext
from spellseeker.services.circuit_breaker import CircuitBreaker
from spellseeker.services.cost_controls import enforce_generative_budget, get_usage_tracker

logger = logging.getLogger(__name__)

MAX_TOKENS = 512

SYSTEM_PROMPT = f"""You translate Magic: The Gathering card descriptions into card-search \
grammar queries.

Reply with ONE JSON object and nothing else:
{{"grammarQuery": "<query>", "explanation": "<one sentence>", "confidence": <0.0-1.0>}}

Grammar rules:
- Tokens are key:value, key=value, key<value, key>=value; adjacency means AND
- OR needs parentheses: (t:instant or t:sorcery)
- Prefix a token with - to negate it
- Colors: c:r includes multicolor, c=r is exactly red, id<=rb fits a Rakdos commander deck
- "Spells" means (t:instant or t:sorcery)
- Prefer otag:<tag> for effects; use o:"text" only when no tag fits
- Use o:"enters" not o:"enters the battlefield"; o:"leaves" not o:"leaves the battlefield"
- Years use year>2020, never e:2020; e: is only for set codes
- Prices use usd<5; mana value uses mv<=3
- "cards that destroy X" want removal for X, not cards of type X

Known oracle tags: {", ".join(sorted(KNOWN_OTAGS))}
"""


@dataclass(frozen=True, slots=True)
class GenerativeTranslation:
    """A query proposed by the model."""

    grammar_query: str
    explanation: str
    confidence: float


def build_user_message(
    query: str,
    partial_query: str = "",
    remaining: str = "",
    context: SearchContext | None = None,
) -> str:
    """Compose the user turn: the request plus what the tables already resolved."""
    lines = [f"Request: {query}"]
    if partial_query:
        lines.append(f"Already resolved as: {partial_query}")
    if remaining:
        lines.append(f"Still unresolved: {remaining}")
    if context is not None:
        lines.append(
            f'Previous search "{context.previous_query}" was translated as: '
            f"{context.previous_grammar_query}"
        )
    return "\n".join(lines)


def parse_reply(text: str) -> GenerativeTranslation:
    """
    Parse the model's JSON reply.

    Tolerates surrounding prose or code fences around the object.

    Raises:
        ValueError: If no usable JSON object is present
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise ValueError("reply contained no JSON object")

    payload = json.loads(text[start : end + 1])
    if not isinstance(payload, dict):
        raise ValueError("reply JSON was not an object")

    grammar_query = str(payload.get("grammarQuery", "")).strip()
    if not grammar_query:
        raise ValueError("reply had an empty grammarQuery")

    try:
        confidence = float(payload.get("confidence", 0.7))
    except (TypeError, ValueError):
        confidence = 0.7

    return GenerativeTranslation(
        grammar_query=grammar_query,
        explanation=str(payload.get("explanation", "")).strip(),
        confidence=min(max(confidence, 0.0), 1.0),
    )


class GenerativeTranslator:
    """Claude-backed translator guarded by cost controls and a circuit breaker."""

    def __init__(
        self,
        client: anthropic.AsyncAnthropic | None = None,
        model: str = settings.anthropic_model,
        breaker: CircuitBreaker | None = None,
        llm_enabled: bool = settings.llm_enabled,
    ) -> None:
        if client is None and settings.anthropic_api_key:
            client = anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key)
        self.client = client
        self.model = model
        self.breaker = breaker or CircuitBreaker(
            failure_threshold=settings.circuit_failure_threshold,
            reset_seconds=settings.circuit_reset_seconds,
        )
        self.llm_enabled = llm_enabled

    @property
    def configured(self) -> bool:
        return self.client is not None and self.llm_enabled

    async def translate(
        self,
        query: str,
        partial_query: str = "",
        remaining: str = "",
        context: SearchContext | None = None,
    ) -> GenerativeTranslation:
        """
        Translate ``query`` with the model.

        Raises:
            TranslatorUnavailableError: If the tier is disabled, unconfigured,
                over budget, behind an open circuit, or the call failed
        """
        try:
            enforce_generative_budget(self.llm_enabled)
        except KnownError as e:
            raise TranslatorUnavailableError(e.detail or e.message) from e

        if self.client is None:
            raise TranslatorUnavailableError("Anthropic API key not configured")

        if not self.breaker.allow_request():
            raise TranslatorUnavailableError("circuit open")

        messages: list[MessageParam] = [
            {
                "role": "user",
                "content": build_user_message(query, partial_query, remaining, context),
            }
        ]

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=MAX_TOKENS,
                system=SYSTEM_PROMPT,
                messages=messages,
            )
        except anthropic.APIError as e:
            self.breaker.record_failure()
            logger.warning(
                "GENERATIVE_CALL_FAILED",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            raise TranslatorUnavailableError(f"model call failed: {e}") from e

        if response.usage:
            get_usage_tracker().record_llm_call(
                input_tokens=response.usage.input_tokens,
                output_tokens=response.usage.output_tokens,
            )

        text = "".join(block.text for block in response.content if isinstance(block, TextBlock))

        try:
            translation = parse_reply(text)
        except ValueError as e:
            self.breaker.record_failure()
            logger.warning("GENERATIVE_REPLY_UNPARSEABLE", extra={"error": str(e)})
            raise TranslatorUnavailableError(f"unparseable reply: {e}") from e

        self.breaker.record_success()
        logger.info(
            "GENERATIVE_TRANSLATED",
            extra={"query": query, "confidence": translation.confidence},
        )
        return translation
