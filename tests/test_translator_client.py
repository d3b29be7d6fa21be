"""Tests for the remote translator client."""

import asyncio
import json

import httpx
import pytest
import respx

from spellseeker.models.failure import FailureKind
from spellseeker.models.translation import TranslationRequest, TranslationSource
from spellseeker.services.translator_client import (
    TranslatorClient,
    TranslatorError,
    TranslatorRateLimitedError,
)

URL = "http://translator.test/translate"


def _success_body(query: str = "otag:ramp c:g", source: str | None = "deterministic") -> dict:
    body = {
        "success": True,
        "grammarQuery": query,
        "explanation": {"readable": "Green ramp", "assumptions": [], "confidence": 0.85},
        "validationIssues": [],
        "showAffiliate": False,
    }
    if source is not None:
        body["source"] = source
    return body


@pytest.fixture
def client(clock) -> TranslatorClient:
    return TranslatorClient(
        url=URL,
        max_requests_per_minute=3,
        duplicate_window_seconds=0.5,
        clock=clock,
    )


class TestTranslate:
    @pytest.mark.asyncio
    @respx.mock
    async def test_successful_translation(self, client: TranslatorClient) -> None:
        """A success body becomes a TranslationResult."""
        route = respx.post(URL).mock(return_value=httpx.Response(200, json=_success_body()))

        result = await client.translate(TranslationRequest(query="green ramp"))

        assert result.grammar_query == "otag:ramp c:g"
        assert result.source == TranslationSource.DETERMINISTIC
        assert result.explanation.readable == "Green ramp"
        payload = json.loads(route.calls.last.request.content)
        assert payload == {"query": "green ramp", "bypassCache": False}

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_source_defaults_to_ai(self, client: TranslatorClient) -> None:
        respx.post(URL).mock(return_value=httpx.Response(200, json=_success_body(source=None)))

        result = await client.translate(TranslationRequest(query="green ramp"))

        assert result.source == TranslationSource.AI

    @pytest.mark.asyncio
    @respx.mock
    async def test_failure_body_raises(self, client: TranslatorClient) -> None:
        """success: false is an error even with HTTP 200."""
        respx.post(URL).mock(
            return_value=httpx.Response(200, json={"success": False, "error": "Query rejected"})
        )

        with pytest.raises(TranslatorError, match="Query rejected"):
            await client.translate(TranslationRequest(query="green ramp"))

    @pytest.mark.asyncio
    @respx.mock
    async def test_empty_query_raises(self, client: TranslatorClient) -> None:
        respx.post(URL).mock(return_value=httpx.Response(200, json=_success_body(query="")))

        with pytest.raises(TranslatorError, match="empty query"):
            await client.translate(TranslationRequest(query="green ramp"))

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_rate_limit(self, client: TranslatorClient) -> None:
        """HTTP 429 is surfaced as a rate-limit error with the server's message."""
        respx.post(URL).mock(
            return_value=httpx.Response(
                429, json={"success": False, "error": "Rate limit exceeded. Please wait."}
            )
        )

        with pytest.raises(TranslatorRateLimitedError) as exc_info:
            await client.translate(TranslationRequest(query="green ramp"))

        assert exc_info.value.status_code == 429
        assert exc_info.value.kind == FailureKind.RATE_LIMITED
        assert exc_info.value.message == "Rate limit exceeded. Please wait."

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error(self, client: TranslatorClient) -> None:
        """Other HTTP errors keep their status."""
        respx.post(URL).mock(
            return_value=httpx.Response(500, json={"success": False, "error": "boom"})
        )

        with pytest.raises(TranslatorError) as exc_info:
            await client.translate(TranslationRequest(query="green ramp"))

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Translation failed: boom"

    @pytest.mark.asyncio
    @respx.mock
    async def test_unreachable(self, client: TranslatorClient) -> None:
        respx.post(URL).mock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(TranslatorError, match="Translator unreachable"):
            await client.translate(TranslationRequest(query="green ramp"))


class TestSharingAndThrottle:
    @pytest.mark.asyncio
    @respx.mock
    async def test_identical_requests_share_one_call(self, client: TranslatorClient) -> None:
        """Concurrent identical requests make a single network call."""
        route = respx.post(URL).mock(return_value=httpx.Response(200, json=_success_body()))

        first, second = await asyncio.gather(
            client.translate(TranslationRequest(query="green ramp")),
            client.translate(TranslationRequest(query="Green  Ramp")),
        )

        assert route.call_count == 1
        assert first == second
        assert client.in_flight == 0

    @pytest.mark.asyncio
    @respx.mock
    async def test_duplicate_inside_window_refused(self, client: TranslatorClient, clock) -> None:
        """Repeating a query immediately is throttled; after the window it is not."""
        route = respx.post(URL).mock(return_value=httpx.Response(200, json=_success_body()))
        await client.translate(TranslationRequest(query="green ramp"))

        with pytest.raises(TranslatorRateLimitedError, match="duplicate search"):
            await client.translate(TranslationRequest(query="green ramp"))

        clock.advance(1.0)
        await client.translate(TranslationRequest(query="green ramp"))

        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_per_minute_limit(self, client: TranslatorClient, clock) -> None:
        """Successful calls are capped per sliding minute."""
        respx.post(URL).mock(return_value=httpx.Response(200, json=_success_body()))
        for query in ("elves", "goblins", "zombies"):
            await client.translate(TranslationRequest(query=query))

        with pytest.raises(TranslatorRateLimitedError, match="too many searches"):
            await client.translate(TranslationRequest(query="dragons"))

        clock.advance(60.0)
        await client.translate(TranslationRequest(query="dragons"))

    @pytest.mark.asyncio
    @respx.mock
    async def test_failed_calls_not_counted(self, client: TranslatorClient) -> None:
        """A failure does not arm the duplicate throttle."""
        route = respx.post(URL).mock(return_value=httpx.Response(500))

        for _ in range(2):
            with pytest.raises(TranslatorError) as exc_info:
                await client.translate(TranslationRequest(query="green ramp"))
            assert exc_info.value.status_code == 500

        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_bypass_cache_skips_throttle(self, client: TranslatorClient) -> None:
        """Regenerate requests are never shared or throttled."""
        route = respx.post(URL).mock(return_value=httpx.Response(200, json=_success_body()))
        await client.translate(TranslationRequest(query="green ramp"))

        await client.translate(
            TranslationRequest(query="green ramp", bypass_cache=True, cache_salt="a1")
        )

        assert route.call_count == 2
        payload = json.loads(route.calls.last.request.content)
        assert payload["bypassCache"] is True
        assert payload["cacheSalt"] == "a1"
