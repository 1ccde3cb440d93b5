"""
Unit Tests for Groq Call Analyzer
"""
import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from voicedash.infrastructure.llm.groq_analyzer import GroqCallAnalyzer


def completion(content):
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    return response


def analyzer_returning(content=None, error=None):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        return_value=completion(content),
        side_effect=error,
    )
    client.__aenter__.return_value = client
    factory = MagicMock(return_value=client)
    return GroqCallAnalyzer(model="llama-test", client_factory=factory), client, factory


class TestParseResponse:
    """Tests for GroqCallAnalyzer.parse_response()."""

    def test_full_result(self):
        result = GroqCallAnalyzer.parse_response(json.dumps({
            "intent": "Scheduling",
            "sentiment": "Positive",
            "outcome": "Successful",
            "appointment_date": "2024-06-02",
            "appointment_time": "2:00 PM",
            "extra": "ignored",
        }))

        assert result.intent == "Scheduling"
        assert result.appointment_time == "2:00 PM"

    def test_missing_fields_use_sentinels(self):
        result = GroqCallAnalyzer.parse_response('{"intent": ""}')

        assert result.intent == "Unknown"
        assert result.sentiment == "Neutral"
        assert result.outcome == "Unknown"
        assert result.customer_name is None

    @pytest.mark.parametrize("content", [None, "", "not json", "[1, 2]"])
    def test_unusable_content(self, content):
        assert GroqCallAnalyzer.parse_response(content) is None


class TestAnalyze:
    """Tests for GroqCallAnalyzer.analyze()."""

    @pytest.mark.asyncio
    async def test_uses_tenant_key_and_json_mode(self):
        analyzer, client, factory = analyzer_returning('{"intent": "Support", "sentiment": "Negative"}')

        result = await analyzer.analyze("Summary", "Transcript", "gsk-tenant")

        factory.assert_called_once_with("gsk-tenant")
        kwargs = client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == "llama-test"
        assert kwargs["temperature"] == 0.3
        assert kwargs["response_format"] == {"type": "json_object"}
        assert "Transcript" in kwargs["messages"][-1]["content"]
        assert result.intent == "Support"

    @pytest.mark.asyncio
    async def test_api_error_returns_none(self):
        analyzer, _, _ = analyzer_returning(error=RuntimeError("rate limited"))

        assert await analyzer.analyze("Summary", "Transcript", "gsk-tenant") is None

    @pytest.mark.asyncio
    async def test_client_closed_after_each_call(self):
        analyzer, client, factory = analyzer_returning('{"intent": "Support"}')

        for _ in range(3):
            await analyzer.analyze("Summary", "Transcript", "gsk-tenant")

        assert factory.call_count == 3
        assert client.__aexit__.await_count == 3

    @pytest.mark.asyncio
    async def test_client_closed_when_request_fails(self):
        analyzer, client, _ = analyzer_returning(error=RuntimeError("rate limited"))

        await analyzer.analyze("Summary", "Transcript", "gsk-tenant")

        client.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_garbage_content_returns_none(self):
        analyzer, _, _ = analyzer_returning("Sure! Here is the analysis:")

        assert await analyzer.analyze("Summary", "Transcript", "gsk-tenant") is None
