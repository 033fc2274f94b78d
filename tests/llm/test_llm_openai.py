"""
Tests for OpenAI LLM provider.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from brainer.core.llm.openai import OpenAILLM
from brainer.models.summary import SummaryPayload
from brainer.utils.exceptions import LLMError, ValidationError


@pytest.fixture
def openai_llm():
    """Create OpenAI LLM for testing."""
    return OpenAILLM(api_key="test-key", model="gpt-3.5-turbo", timeout=120.0)


def completion(content=None, parsed=None, total_tokens=30):
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content, parsed=parsed))]
    response.usage = MagicMock(total_tokens=total_tokens)
    return response


@pytest.mark.unit
@pytest.mark.asyncio
class TestOpenAILLM:
    """Test OpenAI LLM provider."""

    async def test_initialization(self, openai_llm):
        assert openai_llm.model == "gpt-3.5-turbo"
        assert openai_llm.client is not None
        assert openai_llm.last_token_usage is None

    async def test_complete_simple(self, openai_llm):
        openai_llm.client.chat.completions.create = AsyncMock(
            return_value=completion(content="Weekly Sync Notes")
        )

        result = await openai_llm.complete("Title this", system="Be brief", max_tokens=20)

        assert result == "Weekly Sync Notes"
        assert openai_llm.last_token_usage == 30
        kwargs = openai_llm.client.chat.completions.create.call_args.kwargs
        assert kwargs["messages"] == [
            {"role": "system", "content": "Be brief"},
            {"role": "user", "content": "Title this"},
        ]
        assert kwargs["max_tokens"] == 20

    async def test_complete_structured(self, openai_llm):
        payload = SummaryPayload(summary="Short.", key_points=["a"])
        openai_llm.client.chat.completions.parse = AsyncMock(
            return_value=completion(parsed=payload, total_tokens=55)
        )

        result = await openai_llm.complete("Summarize", response_format=SummaryPayload)

        assert result == payload
        assert openai_llm.last_token_usage == 55
        kwargs = openai_llm.client.chat.completions.parse.call_args.kwargs
        assert kwargs["response_format"] is SummaryPayload

    async def test_structured_missing_parse(self, openai_llm):
        openai_llm.client.chat.completions.parse = AsyncMock(return_value=completion(parsed=None))

        with pytest.raises(ValidationError):
            await openai_llm.complete("Summarize", response_format=SummaryPayload)

    async def test_empty_prompt(self, openai_llm):
        with pytest.raises(ValidationError):
            await openai_llm.complete("  ")

    async def test_empty_content(self, openai_llm):
        openai_llm.client.chat.completions.create = AsyncMock(return_value=completion(content=""))

        with pytest.raises(LLMError):
            await openai_llm.complete("Title this")

    async def test_api_error(self, openai_llm):
        openai_llm.client.chat.completions.create = AsyncMock(side_effect=Exception("API Error"))

        with pytest.raises(LLMError, match="OpenAI API error"):
            await openai_llm.complete("Title this")
        assert openai_llm.last_token_usage is None

    async def test_api_error_with_braces(self, openai_llm):
        openai_llm.client.chat.completions.create = AsyncMock(
            side_effect=Exception("Error code: 400 - {'error': {'message': 'bad request'}}")
        )

        with pytest.raises(LLMError, match="400"):
            await openai_llm.complete("Title this")

    async def test_close(self, openai_llm):
        openai_llm.client.close = AsyncMock()
        await openai_llm.close()
        openai_llm.client.close.assert_called_once()
