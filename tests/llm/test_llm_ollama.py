"""
Tests for Ollama LLM provider.
"""

from unittest.mock import AsyncMock

import pytest

from brainer.core.llm.ollama import OllamaLLM
from brainer.models.summary import SummaryPayload
from brainer.utils.exceptions import LLMError, ValidationError


@pytest.fixture
def ollama_llm():
    return OllamaLLM(model="llama3.1:8b")


def chat_response(content: str, prompt_tokens: int = 20, output_tokens: int = 10) -> dict:
    return {
        "message": {"role": "assistant", "content": content},
        "prompt_eval_count": prompt_tokens,
        "eval_count": output_tokens,
    }


@pytest.mark.unit
@pytest.mark.asyncio
class TestOllamaLLM:
    """Test Ollama LLM provider with a mocked client."""

    async def test_complete_text(self, ollama_llm):
        ollama_llm.client.chat = AsyncMock(return_value=chat_response("Garden Plans"))

        result = await ollama_llm.complete("Title this", max_tokens=20, temperature=0.3)

        assert result == "Garden Plans"
        assert ollama_llm.last_token_usage == 30
        kwargs = ollama_llm.client.chat.call_args.kwargs
        assert kwargs["format"] is None
        assert kwargs["options"] == {"temperature": 0.3, "num_predict": 20}

    async def test_complete_structured(self, ollama_llm):
        ollama_llm.client.chat = AsyncMock(
            return_value=chat_response('{"summary": "Short.", "key_points": ["a", "b"]}')
        )

        result = await ollama_llm.complete("Summarize", response_format=SummaryPayload)

        assert result == SummaryPayload(summary="Short.", key_points=["a", "b"])
        kwargs = ollama_llm.client.chat.call_args.kwargs
        assert kwargs["format"] == "json"
        assert "key_points" in kwargs["messages"][-1]["content"]

    async def test_structured_in_code_fence(self, ollama_llm):
        ollama_llm.client.chat = AsyncMock(
            return_value=chat_response('```json\n{"summary": "Short.", "key_points": []}\n```')
        )

        result = await ollama_llm.complete("Summarize", response_format=SummaryPayload)

        assert result.summary == "Short."

    async def test_unparseable_structured_output(self, ollama_llm):
        ollama_llm.client.chat = AsyncMock(return_value=chat_response("not json at all"))

        with pytest.raises(ValidationError, match="Failed to parse structured output"):
            await ollama_llm.complete("Summarize", response_format=SummaryPayload)

    async def test_usage_unknown_when_not_reported(self, ollama_llm):
        ollama_llm.client.chat = AsyncMock(
            return_value={"message": {"role": "assistant", "content": "ok"}}
        )

        await ollama_llm.complete("Title this")

        assert ollama_llm.last_token_usage is None

    async def test_connection_error(self, ollama_llm):
        ollama_llm.client.chat = AsyncMock(side_effect=ConnectionError("refused"))

        with pytest.raises(LLMError, match="Ollama API error"):
            await ollama_llm.complete("Title this")

    async def test_empty_prompt(self, ollama_llm):
        with pytest.raises(ValidationError):
            await ollama_llm.complete("")
