"""
OpenAI LLM provider using official SDK.
"""

from openai import AsyncOpenAI
from pydantic import BaseModel

from brainer.core.llm.base import LLMProvider
from brainer.utils.exceptions import LLMError, ValidationError
from brainer.utils.logger import get_logger

logger = get_logger(__name__)


class OpenAILLM(LLMProvider):
    """
    OpenAI LLM provider for summaries and titles.

    Uses native structured outputs (parse API) when a response model is given.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        organization: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
    ):
        """
        Initialize OpenAI LLM provider.

        Args:
            api_key: OpenAI API key
            model: Model name (e.g., "gpt-3.5-turbo", "gpt-4o-mini")
            organization: Optional organization ID
            base_url: Optional custom base URL
            timeout: Request timeout in seconds
        """
        self.model = model
        self.last_token_usage = None

        self.client = AsyncOpenAI(
            api_key=api_key, organization=organization, base_url=base_url, timeout=timeout
        )

    async def complete(
        self,
        prompt: str,
        response_format: type[BaseModel] | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.0,
        system: str | None = None,
        **kwargs,
    ) -> BaseModel | str:
        """
        Generate completion using OpenAI.

        Raises:
            LLMError: If OpenAI API call fails
            ValidationError: If prompt is empty or structured output is missing
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt cannot be empty")

        params = {
            "model": self.model,
            "messages": self.build_messages(prompt, system),
            "temperature": temperature,
            "max_tokens": max_tokens,
            **kwargs,
        }

        self.last_token_usage = None
        try:
            if response_format:
                response = await self.client.chat.completions.parse(
                    **params, response_format=response_format
                )
                self._record_usage(response)

                parsed = response.choices[0].message.parsed
                if not parsed:
                    raise ValidationError("OpenAI returned empty parsed response")

                return parsed

            response = await self.client.chat.completions.create(**params)
            self._record_usage(response)
            content = response.choices[0].message.content

            if not content:
                raise LLMError("OpenAI returned empty content")

            return content
        except (ValidationError, LLMError):
            raise
        except Exception as e:
            logger.bind(
                model=self.model, error=str(e), error_type=type(e).__name__
            ).error(f"OpenAI API error: {e}")
            raise LLMError(f"OpenAI API error: {e}") from e

    def _record_usage(self, response) -> None:
        usage = getattr(response, "usage", None)
        total = getattr(usage, "total_tokens", None)
        self.last_token_usage = total if isinstance(total, int) else None

    async def close(self):
        """Close OpenAI client."""
        await self.client.close()
