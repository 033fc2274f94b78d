"""
Abstract base class for LLM providers.
Handles text generation with optional structured outputs.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel


class LLMProvider(ABC):
    """
    Abstract base for LLM text generation providers.

    Responsibilities:
    - Text completion (titles)
    - Structured output into Pydantic models (summaries)
    - Usage reporting through `last_token_usage`
    """

    model: str
    # Tokens billed by the most recent call, None when the provider didn't say
    last_token_usage: int | None = None

    @abstractmethod
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
        Generate completion from prompt.

        Args:
            prompt: The user prompt
            response_format: Optional Pydantic model for structured output
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            system: Optional system instruction
            **kwargs: Provider-specific parameters

        Returns:
            Pydantic model instance if response_format provided, else string

        Raises:
            ValidationError: If the prompt is empty or structured output can't be parsed
            LLMError: Provider-specific failures
        """
        pass

    @staticmethod
    def build_messages(prompt: str, system: str | None = None) -> list[dict[str, str]]:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    @abstractmethod
    async def close(self):
        """Close any open connections."""
