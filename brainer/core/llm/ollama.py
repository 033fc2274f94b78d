"""
Ollama LLM provider using native ollama-python SDK.
"""

import json

import ollama
from pydantic import BaseModel

from brainer.core.llm.base import LLMProvider
from brainer.utils.exceptions import LLMError, ValidationError
from brainer.utils.logger import get_logger

logger = get_logger(__name__)


class OllamaLLM(LLMProvider):
    """
    Ollama LLM provider for local summaries and titles.

    Structured outputs use JSON mode plus an example shape in the prompt.
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "llama3.1:8b",
        timeout: float = 120.0,
    ):
        """
        Initialize Ollama LLM provider.

        Args:
            host: Ollama server URL
            model: Model name for text generation
            timeout: Request timeout in seconds
        """
        self.host = host
        self.model = model
        self.timeout = timeout
        self.last_token_usage = None

        self.client = ollama.AsyncClient(host=host, timeout=timeout)

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
        Generate completion using Ollama.

        Raises:
            ValidationError: If prompt is empty or structured output parsing fails
            LLMError: If the Ollama call fails
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt cannot be empty")

        options = {
            "temperature": temperature,
            "num_predict": max_tokens,
            **kwargs.pop("options", {}),
        }

        format_type = None
        if response_format:
            format_type = "json"
            prompt = self._with_json_shape(prompt, response_format)

        self.last_token_usage = None
        try:
            response = await self.client.chat(
                model=self.model,
                messages=self.build_messages(prompt, system),
                format=format_type,
                options=options,
                **kwargs,
            )
        except Exception as e:
            logger.bind(
                model=self.model, host=self.host, error=str(e)
            ).error(f"Ollama API error: {e}")
            raise LLMError(f"Ollama API error: {e}") from e

        prompt_tokens = response.get("prompt_eval_count") or 0
        output_tokens = response.get("eval_count") or 0
        self.last_token_usage = (prompt_tokens + output_tokens) or None

        content = response["message"]["content"]
        if not response_format:
            if not content:
                raise LLMError("Ollama returned empty content")
            return content

        try:
            return response_format.model_validate_json(self._extract_json(content))
        except Exception as e:
            raise ValidationError(
                f"Failed to parse structured output as {response_format.__name__}: {e}",
                context={"raw": content[:500]},
            ) from e

    @staticmethod
    def _with_json_shape(prompt: str, response_format: type[BaseModel]) -> str:
        """Append an example JSON object built from the model's fields."""
        example = {}
        for field_name, field_info in response_format.model_json_schema().get(
            "properties", {}
        ).items():
            field_type = field_info.get("type", "string")
            if field_type == "array":
                example[field_name] = [f"<{field_name} item>"]
            elif field_type in ("number", "integer"):
                example[field_name] = 0
            elif field_type == "boolean":
                example[field_name] = True
            else:
                example[field_name] = f"<{field_name}>"

        return (
            f"{prompt}\n\nRespond with valid JSON only, matching this structure:\n"
            f"{json.dumps(example, indent=2)}"
        )

    @staticmethod
    def _extract_json(content: str) -> str:
        """Strip markdown code fences around a JSON payload."""
        content = content.strip()
        if "```json" in content:
            content = content.split("```json")[1].split("```")[0].strip()
        elif "```" in content:
            content = content.split("```")[1].split("```")[0].strip()
        return content

    async def close(self):
        """Close client (Ollama SDK handles cleanup internally)."""
        pass
