"""
Factory for creating LLM providers.
"""

from brainer.config import LLMConfig
from brainer.core.llm.base import LLMProvider
from brainer.core.llm.ollama import OllamaLLM
from brainer.core.llm.openai import OpenAILLM
from brainer.utils.exceptions import ConfigurationError


class LLMFactory:
    """Factory for creating LLM providers from configuration."""

    @staticmethod
    def create(config: LLMConfig) -> LLMProvider:
        """
        Create LLM provider from configuration.

        Raises:
            ConfigurationError: If provider is unsupported or misconfigured
        """
        if config.provider == "openai":
            if not config.api_key:
                raise ConfigurationError("OpenAI API key is required for summaries")
            return OpenAILLM(
                api_key=config.api_key,
                model=config.model,
                base_url=config.base_url,
                timeout=config.timeout,
            )
        elif config.provider == "ollama":
            return OllamaLLM(
                host=config.base_url or "http://localhost:11434",
                model=config.model,
                timeout=config.timeout,
            )
        else:
            raise ConfigurationError(f"Unsupported LLM provider: {config.provider}")
