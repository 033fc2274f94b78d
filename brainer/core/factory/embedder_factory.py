"""
Factory for creating embedder providers.
"""

from brainer.config import EmbedderConfig
from brainer.core.embeddings.base import Embedder
from brainer.core.embeddings.ollama import OllamaEmbedder
from brainer.core.embeddings.openai import OpenAIEmbedder
from brainer.core.tokenizer import Tokenizer
from brainer.utils.exceptions import ConfigurationError


class EmbedderFactory:
    """Factory for creating embedder providers from configuration."""

    @staticmethod
    def create(config: EmbedderConfig, tokenizer: Tokenizer | None = None) -> Embedder:
        """
        Create embedder from configuration.

        Args:
            config: Embedder configuration
            tokenizer: Token counter for providers that don't report usage

        Returns:
            Embedder instance

        Raises:
            ConfigurationError: If provider is unsupported or misconfigured
        """
        if config.provider == "openai":
            if not config.api_key:
                raise ConfigurationError("OpenAI API key is required for embeddings")
            return OpenAIEmbedder(
                api_key=config.api_key,
                model=config.model,
                base_url=config.base_url,
                timeout=config.timeout,
            )
        elif config.provider == "ollama":
            return OllamaEmbedder(
                host=config.base_url or "http://localhost:11434",
                model=config.model,
                timeout=config.timeout,
                tokenizer=tokenizer,
            )
        else:
            raise ConfigurationError(f"Unsupported embedder provider: {config.provider}")

    @staticmethod
    async def get_dimension(embedder: Embedder, config: EmbedderConfig | None = None) -> int:
        """
        Get embedding dimension, preferring the configured value over a sample embedding call.
        """
        if config and config.dimension:
            return config.dimension
        return await embedder.get_dimension()
