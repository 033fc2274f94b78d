"""
Ollama embedder using native ollama-python SDK.

Ollama does not meter calls; token usage is estimated with the tokenizer.
"""

import ollama

from brainer.core.embeddings.base import Embedder
from brainer.core.tokenizer import Tokenizer
from brainer.models.embedding import EmbeddingVector
from brainer.utils.exceptions import EmbeddingError, ValidationError
from brainer.utils.logger import get_logger

logger = get_logger(__name__)


class OllamaEmbedder(Embedder):
    """
    Ollama embedder for local embedding models
    (nomic-embed-text, mxbai-embed-large, ...).
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "nomic-embed-text",
        timeout: float = 120.0,
        tokenizer: Tokenizer | None = None,
    ):
        """
        Initialize Ollama embedder.

        Args:
            host: Ollama server URL
            model: Embedding model name
            timeout: Request timeout in seconds
            tokenizer: Token counter used for usage accounting
        """
        self.host = host
        self.model = model
        self.timeout = timeout
        self.tokenizer = tokenizer or Tokenizer()
        self._dimension: int | None = None

        self.client = ollama.AsyncClient(host=host, timeout=timeout)

    async def embed(self, text: str, **kwargs) -> EmbeddingVector:
        """
        Generate embedding for text using Ollama.

        Raises:
            ValidationError: If text is empty
            EmbeddingError: If Ollama embedding fails
        """
        if not text or not text.strip():
            raise ValidationError("Text cannot be empty")

        try:
            response = await self.client.embeddings(model=self.model, prompt=text, **kwargs)

            if not response or "embedding" not in response:
                raise EmbeddingError("Ollama returned invalid embedding response")

            return EmbeddingVector(
                values=list(response["embedding"]),
                model=self.model,
                tokens_used=self.tokenizer.count_tokens(text),
            )
        except (ValidationError, EmbeddingError):
            raise
        except Exception as e:
            logger.bind(
                model=self.model, host=self.host, error=str(e)
            ).error(f"Ollama embedding error: {e}")
            raise EmbeddingError(f"Embedding generation failed: {e}") from e

    async def get_dimension(self) -> int:
        """Embed a sample once and cache the length."""
        if self._dimension is None:
            self._dimension = await super().get_dimension()
        return self._dimension

    async def close(self):
        """Close client (Ollama SDK handles cleanup internally)."""
        pass
