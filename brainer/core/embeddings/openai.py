"""
OpenAI embedder using official SDK.
"""

from openai import AsyncOpenAI

from brainer.core.embeddings.base import Embedder
from brainer.models.embedding import EmbeddingVector
from brainer.utils.exceptions import EmbeddingError, ValidationError
from brainer.utils.logger import get_logger

logger = get_logger(__name__)


class OpenAIEmbedder(Embedder):
    """
    OpenAI embedder for generating note embeddings.

    Defaults to text-embedding-3-small (1536 dimensions, cost-effective).
    Token usage is taken from the API response.
    """

    _MODEL_DIMENSIONS = {
        "text-embedding-3-small": 1536,
        "text-embedding-3-large": 3072,
        "text-embedding-ada-002": 1536,
    }

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        organization: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
    ):
        """
        Initialize OpenAI embedder.

        Args:
            api_key: OpenAI API key
            model: Embedding model name
            organization: Optional organization ID
            base_url: Optional custom base URL
            timeout: Request timeout in seconds
        """
        self.model = model

        self.client = AsyncOpenAI(
            api_key=api_key, organization=organization, base_url=base_url, timeout=timeout
        )

    async def embed(self, text: str, **kwargs) -> EmbeddingVector:
        """
        Generate embedding for text using OpenAI.

        Args:
            text: Text to embed
            **kwargs: Additional parameters (e.g., dimensions, user)

        Returns:
            EmbeddingVector tagged with this embedder's model

        Raises:
            ValidationError: If text is empty
            EmbeddingError: If OpenAI API call fails
        """
        if not text or not text.strip():
            raise ValidationError("Text cannot be empty")

        try:
            response = await self.client.embeddings.create(
                model=self.model, input=text, encoding_format="float", **kwargs
            )

            if not response.data:
                raise EmbeddingError("OpenAI returned empty embedding response")

            usage = getattr(response, "usage", None)
            tokens_used = getattr(usage, "total_tokens", 0) or 0

            return EmbeddingVector(
                values=response.data[0].embedding,
                model=self.model,
                tokens_used=tokens_used,
            )
        except ValidationError:
            raise
        except EmbeddingError:
            raise
        except Exception as e:
            logger.bind(
                model=self.model, error=str(e), error_type=type(e).__name__
            ).error(f"OpenAI embedding error: {e}")
            raise EmbeddingError(f"Embedding generation failed: {e}") from e

    async def get_dimension(self) -> int:
        """Known dimension for OpenAI models, probing otherwise."""
        if self.model in self._MODEL_DIMENSIONS:
            return self._MODEL_DIMENSIONS[self.model]
        return await super().get_dimension()

    async def close(self):
        """Close OpenAI client."""
        await self.client.close()
