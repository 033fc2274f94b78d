"""
Abstract base class for embedding providers.
Turns note text into model-tagged vectors for similarity comparison.
"""

from abc import ABC, abstractmethod

from brainer.models.embedding import EmbeddingVector


class Embedder(ABC):
    """
    Abstract base for embedding providers.

    Responsibilities:
    - Generate vector embeddings for text, tagged with the model name
    - Report token usage when the provider meters calls
    - Consistent vector dimensions per model
    """

    model: str

    @abstractmethod
    async def embed(self, text: str, **kwargs) -> EmbeddingVector:
        """
        Generate embedding vector for text.

        Args:
            text: Text to embed
            **kwargs: Provider-specific parameters

        Returns:
            EmbeddingVector with values, model and tokens used

        Raises:
            ValidationError: If text is invalid
            EmbeddingError: If embedding generation fails
        """
        pass

    async def get_dimension(self) -> int:
        """
        Get the dimension of embeddings produced by this provider.

        Default implementation embeds a test string.

        Returns:
            Embedding vector dimension
        """
        test_embedding = await self.embed("dimension check")
        return test_embedding.dimension

    @abstractmethod
    async def close(self):
        """Close any open connections."""
        pass
