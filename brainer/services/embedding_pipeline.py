"""
Embedding Pipeline.

Normalizes note text, requests embeddings from the configured provider and
compares vectors by cosine similarity. Embeddings are generated
opportunistically (after transcription, on demand, in backfill batches);
search does not wait on them.
"""

import re

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity

from brainer.config import EmbedderConfig
from brainer.core.embeddings.base import Embedder
from brainer.models.embedding import EmbeddingVector
from brainer.models.note import Note
from brainer.utils.exceptions import (
    DimensionMismatchError,
    EmbeddingError,
    InputTooShortError,
    ValidationError,
)
from brainer.utils.logger import get_logger

logger = get_logger(__name__)

MIN_EMBEDDING_CHARS = 10
MAX_EMBEDDING_CHARS = 8000
MIN_EMBEDDING_WORDS = 10

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED_CHARS = re.compile(r"[^\w\s.,!?-]")
_HEADING = re.compile(r"^#{1,6}\s+", re.MULTILINE)
_BOLD = re.compile(r"\*\*(.*?)\*\*")
_ITALIC = re.compile(r"\*(.*?)\*")
_CODE = re.compile(r"`(.*?)`")

_METADATA_PATTERNS = (
    re.compile(r"^(file:|status:|job:|error:|transcription)", re.IGNORECASE),
    re.compile(r"^(uploading|processing|completed|failed)", re.IGNORECASE),
    re.compile(r"^\d+%\s+(confidence|completed)", re.IGNORECASE),
)


# ═══════════════════════════════════════════════════════════
# TEXT PREPARATION
# ═══════════════════════════════════════════════════════════


def normalize_for_embedding(text: str, max_chars: int = MAX_EMBEDDING_CHARS) -> str:
    """
    Clean text right before it is sent to the provider.

    Collapses whitespace, drops characters other than word characters,
    whitespace and basic punctuation, and truncates to the provider's
    input limit.
    """
    cleaned = _WHITESPACE.sub(" ", text)
    cleaned = _DISALLOWED_CHARS.sub("", cleaned)
    return cleaned.strip()[:max_chars]


def prepare_content_for_embedding(content: str) -> str:
    """
    Strip markdown markup so the embedding reflects meaning, not formatting.

    Removes heading markers and bold/italic/code delimiters, then collapses
    whitespace. Lossy by intent.
    """
    text = _HEADING.sub("", content)
    text = _BOLD.sub(r"\1", text)
    text = _ITALIC.sub(r"\1", text)
    text = _CODE.sub(r"\1", text)
    return _WHITESPACE.sub(" ", text).strip()


def is_metadata_only(content: str) -> bool:
    """True for system-generated status text (upload/transcription banners)."""
    stripped = content.strip()
    return any(pattern.search(stripped) for pattern in _METADATA_PATTERNS)


def should_generate_embedding(content: str) -> bool:
    """
    Decide whether a note has enough real content to be worth embedding.

    Requires at least 10 words after markdown stripping and rejects
    metadata-only text such as "Status: Processing 45% confidence".
    """
    cleaned = prepare_content_for_embedding(content)
    word_count = len(cleaned.split())
    return word_count >= MIN_EMBEDDING_WORDS and not is_metadata_only(cleaned)


def embedding_text_for_note(note: Note) -> str:
    """Title plus prepared body, the text a note is embedded from."""
    return f"{note.title}\n\n{prepare_content_for_embedding(note.content)}"


# ═══════════════════════════════════════════════════════════
# VECTOR MATH
# ═══════════════════════════════════════════════════════════


def calculate_cosine_similarity(vector_a: list[float], vector_b: list[float]) -> float:
    """
    Cosine similarity between two vectors.

    Args:
        vector_a: First vector
        vector_b: Second vector

    Returns:
        dot(a, b) / (|a| * |b|), or 0.0 when either vector has zero magnitude

    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    if len(vector_a) != len(vector_b):
        raise DimensionMismatchError(
            "Vectors must have the same dimension",
            context={"dimension_a": len(vector_a), "dimension_b": len(vector_b)},
        )

    a = np.asarray(vector_a, dtype=float)
    b = np.asarray(vector_b, dtype=float)

    magnitude = float(np.linalg.norm(a) * np.linalg.norm(b))
    if magnitude == 0.0:
        return 0.0

    similarity = float(np.dot(a, b) / magnitude)
    return max(-1.0, min(1.0, similarity))


def compare_embeddings(a: EmbeddingVector, b: EmbeddingVector) -> float:
    """
    Cosine similarity between two model-tagged embeddings.

    Raises:
        DimensionMismatchError: If the embeddings come from different models
            or differ in dimension
    """
    if a.model != b.model:
        raise DimensionMismatchError(
            "Embeddings from different models are not comparable",
            context={"model_a": a.model, "model_b": b.model},
        )
    return calculate_cosine_similarity(a.values, b.values)


def batch_cosine_similarity(query: list[float], vectors: list[list[float]]) -> list[float]:
    """
    Cosine similarity of one query vector against many.

    Zero-magnitude rows score 0.0.

    Raises:
        DimensionMismatchError: If any vector differs in length from the query
    """
    if not vectors:
        return []

    dimension = len(query)
    for vector in vectors:
        if len(vector) != dimension:
            raise DimensionMismatchError(
                "Vectors must have the same dimension",
                context={"dimension_a": dimension, "dimension_b": len(vector)},
            )

    matrix = np.asarray(vectors, dtype=float)
    scores = cosine_similarity(np.asarray(query, dtype=float).reshape(1, -1), matrix)[0]
    return [float(np.clip(score, -1.0, 1.0)) for score in scores]


# ═══════════════════════════════════════════════════════════
# GENERATION
# ═══════════════════════════════════════════════════════════


class EmbeddingPipeline:
    """
    Prepares text and turns it into EmbeddingVectors via an Embedder.

    Inputs shorter than the minimum are rejected locally so no paid call is
    made for text that would produce an uninformative vector.
    """

    def __init__(self, embedder: Embedder, config: EmbedderConfig | None = None):
        """
        Initialize pipeline.

        Args:
            embedder: Embedding provider
            config: Embedder configuration (input length limits)
        """
        self.embedder = embedder
        self.config = config or EmbedderConfig()

    @property
    def model(self) -> str:
        return self.embedder.model

    async def generate_embedding(self, text: str) -> EmbeddingVector:
        """
        Generate an embedding for text.

        Args:
            text: Raw text

        Returns:
            EmbeddingVector with values, model and token cost

        Raises:
            InputTooShortError: If trimmed text is under the minimum length
            EmbeddingError: If the provider call fails
        """
        if not text or len(text.strip()) < self.config.min_input_chars:
            raise InputTooShortError(
                f"Text is too short to generate embedding "
                f"(minimum {self.config.min_input_chars} characters)",
                context={"length": len(text.strip()) if text else 0},
            )

        clean_text = normalize_for_embedding(text, self.config.max_input_chars)
        if not clean_text:
            raise InputTooShortError("Text has no embeddable content after normalization")

        try:
            embedding = await self.embedder.embed(clean_text)
        except EmbeddingError:
            raise
        except ValidationError as e:
            raise InputTooShortError(str(e)) from e
        except Exception as e:
            logger.bind(
                model=self.model, error=str(e), error_type=type(e).__name__
            ).error(f"Embedding generation failed: {e}")
            raise EmbeddingError(f"Embedding generation failed: {e}") from e

        logger.bind(
            model=embedding.model,
            dimension=embedding.dimension,
            tokens_used=embedding.tokens_used,
        ).debug("Embedding generated")
        return embedding

    async def embed_note(self, note: Note) -> EmbeddingVector:
        """Embed a note's title and prepared body."""
        return await self.generate_embedding(embedding_text_for_note(note))

