"""
Note model.

Notes are owned by the surrounding note-storage system; the recall core
treats them as read-only inputs except for the derived summary and
embedding attributes written back by the enrichment pipeline.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from brainer.models.embedding import EmbeddingVector
from brainer.models.topics import NoteTopics


class TranscriptionStatus(str, Enum):
    """Voice-note transcription lifecycle."""

    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class Note(BaseModel):
    """
    A user's note as seen by search and enrichment.

    Derived attributes:
    - summary / key_points: produced by the summarization service
    - extracted_topics: topics, concepts and tags from the same service
    - embedding / embedding_model: produced by the embedding pipeline,
      regenerated when content changes meaningfully
    """

    # Core identity
    id: str = Field(..., description="Unique note ID (note_xxx)")
    user_id: str = Field(..., description="Owner user ID")

    # Content
    title: str = Field(default="", description="Note title")
    content: str = Field(default="", description="Note body text")

    # Summary
    summary: str | None = Field(default=None, description="AI-generated summary")
    key_points: list[str] = Field(default_factory=list, description="Summary key points")
    summary_generated_at: datetime | None = None
    summary_tokens_used: int | None = None

    # Topics
    extracted_topics: NoteTopics | None = Field(
        default=None, description="AI-extracted topics, concepts and suggested tags"
    )
    topics_generated_at: datetime | None = None
    topics_tokens_used: int | None = None

    # Embedding
    embedding: list[float] = Field(default_factory=list, description="Vector embedding of content")
    embedding_model: str | None = Field(default=None, description="Model that produced the embedding")
    embedding_generated_at: datetime | None = None

    # Voice notes
    transcription_status: TranscriptionStatus | None = None
    transcription_confidence: float | None = None
    is_processing: bool = False

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=datetime.now, description="Last update timestamp")

    @property
    def has_embedding(self) -> bool:
        return bool(self.embedding) and self.embedding_model is not None

    @property
    def embedding_vector(self) -> EmbeddingVector | None:
        """Stored embedding as a model-tagged vector, if any."""
        if not self.has_embedding:
            return None
        return EmbeddingVector(values=self.embedding, model=self.embedding_model)

    @property
    def has_summary(self) -> bool:
        return bool(self.summary)

    @property
    def has_topics(self) -> bool:
        return self.extracted_topics is not None

    def content_preview(self, length: int = 150) -> str:
        """
        Get a preview of the body for search results.

        Args:
            length: Maximum number of characters kept

        Returns:
            First `length` characters, followed by "..." when truncated
        """
        if len(self.content) > length:
            return self.content[:length] + "..."
        return self.content
