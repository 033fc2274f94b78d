"""Topic extraction models."""

from datetime import datetime

from pydantic import BaseModel, Field


class TopicPayload(BaseModel):
    """Structured output requested from the LLM."""

    topics: list[str] = Field(default_factory=list, description="Broad themes (3-8)")
    concepts: list[str] = Field(
        default_factory=list, description="Specific ideas or terms (5-12)"
    )
    tags: list[str] = Field(default_factory=list, description="Searchable keywords (3-6)")


class NoteTopics(BaseModel):
    """Topics, concepts and suggested tags as stored on a note."""

    topics: list[str] = Field(default_factory=list)
    concepts: list[str] = Field(default_factory=list)
    suggested_tags: list[str] = Field(default_factory=list)


class TopicResult(BaseModel):
    """Extracted topics plus accounting."""

    topics: NoteTopics
    tokens_used: int = 0


class TopicExtractionResult(BaseModel):
    """Outcome of extracting (or reusing) one note's topics."""

    note_id: str
    generated: bool
    message: str
    topics: NoteTopics
    tokens_used: int = 0
    topics_generated_at: datetime | None = None
