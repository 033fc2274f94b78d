"""
Search result models.

ScoredCandidate exists only for the duration of one ranking call;
SimilarNote and SearchResponse are what leaves the service.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from brainer.models.note import Note


class ScoringMethod(str, Enum):
    """Signal that produced a candidate's score."""

    TEXT_OVERLAP = "text_overlap"
    EMBEDDING = "embedding"


class SimilarNote(BaseModel):
    """Note recalled for a query, shaped for the editor."""

    id: str
    title: str
    content: str = Field(..., description="Body preview")
    similarity: float
    created_at: datetime
    summary: str | None = None
    matched_terms: list[str] = Field(default_factory=list)


class ScoredCandidate(BaseModel):
    """A note evaluated against a query."""

    note: Note
    score: float = Field(..., ge=-1.0, le=1.0)
    matched_terms: list[str] = Field(default_factory=list)
    method: ScoringMethod = ScoringMethod.TEXT_OVERLAP

    def to_similar_note(self, preview_length: int = 150) -> SimilarNote:
        return SimilarNote(
            id=self.note.id,
            title=self.note.title,
            content=self.note.content_preview(preview_length),
            similarity=round(self.score, 2),
            created_at=self.note.created_at,
            summary=self.note.summary or None,
            matched_terms=self.matched_terms,
        )


class SearchResponse(BaseModel):
    """Response of a similar-notes search."""

    results: list[SimilarNote] = Field(default_factory=list)
    query: str
    fallback_mode: bool = True
    tokens_used: int = 0
