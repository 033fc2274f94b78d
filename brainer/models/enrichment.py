"""Results of embedding generation requests."""

from pydantic import BaseModel, Field, computed_field


class NoteEmbeddingResult(BaseModel):
    """Outcome of generating (or skipping) one note's embedding."""

    note_id: str
    generated: bool
    has_embedding: bool
    message: str
    embedding_model: str | None = None
    tokens_used: int = 0


class BatchEmbeddingItem(BaseModel):
    """Per-note entry of a backfill run."""

    id: str
    title: str
    status: str  # success, error
    tokens_used: int = 0
    error: str | None = None


class BatchEmbeddingReport(BaseModel):
    """Summary of a backfill run over a user's notes."""

    job_id: str
    total_notes_checked: int = 0
    notes_processed: int = 0
    success_count: int = 0
    error_count: int = 0
    results: list[BatchEmbeddingItem] = Field(default_factory=list)

    @computed_field
    @property
    def message(self) -> str:
        return f"Processed {self.notes_processed} notes"
