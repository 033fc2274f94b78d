"""Transcription result model."""

from pydantic import BaseModel, Field

from brainer.models.note import TranscriptionStatus


class TranscriptionOutcome(BaseModel):
    """Result of polling a transcription job for a voice note."""

    status: TranscriptionStatus
    transcript: str | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    error: str | None = None
    job_id: str | None = None

    @property
    def has_transcript(self) -> bool:
        return bool(self.transcript and self.transcript.strip())
