"""Summary models."""

from pydantic import BaseModel, Field


class SummaryPayload(BaseModel):
    """Structured output requested from the LLM."""

    summary: str = Field(..., description="Brief, clear summary of the main content")
    key_points: list[str] = Field(
        default_factory=list, description="3-5 key points from the content"
    )


class SummaryResult(BaseModel):
    """Summary plus accounting."""

    summary: str
    key_points: list[str] = Field(default_factory=list)
    tokens_used: int = 0
