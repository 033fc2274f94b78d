"""Embedding vector model."""

from pydantic import BaseModel, Field


class EmbeddingVector(BaseModel):
    """
    Vector produced by an embedding model.

    Two vectors are only comparable when produced by the same model.
    """

    values: list[float] = Field(..., description="Embedding values")
    model: str = Field(..., description="Generating model identifier")
    tokens_used: int = Field(default=0, ge=0, description="Tokens billed for the call")

    @property
    def dimension(self) -> int:
        return len(self.values)

    def is_comparable_with(self, other: "EmbeddingVector") -> bool:
        return self.model == other.model and self.dimension == other.dimension
