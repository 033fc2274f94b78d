"""Shared fixtures and in-memory provider fakes.

No test here talks to a real provider; the fakes record their calls so
tests can assert on what would have been sent.
"""

from datetime import datetime, timedelta

import pytest
from pydantic import BaseModel

from brainer.config import Config
from brainer.core.embeddings.base import Embedder
from brainer.core.llm.base import LLMProvider
from brainer.core.note_store.memory import InMemoryNoteStore
from brainer.models.embedding import EmbeddingVector
from brainer.models.note import Note
from brainer.models.summary import SummaryPayload
from brainer.models.topics import TopicPayload
from brainer.utils.exceptions import EmbeddingError, LLMError

BASE_TIME = datetime(2024, 5, 1, 9, 0, 0)


def make_note(
    note_id: str,
    title: str = "",
    content: str = "",
    user_id: str = "user_1",
    minutes_ago: int = 0,
    **kwargs,
) -> Note:
    """Build a note whose timestamps sit `minutes_ago` before a fixed base time."""
    stamp = BASE_TIME - timedelta(minutes=minutes_ago)
    return Note(
        id=note_id,
        user_id=user_id,
        title=title,
        content=content,
        created_at=stamp,
        updated_at=stamp,
        **kwargs,
    )


class FakeEmbedder(Embedder):
    """Deterministic embedder: one axis per keyword found in the text."""

    KEYWORDS = ("project", "deadline", "meeting", "recipe", "garden")

    def __init__(self, model: str = "fake-embed", fail: bool = False, tokens: int = 7):
        self.model = model
        self.fail = fail
        self.tokens = tokens
        self.calls: list[str] = []

    async def embed(self, text: str, **kwargs) -> EmbeddingVector:
        self.calls.append(text)
        if self.fail:
            raise EmbeddingError("provider unavailable")
        lowered = text.lower()
        values = [1.0 if word in lowered else 0.0 for word in self.KEYWORDS]
        return EmbeddingVector(values=values, model=self.model, tokens_used=self.tokens)

    async def close(self):
        pass


class FakeLLM(LLMProvider):
    """LLM fake returning a canned summary, topic set or title."""

    def __init__(
        self,
        summary: str = "A short summary.",
        key_points: list[str] | None = None,
        title: str = "Quarterly Planning",
        topics: TopicPayload | None = None,
        usage: int | None = 42,
        fail: bool = False,
    ):
        self.model = "fake-llm"
        self.summary = summary
        self.key_points = key_points if key_points is not None else ["First", "Second"]
        self.title = title
        self.topics = topics or TopicPayload(
            topics=["Project Management"],
            concepts=["deadline", "milestone"],
            tags=["work", "planning"],
        )
        self.usage = usage
        self.fail = fail
        self.prompts: list[str] = []
        self.last_token_usage = None

    async def complete(
        self,
        prompt: str,
        response_format: type[BaseModel] | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.0,
        system: str | None = None,
        **kwargs,
    ):
        self.prompts.append(prompt)
        if self.fail:
            raise LLMError("provider unavailable")
        self.last_token_usage = self.usage
        if response_format is TopicPayload:
            return self.topics
        if response_format is not None:
            return SummaryPayload(summary=self.summary, key_points=self.key_points)
        return self.title

    async def close(self):
        pass


@pytest.fixture
def config() -> Config:
    config = Config()
    config.enrichment.batch_delay_ms = 0
    return config


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def note_store() -> InMemoryNoteStore:
    return InMemoryNoteStore()


@pytest.fixture
def note_factory():
    """Factory fixture for notes with fixed, ordered timestamps."""
    return make_note
