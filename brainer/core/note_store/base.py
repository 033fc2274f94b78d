"""
Base interface for note storage.

The recall core reads notes and writes back derived attributes
(content after transcription, summary, topics, embedding). Everything else about
notes is owned by the surrounding application.
"""

from abc import ABC, abstractmethod

from brainer.models.embedding import EmbeddingVector
from brainer.models.note import Note, TranscriptionStatus
from brainer.models.summary import SummaryResult
from brainer.models.topics import TopicResult


class NoteStore(ABC):
    """Abstract base class for note storage implementations."""

    @abstractmethod
    async def initialize(self) -> None:
        """
        Prepare the store (create tables/indices).

        Raises:
            StoreError: If initialization fails
        """
        pass

    @abstractmethod
    async def save_note(self, note: Note) -> None:
        """
        Insert or replace a note.

        Args:
            note: Note to persist
        """
        pass

    @abstractmethod
    async def get_note(self, note_id: str) -> Note | None:
        """
        Retrieve a note by ID.

        Returns:
            Note or None if not found
        """
        pass

    @abstractmethod
    async def list_notes_for_user(self, user_id: str) -> list[Note]:
        """
        All notes of a user, most recently updated first.

        Ranking ties rely on this ordering.
        """
        pass

    @abstractmethod
    async def list_notes_without_embedding(self, user_id: str) -> list[Note]:
        """Notes of a user that have no stored embedding yet."""
        pass

    @abstractmethod
    async def update_content(
        self,
        note_id: str,
        content: str,
        transcription_status: TranscriptionStatus | None = None,
        transcription_confidence: float | None = None,
        is_processing: bool | None = None,
    ) -> Note:
        """
        Replace a note's body and optional transcription fields.

        Raises:
            NotFoundError: If the note doesn't exist
        """
        pass

    @abstractmethod
    async def update_embedding(self, note_id: str, embedding: EmbeddingVector) -> None:
        """
        Attach an embedding to a note as a single write.

        Concurrent writers are not coordinated; the last write wins.

        Raises:
            NotFoundError: If the note doesn't exist
        """
        pass

    @abstractmethod
    async def update_summary(self, note_id: str, summary: SummaryResult) -> Note:
        """
        Attach a summary to a note.

        Raises:
            NotFoundError: If the note doesn't exist
        """
        pass

    @abstractmethod
    async def update_topics(self, note_id: str, topics: TopicResult) -> Note:
        """
        Attach extracted topics to a note.

        Raises:
            NotFoundError: If the note doesn't exist
        """
        pass

    async def close(self) -> None:
        """Release connections. No-op by default."""
        pass
