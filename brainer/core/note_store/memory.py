"""In-process note store."""

from datetime import datetime

from brainer.core.note_store.base import NoteStore
from brainer.models.embedding import EmbeddingVector
from brainer.models.note import Note, TranscriptionStatus
from brainer.models.summary import SummaryResult
from brainer.models.topics import TopicResult
from brainer.utils.exceptions import NotFoundError


class InMemoryNoteStore(NoteStore):
    """Dict-backed store for tests and single-process deployments."""

    def __init__(self, notes: list[Note] | None = None):
        self._notes: dict[str, Note] = {note.id: note.model_copy(deep=True) for note in notes or []}

    async def initialize(self) -> None:
        pass

    async def save_note(self, note: Note) -> None:
        self._notes[note.id] = note.model_copy(deep=True)

    async def get_note(self, note_id: str) -> Note | None:
        note = self._notes.get(note_id)
        return note.model_copy(deep=True) if note else None

    async def list_notes_for_user(self, user_id: str) -> list[Note]:
        notes = [n for n in self._notes.values() if n.user_id == user_id]
        notes.sort(key=lambda n: n.updated_at, reverse=True)
        return [n.model_copy(deep=True) for n in notes]

    async def list_notes_without_embedding(self, user_id: str) -> list[Note]:
        return [n for n in await self.list_notes_for_user(user_id) if not n.has_embedding]

    def _require(self, note_id: str) -> Note:
        note = self._notes.get(note_id)
        if note is None:
            raise NotFoundError(f"Note not found: {note_id}", context={"note_id": note_id})
        return note

    async def update_content(
        self,
        note_id: str,
        content: str,
        transcription_status: TranscriptionStatus | None = None,
        transcription_confidence: float | None = None,
        is_processing: bool | None = None,
    ) -> Note:
        note = self._require(note_id)
        changes = {"content": content, "updated_at": datetime.now()}
        if transcription_status is not None:
            changes["transcription_status"] = transcription_status
        if transcription_confidence is not None:
            changes["transcription_confidence"] = transcription_confidence
        if is_processing is not None:
            changes["is_processing"] = is_processing

        self._notes[note_id] = note.model_copy(update=changes)
        return self._notes[note_id].model_copy(deep=True)

    async def update_embedding(self, note_id: str, embedding: EmbeddingVector) -> None:
        note = self._require(note_id)
        self._notes[note_id] = note.model_copy(
            update={
                "embedding": list(embedding.values),
                "embedding_model": embedding.model,
                "embedding_generated_at": datetime.now(),
            }
        )

    async def update_summary(self, note_id: str, summary: SummaryResult) -> Note:
        note = self._require(note_id)
        now = datetime.now()
        self._notes[note_id] = note.model_copy(
            update={
                "summary": summary.summary,
                "key_points": list(summary.key_points),
                "summary_tokens_used": summary.tokens_used,
                "summary_generated_at": now,
                "updated_at": now,
            }
        )
        return self._notes[note_id].model_copy(deep=True)

    async def update_topics(self, note_id: str, topics: TopicResult) -> Note:
        note = self._require(note_id)
        now = datetime.now()
        self._notes[note_id] = note.model_copy(
            update={
                "extracted_topics": topics.topics.model_copy(deep=True),
                "topics_tokens_used": topics.tokens_used,
                "topics_generated_at": now,
                "updated_at": now,
            }
        )
        return self._notes[note_id].model_copy(deep=True)
