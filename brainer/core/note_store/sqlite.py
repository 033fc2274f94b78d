"""
SQLite note store using aiosqlite.

Embeddings, key points and extracted topics are stored as JSON text.
"""

import json
from datetime import datetime
from pathlib import Path

import aiosqlite

from brainer.core.note_store.base import NoteStore
from brainer.models.embedding import EmbeddingVector
from brainer.models.note import Note, TranscriptionStatus
from brainer.models.summary import SummaryResult
from brainer.models.topics import NoteTopics, TopicResult
from brainer.utils.exceptions import NotFoundError, StoreError
from brainer.utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = (
    "id, user_id, title, content, summary, key_points, summary_generated_at, "
    "summary_tokens_used, extracted_topics, topics_generated_at, topics_tokens_used, "
    "embedding, embedding_model, embedding_generated_at, "
    "transcription_status, transcription_confidence, is_processing, created_at, updated_at"
)

# Columns added after the first schema; created on older databases at startup
_ADDED_COLUMNS = {
    "extracted_topics": "TEXT",
    "topics_generated_at": "TEXT",
    "topics_tokens_used": "INTEGER",
}


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class SQLiteNoteStore(NoteStore):
    """
    SQLite-backed note store.

    Features:
    - Local persistent storage
    - Index on (user_id, updated_at) for recency-ordered candidate fetches
    - Driver errors surface as StoreError
    """

    def __init__(self, db_path: str = "data/brainer.db"):
        """
        Initialize SQLite note store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self.connection: aiosqlite.Connection | None = None

        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def connect(self) -> None:
        """Establish connection to SQLite."""
        if self.connection is None:
            self.connection = await aiosqlite.connect(self.db_path)
            self.connection.row_factory = aiosqlite.Row
            if self.db_path != ":memory:":
                await self.connection.execute("PRAGMA journal_mode = WAL")
            await self.connection.commit()

    async def initialize(self) -> None:
        """Initialize database schema."""
        try:
            await self.connect()

            await self.connection.execute(
                """
                CREATE TABLE IF NOT EXISTS notes (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    title TEXT NOT NULL DEFAULT '',
                    content TEXT NOT NULL DEFAULT '',
                    summary TEXT,
                    key_points TEXT DEFAULT '[]',
                    summary_generated_at TEXT,
                    summary_tokens_used INTEGER,
                    extracted_topics TEXT,
                    topics_generated_at TEXT,
                    topics_tokens_used INTEGER,
                    embedding TEXT,
                    embedding_model TEXT,
                    embedding_generated_at TEXT,
                    transcription_status TEXT,
                    transcription_confidence REAL,
                    is_processing INTEGER DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """
            )
            await self._add_missing_columns()
            await self.connection.execute(
                "CREATE INDEX IF NOT EXISTS idx_notes_user_updated ON notes(user_id, updated_at)"
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            logger.bind(db_path=self.db_path).error(f"Failed to initialize note store: {e}")
            raise StoreError(f"Failed to initialize note store: {e}") from e

    async def _add_missing_columns(self) -> None:
        async with self.connection.execute("PRAGMA table_info(notes)") as cursor:
            existing = {row["name"] for row in await cursor.fetchall()}
        for column, column_type in _ADDED_COLUMNS.items():
            if column not in existing:
                logger.bind(column=column).info("Adding missing notes column")
                await self.connection.execute(
                    f"ALTER TABLE notes ADD COLUMN {column} {column_type}"
                )

    # ═══════════════════════════════════════════════════════════
    # READS
    # ═══════════════════════════════════════════════════════════

    def _row_to_note(self, row: aiosqlite.Row) -> Note:
        status = row["transcription_status"]
        topics = row["extracted_topics"]
        return Note(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            content=row["content"],
            summary=row["summary"],
            key_points=json.loads(row["key_points"] or "[]"),
            summary_generated_at=_parse_dt(row["summary_generated_at"]),
            summary_tokens_used=row["summary_tokens_used"],
            extracted_topics=NoteTopics.model_validate_json(topics) if topics else None,
            topics_generated_at=_parse_dt(row["topics_generated_at"]),
            topics_tokens_used=row["topics_tokens_used"],
            embedding=json.loads(row["embedding"]) if row["embedding"] else [],
            embedding_model=row["embedding_model"],
            embedding_generated_at=_parse_dt(row["embedding_generated_at"]),
            transcription_status=TranscriptionStatus(status) if status else None,
            transcription_confidence=row["transcription_confidence"],
            is_processing=bool(row["is_processing"]),
            created_at=_parse_dt(row["created_at"]),
            updated_at=_parse_dt(row["updated_at"]),
        )

    async def _fetch(self, query: str, params: tuple) -> list[aiosqlite.Row]:
        try:
            await self.connect()
            async with self.connection.execute(query, params) as cursor:
                return list(await cursor.fetchall())
        except aiosqlite.Error as e:
            logger.bind(db_path=self.db_path).error(f"Note query failed: {e}")
            raise StoreError(f"Failed to read notes: {e}") from e

    async def get_note(self, note_id: str) -> Note | None:
        rows = await self._fetch(f"SELECT {_COLUMNS} FROM notes WHERE id = ?", (note_id,))
        return self._row_to_note(rows[0]) if rows else None

    async def list_notes_for_user(self, user_id: str) -> list[Note]:
        rows = await self._fetch(
            f"SELECT {_COLUMNS} FROM notes WHERE user_id = ? ORDER BY updated_at DESC",
            (user_id,),
        )
        return [self._row_to_note(row) for row in rows]

    async def list_notes_without_embedding(self, user_id: str) -> list[Note]:
        rows = await self._fetch(
            f"SELECT {_COLUMNS} FROM notes "
            "WHERE user_id = ? AND (embedding IS NULL OR embedding_model IS NULL) "
            "ORDER BY updated_at DESC",
            (user_id,),
        )
        return [self._row_to_note(row) for row in rows]

    # ═══════════════════════════════════════════════════════════
    # WRITES
    # ═══════════════════════════════════════════════════════════

    async def save_note(self, note: Note) -> None:
        values = (
            note.id,
            note.user_id,
            note.title,
            note.content,
            note.summary,
            json.dumps(note.key_points),
            _iso(note.summary_generated_at),
            note.summary_tokens_used,
            note.extracted_topics.model_dump_json() if note.extracted_topics else None,
            _iso(note.topics_generated_at),
            note.topics_tokens_used,
            json.dumps(note.embedding) if note.embedding else None,
            note.embedding_model,
            _iso(note.embedding_generated_at),
            note.transcription_status.value if note.transcription_status else None,
            note.transcription_confidence,
            int(note.is_processing),
            _iso(note.created_at),
            _iso(note.updated_at),
        )
        placeholders = ", ".join("?" for _ in values)
        try:
            await self.connect()
            await self.connection.execute(
                f"INSERT OR REPLACE INTO notes ({_COLUMNS}) VALUES ({placeholders})", values
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            logger.bind(note_id=note.id).error(f"Failed to save note {note.id}: {e}")
            raise StoreError(f"Failed to save note: {e}") from e

    async def _update(self, note_id: str, assignments: dict) -> None:
        columns = ", ".join(f"{column} = ?" for column in assignments)
        try:
            await self.connect()
            cursor = await self.connection.execute(
                f"UPDATE notes SET {columns} WHERE id = ?",
                (*assignments.values(), note_id),
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            logger.bind(
                note_id=note_id, columns=list(assignments)
            ).error(f"Failed to update note {note_id}: {e}")
            raise StoreError(f"Failed to update note: {e}") from e

        if cursor.rowcount == 0:
            raise NotFoundError(f"Note not found: {note_id}", context={"note_id": note_id})

    async def update_content(
        self,
        note_id: str,
        content: str,
        transcription_status: TranscriptionStatus | None = None,
        transcription_confidence: float | None = None,
        is_processing: bool | None = None,
    ) -> Note:
        assignments = {"content": content, "updated_at": _iso(datetime.now())}
        if transcription_status is not None:
            assignments["transcription_status"] = transcription_status.value
        if transcription_confidence is not None:
            assignments["transcription_confidence"] = transcription_confidence
        if is_processing is not None:
            assignments["is_processing"] = int(is_processing)

        await self._update(note_id, assignments)
        return await self.get_note(note_id)

    async def update_embedding(self, note_id: str, embedding: EmbeddingVector) -> None:
        await self._update(
            note_id,
            {
                "embedding": json.dumps(embedding.values),
                "embedding_model": embedding.model,
                "embedding_generated_at": _iso(datetime.now()),
            },
        )

    async def update_summary(self, note_id: str, summary: SummaryResult) -> Note:
        now = _iso(datetime.now())
        await self._update(
            note_id,
            {
                "summary": summary.summary,
                "key_points": json.dumps(summary.key_points),
                "summary_tokens_used": summary.tokens_used,
                "summary_generated_at": now,
                "updated_at": now,
            },
        )
        return await self.get_note(note_id)

    async def update_topics(self, note_id: str, topics: TopicResult) -> Note:
        now = _iso(datetime.now())
        await self._update(
            note_id,
            {
                "extracted_topics": topics.topics.model_dump_json(),
                "topics_tokens_used": topics.tokens_used,
                "topics_generated_at": now,
                "updated_at": now,
            },
        )
        return await self.get_note(note_id)

    async def close(self) -> None:
        """Close SQLite connection."""
        if self.connection:
            await self.connection.close()
            self.connection = None
