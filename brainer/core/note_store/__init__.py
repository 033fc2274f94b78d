"""
Note store abstraction.

Implementations:
- InMemoryNoteStore: process-local dict
- SQLiteNoteStore: aiosqlite-backed persistent store
"""
from brainer.core.note_store.base import NoteStore
from brainer.core.note_store.memory import InMemoryNoteStore
from brainer.core.note_store.sqlite import SQLiteNoteStore

__all__ = [
    "NoteStore",
    "InMemoryNoteStore",
    "SQLiteNoteStore",
]
