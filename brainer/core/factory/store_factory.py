"""
Factory for creating note stores.
"""

from brainer.config import StoreConfig
from brainer.core.note_store.base import NoteStore
from brainer.core.note_store.memory import InMemoryNoteStore
from brainer.core.note_store.sqlite import SQLiteNoteStore
from brainer.utils.exceptions import ConfigurationError


class NoteStoreFactory:
    """Factory for creating note stores from configuration."""

    @staticmethod
    def create(config: StoreConfig) -> NoteStore:
        """
        Create note store from configuration.

        Raises:
            ConfigurationError: If backend is unsupported
        """
        if config.backend == "memory":
            return InMemoryNoteStore()
        elif config.backend == "sqlite":
            return SQLiteNoteStore(db_path=config.sqlite_path)
        else:
            raise ConfigurationError(f"Unsupported note store backend: {config.backend}")
