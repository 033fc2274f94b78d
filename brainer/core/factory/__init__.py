"""
Factory modules for creating Brainer components.

Provides factories for LLM, Embedder and Note Store.
"""

from brainer.core.factory.embedder_factory import EmbedderFactory
from brainer.core.factory.llm_factory import LLMFactory
from brainer.core.factory.store_factory import NoteStoreFactory

__all__ = [
    "LLMFactory",
    "EmbedderFactory",
    "NoteStoreFactory",
]
