"""
Embedder abstraction layer for note embeddings.

Supported providers:
- OpenAI (official SDK)
- Ollama (native SDK)
"""
from brainer.core.embeddings.base import Embedder
from brainer.core.embeddings.ollama import OllamaEmbedder
from brainer.core.embeddings.openai import OpenAIEmbedder

__all__ = [
    "Embedder",
    "OllamaEmbedder",
    "OpenAIEmbedder",
]
