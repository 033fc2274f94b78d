"""
LLM provider abstraction layer for text generation.

Supported providers:
- Ollama (native SDK)
- OpenAI (official SDK)
"""
from brainer.core.llm.base import LLMProvider
from brainer.core.llm.ollama import OllamaLLM
from brainer.core.llm.openai import OpenAILLM

__all__ = [
    "LLMProvider",
    "OllamaLLM",
    "OpenAILLM",
]

