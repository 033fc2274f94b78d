"""
Tokenizer module for token counting.

Provides accurate token counting using tiktoken with fast approximation
fallback, used for usage accounting and prompt budgeting.
"""

from brainer.config import TokenizerConfig
from brainer.core.tokenizer.tokenizer import Tokenizer

__all__ = ["Tokenizer", "TokenizerConfig"]
