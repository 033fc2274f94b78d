"""
Token counting utilities.

Uses tiktoken for accurate OpenAI-compatible token counting with
character-based approximation as fallback.
"""

import tiktoken

from brainer.config import TokenizerConfig


class Tokenizer:
    """
    Token counter for usage accounting on providers that don't report it.

    Usage:
        tokenizer = Tokenizer()
        count = tokenizer.count_tokens("Hello world")
        clipped = tokenizer.truncate("Long text...", max_tokens=500)
    """

    def __init__(self, config: TokenizerConfig | None = None):
        """
        Initialize tokenizer with configuration.

        Args:
            config: Optional tokenizer configuration. Uses defaults if not provided.
        """
        self.config = config or TokenizerConfig()
        self._encoder: tiktoken.Encoding | None = None

    @property
    def encoder(self) -> tiktoken.Encoding:
        """Lazy-load tiktoken encoder."""
        if self._encoder is None:
            self._encoder = tiktoken.get_encoding(self.config.model)
        return self._encoder

    def count_tokens(self, text: str) -> int:
        """
        Count tokens using tiktoken, or estimate when configured as approximate.

        Args:
            text: Text to count tokens for

        Returns:
            Token count
        """
        if not text:
            return 0

        if self.config.provider == "approximate":
            return self.estimate_tokens(text)

        return len(self.encoder.encode(text))

    def estimate_tokens(self, text: str) -> int:
        """
        Fast approximate token count using the configured chars_per_token ratio.
        """
        if not text:
            return 0
        return int(len(text) / self.config.chars_per_token)

    def truncate(self, text: str, max_tokens: int) -> str:
        """
        Clip text to at most max_tokens tokens.

        Args:
            text: Text to clip
            max_tokens: Token budget

        Returns:
            Original text if within budget, otherwise the decoded prefix
        """
        if not text or max_tokens <= 0:
            return ""

        if self.config.provider == "approximate":
            return text[: int(max_tokens * self.config.chars_per_token)]

        tokens = self.encoder.encode(text)
        if len(tokens) <= max_tokens:
            return text
        return self.encoder.decode(tokens[:max_tokens])
