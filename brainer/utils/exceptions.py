"""
Custom exception hierarchy for Brainer.

Provides structured error types for better error handling and debugging.
All exceptions inherit from BrainerError for easy catching.
"""


class BrainerError(Exception):
    """
    Base exception for all Brainer errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize Brainer error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ValidationError(BrainerError):
    """
    Validation errors.
    Raised when a query, note or request parameter is malformed or missing.
    """

    pass


class InputTooShortError(ValidationError):
    """
    Input below the minimum length for an operation.
    Raised before paying for an embedding or summary call on tiny input.
    """

    pass


class DimensionMismatchError(BrainerError):
    """
    Vector comparison errors.
    Raised when two vectors differ in dimension or were produced by different models.
    """

    pass


class ExternalServiceError(BrainerError):
    """
    Base exception for hosted provider failures (embedding, summarization).
    """

    pass


class EmbeddingError(ExternalServiceError):
    """
    Embedding generation errors.
    Raised when embedding generation fails.
    """

    pass


class LLMError(ExternalServiceError):
    """
    LLM operation errors.
    Raised when LLM operations fail (API errors, timeouts, etc.).
    """

    pass


class NotFoundError(BrainerError):
    """
    Resource not found errors.
    Raised when a requested note doesn't exist.
    """

    pass


class ConfigurationError(BrainerError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass


class StoreError(BrainerError):
    """
    Note store operation errors.
    """

    pass
