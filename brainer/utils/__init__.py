"""Utility modules for Brainer."""

from brainer.utils.exceptions import (
    BrainerError,
    ConfigurationError,
    DimensionMismatchError,
    EmbeddingError,
    ExternalServiceError,
    InputTooShortError,
    LLMError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from brainer.utils.id_generator import generate_job_id
from brainer.utils.logger import get_logger, setup_logging

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # ID Generators
    "generate_job_id",
    # Exceptions
    "BrainerError",
    "ValidationError",
    "InputTooShortError",
    "DimensionMismatchError",
    "ExternalServiceError",
    "EmbeddingError",
    "LLMError",
    "NotFoundError",
    "ConfigurationError",
    "StoreError",
]
