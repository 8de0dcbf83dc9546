"""
Core Module - Shared error taxonomy.
"""

from src.core.errors import (
    MissingParameterError,
    NotANumberError,
    PlayAbortedError,
    QuizCliError,
    QuizValidationError,
    RecordNotFoundError,
    StoreError,
)

__all__ = [
    "QuizCliError",
    "MissingParameterError",
    "NotANumberError",
    "RecordNotFoundError",
    "QuizValidationError",
    "StoreError",
    "PlayAbortedError",
]
