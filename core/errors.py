"""Exception types raised at the edges of the cleaning pipeline."""
from __future__ import annotations


class MathCleanerError(Exception):
    """Base class for user-facing failures."""


class EmptyInputError(MathCleanerError, ValueError):
    """Raised when there is nothing to process."""

    def __init__(self, message: str = "Please enter some text to process") -> None:
        super().__init__(message)


class NoContentError(MathCleanerError):
    """Raised when processing leaves no extractable text."""

    def __init__(self, message: str = "No readable content could be extracted") -> None:
        super().__init__(message)


class ClipboardError(MathCleanerError):
    """Raised when neither clipboard technique succeeded."""


class ExportError(MathCleanerError):
    """Raised when an export payload cannot be written."""
