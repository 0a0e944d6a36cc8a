"""Error taxonomy shared by the summarizer pipeline and its collaborators.

Nothing in the pipeline recovers from these; they propagate to the Lambda host,
which owns redelivery.
"""
from __future__ import annotations


class SummarizerError(Exception):
    """Base class for every failure raised by the summarizer."""


class UnsupportedFormatError(SummarizerError, ValueError):
    """Raised when an input key or format tag is not csv/xlsx."""


class DecodeError(SummarizerError, ValueError):
    """Raised when a tabular payload cannot be decoded into rows."""


class InvalidTriggerError(SummarizerError, ValueError):
    """Raised when a notification carries no usable bucket/key record."""


class StorageAccessError(SummarizerError):
    """Raised when reading or writing an object fails."""

    def __init__(self, message: str, *, bucket: str | None = None, key: str | None = None) -> None:
        super().__init__(message)
        self.bucket = bucket
        self.key = key


class ObjectNotFoundError(StorageAccessError):
    """Raised when the requested object (or its bucket) does not exist."""


class GenerationServiceError(SummarizerError):
    """Raised when the remote text-generation call fails or returns nothing."""


class SummaryGenerationError(GenerationServiceError):
    """Raised when a narrative or structured summary could not be produced."""
