"""Errors raised by the document text index.

None of these are retried. ``UnmappableError`` is normally not raised at all:
the replace planner records unmappable matches as skipped instead.
"""


class TextIndexError(Exception):
    """Base class for text index failures."""


class InvalidQueryError(TextIndexError, ValueError):
    """Raised when a search query is empty."""


class UnmappableError(TextIndexError, ValueError):
    """Raised when a flat-text range has no contiguous document range.

    Attributes:
        flat_start: Start of the offending flat-text range.
        flat_end: End of the offending flat-text range.
    """

    def __init__(self, flat_start: int, flat_end: int, reason: str = "") -> None:
        self.flat_start = flat_start
        self.flat_end = flat_end
        message = f"Flat range [{flat_start}, {flat_end}) cannot be mapped to one document range"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class OutOfRangeError(TextIndexError, IndexError):
    """Raised when a caller-supplied flat offset lies outside the text."""
