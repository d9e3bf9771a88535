"""Exception classes for splicer.

Provides standardized exceptions for error handling throughout splicer.
"""

from __future__ import annotations


class SplicerError(Exception):
    """Base exception for all splicer errors.

    Subclass this for specific error categories.
    """

    pass


class PatternError(SplicerError):
    """Error while compiling a pattern in strict mode.

    Raised when the pattern is malformed (unterminated capture name,
    placeholder directly followed by another placeholder).
    """

    def __init__(self, message: str, position: int | None = None) -> None:
        """Initialize pattern error with optional location.

        Args:
            message: Error description
            position: Offset in the pattern string (0-indexed)
        """
        self.message = message
        self.position = position

        location = f"at {position}: " if position is not None else ""
        super().__init__(f"{location}{message}")


class SpliceRangeError(SplicerError, IndexError):
    """Splice request outside the bounds of the text.

    No mutation happens when this is raised.
    """

    def __init__(self, start: int, length: int, text_length: int) -> None:
        self.start = start
        self.length = length
        self.text_length = text_length
        super().__init__(
            f"cannot replace {length} character(s) at {start} "
            f"in text of length {text_length}"
        )


class EditConflictError(SplicerError):
    """Two edits in one commit overlap.

    Raised before any edit of the batch is applied.
    """

    pass


class ScanInProgressError(SplicerError):
    """A scan was started while another scan on the same engine is running."""

    pass


class StaleHandleError(SplicerError):
    """A match handle was used after its callback returned."""

    pass
