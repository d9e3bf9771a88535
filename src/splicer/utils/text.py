"""Text utilities shared by the scanner and the trace stream."""

from __future__ import annotations

# Characters a Gap token may span.
GAP_CHARS = frozenset(" \t\n\r")


def is_gap_text(text: str) -> bool:
    """Return True if text consists only of spaces, tabs, CR and LF.

    The empty string qualifies.

    Example:
        >>> is_gap_text(" \\t\\r\\n")
        True
        >>> is_gap_text(" x ")
        False
    """
    return all(ch in GAP_CHARS for ch in text)


def escape_control(text: str | None) -> str:
    """Escape line breaks and tabs for single-line display.

    ``\\r\\n`` is escaped as a unit before lone ``\\n``. A lone ``\\r`` is
    left untouched.

    Example:
        >>> escape_control("a\\r\\nb\\tc\\n")
        'a\\\\r\\\\nb\\\\tc\\\\n'
    """
    if text is None:
        return ""
    return text.replace("\r\n", "\\r\\n").replace("\n", "\\n").replace("\t", "\\t")
