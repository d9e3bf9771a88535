"""Mutable text buffer with a scan cursor.

The buffer owns the text of one Engine. All mutation goes through
``replace`` (one splice) or ``commit`` (a validated batch of splices).
Both validate before touching the text, so a failing call leaves the
buffer unchanged.

The scan cursor is an absolute offset used by the scanner. A splice that
starts before the cursor shifts it by the length difference, so it keeps
pointing at the same place in the unedited remainder.

Thread Safety:
Not thread-safe. A buffer belongs to exactly one engine.

"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache

from splicer.errors import EditConflictError, SpliceRangeError


@dataclass(frozen=True, slots=True)
class Edit:
    """Replacement of the range ``[start, end)`` with ``text``.

    Offsets refer to the buffer as it was when the edit was recorded.
    """

    start: int
    end: int
    text: str

    @property
    def delta(self) -> int:
        """Change in text length once applied."""
        return len(self.text) - (self.end - self.start)

    def overlaps(self, other: Edit) -> bool:
        """True if the two edits cannot both be applied unambiguously.

        Ranges that merely touch do not overlap, except two insertions at
        the same offset, whose order would be undefined.
        """
        if self.start == self.end == other.start == other.end:
            return True
        return self.start < other.end and other.start < self.end


@lru_cache(maxsize=256)
def _casefree(needle: str) -> re.Pattern[str]:
    return re.compile(re.escape(needle), re.IGNORECASE)


def find(text: str, needle: str, start: int = 0, *, case_sensitive: bool = True) -> int:
    """Find needle in text at or after start.

    Case-insensitive search runs over the original text, so the returned
    offset is valid even where lowercasing would change string lengths.

    Returns:
        Absolute offset of the first occurrence, or -1.
    """
    if start > len(text):
        return -1
    if case_sensitive:
        return text.find(needle, start)
    found = _casefree(needle).search(text, start)
    return found.start() if found else -1


class TextBuffer:
    """Owned text plus the scan cursor.

    Usage:
            >>> buf = TextBuffer("hello world")
            >>> buf.replace(0, 5, "goodbye")
            >>> buf.text
            'goodbye world'

    """

    __slots__ = ("_text", "cursor")

    def __init__(self, text: str) -> None:
        if text is None:
            raise TypeError("text must be a string, not None")
        self._text = text
        self.cursor = 0

    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        preview = self._text if len(self._text) <= 20 else self._text[:17] + "..."
        return f"TextBuffer({preview!r}, cursor={self.cursor})"

    # =========================================================================
    # Mutation
    # =========================================================================

    def replace(self, start: int, remove_length: int = 0, insert_text: str = "") -> None:
        """Remove ``remove_length`` characters at ``start`` and insert text there.

        Args:
            start: Offset of the replaced range
            remove_length: Number of characters removed
            insert_text: Text inserted at start

        Raises:
            SpliceRangeError: The range is not inside the text
            TypeError: insert_text is None
        """
        if insert_text is None:
            raise TypeError("insert_text must be a string, not None")
        self._check_range(start, remove_length)

        text = self._text
        self._text = text[:start] + insert_text + text[start + remove_length :]

        if self.cursor != 0 and self.cursor > start:
            self.cursor += len(insert_text) - remove_length

    def commit(self, edits: Iterable[Edit]) -> int:
        """Apply a batch of edits recorded against the current text.

        Every edit is validated first. Edits are then applied right to left,
        so each one's recorded offsets are still correct when it is applied.

        Returns:
            Number of edits applied.

        Raises:
            SpliceRangeError: An edit lies outside the text
            EditConflictError: Two edits overlap
        """
        ordered = sorted(edits, key=lambda e: (e.start, e.end))
        for edit in ordered:
            self._check_range(edit.start, edit.end - edit.start)
        for left, right in zip(ordered, ordered[1:]):
            if left.overlaps(right):
                raise EditConflictError(
                    f"edit [{left.start}, {left.end}) overlaps edit [{right.start}, {right.end})"
                )

        for edit in reversed(ordered):
            self.replace(edit.start, edit.end - edit.start, edit.text)
        return len(ordered)

    def _check_range(self, start: int, length: int) -> None:
        if start < 0 or length < 0 or start + length > len(self._text):
            raise SpliceRangeError(start, length, len(self._text))

    # =========================================================================
    # Lookup helpers
    # =========================================================================

    def find(self, needle: str, start: int = 0, *, case_sensitive: bool = True) -> int:
        """Absolute offset of needle at or after start, or -1."""
        return find(self._text, needle, start, case_sensitive=case_sensitive)

    def remaining(self, start: int | None = None) -> str:
        """Text from start (default: the cursor) to the end."""
        if start is None:
            start = self.cursor
        if 0 <= start <= len(self._text):
            return self._text[start:]
        return ""

    def before(self, key: str, start: int = 0) -> str | None:
        """Text between start and the first occurrence of key.

        Returns:
            The text before key, or None if key does not occur.

        Example:
            >>> TextBuffer("name=value").before("=")
            'name'
        """
        if key is None:
            raise TypeError("key must be a string, not None")
        found = self._text.find(key, start)
        if found == -1:
            return None
        return self._text[start:found]

    def after(self, key: str, start: int = 0) -> str | None:
        """Text following the first occurrence of key at or after start.

        Returns:
            The text after key, or None if key does not occur.

        Example:
            >>> TextBuffer("name=value").after("=")
            'value'
        """
        if key is None:
            raise TypeError("key must be a string, not None")
        found = self._text.find(key, start)
        if found == -1:
            return None
        return self._text[found + len(key) :]

    def slice_from(self, index: int, length: int | None = None) -> str | None:
        """Substring at index, to the end or of the given length.

        Returns:
            The substring, or None when the requested range is outside the text.
        """
        end = len(self._text) if length is None else index + length
        if index < 0 or end < index or end > len(self._text):
            return None
        return self._text[index:end]
