"""Match results and the handle passed to scan callbacks.

A Match is an immutable snapshot of one occurrence: its range, its text at
match time, and the captured spans. The MatchHandle given to the callback
reads from that snapshot and queues edits against it. Queued edits are
committed to the buffer in one batch when the callback returns, so several
``set_value`` calls in one callback all land where they were meant to.

Example:
    >>> def rename(m):
    ...     m.set_value("key", m.get_value("key").upper())
    ...     m.set_value("value", "'" + m.get_value("value") + "'")
    >>> engine = Engine("a=1;")
    >>> engine.apply("[key]=[value];", rename)
    1
    >>> engine.text
    "A='1';"

"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from splicer.buffer import Edit
from splicer.errors import EditConflictError, StaleHandleError


@dataclass(frozen=True, slots=True)
class CaptureSpan:
    """One captured span.

    Attributes:
        name: Capture name from the pattern
        value: Captured text, with the buffer's original casing
        index: Absolute offset of the value in the buffer at match time
    """

    name: str
    value: str
    index: int

    @property
    def end(self) -> int:
        return self.index + len(self.value)


@dataclass(frozen=True, slots=True)
class Match:
    """Snapshot of one occurrence of a pattern.

    Attributes:
        start: Absolute offset where the match begins
        end: Absolute offset just past the match
        text: The matched text at match time
        spans: Every captured span in pattern order
    """

    start: int
    end: int
    text: str
    spans: tuple[CaptureSpan, ...] = ()
    _by_name: Mapping[str, CaptureSpan] = field(
        init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self) -> None:
        by_name: dict[str, CaptureSpan] = {}
        for span in self.spans:
            # First capture with a given name wins.
            by_name.setdefault(span.name, span)
        object.__setattr__(self, "_by_name", MappingProxyType(by_name))

    @property
    def captures(self) -> Mapping[str, CaptureSpan]:
        """Read-only mapping of name to span."""
        return self._by_name

    def offset_of(self, span: CaptureSpan) -> int:
        """Position of a span inside ``text``."""
        return span.index - self.start

    def values(self) -> dict[str, str]:
        """Fresh dict of name to captured text."""
        return {name: span.value for name, span in self._by_name.items()}


class MatchHandle:
    """View of one Match given to the scan callback.

    Edits are accepted only while the callback runs; they are queued and
    committed by the engine after the callback returns. Reads never fail for
    unknown names and keep returning the match-time snapshot afterwards.

    """

    __slots__ = ("_match", "_edits", "_active")

    def __init__(self, match: Match) -> None:
        self._match = match
        self._edits: list[Edit] = []
        self._active = True

    def __repr__(self) -> str:
        return f"MatchHandle(start={self.start}, end={self.end}, captures={list(self.captures)})"

    # =========================================================================
    # Reading
    # =========================================================================

    @property
    def match(self) -> Match:
        return self._match

    @property
    def start(self) -> int:
        return self._match.start

    @property
    def end(self) -> int:
        return self._match.end

    @property
    def text(self) -> str:
        return self._match.text

    @property
    def captures(self) -> Mapping[str, CaptureSpan]:
        return self._match.captures

    @property
    def edits(self) -> tuple[Edit, ...]:
        """Edits queued so far, in call order."""
        return tuple(self._edits)

    def get_value(self, name: str) -> str:
        """Captured text for name, or an empty string if there is none."""
        span = self.get_capture(name)
        return span.value if span is not None else ""

    def get_capture(self, name: str) -> CaptureSpan | None:
        """Captured span for name, or None if there is none."""
        if name is None:
            raise TypeError("name must be a string, not None")
        return self._match.captures.get(name)

    # =========================================================================
    # Editing
    # =========================================================================

    def set_value(self, name: str, text: str) -> None:
        """Replace the text of one capture.

        Unknown names are ignored.
        """
        span = self.get_capture(name)
        if span is None:
            return
        self._queue(Edit(span.index, span.end, text))

    def modify_body(self, fn: Callable[[dict[str, str]], str]) -> None:
        """Replace the whole match with ``fn(captures)``.

        ``fn`` receives a dict of capture name to captured text.
        """
        self.replace(fn(self._match.values()))

    def replace(self, text: str) -> None:
        """Replace the whole match with text."""
        self._queue(Edit(self._match.start, self._match.end, text))

    def _queue(self, edit: Edit) -> None:
        if not self._active:
            raise StaleHandleError("match handle used after its callback returned")
        if edit.text is None:
            raise TypeError("replacement text must be a string, not None")
        for queued in self._edits:
            if queued.overlaps(edit):
                raise EditConflictError(
                    f"edit [{edit.start}, {edit.end}) overlaps queued edit "
                    f"[{queued.start}, {queued.end})"
                )
        self._edits.append(edit)

    def _release(self) -> list[Edit]:
        """Deactivate the handle and hand over its queued edits."""
        self._active = False
        edits, self._edits = self._edits, []
        return edits


__all__ = [
    "CaptureSpan",
    "Match",
    "MatchHandle",
]
