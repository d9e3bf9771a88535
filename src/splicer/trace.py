"""Diagnostic trace stream for scans.

The scanner reports each token it tries to match as a TraceEvent. Events
are delivered to an optional sink attached to the Engine and logged at
DEBUG level. Tracing never affects matching.

Example:
    >>> from splicer import Engine, TraceRecorder
    >>> recorder = TraceRecorder()
    >>> with Engine("a=1", trace=recorder) as engine:
    ...     engine.apply("[k]=[v]", lambda m: None, label="pairs")
    1
    >>> str(recorder.events[0])
    "'pairs' token[0/2] capture 'k' found at 0"

"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from splicer.tokens import TokenKind

type TraceSink = Callable[[TraceEvent], None]
"""Callable receiving every TraceEvent of a scan."""


@dataclass(frozen=True, slots=True)
class TraceEvent:
    """One token-match step of a scan.

    Attributes:
        label: Scan label passed to Engine.apply (may be empty)
        token_index: Index of the token in the pattern
        token_count: Number of tokens in the pattern
        token_kind: Kind of the token
        token_value: Literal text or capture name, with CR/LF/tab escaped
        found: Whether the token matched
        position: Offset where the token matched (or where the search started)
        reason: Short note on why a placeholder was rejected
    """

    label: str
    token_index: int
    token_count: int
    token_kind: TokenKind
    token_value: str
    found: bool
    position: int
    reason: str = ""

    def __str__(self) -> str:
        prefix = f"'{self.label}' " if self.label else ""
        where = f"found at {self.position}" if self.found else f"NOT found from {self.position}"
        line = (
            f"{prefix}token[{self.token_index}/{self.token_count - 1}] "
            f"{self.token_kind.value} '{self.token_value}' {where}"
        )
        if self.reason:
            line += f" ({self.reason})"
        return line


@dataclass(slots=True)
class TraceRecorder:
    """Sink that keeps every event in memory.

    Usage:
            >>> recorder = TraceRecorder()
            >>> engine = Engine(text, trace=recorder)

    """

    events: list[TraceEvent] = field(default_factory=list)

    def __call__(self, event: TraceEvent) -> None:
        self.events.append(event)

    def lines(self) -> list[str]:
        """Human-readable rendering of all events."""
        return [str(e) for e in self.events]

    def clear(self) -> None:
        self.events.clear()


__all__ = [
    "TraceEvent",
    "TraceRecorder",
    "TraceSink",
]
