"""Engine: owns a text buffer and runs pattern scans over it.

Usage:
    >>> from splicer import Engine, compile
    >>> pattern = compile(";[name]=[value]\\n")
    >>> with Engine("\\t; A=B\\n") as engine:
    ...     engine.apply(pattern, lambda m: m.replace(
    ...         f"SET {m.get_value('name').strip()}={m.get_value('value')}\\n"))
    ...     engine.text
    1
    '\\tSET A=B\\n'

Thread Safety:
    An Engine is not thread-safe and is not reentrant: starting a scan from
    inside a callback of the same engine raises ScanInProgressError.

"""

from __future__ import annotations

import dataclasses
from types import TracebackType

from splicer.buffer import TextBuffer
from splicer.config import ScanConfig, get_scan_config
from splicer.errors import ScanInProgressError
from splicer.pattern import Pattern, compile
from splicer.scanner import MatchCallback, Scanner
from splicer.trace import TraceSink
from splicer.utils.logger import get_logger

logger = get_logger(__name__)


class Engine:
    """Pattern scanner and in-place editor over one owned text.

    Args:
        text: Initial text
        trace: Optional sink receiving a TraceEvent per token step.
            Detached by ``close()`` or on leaving a ``with`` block.

    """

    __slots__ = ("_buffer", "_trace", "_scanning", "_closed")

    def __init__(self, text: str, *, trace: TraceSink | None = None) -> None:
        self._buffer = TextBuffer(text)
        self._trace = trace
        self._scanning = False
        self._closed = False

    def __repr__(self) -> str:
        return f"Engine({self._buffer!r})"

    def __enter__(self) -> Engine:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Detach the trace sink. Safe to call more than once.

        The engine keeps working afterwards, without tracing.
        """
        self._trace = None
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def text(self) -> str:
        """Current text, including all edits made so far."""
        return self._buffer.text

    @property
    def buffer(self) -> TextBuffer:
        return self._buffer

    # =========================================================================
    # Scanning
    # =========================================================================

    def apply(
        self,
        pattern: Pattern | str,
        callback: MatchCallback,
        case_sensitive: bool | None = None,
        label: str | None = None,
    ) -> int:
        """Scan the text, calling callback once per match, left to right.

        Args:
            pattern: Compiled Pattern, or a pattern string to compile
            callback: Receives a MatchHandle for each match; edits it queues
                are committed before scanning resumes
            case_sensitive: Match literals with exact case. Defaults to the
                active ScanConfig.
            label: Name attached to trace events. Defaults to the active
                ScanConfig.

        Returns:
            Number of matches found.

        Raises:
            TypeError: pattern or callback is None, or pattern is neither a
                Pattern nor a str
            ScanInProgressError: called from inside a callback of this engine
        """
        if pattern is None:
            raise TypeError("pattern must not be None")
        if callback is None:
            raise TypeError("callback must not be None")
        if self._scanning:
            raise ScanInProgressError("a scan is already running on this engine")
        if isinstance(pattern, str):
            pattern = compile(pattern)
        elif not isinstance(pattern, Pattern):
            raise TypeError(f"pattern must be a Pattern or str, not {type(pattern).__name__}")

        config = self._resolve_config(case_sensitive, label)
        scanner = Scanner(self._buffer, pattern, callback, config, trace=self._trace)

        self._scanning = True
        try:
            count = scanner.run()
        finally:
            self._scanning = False

        logger.debug(
            "applied %r%s: %d match(es)",
            pattern.source,
            f" ({config.label})" if config.label else "",
            count,
        )
        return count

    @staticmethod
    def _resolve_config(case_sensitive: bool | None, label: str | None) -> ScanConfig:
        config = get_scan_config()
        overrides = {}
        if case_sensitive is not None:
            overrides["case_sensitive"] = case_sensitive
        if label is not None:
            overrides["label"] = label
        return dataclasses.replace(config, **overrides) if overrides else config

    # =========================================================================
    # Direct access
    # =========================================================================

    def replace(self, start: int, remove_length: int = 0, insert_text: str = "") -> None:
        """Splice the text directly. See TextBuffer.replace."""
        if self._scanning:
            raise ScanInProgressError("edit through the match handle while a scan is running")
        self._buffer.replace(start, remove_length, insert_text)

    def before(self, key: str, start: int = 0) -> str | None:
        """Text between start and the first occurrence of key, or None."""
        return self._buffer.before(key, start)

    def after(self, key: str, start: int = 0) -> str | None:
        """Text after the first occurrence of key, or None."""
        return self._buffer.after(key, start)

    def slice_from(self, index: int, length: int | None = None) -> str | None:
        """Substring at index, or None when out of range."""
        return self._buffer.slice_from(index, length)
