"""Token-by-token scanner driving a Pattern over a TextBuffer.

Matching is single-pass and greedy, with no backtracking across tokens:

- A Literal is searched for from the cursor. If it is missing, the scan ends
  for good; no later occurrence is looked for.
- A Capture or Gap spans from the cursor to the next token's literal text,
  or to the end of the text when it is the last token. If that delimiter is
  missing, or a Gap span holds anything but whitespace, the attempt is
  abandoned and the pattern restarts at the same cursor.

After every full match the callback runs, its queued edits are committed,
and the cursor moves to the next occurrence of the leading literal.

Progress guard:
An abandoned attempt that started and failed at the same cursor would be
retried in an identical state forever. After ``max_stalled_attempts`` such
stalls in a row the scanner steps the cursor one character ahead. A
zero-width match is followed by the same step.

Thread Safety:
Scanner instances are single-use, bound to one buffer for one scan.

"""

from __future__ import annotations

import logging
from collections.abc import Callable

from splicer.buffer import TextBuffer
from splicer.config import ScanConfig
from splicer.match import CaptureSpan, Match, MatchHandle
from splicer.pattern import Pattern
from splicer.tokens import Capture, Gap, Literal, Token
from splicer.trace import TraceEvent, TraceSink
from splicer.utils.logger import get_logger
from splicer.utils.text import escape_control, is_gap_text

logger = get_logger(__name__)

type MatchCallback = Callable[[MatchHandle], None]


class Scanner:
    """Runs one scan of a pattern over a buffer.

    Usage:
            >>> scanner = Scanner(buffer, pattern, callback, config)
            >>> scanner.run()
            2

    """

    __slots__ = (
        "_buffer",
        "_pattern",
        "_tokens",
        "_callback",
        "_case_sensitive",
        "_label",
        "_max_stalls",
        "_trace",
        "_debug",
        "_token_index",
        "_match_start",
        "_attempt_origin",
        "_spans",
        "_stalls",
        "_matches",
    )

    def __init__(
        self,
        buffer: TextBuffer,
        pattern: Pattern,
        callback: MatchCallback,
        config: ScanConfig,
        trace: TraceSink | None = None,
    ) -> None:
        self._buffer = buffer
        self._pattern = pattern
        self._tokens = pattern.tokens
        self._callback = callback
        self._case_sensitive = config.case_sensitive
        self._label = config.label
        self._max_stalls = config.max_stalled_attempts
        self._trace = trace
        self._debug = logger.isEnabledFor(logging.DEBUG)

        self._token_index = 0
        self._match_start = 0
        self._attempt_origin = 0
        self._spans: list[CaptureSpan] = []
        self._stalls = 0
        self._matches = 0

    def run(self) -> int:
        """Scan to completion, invoking the callback once per match.

        Returns:
            Number of matches handed to the callback.
        """
        buffer = self._buffer
        buffer.cursor = 0
        try:
            if self._tokens:
                self._scan()
        finally:
            buffer.cursor = 0
        return self._matches

    # =========================================================================
    # Main loop
    # =========================================================================

    def _scan(self) -> None:
        buffer = self._buffer
        tokens = self._tokens
        anchor = self._pattern.anchor

        if anchor is not None:
            first = buffer.find(anchor.text, 0, case_sensitive=self._case_sensitive)
            if first == -1:
                self._emit(0, anchor, found=False, position=0)
                return
            buffer.cursor = first

        self._begin_attempt()
        while True:
            if self._token_index == len(tokens):
                if not self._complete_match():
                    return
                continue

            match tokens[self._token_index]:
                case Literal() as token:
                    if not self._match_literal(token):
                        return
                case Capture() | Gap() as token:
                    if not self._match_placeholder(token):
                        return

    def _begin_attempt(self) -> None:
        self._token_index = 0
        self._spans = []
        self._attempt_origin = self._buffer.cursor
        self._match_start = self._buffer.cursor

    def _match_literal(self, token: Literal) -> bool:
        """Match a literal at or after the cursor.

        Returns:
            False when the literal is missing and the scan must end.
        """
        buffer = self._buffer
        cursor = buffer.cursor
        found = buffer.find(token.text, cursor, case_sensitive=self._case_sensitive)
        if found == -1:
            self._emit(self._token_index, token, found=False, position=cursor)
            return False

        if self._token_index == 0:
            self._match_start = found
        buffer.cursor = found + len(token.text)
        self._emit(self._token_index, token, found=True, position=found)
        self._token_index += 1
        return True

    def _match_placeholder(self, token: Capture | Gap) -> bool:
        """Match a Capture or Gap up to the following delimiter.

        Returns:
            False when the delimiter is missing from the cursor onward, which
            ends the scan.
        """
        buffer = self._buffer
        cursor = buffer.cursor
        index = self._token_index
        delimiter = self._delimiter_after(index)

        if delimiter is None:
            end = len(buffer)
        else:
            end = buffer.find(delimiter, cursor, case_sensitive=self._case_sensitive)
            if end == -1:
                # The cursor only moves forward and the text only changes after a
                # completed match, so no later attempt can find it either.
                self._emit(
                    index, token, found=False, position=cursor, reason="delimiter not found"
                )
                return False

        span = buffer.text[cursor:end]
        match token:
            case Gap():
                if not is_gap_text(span):
                    self._emit(
                        index, token, found=False, position=cursor, reason="non-whitespace in gap"
                    )
                    return self._abandon()
            case Capture(name=name):
                self._spans.append(CaptureSpan(name, span, cursor))

        self._emit(index, token, found=True, position=cursor)
        buffer.cursor = end
        self._token_index += 1
        return True

    def _delimiter_after(self, index: int) -> str | None:
        """Text that bounds the placeholder at index.

        None means the placeholder runs to the end of the text. A placeholder
        followed by another placeholder is bounded by the empty string, so it
        spans nothing.
        """
        if index + 1 >= len(self._tokens):
            return None
        following: Token = self._tokens[index + 1]
        if isinstance(following, Literal):
            return following.text
        return ""

    def _abandon(self) -> bool:
        """Restart the pattern at the current cursor.

        Returns:
            False when the cursor cannot be moved ahead any further.
        """
        buffer = self._buffer
        if buffer.cursor == self._attempt_origin:
            self._stalls += 1
            if self._stalls >= self._max_stalls:
                self._stalls = 0
                if not self._step_forward():
                    return False
        else:
            self._stalls = 0
        self._begin_attempt()
        return True

    def _step_forward(self) -> bool:
        """Move the cursor one character ahead, or report the text exhausted."""
        buffer = self._buffer
        if buffer.cursor >= len(buffer):
            return False
        buffer.cursor += 1
        if self._debug:
            logger.debug("no progress at %d; stepping to %d", buffer.cursor - 1, buffer.cursor)
        return True

    # =========================================================================
    # Completed matches
    # =========================================================================

    def _complete_match(self) -> bool:
        """Hand a full match to the callback and find the next candidate.

        Returns:
            False when the scan is over.
        """
        buffer = self._buffer
        start = self._match_start
        end = buffer.cursor
        found = Match(start=start, end=end, text=buffer.text[start:end], spans=tuple(self._spans))

        handle = MatchHandle(found)
        try:
            self._callback(handle)
        finally:
            edits = handle._release()
        self._matches += 1
        if edits:
            buffer.commit(edits)
            # Edits lie inside the match, so its new end is the old end plus
            # their deltas. The splice rule alone leaves text inserted exactly
            # at the end ahead of the cursor, where it would be rescanned.
            buffer.cursor = end + sum(edit.delta for edit in edits)

        if start == end and buffer.cursor == start and not self._step_forward():
            return False
        if buffer.cursor >= len(buffer):
            return False

        anchor = self._pattern.anchor
        if anchor is not None:
            after = buffer.find(anchor.text, buffer.cursor, case_sensitive=self._case_sensitive)
            if after != -1:
                buffer.cursor = after

        self._stalls = 0
        self._begin_attempt()
        return True

    # =========================================================================
    # Tracing
    # =========================================================================

    def _emit(
        self,
        index: int,
        token: Token,
        *,
        found: bool,
        position: int,
        reason: str = "",
    ) -> None:
        if self._trace is None and not self._debug:
            return

        match token:
            case Literal(text=text):
                value = escape_control(text)
            case Capture(name=name):
                value = escape_control(name)
            case Gap():
                value = ""

        event = TraceEvent(
            label=self._label,
            token_index=index,
            token_count=len(self._tokens),
            token_kind=token.kind,
            token_value=value,
            found=found,
            position=position,
            reason=reason,
        )
        if self._debug:
            logger.debug("%s", event)
        if self._trace is not None:
            self._trace(event)


__all__ = [
    "MatchCallback",
    "Scanner",
]
