"""
splicer: pattern-driven text scanning and in-place editing

Locates successive occurrences of a small placeholder pattern in a text,
hands each match to a callback, and lets the callback rewrite the matched
span before scanning resumes further along in the edited text.

Pattern syntax:
    text      literal characters
    *         whitespace-only gap (spaces, tabs, CR, LF)
    [name]    named capture

Quick Start:
    >>> from splicer import Engine, compile
    >>> engine = Engine("; A=B\\n; C=D\\n")
    >>> def to_set(m):
    ...     m.replace(f"SET {m.get_value('name').strip()}={m.get_value('value')}\\n")
    >>> engine.apply(compile(";[name]=[value]\\n"), to_set)
    2
    >>> engine.text
    'SET A=B\\nSET C=D\\n'

Matching is single-pass, greedy and non-backtracking; it is not a regular
expression engine.
"""

from splicer.buffer import Edit, TextBuffer
from splicer.config import (
    ScanConfig,
    get_scan_config,
    reset_scan_config,
    scan_config_context,
    set_scan_config,
)
from splicer.engine import Engine
from splicer.errors import (
    EditConflictError,
    PatternError,
    ScanInProgressError,
    SpliceRangeError,
    SplicerError,
    StaleHandleError,
)
from splicer.match import CaptureSpan, Match, MatchHandle
from splicer.pattern import Pattern, PatternDiagnostic, compile
from splicer.scanner import MatchCallback, Scanner
from splicer.tokens import Capture, Gap, Literal, Token, TokenKind
from splicer.trace import TraceEvent, TraceRecorder, TraceSink

__version__ = "0.1.0"


def apply(
    text: str,
    pattern: Pattern | str,
    callback: MatchCallback,
    *,
    case_sensitive: bool | None = None,
    label: str | None = None,
) -> str:
    """Run one scan over text and return the edited text.

    Convenience wrapper for a throwaway Engine.

    Example:
        >>> apply("a=1", "[k]=[v]", lambda m: m.set_value("v", "2"))
        'a=2'
    """
    engine = Engine(text)
    engine.apply(pattern, callback, case_sensitive=case_sensitive, label=label)
    return engine.text


__all__ = [
    # Core
    "Engine",
    "apply",
    "compile",
    "Pattern",
    "PatternDiagnostic",
    # Tokens
    "Capture",
    "Gap",
    "Literal",
    "Token",
    "TokenKind",
    # Matching
    "CaptureSpan",
    "Match",
    "MatchCallback",
    "MatchHandle",
    "Scanner",
    # Buffer
    "Edit",
    "TextBuffer",
    # Config
    "ScanConfig",
    "get_scan_config",
    "reset_scan_config",
    "scan_config_context",
    "set_scan_config",
    # Tracing
    "TraceEvent",
    "TraceRecorder",
    "TraceSink",
    # Errors
    "EditConflictError",
    "PatternError",
    "ScanInProgressError",
    "SpliceRangeError",
    "SplicerError",
    "StaleHandleError",
    "__version__",
]
