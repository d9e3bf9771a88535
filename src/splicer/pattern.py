"""Pattern compiler.

Turns a pattern string into an immutable Pattern (a tuple of tokens).

Pattern syntax:
    text      literal characters match verbatim
    *         Gap: a whitespace-only span (spaces, tabs, CR, LF)
    [name]    Capture: a named span exposed to the callback

There is no escape syntax. A ``[`` inside a capture name is an ordinary name
character. An unterminated ``[name`` is dropped without emitting a Capture.

Malformed patterns compile anyway. Each problem is recorded on
``Pattern.diagnostics`` and logged as a warning; ``strict=True`` raises
PatternError instead.

Example:
    >>> compile(";[name]=[value]\\n").tokens
    (Literal(';'), Capture('name'), Literal('='), Capture('value'), Literal('\\n'))

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from splicer.errors import PatternError
from splicer.tokens import Capture, Gap, Literal, Token, is_placeholder
from splicer.utils.logger import get_logger

logger = get_logger(__name__)

GAP_MARK = "*"
CAPTURE_OPEN = "["
CAPTURE_CLOSE = "]"


@dataclass(frozen=True, slots=True)
class PatternDiagnostic:
    """A compile-time note about a malformed pattern.

    Attributes:
        code: ``unterminated-capture`` or ``adjacent-placeholders``
        message: Human-readable description
        position: Offset in the pattern string
    """

    code: str
    message: str
    position: int

    def __str__(self) -> str:
        return f"{self.code} at {self.position}: {self.message}"


@dataclass(frozen=True, slots=True)
class Pattern:
    """A compiled pattern, reusable across scans and engines.

    Attributes:
        source: The pattern string it was compiled from
        tokens: Ordered token sequence
        diagnostics: Problems found while compiling (empty when well-formed)
    """

    source: str
    tokens: tuple[Token, ...]
    diagnostics: tuple[PatternDiagnostic, ...] = ()

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    def __getitem__(self, index: int) -> Token:
        return self.tokens[index]

    @property
    def anchor(self) -> Literal | None:
        """The leading Literal used to locate candidates, if any."""
        if self.tokens and isinstance(self.tokens[0], Literal):
            return self.tokens[0]
        return None

    @property
    def capture_names(self) -> tuple[str, ...]:
        """Capture names in pattern order (duplicates kept)."""
        return tuple(t.name for t in self.tokens if isinstance(t, Capture))

    @property
    def is_well_formed(self) -> bool:
        return not self.diagnostics


def compile(pattern: str, *, strict: bool = False) -> Pattern:
    """Compile a pattern string into a Pattern.

    Args:
        pattern: Pattern text
        strict: Raise PatternError on the first diagnostic instead of
            recording it

    Returns:
        Compiled Pattern

    Raises:
        TypeError: pattern is None
        PatternError: strict is set and the pattern is malformed

    """
    if pattern is None:
        raise TypeError("pattern must be a string, not None")

    tokens: list[Token] = []
    # Token index -> offset in the pattern string, for diagnostics.
    positions: list[int] = []
    diagnostics: list[PatternDiagnostic] = []

    pending: list[str] = []
    pending_start = 0
    in_name = False
    name_start = 0

    def flush_literal() -> None:
        if pending:
            tokens.append(Literal("".join(pending)))
            positions.append(pending_start)
            pending.clear()

    for pos, ch in enumerate(pattern):
        if ch == GAP_MARK:
            flush_literal()
            tokens.append(Gap())
            positions.append(pos)
            # A name in progress stays open: "[a*b]" yields Literal("a"), Gap, Capture("b").
            pending_start = pos + 1
            continue

        if ch == CAPTURE_OPEN and not in_name:
            flush_literal()
            in_name = True
            name_start = pos
            pending_start = pos + 1
            continue

        if ch == CAPTURE_CLOSE and in_name:
            in_name = False
            tokens.append(Capture("".join(pending)))
            positions.append(name_start)
            pending.clear()
            pending_start = pos + 1
            continue

        if not pending:
            pending_start = pos
        pending.append(ch)

    if in_name:
        diagnostics.append(
            PatternDiagnostic(
                "unterminated-capture",
                f"capture name {''.join(pending)!r} has no closing ']' and is dropped",
                name_start,
            )
        )
        pending.clear()
    flush_literal()

    for index in range(len(tokens) - 1):
        if is_placeholder(tokens[index]) and is_placeholder(tokens[index + 1]):
            diagnostics.append(
                PatternDiagnostic(
                    "adjacent-placeholders",
                    f"{tokens[index]!r} is followed by {tokens[index + 1]!r} "
                    "with no literal between them; it will match an empty span",
                    positions[index + 1],
                )
            )

    diagnostics.sort(key=lambda d: d.position)

    if diagnostics:
        if strict:
            first = diagnostics[0]
            raise PatternError(first.message, position=first.position)
        for diagnostic in diagnostics:
            logger.warning("pattern %r: %s", pattern, diagnostic)

    return Pattern(source=pattern, tokens=tuple(tokens), diagnostics=tuple(diagnostics))


__all__ = [
    "Pattern",
    "PatternDiagnostic",
    "compile",
]
