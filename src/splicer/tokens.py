"""Token definitions for compiled patterns.

A compiled Pattern is a tuple of tokens. Each token is one of three
frozen dataclasses forming a closed tagged variant:

- Literal: exact text that must occur
- Capture: named placeholder whose span is exposed to the callback
- Gap: unnamed placeholder that may only span whitespace

The scanner dispatches on the token class with ``match``.

Thread Safety:
Tokens are frozen (immutable) and safe to share across threads.

"""

from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    """Kind tag of a pattern token."""

    LITERAL = "literal"
    CAPTURE = "capture"
    GAP = "gap"


@dataclass(frozen=True, slots=True)
class Literal:
    """Exact substring that must occur in the text.

    Attributes:
        text: The literal text (never empty when produced by the compiler)
    """

    text: str

    @property
    def kind(self) -> TokenKind:
        return TokenKind.LITERAL

    def __repr__(self) -> str:
        return f"Literal({self.text!r})"


@dataclass(frozen=True, slots=True)
class Capture:
    """Named placeholder; the matched span is surfaced to the callback.

    Attributes:
        name: Raw characters between the brackets
    """

    name: str

    @property
    def kind(self) -> TokenKind:
        return TokenKind.CAPTURE

    def __repr__(self) -> str:
        return f"Capture({self.name!r})"


@dataclass(frozen=True, slots=True)
class Gap:
    """Unnamed placeholder matching only spaces, tabs, CR and LF."""

    @property
    def kind(self) -> TokenKind:
        return TokenKind.GAP

    def __repr__(self) -> str:
        return "Gap()"


type Token = Literal | Capture | Gap
"""Any pattern token."""


def is_placeholder(token: Token) -> bool:
    """Return True for Capture and Gap tokens."""
    return not isinstance(token, Literal)
