"""Token types, source positions, and the raw/semantic token structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class RawTokenType(Enum):
    # Content
    STRING = auto()  # maximal run of non-special characters
    NUMBER = auto()  # unsigned decimal literal, value is a float

    # Punctuation (single-character)
    LESS = auto()  # <
    GREATER = auto()  # >
    EQUALS = auto()  # =
    COLON = auto()  # :
    LBRACKET = auto()  # [
    RBRACKET = auto()  # ]
    PLUS = auto()  # +
    MINUS = auto()  # -
    CARET = auto()  # ^
    SLASH = auto()  # /
    ASTERISK = auto()  # *

    EOF = auto()


class TokenType(Enum):
    SECTION = auto()  # value: SectionKeyword
    LABEL = auto()  # value: str (name followed by ':')
    VARIABLE = auto()  # value: str
    CONSTANT = auto()  # value: float, signs already folded in
    COMPARISON = auto()  # value: Comparison
    SOS_TYPE = auto()  # value: 1 or 2
    FREE = auto()

    # Structural
    LBRACKET = auto()  # [
    RBRACKET = auto()  # ]
    SLASH = auto()  # /
    ASTERISK = auto()  # *
    CARET = auto()  # ^


class SectionKeyword(Enum):
    NONE = auto()  # tokens before the first section keyword
    MINIMIZE = auto()
    MAXIMIZE = auto()
    CONSTRAINTS = auto()
    BOUNDS = auto()
    GENERAL = auto()
    BINARY = auto()
    SEMICONTINUOUS = auto()
    SOS = auto()
    END = auto()


class Comparison(Enum):
    LEQ = "<="
    LESS = "<"
    EQ = "="
    GREATER = ">"
    GEQ = ">="


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class RawToken:
    """A lexer token. ``value`` is the text of a STRING, the float of a NUMBER."""

    type: RawTokenType
    value: str | float | None
    span: Span


@dataclass(frozen=True, slots=True)
class Token:
    """A classified token; the payload type depends on ``type``."""

    type: TokenType
    value: SectionKeyword | Comparison | str | float | int | None
    span: Span


# Characters that end a string run
SPECIAL_CHARS = frozenset("\\:;+-<>=^/*[]")
WHITESPACE = frozenset(" \t")


def is_name_char(ch: str) -> bool:
    """Return True if ch may appear inside a string run."""
    return ch not in SPECIAL_CHARS and ch not in WHITESPACE and ch != "\0"
