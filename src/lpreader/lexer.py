"""LP lexer: turns a line-oriented character stream into raw tokens.

The lexer pulls one physical line at a time from its input and exposes a
fixed five-token lookahead window.  Callers inspect the window with
:meth:`Lexer.peek` and move it with :meth:`Lexer.advance`.
"""

from __future__ import annotations

import re
from collections import deque
from collections.abc import Iterable

from lpreader.errors import UnexpectedCharacterError
from lpreader.tokens import (
    WHITESPACE,
    Position,
    RawToken,
    RawTokenType,
    Span,
    is_name_char,
)

LOOKAHEAD = 5

_PUNCTUATION: dict[str, RawTokenType] = {
    "[": RawTokenType.LBRACKET,
    "]": RawTokenType.RBRACKET,
    "<": RawTokenType.LESS,
    ">": RawTokenType.GREATER,
    "=": RawTokenType.EQUALS,
    ":": RawTokenType.COLON,
    "+": RawTokenType.PLUS,
    "-": RawTokenType.MINUS,
    "^": RawTokenType.CARET,
    "/": RawTokenType.SLASH,
    "*": RawTokenType.ASTERISK,
}

# Unsigned decimal literal; independent of the process locale
_NUMBER = re.compile(r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class Lexer:
    """Tokenize LP source lines with a five-token sliding lookahead window."""

    def __init__(self, lines: Iterable[str], filename: str = "input.lp") -> None:
        self._lines = iter(lines)
        self._filename = filename
        self._line = ""
        self._pos = 0
        self._line_no = 0
        self._line_offset = 0
        self._next_line_offset = 0
        self._exhausted = False
        self.source_lines: list[str] = []

        self._window: deque[RawToken] = deque(maxlen=LOOKAHEAD)
        for _ in range(LOOKAHEAD):
            self._window.append(self._next_token())

    # ------------------------------------------------------------------
    # Window
    # ------------------------------------------------------------------

    def peek(self, offset: int = 0) -> RawToken:
        """Return the token ``offset`` places ahead of the current one."""
        if not 0 <= offset < LOOKAHEAD:
            raise IndexError(f"lookahead offset {offset} outside window of {LOOKAHEAD}")
        return self._window[offset]

    def at(self, *types: RawTokenType) -> bool:
        """True if the window starts with tokens of exactly these types."""
        return all(self._window[i].type == tt for i, tt in enumerate(types))

    def advance(self, count: int = 1) -> None:
        """Drop ``count`` tokens from the front of the window, refilling at the back."""
        for _ in range(count):
            self._window.append(self._next_token())

    @property
    def source(self) -> str:
        """Text of every line read so far."""
        return "\n".join(self.source_lines)

    # ------------------------------------------------------------------
    # Token production
    # ------------------------------------------------------------------

    def _next_token(self) -> RawToken:
        while True:
            tok = self._read_token()
            if tok is not None:
                return tok

    def _read_token(self) -> RawToken | None:
        """Produce the next raw token, or None when only input was consumed."""
        if self._pos >= len(self._line):
            if self._exhausted or not self._read_line():
                return self._eof_token()
            return None

        ch = self._line[self._pos]

        if ch == "\\":
            # Line comment
            self._pos = len(self._line)
            return None

        tt = _PUNCTUATION.get(ch)
        if tt is not None:
            start = self._current_pos()
            self._pos += 1
            return RawToken(tt, None, Span(start, self._current_pos()))

        if ch in WHITESPACE:
            self._pos += 1
            return None

        if ch == ";":
            self._pos = len(self._line)
            return None

        if ch == "\0":
            raise self._error("NUL character in source")

        m = _NUMBER.match(self._line, self._pos)
        if m:
            start = self._current_pos()
            self._pos = m.end()
            return RawToken(RawTokenType.NUMBER, float(m.group()), Span(start, self._current_pos()))

        end = self._pos
        while end < len(self._line) and is_name_char(self._line[end]):
            end += 1
        if end > self._pos:
            start = self._current_pos()
            text = self._line[self._pos : end]
            self._pos = end
            return RawToken(RawTokenType.STRING, text, Span(start, self._current_pos()))

        raise self._error(f"unexpected character {ch!r}")

    def _read_line(self) -> bool:
        line = next(self._lines, None)
        if line is None:
            self._exhausted = True
            return False

        self._line_no += 1
        self._line_offset = self._next_line_offset
        self._next_line_offset += len(line)

        line = line.rstrip("\n")
        if line.endswith("\r"):
            line = line[:-1]
        self.source_lines.append(line)
        self._line = line
        self._pos = 0
        return True

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(max(self._line_no, 1), self._pos + 1, self._line_offset + self._pos)

    def _eof_token(self) -> RawToken:
        pos = self._current_pos()
        return RawToken(RawTokenType.EOF, None, Span(pos, pos))

    def _error(self, message: str) -> UnexpectedCharacterError:
        return UnexpectedCharacterError(message, self._current_pos(), self.source, self._filename)


def tokenize(source: str, filename: str = "input.lp") -> list[RawToken]:
    """Convenience function: tokenize source text, returning tokens up to and including EOF."""
    lexer = Lexer(source.splitlines(keepends=True), filename)
    tokens: list[RawToken] = []
    while True:
        tok = lexer.peek()
        tokens.append(tok)
        if tok.type == RawTokenType.EOF:
            return tokens
        lexer.advance()
