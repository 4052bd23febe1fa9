"""Error types with formatted source context.

Every error is fatal: the reader raises at the first violation and the
exception propagates to the caller unchanged.  The reader attaches the
source text and filename before re-raising so that ``str(exc)`` shows the
offending line.
"""

from __future__ import annotations

from lpreader.tokens import Position, Span


class ReadError(Exception):
    """Base class for all LP reading failures."""

    def __init__(self, message: str, source: str = "", filename: str = "input.lp") -> None:
        self.message = message
        self.source = source
        self.filename = filename
        super().__init__(message)

    def __str__(self) -> str:
        return self.format(self.filename)

    def format(self, filename: str = "input.lp") -> str:
        return f"error: {self.message}\n --> {filename}"


class UnopenableInputError(ReadError):
    """Raised when the input file cannot be opened or decoded."""

    def __init__(self, message: str, path: str) -> None:
        self.path = path
        super().__init__(message, filename=path)


class UnexpectedCharacterError(ReadError):
    """Raised by the lexer on a character that starts no token."""

    def __init__(
        self, message: str, position: Position, source: str = "", filename: str = "input.lp"
    ) -> None:
        self.position = position
        super().__init__(message, source, filename)

    def format(self, filename: str = "input.lp") -> str:
        lines = self.source.splitlines()
        line_idx = self.position.line - 1
        col = self.position.column
        source_line = lines[line_idx] if 0 <= line_idx < len(lines) else ""
        return _render(self.message, filename, self.position.line, col, source_line, 1)


class ParseError(ReadError):
    """Raised on the first grammar violation, with span and source context."""

    def __init__(
        self, message: str, span: Span, source: str = "", filename: str = "input.lp"
    ) -> None:
        self.span = span
        super().__init__(message, source, filename)

    def format(self, filename: str = "input.lp") -> str:
        lines = self.source.splitlines()
        line_idx = self.span.start.line - 1
        col = self.span.start.column
        source_line = lines[line_idx] if 0 <= line_idx < len(lines) else ""

        # Underline the full span when on one line, otherwise to end of line
        if self.span.end.line == self.span.start.line:
            underline_len = max(1, self.span.end.column - col)
        else:
            underline_len = max(1, len(source_line) - col + 1)

        return _render(self.message, filename, self.span.start.line, col, source_line, underline_len)


class UnknownTokenError(ParseError):
    """A token sequence the classifier has no rule for."""


class UnexpectedTokenError(ParseError):
    """A valid token in a place where the section grammar does not allow it."""


class DuplicateSectionError(ParseError):
    """A section keyword (or both objective senses) appeared twice."""


class UnexpectedEndOfSectionError(ParseError):
    """A section or the input ended where more tokens were required."""


class MalformedExpressionError(ParseError):
    """Bad quadratic pattern, wrong exponent, or unsupported sign/bracket use."""


class MalformedBoundError(ParseError):
    """A bounds entry that matches no bound form."""


class MalformedSosEntryError(ParseError):
    """A special-ordered-set entry without name, type, or weight."""


def _render(
    message: str, filename: str, line: int, col: int, source_line: str, underline_len: int
) -> str:
    pad = " " * (col - 1)
    carets = "^" * underline_len

    line_num = str(line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )
