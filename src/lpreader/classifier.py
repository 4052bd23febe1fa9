"""Token classifier: reclassifies raw tokens into semantic tokens.

Whether a string is a section keyword, a name label, or a variable depends
on its neighbours, so the classifier matches short raw-token patterns
against the lexer's lookahead window, first match wins.
"""

from __future__ import annotations

import math

from lpreader.errors import (
    MalformedExpressionError,
    MalformedSosEntryError,
    UnexpectedEndOfSectionError,
    UnknownTokenError,
)
from lpreader.lexer import Lexer
from lpreader.tokens import (
    Comparison,
    RawToken,
    RawTokenType,
    SectionKeyword,
    Span,
    Token,
    TokenType,
)

_MINIMIZE = frozenset({"min", "minimize", "minimise"})
_MAXIMIZE = frozenset({"max", "maximize", "maximise"})
_CONSTRAINTS = frozenset({"st", "s.t.", "subject to", "such that"})
_BOUNDS = frozenset({"bounds", "bound"})
_BINARY = frozenset({"bin", "binary", "binaries"})
_GENERAL = frozenset({"gen", "general", "generals", "int", "integer", "integers"})
_SEMICONTINUOUS = frozenset({"semi", "semi-continuous", "semis"})
_SOS = frozenset({"sos"})
_END = frozenset({"end"})

_FREE = frozenset({"free"})
_INFINITY = frozenset({"inf", "infinity"})

_SECTION_KEYWORDS: dict[str, SectionKeyword] = {
    spelling: keyword
    for spellings, keyword in (
        (_MINIMIZE, SectionKeyword.MINIMIZE),
        (_MAXIMIZE, SectionKeyword.MAXIMIZE),
        (_CONSTRAINTS, SectionKeyword.CONSTRAINTS),
        (_BOUNDS, SectionKeyword.BOUNDS),
        (_BINARY, SectionKeyword.BINARY),
        (_GENERAL, SectionKeyword.GENERAL),
        (_SEMICONTINUOUS, SectionKeyword.SEMICONTINUOUS),
        (_SOS, SectionKeyword.SOS),
        (_END, SectionKeyword.END),
    )
    for spelling in spellings
}

_STRUCTURAL: dict[RawTokenType, TokenType] = {
    RawTokenType.LBRACKET: TokenType.LBRACKET,
    RawTokenType.RBRACKET: TokenType.RBRACKET,
    RawTokenType.SLASH: TokenType.SLASH,
    RawTokenType.ASTERISK: TokenType.ASTERISK,
    RawTokenType.CARET: TokenType.CARET,
}


def section_keyword(text: str) -> SectionKeyword | None:
    """Look up a (possibly multi-word) section keyword, ignoring case."""
    return _SECTION_KEYWORDS.get(text.lower())


def _is_infinity(tok: RawToken) -> bool:
    return tok.type == RawTokenType.STRING and str(tok.value).lower() in _INFINITY


class TokenClassifier:
    """Consume a lexer's raw tokens and emit semantic tokens."""

    def __init__(self, lexer: Lexer, filename: str = "input.lp") -> None:
        self._lx = lexer
        self._filename = filename
        self._tokens: list[Token] = []

    def classify(self) -> list[Token]:
        """Classify the whole input and return the semantic token list."""
        while not self._lx.at(RawTokenType.EOF):
            self._classify_next()
        return self._tokens

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _emit(self, tt: TokenType, value, count: int = 1) -> None:
        """Emit one token spanning the next ``count`` raw tokens and consume them."""
        first = self._lx.peek()
        last = self._lx.peek(count - 1)
        self._tokens.append(Token(tt, value, Span(first.span.start, last.span.end)))
        self._lx.advance(count)

    def _skip_block_comment(self) -> None:
        start = self._lx.peek().span
        self._lx.advance(2)  # consume '/' '*'
        while not self._lx.at(RawTokenType.ASTERISK, RawTokenType.SLASH):
            if self._lx.at(RawTokenType.EOF):
                raise UnexpectedEndOfSectionError(
                    "unterminated block comment", start, self._lx.source, self._filename
                )
            self._lx.advance()
        self._lx.advance(2)

    # ------------------------------------------------------------------
    # Pattern matching
    # ------------------------------------------------------------------

    def _classify_next(self) -> None:
        lx = self._lx
        tok = lx.peek()

        if lx.at(RawTokenType.SLASH, RawTokenType.ASTERISK):
            self._skip_block_comment()
            return

        if tok.type == RawTokenType.STRING:
            self._classify_string(tok)
            return

        if lx.at(RawTokenType.PLUS, RawTokenType.NUMBER):
            self._emit(TokenType.CONSTANT, lx.peek(1).value, 2)
            return

        if lx.at(RawTokenType.MINUS, RawTokenType.NUMBER):
            self._emit(TokenType.CONSTANT, -lx.peek(1).value, 2)
            return

        # Signed infinity: "-inf", "+infinity"
        if tok.type in (RawTokenType.PLUS, RawTokenType.MINUS) and _is_infinity(lx.peek(1)):
            sign = -1.0 if tok.type == RawTokenType.MINUS else 1.0
            self._emit(TokenType.CONSTANT, sign * math.inf, 2)
            return

        if lx.at(RawTokenType.PLUS, RawTokenType.LBRACKET):
            self._emit(TokenType.LBRACKET, None, 2)
            return

        if lx.at(RawTokenType.MINUS, RawTokenType.LBRACKET) or lx.at(
            RawTokenType.NUMBER, RawTokenType.LBRACKET
        ):
            raise MalformedExpressionError(
                "a coefficient or '-' before '[' is not supported",
                Span(tok.span.start, lx.peek(1).span.end),
                lx.source,
                self._filename,
            )

        if tok.type == RawTokenType.PLUS:
            self._emit(TokenType.CONSTANT, 1.0)
            return

        if tok.type == RawTokenType.MINUS:
            self._emit(TokenType.CONSTANT, -1.0)
            return

        if tok.type == RawTokenType.NUMBER:
            self._emit(TokenType.CONSTANT, tok.value)
            return

        structural = _STRUCTURAL.get(tok.type)
        if structural is not None:
            self._emit(structural, None)
            return

        if lx.at(RawTokenType.LESS, RawTokenType.EQUALS):
            self._emit(TokenType.COMPARISON, Comparison.LEQ, 2)
            return

        if tok.type == RawTokenType.LESS:
            self._emit(TokenType.COMPARISON, Comparison.LESS)
            return

        if lx.at(RawTokenType.GREATER, RawTokenType.EQUALS):
            self._emit(TokenType.COMPARISON, Comparison.GEQ, 2)
            return

        if tok.type == RawTokenType.GREATER:
            self._emit(TokenType.COMPARISON, Comparison.GREATER)
            return

        if tok.type == RawTokenType.EQUALS:
            self._emit(TokenType.COMPARISON, Comparison.EQ)
            return

        raise UnknownTokenError("unexpected symbol", tok.span, lx.source, self._filename)

    def _classify_string(self, tok: RawToken) -> None:
        lx = self._lx
        text = str(tok.value)

        # Hyphenated keyword, e.g. "semi-continuous"
        if lx.at(RawTokenType.STRING, RawTokenType.MINUS, RawTokenType.STRING):
            keyword = section_keyword(f"{text}-{lx.peek(2).value}")
            if keyword is not None:
                self._emit(TokenType.SECTION, keyword, 3)
                return

        # Two-word keyword, e.g. "subject to"
        if lx.at(RawTokenType.STRING, RawTokenType.STRING):
            keyword = section_keyword(f"{text} {lx.peek(1).value}")
            if keyword is not None:
                self._emit(TokenType.SECTION, keyword, 2)
                return

        keyword = section_keyword(text)
        if keyword is not None:
            self._emit(TokenType.SECTION, keyword)
            return

        # SOS type marker "S1::" / "S2::"
        if lx.at(RawTokenType.STRING, RawTokenType.COLON, RawTokenType.COLON):
            if len(text) != 2 or text[0] not in "sS" or text[1] not in "12":
                raise MalformedSosEntryError(
                    f"expected 'S1' or 'S2' before '::', got {text!r}",
                    tok.span,
                    lx.source,
                    self._filename,
                )
            self._emit(TokenType.SOS_TYPE, int(text[1]), 3)
            return

        if lx.at(RawTokenType.STRING, RawTokenType.COLON):
            self._emit(TokenType.LABEL, text, 2)
            return

        lowered = text.lower()
        if lowered in _FREE:
            self._emit(TokenType.FREE, None)
            return

        if lowered in _INFINITY:
            self._emit(TokenType.CONSTANT, math.inf)
            return

        self._emit(TokenType.VARIABLE, text)


def classify(source: str, filename: str = "input.lp") -> list[Token]:
    """Convenience function: lex and classify source text."""
    lexer = Lexer(source.splitlines(keepends=True), filename)
    return TokenClassifier(lexer, filename).classify()
