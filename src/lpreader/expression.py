"""Shared linear/quadratic expression grammar for objectives and constraints."""

from __future__ import annotations

from lpreader.builder import ModelBuilder
from lpreader.errors import MalformedExpressionError, UnexpectedEndOfSectionError
from lpreader.model import Expression, LinearTerm, QuadraticTerm
from lpreader.sections import TokenSlice
from lpreader.tokens import Token, TokenType

_CONSTANT = TokenType.CONSTANT
_VARIABLE = TokenType.VARIABLE
_CARET = TokenType.CARET
_ASTERISK = TokenType.ASTERISK


def parse_expression(
    tokens: TokenSlice, builder: ModelBuilder, is_objective: bool
) -> tuple[Expression, TokenSlice]:
    """Parse ``[label] term*`` and return the expression with the unconsumed rest.

    Parsing stops at the first token no term can start with; the caller
    decides whether that token is legal (a comparison in a constraint,
    nothing at all in the objective).
    """
    name: str | None = None
    if tokens.at(TokenType.LABEL):
        name = str(tokens.peek().value)
        tokens = tokens.advance()

    offset = 0.0
    linear: list[LinearTerm] = []
    quadratic: list[QuadraticTerm] = []

    while not tokens.at_end():
        tok = tokens.peek()

        if tokens.at(_CONSTANT, _VARIABLE):
            var = tokens.peek(1)
            linear.append(LinearTerm(tok.value, builder.resolve_variable(var.value)))
            tokens = tokens.advance(2)
            continue

        if tok.type == _CONSTANT:
            offset += tok.value
            tokens = tokens.advance()
            continue

        if tok.type == _VARIABLE:
            linear.append(LinearTerm(1.0, builder.resolve_variable(tok.value)))
            tokens = tokens.advance()
            continue

        if tok.type == TokenType.LBRACKET:
            tokens = _parse_quadratic_group(tokens, builder, is_objective, quadratic)
            continue

        break

    return Expression(name, offset, tuple(linear), tuple(quadratic)), tokens


def _parse_quadratic_group(
    tokens: TokenSlice,
    builder: ModelBuilder,
    is_objective: bool,
    terms: list[QuadraticTerm],
) -> TokenSlice:
    """Parse ``[ quad_atom* ]`` (plus ``/ 2`` in the objective), appending to terms."""
    open_span = tokens.peek().span
    tokens = tokens.advance()  # consume '['

    while not tokens.at(TokenType.RBRACKET):
        if tokens.at_end():
            raise UnexpectedEndOfSectionError("unterminated quadratic term group '['", open_span)

        if tokens.at(_CONSTANT, _VARIABLE, _CARET, _CONSTANT):
            _check_exponent(tokens.peek(3))
            handle = builder.resolve_variable(tokens.peek(1).value)
            terms.append(QuadraticTerm(tokens.peek().value, handle, handle))
            tokens = tokens.advance(4)

        elif tokens.at(_VARIABLE, _CARET, _CONSTANT):
            _check_exponent(tokens.peek(2))
            handle = builder.resolve_variable(tokens.peek().value)
            terms.append(QuadraticTerm(1.0, handle, handle))
            tokens = tokens.advance(3)

        elif tokens.at(_CONSTANT, _VARIABLE, _ASTERISK, _VARIABLE):
            terms.append(
                QuadraticTerm(
                    tokens.peek().value,
                    builder.resolve_variable(tokens.peek(1).value),
                    builder.resolve_variable(tokens.peek(3).value),
                )
            )
            tokens = tokens.advance(4)

        elif tokens.at(_VARIABLE, _ASTERISK, _VARIABLE):
            terms.append(
                QuadraticTerm(
                    1.0,
                    builder.resolve_variable(tokens.peek().value),
                    builder.resolve_variable(tokens.peek(2).value),
                )
            )
            tokens = tokens.advance(3)

        else:
            raise MalformedExpressionError(
                "expected a quadratic term such as 'x ^ 2' or '3 x * y'", tokens.peek().span
            )

    close = tokens.peek()
    tokens = tokens.advance()  # consume ']'

    if not is_objective:
        return tokens

    # In the objective a quadratic group is written as [ ... ] / 2
    if tokens.at(TokenType.SLASH, _CONSTANT):
        divisor = tokens.peek(1)
        if divisor.value != 2.0:
            raise MalformedExpressionError(
                f"quadratic objective terms must be divided by 2, not {divisor.value:g}",
                divisor.span,
            )
        return tokens.advance(2)

    if tokens.at_end() or (tokens.at(TokenType.SLASH) and len(tokens) == 1):
        raise UnexpectedEndOfSectionError(
            "expected '/ 2' after quadratic objective terms", close.span
        )
    raise MalformedExpressionError(
        "expected '/ 2' after quadratic objective terms", tokens.peek().span
    )


def _check_exponent(tok: Token) -> None:
    if tok.value != 2.0:
        raise MalformedExpressionError(f"only exponent 2 is supported, got {tok.value:g}", tok.span)
