"""Section grammars: one function per section kind.

Each processor takes the immutable token slice of its section and the
model builder.  The entity parsers return ``(entity, remaining slice)`` so
they can be exercised on their own.
"""

from __future__ import annotations

import math

from lpreader.builder import ModelBuilder
from lpreader.errors import (
    DuplicateSectionError,
    MalformedBoundError,
    MalformedExpressionError,
    MalformedSosEntryError,
    UnexpectedEndOfSectionError,
    UnexpectedTokenError,
)
from lpreader.expression import parse_expression
from lpreader.model import (
    Constraint,
    ObjectiveSense,
    SosEntry,
    SpecialOrderedSet,
    VariableType,
)
from lpreader.sections import TokenSlice
from lpreader.tokens import Comparison, SectionKeyword, Span, TokenType

_CONSTANT = TokenType.CONSTANT
_VARIABLE = TokenType.VARIABLE
_COMPARISON = TokenType.COMPARISON
_STRICT = (Comparison.LESS, Comparison.GREATER)


# ----------------------------------------------------------------------
# Entity parsers
# ----------------------------------------------------------------------


def parse_constraint(tokens: TokenSlice, builder: ModelBuilder) -> tuple[Constraint, TokenSlice]:
    """Parse ``expression comparison constant``."""
    expr, tokens = parse_expression(tokens, builder, is_objective=False)

    comp = tokens.peek()
    if comp is None:
        raise UnexpectedEndOfSectionError(
            "expected '<=', '=' or '>=' after constraint expression", tokens.last_span()
        )
    if comp.type != _COMPARISON:
        raise MalformedExpressionError("unexpected token in constraint expression", comp.span)
    if comp.value in _STRICT:
        raise MalformedExpressionError(
            f"strict comparison '{comp.value.value}' is not supported in constraints", comp.span
        )

    rhs = tokens.peek(1)
    if rhs is None:
        raise UnexpectedEndOfSectionError("expected right-hand side constant", comp.span)
    if rhs.type != _CONSTANT:
        raise MalformedExpressionError("right-hand side must be a constant", rhs.span)

    value = rhs.value
    if comp.value == Comparison.EQ:
        constraint = Constraint(expr, value, value)
    elif comp.value == Comparison.LEQ:
        constraint = Constraint(expr, upper_bound=value)
    else:
        constraint = Constraint(expr, lower_bound=value)
    return constraint, tokens.advance(2)


def parse_bound(tokens: TokenSlice, builder: ModelBuilder) -> TokenSlice:
    """Apply one bound declaration to its variable and return the rest."""
    tok = tokens.peek()

    # x free
    if tokens.at(_VARIABLE, TokenType.FREE):
        builder.set_bounds(builder.resolve_variable(tok.value), -math.inf, math.inf)
        return tokens.advance(2)

    # lb <= x <= ub
    if tokens.at(_CONSTANT, _COMPARISON, _VARIABLE, _COMPARISON, _CONSTANT):
        for comp in (tokens.peek(1), tokens.peek(3)):
            if comp.value != Comparison.LEQ:
                raise MalformedBoundError(
                    f"expected '<=' in double-sided bound, got '{comp.value.value}'", comp.span
                )
        handle = builder.resolve_variable(tokens.peek(2).value)
        builder.set_bounds(handle, tok.value, tokens.peek(4).value)
        return tokens.advance(5)

    # value <= x, value >= x, value = x
    if tokens.at(_CONSTANT, _COMPARISON, _VARIABLE):
        comp = tokens.peek(1)
        handle = builder.resolve_variable(tokens.peek(2).value)
        _apply_bound(builder, handle, _mirror(comp.value), tok.value, comp.span)
        return tokens.advance(3)

    # x <= value, x >= value, x = value
    if tokens.at(_VARIABLE, _COMPARISON, _CONSTANT):
        comp = tokens.peek(1)
        handle = builder.resolve_variable(tok.value)
        _apply_bound(builder, handle, comp.value, tokens.peek(2).value, comp.span)
        return tokens.advance(3)

    raise MalformedBoundError("expected a bound such as 'x <= 4', '0 <= x <= 4' or 'x free'", tok.span)


def _mirror(comp: Comparison) -> Comparison:
    """Turn ``value OP x`` into the equivalent ``x OP' value``."""
    return {
        Comparison.LEQ: Comparison.GEQ,
        Comparison.GEQ: Comparison.LEQ,
        Comparison.LESS: Comparison.GREATER,
        Comparison.GREATER: Comparison.LESS,
        Comparison.EQ: Comparison.EQ,
    }[comp]


def _apply_bound(
    builder: ModelBuilder, handle: int, comp: Comparison, value: float, span: Span
) -> None:
    """Apply ``x comp value``."""
    if comp in _STRICT:
        raise MalformedBoundError(f"strict comparison '{comp.value}' is not supported in bounds", span)
    if comp == Comparison.LEQ:
        builder.set_upper_bound(handle, value)
    elif comp == Comparison.GEQ:
        builder.set_lower_bound(handle, value)
    else:
        builder.set_bounds(handle, value, value)


def parse_sos(tokens: TokenSlice, builder: ModelBuilder) -> tuple[SpecialOrderedSet, TokenSlice]:
    """Parse ``name: S1:: var:weight ...``."""
    name_tok = tokens.peek()
    if not tokens.at(TokenType.LABEL):
        raise MalformedSosEntryError("expected set name followed by ':'", name_tok.span)

    type_tok = tokens.peek(1)
    if type_tok is None or type_tok.type != TokenType.SOS_TYPE:
        span = type_tok.span if type_tok is not None else name_tok.span
        raise MalformedSosEntryError(
            f"expected 'S1::' or 'S2::' after set name '{name_tok.value}'", span
        )
    tokens = tokens.advance(2)

    # "x1:" classifies as a label; inside a set it names a member variable
    entries: list[SosEntry] = []
    while tokens.at(TokenType.LABEL, _CONSTANT):
        handle = builder.resolve_variable(tokens.peek().value)
        entries.append(SosEntry(handle, tokens.peek(1).value))
        tokens = tokens.advance(2)

    return SpecialOrderedSet(str(name_tok.value), type_tok.value, tuple(entries)), tokens


# ----------------------------------------------------------------------
# Section processors
# ----------------------------------------------------------------------


def process_none(tokens: TokenSlice, builder: ModelBuilder) -> None:
    raise UnexpectedTokenError("content before the first section keyword", tokens.peek().span)


def process_objective(sense: ObjectiveSense, tokens: TokenSlice, builder: ModelBuilder) -> None:
    builder.sense = sense
    expr, rest = parse_expression(tokens, builder, is_objective=True)
    if not rest.at_end():
        raise MalformedExpressionError("unexpected token in objective", rest.peek().span)
    builder.objective = expr


def process_constraints(tokens: TokenSlice, builder: ModelBuilder) -> None:
    while not tokens.at_end():
        constraint, tokens = parse_constraint(tokens, builder)
        builder.constraints.append(constraint)


def process_bounds(tokens: TokenSlice, builder: ModelBuilder) -> None:
    while not tokens.at_end():
        tokens = parse_bound(tokens, builder)


def _variable_handles(tokens: TokenSlice, builder: ModelBuilder, section: str) -> list[int]:
    handles = []
    for idx in range(tokens.start, tokens.end):
        tok = tokens.tokens[idx]
        if tok.type != _VARIABLE:
            raise UnexpectedTokenError(f"expected variable name in {section} section", tok.span)
        handles.append(builder.resolve_variable(tok.value))
    return handles


def process_general(tokens: TokenSlice, builder: ModelBuilder) -> None:
    for handle in _variable_handles(tokens, builder, "general"):
        if builder.variable_type(handle) == VariableType.SEMICONTINUOUS:
            builder.set_type(handle, VariableType.SEMIINTEGER)
        else:
            builder.set_type(handle, VariableType.GENERAL)


def process_binary(tokens: TokenSlice, builder: ModelBuilder) -> None:
    for handle in _variable_handles(tokens, builder, "binary"):
        builder.set_type(handle, VariableType.BINARY)
        builder.set_bounds(handle, 0.0, 1.0)


def process_semicontinuous(tokens: TokenSlice, builder: ModelBuilder) -> None:
    for handle in _variable_handles(tokens, builder, "semi-continuous"):
        if builder.variable_type(handle) == VariableType.GENERAL:
            builder.set_type(handle, VariableType.SEMIINTEGER)
        else:
            builder.set_type(handle, VariableType.SEMICONTINUOUS)


def process_sos(tokens: TokenSlice, builder: ModelBuilder) -> None:
    while not tokens.at_end():
        sos, tokens = parse_sos(tokens, builder)
        builder.sos.append(sos)


def process_end(tokens: TokenSlice, builder: ModelBuilder) -> None:
    raise UnexpectedTokenError("content after 'end'", tokens.peek().span)


def process_sections(sections: dict[SectionKeyword, TokenSlice], builder: ModelBuilder) -> None:
    """Run the section processors in their fixed order."""
    if SectionKeyword.NONE in sections:
        process_none(sections[SectionKeyword.NONE], builder)

    minimize = sections.get(SectionKeyword.MINIMIZE)
    maximize = sections.get(SectionKeyword.MAXIMIZE)
    if minimize is not None and maximize is not None:
        keyword_tok = maximize.tokens[maximize.start - 1]
        raise DuplicateSectionError(
            "objective given as both minimize and maximize", keyword_tok.span
        )
    if minimize is not None:
        process_objective(ObjectiveSense.MINIMIZE, minimize, builder)
    elif maximize is not None:
        process_objective(ObjectiveSense.MAXIMIZE, maximize, builder)

    ordered = (
        (SectionKeyword.CONSTRAINTS, process_constraints),
        (SectionKeyword.BOUNDS, process_bounds),
        (SectionKeyword.GENERAL, process_general),
        (SectionKeyword.BINARY, process_binary),
        (SectionKeyword.SEMICONTINUOUS, process_semicontinuous),
        (SectionKeyword.SOS, process_sos),
        (SectionKeyword.END, process_end),
    )
    for keyword, process in ordered:
        if keyword in sections:
            process(sections[keyword], builder)
