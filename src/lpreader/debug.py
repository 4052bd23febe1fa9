"""--debug dumps of the section map and the model to stderr."""

from __future__ import annotations

import math
import sys
from typing import TextIO

from lpreader.model import Expression, Model
from lpreader.sections import TokenSlice
from lpreader.tokens import SectionKeyword, Token, TokenType


def format_token(tok: Token) -> str:
    if tok.value is None:
        return tok.type.name
    if tok.type in (TokenType.SECTION, TokenType.COMPARISON):
        return f"{tok.type.name}({tok.value.name})"
    return f"{tok.type.name}({tok.value!r})"


def dump_sections(sections: dict[SectionKeyword, TokenSlice], *, file: TextIO = sys.stderr) -> None:
    """Print each section with its classified tokens to *file*."""
    for keyword, tokens in sections.items():
        file.write(f"Section {keyword.name} ({len(tokens)} tokens)\n")
        for idx in range(tokens.start, tokens.end):
            tok = tokens.tokens[idx]
            file.write(f"  {tok.span.start.line}:{tok.span.start.column} {format_token(tok)}\n")


def _bound(value: float) -> str:
    if math.isinf(value):
        return "-inf" if value < 0 else "+inf"
    return f"{value:g}"


def format_expression(expr: Expression, model: Model) -> str:
    """Render an expression back into LP-like text."""
    parts: list[str] = []
    for term in expr.linear_terms:
        parts.append(f"{term.coefficient:+g} {model.variable(term.variable).name}")
    if expr.quadratic_terms:
        quad = []
        for term in expr.quadratic_terms:
            v1 = model.variable(term.variable1).name
            v2 = model.variable(term.variable2).name
            atom = f"{v1} ^ 2" if term.variable1 == term.variable2 else f"{v1} * {v2}"
            quad.append(f"{term.coefficient:+g} {atom}")
        parts.append("[ " + " ".join(quad) + " ]")
    if expr.offset:
        parts.append(f"{expr.offset:+g}")
    text = " ".join(parts) if parts else "0"
    if expr.name is not None:
        text = f"{expr.name}: {text}"
    return text


def dump_model(model: Model, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable view of *model* to *file*."""
    file.write(f"Model {model.sense.value}\n")
    file.write(f"  objective {format_expression(model.objective, model)}\n")
    for con in model.constraints:
        file.write(
            f"  constraint {_bound(con.lower_bound)} <= "
            f"{format_expression(con.expression, model)} <= {_bound(con.upper_bound)}\n"
        )
    for var in model.variables:
        file.write(
            f"  variable {var.name} {var.type.value} "
            f"[{_bound(var.lower_bound)}, {_bound(var.upper_bound)}]\n"
        )
    for sos in model.sos:
        entries = " ".join(f"{model.variable(e.variable).name}:{e.weight:g}" for e in sos.entries)
        file.write(f"  sos {sos.name} S{sos.type} {entries}\n")
