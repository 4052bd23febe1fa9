"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from lpreader.builder import ModelBuilder
from lpreader.classifier import classify
from lpreader.lexer import tokenize
from lpreader.model import Expression, Model, Variable
from lpreader.reader import read_lp_string
from lpreader.sections import TokenSlice
from lpreader.tokens import RawToken, RawTokenType, Token


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns raw tokens (excluding EOF)."""

    def _lex(source: str) -> list[RawToken]:
        tokens = tokenize(source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != RawTokenType.EOF]

    return _lex


@pytest.fixture
def classify_source():
    """Return a helper that lexes and classifies source."""

    def _classify(source: str) -> list[Token]:
        return classify(source)

    return _classify


@pytest.fixture
def read_source():
    """Return a helper that reads source into a Model."""

    def _read(source: str, filename: str = "test.lp") -> Model:
        return read_lp_string(source, filename)

    return _read


@pytest.fixture
def builder() -> ModelBuilder:
    return ModelBuilder()


def slice_of(source: str) -> TokenSlice:
    """Classify source and wrap every token in one slice."""
    tokens = tuple(classify(source))
    return TokenSlice(tokens, 0, len(tokens))


def assert_types(tokens: list[RawToken] | list[Token], expected: list) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[RawToken] | list[Token], expected: list) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def var(model: Model, name: str) -> Variable:
    """Return the named variable, failing the test if it is missing."""
    found = model.find_variable(name)
    assert found is not None, f"variable {name!r} not in model"
    return found


def linear(model: Model, expr: Expression) -> list[tuple[float, str]]:
    """Linear terms as (coefficient, variable name) pairs."""
    return [(t.coefficient, model.variable(t.variable).name) for t in expr.linear_terms]


def quadratic(model: Model, expr: Expression) -> list[tuple[float, str, str]]:
    """Quadratic terms as (coefficient, name1, name2) triples."""
    return [
        (t.coefficient, model.variable(t.variable1).name, model.variable(t.variable2).name)
        for t in expr.quadratic_terms
    ]
