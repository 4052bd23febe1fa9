"""Immutable model types produced by the reader."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum


class ObjectiveSense(Enum):
    MINIMIZE = "minimize"
    MAXIMIZE = "maximize"


class VariableType(Enum):
    CONTINUOUS = "continuous"
    BINARY = "binary"
    GENERAL = "general"
    SEMICONTINUOUS = "semicontinuous"
    SEMIINTEGER = "semiinteger"


@dataclass(frozen=True, slots=True)
class Variable:
    """A decision variable; names are unique within a model."""

    name: str
    lower_bound: float = 0.0
    upper_bound: float = math.inf
    type: VariableType = VariableType.CONTINUOUS


@dataclass(frozen=True, slots=True)
class LinearTerm:
    """coefficient * variable, where ``variable`` indexes ``Model.variables``."""

    coefficient: float
    variable: int


@dataclass(frozen=True, slots=True)
class QuadraticTerm:
    """coefficient * variable1 * variable2; equal handles denote a square."""

    coefficient: float
    variable1: int
    variable2: int


@dataclass(frozen=True, slots=True)
class Expression:
    """Named linear-plus-quadratic expression with a constant offset."""

    name: str | None = None
    offset: float = 0.0
    linear_terms: tuple[LinearTerm, ...] = ()
    quadratic_terms: tuple[QuadraticTerm, ...] = ()


@dataclass(frozen=True, slots=True)
class Constraint:
    """lower_bound <= expression <= upper_bound."""

    expression: Expression
    lower_bound: float = -math.inf
    upper_bound: float = math.inf


@dataclass(frozen=True, slots=True)
class SosEntry:
    variable: int
    weight: float


@dataclass(frozen=True, slots=True)
class SpecialOrderedSet:
    name: str
    type: int
    entries: tuple[SosEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class Model:
    """Result of reading an LP file."""

    sense: ObjectiveSense = ObjectiveSense.MINIMIZE
    objective: Expression = field(default_factory=Expression)
    constraints: tuple[Constraint, ...] = ()
    variables: tuple[Variable, ...] = ()
    sos: tuple[SpecialOrderedSet, ...] = ()

    def variable(self, handle: int) -> Variable:
        """Return the variable a term or SOS entry refers to."""
        return self.variables[handle]

    def find_variable(self, name: str) -> Variable | None:
        for var in self.variables:
            if var.name == name:
                return var
        return None

    def to_dict(self) -> dict:
        """Plain-data rendering with variables referenced by name.

        Infinite values become the strings ``"inf"`` and ``"-inf"`` so the
        result is valid JSON.
        """
        names = [v.name for v in self.variables]

        def expr(e: Expression) -> dict:
            return {
                "name": e.name,
                "offset": _number(e.offset),
                "linear": [[_number(t.coefficient), names[t.variable]] for t in e.linear_terms],
                "quadratic": [
                    [_number(t.coefficient), names[t.variable1], names[t.variable2]]
                    for t in e.quadratic_terms
                ],
            }

        return {
            "sense": self.sense.value,
            "objective": expr(self.objective),
            "constraints": [
                {
                    "expression": expr(c.expression),
                    "lower_bound": _number(c.lower_bound),
                    "upper_bound": _number(c.upper_bound),
                }
                for c in self.constraints
            ],
            "variables": [
                {
                    "name": v.name,
                    "lower_bound": _number(v.lower_bound),
                    "upper_bound": _number(v.upper_bound),
                    "type": v.type.value,
                }
                for v in self.variables
            ],
            "sos": [
                {
                    "name": s.name,
                    "type": s.type,
                    "entries": [[names[e.variable], _number(e.weight)] for e in s.entries],
                }
                for s in self.sos
            ],
        }


def _number(value: float) -> float | str:
    if math.isinf(value):
        return "-inf" if value < 0 else "inf"
    return value
