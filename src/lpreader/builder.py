"""Symbol table and model assembly."""

from __future__ import annotations

import math
from dataclasses import dataclass

from lpreader.model import (
    Constraint,
    Expression,
    Model,
    ObjectiveSense,
    SpecialOrderedSet,
    Variable,
    VariableType,
)


@dataclass(slots=True)
class _VariableSlot:
    """Mutable variable record refined by the section processors."""

    name: str
    lower_bound: float = 0.0
    upper_bound: float = math.inf
    type: VariableType = VariableType.CONTINUOUS


class ModelBuilder:
    """Collect model parts while sections are processed, then freeze them.

    Variables live in a single arena; terms and SOS entries hold integer
    handles into it, so a variable can be refined after it was referenced.
    """

    def __init__(self) -> None:
        self._slots: list[_VariableSlot] = []
        self._handles: dict[str, int] = {}
        self.sense = ObjectiveSense.MINIMIZE
        self.objective = Expression()
        self.constraints: list[Constraint] = []
        self.sos: list[SpecialOrderedSet] = []

    def resolve_variable(self, name: str) -> int:
        """Return the handle for ``name``, registering a new variable on first use."""
        handle = self._handles.get(name)
        if handle is None:
            handle = len(self._slots)
            self._slots.append(_VariableSlot(name))
            self._handles[name] = handle
        return handle

    def variable_type(self, handle: int) -> VariableType:
        return self._slots[handle].type

    def set_lower_bound(self, handle: int, value: float) -> None:
        self._slots[handle].lower_bound = value

    def set_upper_bound(self, handle: int, value: float) -> None:
        self._slots[handle].upper_bound = value

    def set_bounds(self, handle: int, lower: float, upper: float) -> None:
        slot = self._slots[handle]
        slot.lower_bound = lower
        slot.upper_bound = upper

    def set_type(self, handle: int, vtype: VariableType) -> None:
        self._slots[handle].type = vtype

    def __len__(self) -> int:
        return len(self._slots)

    def build(self) -> Model:
        variables = tuple(
            Variable(s.name, s.lower_bound, s.upper_bound, s.type) for s in self._slots
        )
        return Model(
            sense=self.sense,
            objective=self.objective,
            constraints=tuple(self.constraints),
            variables=variables,
            sos=tuple(self.sos),
        )
