"""Tests for the bounds section."""

from __future__ import annotations

import math

import pytest

from lpreader.errors import MalformedBoundError
from lpreader.processors import parse_bound

from .conftest import slice_of, var


def bounds_of(read_source, body: str, name: str = "x") -> tuple[float, float]:
    v = var(read_source(f"min x\nbounds\n{body}\n"), name)
    return v.lower_bound, v.upper_bound


class TestBoundForms:
    def test_default_bounds(self, read_source):
        assert bounds_of(read_source, "") == (0.0, math.inf)

    def test_double_sided(self, read_source):
        assert bounds_of(read_source, " 3 <= x <= 7") == (3.0, 7.0)

    def test_negative_lower(self, read_source):
        assert bounds_of(read_source, " -1 <= x <= 1") == (-1.0, 1.0)

    def test_separate_lower_and_upper(self, read_source):
        assert bounds_of(read_source, " x >= 3\n x <= 7") == (3.0, 7.0)

    def test_free(self, read_source):
        assert bounds_of(read_source, " x free") == (-math.inf, math.inf)

    def test_free_any_case(self, read_source):
        assert bounds_of(read_source, " x FREE") == (-math.inf, math.inf)

    def test_constant_first(self, read_source):
        assert bounds_of(read_source, " 2 >= x") == (0.0, 2.0)
        assert bounds_of(read_source, " 2 <= x") == (2.0, math.inf)

    def test_fixed(self, read_source):
        assert bounds_of(read_source, " x = 4") == (4.0, 4.0)
        assert bounds_of(read_source, " 4 = x") == (4.0, 4.0)

    def test_infinite_values(self, read_source):
        assert bounds_of(read_source, " x >= -inf") == (-math.inf, math.inf)
        assert bounds_of(read_source, " x <= infinity") == (0.0, math.inf)
        assert bounds_of(read_source, " -Inf <= x <= 5") == (-math.inf, 5.0)

    def test_later_bound_wins(self, read_source):
        assert bounds_of(read_source, " x <= 3\n x <= 5") == (0.0, 5.0)

    def test_bound_creates_variable(self, read_source):
        model = read_source("min x\nbounds\n y <= 3\n")
        assert [v.name for v in model.variables] == ["x", "y"]
        assert var(model, "y").upper_bound == 3.0


class TestParseBound:
    def test_consumes_one_bound(self, builder):
        rest = parse_bound(slice_of("0 <= x <= 1 y free"), builder)
        assert len(rest) == 2


class TestBoundErrors:
    def test_strict_comparison(self, read_source):
        with pytest.raises(MalformedBoundError, match="strict"):
            read_source("bounds\n x < 3\n")

    def test_strict_comparison_constant_first(self, read_source):
        with pytest.raises(MalformedBoundError, match="strict"):
            read_source("bounds\n 3 < x\n")

    def test_double_sided_wrong_direction(self, read_source):
        with pytest.raises(MalformedBoundError, match="double-sided"):
            read_source("bounds\n 3 >= x <= 7\n")

    def test_lone_variable(self, read_source):
        with pytest.raises(MalformedBoundError):
            read_source("bounds\n x\n")

    def test_missing_value(self, read_source):
        with pytest.raises(MalformedBoundError):
            read_source("bounds\n x <=\n")
