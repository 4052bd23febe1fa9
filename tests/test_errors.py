"""Test error messages, position accuracy, and context snippets."""

import pytest

from lpreader.errors import (
    MalformedExpressionError,
    ParseError,
    ReadError,
    UnexpectedCharacterError,
    UnexpectedEndOfSectionError,
    UnopenableInputError,
)
from lpreader.lexer import tokenize
from lpreader.reader import read_lp_string
from lpreader.tokens import Position, Span


class TestErrorPositions:
    def test_lexer_error_position(self):
        with pytest.raises(UnexpectedCharacterError) as exc_info:
            tokenize("min x\n y\0")
        err = exc_info.value
        assert err.position.line == 2
        assert err.position.column == 3

    def test_parse_error_span(self):
        with pytest.raises(MalformedExpressionError) as exc_info:
            read_lp_string("min x\nst\n x <= y\n")
        span = exc_info.value.span
        assert (span.start.line, span.start.column) == (3, 7)
        assert (span.end.line, span.end.column) == (3, 8)

    def test_end_of_section_points_at_last_token(self):
        with pytest.raises(UnexpectedEndOfSectionError) as exc_info:
            read_lp_string("min x\nst\n c: x + y\n")
        assert exc_info.value.span.start.column == 9


class TestErrorFormatting:
    def test_full_snippet(self):
        with pytest.raises(ParseError) as exc_info:
            read_lp_string("min x\nst\n x <= y\n", "test.lp")
        assert str(exc_info.value) == (
            "error: right-hand side must be a constant\n"
            "  --> test.lp:3:7\n"
            "  |\n"
            "3 |  x <= y\n"
            "  |       ^"
        )

    def test_carets_cover_span(self):
        with pytest.raises(ParseError) as exc_info:
            read_lp_string("min x\nst\n c: x < 4\n")
        last_line = exc_info.value.format().splitlines()[-1]
        assert last_line.endswith("^")
        assert last_line.count("^") == 1

    def test_format_uses_given_filename(self):
        with pytest.raises(ParseError) as exc_info:
            read_lp_string("min x\nend\n y\n")
        assert "--> other.lp:3:2" in exc_info.value.format("other.lp")

    def test_wide_gutter(self):
        source = "min x\n" + "\n" * 10 + "end y\n"
        with pytest.raises(ParseError) as exc_info:
            read_lp_string(source)
        lines = exc_info.value.format().splitlines()
        assert lines[1] == "   --> input.lp:12:5"
        assert lines[3].startswith("12 | ")

    def test_multiline_span_underlines_to_end_of_line(self):
        err = ParseError(
            "unterminated",
            Span(Position(1, 3, 2), Position(2, 2, 8)),
            "a /* bc\nd */",
            "x.lp",
        )
        assert err.format("x.lp").splitlines()[-1] == "  |   ^^^^^"

    def test_unopenable_has_no_snippet(self):
        err = UnopenableInputError("cannot open nope.lp: No such file or directory", "nope.lp")
        assert str(err) == "error: cannot open nope.lp: No such file or directory\n --> nope.lp"


class TestHierarchy:
    def test_all_errors_are_read_errors(self):
        for cls in (UnexpectedCharacterError, ParseError, UnopenableInputError):
            assert issubclass(cls, ReadError)

    def test_message_attribute(self):
        with pytest.raises(ReadError) as exc_info:
            read_lp_string("min x\nst\n x <= y\n")
        assert exc_info.value.message == "right-hand side must be a constant"
