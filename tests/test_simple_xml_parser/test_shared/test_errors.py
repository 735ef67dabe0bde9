"""Tests for the error taxonomy."""

import pytest

from simple_xml_parser.shared.errors import (
    ClosingTagMismatchError,
    DepthLimitError,
    ErrorKind,
    InvalidAppendTargetError,
    MalformedCommentError,
    OutOfRangeError,
    ParseError,
    UnexpectedCharacterError,
    XMLError,
)


class TestParseError:
    """Test the ParseError base class."""

    def test_kind_from_subclass(self):
        """Test each subclass carries its own kind."""
        assert OutOfRangeError("x").kind is ErrorKind.OUT_OF_RANGE
        assert MalformedCommentError("x").kind is ErrorKind.MALFORMED_COMMENT
        assert DepthLimitError("x").kind is ErrorKind.DEPTH_LIMIT_EXCEEDED

    def test_explicit_kind(self):
        """Test overriding the kind explicitly."""
        error = ParseError("x", kind=ErrorKind.EXPECTED_TAG)
        assert error.kind is ErrorKind.EXPECTED_TAG

    def test_str_includes_position(self):
        """Test the string form appends line and column."""
        error = OutOfRangeError("Unexpected end of input", line=3, column=7, offset=20)
        assert str(error) == "Unexpected end of input (line 3, column 7)"
        assert error.message == "Unexpected end of input"

    def test_to_dict(self):
        """Test dictionary conversion."""
        error = OutOfRangeError("boom", line=2, column=1, offset=5)
        assert error.to_dict() == {
            "kind": "OUT_OF_RANGE",
            "message": "boom",
            "line": 2,
            "column": 1,
            "offset": 5,
        }

    def test_hierarchy(self):
        """Test all parse errors are XMLErrors and Exceptions."""
        error = OutOfRangeError("x")
        assert isinstance(error, ParseError)
        assert isinstance(error, XMLError)
        assert isinstance(error, Exception)


class TestDetailedErrors:
    """Test errors that carry expected/found details."""

    def test_unexpected_character(self):
        """Test unexpected character reporting."""
        error = UnexpectedCharacterError(">", "x", line=1, column=4, offset=4)
        assert error.kind is ErrorKind.UNEXPECTED_CHARACTER
        assert error.message == "Expected '>', found 'x'"
        assert error.to_dict()["expected"] == ">"
        assert error.to_dict()["found"] == "x"

    def test_closing_tag_mismatch(self):
        """Test closing tag mismatch reporting."""
        error = ClosingTagMismatchError("a", "b", line=1, column=3, offset=3)
        assert error.kind is ErrorKind.CLOSING_TAG_MISMATCH
        assert error.expected == "a"
        assert error.found == "b"
        assert "</b>" in error.message
        assert "<a>" in error.message

    def test_raising(self):
        """Test raising and catching."""
        with pytest.raises(ParseError, match="does not match"):
            raise ClosingTagMismatchError("a", "b")


class TestInvalidAppendTargetError:
    """Test the mutation error."""

    def test_not_a_parse_error(self):
        """Test append errors are not parse errors."""
        error = InvalidAppendTargetError("Cannot append")
        assert isinstance(error, XMLError)
        assert not isinstance(error, ParseError)
        assert error.kind is ErrorKind.INVALID_APPEND_TARGET
        assert str(error) == "Cannot append"
