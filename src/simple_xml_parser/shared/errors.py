"""Error taxonomy for simple XML parsing.

Every failure raised while scanning or parsing a buffer is a ``ParseError``
carrying its ``ErrorKind`` and the cursor position at which it was detected.
Parse errors are fatal for the current parse. Mutation errors on an existing
tree (``InvalidAppendTargetError``) are local and leave the tree unchanged.
"""

from enum import Enum, auto
from typing import Any, Dict, Optional


class ErrorKind(Enum):
    """Kinds of failures reported by the parser and the tree API."""

    OUT_OF_RANGE = auto()           # Lookahead beyond buffer bounds
    UNEXPECTED_CHARACTER = auto()   # A required literal character was absent
    INVALID_NAME = auto()           # Identifier did not start with a letter
    MALFORMED_COMMENT = auto()      # Comment body did not terminate correctly
    MISPLACED_HEADER = auto()       # Prolog after the first construct
    EXPECTED_TAG = auto()           # Top-level content was not a tag/comment/prolog
    CLOSING_TAG_MISMATCH = auto()   # Closing tag name differs from opening tag
    MALFORMED_TAG = auto()          # Open tag scanning reached an unknown state
    DEPTH_LIMIT_EXCEEDED = auto()   # Nesting deeper than the configured limit
    ROOT_ELEMENT_COUNT = auto()     # Single-root policy violated
    INPUT_TOO_LARGE = auto()        # Buffer longer than the configured limit
    INVALID_APPEND_TARGET = auto()  # Mutation on a node that cannot own children


class XMLError(Exception):
    """Base exception for all simple_xml_parser errors."""

    kind: ErrorKind

    def __init__(self, message: str, kind: ErrorKind) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind


class ParseError(XMLError):
    """Unrecoverable failure while parsing a buffer.

    Attributes:
        kind: Error kind
        line: 1-based line of the cursor when the error was detected
        column: 0-based column (characters consumed on the current line)
        offset: 0-based character offset into the buffer
    """

    default_kind = ErrorKind.UNEXPECTED_CHARACTER

    def __init__(
        self,
        message: str,
        line: int = 1,
        column: int = 0,
        offset: int = 0,
        kind: Optional[ErrorKind] = None,
    ) -> None:
        super().__init__(message, kind or self.default_kind)
        self.line = line
        self.column = column
        self.offset = offset

    @property
    def position(self) -> Dict[str, int]:
        """Position of the error as a dictionary."""
        return {"line": self.line, "column": self.column, "offset": self.offset}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "kind": self.kind.name,
            "message": self.message,
            **self.position,
        }

    def __str__(self) -> str:
        return f"{self.message} (line {self.line}, column {self.column})"


class OutOfRangeError(ParseError):
    """Lookahead or consumption beyond the end of the buffer."""

    default_kind = ErrorKind.OUT_OF_RANGE


class UnexpectedCharacterError(ParseError):
    """A required literal character was not found."""

    default_kind = ErrorKind.UNEXPECTED_CHARACTER

    def __init__(
        self,
        expected: str,
        found: str,
        line: int = 1,
        column: int = 0,
        offset: int = 0,
    ) -> None:
        super().__init__(
            f"Expected {expected!r}, found {found!r}", line, column, offset
        )
        self.expected = expected
        self.found = found

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update(expected=self.expected, found=self.found)
        return result


class InvalidNameError(ParseError):
    """A tag or attribute name did not start with a letter."""

    default_kind = ErrorKind.INVALID_NAME


class MalformedCommentError(ParseError):
    """A comment was not terminated by ``-->``."""

    default_kind = ErrorKind.MALFORMED_COMMENT


class MisplacedHeaderError(ParseError):
    """An ``<?xml ...?>`` prolog appeared after the first construct."""

    default_kind = ErrorKind.MISPLACED_HEADER


class ExpectedTagError(ParseError):
    """Top-level content was neither a tag, a comment nor a prolog."""

    default_kind = ErrorKind.EXPECTED_TAG


class ClosingTagMismatchError(ParseError):
    """A closing tag did not match the tag it closes."""

    default_kind = ErrorKind.CLOSING_TAG_MISMATCH

    def __init__(
        self,
        expected: str,
        found: str,
        line: int = 1,
        column: int = 0,
        offset: int = 0,
    ) -> None:
        super().__init__(
            f"Closing tag </{found}> does not match opening tag <{expected}>",
            line,
            column,
            offset,
        )
        self.expected = expected
        self.found = found

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update(expected=self.expected, found=self.found)
        return result


class MalformedTagError(ParseError):
    """An open tag contained something other than attributes, ``>`` or ``/>``."""

    default_kind = ErrorKind.MALFORMED_TAG


class DepthLimitError(ParseError):
    """Element nesting exceeded the configured maximum depth."""

    default_kind = ErrorKind.DEPTH_LIMIT_EXCEEDED


class RootElementError(ParseError):
    """The document did not have exactly one root element."""

    default_kind = ErrorKind.ROOT_ELEMENT_COUNT


class InputTooLargeError(ParseError):
    """The input buffer exceeded the configured size limit."""

    default_kind = ErrorKind.INPUT_TOO_LARGE


class InvalidAppendTargetError(XMLError):
    """Children were appended to an attribute or comment entity."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorKind.INVALID_APPEND_TARGET)
