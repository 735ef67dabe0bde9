"""Position-tracking cursor over an immutable text buffer.

The cursor never copies the buffer. Line and column numbers are derived only
from consumed characters: a consumed newline increments ``line`` and resets
``column`` to 0, any other consumed character increments ``column``. Lines are
1-based, columns count the characters consumed on the current line.
"""

from dataclasses import dataclass
from typing import Type

from simple_xml_parser.shared.errors import (
    OutOfRangeError,
    ParseError,
    UnexpectedCharacterError,
)


@dataclass(frozen=True)
class CursorPosition:
    """Snapshot of a cursor position."""

    offset: int
    line: int
    column: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 0:
            raise ValueError("Column number must be >= 0")


class Cursor:
    """Read position over a text buffer with one-character consumption."""

    def __init__(self, buffer: str) -> None:
        if not isinstance(buffer, str):
            raise TypeError("Cursor buffer must be a str")
        self._buffer = buffer
        self._length = len(buffer)
        self.offset = 0
        self.line = 1
        self.column = 0

    @property
    def buffer(self) -> str:
        """The underlying buffer."""
        return self._buffer

    @property
    def length(self) -> int:
        """Length of the underlying buffer."""
        return self._length

    @property
    def position(self) -> CursorPosition:
        """Current position snapshot."""
        return CursorPosition(self.offset, self.line, self.column)

    def eof(self) -> bool:
        """Check whether the whole buffer has been consumed."""
        return self.offset >= self._length

    def peek(self, offset: int = 0) -> str:
        """Return the character ``offset`` positions ahead without consuming it.

        Raises:
            OutOfRangeError: If the index falls outside the buffer
        """
        index = self.offset + offset
        if 0 <= index < self._length:
            return self._buffer[index]
        raise self.error(
            OutOfRangeError,
            f"Tried to access buffer index {index}, valid range [0, {self._length})",
        )

    def advance(self) -> str:
        """Consume one character and return it."""
        if self.offset >= self._length:
            raise self.error(OutOfRangeError, "Cannot advance past end of input")
        char = self._buffer[self.offset]
        if char == "\n":
            self.line += 1
            self.column = 0
        else:
            self.column += 1
        self.offset += 1
        return char

    def advance_to(self, index: int) -> None:
        """Consume every character up to (not including) ``index``."""
        if index < self.offset or index > self._length:
            raise self.error(
                OutOfRangeError,
                f"Cannot advance from {self.offset} to {index}",
            )
        newlines = self._buffer.count("\n", self.offset, index)
        if newlines:
            self.line += newlines
            self.column = index - self._buffer.rfind("\n", self.offset, index) - 1
        else:
            self.column += index - self.offset
        self.offset = index

    def match(self, expected: str) -> None:
        """Consume ``expected`` or fail if a different character is next.

        Raises:
            OutOfRangeError: At end of input
            UnexpectedCharacterError: If the next character differs
        """
        if self.eof():
            raise self.error(
                OutOfRangeError,
                f"Expected {expected!r}, reached end of input",
            )
        found = self._buffer[self.offset]
        if found != expected:
            raise UnexpectedCharacterError(
                expected, found, self.line, self.column, self.offset
            )
        self.advance()

    def match_literal(self, literal: str) -> None:
        """Match each character of ``literal`` in turn."""
        for char in literal:
            self.match(char)

    def startswith(self, literal: str) -> bool:
        """Check whether the unconsumed input starts with ``literal``."""
        return self._buffer.startswith(literal, self.offset)

    def error(self, error_class: Type[ParseError], message: str) -> ParseError:
        """Build a parse error located at the current position."""
        return error_class(message, self.line, self.column, self.offset)

    def __repr__(self) -> str:
        return (
            f"Cursor(offset={self.offset}, line={self.line}, "
            f"column={self.column}, length={self._length})"
        )
