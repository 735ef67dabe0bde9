"""Lexical scanners over a ``Cursor``.

Character classes are ASCII only: names start with a letter and continue with
letters, digits or underscores. Quoted strings and text are taken verbatim,
without escape or entity interpretation.
"""

import string
from typing import Tuple

from simple_xml_parser.shared.errors import (
    InvalidNameError,
    MalformedCommentError,
)

from .cursor import Cursor

WHITESPACE = frozenset(" \t\n\r\f\v")
DIGITS = frozenset(string.digits)
LETTERS = frozenset(string.ascii_letters)
NAME_CHARS = LETTERS | DIGITS | {"_"}

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "--"
QUOTE = '"'


def is_space(char: str) -> bool:
    """Check whether ``char`` is whitespace."""
    return char in WHITESPACE


def is_digit(char: str) -> bool:
    """Check whether ``char`` is an ASCII digit."""
    return char in DIGITS


def is_alpha(char: str) -> bool:
    """Check whether ``char`` is an ASCII letter."""
    return char in LETTERS


def is_name_char(char: str) -> bool:
    """Check whether ``char`` may appear after the first character of a name."""
    return char in NAME_CHARS


def skip_whitespace(cursor: Cursor) -> None:
    """Advance while the next character is whitespace."""
    buffer = cursor.buffer
    index = cursor.offset
    length = cursor.length
    while index < length and buffer[index] in WHITESPACE:
        index += 1
    if index != cursor.offset:
        cursor.advance_to(index)


def read_name(cursor: Cursor) -> str:
    """Read a tag or attribute name.

    Raises:
        OutOfRangeError: At end of input
        InvalidNameError: If the first character is not a letter
    """
    first = cursor.peek()
    if not is_alpha(first):
        raise cursor.error(InvalidNameError, f"Expected a name, found {first!r}")

    buffer = cursor.buffer
    start = cursor.offset
    index = start + 1
    length = cursor.length
    while index < length and buffer[index] in NAME_CHARS:
        index += 1
    cursor.advance_to(index)
    return buffer[start:index]


def read_quoted_string(cursor: Cursor) -> str:
    """Read a double-quoted string and return it without the quotes."""
    skip_whitespace(cursor)
    cursor.match(QUOTE)

    end = cursor.buffer.find(QUOTE, cursor.offset)
    if end == -1:
        end = cursor.length
    value = cursor.buffer[cursor.offset:end]
    cursor.advance_to(end)

    cursor.match(QUOTE)
    return value


def read_attribute(cursor: Cursor) -> Tuple[str, str]:
    """Read a ``name="value"`` pair."""
    name = read_name(cursor)
    skip_whitespace(cursor)
    cursor.match("=")
    value = read_quoted_string(cursor)
    return name, value


def read_text_until_lt(cursor: Cursor) -> str:
    """Read raw text up to (not including) the next ``<`` or end of input."""
    end = cursor.buffer.find("<", cursor.offset)
    if end == -1:
        end = cursor.length
    text = cursor.buffer[cursor.offset:end]
    cursor.advance_to(end)
    return text


def read_comment_body(cursor: Cursor) -> str:
    """Read a comment body after its opening ``<!--`` has been matched.

    The first ``--`` ends the body and must be followed by ``>``.

    Raises:
        MalformedCommentError: If ``--`` is not followed by ``>`` or the
            comment is not terminated
    """
    start = cursor.offset
    end = cursor.buffer.find(COMMENT_CLOSE, start)
    if end == -1:
        cursor.advance_to(cursor.length)
        raise cursor.error(MalformedCommentError, "Unterminated comment")

    body = cursor.buffer[start:end]
    cursor.advance_to(end + len(COMMENT_CLOSE))
    if cursor.eof() or cursor.peek() != ">":
        raise cursor.error(
            MalformedCommentError, "'--' inside a comment must be followed by '>'"
        )
    cursor.advance()
    return body


def read_comment(cursor: Cursor) -> str:
    """Match ``<!--`` and read the comment body."""
    cursor.match_literal(COMMENT_OPEN)
    return read_comment_body(cursor)
