"""Recursive-descent XML event parser.

Grammar recognised by ``EventParser``::

    document := ws (header? (comment | tag) ws)*
    header   := '<?xml' (ws name ws '=' ws quoted)* ws '?>'
    tag      := '<' name (ws name ws '=' ws quoted)* ws ('/>' | '>' content)
    content  := (ws (comment | tag | text))* ws '</' name ws '>'
    comment  := '<!--' body '-->'

Every branch is chosen with at most two characters of lookahead. Failures are
raised as ``ParseError`` subclasses and abort the parse; events already
delivered to the sink are not retracted.
"""

from typing import Dict, Optional

from simple_xml_parser.character import scanners
from simple_xml_parser.character.cursor import Cursor
from simple_xml_parser.shared.config import DocumentConfig, RootPolicy
from simple_xml_parser.shared.errors import (
    ClosingTagMismatchError,
    DepthLimitError,
    ExpectedTagError,
    MalformedTagError,
    MisplacedHeaderError,
    OutOfRangeError,
    ParseError,
    RootElementError,
    UnexpectedCharacterError,
)
from simple_xml_parser.shared.logging import get_logger

from .sink import EventSink

HEADER_OPEN = "<?xml"
HEADER_CLOSE = "?>"
CLOSING_TAG_OPEN = "</"
SELF_CLOSE = "/>"


class _CountingSink(EventSink):
    """Forwards events to ``target`` and counts them."""

    def __init__(self, target: EventSink) -> None:
        self.target = target
        self.count = 0

    def on_tag_open(self, name: str) -> None:
        self.count += 1
        self.target.on_tag_open(name)

    def on_tag_close(self, name: str) -> None:
        self.count += 1
        self.target.on_tag_close(name)

    def on_text(self, text: str) -> None:
        self.count += 1
        self.target.on_text(text)

    def on_comment(self, text: str) -> None:
        self.count += 1
        self.target.on_comment(text)

    def on_attribute(self, name: str, value: str) -> None:
        self.count += 1
        self.target.on_attribute(name, value)


class EventParser:
    """Single-pass parser that reports document structure to an EventSink.

    Examples:
        >>> sink = RecordingSink()
        >>> EventParser().parse('<a x="1">hi</a>', sink)
        >>> [event.type.name for event in sink.events]
        ['TAG_OPEN', 'ATTRIBUTE', 'TEXT', 'TAG_CLOSE']
    """

    def __init__(
        self,
        config: Optional[DocumentConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the event parser.

        Args:
            config: Document grammar configuration
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or DocumentConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "event_parser")

        self.events_emitted = 0
        self.root_count = 0
        self.characters_processed = 0

    def parse(self, buffer: str, sink: EventSink) -> None:
        """Parse ``buffer`` and report its structure to ``sink``.

        Args:
            buffer: Complete document text
            sink: Receiver of the structural events

        Raises:
            ParseError: On the first syntax error; exceptions raised by the
                sink propagate unchanged
        """
        cursor = Cursor(buffer)
        counting_sink = _CountingSink(sink)
        self.events_emitted = 0
        self.root_count = 0
        self.characters_processed = 0

        self.logger.debug(
            "Starting event parse",
            extra={"char_count": cursor.length}
        )

        try:
            try:
                self.parse_document(cursor, counting_sink)
            except RecursionError as e:
                raise cursor.error(
                    DepthLimitError,
                    "Element nesting exceeds the interpreter recursion limit",
                ) from e
        except ParseError as e:
            self.logger.info(
                "Event parse failed",
                extra={
                    "error_kind": e.kind.name,
                    "line": e.line,
                    "column": e.column,
                    "error": e.message,
                }
            )
            raise
        finally:
            self.events_emitted = counting_sink.count
            self.characters_processed = cursor.offset

        self.logger.debug(
            "Event parse completed",
            extra={
                "events_emitted": self.events_emitted,
                "root_count": self.root_count,
            }
        )

    def parse_document(self, cursor: Cursor, sink: EventSink) -> None:
        """Parse a whole document: optional header, then comments and tags."""
        scanners.skip_whitespace(cursor)
        first = True

        while not cursor.eof():
            char = cursor.peek()
            if char != "<":
                raise cursor.error(ExpectedTagError, f"Expected '<', found {char!r}")

            lookahead = cursor.peek(1)
            if lookahead == "?":
                if not first:
                    raise cursor.error(
                        MisplacedHeaderError,
                        "Encountered an XML header after the start of the document",
                    )
                if not self.config.allow_header:
                    raise cursor.error(
                        MisplacedHeaderError, "XML header is disabled by configuration"
                    )
                self.parse_header(cursor)
            elif lookahead == "!":
                sink.on_comment(scanners.read_comment(cursor))
            elif scanners.is_alpha(lookahead):
                if self.config.root_policy is RootPolicy.SINGLE and self.root_count:
                    raise cursor.error(
                        RootElementError, "Document has more than one root element"
                    )
                self.parse_tag(cursor, sink)
                self.root_count += 1
            else:
                raise cursor.error(
                    ExpectedTagError,
                    f"Expected a tag, comment or header after '<', found {lookahead!r}",
                )

            scanners.skip_whitespace(cursor)
            first = False

        if self.config.root_policy is RootPolicy.SINGLE and not self.root_count:
            raise cursor.error(RootElementError, "Document has no root element")

    def parse_header(self, cursor: Cursor) -> Dict[str, str]:
        """Parse the ``<?xml ... ?>`` prolog.

        The header attributes are returned to the caller but never reach the
        sink.
        """
        cursor.match_literal(HEADER_OPEN)
        attributes: Dict[str, str] = {}

        while True:
            scanners.skip_whitespace(cursor)
            char = cursor.peek()
            if scanners.is_alpha(char):
                name, value = scanners.read_attribute(cursor)
                attributes[name] = value
                continue
            if cursor.startswith(HEADER_CLOSE):
                cursor.match_literal(HEADER_CLOSE)
                break
            raise UnexpectedCharacterError(
                "?", char, cursor.line, cursor.column, cursor.offset
            )

        self.logger.debug("XML header parsed", extra={"header": attributes})
        return attributes

    def parse_tag(self, cursor: Cursor, sink: EventSink, depth: int = 1) -> None:
        """Parse a tag with its attributes and, unless self-closing, content."""
        if depth > self.config.max_depth:
            raise cursor.error(
                DepthLimitError,
                f"Element nesting exceeds maximum depth of {self.config.max_depth}",
            )

        cursor.match("<")
        name = scanners.read_name(cursor)
        sink.on_tag_open(name)

        while True:
            scanners.skip_whitespace(cursor)
            char = cursor.peek()
            if scanners.is_alpha(char):
                attr_name, attr_value = scanners.read_attribute(cursor)
                sink.on_attribute(attr_name, attr_value)
                continue
            if char == ">":
                cursor.advance()
                break
            if cursor.startswith(SELF_CLOSE):
                cursor.match_literal(SELF_CLOSE)
                sink.on_tag_close(name)
                return
            raise cursor.error(
                MalformedTagError, f"Unexpected {char!r} in tag <{name}>"
            )

        self._parse_content(cursor, sink, name, depth)

    def _parse_content(
        self, cursor: Cursor, sink: EventSink, name: str, depth: int
    ) -> None:
        while True:
            scanners.skip_whitespace(cursor)
            if cursor.eof():
                raise cursor.error(
                    OutOfRangeError, f"Unexpected end of input inside <{name}>"
                )

            if cursor.startswith(CLOSING_TAG_OPEN):
                line, column, offset = cursor.line, cursor.column, cursor.offset
                closing_name = self._read_closing_tag(cursor)
                if closing_name != name:
                    raise ClosingTagMismatchError(
                        name, closing_name, line, column, offset
                    )
                sink.on_tag_close(name)
                return

            if cursor.startswith("<!"):
                sink.on_comment(scanners.read_comment(cursor))
            elif cursor.peek() == "<":
                self.parse_tag(cursor, sink, depth + 1)
            else:
                sink.on_text(scanners.read_text_until_lt(cursor))

    def _read_closing_tag(self, cursor: Cursor) -> str:
        cursor.match_literal(CLOSING_TAG_OPEN)
        name = scanners.read_name(cursor)
        scanners.skip_whitespace(cursor)
        cursor.match(">")
        return name
