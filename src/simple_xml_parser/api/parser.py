"""Parser API with progressive disclosure.

Level 1 is a set of module functions (``parse``, ``parse_string``,
``parse_file``, ``parse_events``); level 2 is the reusable, configured
``SimpleXMLParser`` class.

The tree functions never raise for bad input: syntax, decoding and file errors
come back as a failed ``ParseResult`` carrying a CRITICAL diagnostic, and for
syntax errors the ``ParseError`` itself. ``parse_events`` is the low-level
entry point and lets ``ParseError`` and sink exceptions propagate.
"""

import logging
import time
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, TextIO, Union

from simple_xml_parser.character import DetectionMethod, decode_buffer
from simple_xml_parser.events import EventParser, EventSink
from simple_xml_parser.shared import (
    DiagnosticSeverity,
    InputTooLargeError,
    ParseError,
    ParserConfig,
    get_logger,
)
from simple_xml_parser.tree import ParseResult, TreeBuilder

# Type definitions for input data
InputType = Union[str, bytes, BinaryIO, TextIO, Path]

# Constants for API operations
PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000  # Milliseconds per second conversion


def parse(
    input_data: InputType,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse a document from a string, bytes, file-like object or path.

    Args:
        input_data: XML content as string, bytes, file-like object, or Path
        config: Parser configuration (defaults to ``ParserConfig()``)
        correlation_id: Optional correlation ID for request tracking

    Returns:
        ParseResult holding the document tree, or the error on failure

    Examples:
        >>> result = parse('<root><item>value</item></root>')
        >>> result.success
        True
        >>> result.root.first_child_tag('item').get_value()
        'value'
    """
    config = config or ParserConfig()

    if isinstance(input_data, (str, bytes)):
        return _parse_direct_content(input_data, config, correlation_id)
    if isinstance(input_data, Path):
        return parse_file(input_data, config=config, correlation_id=correlation_id)
    if hasattr(input_data, "read"):
        return _parse_file_like_object(input_data, config, correlation_id)

    return _create_error_result(
        f"Unsupported input type: {type(input_data).__name__}",
        correlation_id,
        0.0,
    )


def parse_string(
    xml_string: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse a document held in a string.

    Examples:
        >>> result = parse_string('<a><b id="1">hi</b></a>')
        >>> result.root.first_child_tag('b').get_attribute('id')
        '1'

        Syntax errors are reported, not raised:
        >>> result = parse_string('<a></b>')
        >>> result.success, result.error.kind.name
        (False, 'CLOSING_TAG_MISMATCH')
    """
    logger = get_logger(__name__, correlation_id, "parse_string")
    if logger.is_enabled_for(logging.DEBUG):
        logger.debug(
            "Starting string parse operation",
            extra={
                "content_length": len(xml_string),
                "preview": (
                    xml_string[:PREVIEW_LENGTH] + "..."
                    if len(xml_string) > PREVIEW_LENGTH else xml_string
                )
            }
        )
    return _parse_direct_content(xml_string, config or ParserConfig(), correlation_id)


def parse_file(
    file_path: Union[str, Path],
    encoding: Optional[str] = None,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse a document from a file.

    Without ``encoding`` the file is read as bytes and decoded by BOM, then by
    the encoding named in its XML declaration, then with the configured
    fallback encoding.

    Args:
        file_path: Path to XML file (string or Path object)
        encoding: Optional encoding override
        config: Parser configuration
        correlation_id: Optional correlation ID for request tracking

    Examples:
        >>> result = parse_file('missing.xml')
        >>> result.success
        False
        >>> 'not found' in result.diagnostics[0].message.lower()
        True
    """
    start_time = time.time()
    config = config or ParserConfig()
    logger = get_logger(__name__, correlation_id, "parse_file")
    path_obj = Path(file_path)

    logger.debug(
        "Starting file parse operation",
        extra={"file_path": str(path_obj), "encoding_override": encoding}
    )

    error_message = None
    if not path_obj.exists():
        error_message = f"File not found: {path_obj}"
    elif not path_obj.is_file():
        error_message = f"Path is not a file: {path_obj}"

    if error_message:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        return _create_error_result(error_message, correlation_id, processing_time)

    try:
        if encoding:
            with path_obj.open(encoding=encoding, errors=config.input.decode_errors) as file:
                content: Union[str, bytes] = file.read()
        else:
            with path_obj.open("rb") as file:
                content = file.read()
    except (OSError, UnicodeError, LookupError) as e:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        logger.warning(
            "File could not be read",
            extra={"file_path": str(path_obj), "error": str(e)}
        )
        return _create_error_result(
            f"Cannot read file {path_obj}: {e}", correlation_id, processing_time
        )

    result = _parse_direct_content(content, config, correlation_id)
    if config.global_.enable_diagnostics:
        result.add_diagnostic(
            DiagnosticSeverity.DEBUG,
            f"Parsed file {path_obj}",
            "file_parser",
            details={"file_path": str(path_obj), "encoding": encoding},
        )
    return result


def parse_events(
    input_data: Union[str, bytes],
    sink: EventSink,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> EventParser:
    """Parse a document and report its structure to ``sink``.

    Args:
        input_data: XML content as string or bytes
        sink: Receiver of the structural events
        config: Parser configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        The EventParser used, for its counters

    Raises:
        ParseError: On the first syntax error; events already delivered are
            not retracted
        UnicodeDecodeError: If bytes cannot be decoded under strict decoding
    """
    config = config or ParserConfig()
    text = _to_text(input_data, config, None)
    event_parser = EventParser(config.document, correlation_id)
    event_parser.parse(text, sink)
    return event_parser


def _to_text(
    content: Union[str, bytes],
    config: ParserConfig,
    result: Optional[ParseResult]
) -> str:
    """Decode ``content`` if needed and enforce the input size limit."""
    if isinstance(content, bytes):
        decoded = decode_buffer(
            content,
            fallback_encoding=config.input.fallback_encoding,
            errors=config.input.decode_errors,
        )
        if result is not None and config.global_.enable_diagnostics:
            for issue in decoded.issues:
                result.add_diagnostic(
                    DiagnosticSeverity.WARNING, issue, "encoding"
                )
            if decoded.method is DetectionMethod.FALLBACK:
                result.add_diagnostic(
                    DiagnosticSeverity.INFO,
                    f"No encoding detected, decoded as {decoded.encoding}",
                    "encoding",
                )
        text = decoded.text
    else:
        text = content

    limit = config.input.max_input_chars
    if limit is not None and len(text) > limit:
        raise InputTooLargeError(
            f"Input of {len(text)} characters exceeds limit of {limit}"
        )
    return text


def _parse_direct_content(
    content: Union[str, bytes],
    config: ParserConfig,
    correlation_id: Optional[str]
) -> ParseResult:
    """Decode, parse and build the tree for in-memory content."""
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse_direct")
    result = ParseResult(correlation_id=correlation_id)

    event_parser = EventParser(config.document, correlation_id)
    builder = TreeBuilder(config.tree, correlation_id)

    try:
        text = _to_text(content, config, result)
        event_parser.parse(text, builder)
    except ParseError as e:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        builder.reset()
        error_result = _create_error_result(
            str(e), correlation_id, processing_time, error=e
        )
        error_result.diagnostics[:0] = result.diagnostics
        error_result.performance.characters_processed = event_parser.characters_processed
        error_result.performance.events_emitted = event_parser.events_emitted
        return error_result
    except (UnicodeError, LookupError) as e:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        logger.info("Input could not be decoded", extra={"error": str(e)})
        return _create_error_result(
            f"Cannot decode input: {e}", correlation_id, processing_time
        )

    result.document = builder.close()

    processing_time = (time.time() - start_time) * MS_PER_SECOND
    result.performance.processing_time_ms = processing_time
    result.performance.characters_processed = event_parser.characters_processed
    result.performance.events_emitted = event_parser.events_emitted
    result.performance.entities_created = builder.entities_created

    logger.info(
        "Document parsed",
        extra={
            "element_count": result.element_count,
            "processing_time_ms": processing_time,
        }
    )
    return result


def _parse_file_like_object(
    file_obj: Union[BinaryIO, TextIO],
    config: ParserConfig,
    correlation_id: Optional[str]
) -> ParseResult:
    """Read a file-like object and parse its content."""
    start_time = time.time()
    try:
        content = file_obj.read()
    except (OSError, UnicodeError) as e:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        return _create_error_result(
            f"Cannot read input: {e}", correlation_id, processing_time
        )
    return _parse_direct_content(content, config, correlation_id)


def _create_error_result(
    error_message: str,
    correlation_id: Optional[str],
    processing_time: float,
    error: Optional[ParseError] = None
) -> ParseResult:
    """Create a failed result with a CRITICAL diagnostic.

    Args:
        error_message: Error description
        correlation_id: Optional correlation ID
        processing_time: Processing time in milliseconds
        error: The parse error that aborted the parse, if any
    """
    result = ParseResult(correlation_id=correlation_id)
    result.success = False
    result.error = error
    result.performance.processing_time_ms = processing_time

    result.add_diagnostic(
        DiagnosticSeverity.CRITICAL,
        error_message,
        "api_parser",
        position=error.position if error is not None else None,
        details={"error_kind": error.kind.name} if error is not None else None,
    )

    return result


class SimpleXMLParser:
    """Reusable parser bound to one configuration.

    Attributes:
        config: Parser configuration used for every parse
        correlation_id: Correlation ID for request tracking

    Examples:
        >>> parser = SimpleXMLParser(ParserConfig.strict())
        >>> parser.parse('<a/><b/>').error.kind.name
        'ROOT_ELEMENT_COUNT'
        >>> parser.statistics["total_parses"]
        1
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize parser.

        Args:
            config: Parser configuration (defaults to ``ParserConfig()``)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "simple_xml_parser")

        self._parse_count = 0
        self._total_processing_time = 0.0
        self._successful_parses = 0
        self._error_kinds: Dict[str, int] = {}

    def parse(
        self,
        input_data: InputType,
        config_override: Optional[ParserConfig] = None
    ) -> ParseResult:
        """Parse input with this parser's configuration.

        Args:
            input_data: XML content as string, bytes, file-like object, or Path
            config_override: Configuration used for this parse only
        """
        config = config_override or self.config
        result = parse(input_data, config=config, correlation_id=self.correlation_id)

        self._parse_count += 1
        self._total_processing_time += result.performance.processing_time_ms
        if result.success:
            self._successful_parses += 1
        elif result.error is not None:
            kind = result.error.kind.name
            self._error_kinds[kind] = self._error_kinds.get(kind, 0) + 1

        return result

    def parse_events(self, input_data: Union[str, bytes], sink: EventSink) -> EventParser:
        """Parse input and report events to ``sink``; see ``parse_events``."""
        return parse_events(input_data, sink, self.config, self.correlation_id)

    def parse_many(self, inputs: List[InputType]) -> List[ParseResult]:
        """Parse several inputs in order."""
        return [self.parse(input_data) for input_data in inputs]

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        return {
            "total_parses": self._parse_count,
            "successful_parses": self._successful_parses,
            "success_rate": (
                self._successful_parses / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "error_kinds": dict(self._error_kinds),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._parse_count = 0
        self._total_processing_time = 0.0
        self._successful_parses = 0
        self._error_kinds.clear()

        self.logger.info("Parser statistics reset")
