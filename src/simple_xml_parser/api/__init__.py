"""Public parsing API.

Key Components:
    parse, parse_string, parse_file: Parse into a ParseResult holding a tree
    parse_events: Parse and report events to a sink
    SimpleXMLParser: Reusable configured parser with usage statistics
    to_lxml, from_lxml, LxmlAdapter: lxml interoperability
"""

from .adapters import (
    ConversionResult,
    IntegrationAdapter,
    LxmlAdapter,
    from_lxml,
    to_lxml,
)
from .parser import (
    InputType,
    SimpleXMLParser,
    parse,
    parse_events,
    parse_file,
    parse_string,
)

__all__ = [
    "ConversionResult",
    "IntegrationAdapter",
    "InputType",
    "LxmlAdapter",
    "SimpleXMLParser",
    "from_lxml",
    "parse",
    "parse_events",
    "parse_file",
    "parse_string",
    "to_lxml",
]
