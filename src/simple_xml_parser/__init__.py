"""Simple XML Parser.

A small, strict XML front end: a recursive-descent parser that reports
document structure as events to a pluggable sink, and a tree builder that turns
those events into a navigable, mutable entity tree.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file(), parse_events()
- Level 2: Configured parser - SimpleXMLParser class
- Level 3: Building blocks - EventParser, EventSink, TreeBuilder
"""

__version__ = "0.1.0"
__author__ = "Simple XML Parser Team"

# Progressive API disclosure - Level 1: Simple functions
# Progressive API disclosure - Level 2: Configured parser
from .api import SimpleXMLParser, parse, parse_events, parse_file, parse_string

# Level 3: Event layer building blocks
from .events import EventParser, EventSink, PrintingSink, RecordingSink

# Configuration classes for advanced usage
from .shared.config import ParserConfig, RootPolicy

# Errors
from .shared.errors import ErrorKind, InvalidAppendTargetError, ParseError, XMLError

# Core result objects and tree types
from .tree import Entity, EntityKind, ParseResult, TreeBuilder

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_string",
    "parse_file",
    "parse_events",

    # Level 2: Configured parser class
    "SimpleXMLParser",

    # Level 3: Building blocks
    "EventParser",
    "EventSink",
    "PrintingSink",
    "RecordingSink",
    "TreeBuilder",

    # Result objects and data structures
    "ParseResult",
    "Entity",
    "EntityKind",

    # Configuration classes
    "ParserConfig",
    "RootPolicy",

    # Errors
    "ErrorKind",
    "InvalidAppendTargetError",
    "ParseError",
    "XMLError",
]
