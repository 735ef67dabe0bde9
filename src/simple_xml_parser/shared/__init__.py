"""Shared utilities for simple XML parsing.

This module provides the error taxonomy, configuration objects, diagnostic
types and logging helpers used across all processing layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    DocumentConfig,
    GlobalConfig,
    InputConfig,
    ParserConfig,
    RootPolicy,
    TreeConfig,
)
from .errors import (
    ClosingTagMismatchError,
    DepthLimitError,
    ErrorKind,
    ExpectedTagError,
    InputTooLargeError,
    InvalidAppendTargetError,
    InvalidNameError,
    MalformedCommentError,
    MalformedTagError,
    MisplacedHeaderError,
    OutOfRangeError,
    ParseError,
    RootElementError,
    UnexpectedCharacterError,
    XMLError,
)
from .logging import (
    ComponentLogger,
    configure_logging,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "DocumentConfig",
    "GlobalConfig",
    "InputConfig",
    "ParserConfig",
    "RootPolicy",
    "TreeConfig",
    "ClosingTagMismatchError",
    "DepthLimitError",
    "ErrorKind",
    "ExpectedTagError",
    "InputTooLargeError",
    "InvalidAppendTargetError",
    "InvalidNameError",
    "MalformedCommentError",
    "MalformedTagError",
    "MisplacedHeaderError",
    "OutOfRangeError",
    "ParseError",
    "RootElementError",
    "UnexpectedCharacterError",
    "XMLError",
    "ComponentLogger",
    "configure_logging",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
]
