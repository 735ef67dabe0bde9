"""Tree building from parser events.

``TreeBuilder`` is an ``EventSink`` that turns the event stream into an
``Entity`` tree. It keeps its own stack of open entities, seeded with a fresh
document, so it works with any event source that emits balanced open/close
events.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from simple_xml_parser.events.sink import EventSink
from simple_xml_parser.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParseError,
    PerformanceMetrics,
    TreeConfig,
    get_logger,
)

from .entity import Entity, EntityKind


@dataclass
class ParseResult:
    """Result of parsing a document into a tree.

    A failed parse has ``success`` False, no document and the ``ParseError``
    that aborted it in ``error``; partial trees are never returned.
    """

    document: Optional[Entity] = None
    success: bool = True
    error: Optional[ParseError] = None

    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    correlation_id: Optional[str] = None

    @property
    def tree(self) -> Optional[Entity]:
        """Alias for ``document``."""
        return self.document

    @property
    def root(self) -> Optional[Entity]:
        """First top-level tag of the document, if any."""
        if self.document is None:
            return None
        return self.document.first_child_tag()

    @property
    def element_count(self) -> int:
        """Number of tags in the document."""
        if self.document is None:
            return 0
        return sum(
            1 for entity in self.document.iter_descendants()
            if entity.kind is EntityKind.TAG
        )

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        entry = DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            position=position,
            details=details,
            correlation_id=self.correlation_id
        )
        self.diagnostics.append(entry)

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def unwrap(self) -> Entity:
        """Return the document, or raise the error that aborted the parse."""
        if self.error is not None:
            raise self.error
        if self.document is None:
            raise ValueError("Parse result holds no document")
        return self.document

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the parse result."""
        severity_counts = {
            severity.name: len(self.get_diagnostics_by_severity(severity))
            for severity in DiagnosticSeverity
        }
        return {
            "success": self.success,
            "element_count": self.element_count,
            "error": self.error.to_dict() if self.error is not None else None,
            "diagnostics": {
                "total": len(self.diagnostics),
                "by_severity": severity_counts,
            },
            "performance": {
                "processing_time_ms": self.performance.processing_time_ms,
                "characters_processed": self.performance.characters_processed,
                "events_emitted": self.performance.events_emitted,
                "entities_created": self.performance.entities_created,
                "characters_per_second": self.performance.characters_per_second,
                "events_per_second": self.performance.events_per_second,
            },
        }


class TreeBuilder(EventSink):
    """Event sink that assembles an ``Entity`` tree.

    Examples:
        >>> builder = TreeBuilder()
        >>> EventParser().parse("<a><b/></a>", builder)
        >>> builder.close().first_child_tag("a").first_child_tag("b").name
        'b'
    """

    def __init__(
        self,
        config: Optional[TreeConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Tree building configuration
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or TreeConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_builder")
        self.reset()

    def reset(self) -> None:
        """Discard any tree under construction and start a new document."""
        self.document = Entity.new_document()
        self._stack: List[Entity] = [self.document]
        self.entities_created = 0

    @property
    def depth(self) -> int:
        """Number of currently open tags."""
        return len(self._stack) - 1

    @property
    def current(self) -> Entity:
        """Entity that receives the next child."""
        return self._stack[-1]

    def on_tag_open(self, name: str) -> None:
        tag = self.current.append_tag(name)
        self._stack.append(tag)
        self.entities_created += 1

    def on_tag_close(self, name: str) -> None:
        if len(self._stack) > 1:
            self._stack.pop()

    def on_text(self, text: str) -> None:
        if not text and self.config.suppress_empty_text:
            return
        if self.current.kind is EntityKind.DOCUMENT:
            return
        self.current.text = text

    def on_comment(self, text: str) -> None:
        self.current.append_comment(text)
        self.entities_created += 1

    def on_attribute(self, name: str, value: str) -> None:
        self.current.append_attribute(name, value)
        self.entities_created += 1

    def close(self) -> Entity:
        """Return the finished document.

        Tags still open (an event source that stopped early) are left as they
        are and reported in the log.
        """
        if len(self._stack) > 1:
            self.logger.warning(
                "Tree closed with unclosed tags",
                extra={"open_tags": [tag.name for tag in self._stack[1:]]}
            )
        self.logger.debug(
            "Tree building completed",
            extra={"entities_created": self.entities_created}
        )
        return self.document
