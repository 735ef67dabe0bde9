"""Interoperability with lxml.

``to_lxml`` converts an entity tree into ``lxml.etree`` elements and
``from_lxml`` replays an lxml tree into a ``TreeBuilder``. ``LxmlAdapter``
wraps both directions in the result-object style of the parser API.

lxml is an optional dependency, imported on first use.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from simple_xml_parser.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    get_logger,
)
from simple_xml_parser.tree import Entity, EntityKind, ParseResult, TreeBuilder

LXML_MISSING_MESSAGE = (
    "lxml is required for this operation; "
    "install it with 'pip install simple-xml-parser[lxml]'"
)


def _import_etree() -> Any:
    try:
        from lxml import etree
    except ImportError as e:
        raise ImportError(LXML_MISSING_MESSAGE) from e
    return etree


def to_lxml(entity: Entity) -> Any:
    """Convert an entity into an ``lxml.etree`` node.

    A tag becomes an element, a comment a comment node. A document must hold
    exactly one top-level tag, which is returned; its top-level comments become
    siblings of that root.

    Raises:
        ValueError: For attribute entities and for documents without exactly
            one top-level tag
        ImportError: If lxml is not installed
    """
    etree = _import_etree()

    if entity.kind is EntityKind.ATTRIBUTE:
        raise ValueError("An attribute cannot be converted on its own")
    if entity.kind is EntityKind.COMMENT:
        return etree.Comment(entity.text)
    if entity.kind is EntityKind.TAG:
        return _tag_to_lxml(entity, etree)

    tags = list(entity.iter_children(EntityKind.TAG))
    if len(tags) != 1:
        raise ValueError(
            f"Document must have exactly one root tag to convert, found {len(tags)}"
        )
    root_tag = tags[0]
    root = _tag_to_lxml(root_tag, etree)

    for comment in entity.iter_children(EntityKind.COMMENT):
        if comment.sibling_index < root_tag.sibling_index:
            root.addprevious(etree.Comment(comment.text))
    trailing = [
        comment for comment in entity.iter_children(EntityKind.COMMENT)
        if comment.sibling_index > root_tag.sibling_index
    ]
    for comment in reversed(trailing):
        root.addnext(etree.Comment(comment.text))
    return root


def _tag_to_lxml(tag: Entity, etree: Any) -> Any:
    root = etree.Element(tag.name)
    pending = [(tag, root)]
    while pending:
        entity, element = pending.pop()
        if entity.text:
            element.text = entity.text
        for child in entity.children:
            if child.kind is EntityKind.ATTRIBUTE:
                element.set(child.name, child.text)
            elif child.kind is EntityKind.COMMENT:
                element.append(etree.Comment(child.text))
            else:
                pending.append((child, etree.SubElement(element, child.name)))
    return root


def from_lxml(node: Any, builder: Optional[TreeBuilder] = None) -> Entity:
    """Build a document from an lxml element or element tree.

    Namespaces are dropped (local names only); processing instructions and
    tail text are ignored. Comments next to a root element are kept.

    Args:
        node: ``lxml.etree._Element`` or ``_ElementTree``
        builder: Tree builder to feed; a default one is used when omitted

    Raises:
        ValueError: If an element or attribute name is not a valid name
        ImportError: If lxml is not installed
    """
    etree = _import_etree()
    builder = builder or TreeBuilder()
    builder.reset()

    if hasattr(node, "getroot"):
        node = node.getroot()

    is_root = node.getparent() is None
    if is_root:
        for sibling in reversed(list(node.itersiblings(preceding=True))):
            _feed(sibling, builder, etree)
    _feed(node, builder, etree)
    if is_root:
        for sibling in node.itersiblings():
            _feed(sibling, builder, etree)

    return builder.close()


def _feed(node: Any, builder: TreeBuilder, etree: Any) -> None:
    # Closing tag names are queued as strings between the nodes
    pending: List[Any] = [node]
    while pending:
        item = pending.pop()
        if isinstance(item, str):
            builder.on_tag_close(item)
            continue
        if item.tag is etree.Comment:
            builder.on_comment(item.text or "")
            continue
        if not isinstance(item.tag, str):
            continue

        name = etree.QName(item).localname
        builder.on_tag_open(name)
        for key, value in item.attrib.items():
            builder.on_attribute(etree.QName(key).localname, value)
        text = (item.text or "").lstrip()
        if text:
            builder.on_text(text)
        pending.append(name)
        pending.extend(reversed(list(item)))


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)


class IntegrationAdapter(ABC):
    """Base class for converters between parse results and other libraries."""

    name = "adapter"

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize the integration adapter.

        Args:
            correlation_id: Optional correlation ID for request tracking
        """
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library is installed."""

    @abstractmethod
    def to_target(self, parse_result: ParseResult) -> ConversionResult:
        """Convert a parse result to the target representation."""

    @abstractmethod
    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert target data to a parse result."""

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        conversion_time_ms: float = 0.0
    ) -> ConversionResult:
        """Create a ConversionResult for error conditions."""
        self._logger.warning(
            "Conversion failed",
            extra={"adapter": self.name, "error": error_message}
        )
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=conversion_time_ms,
            errors=[error_message],
            diagnostics=[
                DiagnosticEntry(
                    severity=DiagnosticSeverity.ERROR,
                    message=error_message,
                    component=self.__class__.__name__,
                    correlation_id=self.correlation_id
                )
            ]
        )


class LxmlAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with lxml.etree."""

    name = "lxml"

    def is_available(self) -> bool:
        """Check if lxml is available."""
        try:
            _import_etree()
        except ImportError:
            return False
        return True

    def to_target(self, parse_result: ParseResult) -> ConversionResult:
        """Convert a successful parse result to an ``lxml.etree`` root element."""
        start_time = time.time()

        if not parse_result.success or parse_result.document is None:
            return self._create_error_result(
                "ParseResult is not successful or has no document",
                parse_result,
                (time.time() - start_time) * 1000
            )

        try:
            lxml_root = to_lxml(parse_result.document)
        except (ImportError, ValueError) as e:
            return self._create_error_result(
                f"Failed to convert to lxml: {e}",
                parse_result,
                (time.time() - start_time) * 1000
            )

        return ConversionResult(
            success=True,
            converted_data=lxml_root,
            original_data=parse_result,
            conversion_time_ms=(time.time() - start_time) * 1000,
            metadata={"root_tag": lxml_root.tag},
        )

    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert an lxml element or tree to a ParseResult."""
        start_time = time.time()

        if not hasattr(target_data, "tag") and not hasattr(target_data, "getroot"):
            return self._create_error_result(
                "Target data is not a valid lxml element",
                target_data,
                (time.time() - start_time) * 1000
            )

        builder = TreeBuilder(correlation_id=self.correlation_id)
        try:
            document = from_lxml(target_data, builder)
        except (ImportError, ValueError) as e:
            return self._create_error_result(
                f"Failed to convert from lxml: {e}",
                target_data,
                (time.time() - start_time) * 1000
            )

        processing_time = (time.time() - start_time) * 1000
        parse_result = ParseResult(document=document, correlation_id=self.correlation_id)
        parse_result.performance.processing_time_ms = processing_time
        parse_result.performance.entities_created = builder.entities_created

        return ConversionResult(
            success=True,
            converted_data=parse_result,
            original_data=target_data,
            conversion_time_ms=processing_time,
            metadata={"element_count": parse_result.element_count},
        )
