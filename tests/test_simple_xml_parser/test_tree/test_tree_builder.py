"""Tests for the tree-building event sink and ParseResult."""

import logging

import pytest

from simple_xml_parser.events import EventParser
from simple_xml_parser.shared import (
    ClosingTagMismatchError,
    DiagnosticSeverity,
    TreeConfig,
)
from simple_xml_parser.tree import EntityKind, ParseResult, TreeBuilder


def build(text: str, config: TreeConfig = None):
    builder = TreeBuilder(config)
    EventParser().parse(text, builder)
    return builder.close()


class TestTreeBuilder:
    """Test tree construction from events."""

    def test_header_nesting_and_attributes(self):
        """Test header, nesting, attribute and text placement."""
        doc = build('<?xml version="1.0"?><a><b id="1">hi</b></a>')
        a = doc.first_child_tag("a")
        b = a.first_child_tag("b")

        assert doc.num_children == 1
        assert a.num_children == 1
        assert b.get_value() == "hi"
        assert b.children[0].kind is EntityKind.ATTRIBUTE
        assert (b.children[0].name, b.children[0].text) == ("id", "1")

    def test_comment_child(self):
        """Test comments become children of the open tag."""
        doc = build("<a><!-- note --></a>")
        comment = doc.first_child_tag("a").first_child()
        assert comment.kind is EntityKind.COMMENT
        assert comment.get_value() == " note "

    def test_empty_and_self_closing_shapes(self):
        """Test empty and self-closing tags build the same shape."""
        assert build("<x/>").to_dict() == build("<x></x>").to_dict()

    def test_last_text_wins(self):
        """Test the last text run wins."""
        doc = build("<a>first<b/>second</a>")
        assert doc.first_child_tag("a").text == "second"

    def test_document_level_comments(self):
        """Test document-level comments."""
        doc = build("<!-- a --><r/><!-- b -->")
        assert [child.kind for child in doc.children] == [
            EntityKind.COMMENT, EntityKind.TAG, EntityKind.COMMENT,
        ]

    def test_entities_created(self):
        """Test the created entity counter."""
        builder = TreeBuilder()
        EventParser().parse('<a x="1"><b/><!--c--></a>', builder)
        assert builder.entities_created == 4

    def test_manual_events(self):
        """Test the builder works with any balanced event source."""
        builder = TreeBuilder()
        builder.on_tag_open("r")
        builder.on_attribute("k", "v")
        builder.on_text("body")
        builder.on_tag_open("c")
        assert builder.depth == 2
        builder.on_tag_close("c")
        builder.on_tag_close("r")
        assert builder.depth == 0

        doc = builder.close()
        r = doc.first_child_tag("r")
        assert r.text == "body"
        assert r.get_attribute("k") == "v"
        assert r.first_child_tag("c") is not None

    def test_close_does_not_check_names(self):
        """Test close events pop without checking the tag name."""
        builder = TreeBuilder()
        builder.on_tag_open("a")
        builder.on_tag_close("zzz")
        assert builder.current is builder.document

    def test_extra_close_is_ignored(self):
        """Test an unmatched close event is ignored."""
        builder = TreeBuilder()
        builder.on_tag_close("a")
        assert builder.current is builder.document

    def test_text_at_document_level_is_ignored(self):
        """Test text at document level is ignored."""
        builder = TreeBuilder()
        builder.on_text("stray")
        assert builder.close().num_children == 0

    def test_empty_text(self):
        """Test empty text replaces earlier text."""
        builder = TreeBuilder()
        builder.on_tag_open("a")
        builder.on_text("kept")
        builder.on_text("")
        assert builder.current.text == ""

    def test_suppress_empty_text(self):
        """Test suppressing empty text."""
        builder = TreeBuilder(TreeConfig(suppress_empty_text=True))
        builder.on_tag_open("a")
        builder.on_text("kept")
        builder.on_text("")
        assert builder.current.text == "kept"

    def test_close_with_open_tags_warns(self, caplog):
        """Test closing with open tags logs a warning."""
        caplog.set_level(logging.WARNING, logger="simple_xml_parser")
        builder = TreeBuilder()
        builder.on_tag_open("a")
        builder.close()
        assert any("unclosed" in record.getMessage() for record in caplog.records)

    def test_reset(self):
        """Test resetting the builder."""
        builder = TreeBuilder()
        EventParser().parse("<a/>", builder)
        first = builder.close()
        builder.reset()
        EventParser().parse("<b/>", builder)
        second = builder.close()

        assert first is not second
        assert first.first_child_tag().name == "a"
        assert second.first_child_tag().name == "b"
        assert builder.entities_created == 1


class TestParseResult:
    """Test the parse result container."""

    def test_success_result(self):
        """Test a successful result."""
        doc = build("<a><b/><c/></a>")
        result = ParseResult(document=doc)
        assert result.tree is doc
        assert result.root.name == "a"
        assert result.element_count == 3
        assert result.unwrap() is doc
        assert not result.has_errors()

    def test_failed_result_unwrap(self):
        """Test unwrapping a failed result."""
        error = ClosingTagMismatchError("a", "b")
        result = ParseResult(success=False, error=error)
        assert result.root is None
        assert result.element_count == 0
        with pytest.raises(ClosingTagMismatchError):
            result.unwrap()

    def test_unwrap_without_document(self):
        """Test unwrapping a result without a document."""
        with pytest.raises(ValueError, match="no document"):
            ParseResult(success=False).unwrap()

    def test_diagnostics(self):
        """Test diagnostic collection."""
        result = ParseResult(correlation_id="req")
        result.add_diagnostic(DiagnosticSeverity.INFO, "note", "test")
        result.add_diagnostic(
            DiagnosticSeverity.CRITICAL, "failed", "test", position={"line": 1}
        )

        assert not ParseResult().has_errors()
        assert result.has_errors()
        critical = result.get_diagnostics_by_severity(DiagnosticSeverity.CRITICAL)
        assert [diag.message for diag in critical] == ["failed"]
        assert critical[0].correlation_id == "req"

    def test_summary(self):
        """Test result summary."""
        result = ParseResult(document=build("<a/>"))
        result.performance.characters_processed = 4
        summary = result.summary()

        assert summary["success"] is True
        assert summary["element_count"] == 1
        assert summary["error"] is None
        assert summary["diagnostics"]["total"] == 0
        assert summary["diagnostics"]["by_severity"]["CRITICAL"] == 0
        assert summary["performance"]["characters_processed"] == 4
        assert summary["performance"]["events_per_second"] == 0.0

    def test_summary_with_error(self):
        """Test summary of a failed result."""
        error = ClosingTagMismatchError("a", "b", line=1, column=3, offset=3)
        summary = ParseResult(success=False, error=error).summary()
        assert summary["error"]["kind"] == "CLOSING_TAG_MISMATCH"
        assert summary["error"]["found"] == "b"
