"""Tests for tree serialization."""

import io

import pytest

from simple_xml_parser.api import parse_string
from simple_xml_parser.tree import Entity, dump, serialize, write


def reparse(text: str):
    result = parse_string(text)
    assert result.success, result.diagnostics
    return result


class TestSerialize:
    """Test XML text rendering."""

    def test_nested_document(self):
        """Test serializing a nested document."""
        result = reparse('<?xml version="1.0"?><a><b id="1">hi</b></a>')
        assert serialize(result.document) == '<a><b id="1">hi</b></a>'

    def test_self_closing(self):
        """Test self-closing rendering."""
        result = reparse('<a x="1" y="2"></a>')
        assert result.document.serialize() == '<a x="1" y="2"/>'

    def test_comment_spacing(self):
        """Test comment bodies are padded with spaces."""
        result = reparse("<a><!-- note --></a>")
        assert result.document.serialize() == "<a><!--  note  --></a>"

    def test_tag_with_only_comment_is_not_self_closed(self):
        """Test a tag holding only a comment is not self-closed."""
        doc = Entity.new_document()
        doc.append_tag("a").append_comment("c")
        assert serialize(doc) == "<a><!-- c --></a>"

    def test_text_precedes_children(self):
        """Test tag text is written before children."""
        result = reparse("<a><b/>tail</a>")
        assert result.document.serialize() == "<a>tail<b/></a>"

    def test_document_renders_children_only(self):
        """Test a document renders only its children."""
        result = reparse("<!-- c --><a/><b/>")
        assert result.document.serialize() == "<!--  c  --><a/><b/>"

    def test_attribute_and_comment_alone(self):
        """Test serializing attribute and comment entities on their own."""
        doc = Entity.new_document()
        a = doc.append_tag("a")
        attribute = a.append_attribute("k", "v")
        comment = a.append_comment("x")
        assert serialize(attribute) == 'k="v"'
        assert serialize(comment) == "<!-- x -->"

    def test_values_written_verbatim(self):
        """Test values are written verbatim."""
        result = reparse('<a href="x&amp;y">1 &lt; 2</a>')
        assert result.document.serialize() == '<a href="x&amp;y">1 &lt; 2</a>'

    def test_write_to_stream(self):
        """Test writing to a stream."""
        result = reparse("<a><b/></a>")
        stream = io.StringIO()
        write(result.document, stream)
        result.document.write(stream)
        assert stream.getvalue() == "<a><b/></a><a><b/></a>"

    def test_mutated_tree(self):
        """Test serializing a mutated tree."""
        result = reparse("<root><item>1</item></root>")
        root = result.root
        new = root.append_tag("newtag")
        new.append_attribute("k", "v")
        new.set_value("added")
        assert result.document.serialize() == (
            '<root><item>1</item><newtag k="v">added</newtag></root>'
        )

    def test_deep_tree(self):
        """Test serializing a tree deeper than the recursion limit."""
        depth = 3000
        doc = Entity.new_document()
        tag = doc
        for _ in range(depth):
            tag = tag.append_tag("a")
        assert doc.serialize() == "<a>" * (depth - 1) + "<a/>" + "</a>" * (depth - 1)

    def test_deep_tree_keeps_sibling_order(self):
        """Test closing tags are written after all content at every level."""
        doc = Entity.new_document()
        tag = doc
        for _ in range(1500):
            tag = tag.append_tag("a")
            tag.append_attribute("k", "v")
            tag.append_comment("c")
        text = doc.serialize()
        assert text.startswith('<a k="v"><!-- c --><a k="v">')
        assert text.endswith("<!-- c --></a></a>")
        assert text.count("</a>") == 1500


class TestRoundTrip:
    """Test parse -> serialize -> parse preserves structure."""

    @pytest.mark.parametrize("text", [
        '<a><b id="1">hi</b></a>',
        '<catalog><book id="b1" lang="en"><title>XML </title><price>9</price></book>'
        '<book id="b2"/></catalog>',
        "<a>\n  <b>\n    <c>deep</c>\n  </b>\n</a>",
        '<a x="1"/><b y="2">t</b>',
    ])
    def test_structure_preserved(self, text):
        """Test structure survives a round trip."""
        first = reparse(text)
        second = reparse(first.document.serialize())
        assert second.document.to_dict() == first.document.to_dict()

    def test_comment_gains_padding(self):
        """Test each serialization pads comment bodies with one space."""
        first = reparse("<a><!-- x --></a>")
        second = reparse(first.document.serialize())
        assert second.root.first_child_comment().text == "  x  "


class TestDump:
    """Test the debug listing."""

    def test_dump_function(self):
        """Test the module-level dump function."""
        result = reparse('<a k="v"><!-- c --><b/></a>')
        assert dump(result.document) == (
            "DOCUMENT\n"
            "  TAG: a\n"
            "    ATTRIBUTE: k=v\n"
            "    COMMENT:  c \n"
            "    TAG: b\n"
        )

    def test_dump_subtree_with_indent(self):
        """Test dumping a subtree with a custom indent."""
        result = reparse("<a><b><c/></b></a>")
        b = result.root.first_child_tag("b")
        assert dump(b, indent="-") == "TAG: b\n-TAG: c\n"
