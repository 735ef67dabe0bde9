"""Tests for byte input decoding."""

import codecs

import pytest

from simple_xml_parser.character.encoding import (
    BOMDetector,
    DetectionMethod,
    XMLDeclarationParser,
    decode_buffer,
    is_known_encoding,
)


class TestBOMDetector:
    """Test byte order mark detection."""

    def test_utf8_bom(self):
        """Test UTF-8 byte order mark."""
        assert BOMDetector().detect(codecs.BOM_UTF8 + b"<a/>") == ("utf-8", 3)

    def test_utf32_le_not_taken_for_utf16(self):
        """Test UTF-32 LE wins over the UTF-16 LE prefix it shares."""
        assert BOMDetector().detect(codecs.BOM_UTF32_LE + b"\x00") == ("utf-32-le", 4)

    def test_no_bom(self):
        """Test input without a byte order mark."""
        assert BOMDetector().detect(b"<a/>") is None


class TestXMLDeclarationParser:
    """Test encoding extraction from the XML declaration."""

    def test_declared_encoding(self):
        """Test declared encoding detection."""
        data = b'<?xml version="1.0" encoding="UTF-8"?><a/>'
        assert XMLDeclarationParser().parse_declaration(data) == "utf-8"

    def test_alias_mapping(self):
        """Test common encoding aliases are normalized."""
        data = b"<?xml version='1.0' encoding='ISO-8859-1'?><a/>"
        assert XMLDeclarationParser().parse_declaration(data) == "latin-1"

    def test_no_declaration(self):
        """Test input without a declaration."""
        assert XMLDeclarationParser().parse_declaration(b"<a/>") is None


class TestDecodeBuffer:
    """Test the full decoding cascade."""

    def test_bom_is_stripped(self):
        """Test BOM detection removes the mark from the text."""
        decoded = decode_buffer(codecs.BOM_UTF8 + "<a>é</a>".encode("utf-8"))
        assert decoded.text == "<a>é</a>"
        assert decoded.encoding == "utf-8"
        assert decoded.method is DetectionMethod.BOM

    def test_utf16_bom(self):
        """Test UTF-16 input with a byte order mark."""
        data = codecs.BOM_UTF16_LE + "<a/>".encode("utf-16-le")
        decoded = decode_buffer(data)
        assert decoded.text == "<a/>"
        assert decoded.method is DetectionMethod.BOM

    def test_declaration(self):
        """Test the declared encoding is used when there is no BOM."""
        data = b'<?xml version="1.0" encoding="ISO-8859-1"?><a>\xe9</a>'
        decoded = decode_buffer(data)
        assert decoded.encoding == "latin-1"
        assert decoded.method is DetectionMethod.XML_DECLARATION
        assert decoded.text.endswith("<a>é</a>")

    def test_unknown_declared_encoding_falls_back(self):
        """Test an unknown declared encoding is reported and ignored."""
        data = b'<?xml version="1.0" encoding="no-such-codec"?><a/>'
        decoded = decode_buffer(data)
        assert decoded.method is DetectionMethod.FALLBACK
        assert decoded.encoding == "utf-8"
        assert any("no-such-codec" in issue for issue in decoded.issues)

    def test_fallback_encoding(self):
        """Test the configured fallback encoding."""
        decoded = decode_buffer(b"<a>\xe9</a>", fallback_encoding="latin-1")
        assert decoded.text == "<a>é</a>"
        assert decoded.method is DetectionMethod.FALLBACK

    def test_strict_errors(self):
        """Test undecodable bytes under strict error handling."""
        with pytest.raises(UnicodeDecodeError):
            decode_buffer(b"<a>\xff</a>")

    def test_replace_errors(self):
        """Test undecodable bytes under replacing error handling."""
        decoded = decode_buffer(b"<a>\xff</a>", errors="replace")
        assert decoded.text == "<a>�</a>"


class TestKnownEncoding:
    """Test codec lookup helper."""

    def test_known(self):
        """Test known encoding names."""
        assert is_known_encoding("utf-8")
        assert is_known_encoding("latin-1")

    def test_unknown(self):
        """Test unknown encoding names."""
        assert not is_known_encoding("definitely-not-a-codec")
