"""Decoding of byte input into the text buffer consumed by the parser.

Detection runs in order: byte order mark, ``encoding="..."`` in the XML
declaration, then the configured fallback encoding.
"""

import codecs
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Tuple

DECLARATION_SCAN_BYTES = 1024


class DetectionMethod(Enum):
    """How the encoding of a byte buffer was determined."""

    BOM = "bom"
    XML_DECLARATION = "xml_declaration"
    FALLBACK = "fallback"


@dataclass
class DecodedText:
    """Decoded buffer together with how it was decoded."""

    text: str
    encoding: str
    method: DetectionMethod
    issues: List[str] = field(default_factory=list)


class BOMDetector:
    """Byte order mark detection for UTF encodings."""

    # Longest patterns first so UTF-32 LE is not taken for UTF-16 LE
    BOM_PATTERNS: ClassVar[Tuple[Tuple[bytes, str], ...]] = (
        (codecs.BOM_UTF32_LE, "utf-32-le"),
        (codecs.BOM_UTF32_BE, "utf-32-be"),
        (codecs.BOM_UTF8, "utf-8"),
        (codecs.BOM_UTF16_LE, "utf-16-le"),
        (codecs.BOM_UTF16_BE, "utf-16-be"),
    )

    def detect(self, data: bytes) -> Optional[Tuple[str, int]]:
        """Return ``(encoding, bom_length)`` or None if no BOM is present."""
        for bom_bytes, encoding in self.BOM_PATTERNS:
            if data.startswith(bom_bytes):
                return encoding, len(bom_bytes)
        return None


class XMLDeclarationParser:
    """Reads the encoding named by an ``<?xml ... ?>`` declaration."""

    XML_DECLARATION_PATTERN = re.compile(
        rb'<\?xml\s+[^>]*?encoding\s*=\s*["\']([A-Za-z0-9._\-]+)["\']',
        re.IGNORECASE
    )

    ALIASES: ClassVar[Dict[str, str]] = {
        "utf8": "utf-8",
        "utf16": "utf-16",
        "utf32": "utf-32",
        "iso-8859-1": "latin-1",
        "windows-1252": "cp1252",
    }

    def parse_declaration(self, data: bytes) -> Optional[str]:
        """Return the declared encoding, or None if absent."""
        match = self.XML_DECLARATION_PATTERN.search(data[:DECLARATION_SCAN_BYTES])
        if not match:
            return None
        declared = match.group(1).decode("ascii").lower()
        return self.ALIASES.get(declared, declared)


def is_known_encoding(encoding: str) -> bool:
    """Check if ``encoding`` is supported by Python codecs."""
    try:
        codecs.lookup(encoding)
    except LookupError:
        return False
    return True


def decode_buffer(
    data: bytes,
    fallback_encoding: str = "utf-8",
    errors: str = "strict",
) -> DecodedText:
    """Decode ``data`` into text.

    Args:
        data: Raw document bytes
        fallback_encoding: Encoding used when neither BOM nor declaration names one
        errors: Codec error handler (``strict``, ``replace`` or ``ignore``)

    Returns:
        DecodedText with the BOM, if any, removed

    Raises:
        UnicodeDecodeError: If ``errors`` is ``strict`` and decoding fails
    """
    issues: List[str] = []

    bom = BOMDetector().detect(data)
    if bom is not None:
        encoding, bom_length = bom
        return DecodedText(
            text=data[bom_length:].decode(encoding, errors),
            encoding=encoding,
            method=DetectionMethod.BOM,
        )

    declared = XMLDeclarationParser().parse_declaration(data)
    if declared is not None:
        if is_known_encoding(declared):
            return DecodedText(
                text=data.decode(declared, errors),
                encoding=declared,
                method=DetectionMethod.XML_DECLARATION,
            )
        issues.append(f"Unknown declared encoding: {declared}")

    return DecodedText(
        text=data.decode(fallback_encoding, errors),
        encoding=fallback_encoding,
        method=DetectionMethod.FALLBACK,
        issues=issues,
    )
