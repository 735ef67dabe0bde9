"""Character layer: cursor, lexical scanners and byte decoding.

Key Components:
    Cursor: Position-tracking read head over an immutable text buffer
    scanners: Whitespace, name, quoted string, text and comment readers
    decode_buffer: BOM / declaration aware decoding of byte input
"""

from . import scanners
from .cursor import Cursor, CursorPosition
from .encoding import DecodedText, DetectionMethod, decode_buffer

__all__ = [
    "Cursor",
    "CursorPosition",
    "DecodedText",
    "DetectionMethod",
    "decode_buffer",
    "scanners",
]
