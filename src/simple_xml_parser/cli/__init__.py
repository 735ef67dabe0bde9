"""Command-line interface for simple XML parsing.

This module provides the ``simple-xml`` tool for printing event streams and
document trees, re-serializing documents and validating files.
"""

from .main import main

__all__ = ["main"]
