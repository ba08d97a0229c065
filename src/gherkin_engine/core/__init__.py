"""Core operations of the Gherkin engine.

This package contains pure functions with no I/O:
- tokenizer: Line classification into typed tokens
- parser: Token stream to document tree, with error recovery
- writer: Document tree to canonical Gherkin text
"""

from .parser import parse
from .tokenizer import ScanResult, scan, split_cells, tokenize
from .writer import escape_cell, format_source, write

__all__ = [
    "ScanResult",
    "escape_cell",
    "format_source",
    "parse",
    "scan",
    "split_cells",
    "tokenize",
    "write",
]
