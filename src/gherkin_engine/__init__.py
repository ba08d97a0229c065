"""Gherkin engine: tokenize, parse and write Gherkin feature files.

Example:
    >>> from gherkin_engine import parse, write
    >>> from pathlib import Path
    >>> document = parse(Path("login.feature").read_text())
    >>> print(write(document))
"""

from .config import EngineConfig, WriterConfig, load_config
from .core import format_source, parse, tokenize, write
from .dialects import DialectEntry, available_languages, keywords_for
from .diagnostics import DiagnosticsReporter
from .errors import GherkinError, GherkinSyntaxError, WriteError
from .models import GherkinDocument, ParseError, Source, Token, TokenTag
from .serialization import from_json, to_json, to_legacy_json

__version__ = "0.1.0"

__all__ = [
    "DiagnosticsReporter",
    "DialectEntry",
    "EngineConfig",
    "GherkinDocument",
    "GherkinError",
    "GherkinSyntaxError",
    "ParseError",
    "Source",
    "Token",
    "TokenTag",
    "WriteError",
    "WriterConfig",
    "__version__",
    "available_languages",
    "format_source",
    "from_json",
    "keywords_for",
    "load_config",
    "parse",
    "to_json",
    "to_legacy_json",
    "tokenize",
    "write",
]
