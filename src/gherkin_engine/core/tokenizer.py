"""Line tokenizer for Gherkin source text.

Single left-to-right scan. Each non-blank line becomes one token; doc
string interiors become one ``other`` token per line (blank lines
included). Lexical errors are collected and scanning continues, so one
pass reports every unterminated doc string and malformed table row.
"""

import logging
import re
from dataclasses import dataclass, field

from ..config import EngineConfig
from ..constants import DEFAULT_LANGUAGE, DOC_STRING_DELIMITERS
from ..dialects import DialectEntry, keywords_for
from ..errors import GherkinSyntaxError
from ..models import (
    DocStringSeparator,
    KeywordLine,
    LanguageLine,
    ParseError,
    ScenarioKind,
    ScenarioLine,
    Source,
    StepLine,
    TableRowLine,
    TagLine,
    TextLine,
    Token,
    TokenTag,
    ensure_source,
)

logger = logging.getLogger(__name__)

LANGUAGE_PATTERN = re.compile(r"^\s*#\s*language\s*:\s*([a-zA-Z0-9_-]+)\s*$")
TAG_COMMENT_PATTERN = re.compile(r"\s#")

HEADER_TAGS = {
    "feature": TokenTag.FEATURE_LINE,
    "rule": TokenTag.RULE_LINE,
    "background": TokenTag.BACKGROUND_LINE,
    "examples": TokenTag.EXAMPLES_LINE,
}

_CELL_ESCAPES = {"|": "|", "\\": "\\", "n": "\n"}


@dataclass
class ScanResult:
    """Everything one scan produced."""

    tokens: list[Token] = field(default_factory=list)
    errors: list[ParseError] = field(default_factory=list)
    dialect: DialectEntry = field(default_factory=lambda: keywords_for(DEFAULT_LANGUAGE))


@dataclass
class _OpenDocString:
    delimiter: str
    indent: int
    line: int
    column: int


@dataclass
class _TableRun:
    width: int
    line: int


def _split_lines(text: str) -> list[str]:
    lines = text.split("\n")
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _doc_string_delimiter(stripped: str) -> str | None:
    for delimiter in DOC_STRING_DELIMITERS:
        if stripped.startswith(delimiter):
            return delimiter
    return None


def _doc_string_content(raw: str, open_doc: _OpenDocString) -> str:
    """Drop up to the opening delimiter's indentation and unescape delimiters."""
    cut = 0
    while cut < open_doc.indent and cut < len(raw) and raw[cut] in " \t":
        cut += 1
    escaped = "".join("\\" + ch for ch in open_doc.delimiter)
    return raw[cut:].replace(escaped, open_doc.delimiter)


def split_cells(row: str, column: int) -> tuple[list[str], list[int], bool]:
    """Split a ``|``-delimited row into trimmed, unescaped cells.

    Args:
        row: Row text starting at its first ``|``
        column: 1-based column of that first ``|``

    Returns:
        Tuple of (cell values, cell columns, True if the row is closed by an
        unescaped ``|``)
    """
    cells: list[str] = []
    columns: list[int] = []
    buffer: list[str] = []
    start = 1
    i = 1
    while i < len(row):
        ch = row[i]
        if ch == "\\" and i + 1 < len(row):
            nxt = row[i + 1]
            buffer.append(_CELL_ESCAPES.get(nxt, ch + nxt))
            i += 2
            continue
        if ch == "|":
            raw = "".join(buffer)
            leading = len(raw) - len(raw.lstrip())
            cells.append(raw.strip())
            columns.append(column + start + leading)
            buffer = []
            start = i + 1
        else:
            buffer.append(ch)
        i += 1
    closed = not "".join(buffer).strip()
    return cells, columns, closed


def _split_tags(stripped: str, column: int) -> tuple[list[str], list[int]]:
    comment = TAG_COMMENT_PATTERN.search(stripped)
    if comment:
        stripped = stripped[: comment.start()]
    tags: list[str] = []
    columns: list[int] = []
    for match in re.finditer(r"\S+", stripped):
        tags.append(match.group())
        columns.append(column + match.start())
    return tags, columns


def scan(text: str, default_language: str = DEFAULT_LANGUAGE) -> ScanResult:
    """Classify every line of ``text``.

    Args:
        text: Raw Gherkin source
        default_language: Dialect in effect until a ``# language:`` directive

    Returns:
        ScanResult with tokens, lexical errors and the final dialect
    """
    result = ScanResult(dialect=keywords_for(default_language))
    dialect = result.dialect
    tokens = result.tokens
    errors = result.errors
    open_doc: _OpenDocString | None = None
    # Rows separated only by comments or blank lines belong to one table
    table: _TableRun | None = None
    seen_content = False

    # Editors may save a UTF-8 byte order mark ahead of the first line
    if text.startswith("\ufeff"):
        text = text[1:]

    for number, raw in enumerate(_split_lines(text), start=1):
        stripped = raw.strip()
        column = len(raw) - len(raw.lstrip()) + 1

        if open_doc is not None:
            if stripped.startswith(open_doc.delimiter):
                tokens.append(
                    Token(
                        tag=TokenTag.DOC_STRING_SEPARATOR,
                        line=number,
                        column=column,
                        payload=DocStringSeparator(delimiter=open_doc.delimiter),
                    )
                )
                open_doc = None
            else:
                tokens.append(
                    Token(
                        tag=TokenTag.OTHER,
                        line=number,
                        column=column if stripped else 1,
                        payload=TextLine(text=_doc_string_content(raw, open_doc)),
                    )
                )
            continue

        if not stripped:
            continue

        first_line = not seen_content
        seen_content = True

        language = LANGUAGE_PATTERN.match(raw) if first_line else None
        if language:
            dialect = keywords_for(language.group(1))
            tokens.append(
                Token(
                    tag=TokenTag.LANGUAGE,
                    line=number,
                    column=column,
                    payload=LanguageLine(language=language.group(1)),
                )
            )
            table = None
            continue

        if stripped.startswith("#"):
            tokens.append(
                Token(tag=TokenTag.COMMENT_LINE, line=number, column=column, payload=TextLine(text=stripped))
            )
            continue

        delimiter = _doc_string_delimiter(stripped)
        if delimiter:
            media_type = stripped[len(delimiter) :].strip() or None
            open_doc = _OpenDocString(delimiter, column - 1, number, column)
            tokens.append(
                Token(
                    tag=TokenTag.DOC_STRING_SEPARATOR,
                    line=number,
                    column=column,
                    payload=DocStringSeparator(delimiter=delimiter, media_type=media_type),
                )
            )
            table = None
            continue

        if stripped.startswith("|"):
            cells, columns, closed = split_cells(stripped, column)
            if not closed:
                errors.append(
                    ParseError(
                        message="Malformed table row: missing closing '|' (check '\\|' escapes)",
                        line=number,
                        column=column,
                    )
                )
                continue
            if table is None:
                table = _TableRun(width=len(cells), line=number)
            elif len(cells) != table.width:
                errors.append(
                    ParseError(
                        message=(
                            f"Inconsistent cell count within the table: expected {table.width} "
                            f"cells (as on line {table.line}), found {len(cells)}"
                        ),
                        line=number,
                        column=column,
                    )
                )
                continue
            tokens.append(
                Token(
                    tag=TokenTag.TABLE_ROW,
                    line=number,
                    column=column,
                    payload=TableRowLine(cells=cells, columns=columns),
                )
            )
            continue

        table = None

        if stripped.startswith("@"):
            tags, columns = _split_tags(stripped, column)
            tokens.append(
                Token(tag=TokenTag.TAG_LINE, line=number, column=column, payload=TagLine(tags=tags, columns=columns))
            )
            continue

        header = dialect.match_header(stripped)
        if header:
            if header.construct in ("scenario", "scenario_outline"):
                kind = (
                    ScenarioKind.SCENARIO_OUTLINE
                    if header.construct == "scenario_outline"
                    else ScenarioKind.SCENARIO
                )
                token = Token(
                    tag=TokenTag.SCENARIO_LINE,
                    line=number,
                    column=column,
                    payload=ScenarioLine(keyword=header.keyword, name=header.name, kind=kind),
                )
            else:
                token = Token(
                    tag=HEADER_TAGS[header.construct],
                    line=number,
                    column=column,
                    payload=KeywordLine(keyword=header.keyword, name=header.name),
                )
            tokens.append(token)
            continue

        step = dialect.match_step(stripped)
        if step:
            tokens.append(
                Token(
                    tag=TokenTag.STEP_LINE,
                    line=number,
                    column=column,
                    payload=StepLine(keyword=step.keyword, keyword_type=step.keyword_type, text=step.text),
                )
            )
            continue

        tokens.append(Token(tag=TokenTag.OTHER, line=number, column=column, payload=TextLine(text=raw.rstrip())))

    if open_doc is not None:
        errors.append(
            ParseError(
                message=f"Unterminated doc string: {open_doc.delimiter} opened on line {open_doc.line} is never closed",
                line=open_doc.line,
                column=open_doc.column,
            )
        )

    result.dialect = dialect
    logger.debug(f"Scanned {len(tokens)} tokens, {len(errors)} lexical errors ({dialect.code})")
    return result


def tokenize(source: str | Source, *, config: EngineConfig | None = None) -> list[Token]:
    """Tokenize Gherkin source into typed tokens.

    Args:
        source: Gherkin text or Source record
        config: Engine configuration (defaults when omitted)

    Returns:
        Tokens in source line order

    Raises:
        GherkinSyntaxError: With every lexical error found in the pass
    """
    config = config or EngineConfig()
    result = scan(ensure_source(source).data, config.default_language)
    if result.errors:
        raise GherkinSyntaxError(result.errors)
    return result.tokens
