"""Canonical Gherkin text output.

Structural pretty-printer over a GherkinDocument. Whitespace and table
alignment are normalized; re-parsing the output yields a document whose
``structure()`` equals the input's.
"""

import logging
import re
from collections import deque

from ..config import EngineConfig
from ..errors import WriteError
from ..models import (
    Background,
    BackgroundNode,
    Comment,
    DataTableArgument,
    DocString,
    DocStringArgument,
    Examples,
    Feature,
    GherkinDocument,
    Rule,
    RuleNode,
    Scenario,
    ScenarioNode,
    Source,
    Step,
    TableRow,
    Tag,
)
from .parser import parse
from .tokenizer import LANGUAGE_PATTERN

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s")


def escape_cell(value: str) -> str:
    """Escape a cell value for a ``|``-delimited row."""
    return value.replace("\\", "\\\\").replace("|", "\\|").replace("\n", "\\n")


class _Writer:
    def __init__(self, document: GherkinDocument, config: EngineConfig):
        self.document = document
        self.config = config
        self.unit = " " * config.writer.indent
        self.lines: list[str] = []
        self.pending: deque[Comment] = deque(document.comments)

    def _emit(self, depth: int, text: str) -> None:
        self.lines.append(f"{self.unit * depth}{text}" if text else "")

    def _blank(self) -> None:
        if self.lines and self.lines[-1] != "":
            self.lines.append("")

    def _flush_comments(self, before_line: int, depth: int) -> None:
        """Emit comments that appeared in the source before ``before_line``."""
        while self.pending and self.pending[0].location.line < before_line:
            self._comment(self.pending.popleft(), depth)

    def _comment(self, comment: Comment, depth: int) -> None:
        if not comment.text.startswith("#") or "\n" in comment.text:
            raise WriteError(f"Comment text must be a single line starting with '#': {comment.text!r}")
        self._emit(depth, comment.text)

    def _tags(self, tags: list[Tag], depth: int) -> None:
        if not tags:
            return
        for tag in tags:
            if not tag.name.startswith("@") or _WHITESPACE.search(tag.name):
                raise WriteError(f"Invalid tag name {tag.name!r}")
        self._emit(depth, " ".join(tag.name for tag in tags))

    def _header(self, keyword: str, name: str, depth: int) -> None:
        self._emit(depth, f"{keyword}: {name}" if name else f"{keyword}:")

    def _description(self, description: str, depth: int) -> None:
        if not description.strip():
            return
        for line in description.strip("\n").split("\n"):
            self._emit(depth, line.rstrip())

    def _opening(self, line: int, tags: list[Tag], depth: int) -> None:
        """Blank separator, preceding comments, then the tag line of a block."""
        self._blank()
        self._flush_comments(tags[0].location.line if tags else line, depth)
        self._tags(tags, depth)
        self._flush_comments(line, depth)

    # --- document ---

    def write(self) -> str:
        feature = self.document.feature
        language = feature.language if feature else self.config.default_language
        first_comment = self.pending[0].text if self.pending else ""
        if language != self.config.default_language or LANGUAGE_PATTERN.match(first_comment):
            self._emit(0, f"# language: {language}")

        if feature is not None:
            self._feature(feature)
        while self.pending:
            self._comment(self.pending.popleft(), 0)
        return "\n".join(self.lines) + "\n" if self.lines else ""

    def _feature(self, feature: Feature) -> None:
        self._flush_comments(feature.tags[0].location.line if feature.tags else feature.location.line, 0)
        self._tags(feature.tags, 0)
        self._flush_comments(feature.location.line, 0)
        self._header(feature.keyword, feature.name, 0)
        self._description(feature.description, 1)
        for child in feature.children:
            self._child(child, 1)

    def _child(self, child: BackgroundNode | ScenarioNode | RuleNode, depth: int) -> None:
        if isinstance(child, BackgroundNode):
            self._background(child.payload, depth)
        elif isinstance(child, ScenarioNode):
            self._scenario(child.payload, depth)
        else:
            self._rule(child.payload, depth)

    def _rule(self, rule: Rule, depth: int) -> None:
        self._opening(rule.location.line, rule.tags, depth)
        self._header(rule.keyword, rule.name, depth)
        self._description(rule.description, depth + 1)
        for child in rule.children:
            self._child(child, depth + 1)

    def _background(self, background: Background, depth: int) -> None:
        self._opening(background.location.line, [], depth)
        self._header(background.keyword, background.name, depth)
        self._description(background.description, depth + 1)
        for step in background.steps:
            self._step(step, depth + 1)

    def _scenario(self, scenario: Scenario, depth: int) -> None:
        self._opening(scenario.location.line, scenario.tags, depth)
        self._header(scenario.keyword, scenario.name, depth)
        self._description(scenario.description, depth + 1)
        for step in scenario.steps:
            self._step(step, depth + 1)
        for examples in scenario.examples:
            self._examples(examples, depth + 1)

    def _examples(self, examples: Examples, depth: int) -> None:
        self._opening(examples.location.line, examples.tags, depth)
        self._header(examples.keyword, examples.name, depth)
        self._description(examples.description, depth + 1)
        if examples.table_header is None:
            if examples.table_body:
                raise WriteError(
                    f"Examples {examples.name!r} has rows but no header row"
                )
            return
        self._table([examples.table_header, *examples.table_body], depth + 1)

    # --- steps and arguments ---

    def _step(self, step: Step, depth: int) -> None:
        self._flush_comments(step.location.line, depth)
        self._emit(depth, f"{step.keyword}{step.text}")
        if isinstance(step.argument, DataTableArgument):
            self._table(step.argument.payload.rows, depth + 1)
        elif isinstance(step.argument, DocStringArgument):
            self._doc_string(step.argument.payload, depth + 1)

    def _table(self, rows: list[TableRow], depth: int) -> None:
        if not rows:
            return
        width = len(rows[0].cells)
        for row in rows[1:]:
            if len(row.cells) != width:
                raise WriteError(
                    f"Ragged table: row at line {row.location.line} has {len(row.cells)} "
                    f"cells, expected {width}"
                )
        escaped = [[escape_cell(cell.value) for cell in row.cells] for row in rows]
        widths = [max(len(cells[i]) for cells in escaped) for i in range(width)]
        for row, cells in zip(rows, escaped):
            self._flush_comments(row.location.line, depth)
            if not cells:
                self._emit(depth, "|")
                continue
            padded = " | ".join(cell.ljust(w) for cell, w in zip(cells, widths))
            self._emit(depth, f"| {padded} |")

    def _doc_string(self, doc_string: DocString, depth: int) -> None:
        delimiter = doc_string.delimiter
        escaped = "".join("\\" + ch for ch in delimiter)
        self._flush_comments(doc_string.location.line, depth)
        self._emit(depth, f"{delimiter}{doc_string.media_type or ''}")
        for line in doc_string.content.split("\n"):
            self._emit(depth, line.replace(delimiter, escaped))
        self._emit(depth, delimiter)


def write(document: GherkinDocument, *, config: EngineConfig | None = None) -> str:
    """Render a document as canonical Gherkin text.

    Args:
        document: Document to render
        config: Engine configuration (defaults when omitted)

    Returns:
        Formatted Gherkin text ending with a newline (empty for an empty document)

    Raises:
        WriteError: If the document violates an invariant, e.g. a ragged table
    """
    config = config or EngineConfig()
    text = _Writer(document, config).write()
    logger.debug(f"Wrote {text.count(chr(10))} lines")
    return text


def format_source(source: str | Source, *, config: EngineConfig | None = None) -> str:
    """Parse then write: normalize Gherkin source formatting.

    Raises:
        GherkinSyntaxError: If the source does not parse
    """
    return write(parse(source, config=config), config=config)
