"""Token models produced by the tokenizer.

A token is one classified source line. ``tag`` is the discriminant and
``payload`` carries the kind-specific fields; tags that carry nothing
(``empty``, ``eof``) have no payload.
"""

from enum import Enum
from typing import Any

from pydantic import Field, model_validator

from .common import Node
from .document import KeywordType, ScenarioKind


class TokenTag(str, Enum):
    """Kinds of lexical token."""

    FEATURE_LINE = "feature-line"
    RULE_LINE = "rule-line"
    BACKGROUND_LINE = "background-line"
    SCENARIO_LINE = "scenario-line"
    EXAMPLES_LINE = "examples-line"
    STEP_LINE = "step-line"
    DOC_STRING_SEPARATOR = "doc-string-separator"
    TABLE_ROW = "token-table-row"
    TAG_LINE = "tag-line"
    COMMENT_LINE = "comment-line"
    LANGUAGE = "language"
    EMPTY = "empty"
    OTHER = "other"
    EOF = "eof"


class KeywordLine(Node):
    """Header line of a Feature, Rule, Background or Examples block."""

    keyword: str
    name: str = ""


class ScenarioLine(Node):
    keyword: str
    name: str = ""
    kind: ScenarioKind = ScenarioKind.SCENARIO


class StepLine(Node):
    keyword: str
    keyword_type: KeywordType = KeywordType.UNKNOWN
    text: str = ""


class DocStringSeparator(Node):
    delimiter: str
    media_type: str | None = None


class TableRowLine(Node):
    """Trimmed, unescaped cell values with the 1-based column of each cell."""

    cells: list[str] = Field(default_factory=list)
    columns: list[int] = Field(default_factory=list)


class TagLine(Node):
    tags: list[str] = Field(default_factory=list)
    columns: list[int] = Field(default_factory=list)


class TextLine(Node):
    """Comment text, free text, or one verbatim doc string content line."""

    text: str = ""


class LanguageLine(Node):
    language: str


TokenPayload = (
    ScenarioLine
    | StepLine
    | KeywordLine
    | DocStringSeparator
    | TableRowLine
    | TagLine
    | LanguageLine
    | TextLine
)

PAYLOAD_TYPES: dict[TokenTag, type[Node] | None] = {
    TokenTag.FEATURE_LINE: KeywordLine,
    TokenTag.RULE_LINE: KeywordLine,
    TokenTag.BACKGROUND_LINE: KeywordLine,
    TokenTag.EXAMPLES_LINE: KeywordLine,
    TokenTag.SCENARIO_LINE: ScenarioLine,
    TokenTag.STEP_LINE: StepLine,
    TokenTag.DOC_STRING_SEPARATOR: DocStringSeparator,
    TokenTag.TABLE_ROW: TableRowLine,
    TokenTag.TAG_LINE: TagLine,
    TokenTag.COMMENT_LINE: TextLine,
    TokenTag.OTHER: TextLine,
    TokenTag.LANGUAGE: LanguageLine,
    TokenTag.EMPTY: None,
    TokenTag.EOF: None,
}


class Token(Node):
    """One lexical unit with the line it came from.

    Attributes:
        tag: Token kind.
        line: 1-based source line.
        column: 1-based column of the first non-blank character.
        payload: Kind-specific fields (see PAYLOAD_TYPES).
    """

    tag: TokenTag
    line: int = Field(ge=1)
    column: int | None = Field(default=None, ge=1)
    payload: TokenPayload | None = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_payload(cls, data: Any) -> Any:
        # Plain dicts (from JSON) are validated against the type the tag implies
        if isinstance(data, dict) and isinstance(data.get("payload"), dict):
            expected = PAYLOAD_TYPES.get(TokenTag(data.get("tag")))
            if expected is not None:
                data = {**data, "payload": expected.model_validate(data["payload"])}
        return data

    @model_validator(mode="after")
    def _payload_matches_tag(self) -> "Token":
        expected = PAYLOAD_TYPES[self.tag]
        if expected is None:
            if self.payload is not None:
                raise ValueError(f"{self.tag.value} tokens carry no payload")
        elif not isinstance(self.payload, expected):
            raise ValueError(f"{self.tag.value} tokens need a {expected.__name__} payload")
        return self
