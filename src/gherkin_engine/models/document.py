"""Document tree models produced by the parser.

Ownership is tree-shaped: a Feature owns its children, a Scenario owns its
steps and examples. The document's comment list is the only collection that
sits outside the feature tree.

Variant-shaped values (feature children, rule children, step arguments) are
closed tagged unions: each variant is a ``{tag, payload}`` record and the
union is discriminated on ``tag``.
"""

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import Field

from ..constants import DEFAULT_LANGUAGE
from .common import Comment, Location, Node, Source, TableRow, Tag

# Keys that carry source positions rather than document structure
POSITIONAL_KEYS = frozenset({"location", "id", "source"})


class ScenarioKind(str, Enum):
    """Distinguishes Scenario from Scenario Outline."""

    SCENARIO = "scenario"
    SCENARIO_OUTLINE = "scenario-outline"


class KeywordType(str, Enum):
    """Semantic class of a step keyword."""

    CONTEXT = "context"
    ACTION = "action"
    OUTCOME = "outcome"
    CONJUNCTION = "conjunction"
    UNKNOWN = "unknown"


class DataTable(Node):
    """Tabular step argument. All rows have the same number of cells."""

    location: Location = Field(default_factory=Location)
    rows: list[TableRow] = Field(default_factory=list)


class DocString(Node):
    """Multi-line step argument. Content excludes the delimiter lines."""

    location: Location = Field(default_factory=Location)
    media_type: str | None = None
    content: str = ""
    delimiter: str = '"""'


class DataTableArgument(Node):
    tag: Literal["data-table"] = "data-table"
    payload: DataTable


class DocStringArgument(Node):
    tag: Literal["doc-string"] = "doc-string"
    payload: DocString


StepArgument = Annotated[DataTableArgument | DocStringArgument, Field(discriminator="tag")]


class Step(Node):
    """A single Given/When/Then/And/But line.

    Attributes:
        keyword: Keyword as written, including any trailing space ("Given ").
        keyword_type: Semantic class derived from the dialect.
        text: Step text after the keyword.
        argument: Optional data table or doc string.
    """

    location: Location = Field(default_factory=Location)
    keyword: str
    keyword_type: KeywordType = KeywordType.UNKNOWN
    text: str
    id: str = ""
    argument: StepArgument | None = None


class Examples(Node):
    """An Examples block of a Scenario Outline.

    The header may be absent (no table at all) and the body may be empty
    (header-only block); both are legal.
    """

    location: Location = Field(default_factory=Location)
    tags: list[Tag] = Field(default_factory=list)
    keyword: str = "Examples"
    name: str = ""
    description: str = ""
    id: str = ""
    table_header: TableRow | None = None
    table_body: list[TableRow] = Field(default_factory=list)


class Background(Node):
    location: Location = Field(default_factory=Location)
    keyword: str = "Background"
    name: str = ""
    description: str = ""
    id: str = ""
    steps: list[Step] = Field(default_factory=list)


class Scenario(Node):
    """A Scenario or Scenario Outline.

    ``examples`` is empty for a plain scenario. An outline with no examples
    is unusual but structurally legal.
    """

    location: Location = Field(default_factory=Location)
    tags: list[Tag] = Field(default_factory=list)
    kind: ScenarioKind = ScenarioKind.SCENARIO
    keyword: str = "Scenario"
    name: str = ""
    description: str = ""
    id: str = ""
    steps: list[Step] = Field(default_factory=list)
    examples: list[Examples] = Field(default_factory=list)


class BackgroundNode(Node):
    tag: Literal["background"] = "background"
    payload: Background


class ScenarioNode(Node):
    tag: Literal["scenario"] = "scenario"
    payload: Scenario


RuleChild = Annotated[BackgroundNode | ScenarioNode, Field(discriminator="tag")]


class Rule(Node):
    """A named grouping of an optional Background followed by Scenarios."""

    location: Location = Field(default_factory=Location)
    tags: list[Tag] = Field(default_factory=list)
    keyword: str = "Rule"
    name: str = ""
    description: str = ""
    id: str = ""
    children: list[RuleChild] = Field(default_factory=list)


class RuleNode(Node):
    tag: Literal["rule"] = "rule"
    payload: Rule


FeatureChild = Annotated[
    BackgroundNode | ScenarioNode | RuleNode, Field(discriminator="tag")
]


class Feature(Node):
    """One Feature block.

    ``children`` holds at most one Background, first, followed by any mix
    of Scenarios and Rules in source order.
    """

    location: Location = Field(default_factory=Location)
    tags: list[Tag] = Field(default_factory=list)
    language: str = DEFAULT_LANGUAGE
    keyword: str = "Feature"
    name: str = ""
    description: str = ""
    children: list[FeatureChild] = Field(default_factory=list)


class GherkinDocument(Node):
    """Top-level parse result.

    ``feature`` is None only when the source has no Feature header.
    """

    source: Source | None = None
    feature: Feature | None = None
    comments: list[Comment] = Field(default_factory=list)

    def structure(self) -> dict[str, Any]:
        """Return the document dump without source positions.

        Two documents describing the same Gherkin compare equal here even
        when their formatting (and therefore their locations) differs.
        """
        return _strip_positions(self.model_dump(mode="json", by_alias=True))


def _strip_positions(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _strip_positions(v) for k, v in value.items() if k not in POSITIONAL_KEYS}
    if isinstance(value, list):
        return [_strip_positions(item) for item in value]
    return value
