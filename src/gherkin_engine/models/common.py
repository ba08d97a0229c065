"""Shared node models: positions, sources, tags, comments and table rows.

Every model here is frozen. Field names are exposed in kebab-case when
dumped by alias (``table-header``, ``media-type``), matching the typed
wire shape of the engine's hosting boundary.
"""

from pydantic import BaseModel, ConfigDict, Field


def _kebab(name: str) -> str:
    return name.replace("_", "-")


class Node(BaseModel):
    """Base class for immutable engine records."""

    model_config = ConfigDict(frozen=True, alias_generator=_kebab, populate_by_name=True)


class Location(Node):
    """A source position.

    Attributes:
        line: 1-based line number (0 for nodes built by hand).
        column: 1-based column, when known.
    """

    line: int = Field(default=0, ge=0, description="1-based line number")
    column: int | None = Field(default=None, ge=1, description="1-based column")


class Source(Node):
    """Gherkin source text with an optional origin URI."""

    uri: str | None = Field(default=None, description="Where the text came from")
    data: str = Field(description="Raw Gherkin text")


def ensure_source(source: "str | Source") -> Source:
    """Wrap bare text in a Source record."""
    if isinstance(source, Source):
        return source
    return Source(data=source)


class Tag(Node):
    """An ``@name`` annotation."""

    location: Location = Field(default_factory=Location)
    name: str = Field(description="Tag name including the leading @")
    id: str = ""


class Comment(Node):
    """A ``#`` comment line, kept in source order on the document."""

    location: Location = Field(default_factory=Location)
    text: str = Field(description="Comment text including the leading #")


class TableCell(Node):
    location: Location = Field(default_factory=Location)
    value: str


class TableRow(Node):
    """One ``| a | b |`` row of a data table or examples table."""

    location: Location = Field(default_factory=Location)
    id: str = ""
    cells: list[TableCell] = Field(default_factory=list)

    @property
    def values(self) -> list[str]:
        """Cell values in column order."""
        return [cell.value for cell in self.cells]
