"""Error record shared by the tokenizer and the parser."""

from pydantic import Field

from .common import Node


class ParseError(Node):
    """One recoverable tokenize or parse failure.

    Attributes:
        message: Human-readable description.
        line: 1-based line of the offending construct.
        column: 1-based column of the offending construct.
    """

    message: str
    line: int = Field(ge=1)
    column: int = Field(default=1, ge=1)

    def __str__(self) -> str:
        return f"({self.line}:{self.column}): {self.message}"
