"""Pydantic data models for the Gherkin engine.

This package defines the records exchanged by the engine's operations:
- Document tree (GherkinDocument, Feature, Rule, Background, Scenario, ...)
- Lexical tokens (Token, TokenTag and the per-tag payloads)
- Error records (ParseError)

All models are frozen Pydantic BaseModel subclasses, enabling:
- Immutability once the parser has built them
- Typed JSON serialization/deserialization
- Tagged-union validation for variant-shaped fields

Example:
    >>> from gherkin_engine.models import Step
    >>> step = Step(keyword="Given ", text="a user")
    >>> step.model_dump_json(by_alias=True)
"""

from .common import Comment, Location, Node, Source, TableCell, TableRow, Tag, ensure_source
from .document import (
    Background,
    BackgroundNode,
    DataTable,
    DataTableArgument,
    DocString,
    DocStringArgument,
    Examples,
    Feature,
    FeatureChild,
    GherkinDocument,
    KeywordType,
    Rule,
    RuleChild,
    RuleNode,
    Scenario,
    ScenarioKind,
    ScenarioNode,
    Step,
    StepArgument,
)
from .parse_error import ParseError
from .token import (
    DocStringSeparator,
    KeywordLine,
    LanguageLine,
    ScenarioLine,
    StepLine,
    TableRowLine,
    TagLine,
    TextLine,
    Token,
    TokenTag,
)

__all__ = [
    "Background",
    "BackgroundNode",
    "Comment",
    "DataTable",
    "DataTableArgument",
    "DocString",
    "DocStringArgument",
    "DocStringSeparator",
    "Examples",
    "Feature",
    "FeatureChild",
    "GherkinDocument",
    "KeywordLine",
    "KeywordType",
    "LanguageLine",
    "Location",
    "Node",
    "ParseError",
    "Rule",
    "RuleChild",
    "RuleNode",
    "Scenario",
    "ScenarioKind",
    "ScenarioLine",
    "ScenarioNode",
    "Source",
    "Step",
    "StepArgument",
    "StepLine",
    "TableCell",
    "TableRow",
    "TableRowLine",
    "Tag",
    "TagLine",
    "TextLine",
    "Token",
    "TokenTag",
    "ensure_source",
]
