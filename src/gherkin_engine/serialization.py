"""JSON adapters for documents and tokens.

The typed form is the models' own pydantic dump (kebab-case keys, variants
as ``{"tag", "payload"}`` objects) and round-trips through ``from_json``.

The legacy form is output only. It renders every variant as a two-element
``[tag, payload]`` array and every record as an object whose ``type`` key
names the node kind, the shape older consumers of the engine read.
"""

import json
from typing import Any

from pydantic import BaseModel

from .models import GherkinDocument, Token


def to_json(document: GherkinDocument, indent: int | None = None) -> str:
    """Serialize a document to typed JSON."""
    return document.model_dump_json(by_alias=True, indent=indent)


def from_json(text: str | bytes) -> GherkinDocument:
    """Load a document from typed JSON.

    Raises:
        pydantic.ValidationError: If the JSON does not describe a document
    """
    return GherkinDocument.model_validate_json(text)


def tokens_to_json(tokens: list[Token], indent: int | None = None) -> str:
    """Serialize a token list to typed JSON."""
    return json.dumps(
        [token.model_dump(mode="json", by_alias=True, exclude_none=True) for token in tokens],
        indent=indent,
    )


def _is_variant(model: BaseModel) -> bool:
    return set(type(model).model_fields) == {"tag", "payload"}


def _legacy(value: Any) -> Any:
    if isinstance(value, Token):
        return [
            value.tag.value,
            {"line": value.line, "column": value.column, "payload": _legacy(value.payload)},
        ]
    if isinstance(value, BaseModel):
        if _is_variant(value):
            tag = getattr(value.tag, "value", value.tag)
            return [tag, _legacy(value.payload)]
        record: dict[str, Any] = {"type": type(value).__name__}
        for name in type(value).model_fields:
            record[name] = _legacy(getattr(value, name))
        return record
    if isinstance(value, list):
        return [_legacy(item) for item in value]
    if isinstance(value, dict):
        return {key: _legacy(item) for key, item in value.items()}
    # str-valued enums (ScenarioKind, KeywordType, TokenTag)
    return getattr(value, "value", value)


def to_legacy_dict(document: GherkinDocument | list[Token]) -> Any:
    """Convert a document (or token list) to the legacy untyped shape."""
    return _legacy(document)


def to_legacy_json(document: GherkinDocument | list[Token], indent: int | None = None) -> str:
    """Serialize a document (or token list) to legacy untyped JSON."""
    return json.dumps(to_legacy_dict(document), indent=indent, ensure_ascii=False)
