"""Configuration management for the Gherkin engine."""

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

from .constants import DEFAULT_INDENT, DEFAULT_LANGUAGE, PYPROJECT_TABLE


class WriterConfig(BaseModel):
    """Configuration for canonical text output."""

    indent: int = Field(default=DEFAULT_INDENT, ge=1, description="Spaces per nesting level")


class EngineConfig(BaseModel):
    """Root configuration for tokenize, parse and write."""

    default_language: str = Field(
        default=DEFAULT_LANGUAGE,
        description="Dialect used when a document has no # language: directive",
    )
    writer: WriterConfig = Field(default_factory=WriterConfig)


def load_config(path: Path) -> EngineConfig:
    """Load config from a TOML file.

    A ``pyproject.toml`` contributes its ``[tool.gherkin-engine]`` table;
    any other file is read whole.

    Args:
        path: Path to the TOML file

    Returns:
        Loaded configuration, or defaults if the file doesn't exist
    """
    if not path.exists():
        return EngineConfig()
    with open(path, "rb") as f:
        data = tomllib.load(f)
    if path.name == "pyproject.toml":
        data = data.get("tool", {}).get(PYPROJECT_TABLE, {})
    return EngineConfig.model_validate(data)
