"""Diagnostic output for editor and linter hosts."""

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from rich.console import Console
from rich.markup import escape

from .errors import GherkinSyntaxError
from .models import ParseError


@dataclass
class DiagnosticsReporter:
    """Render parse errors to a console, as text or as JSON."""

    console: Console
    json_mode: bool = False

    def as_data(self, errors: Sequence[ParseError], uri: str | None = None) -> dict[str, Any]:
        """Build the JSON payload for an error list."""
        return {
            "uri": uri,
            "count": len(errors),
            "errors": [error.model_dump(mode="json") for error in errors],
        }

    def report(self, errors: Sequence[ParseError], uri: str | None = None) -> None:
        """Print every error, ordered by position."""
        ordered = sorted(errors, key=lambda e: (e.line, e.column))
        if self.json_mode:
            self.console.print_json(json.dumps(self.as_data(ordered, uri)))
            return
        where = escape(uri or "<string>")
        for error in ordered:
            self.console.print(
                f"[bold]{where}:{error.line}:{error.column}[/bold] [red]error[/red] "
                f"{escape(error.message)}"
            )
        if ordered:
            noun = "error" if len(ordered) == 1 else "errors"
            self.console.print(f"[red]{len(ordered)} {noun}[/red]")

    def report_exception(self, exc: GherkinSyntaxError, uri: str | None = None) -> None:
        """Print the errors carried by a GherkinSyntaxError."""
        self.report(exc.errors, uri)
