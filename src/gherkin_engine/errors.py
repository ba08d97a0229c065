"""Exceptions raised by the Gherkin engine."""

from collections.abc import Sequence

from .models import ParseError


class GherkinError(Exception):
    """Base exception for Gherkin engine errors."""


class GherkinSyntaxError(GherkinError):
    """Raised when tokenizing or parsing fails.

    Carries every error found in the pass, ordered by line, so callers
    such as editors and linters get all diagnostics at once.
    """

    def __init__(self, errors: Sequence[ParseError]):
        self.errors: list[ParseError] = sorted(errors, key=lambda e: (e.line, e.column))
        super().__init__(self._render())

    def _render(self) -> str:
        if len(self.errors) == 1:
            return str(self.errors[0])
        lines = [f"{len(self.errors)} parse errors:"]
        lines += [f"  {error}" for error in self.errors]
        return "\n".join(lines)


class WriteError(GherkinError):
    """Raised when a document violates an invariant the writer relies on."""
