"""Tests for the line tokenizer."""

import pytest

from gherkin_engine import GherkinSyntaxError, tokenize
from gherkin_engine.core.tokenizer import scan, split_cells
from gherkin_engine.models import KeywordType, ScenarioKind, Source, TokenTag


def tags_of(source: str) -> list[TokenTag]:
    return [token.tag for token in tokenize(source)]


class TestTokenizeLogin:
    """Tests for the canonical one-scenario feature."""

    def test_token_sequence(self, login_source: str) -> None:
        """Feature, Scenario and three steps, in source order."""
        assert tags_of(login_source) == [
            TokenTag.FEATURE_LINE,
            TokenTag.SCENARIO_LINE,
            TokenTag.STEP_LINE,
            TokenTag.STEP_LINE,
            TokenTag.STEP_LINE,
        ]

    def test_positions(self, login_source: str) -> None:
        """Lines are 1-based and columns point at the first non-blank character."""
        tokens = tokenize(login_source)
        assert [(t.line, t.column) for t in tokens] == [(1, 1), (2, 3), (3, 5), (4, 5), (5, 5)]

    def test_payloads(self, login_source: str) -> None:
        tokens = tokenize(login_source)
        assert tokens[0].payload.keyword == "Feature"
        assert tokens[0].payload.name == "Login"
        assert tokens[1].payload.kind is ScenarioKind.SCENARIO
        assert tokens[2].payload.keyword == "Given "
        assert tokens[2].payload.keyword_type is KeywordType.CONTEXT
        assert tokens[4].payload.text == "they see the dashboard"

    def test_accepts_source_record(self, login_source: str) -> None:
        tokens = tokenize(Source(uri="login.feature", data=login_source))
        assert len(tokens) == 5

    def test_crlf_line_endings(self, login_source: str) -> None:
        """Windows line endings tokenize the same way."""
        crlf = login_source.replace("\n", "\r\n")
        assert tokenize(crlf) == tokenize(login_source)


class TestLineClassification:
    """Tests for individual line kinds."""

    def test_blank_lines_are_suppressed(self) -> None:
        assert tags_of("\n\nFeature: F\n\n   \n") == [TokenTag.FEATURE_LINE]

    def test_comment(self) -> None:
        tokens = tokenize("Feature: F\n  # note to self\n")
        assert tokens[1].tag is TokenTag.COMMENT_LINE
        assert tokens[1].payload.text == "# note to self"

    def test_language_directive(self) -> None:
        tokens = tokenize("# language: fr\nFonctionnalité: F\n")
        assert tokens[0].tag is TokenTag.LANGUAGE
        assert tokens[0].payload.language == "fr"
        assert tokens[1].tag is TokenTag.FEATURE_LINE

    def test_language_directive_only_on_first_line(self) -> None:
        """A later directive is an ordinary comment and does not switch dialect."""
        tokens = tokenize("Feature: F\n# language: fr\n  Scénario: S\n")
        assert tokens[1].tag is TokenTag.COMMENT_LINE
        assert tokens[2].tag is TokenTag.OTHER

    def test_unknown_language_falls_back(self) -> None:
        """Keyword matching continues in English after an unknown tag."""
        tokens = tokenize("# language: zz\nFeature: F\n")
        assert tokens[0].payload.language == "zz"
        assert tokens[1].tag is TokenTag.FEATURE_LINE

    def test_outline_kind(self) -> None:
        tokens = tokenize("Scenario Outline: O\nScenario Template: T\n")
        assert [t.payload.kind for t in tokens] == [ScenarioKind.SCENARIO_OUTLINE] * 2

    def test_other_keeps_indentation(self) -> None:
        tokens = tokenize("Feature: F\n    free text  \n")
        assert tokens[1].tag is TokenTag.OTHER
        assert tokens[1].payload.text == "    free text"

    def test_tag_line(self) -> None:
        tokens = tokenize("  @a @b-c\n")
        assert tokens[0].tag is TokenTag.TAG_LINE
        assert tokens[0].payload.tags == ["@a", "@b-c"]
        assert tokens[0].payload.columns == [3, 6]

    def test_byte_order_mark_is_ignored(self) -> None:
        tokens = tokenize("\ufeffFeature: F\n")
        assert tokens[0].tag is TokenTag.FEATURE_LINE
        assert tokens[0].column == 1
        assert tokens[0].payload.name == "F"

    def test_tag_line_trailing_comment(self) -> None:
        """A ' #' ends the tags on a line."""
        tokens = tokenize("@a @b #not a tag\n")
        assert tokens[0].payload.tags == ["@a", "@b"]


class TestTableRows:
    """Tests for table row splitting and validation."""

    def test_cells_are_trimmed(self) -> None:
        tokens = tokenize("| a |  b  |c|\n")
        assert tokens[0].tag is TokenTag.TABLE_ROW
        assert tokens[0].payload.cells == ["a", "b", "c"]

    def test_cell_columns(self) -> None:
        cells, columns, closed = split_cells("| a |  b  |", 5)
        assert cells == ["a", "b"]
        assert columns == [7, 12]
        assert closed

    def test_escapes(self) -> None:
        cells, _, _ = split_cells(r"| a \| b | back\\slash | two\nlines | \x |", 1)
        assert cells == ["a | b", "back\\slash", "two\nlines", "\\x"]

    def test_empty_cells(self) -> None:
        cells, _, closed = split_cells("|  |  |", 1)
        assert cells == ["", ""]
        assert closed

    def test_unclosed_row_is_malformed(self) -> None:
        with pytest.raises(GherkinSyntaxError) as exc_info:
            tokenize("Feature: F\n  | a | b\n")
        errors = exc_info.value.errors
        assert len(errors) == 1
        assert errors[0].line == 2
        assert "Malformed table row" in errors[0].message

    def test_escaped_final_pipe_is_malformed(self) -> None:
        _, _, closed = split_cells(r"| a \|", 1)
        assert not closed

    def test_ragged_row_cites_its_line(self) -> None:
        """Each row deviating from the first row's width is reported at its own line."""
        source = "Feature: F\n  Scenario: S\n    Given t\n      | a | b |\n      | c |\n      | d | e |\n"
        with pytest.raises(GherkinSyntaxError) as exc_info:
            tokenize(source)
        errors = exc_info.value.errors
        assert [e.line for e in errors] == [5]
        assert "line 4" in errors[0].message

    def test_uniform_table_has_no_errors(self) -> None:
        source = "| a | b |\n| c | d |\n| e | f |\n"
        assert tags_of(source) == [TokenTag.TABLE_ROW] * 3

    def test_comment_does_not_split_table(self) -> None:
        """A comment between rows keeps the width check running."""
        result = scan("| a | b |\n# hi\n| c |\n")
        assert [e.line for e in result.errors] == [3]

    def test_step_line_starts_a_new_table(self) -> None:
        result = scan("| a | b |\nGiven x\n| c |\n")
        assert result.errors == []


class TestDocStrings:
    """Tests for doc string scanning."""

    def test_content_becomes_other_tokens(self) -> None:
        source = 'Given x\n  """\n  line one\n\n  # not a comment\n  """\n'
        tokens = tokenize(source)
        assert [t.tag for t in tokens] == [
            TokenTag.STEP_LINE,
            TokenTag.DOC_STRING_SEPARATOR,
            TokenTag.OTHER,
            TokenTag.OTHER,
            TokenTag.OTHER,
            TokenTag.DOC_STRING_SEPARATOR,
        ]
        assert [t.payload.text for t in tokens[2:5]] == ["line one", "", "# not a comment"]

    def test_media_type(self) -> None:
        tokens = tokenize('```json\n{}\n```\n')
        assert tokens[0].payload.delimiter == "```"
        assert tokens[0].payload.media_type == "json"

    def test_indentation_is_relative_to_delimiter(self) -> None:
        tokens = tokenize('    """\n      nested\n  shallow\n    """\n')
        assert tokens[1].payload.text == "  nested"
        assert tokens[2].payload.text == "shallow"

    def test_escaped_delimiter(self) -> None:
        tokens = tokenize('"""\n\\"\\"\\"\n"""\n')
        assert tokens[1].payload.text == '"""'

    def test_other_delimiter_does_not_close(self) -> None:
        tokens = tokenize('"""\n```\n"""\n')
        assert tokens[1].tag is TokenTag.OTHER
        assert tokens[1].payload.text == "```"

    def test_unterminated_doc_string(self) -> None:
        """The error points at the opening delimiter."""
        with pytest.raises(GherkinSyntaxError) as exc_info:
            tokenize('Feature: F\n  Scenario: S\n    Given x\n      """\n      text\n')
        errors = exc_info.value.errors
        assert len(errors) == 1
        assert errors[0].line == 4
        assert errors[0].column == 7
        assert "Unterminated doc string" in errors[0].message


class TestScan:
    """Tests for the error-collecting scan."""

    def test_collects_every_lexical_error(self) -> None:
        result = scan('| a\n| b\n"""\n')
        assert [e.line for e in result.errors] == [1, 2, 3]

    def test_reports_dialect(self) -> None:
        result = scan("# language: de\nFunktionalität: F\n")
        assert result.dialect.code == "de"

    def test_default_language(self) -> None:
        result = scan("Fonctionnalité: F\n", default_language="fr")
        assert result.tokens[0].tag is TokenTag.FEATURE_LINE
