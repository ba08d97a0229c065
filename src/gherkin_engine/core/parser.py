"""Structural parser assembling tokens into a Gherkin document.

The parser walks the token list once. Each construct (Feature, Rule,
Background, Scenario, Examples) is read by its own method, which stops at
the first token belonging to an enclosing scope; the method that is running
is the parser's current state. A token that is illegal where it appears
produces one ParseError, after which the parser skips ahead to the next line
opening a recognized construct. Errors accumulate across the whole document.
"""

import itertools
import logging
import textwrap

from ..config import EngineConfig
from ..errors import GherkinSyntaxError
from ..models import (
    Background,
    BackgroundNode,
    Comment,
    DataTable,
    DataTableArgument,
    DocString,
    DocStringArgument,
    Examples,
    Feature,
    FeatureChild,
    GherkinDocument,
    Location,
    ParseError,
    Rule,
    RuleNode,
    Scenario,
    ScenarioKind,
    ScenarioNode,
    Source,
    Step,
    StepArgument,
    TableCell,
    TableRow,
    Tag,
    Token,
    TokenTag,
    ensure_source,
)
from .tokenizer import scan

logger = logging.getLogger(__name__)

# Headers that close any open Background or Scenario
BLOCK_END = frozenset(
    {
        TokenTag.FEATURE_LINE,
        TokenTag.RULE_LINE,
        TokenTag.BACKGROUND_LINE,
        TokenTag.SCENARIO_LINE,
    }
)

# Lines error recovery may resume at
RESYNC = BLOCK_END | {TokenTag.EXAMPLES_LINE, TokenTag.STEP_LINE, TokenTag.TAG_LINE}

# Tokens the cursor steps over without the grammar seeing them
_TRANSPARENT = frozenset({TokenTag.COMMENT_LINE, TokenTag.LANGUAGE})

CONSTRUCT_NAMES = {
    TokenTag.FEATURE_LINE: "Feature",
    TokenTag.RULE_LINE: "Rule",
    TokenTag.BACKGROUND_LINE: "Background",
    TokenTag.SCENARIO_LINE: "Scenario",
    TokenTag.EXAMPLES_LINE: "Examples",
    TokenTag.STEP_LINE: "Step",
    TokenTag.DOC_STRING_SEPARATOR: "Doc string",
    TokenTag.TABLE_ROW: "Table row",
    TokenTag.TAG_LINE: "Tags",
}

DANGLING_TAGS = "Tags must precede a Feature, Rule, Scenario, Scenario Outline or Examples"


def _location(token: Token) -> Location:
    return Location(line=token.line, column=token.column)


class _Parser:
    """Cursor over one token list plus the errors and comments it collects."""

    def __init__(self, tokens: list[Token], language: str):
        self.tokens = tokens
        self.language = language
        self.pos = 0
        self.errors: list[ParseError] = []
        self.comments: list[Comment] = []
        self._ids = itertools.count()

    # --- cursor ---

    def _next_id(self) -> str:
        return str(next(self._ids))

    def _peek(self) -> Token | None:
        """Return the next grammar token, collecting comments on the way."""
        while self.pos < len(self.tokens):
            token = self.tokens[self.pos]
            if token.tag is TokenTag.COMMENT_LINE:
                self.comments.append(Comment(location=_location(token), text=token.payload.text))
            elif token.tag not in _TRANSPARENT:
                return token
            self.pos += 1
        return None

    def _advance(self) -> Token:
        token = self._peek()
        if token is None:
            raise IndexError("advance past end of token stream")
        self.pos += 1
        return token

    def _tagged_construct(self) -> TokenTag | None:
        """Kind of the first token after the tag lines at the cursor."""
        for token in itertools.islice(self.tokens, self.pos, None):
            if token.tag is not TokenTag.TAG_LINE and token.tag not in _TRANSPARENT:
                return token.tag
        return None

    # --- errors ---

    def _error(self, token: Token, message: str, column: int | None = None) -> None:
        self.errors.append(
            ParseError(message=message, line=token.line, column=column or token.column or 1)
        )

    def _unexpected(self, token: Token, hint: str = "") -> None:
        """Report the token at the cursor and skip to the next construct boundary.

        Everything up to the next header, step or tag line is skipped without
        further reports, so adjacent stray lines (or a whole orphan table or
        doc string) produce a single error at the first of them.
        """
        if token.tag is TokenTag.OTHER:
            message = f"Unexpected text {token.payload.text.strip()!r}"
        elif token.tag is TokenTag.STEP_LINE:
            message = f"Step not allowed here: '{token.payload.keyword}{token.payload.text}'"
        else:
            message = f"{CONSTRUCT_NAMES[token.tag]} not allowed here"
        if hint:
            message = f"{message}: {hint}"
        self._error(token, message)
        self.pos += 1
        while (nxt := self._peek()) is not None and nxt.tag not in RESYNC:
            self.pos += 1

    def _opens_next_block(self) -> bool:
        """Handle a tag line met inside a Background or Scenario.

        Returns True when the tags belong to a header that closes the block.
        Otherwise the tags are consumed and reported once, at the first tag
        line, and the block keeps reading.
        """
        if self._tagged_construct() in BLOCK_END:
            return True
        _, first = self._tags()
        nxt = self._peek()
        # Tagged Examples in a Background is reported as the Examples line
        if first is not None and (nxt is None or nxt.tag is not TokenTag.EXAMPLES_LINE):
            self._error(first, DANGLING_TAGS)
        return False

    # --- shared pieces ---

    def _tags(self) -> tuple[list[Tag], Token | None]:
        tags: list[Tag] = []
        first: Token | None = None
        while (token := self._peek()) is not None and token.tag is TokenTag.TAG_LINE:
            self.pos += 1
            first = first or token
            for name, column in zip(token.payload.tags, token.payload.columns):
                if not name.startswith("@"):
                    self._error(token, f"A tag may not contain whitespace: {name!r}", column=column)
                    continue
                tags.append(
                    Tag(location=Location(line=token.line, column=column), name=name, id=self._next_id())
                )
        return tags, first

    def _description(self) -> str:
        """Free-text lines after a header, common indentation removed."""
        lines: list[str] = []
        previous: int | None = None
        comments_from = len(self.comments)
        while (token := self._peek()) is not None and token.tag is TokenTag.OTHER:
            self.pos += 1
            if previous is not None:
                interleaved = sum(
                    1
                    for comment in self.comments[comments_from:]
                    if previous < comment.location.line < token.line
                )
                lines.extend([""] * (token.line - previous - 1 - interleaved))
            lines.append(token.payload.text)
            previous = token.line
        return textwrap.dedent("\n".join(lines))

    def _table_rows(self) -> list[TableRow]:
        rows: list[TableRow] = []
        while (token := self._peek()) is not None and token.tag is TokenTag.TABLE_ROW:
            self.pos += 1
            cells = [
                TableCell(location=Location(line=token.line, column=column), value=value)
                for value, column in zip(token.payload.cells, token.payload.columns)
            ]
            rows.append(TableRow(location=_location(token), id=self._next_id(), cells=cells))
        return rows

    def _doc_string(self) -> DocString:
        opening = self._advance()
        lines: list[str] = []
        # The tokenizer guarantees a closing separator
        while self.pos < len(self.tokens):
            token = self.tokens[self.pos]
            self.pos += 1
            if token.tag is TokenTag.DOC_STRING_SEPARATOR:
                break
            lines.append(token.payload.text)
        return DocString(
            location=_location(opening),
            media_type=opening.payload.media_type,
            content="\n".join(lines),
            delimiter=opening.payload.delimiter,
        )

    def _step(self) -> Step:
        token = self._advance()
        argument: StepArgument | None = None
        nxt = self._peek()
        if nxt is not None and nxt.tag is TokenTag.TABLE_ROW:
            argument = DataTableArgument(
                payload=DataTable(location=_location(nxt), rows=self._table_rows())
            )
        elif nxt is not None and nxt.tag is TokenTag.DOC_STRING_SEPARATOR:
            argument = DocStringArgument(payload=self._doc_string())
        return Step(
            location=_location(token),
            keyword=token.payload.keyword,
            keyword_type=token.payload.keyword_type,
            text=token.payload.text,
            id=self._next_id(),
            argument=argument,
        )

    # --- constructs ---

    def document(self) -> Feature | None:
        feature: Feature | None = None
        while self._peek() is not None:
            tags, tag_token = self._tags()
            token = self._peek()
            if token is None:
                if tag_token is not None:
                    self._error(tag_token, DANGLING_TAGS)
                break
            if token.tag is TokenTag.FEATURE_LINE:
                parsed = self._feature(tags)
                if feature is None:
                    feature = parsed
                else:
                    self._error(token, "Feature not allowed here: a document holds a single Feature")
            else:
                self._unexpected(token)
        return feature

    def _feature(self, tags: list[Tag]) -> Feature:
        token = self._advance()
        description = self._description()
        children = self._children(in_rule=False)
        return Feature(
            location=_location(token),
            tags=tags,
            language=self.language,
            keyword=token.payload.keyword,
            name=token.payload.name,
            description=description,
            children=children,
        )

    def _children(self, in_rule: bool) -> list[FeatureChild]:
        """Read the Background/Scenario/Rule children of a Feature or Rule."""
        children: list[FeatureChild] = []
        has_background = False
        has_scenario = False
        stop = {TokenTag.FEATURE_LINE, TokenTag.RULE_LINE} if in_rule else {TokenTag.FEATURE_LINE}

        while (token := self._peek()) is not None:
            if token.tag in stop or (
                token.tag is TokenTag.TAG_LINE and self._tagged_construct() in stop
            ):
                break
            tags, tag_token = self._tags()
            token = self._peek()
            if token is None:
                if tag_token is not None:
                    self._error(tag_token, DANGLING_TAGS)
                break

            if token.tag is TokenTag.SCENARIO_LINE:
                children.append(ScenarioNode(payload=self._scenario(tags)))
                has_scenario = True
            elif token.tag is TokenTag.RULE_LINE:
                children.append(RuleNode(payload=self._rule(tags)))
                has_scenario = True
            elif token.tag is TokenTag.BACKGROUND_LINE:
                if tag_token is not None:
                    self._error(tag_token, "Tags are not allowed on a Background")
                background = self._background()
                if has_background:
                    self._error(token, "duplicate Background")
                elif has_scenario:
                    self._error(token, "Background must precede Scenarios and Rules")
                else:
                    children.append(BackgroundNode(payload=background))
                    has_background = True
            else:
                self._unexpected(token)
        return children

    def _rule(self, tags: list[Tag]) -> Rule:
        token = self._advance()
        description = self._description()
        children = self._children(in_rule=True)
        return Rule(
            location=_location(token),
            tags=tags,
            keyword=token.payload.keyword,
            name=token.payload.name,
            description=description,
            id=self._next_id(),
            children=children,
        )

    def _background(self) -> Background:
        token = self._advance()
        description = self._description()
        steps: list[Step] = []
        while (nxt := self._peek()) is not None:
            if nxt.tag is TokenTag.STEP_LINE:
                steps.append(self._step())
            elif nxt.tag in BLOCK_END:
                break
            elif nxt.tag is TokenTag.TAG_LINE:
                if self._opens_next_block():
                    break
            else:
                self._unexpected(nxt)
        return Background(
            location=_location(token),
            keyword=token.payload.keyword,
            name=token.payload.name,
            description=description,
            id=self._next_id(),
            steps=steps,
        )

    def _scenario(self, tags: list[Tag]) -> Scenario:
        token = self._advance()
        outline = token.payload.kind is ScenarioKind.SCENARIO_OUTLINE
        description = self._description()
        steps: list[Step] = []
        examples: list[Examples] = []

        while (nxt := self._peek()) is not None:
            if nxt.tag is TokenTag.STEP_LINE:
                step = self._step()
                if examples:
                    self._error(nxt, "Steps are not allowed after Examples")
                else:
                    steps.append(step)
            elif nxt.tag is TokenTag.EXAMPLES_LINE or (
                nxt.tag is TokenTag.TAG_LINE
                and self._tagged_construct() is TokenTag.EXAMPLES_LINE
            ):
                examples_tags, _ = self._tags()
                examples_token = self._examples_token()
                if outline:
                    examples.append(self._examples(examples_tags))
                else:
                    self._unexpected(examples_token, "only a Scenario Outline takes Examples")
            elif nxt.tag in BLOCK_END:
                break
            elif nxt.tag is TokenTag.TAG_LINE:
                if self._opens_next_block():
                    break
            else:
                self._unexpected(nxt)

        return Scenario(
            location=_location(token),
            tags=tags,
            kind=token.payload.kind,
            keyword=token.payload.keyword,
            name=token.payload.name,
            description=description,
            id=self._next_id(),
            steps=steps,
            examples=examples,
        )

    def _examples_token(self) -> Token:
        token = self._peek()
        if token is None or token.tag is not TokenTag.EXAMPLES_LINE:
            raise IndexError("expected an Examples line at the cursor")
        return token

    def _examples(self, tags: list[Tag]) -> Examples:
        token = self._advance()
        description = self._description()
        rows = self._table_rows()
        return Examples(
            location=_location(token),
            tags=tags,
            keyword=token.payload.keyword,
            name=token.payload.name,
            description=description,
            id=self._next_id(),
            table_header=rows[0] if rows else None,
            table_body=rows[1:],
        )


def parse(source: str | Source, *, config: EngineConfig | None = None) -> GherkinDocument:
    """Parse Gherkin source into a typed document.

    Args:
        source: Gherkin text or Source record
        config: Engine configuration (defaults when omitted)

    Returns:
        The parsed document

    Raises:
        GherkinSyntaxError: With every lexical error, or else every
            structural error, found in the pass
    """
    config = config or EngineConfig()
    source = ensure_source(source)
    scanned = scan(source.data, config.default_language)
    if scanned.errors:
        raise GherkinSyntaxError(scanned.errors)

    parser = _Parser(scanned.tokens, language=scanned.dialect.code)
    feature = parser.document()
    if parser.errors:
        raise GherkinSyntaxError(parser.errors)

    logger.debug(
        f"Parsed {source.uri or '<string>'}: "
        f"{len(feature.children) if feature else 0} children, {len(parser.comments)} comments"
    )
    return GherkinDocument(source=source, feature=feature, comments=parser.comments)
