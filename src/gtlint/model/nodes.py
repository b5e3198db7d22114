# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Abstract syntax tree for GuidedTrack programs.

Every node carries a ``kind`` discriminator and a ``loc`` source range. Nodes
are frozen once built by the parser; the linter and other consumers only read
them.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Annotated
from typing import Literal as _Literal

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class Position(BaseModel):
    """A point in the source: 1-based line and column, 0-based offset."""

    model_config = ConfigDict(frozen=True)

    line: int
    column: int
    offset: int


class SourceRange(BaseModel):
    """Half-open span of source text covered by a node."""

    model_config = ConfigDict(frozen=True)

    start: Position
    end: Position


class Node(BaseModel):
    """Common base of all AST nodes."""

    model_config = ConfigDict(frozen=True)

    loc: SourceRange


# ------------------------------------------------------------------
# Expressions
# ------------------------------------------------------------------


class Identifier(Node):
    """A variable or function name."""

    kind: _Literal["Identifier"] = "Identifier"
    name: str


class Literal(Node):
    """A number or string literal.

    ``value`` holds the decoded value (string contents without quotes), ``raw``
    the source lexeme.
    """

    kind: _Literal["Literal"] = "Literal"
    value: str | int | float
    raw: str


class BinaryExpression(Node):
    kind: _Literal["BinaryExpression"] = "BinaryExpression"
    operator: str
    left: Expression
    right: Expression


class UnaryExpression(Node):
    kind: _Literal["UnaryExpression"] = "UnaryExpression"
    operator: str
    argument: Expression


class MemberExpression(Node):
    """Property access ``object.property``."""

    kind: _Literal["MemberExpression"] = "MemberExpression"
    object: Expression
    property: Identifier
    computed: bool = False


class CallExpression(Node):
    kind: _Literal["CallExpression"] = "CallExpression"
    callee: Expression
    arguments: list[Expression] = _Field(default_factory=list)


class IndexExpression(Node):
    """Subscript access ``object[index]``."""

    kind: _Literal["IndexExpression"] = "IndexExpression"
    object: Expression
    index: Expression


class ArrayExpression(Node):
    kind: _Literal["ArrayExpression"] = "ArrayExpression"
    elements: list[Expression] = _Field(default_factory=list)


class Property(Node):
    """One ``key -> value`` entry of an object literal."""

    kind: _Literal["Property"] = "Property"
    key: Expression
    value: Expression


class ObjectExpression(Node):
    kind: _Literal["ObjectExpression"] = "ObjectExpression"
    properties: list[Property] = _Field(default_factory=list)


class InterpolatedString(Node):
    """A string literal with embedded ``{expression}`` parts."""

    kind: _Literal["InterpolatedString"] = "InterpolatedString"
    parts: list[str | Expression] = _Field(default_factory=list)


# Any expression node. The `kind` discriminator selects the concrete model.
Expression = Annotated[
    Identifier
    | Literal
    | BinaryExpression
    | UnaryExpression
    | MemberExpression
    | CallExpression
    | IndexExpression
    | ArrayExpression
    | ObjectExpression
    | InterpolatedString,
    _Field(discriminator="kind"),
]


# ------------------------------------------------------------------
# Statements
# ------------------------------------------------------------------


class TextContent(Node):
    """Literal text fragments interleaved with interpolated expressions."""

    kind: _Literal["TextContent"] = "TextContent"
    parts: list[str | Expression] = _Field(default_factory=list)


class CommentStatement(Node):
    kind: _Literal["CommentStatement"] = "CommentStatement"
    value: str


class TextStatement(Node):
    """A line of plain text outside any keyword block."""

    kind: _Literal["TextStatement"] = "TextStatement"
    parts: list[str | Expression] = _Field(default_factory=list)


class ExpressionStatement(Node):
    """A ``>> expression`` line."""

    kind: _Literal["ExpressionStatement"] = "ExpressionStatement"
    expression: Expression


class SubKeyword(Node):
    """A ``*name[: argument]`` line nested directly inside a keyword block."""

    kind: _Literal["SubKeyword"] = "SubKeyword"
    keyword: str
    argument: Expression | TextContent | None = None
    body: list[Statement] = _Field(default_factory=list)


class AnswerOption(Node):
    """A text line directly inside a keyword block, with an optional nested body."""

    kind: _Literal["AnswerOption"] = "AnswerOption"
    text: TextContent
    body: list[Statement] = _Field(default_factory=list)


class KeywordStatement(Node):
    """A ``*keyword[: argument]`` line with its sub-keywords and indented body."""

    kind: _Literal["KeywordStatement"] = "KeywordStatement"
    keyword: str
    argument: Expression | TextContent | None = None
    sub_keywords: list[SubKeyword] = _Field(default_factory=list)
    body: list[Statement] = _Field(default_factory=list)


Statement = Annotated[
    KeywordStatement | ExpressionStatement | TextStatement | CommentStatement | AnswerOption,
    _Field(discriminator="kind"),
]


class Program(Node):
    """Root of the tree; one per document."""

    kind: _Literal["Program"] = "Program"
    body: list[Statement] = _Field(default_factory=list)


def iter_children(node: Node) -> Iterator[Node]:
    """Yield the direct child nodes of ``node`` in document order.

    Text fragments (plain strings inside ``parts``) are not nodes and are
    skipped. A keyword's sub-keywords and body statements are stored in
    separate lists but interleave in the source, so they are merged by start
    offset.
    """
    if isinstance(node, KeywordStatement):
        if node.argument is not None:
            yield node.argument
        nested: list[Node] = [*node.sub_keywords, *node.body]
        yield from sorted(nested, key=lambda child: child.loc.start.offset)
        return
    for name in type(node).model_fields:
        if name == "loc":
            continue
        value = getattr(node, name)
        if isinstance(value, Node):
            yield value
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, Node):
                    yield item


# Resolve forward references between the mutually recursive node models.
for _model in (
    BinaryExpression,
    UnaryExpression,
    MemberExpression,
    CallExpression,
    IndexExpression,
    ArrayExpression,
    Property,
    ObjectExpression,
    InterpolatedString,
    TextContent,
    ExpressionStatement,
    SubKeyword,
    AnswerOption,
    KeywordStatement,
    Program,
):
    _model.model_rebuild()
