# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Abstract syntax tree of GuidedTrack programs."""

from gtlint.model.nodes import (
    AnswerOption,
    ArrayExpression,
    BinaryExpression,
    CallExpression,
    CommentStatement,
    Expression,
    ExpressionStatement,
    Identifier,
    IndexExpression,
    InterpolatedString,
    KeywordStatement,
    Literal,
    MemberExpression,
    Node,
    ObjectExpression,
    Position,
    Program,
    Property,
    SourceRange,
    Statement,
    SubKeyword,
    TextContent,
    TextStatement,
    UnaryExpression,
    iter_children,
)

__all__ = [
    # Locations
    "Position",
    "SourceRange",
    "Node",
    # Statements
    "Program",
    "KeywordStatement",
    "SubKeyword",
    "AnswerOption",
    "ExpressionStatement",
    "TextStatement",
    "TextContent",
    "CommentStatement",
    "Statement",
    # Expressions
    "Identifier",
    "Literal",
    "BinaryExpression",
    "UnaryExpression",
    "MemberExpression",
    "CallExpression",
    "IndexExpression",
    "ArrayExpression",
    "ObjectExpression",
    "Property",
    "InterpolatedString",
    "Expression",
    # Traversal
    "iter_children",
]
