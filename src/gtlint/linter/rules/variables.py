# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Rules over variable definitions and reads within one document.

A variable is defined by a ``>>`` assignment target, a ``*set:`` argument, a
``*save:`` name, or a ``*for:`` binding. Every other identifier in an
expression is a read, except member property names and called function names.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field

from gtlint.linter.rule import LintRule, RuleContext, Visitor
from gtlint.model.nodes import (
    BinaryExpression,
    CallExpression,
    ExpressionStatement,
    Identifier,
    KeywordStatement,
    MemberExpression,
    SubKeyword,
    TextContent,
)
from gtlint.parser.tokens import Token, TokenType

# Names the runtime provides without a definition in the program.
BUILTIN_NAMES: frozenset[str] = frozenset({"it"})

_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*$")

# Name, line, column and offset of one identifier token.
_Located = tuple[str, int, int, int]


@dataclass(frozen=True)
class _Use:
    name: str
    line: int
    column: int


@dataclass
class _Variables:
    """Definitions and reads collected during one walk."""

    definitions: list[_Use] = field(default_factory=list)
    reads: list[_Use] = field(default_factory=list)
    # Offsets of identifiers already recorded as definitions.
    defining_offsets: set[int] = field(default_factory=set)

    def define(self, name: str, line: int, column: int, offset: int | None = None) -> None:
        self.definitions.append(_Use(name, line, column))
        if offset is not None:
            self.defining_offsets.add(offset)

    def defined_names(self) -> set[str]:
        return {use.name for use in self.definitions}

    def read_names(self) -> set[str]:
        return {use.name for use in self.reads}


def _collect_variables(context: RuleContext, variables: _Variables) -> Visitor:
    """Return the callbacks that fill ``variables`` as the tree is walked."""

    def define_identifier(node: Identifier) -> None:
        variables.define(node.name, node.loc.start.line, node.loc.start.column, node.loc.start.offset)

    def on_expression_statement(node: ExpressionStatement) -> None:
        expression = node.expression
        if isinstance(expression, BinaryExpression) and expression.operator == "=":
            if isinstance(expression.left, Identifier):
                define_identifier(expression.left)

    def on_keyword(node: KeywordStatement) -> None:
        if node.keyword == "set" and isinstance(node.argument, Identifier):
            define_identifier(node.argument)
        elif node.keyword == "for":
            bindings, collection = _for_line(context, node)
            for name, line, column, offset in bindings:
                variables.define(name, line, column, offset)
            # An unparsed argument contributes no Identifier nodes.
            if node.argument is None:
                variables.reads.extend(_Use(name, line, column) for name, line, column, _ in collection)

    def on_sub_keyword(node: SubKeyword) -> None:
        if node.keyword != "save" or not isinstance(node.argument, TextContent):
            return
        name = "".join(part for part in node.argument.parts if isinstance(part, str)).strip()
        if _NAME.match(name):
            variables.define(name, node.argument.loc.start.line, node.argument.loc.start.column)

    def on_identifier(node: Identifier) -> None:
        if node.loc.start.offset in variables.defining_offsets:
            return
        ancestors = context.get_ancestors()
        parent = ancestors[-1] if ancestors else None
        if isinstance(parent, MemberExpression) and not parent.computed and parent.property is node:
            return
        if isinstance(parent, CallExpression) and parent.callee is node:
            return
        variables.reads.append(_Use(node.name, node.loc.start.line, node.loc.start.column))

    return {
        "ExpressionStatement": on_expression_statement,
        "KeywordStatement": on_keyword,
        "SubKeyword": on_sub_keyword,
        "Identifier": on_identifier,
    }


def _for_line(context: RuleContext, node: KeywordStatement) -> tuple[list[_Located], list[_Located]]:
    """Split the identifiers on a ``*for:`` line into bindings and collection names.

    Read from the token stream so that ``*for: key, value in items`` binds both
    names even though the argument is not a single expression. Collection names
    after a ``.`` are member properties and are left out.
    """
    bindings: list[_Located] = []
    collection: list[_Located] = []
    target = bindings
    previous: Token | None = None
    for tok in context.get_tokens():
        if tok.offset < node.loc.start.offset:
            continue
        if tok.type in (TokenType.NEWLINE, TokenType.EOF):
            break
        if tok.type == TokenType.OPERATOR and tok.value == "in" and target is bindings:
            target = collection
        elif tok.type == TokenType.IDENTIFIER and (previous is None or previous.type != TokenType.DOT):
            target.append((tok.value, tok.line, tok.column, tok.offset))
        previous = tok
    return bindings, collection


def _variable_rule(report: Callable[[RuleContext, _Variables], None]) -> Callable[[RuleContext], Visitor]:
    def create(context: RuleContext) -> Visitor:
        variables = _Variables()
        visitor = _collect_variables(context, variables)
        visitor["Program:exit"] = lambda _: report(context, variables)
        return visitor

    return create


def _report_undefined(context: RuleContext, variables: _Variables) -> None:
    defined = variables.defined_names() | BUILTIN_NAMES
    for use in variables.reads:
        if use.name not in defined:
            context.report(f"Variable '{use.name}' is used but never defined", use.line, use.column)


def _report_unused(context: RuleContext, variables: _Variables) -> None:
    read = variables.read_names()
    reported: set[str] = set()
    for use in variables.definitions:
        if use.name in read or use.name in reported:
            continue
        reported.add(use.name)
        context.report(f"Variable '{use.name}' is defined but never used", use.line, use.column)


no_undefined_vars = LintRule(
    name="no-undefined-vars",
    description="Detect variables that are read but never defined in the document",
    severity="error",
    create=_variable_rule(_report_undefined),
)

no_unused_vars = LintRule(
    name="no-unused-vars",
    description="Detect variables that are defined but never read",
    severity="warning",
    create=_variable_rule(_report_unused),
)

