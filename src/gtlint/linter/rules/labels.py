# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Rules over the ``*label`` / ``*goto`` graph of a document."""

from dataclasses import dataclass

from gtlint.linter.rule import LintRule, RuleContext, Visitor
from gtlint.model.nodes import Identifier, KeywordStatement, Program, TextContent


@dataclass(frozen=True)
class _Reference:
    name: str
    line: int
    column: int


def _argument_name(node: KeywordStatement) -> str:
    """Return the label name carried by a ``*label`` or ``*goto`` argument.

    Text arguments use their first literal fragment, trimmed.
    """
    argument = node.argument
    if isinstance(argument, TextContent):
        for part in argument.parts:
            if isinstance(part, str):
                return part.strip()
        return ""
    if isinstance(argument, Identifier):
        return argument.name
    return ""


def _is_external(target: str) -> bool:
    return target.startswith(("http://", "https://"))


def _create_goto_needs_reset(context: RuleContext) -> Visitor:
    def check(node: KeywordStatement) -> None:
        if node.keyword.lower() != "goto":
            return
        inside_events = any(
            isinstance(ancestor, KeywordStatement) and ancestor.keyword.lower() == "events"
            for ancestor in context.get_ancestors()
        )
        if not inside_events:
            return
        if not any(sub.keyword.lower() == "reset" for sub in node.sub_keywords):
            context.report(
                "'*goto:' inside '*events' should have '*reset' to prevent unexpected behavior",
                node.loc.start.line,
                node.loc.start.column,
            )

    return {"KeywordStatement": check}


def _create_no_invalid_goto(context: RuleContext) -> Visitor:
    labels: set[str] = set()
    gotos: list[_Reference] = []

    def collect(node: KeywordStatement) -> None:
        name = _argument_name(node)
        if not name:
            return
        if node.keyword == "label":
            labels.add(name)
        elif node.keyword == "goto" and not _is_external(name):
            gotos.append(_Reference(name, node.loc.start.line, node.loc.start.column))

    def report(_: Program) -> None:
        for goto in gotos:
            if goto.name not in labels:
                context.report(f"*goto target '{goto.name}' is not defined", goto.line, goto.column)

    return {"KeywordStatement": collect, "Program:exit": report}


def _create_no_unused_labels(context: RuleContext) -> Visitor:
    labels: list[_Reference] = []
    targets: set[str] = set()

    def collect(node: KeywordStatement) -> None:
        name = _argument_name(node)
        if not name:
            return
        if node.keyword == "label":
            labels.append(_Reference(name, node.loc.start.line, node.loc.start.column))
        elif node.keyword == "goto" and not _is_external(name):
            targets.add(name)

    def report(_: Program) -> None:
        for label in labels:
            if label.name not in targets:
                context.report(
                    f"Label '{label.name}' is defined but never used by a *goto", label.line, label.column
                )

    return {"KeywordStatement": collect, "Program:exit": report}


goto_needs_reset_in_events = LintRule(
    name="goto-needs-reset-in-events",
    description="Ensure *goto: inside *events has *reset",
    severity="warning",
    create=_create_goto_needs_reset,
)

no_invalid_goto = LintRule(
    name="no-invalid-goto",
    description="Ensure *goto targets exist",
    severity="error",
    create=_create_no_invalid_goto,
)

no_unused_labels = LintRule(
    name="no-unused-labels",
    description="Detect labels that are never referenced by a *goto",
    severity="warning",
    create=_create_no_unused_labels,
)
