# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Rule engine: runs every enabled rule over one document.

The engine tokenizes and parses the source, asks each enabled rule for its
visitor, then walks the tree once in pre-order. For every node, the callbacks
registered for its kind run in rule registration order; ``"<Kind>:exit"``
callbacks run after the node's subtree. Messages are returned sorted by
position.
"""

from collections import defaultdict
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict

from gtlint.config.models import DEFAULT_LINTER_CONFIG, LinterConfig, RuleSetting
from gtlint.linter.rule import Fix, LintMessage, LintRule, RuleContext, Severity, Visitor
from gtlint.linter.rules import get_all_rules
from gtlint.model.nodes import Node, iter_children
from gtlint.parser.lexer import tokenize
from gtlint.parser.parser import Parser

# ###############
# Public Interface
# ###############

__all__ = [
    "Fix",
    "LintMessage",
    "LintResult",
    "LintRule",
    "Linter",
    "RuleContext",
    "Severity",
    "Visitor",
    "apply_fixes",
    "lint",
]


class LintResult(BaseModel):
    """Aggregated outcome of linting one document.

    Attributes:
        file_path: Label of the linted document.
        messages: All messages, sorted by line then column.
        error_count: Number of messages with severity ``error``.
        warning_count: Number of messages with severity ``warning``.
        fixable_error_count: Errors that carry a fix.
        fixable_warning_count: Warnings that carry a fix.
        source: The linted source text.
        output: The source with fixes applied, when fixing was requested.
    """

    model_config = ConfigDict(frozen=True)

    file_path: str
    messages: list[LintMessage]
    error_count: int = 0
    warning_count: int = 0
    fixable_error_count: int = 0
    fixable_warning_count: int = 0
    source: str | None = None
    output: str | None = None


class Linter:
    """Runs the registered rules with per-rule severities from a config."""

    def __init__(self, config: LinterConfig | None = None) -> None:
        self._config = config if config is not None else DEFAULT_LINTER_CONFIG

    def lint(self, source: str, file_path: str = "<input>", *, fix: bool = False) -> LintResult:
        """Lint one document.

        Args:
            source: The full text of a .gt file.
            file_path: Label stored in the result.
            fix: When True, ``output`` holds the source with every
                non-overlapping fix applied.

        Returns:
            A LintResult with sorted messages and severity tallies.
        """
        tokens = tokenize(source)
        program = Parser().parse(tokens)

        messages: list[LintMessage] = []
        ancestors: list[Node] = []
        visitors: dict[str, list[Callable[[Any], None]]] = defaultdict(list)
        for rule in get_all_rules():
            severity = self._severity_for(rule)
            if severity is None:
                continue
            context = RuleContext(rule.name, severity, source, tokens, ancestors, messages)
            for kind, callback in rule.create(context).items():
                visitors[kind].append(callback)

        _walk(program, visitors, ancestors)
        messages.sort(key=lambda message: (message.line, message.column))

        output = apply_fixes(source, messages) if fix else None
        return _build_result(file_path, messages, source, output)

    def fix(self, source: str) -> str:
        """Return ``source`` with one pass of non-overlapping fixes applied."""
        return self.lint(source, fix=True).output or source

    def _severity_for(self, rule: LintRule) -> Severity | None:
        """Return the effective severity of a rule, or None when it is off."""
        setting: RuleSetting | None = self._config.rules.get(rule.name)
        if setting is None:
            return rule.severity
        if setting == "off":
            return None
        if setting == "warn":
            return "warning"
        return "error"


def lint(source: str, config: LinterConfig | None = None, file_path: str = "<input>") -> LintResult:
    """Lint one document with a fresh :class:`Linter`."""
    return Linter(config).lint(source, file_path)


def apply_fixes(source: str, messages: list[LintMessage]) -> str:
    """Splice the fixes of ``messages`` into ``source`` in a single pass.

    Fixes are applied in order of their start offset. A fix overlapping one
    that was already applied is skipped.
    """
    fixes = sorted((message.fix for message in messages if message.fix is not None), key=lambda f: f.range[0])
    pieces: list[str] = []
    cursor = 0
    for fix in fixes:
        start, end = fix.range
        if start < cursor:
            continue
        pieces.append(source[cursor:start])
        pieces.append(fix.text)
        cursor = end
    pieces.append(source[cursor:])
    return "".join(pieces)


# ################
# Implementation
# ################


def _walk(node: Node, visitors: dict[str, list[Callable[[Any], None]]], ancestors: list[Node]) -> None:
    """Visit ``node`` and its subtree in pre-order, keeping ``ancestors`` current."""
    kind = node.kind
    for callback in visitors.get(kind, ()):
        callback(node)
    ancestors.append(node)
    for child in iter_children(node):
        _walk(child, visitors, ancestors)
    ancestors.pop()
    for callback in visitors.get(f"{kind}:exit", ()):
        callback(node)


def _build_result(file_path: str, messages: list[LintMessage], source: str, output: str | None) -> LintResult:
    errors = [message for message in messages if message.severity == "error"]
    warnings = [message for message in messages if message.severity == "warning"]
    return LintResult(
        file_path=file_path,
        messages=messages,
        error_count=len(errors),
        warning_count=len(warnings),
        fixable_error_count=sum(1 for message in errors if message.fix is not None),
        fixable_warning_count=sum(1 for message in warnings if message.fix is not None),
        source=source,
        output=output,
    )
