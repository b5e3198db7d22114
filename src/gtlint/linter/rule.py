# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Rule interface shared by the engine and the rule implementations.

A rule is a named object whose ``create`` function receives a
:class:`RuleContext` and returns a visitor: a mapping from AST node kind (for
example ``"KeywordStatement"``) to a callback. Keys of the form
``"<Kind>:exit"`` are called after the node's children have been visited.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from gtlint.model.nodes import Node
from gtlint.parser.tokens import Token

# ###############
# Public Interface
# ###############

Severity = Literal["error", "warning", "info"]

Visitor = dict[str, Callable[[Any], None]]


class Fix(BaseModel):
    """A machine-applicable edit: replace the half-open offset ``range`` with ``text``."""

    model_config = ConfigDict(frozen=True)

    range: tuple[int, int]
    text: str


class LintMessage(BaseModel):
    """One diagnostic reported by a rule."""

    model_config = ConfigDict(frozen=True)

    rule_id: str
    severity: Severity
    message: str
    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None
    fix: Fix | None = None


class RuleContext:
    """The view of one lint run handed to a rule's ``create`` function."""

    def __init__(
        self,
        rule_id: str,
        severity: Severity,
        source: str,
        tokens: list[Token],
        ancestors: list[Node],
        messages: list[LintMessage],
    ) -> None:
        self._rule_id = rule_id
        self._severity = severity
        self._source = source
        self._tokens = tokens
        self._ancestors = ancestors
        self._messages = messages

    @property
    def rule_id(self) -> str:
        return self._rule_id

    def report(
        self,
        message: str,
        line: int,
        column: int,
        end_line: int | None = None,
        end_column: int | None = None,
        fix: Fix | None = None,
    ) -> None:
        """Record a message at a 1-based line and column."""
        self._messages.append(
            LintMessage(
                rule_id=self._rule_id,
                severity=self._severity,
                message=message,
                line=line,
                column=column,
                end_line=end_line,
                end_column=end_column,
                fix=fix,
            )
        )

    def get_source_code(self) -> str:
        """Return the raw source text being linted."""
        return self._source

    def get_tokens(self) -> list[Token]:
        """Return the token stream of the source."""
        return self._tokens

    def get_ancestors(self) -> list[Node]:
        """Return the ancestors of the node being visited, outermost first."""
        return list(self._ancestors)


@dataclass(frozen=True)
class LintRule:
    """A named rule with a default severity and a visitor factory."""

    name: str
    description: str
    severity: Severity
    create: Callable[[RuleContext], Visitor]
