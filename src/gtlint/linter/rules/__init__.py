# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Registry of the built-in lint rules."""

from gtlint.linter.rule import LintRule
from gtlint.linter.rules.keywords import (
    no_inline_argument,
    purchase_subkeyword_constraints,
    required_subkeywords,
    valid_keyword,
    valid_sub_keyword,
)
from gtlint.linter.rules.labels import goto_needs_reset_in_events, no_invalid_goto, no_unused_labels
from gtlint.linter.rules.style import indent_style
from gtlint.linter.rules.syntax import no_unclosed_bracket, no_unclosed_string
from gtlint.linter.rules.variables import no_undefined_vars, no_unused_vars

RULES: dict[str, LintRule] = {
    rule.name: rule
    for rule in (
        valid_keyword,
        valid_sub_keyword,
        required_subkeywords,
        no_inline_argument,
        purchase_subkeyword_constraints,
        goto_needs_reset_in_events,
        no_invalid_goto,
        no_unused_labels,
        indent_style,
        no_unclosed_string,
        no_unclosed_bracket,
        no_undefined_vars,
        no_unused_vars,
    )
}


def get_rule(name: str) -> LintRule | None:
    """Return the rule registered under ``name``, or None."""
    return RULES.get(name)


def get_all_rules() -> list[LintRule]:
    """Return every registered rule in registration order."""
    return list(RULES.values())


__all__ = [
    "RULES",
    "get_rule",
    "get_all_rules",
]
