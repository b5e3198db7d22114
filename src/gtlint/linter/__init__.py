# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Rule-based static analysis of GuidedTrack programs."""

from gtlint.linter.engine import LintResult, Linter, apply_fixes, lint
from gtlint.linter.rule import Fix, LintMessage, LintRule, RuleContext, Severity, Visitor
from gtlint.linter.rules import RULES, get_all_rules, get_rule

__all__ = [
    # Engine
    "Linter",
    "lint",
    "apply_fixes",
    "LintResult",
    # Rule interface
    "LintRule",
    "RuleContext",
    "Visitor",
    "LintMessage",
    "Fix",
    "Severity",
    # Registry
    "RULES",
    "get_rule",
    "get_all_rules",
]
