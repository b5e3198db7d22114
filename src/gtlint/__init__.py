# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""GTLint: lexer, parser, linter and formatter for the GuidedTrack language."""

from gtlint.config import DEFAULT_FORMATTER_CONFIG, DEFAULT_LINTER_CONFIG, FormatterConfig, LinterConfig
from gtlint.formatter import Formatter, format
from gtlint.linter import LintMessage, LintResult, Linter, get_all_rules, get_rule, lint
from gtlint.parser import KEYWORDS, SUB_KEYWORDS, Parser, TokenType, parse, tokenize

__all__ = [
    "tokenize",
    "TokenType",
    "KEYWORDS",
    "SUB_KEYWORDS",
    "parse",
    "Parser",
    "Linter",
    "lint",
    "LintMessage",
    "LintResult",
    "get_rule",
    "get_all_rules",
    "Formatter",
    "format",
    "FormatterConfig",
    "LinterConfig",
    "DEFAULT_FORMATTER_CONFIG",
    "DEFAULT_LINTER_CONFIG",
]
