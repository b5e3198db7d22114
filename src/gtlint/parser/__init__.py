# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexer and parser for GuidedTrack programs."""

from gtlint.parser.lexer import tokenize, tokenize_expression
from gtlint.parser.parser import ParseError, Parser, parse, parse_source
from gtlint.parser.tokens import KEYWORDS, OPERATORS, SUB_KEYWORDS, Token, TokenType

__all__ = [
    "tokenize",
    "tokenize_expression",
    "parse",
    "parse_source",
    "Parser",
    "ParseError",
    "Token",
    "TokenType",
    "KEYWORDS",
    "SUB_KEYWORDS",
    "OPERATORS",
]
