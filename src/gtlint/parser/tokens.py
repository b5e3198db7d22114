# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Token model for the GuidedTrack lexer.

Defines the token kinds, the immutable token record and the closed
vocabularies (keywords, sub-keywords, operators) used to classify scanned text.
"""

import enum
from dataclasses import dataclass

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """All token types produced by the GuidedTrack lexer."""

    # Structure
    NEWLINE = "NEWLINE"
    INDENT = "INDENT"
    DEDENT = "DEDENT"
    EOF = "EOF"

    # Directives
    KEYWORD = "KEYWORD"
    SUB_KEYWORD = "SUB_KEYWORD"
    EXPRESSION_START = "EXPRESSION_START"

    # Literals
    STRING = "STRING"
    NUMBER = "NUMBER"

    # Operators
    OPERATOR = "OPERATOR"
    ARROW = "ARROW"

    # Punctuation
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    LBRACKET = "LBRACKET"
    RBRACKET = "RBRACKET"
    LBRACE = "LBRACE"
    RBRACE = "RBRACE"
    COMMA = "COMMA"
    DOT = "DOT"
    COLON = "COLON"
    DOUBLE_COLON = "DOUBLE_COLON"

    # Other
    IDENTIFIER = "IDENTIFIER"
    TEXT = "TEXT"
    COMMENT = "COMMENT"
    INTERPOLATION_START = "INTERPOLATION_START"
    INTERPOLATION_END = "INTERPOLATION_END"

    # Errors
    ERROR = "ERROR"


@dataclass(frozen=True)
class Token:
    """A lexical token with its source span.

    Lines and columns are 1-based, offsets are 0-based. The end position is
    exclusive.

    Attributes:
        type: The kind of token.
        value: The token text. Keywords carry their lower-cased name without
            the leading ``*``, comments the text after ``--``, strings the full
            lexeme including quotes.
        line: Line where the token starts.
        column: Column where the token starts.
        offset: Source offset where the token starts.
        end_line: Line where the token ends.
        end_column: Column just past the token.
        end_offset: Source offset just past the token.
    """

    type: TokenType
    value: str
    line: int
    column: int
    offset: int
    end_line: int
    end_column: int
    end_offset: int


KEYWORDS: frozenset[str] = frozenset(
    {
        "audio",
        "button",
        "chart",
        "clear",
        "component",
        "database",
        "email",
        "events",
        "experiment",
        "for",
        "goto",
        "group",
        "header",
        "html",
        "if",
        "image",
        "label",
        "list",
        "login",
        "maintain",
        "navigation",
        "page",
        "points",
        "program",
        "progress",
        "purchase",
        "question",
        "quit",
        "randomize",
        "repeat",
        "return",
        "service",
        "set",
        "settings",
        "share",
        "summary",
        "switch",
        "trigger",
        "video",
        "wait",
        "while",
    }
)

# Names that classify as SUB_KEYWORD when they appear on an indented line.
SUB_KEYWORDS: frozenset[str] = frozenset(
    {
        "after",
        "answers",
        "before",
        "blank",
        "body",
        "cancel",
        "caption",
        "classes",
        "click",
        "confirm",
        "countdown",
        "data",
        "date",
        "default",
        "description",
        "error",
        "every",
        "everytime",
        "frequency",
        "hide",
        "icon",
        "identifier",
        "management",
        "max",
        "method",
        "min",
        "multiple",
        "name",
        "other",
        "path",
        "placeholder",
        "required",
        "reset",
        "save",
        "searchable",
        "send",
        "shuffle",
        "start",
        "startup",
        "status",
        "subject",
        "success",
        "tags",
        "throwaway",
        "time",
        "tip",
        "to",
        "trendline",
        "type",
        "until",
        "what",
        "when",
        "with",
        "xaxis",
        "yaxis",
    }
)

WORD_OPERATORS: frozenset[str] = frozenset({"and", "or", "not", "in"})

OPERATORS: frozenset[str] = frozenset(
    {"+", "-", "*", "/", "%", "=", "<", ">", "<=", ">="} | WORD_OPERATORS
)

# Keyword arguments that hold URLs, paths or identifiers. Emphasis markers
# (``*bold*``, ``/italic/``) are not recognised inside them.
PLAIN_ARGUMENT_KEYWORDS: frozenset[str] = frozenset(
    {
        "audio",
        "video",
        "image",
        "path",
        "goto",
        "program",
        "label",
        "trigger",
        "identifier",
        "save",
        "method",
        "what",
        "when",
        "until",
        "every",
        "experiment",
        "name",
        "to",
        "subject",
        "type",
        "data",
        "xaxis",
        "yaxis",
        "icon",
        "status",
    }
)


def classify_directive(name: str, indent_depth: int) -> TokenType:
    """Return KEYWORD or SUB_KEYWORD for a ``*name`` at the given depth.

    A name is a sub-keyword only on an indented line and only when it belongs
    to :data:`SUB_KEYWORDS`. Whether an enclosing keyword actually accepts it
    is a lint concern, not a lexical one.
    """
    if indent_depth > 0 and name in SUB_KEYWORDS:
        return TokenType.SUB_KEYWORD
    return TokenType.KEYWORD
