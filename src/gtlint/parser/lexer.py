# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for GuidedTrack (.gt) programs.

Converts raw source text into a flat sequence of tokens. Block structure is
expressed with INDENT and DEDENT tokens following the off-side rule (tabs
only). Each line is scanned in one of three contexts: free text, keyword
argument text, or expression. Interpolations (``{...}``) switch from text into
expression scanning and back.

The scanner never raises. Malformed input (unterminated strings, unknown
characters in expressions) produces ERROR tokens and scanning continues.
"""

from gtlint.language.keyword_spec import is_expression_keyword
from gtlint.parser.tokens import (
    PLAIN_ARGUMENT_KEYWORDS,
    WORD_OPERATORS,
    Token,
    TokenType,
    classify_directive,
)

# ###############
# Public Interface
# ###############


def tokenize(source: str) -> list[Token]:
    """Tokenize GuidedTrack source text into a sequence of tokens.

    Every non-blank line ends with a NEWLINE token when a line break follows
    it. Blank lines produce no tokens. At end of input one DEDENT is emitted for
    every open indentation level, followed by a single EOF token.

    Args:
        source: The full text of a .gt file.

    Returns:
        A list of Token objects ending with a single EOF token.
    """
    return _Lexer(source).tokenize()


def tokenize_expression(text: str, line: int = 1, column: int = 1, offset: int = 0) -> list[Token]:
    """Tokenize a fragment of source purely in expression mode.

    Token positions are shifted so that the first character of ``text`` sits
    at the given line, column and offset. Used to re-lex argument text that
    turns out to hold an expression.

    Args:
        text: The fragment to scan.
        line: Line of the first character of ``text``.
        column: Column of the first character of ``text``.
        offset: Source offset of the first character of ``text``.

    Returns:
        A list of Token objects ending with a single EOF token.
    """
    return _Lexer(text, line=line, column=column, offset=offset).tokenize_expression()


# ################
# Implementation
# ################

_PUNCTUATION: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    ":": TokenType.COLON,
}

_SINGLE_CHAR_OPERATORS = "+-*/%=<>"

_EMPHASIS_MARKERS = "*/"


def _is_name_char(ch: str) -> bool:
    return ch != "" and (ch.isalnum() or ch in "_-")


def _is_identifier_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def _is_identifier_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


class _Lexer:
    """Internal scanner state machine."""

    def __init__(self, source: str, line: int = 1, column: int = 1, offset: int = 0) -> None:
        self._source = source
        self._pos = 0
        self._line = line
        self._column = column
        self._base_offset = offset
        self._tokens: list[Token] = []
        self._indent_stack: list[int] = [0]

    def tokenize(self) -> list[Token]:
        """Run the scanner over a whole document and return all tokens."""
        while self._pos < len(self._source):
            self._scan_line()
        while len(self._indent_stack) > 1:
            self._indent_stack.pop()
            self._emit(TokenType.DEDENT, "", self._mark())
        self._emit(TokenType.EOF, "", self._mark())
        return self._tokens

    def tokenize_expression(self) -> list[Token]:
        """Run the scanner in expression mode only and return all tokens."""
        while self._pos < len(self._source):
            if self._at_line_end():
                self._scan_newline()
            else:
                self._scan_expression()
        self._emit(TokenType.EOF, "", self._mark())
        return self._tokens

    # ------------------------------------------------------------------
    # Low-level character access helpers
    # ------------------------------------------------------------------

    def _current(self) -> str:
        """Return the character at the current position, or '' at end of input."""
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _peek(self, distance: int = 1) -> str:
        """Return the character ``distance`` positions ahead, or '' past the end."""
        index = self._pos + distance
        if index < len(self._source):
            return self._source[index]
        return ""

    def _advance(self) -> str:
        """Consume one character on the current line and return it."""
        ch = self._source[self._pos]
        self._pos += 1
        self._column += 1
        return ch

    def _at_line_end(self) -> bool:
        return self._pos >= len(self._source) or self._source[self._pos] in "\r\n"

    def _mark(self) -> tuple[int, int, int]:
        """Return the current (pos, line, column) as a token start marker."""
        return self._pos, self._line, self._column

    def _emit(self, token_type: TokenType, value: str, start: tuple[int, int, int]) -> None:
        """Append a token spanning from ``start`` to the current position."""
        pos, line, column = start
        self._tokens.append(
            Token(
                type=token_type,
                value=value,
                line=line,
                column=column,
                offset=self._base_offset + pos,
                end_line=self._line,
                end_column=self._column,
                end_offset=self._base_offset + self._pos,
            )
        )

    # ------------------------------------------------------------------
    # Lines and indentation
    # ------------------------------------------------------------------

    def _scan_line(self) -> None:
        """Scan one physical line including its terminating line break."""
        index = self._pos
        tabs = 0
        # Only the tabs before any space count towards the depth.
        while index < len(self._source) and self._source[index] == "\t":
            tabs += 1
            index += 1
        while index < len(self._source) and self._source[index] in " \t":
            index += 1

        if index >= len(self._source) or self._source[index] in "\r\n":
            # Blank line: no tokens and no change to the indentation stack.
            while self._pos < index:
                self._advance()
            if self._pos < len(self._source):
                self._skip_line_break()
            return

        start = self._mark()
        while self._pos < index:
            self._advance()
        self._handle_indentation(tabs, start)
        self._scan_content()
        if self._pos < len(self._source):
            self._scan_newline()

    def _handle_indentation(self, width: int, start: tuple[int, int, int]) -> None:
        """Compare the line's tab width against the stack and emit INDENT/DEDENT."""
        if width > self._indent_stack[-1]:
            self._indent_stack.append(width)
            self._emit(TokenType.INDENT, self._source[start[0] : self._pos], start)
            return
        while len(self._indent_stack) > 1 and self._indent_stack[-1] > width:
            self._indent_stack.pop()
            self._emit(TokenType.DEDENT, "", self._mark())

    def _skip_line_break(self) -> None:
        """Consume one line break (``\\n``, ``\\r\\n`` or ``\\r``) without a token."""
        if self._current() == "\r":
            self._pos += 1
        if self._current() == "\n":
            self._pos += 1
        self._line += 1
        self._column = 1

    def _scan_newline(self) -> None:
        start = self._mark()
        begin = self._pos
        self._skip_line_break()
        self._tokens.append(
            Token(
                type=TokenType.NEWLINE,
                value=self._source[begin : self._pos],
                line=start[1],
                column=start[2],
                offset=self._base_offset + begin,
                end_line=start[1],
                end_column=start[2] + (self._pos - begin),
                end_offset=self._base_offset + self._pos,
            )
        )

    # ------------------------------------------------------------------
    # Line content dispatcher
    # ------------------------------------------------------------------

    def _scan_content(self) -> None:
        """Dispatch the content of a line after its indentation."""
        ch = self._current()
        if ch == "-" and self._peek() == "-":
            self._scan_comment()
        elif ch == ">" and self._peek() == ">":
            start = self._mark()
            self._advance()
            self._advance()
            self._emit(TokenType.EXPRESSION_START, ">>", start)
            self._scan_expression()
        elif ch == "*" and self._is_directive():
            self._scan_directive()
        elif ch in "\"'":
            self._scan_string()
            self._scan_text(allow_emphasis=True)
        else:
            self._scan_text(allow_emphasis=True)

    def _scan_comment(self) -> None:
        """Consume ``--`` through end of line as a COMMENT token."""
        start = self._mark()
        self._advance()
        self._advance()
        body_start = self._pos
        while not self._at_line_end():
            self._advance()
        self._emit(TokenType.COMMENT, self._source[body_start : self._pos], start)

    def _is_directive(self) -> bool:
        """Return True if the ``*`` at the current position starts a keyword.

        A keyword needs a non-empty name. A second ``*`` before any colon on
        the line means the star opens bold text instead.
        """
        if not _is_name_char(self._peek()):
            return False
        index = self._pos + 1
        while index < len(self._source) and self._source[index] not in "\r\n":
            ch = self._source[index]
            if ch == ":":
                return True
            if ch == "*":
                return False
            index += 1
        return True

    # ------------------------------------------------------------------
    # Keywords
    # ------------------------------------------------------------------

    def _scan_directive(self) -> None:
        """Scan ``*name[:] [argument]``."""
        start = self._mark()
        self._advance()  # *
        name_start = self._pos
        while _is_name_char(self._current()):
            self._advance()
        name = self._source[name_start : self._pos].lower()
        token_type = classify_directive(name, self._indent_stack[-1])
        self._emit(token_type, name, start)

        has_colon = self._current() == ":"
        if has_colon:
            colon_start = self._mark()
            self._advance()
            self._emit(TokenType.COLON, ":", colon_start)
        self._skip_spaces()
        if self._at_line_end():
            return

        if has_colon and token_type == TokenType.KEYWORD and is_expression_keyword(name):
            self._scan_expression()
        elif has_colon:
            self._scan_text(allow_emphasis=name not in PLAIN_ARGUMENT_KEYWORDS)
        else:
            self._scan_text(allow_emphasis=True)

    def _skip_spaces(self) -> None:
        while self._current() in (" ", "\t"):
            self._advance()

    # ------------------------------------------------------------------
    # Free text and keyword arguments
    # ------------------------------------------------------------------

    def _scan_text(self, allow_emphasis: bool) -> None:
        """Accumulate text to end of line, splitting out interpolations and emphasis."""
        text_start = self._mark()
        while not self._at_line_end():
            ch = self._current()
            if ch == "{":
                self._flush_text(text_start)
                self._scan_interpolation()
                text_start = self._mark()
            elif allow_emphasis and ch in _EMPHASIS_MARKERS and self._emphasis_end() is not None:
                self._flush_text(text_start)
                span_start = self._mark()
                end = self._emphasis_end()
                while self._pos < end:
                    self._advance()
                self._flush_text(span_start)
                text_start = self._mark()
            else:
                self._advance()
        self._flush_text(text_start)

    def _flush_text(self, start: tuple[int, int, int]) -> None:
        """Emit the text between ``start`` and the current position, unless blank."""
        text = self._source[start[0] : self._pos]
        if text.strip():
            self._emit(TokenType.TEXT, text, start)

    def _emphasis_end(self) -> int | None:
        """Return the position just past a closing emphasis marker, or None.

        An emphasis span opens with ``*`` or ``/`` directly followed by a
        non-space character and closes with the same marker later on the line.
        """
        marker = self._current()
        following = self._peek()
        if following in ("", " ", "\t", "\r", "\n", marker):
            return None
        index = self._pos + 2
        while index < len(self._source) and self._source[index] not in "\r\n":
            if self._source[index] == marker:
                return index + 1
            index += 1
        return None

    def _scan_interpolation(self) -> None:
        """Scan ``{expression}`` embedded in text."""
        start = self._mark()
        self._advance()  # {
        self._emit(TokenType.INTERPOLATION_START, "{", start)
        self._scan_expression(in_interpolation=True)
        if self._current() == "}":
            end_start = self._mark()
            self._advance()
            self._emit(TokenType.INTERPOLATION_END, "}", end_start)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _scan_expression(self, in_interpolation: bool = False) -> None:
        """Scan expression tokens to end of line.

        Inside an interpolation the scan stops before the first ``}`` that is
        not balanced by a ``{`` opened within the expression itself.
        """
        depth = 0
        while not self._at_line_end():
            ch = self._current()
            nxt = self._peek()
            if ch in (" ", "\t"):
                self._advance()
            elif in_interpolation and ch == "}" and depth == 0:
                return
            elif ch == "-" and nxt == "-" and not in_interpolation:
                self._scan_comment()
            elif ch.isdigit() or (ch == "-" and nxt.isdigit()):
                self._scan_number()
            elif ch in "\"'":
                self._scan_string()
            elif ch == "-" and nxt == ">":
                self._scan_fixed(TokenType.ARROW, 2)
            elif ch in "<>" and nxt == "=":
                self._scan_fixed(TokenType.OPERATOR, 2)
            elif ch == ":" and nxt == ":":
                self._scan_fixed(TokenType.DOUBLE_COLON, 2)
            elif ch in _SINGLE_CHAR_OPERATORS:
                self._scan_fixed(TokenType.OPERATOR, 1)
            elif ch in _PUNCTUATION:
                if ch == "{":
                    depth += 1
                elif ch == "}":
                    depth -= 1
                self._scan_fixed(_PUNCTUATION[ch], 1)
            elif _is_identifier_start(ch):
                self._scan_identifier()
            else:
                self._scan_fixed(TokenType.ERROR, 1)

    def _scan_fixed(self, token_type: TokenType, length: int) -> None:
        start = self._mark()
        for _ in range(length):
            self._advance()
        self._emit(token_type, self._source[start[0] : self._pos], start)

    def _scan_number(self) -> None:
        """Scan an optionally negative integer or decimal literal."""
        start = self._mark()
        if self._current() == "-":
            self._advance()
        while self._current().isdigit():
            self._advance()
        if self._current() == "." and self._peek().isdigit():
            self._advance()  # .
            while self._current().isdigit():
                self._advance()
        self._emit(TokenType.NUMBER, self._source[start[0] : self._pos], start)

    def _scan_string(self) -> None:
        """Scan a quoted string; an unterminated one becomes ERROR to end of line."""
        start = self._mark()
        quote = self._advance()
        while not self._at_line_end():
            if self._advance() == quote:
                self._emit(TokenType.STRING, self._source[start[0] : self._pos], start)
                return
        self._emit(TokenType.ERROR, self._source[start[0] : self._pos], start)

    def _scan_identifier(self) -> None:
        """Scan an identifier; ``and``, ``or``, ``not`` and ``in`` become operators."""
        start = self._mark()
        while _is_identifier_char(self._current()):
            self._advance()
        word = self._source[start[0] : self._pos]
        if word.lower() in WORD_OPERATORS:
            self._emit(TokenType.OPERATOR, word.lower(), start)
        else:
            self._emit(TokenType.IDENTIFIER, word, start)
