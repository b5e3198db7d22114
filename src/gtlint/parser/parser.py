# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for GuidedTrack token streams.

Builds a Program tree from the tokens produced by the lexer. Block nesting is
reconstructed from INDENT/DEDENT tokens: inside a keyword's block, sub-keyword
lines attach to the keyword and every other line goes to its body. Expressions
are parsed by precedence climbing.

The parser is resilient: grammar violations are recorded as error strings and
parsing resumes at the next line, so a best-effort Program is always returned.
"""

from collections.abc import Callable

from gtlint.language.keyword_spec import get_sub_keyword_spec, is_expression_keyword, is_expression_value
from gtlint.model.nodes import (
    AnswerOption,
    ArrayExpression,
    BinaryExpression,
    CallExpression,
    CommentStatement,
    Expression,
    ExpressionStatement,
    Identifier,
    IndexExpression,
    InterpolatedString,
    KeywordStatement,
    Literal,
    MemberExpression,
    ObjectExpression,
    Position,
    Program,
    Property,
    SourceRange,
    Statement,
    SubKeyword,
    TextContent,
    TextStatement,
    UnaryExpression,
)
from gtlint.parser.lexer import tokenize, tokenize_expression
from gtlint.parser.tokens import Token, TokenType

# ###############
# Public Interface
# ###############


class ParseError(Exception):
    """Raised internally when the parser meets a syntactically invalid construct.

    The parser catches these itself and records their message; they never
    escape :meth:`Parser.parse`.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


class Parser:
    """Stateful parser front-end that keeps the errors of its last run."""

    def __init__(self) -> None:
        self._errors: list[str] = []

    def parse(self, tokens: list[Token]) -> Program:
        """Parse a token list into a Program.

        Never raises. Grammar errors are available from :meth:`get_errors`
        afterwards.
        """
        state = _Parser(tokens)
        program = state.parse()
        self._errors = state.errors
        return program

    def get_errors(self) -> list[str]:
        """Return the errors recorded by the most recent :meth:`parse` call."""
        return list(self._errors)


def parse(tokens: list[Token]) -> Program:
    """Parse a token list into a Program, discarding grammar errors.

    Args:
        tokens: Tokens as produced by :func:`gtlint.parser.lexer.tokenize`.

    Returns:
        The best-effort Program tree.
    """
    return Parser().parse(tokens)


def parse_source(source: str) -> tuple[Program, list[str]]:
    """Tokenize and parse source text.

    Args:
        source: The full text of a .gt file.

    Returns:
        A tuple of the Program tree and the list of grammar errors.
    """
    parser = Parser()
    program = parser.parse(tokenize(source))
    return program, parser.get_errors()


# ################
# Implementation
# ################

_LINE_END_TYPES = (TokenType.NEWLINE, TokenType.INDENT, TokenType.DEDENT, TokenType.EOF)

_STRUCTURAL_TYPES = frozenset(_LINE_END_TYPES)

# Token kinds that only arise from text scanning; an argument containing them
# must be re-lexed before it can be parsed as an expression.
_TEXT_TOKEN_TYPES = frozenset({TokenType.TEXT, TokenType.INTERPOLATION_START, TokenType.INTERPOLATION_END})

_COMPARISON_OPERATORS = frozenset({"<", ">", "<=", ">="})
_MULTIPLICATIVE_OPERATORS = frozenset({"*", "/", "%"})


def _start(tok: Token) -> Position:
    return Position(line=tok.line, column=tok.column, offset=tok.offset)


def _end(tok: Token) -> Position:
    return Position(line=tok.end_line, column=tok.end_column, offset=tok.end_offset)


def _token_range(first: Token, last: Token) -> SourceRange:
    return SourceRange(start=_start(first), end=_end(last))


def _join(start: Position, end: Position) -> SourceRange:
    return SourceRange(start=start, end=end)


def _reconstruct(tokens: list[Token]) -> str:
    """Rebuild the source substring covered by ``tokens`` on a single line."""
    text = ""
    cursor = tokens[0].offset
    for tok in tokens:
        text += " " * max(tok.offset - cursor, 0)
        text += "--" + tok.value if tok.type == TokenType.COMMENT else tok.value
        cursor = tok.end_offset
    return text


def _number_value(raw: str) -> int | float:
    if "." in raw:
        return float(raw)
    return int(raw)


class _Parser:
    """Recursive-descent parser for one GuidedTrack token stream."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = list(tokens)
        if not self._tokens or self._tokens[-1].type != TokenType.EOF:
            if self._tokens:
                last = self._tokens[-1]
                line, column, offset = last.end_line, last.end_column, last.end_offset
            else:
                line, column, offset = 1, 1, 0
            self._tokens.append(Token(TokenType.EOF, "", line, column, offset, line, column, offset))
        self._pos = 0
        self._last_content: Token | None = None
        self.errors: list[str] = []

    def parse(self) -> Program:
        """Parse the full token stream and return a Program."""
        body: list[Statement] = []
        while True:
            statements, _ = self._parse_block(None)
            body.extend(statements)
            if self._at_end():
                break
            self._error(self._advance(), "Unexpected dedent")
        eof = self._tokens[-1]
        return Program(body=body, loc=_join(Position(line=1, column=1, offset=0), _end(eof)))

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        """Return the current (un-consumed) token."""
        return self._tokens[self._pos]

    def _peek_type(self) -> TokenType:
        """Return the token type of the current token."""
        return self._tokens[self._pos].type

    def _at_end(self) -> bool:
        """Return True if the current token is the EOF token."""
        return self._peek_type() == TokenType.EOF

    def _advance(self) -> Token:
        """Consume and return the current token, stopping at EOF."""
        tok = self._tokens[self._pos]
        if self._pos < len(self._tokens) - 1:
            self._pos += 1
        if tok.type not in _STRUCTURAL_TYPES:
            self._last_content = tok
        return tok

    def _expect(self, *types: TokenType) -> Token:
        """Consume the current token if it matches any of the given types.

        Raises ParseError if the current token does not match.
        """
        tok = self._current()
        if tok.type not in types:
            expected = " or ".join(repr(t.value) for t in types)
            raise ParseError(f"Expected {expected}, got {self._describe(tok)}", tok.line, tok.column)
        return self._advance()

    def _check(self, *types: TokenType) -> bool:
        """Return True if the current token matches any of the given types (without
        consuming).
        """
        return self._peek_type() in types

    def _check_operator(self, *operators: str) -> bool:
        tok = self._current()
        return tok.type == TokenType.OPERATOR and tok.value in operators

    @staticmethod
    def _describe(tok: Token) -> str:
        if tok.type == TokenType.EOF:
            return "end of input"
        if tok.type == TokenType.NEWLINE:
            return "end of line"
        return repr(tok.value)

    def _error(self, tok: Token, message: str) -> None:
        """Record a grammar error at ``tok`` without interrupting the parse."""
        self.errors.append(str(ParseError(message, tok.line, tok.column)))

    def _take_line(self) -> list[Token]:
        """Consume the rest of the current line and return its tokens.

        The terminating NEWLINE is consumed; INDENT, DEDENT and EOF are left
        in place for the block logic.
        """
        line: list[Token] = []
        while not self._check(*_LINE_END_TYPES):
            line.append(self._advance())
        if self._check(TokenType.NEWLINE):
            self._advance()
        return line

    def _synchronize(self) -> None:
        """Skip to the start of the next line after an error."""
        while not self._check(TokenType.NEWLINE, TokenType.DEDENT, TokenType.EOF):
            self._advance()
        if self._check(TokenType.NEWLINE):
            self._advance()

    def _statement_end(self, fallback: Token) -> Position:
        if self._last_content is None:
            return _end(fallback)
        return _end(self._last_content)

    # ------------------------------------------------------------------
    # Blocks and statements
    # ------------------------------------------------------------------

    def _parse_block(self, parent: str | None) -> tuple[list[Statement], list[SubKeyword]]:
        """Parse statements until DEDENT or EOF.

        ``parent`` is the keyword owning the block, or None when the block
        belongs to a sub-keyword, an answer option or the program itself.
        Returns the body statements and the sub-keywords found in the block.
        """
        body: list[Statement] = []
        sub_keywords: list[SubKeyword] = []
        while not self._check(TokenType.DEDENT, TokenType.EOF):
            start = self._pos
            try:
                self._parse_statement(parent, body, sub_keywords)
            except ParseError as exc:
                self.errors.append(str(exc))
                self._synchronize()
            if self._pos == start:
                self._advance()
        return body, sub_keywords

    def _close_block(self) -> None:
        if self._check(TokenType.DEDENT):
            self._advance()

    def _parse_statement(self, parent: str | None, body: list[Statement], sub_keywords: list[SubKeyword]) -> None:
        """Parse one line (and any block it owns) into ``body`` or ``sub_keywords``."""
        tok = self._current()
        if tok.type == TokenType.NEWLINE:
            self._advance()
        elif tok.type == TokenType.INDENT:
            self._error(tok, "Unexpected indentation")
            self._advance()
            nested_body, nested_subs = self._parse_block(parent)
            self._close_block()
            body.extend(nested_body)
            sub_keywords.extend(nested_subs)
        elif tok.type == TokenType.COMMENT:
            self._advance()
            self._take_line()
            body.append(CommentStatement(value=tok.value, loc=_token_range(tok, tok)))
        elif tok.type == TokenType.EXPRESSION_START:
            self._advance()
            line = self._take_line()
            expression = self._parse_sub_expression(line, tok, allow_assignment=True)
            if expression is not None:
                body.append(ExpressionStatement(expression=expression, loc=_join(_start(tok), expression.loc.end)))
        elif tok.type == TokenType.SUB_KEYWORD and parent is not None:
            sub_keywords.append(self._parse_directive(parent, as_sub_keyword=True))
        elif tok.type == TokenType.SUB_KEYWORD:
            self._error(tok, f"Sub-keyword '*{tok.value}' must be nested inside a keyword")
            body.append(self._parse_directive(None, as_sub_keyword=False))
        elif tok.type == TokenType.KEYWORD:
            body.append(self._parse_directive(None, as_sub_keyword=False))
        else:
            body.append(self._parse_text_line(parent))

    def _parse_directive(self, parent: str | None, as_sub_keyword: bool) -> KeywordStatement | SubKeyword:
        """Parse ``*name[: argument]`` plus its nested block.

        Grammar:
            KeywordStatement := KEYWORD [':' Argument] (INDENT Statement* DEDENT)?
            SubKeyword       := SUB_KEYWORD [':' Argument] (INDENT Statement* DEDENT)?
        """
        head = self._advance()
        keyword = head.value.lower()
        line = self._take_line()

        argument: Expression | TextContent | None = None
        if line and line[0].type == TokenType.COLON:
            argument = self._parse_argument(keyword, head, line[1:], parent if as_sub_keyword else None)
        else:
            rest = [tok for tok in line if tok.type != TokenType.COMMENT]
            if rest:
                self._error(rest[0], f"Expected ':' after '*{keyword}'")

        body: list[Statement] = []
        sub_keywords: list[SubKeyword] = []
        if self._check(TokenType.INDENT):
            self._advance()
            body, sub_keywords = self._parse_block(None if as_sub_keyword else keyword)
            self._close_block()

        loc = _join(_start(head), self._statement_end(head))
        if as_sub_keyword:
            return SubKeyword(keyword=keyword, argument=argument, body=body, loc=loc)
        return KeywordStatement(keyword=keyword, argument=argument, sub_keywords=sub_keywords, body=body, loc=loc)

    def _parse_argument(
        self, keyword: str, head: Token, tokens: list[Token], parent: str | None
    ) -> Expression | TextContent | None:
        """Parse the tokens after ``*name:`` as an expression or as text."""
        if not tokens:
            return None
        if self._expects_expression(keyword, parent):
            if any(tok.type in _TEXT_TOKEN_TYPES for tok in tokens):
                first = tokens[0]
                tokens = tokenize_expression(_reconstruct(tokens), first.line, first.column, first.offset)[:-1]
            return self._parse_sub_expression(tokens, head)
        return TextContent(parts=self._text_parts(tokens), loc=_token_range(tokens[0], tokens[-1]))

    @staticmethod
    def _expects_expression(keyword: str, parent: str | None) -> bool:
        if parent is None:
            return is_expression_keyword(keyword)
        spec = get_sub_keyword_spec(parent, keyword)
        return spec is not None and is_expression_value(spec.value_type)

    def _parse_text_line(self, parent: str | None) -> TextStatement | AnswerOption:
        """Parse a free-text line; directly inside a keyword block it is an answer option."""
        line = self._take_line()
        parts = self._text_parts(line)
        loc = _token_range(line[0], line[-1])
        if parent is None:
            return TextStatement(parts=parts, loc=loc)

        body: list[Statement] = []
        if self._check(TokenType.INDENT):
            self._advance()
            body, _ = self._parse_block(None)
            self._close_block()
        text = TextContent(parts=parts, loc=loc)
        return AnswerOption(text=text, body=body, loc=_join(loc.start, self._statement_end(line[-1])))

    def _text_parts(self, tokens: list[Token]) -> list[str | Expression]:
        """Convert a run of text tokens into literal fragments and interpolated expressions."""
        parts: list[str | Expression] = []
        buffer = ""
        cursor: int | None = None
        index = 0
        while index < len(tokens):
            tok = tokens[index]
            if tok.type == TokenType.COMMENT:
                index += 1
                continue
            if cursor is not None and tok.offset > cursor:
                buffer += " " * (tok.offset - cursor)
            if tok.type != TokenType.INTERPOLATION_START:
                buffer += tok.value
                cursor = tok.end_offset
                index += 1
                continue

            close = index + 1
            while close < len(tokens) and tokens[close].type != TokenType.INTERPOLATION_END:
                close += 1
            if buffer:
                parts.append(buffer)
                buffer = ""
            expression = self._parse_sub_expression(tokens[index + 1 : close], tok)
            if expression is not None:
                parts.append(expression)
            if close < len(tokens):
                cursor = tokens[close].end_offset
            else:
                self._error(tok, "Unclosed interpolation, expected '}'")
                cursor = tokens[-1].end_offset
            index = close + 1
        if buffer:
            parts.append(buffer)
        return parts

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _parse_sub_expression(
        self, tokens: list[Token], anchor: Token, allow_assignment: bool = False
    ) -> Expression | None:
        """Parse ``tokens`` as exactly one expression with a nested parser.

        Errors are recorded on this parser and None is returned, so a bad
        expression never derails the surrounding statement.
        """
        tokens = [tok for tok in tokens if tok.type != TokenType.COMMENT]
        if not tokens:
            self._error(anchor, "Expected an expression")
            return None
        sub = _Parser(tokens)
        try:
            expression = sub._parse_expression(allow_assignment)
            if not sub._at_end():
                tok = sub._current()
                raise ParseError(f"Unexpected token {tok.value!r} in expression", tok.line, tok.column)
        except ParseError as exc:
            self.errors.extend(sub.errors)
            self.errors.append(str(exc))
            return None
        self.errors.extend(sub.errors)
        return expression

    def _parse_expression(self, allow_assignment: bool = False) -> Expression:
        """Parse: assignment | or-expression.

        Assignment (``target = value``) is only recognised when allowed; its
        target is parsed at postfix level. Otherwise ``=`` is equality.
        """
        if allow_assignment:
            saved_pos = self._pos
            saved_errors = len(self.errors)
            try:
                target = self._parse_postfix()
                if self._check_operator("="):
                    operator = self._advance()
                    value = self._parse_or()
                    return BinaryExpression(
                        operator=operator.value, left=target, right=value, loc=_join(target.loc.start, value.loc.end)
                    )
            except ParseError:
                pass
            self._pos = saved_pos
            del self.errors[saved_errors:]
        return self._parse_or()

    def _parse_binary_level(self, operators: frozenset[str], operand: Callable[[], Expression]) -> Expression:
        """Parse a left-associative chain ``operand (op operand)*``."""
        left = operand()
        while self._check(TokenType.OPERATOR) and self._current().value in operators:
            operator = self._advance()
            right = operand()
            left = BinaryExpression(
                operator=operator.value, left=left, right=right, loc=_join(left.loc.start, right.loc.end)
            )
        return left

    def _parse_or(self) -> Expression:
        return self._parse_binary_level(frozenset({"or"}), self._parse_and)

    def _parse_and(self) -> Expression:
        return self._parse_binary_level(frozenset({"and"}), self._parse_equality)

    def _parse_equality(self) -> Expression:
        return self._parse_binary_level(frozenset({"="}), self._parse_comparison)

    def _parse_comparison(self) -> Expression:
        return self._parse_binary_level(_COMPARISON_OPERATORS, self._parse_membership)

    def _parse_membership(self) -> Expression:
        return self._parse_binary_level(frozenset({"in"}), self._parse_additive)

    def _parse_additive(self) -> Expression:
        """Parse ``+``/``-`` chains.

        The lexer folds ``-`` into a directly following number, so ``x -1``
        arrives as IDENTIFIER NUMBER("-1"). After a complete operand such a
        number is split back into a subtraction.
        """
        left = self._parse_multiplicative()
        while True:
            tok = self._current()
            if self._check_operator("+", "-"):
                self._advance()
                right = self._parse_multiplicative()
            elif tok.type == TokenType.NUMBER and tok.value.startswith("-"):
                self._advance()
                raw = tok.value[1:]
                literal = Literal(
                    value=_number_value(raw),
                    raw=raw,
                    loc=_join(Position(line=tok.line, column=tok.column + 1, offset=tok.offset + 1), _end(tok)),
                )
                right = self._parse_multiplicative(literal)
            else:
                return left
            operator = "-" if tok.value.startswith("-") else "+"
            left = BinaryExpression(
                operator=operator, left=left, right=right, loc=_join(left.loc.start, right.loc.end)
            )

    def _parse_multiplicative(self, first: Expression | None = None) -> Expression:
        left = first if first is not None else self._parse_unary()
        while self._check_operator(*_MULTIPLICATIVE_OPERATORS):
            operator = self._advance()
            right = self._parse_unary()
            left = BinaryExpression(
                operator=operator.value, left=left, right=right, loc=_join(left.loc.start, right.loc.end)
            )
        return left

    def _parse_unary(self) -> Expression:
        """Parse: ('not' | '-') unary | postfix"""
        if self._check_operator("not", "-"):
            operator = self._advance()
            argument = self._parse_unary()
            return UnaryExpression(
                operator=operator.value, argument=argument, loc=_join(_start(operator), argument.loc.end)
            )
        return self._parse_postfix()

    def _parse_postfix(self) -> Expression:
        """Parse: primary ( '(' args ')' | '[' expr ']' | '.' IDENTIFIER )*"""
        expression = self._parse_primary()
        while True:
            if self._check(TokenType.LPAREN):
                self._advance()
                arguments = self._parse_expression_list(TokenType.RPAREN)
                close = self._expect(TokenType.RPAREN)
                expression = CallExpression(
                    callee=expression, arguments=arguments, loc=_join(expression.loc.start, _end(close))
                )
            elif self._check(TokenType.LBRACKET):
                self._advance()
                index = self._parse_or()
                close = self._expect(TokenType.RBRACKET)
                expression = IndexExpression(
                    object=expression, index=index, loc=_join(expression.loc.start, _end(close))
                )
            elif self._check(TokenType.DOT):
                self._advance()
                name = self._expect(TokenType.IDENTIFIER)
                prop = Identifier(name=name.value, loc=_token_range(name, name))
                expression = MemberExpression(
                    object=expression, property=prop, loc=_join(expression.loc.start, _end(name))
                )
            else:
                return expression

    def _parse_expression_list(self, closing: TokenType) -> list[Expression]:
        """Parse comma-separated expressions up to (not including) ``closing``."""
        items: list[Expression] = []
        while not self._check(closing, TokenType.EOF):
            items.append(self._parse_or())
            if not self._check(TokenType.COMMA):
                break
            self._advance()  # consume ,
        return items

    def _parse_primary(self) -> Expression:
        tok = self._current()
        if tok.type == TokenType.NUMBER:
            self._advance()
            return Literal(value=_number_value(tok.value), raw=tok.value, loc=_token_range(tok, tok))
        if tok.type == TokenType.STRING:
            self._advance()
            return self._parse_string(tok)
        if tok.type == TokenType.IDENTIFIER:
            self._advance()
            return Identifier(name=tok.value, loc=_token_range(tok, tok))
        if tok.type == TokenType.LPAREN:
            self._advance()
            inner = self._parse_or()
            self._expect(TokenType.RPAREN)
            return inner
        if tok.type == TokenType.LBRACKET:
            self._advance()
            elements = self._parse_expression_list(TokenType.RBRACKET)
            close = self._expect(TokenType.RBRACKET)
            return ArrayExpression(elements=elements, loc=_token_range(tok, close))
        if tok.type == TokenType.LBRACE:
            return self._parse_object()
        raise ParseError(f"Unexpected {self._describe(tok)} in expression", tok.line, tok.column)

    def _parse_object(self) -> ObjectExpression:
        """Parse: '{' [key '->' value (',' key '->' value)*] '}'"""
        open_brace = self._expect(TokenType.LBRACE)
        properties: list[Property] = []
        while not self._check(TokenType.RBRACE, TokenType.EOF):
            key = self._parse_or()
            self._expect(TokenType.ARROW)
            value = self._parse_or()
            properties.append(Property(key=key, value=value, loc=_join(key.loc.start, value.loc.end)))
            if not self._check(TokenType.COMMA):
                break
            self._advance()  # consume ,
        close = self._expect(TokenType.RBRACE)
        return ObjectExpression(properties=properties, loc=_token_range(open_brace, close))

    def _parse_string(self, tok: Token) -> Literal | InterpolatedString:
        """Build a string Literal, or an InterpolatedString when it embeds ``{...}``."""
        content = tok.value[1:-1]
        if "{" not in content:
            return Literal(value=content, raw=tok.value, loc=_token_range(tok, tok))

        parts: list[str | Expression] = []
        text = ""
        index = 0
        while index < len(content):
            if content[index] != "{":
                text += content[index]
                index += 1
                continue
            depth = 1
            close = index + 1
            while close < len(content) and depth:
                if content[close] == "{":
                    depth += 1
                elif content[close] == "}":
                    depth -= 1
                close += 1
            if depth:
                text += content[index:]
                break
            if text:
                parts.append(text)
                text = ""
            # +1 for the opening quote, +1 for the brace.
            shift = index + 2
            inner = tokenize_expression(
                content[index + 1 : close - 1], tok.line, tok.column + shift, tok.offset + shift
            )[:-1]
            expression = self._parse_sub_expression(inner, tok)
            parts.append(expression if expression is not None else content[index:close])
            index = close
        if text:
            parts.append(text)
        return InterpolatedString(parts=parts, loc=_token_range(tok, tok))
