# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Rules over the token stream: unterminated strings and unbalanced brackets."""

from gtlint.linter.rule import Fix, LintRule, RuleContext, Visitor
from gtlint.model.nodes import Program
from gtlint.parser.tokens import Token, TokenType

_OPENERS: dict[TokenType, TokenType] = {
    TokenType.LPAREN: TokenType.RPAREN,
    TokenType.LBRACKET: TokenType.RBRACKET,
    TokenType.LBRACE: TokenType.RBRACE,
    TokenType.INTERPOLATION_START: TokenType.INTERPOLATION_END,
}

_CLOSERS: dict[TokenType, str] = {
    TokenType.RPAREN: ")",
    TokenType.RBRACKET: "]",
    TokenType.RBRACE: "}",
    TokenType.INTERPOLATION_END: "}",
}

_LINE_ENDS = frozenset({TokenType.NEWLINE, TokenType.INDENT, TokenType.DEDENT, TokenType.EOF})


def _create_no_unclosed_string(context: RuleContext) -> Visitor:
    def check(_: Program) -> None:
        for tok in context.get_tokens():
            if tok.type == TokenType.ERROR and tok.value[:1] in ("'", '"'):
                context.report(
                    "Unclosed string literal",
                    tok.line,
                    tok.column,
                    end_line=tok.end_line,
                    end_column=tok.end_column,
                    fix=Fix(range=(tok.end_offset, tok.end_offset), text=tok.value[0]),
                )

    return {"Program": check}


def _create_no_unclosed_bracket(context: RuleContext) -> Visitor:
    def report_unclosed(stack: list[Token], line_end: int) -> None:
        # The outermost opener carries one fix that closes the whole stack, innermost first.
        closing = "".join(_CLOSERS[_OPENERS[opener.type]] for opener in reversed(stack))
        for index, opener in enumerate(stack):
            fix = Fix(range=(line_end, line_end), text=closing) if index == 0 else None
            context.report(f"Unclosed '{opener.value}'", opener.line, opener.column, fix=fix)
        stack.clear()

    def check(_: Program) -> None:
        # Brackets never span lines, so the stack is checked at every line end.
        stack: list[Token] = []
        line_end = 0
        for tok in context.get_tokens():
            if tok.type in _LINE_ENDS:
                report_unclosed(stack, line_end)
                continue
            if tok.type != TokenType.COMMENT:
                line_end = tok.end_offset
            if tok.type in _OPENERS:
                stack.append(tok)
            elif tok.type in _CLOSERS:
                if not stack:
                    context.report(
                        f"Unexpected '{tok.value}' without a matching opening bracket", tok.line, tok.column
                    )
                    continue
                opener = stack.pop()
                if _OPENERS[opener.type] != tok.type:
                    expected = _CLOSERS[_OPENERS[opener.type]]
                    context.report(f"Mismatched '{tok.value}', expected '{expected}'", tok.line, tok.column)

    return {"Program": check}


no_unclosed_string = LintRule(
    name="no-unclosed-string",
    description="Detect string literals that are not closed on their line",
    severity="error",
    create=_create_no_unclosed_string,
)

no_unclosed_bracket = LintRule(
    name="no-unclosed-bracket",
    description="Detect unbalanced parentheses, brackets and braces",
    severity="error",
    create=_create_no_unclosed_bracket,
)
