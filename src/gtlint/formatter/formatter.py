# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Line-oriented formatter for GuidedTrack programs.

The formatter rewrites whitespace only: it never reorders lines or changes
the characters inside string literals or comments. Formatting is idempotent:
formatting already formatted text returns it unchanged.

Regions between ``-- gtformat-disable`` and ``-- gtformat-enable`` comment
lines are copied verbatim.
"""

import re
from dataclasses import dataclass

from gtlint.config.models import DEFAULT_FORMATTER_CONFIG, FormatterConfig
from gtlint.parser.tokens import WORD_OPERATORS

# ###############
# Public Interface
# ###############

# Keywords whose argument is code-like; whitespace runs in it are collapsed.
EXPRESSION_LIKE_KEYWORDS: frozenset[str] = frozenset(
    {
        "if",
        "while",
        "for",
        "repeat",
        "goto",
        "return",
        "set",
        "wait",
        "program",
        "component",
        "service",
        "trigger",
        "switch",
    }
)


class Formatter:
    """Formats GuidedTrack source text according to a FormatterConfig."""

    def __init__(self, config: FormatterConfig | None = None) -> None:
        self._config = config if config is not None else DEFAULT_FORMATTER_CONFIG

    def format(self, source: str) -> str:
        """Return the formatted form of ``source``."""
        lines = source.split("\n")
        had_final_newline = source.endswith("\n")
        if had_final_newline:
            lines.pop()

        output: list[str] = []
        levels: dict[int, _Sibling] = {}
        disabled = False
        for raw in lines:
            carriage = "\r" if raw.endswith("\r") else ""
            line = raw[:-1] if carriage else raw
            stripped = line.strip()

            if disabled:
                output.append(raw)
                if _is_directive_comment(stripped, "gtformat-enable"):
                    disabled = False
                    levels.clear()
                continue
            if _is_directive_comment(stripped, "gtformat-disable"):
                output.append(raw)
                disabled = True
                continue

            if not stripped:
                if output and not output[-1].strip():
                    continue
                output.append((_trim(line) if self._config.trim_trailing_whitespace else line) + carriage)
                continue

            indent = line[: len(line) - len(line.lstrip(" \t"))]
            content = line[len(indent) :]
            trailing = content[len(content.rstrip(" \t")) :]
            content = content.rstrip(" \t")
            if self._config.trim_trailing_whitespace:
                trailing = ""

            if not content.startswith("--"):
                self._separate_block(output, levels, indent.count("\t"), _directive_name(content) is not None)
            output.append(indent + self._format_content(content) + trailing + carriage)

        if self._config.insert_final_newline:
            while output and not output[-1].strip():
                output.pop()
            return "\n".join(output) + "\n" if output else ""
        return "\n".join(output) + ("\n" if had_final_newline else "")

    # ------------------------------------------------------------------
    # Blank lines between blocks
    # ------------------------------------------------------------------

    def _separate_block(self, output: list[str], levels: dict[int, "_Sibling"], depth: int, is_keyword: bool) -> None:
        """Insert a blank line before a new block at ``depth`` when one is due.

        A blank line goes before a line whose previous sibling at the same
        depth had nested lines, or whose keyword/non-keyword kind differs from
        that sibling's.
        """
        for level, sibling in levels.items():
            if level < depth:
                sibling.has_children = True
        for level in [level for level in levels if level > depth]:
            del levels[level]

        previous = levels.get(depth)
        if (
            self._config.blank_lines_between_blocks > 0
            and previous is not None
            and (previous.has_children or previous.is_keyword != is_keyword)
            and output
            and output[-1].strip()
        ):
            output.append("")
        levels[depth] = _Sibling(is_keyword=is_keyword)

    # ------------------------------------------------------------------
    # Line content
    # ------------------------------------------------------------------

    def _format_content(self, content: str) -> str:
        """Format a non-blank line with its indentation and trailing whitespace removed."""
        if content.startswith("--"):
            return content
        if content.startswith(">>"):
            expression = content[2:].lstrip(" \t")
            if not expression:
                return ">>"
            return ">> " + self._format_code(expression, operators=True)

        name = _directive_name(content)
        if name is None:
            return content
        head_length = len(name) + 1
        if content[head_length : head_length + 1] != ":":
            return content
        head = content[: head_length + 1]
        argument = content[head_length + 1 :].lstrip(" \t")
        if not argument:
            return head
        if name.lower() in EXPRESSION_LIKE_KEYWORDS:
            argument = self._format_code(_collapse_whitespace(argument), operators=False)
        return f"{head} {argument}"

    def _format_code(self, text: str, operators: bool) -> str:
        """Normalize spacing around operators, arrows, commas and brackets outside strings.

        With ``operators`` False only comma and bracket spacing is applied.
        """
        config = self._config
        out = ""
        index = 0
        length = len(text)
        while index < length:
            ch = text[index]
            nxt = text[index + 1] if index + 1 < length else ""

            if ch in "\"'":
                end = text.find(ch, index + 1)
                end = length if end == -1 else end + 1
                out += text[index:end]
                index = end
                continue

            if ch == "-" and nxt == "-":
                # Trailing comment.
                out += text[index:]
                break

            if operators and ch == "-" and nxt == ">":
                if config.space_around_arrow:
                    out, index = _spaced(out, "->", text, index + 2)
                else:
                    out += "->"
                    index += 2
                continue

            if operators and config.space_around_operators and ch in "<>" and nxt == "=":
                out, index = _spaced(out, ch + "=", text, index + 2)
                continue

            if operators and config.space_around_operators and ch in _OPERATOR_CHARS:
                if ch == "-" and _is_unary_position(out):
                    out += ch
                    index += 1
                    continue
                out, index = _spaced(out, ch, text, index + 1)
                continue

            if ch == "," and config.space_after_comma:
                out = out.rstrip(" ") + ","
                index = _skip_spaces(text, index + 1)
                if index < length and text[index] not in _CLOSING_BRACKETS:
                    out += " "
                continue

            if ch in _OPENING_BRACKETS:
                out += ch
                index = _skip_spaces(text, index + 1)
                continue

            if ch in _CLOSING_BRACKETS:
                out = out.rstrip(" ")

            out += ch
            index += 1
        return out


def format(source: str, config: FormatterConfig | None = None) -> str:
    """Format ``source`` with a fresh :class:`Formatter`."""
    return Formatter(config).format(source)


# ################
# Implementation
# ################

_OPERATOR_CHARS = "+-*/%=<>"
_OPENING_BRACKETS = "([{"
_CLOSING_BRACKETS = ")]}"

# Characters after which a '-' starts a negative number rather than a subtraction.
_UNARY_PRECEDERS = "([{,=<>+-*/%"

_DIRECTIVE = re.compile(r"\*([A-Za-z0-9_-]+)")
_TRAILING_WHITESPACE = re.compile(r"[ \t]+$")
_WORD_AT_END = re.compile(r"([A-Za-z_][A-Za-z0-9_]*)\s*$")


@dataclass
class _Sibling:
    """The most recent line seen at one indentation depth."""

    is_keyword: bool
    has_children: bool = False


def _trim(line: str) -> str:
    return _TRAILING_WHITESPACE.sub("", line)


def _is_directive_comment(stripped: str, directive: str) -> bool:
    return stripped.startswith("--") and stripped[2:].strip() == directive


def _directive_name(content: str) -> str | None:
    """Return the keyword name if ``content`` is a ``*keyword`` line, else None.

    A line such as ``*bold* text`` is emphasis, not a keyword: a second ``*``
    before the first colon rules the keyword reading out.
    """
    match = _DIRECTIVE.match(content)
    if match is None:
        return None
    rest = content[match.end() :]
    colon = rest.find(":")
    before_colon = rest if colon == -1 else rest[:colon]
    if "*" in before_colon:
        return None
    return match.group(1)


def _collapse_whitespace(text: str) -> str:
    """Replace runs of spaces and tabs outside string literals and comments with one space."""
    out = ""
    index = 0
    while index < len(text):
        ch = text[index]
        if ch in "\"'":
            end = text.find(ch, index + 1)
            end = len(text) if end == -1 else end + 1
            out += text[index:end]
            index = end
        elif text.startswith("--", index):
            out += text[index:]
            break
        elif ch in " \t":
            out += " "
            index = _skip_spaces(text, index)
        else:
            out += ch
            index += 1
    return out.rstrip(" ")


def _skip_spaces(text: str, index: int) -> int:
    while index < len(text) and text[index] in " \t":
        index += 1
    return index


def _spaced(out: str, operator: str, text: str, index: int) -> tuple[str, int]:
    """Append ``operator`` with single spaces around it; return output and next index."""
    out = out.rstrip(" \t")
    if out:
        out += " "
    out += operator
    index = _skip_spaces(text, index)
    if index < len(text):
        out += " "
    return out, index


def _is_unary_position(out: str) -> bool:
    """Return True if a '-' appended to ``out`` would be a sign, not a subtraction."""
    before = out.rstrip(" \t")
    if not before or before[-1] in _UNARY_PRECEDERS:
        return True
    match = _WORD_AT_END.search(before)
    return match is not None and match.group(1).lower() in WORD_OPERATORS
