# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Line-level style rules working on the raw source text."""

import re

from gtlint.linter.rule import Fix, LintRule, RuleContext, Visitor
from gtlint.model.nodes import Program

_LINE_BREAK = re.compile(r"(\r\n|\r|\n)")


def _tabify(leading: str) -> str:
    """Collapse each run of two or more spaces to a tab and drop lone spaces."""
    return re.sub(r" {2,}", "\t", leading).replace(" ", "")


def _create_indent_style(context: RuleContext) -> Visitor:
    def check(_: Program) -> None:
        pieces = _LINE_BREAK.split(context.get_source_code())
        offset = 0
        # split() with a capturing group alternates line text and line break.
        for index in range(0, len(pieces), 2):
            line = pieces[index]
            content = line.lstrip(" \t")
            leading = line[: len(line) - len(content)]
            if content and " " in leading:
                first_space = leading.index(" ")
                first_tab = leading.find("\t")
                if first_tab == -1 or first_space < first_tab:
                    context.report(
                        "Use tabs for indentation, not spaces",
                        index // 2 + 1,
                        first_space + 1,
                        end_line=index // 2 + 1,
                        end_column=len(leading) + 1,
                        fix=Fix(range=(offset, offset + len(leading)), text=_tabify(leading)),
                    )
            offset += len(line)
            if index + 1 < len(pieces):
                offset += len(pieces[index + 1])

    return {"Program": check}


indent_style = LintRule(
    name="indent-style",
    description="Enforce tabs for indentation",
    severity="error",
    create=_create_indent_style,
)
