# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Rules checking keywords and sub-keywords against the keyword specification table."""

from gtlint.language.keyword_spec import (
    KEYWORD_SPECS,
    get_keyword_spec,
    get_required_sub_keywords,
)
from gtlint.linter.rule import LintRule, RuleContext, Visitor
from gtlint.model.nodes import KeywordStatement, SubKeyword
from gtlint.parser.tokens import KEYWORDS, SUB_KEYWORDS

# Parent keyword -> sub-keywords it accepts, derived from the keyword table.
VALID_SUB_KEYWORDS: dict[str, frozenset[str]] = {
    name: frozenset(spec.sub_keywords) for name, spec in KEYWORD_SPECS.items() if spec.sub_keywords
}


def _create_valid_keyword(context: RuleContext) -> Visitor:
    def check(node: KeywordStatement) -> None:
        keyword = node.keyword.lower()
        if keyword not in KEYWORDS:
            context.report(
                f"'*{keyword}' is not a valid GuidedTrack keyword",
                node.loc.start.line,
                node.loc.start.column,
            )

    return {"KeywordStatement": check}


def _create_valid_sub_keyword(context: RuleContext) -> Visitor:
    def check(node: SubKeyword) -> None:
        sub_keyword = node.keyword.lower()
        line = node.loc.start.line
        column = node.loc.start.column
        if sub_keyword not in SUB_KEYWORDS:
            context.report(f"'*{sub_keyword}' is not a valid sub-keyword", line, column)
            return

        ancestors = context.get_ancestors()
        parent = ancestors[-1] if ancestors else None
        if not isinstance(parent, KeywordStatement):
            return
        parent_keyword = parent.keyword.lower()
        allowed = VALID_SUB_KEYWORDS.get(parent_keyword)
        if allowed is None:
            context.report(f"'*{parent_keyword}' does not support sub-keywords", line, column)
        elif sub_keyword not in allowed:
            context.report(f"'*{sub_keyword}' is not a valid sub-keyword for '*{parent_keyword}'", line, column)

    return {"SubKeyword": check}


def _create_required_subkeywords(context: RuleContext) -> Visitor:
    def check(node: KeywordStatement) -> None:
        keyword = node.keyword.lower()
        required = get_required_sub_keywords(keyword)
        if not required:
            return
        present = {sub.keyword.lower() for sub in node.sub_keywords}
        missing = [name for name in required if name not in present]
        if missing:
            missing_list = ", ".join(f"*{name}:" for name in missing)
            plural = "s" if len(missing) > 1 else ""
            context.report(
                f"'*{keyword}:' is missing required sub-keyword{plural}: {missing_list}",
                node.loc.start.line,
                node.loc.start.column,
            )

    return {"KeywordStatement": check}


def _create_no_inline_argument(context: RuleContext) -> Visitor:
    def check(node: KeywordStatement) -> None:
        keyword = node.keyword.lower()
        spec = get_keyword_spec(keyword)
        if spec is None:
            return
        if spec.argument.type == "none" and node.argument is not None:
            context.report(
                f"'*{keyword}' should not have an inline argument",
                node.loc.start.line,
                node.loc.start.column,
            )

    return {"KeywordStatement": check}


def _create_purchase_constraints(context: RuleContext) -> Visitor:
    spec = KEYWORD_SPECS["purchase"]

    def check(node: KeywordStatement) -> None:
        if node.keyword.lower() != "purchase":
            return
        line = node.loc.start.line
        column = node.loc.start.column
        present = {sub.keyword.lower() for sub in node.sub_keywords}

        for group in spec.mutually_exclusive_groups:
            modes = [name for name in group if name in present]
            if not modes:
                choices = ", ".join(f"*{name}" for name in group[:-1])
                context.report(f"'*purchase' must have exactly one of: {choices}, or *{group[-1]}", line, column)
                return
            if len(modes) > 1:
                found = ", ".join(f"*{name}" for name in modes)
                context.report(
                    f"'*purchase' cannot have multiple mode sub-keywords. Found: {found}. Use only one.",
                    line,
                    column,
                )
                return

        for requirement in spec.conditional_requirements:
            triggers = [name for name in requirement.if_present if name in present]
            if not triggers:
                continue
            missing = [f"*{name}" for name in requirement.then_required if name not in present]
            if missing:
                context.report(
                    f"'*purchase' with '*{triggers[0]}' requires: {' and '.join(missing)}",
                    line,
                    column,
                )

    return {"KeywordStatement": check}


valid_keyword = LintRule(
    name="valid-keyword",
    description="Ensure keywords are valid GuidedTrack keywords",
    severity="error",
    create=_create_valid_keyword,
)

valid_sub_keyword = LintRule(
    name="valid-sub-keyword",
    description="Ensure sub-keywords are valid and used under a keyword that accepts them",
    severity="error",
    create=_create_valid_sub_keyword,
)

required_subkeywords = LintRule(
    name="required-subkeywords",
    description="Ensure keywords have all of their required sub-keywords",
    severity="error",
    create=_create_required_subkeywords,
)

no_inline_argument = LintRule(
    name="no-inline-argument",
    description="Ensure keywords that take no inline argument do not have one",
    severity="error",
    create=_create_no_inline_argument,
)

purchase_subkeyword_constraints = LintRule(
    name="purchase-subkeyword-constraints",
    description="Ensure *purchase has a valid combination of sub-keywords",
    severity="error",
    create=_create_purchase_constraints,
)
