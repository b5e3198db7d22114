# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the lint rule engine."""

from typing import Any

import pytest

from gtlint.config.models import LinterConfig
from gtlint.linter.engine import Fix, LintMessage, LintRule, Linter, RuleContext, Visitor, apply_fixes, lint

# ###############
# Test Helpers
# ###############


def _message(start: int, end: int, text: str, line: int = 1) -> LintMessage:
    return LintMessage(
        rule_id="test",
        severity="error",
        message="test",
        line=line,
        column=start + 1,
        fix=Fix(range=(start, end), text=text),
    )


def _recording_rule(seen: list[tuple[str, list[str]]]) -> LintRule:
    """A rule that records each callback with the kinds of the node's ancestors."""

    def create(context: RuleContext) -> Visitor:
        def record(kind: str) -> Any:
            def callback(node: Any) -> None:
                seen.append((kind, [ancestor.kind for ancestor in context.get_ancestors()]))

            return callback

        return {kind: record(kind) for kind in ("KeywordStatement", "SubKeyword", "AnswerOption", "Program:exit")}

    return LintRule(name="recorder", description="Records visits", severity="error", create=create)


def _reporting_rule() -> LintRule:
    def create(context: RuleContext) -> Visitor:
        return {"Program": lambda node: context.report("whole document", 1, 1)}

    return LintRule(name="reporter", description="Reports once", severity="error", create=create)


# ###############
# Results
# ###############


class TestLintResult:
    def test_clean_document(self) -> None:
        source = (
            "*label: start\n"
            "*question: What is your name?\n"
            "\t*type: text\n"
            "\t*save: name\n"
            "Hello {name}!\n"
            '*if: name = "Bob"\n'
            '\t>> greeting = "Hi Bob"\n'
            "\t{greeting}\n"
            "*goto: start\n"
        )
        result = lint(source)
        assert result.messages == []
        assert result.error_count == 0
        assert result.warning_count == 0

    def test_counts_by_severity(self) -> None:
        result = lint("*foo\n*label: orphan\n")
        assert [message.rule_id for message in result.messages] == ["valid-keyword", "no-unused-labels"]
        assert result.error_count == 1
        assert result.warning_count == 1
        assert result.fixable_error_count == 0

    def test_result_fields(self) -> None:
        result = lint("Hello\n", file_path="intro.gt")
        assert result.file_path == "intro.gt"
        assert result.source == "Hello\n"
        assert result.output is None

    def test_default_file_path(self) -> None:
        assert lint("Hello\n").file_path == "<input>"

    def test_messages_sorted_by_position(self) -> None:
        result = lint("*label: b\n*foo\n  x\n*goto: a\n")
        positions = [(message.line, message.column) for message in result.messages]
        assert positions == sorted(positions)

    def test_lint_is_deterministic(self) -> None:
        source = "*foo\n  *events\n\t*goto: nowhere\n>> x = (1\n"
        first = lint(source)
        second = lint(source)
        assert first.messages == second.messages
        assert first.messages

    def test_document_ending_in_keyword_without_newline(self) -> None:
        result = lint("*purchase\n\t*status")
        assert [message.rule_id for message in result.messages] == ["purchase-subkeyword-constraints"]

    def test_fixable_counts(self) -> None:
        result = lint("*page\n  Hi\n")
        assert result.error_count == 1
        assert result.fixable_error_count == 1


# ###############
# Configuration
# ###############


class TestSeverityConfig:
    def test_rule_turned_off(self) -> None:
        config = LinterConfig(rules={"valid-keyword": "off"})
        assert Linter(config).lint("*foo\n").messages == []

    def test_rule_downgraded_to_warning(self) -> None:
        config = LinterConfig(rules={"valid-keyword": "warn"})
        result = Linter(config).lint("*foo\n")
        assert [message.severity for message in result.messages] == ["warning"]
        assert result.warning_count == 1
        assert result.error_count == 0

    def test_rule_upgraded_to_error(self) -> None:
        config = LinterConfig(rules={"no-unused-labels": "error"})
        result = Linter(config).lint("*label: orphan\n")
        assert result.error_count == 1

    def test_unlisted_rule_uses_default_severity(self) -> None:
        result = Linter(LinterConfig()).lint("*label: orphan\n")
        assert [message.severity for message in result.messages] == ["warning"]


# ###############
# Traversal
# ###############


class TestTraversal:
    def test_callbacks_run_in_document_order_with_ancestors(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[tuple[str, list[str]]] = []
        monkeypatch.setattr("gtlint.linter.engine.get_all_rules", lambda: [_recording_rule(seen)])
        Linter().lint("*question: Q\n\tA\n\t*type: choice\n")
        assert seen == [
            ("KeywordStatement", ["Program"]),
            ("AnswerOption", ["Program", "KeywordStatement"]),
            ("SubKeyword", ["Program", "KeywordStatement"]),
            ("Program:exit", []),
        ]

    def test_nodes_inside_bodies_are_visited_once(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[tuple[str, list[str]]] = []
        monkeypatch.setattr("gtlint.linter.engine.get_all_rules", lambda: [_recording_rule(seen)])
        Linter().lint("*question: Q\n\tYes\n\t\t*if: x\n\t\t\t*goto: a\n")
        keywords = [ancestors for kind, ancestors in seen if kind == "KeywordStatement"]
        assert len(keywords) == 3
        assert keywords[2] == ["Program", "KeywordStatement", "AnswerOption", "KeywordStatement"]

    def test_custom_rule_severity_from_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("gtlint.linter.engine.get_all_rules", lambda: [_reporting_rule()])
        result = Linter(LinterConfig(rules={"reporter": "warn"})).lint("Hello\n")
        assert len(result.messages) == 1
        assert result.messages[0].rule_id == "reporter"
        assert result.messages[0].severity == "warning"


# ###############
# Fixes
# ###############


class TestFixes:
    def test_apply_fixes_in_offset_order(self) -> None:
        messages = [_message(4, 5, "Y"), _message(0, 1, "X")]
        assert apply_fixes("abcdefg", messages) == "XbcdYfg"

    def test_overlapping_fix_is_skipped(self) -> None:
        messages = [_message(0, 3, "A"), _message(2, 5, "B")]
        assert apply_fixes("abcdefg", messages) == "Adefg"

    def test_insertion_fix(self) -> None:
        assert apply_fixes("abc", [_message(1, 1, "-")]) == "a-bc"

    def test_messages_without_fix_are_ignored(self) -> None:
        message = LintMessage(rule_id="test", severity="error", message="m", line=1, column=1)
        assert apply_fixes("abc", [message]) == "abc"

    def test_lint_with_fix_sets_output(self) -> None:
        result = Linter().lint("*page\n  Hi\n", fix=True)
        assert result.output == "*page\n\tHi\n"

    def test_fix_returns_source_when_nothing_to_fix(self) -> None:
        assert Linter().fix("Hello\n") == "Hello\n"
