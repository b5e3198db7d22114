# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the GuidedTrack formatter."""

import pytest

from gtlint.config.models import FormatterConfig
from gtlint.formatter import Formatter, format

# ###############
# Basic Formatting
# ###############


class TestBasics:
    def test_preserves_valid_code(self) -> None:
        assert format("Hello world\n") == "Hello world\n"

    def test_adds_final_newline(self) -> None:
        assert format("Hello world") == "Hello world\n"

    def test_trims_trailing_whitespace(self) -> None:
        assert format("Hello world   \n") == "Hello world\n"

    def test_strips_trailing_blank_lines(self) -> None:
        assert format("Hello\n\n\n") == "Hello\n"

    def test_empty_document(self) -> None:
        assert format("") == ""
        assert format("\n\n") == ""

    def test_preserves_tab_indentation(self) -> None:
        assert "\tIndented line" in format("*if: true\n\tIndented line\n")

    def test_preserves_nested_indentation(self) -> None:
        assert "\t\tDeeply indented" in format("*if: true\n\t*if: false\n\t\tDeeply indented\n")

    def test_preserves_carriage_returns(self) -> None:
        assert format(">> x=1\r\n") == ">> x = 1\r\n"


# ###############
# Expression Lines
# ###############


class TestExpressionLines:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            (">>x = 5\n", ">> x = 5\n"),
            (">>  x = 5\n", ">> x = 5\n"),
            (">> x=1+2\n", ">> x = 1 + 2\n"),
            (">> result=a>=b\n", ">> result = a >= b\n"),
            ('>> x = {"key"->"value"}\n', '>> x = {"key" -> "value"}\n'),
            (">> x = -5\n", ">> x = -5\n"),
            (">> y = x-1\n", ">> y = x - 1\n"),
            (">> y = not -x\n", ">> y = not -x\n"),
            (">> x = [1,2,3]\n", ">> x = [1, 2, 3]\n"),
            (">> x = [ 1, 2, 3 ]\n", ">> x = [1, 2, 3]\n"),
            ('>> parts = text.split(",")\n', '>> parts = text.split(",")\n'),
        ],
    )
    def test_spacing(self, source: str, expected: str) -> None:
        assert format(source) == expected

    @pytest.mark.parametrize(
        "source",
        ['>> x = "hello   world"\n', '>> x = "a+b=c"\n', '>> x = "[ 1 ,2 ]"\n'],
    )
    def test_string_contents_untouched(self, source: str) -> None:
        literal = source[source.index('"') : source.rindex('"') + 1]
        assert literal in format(source)

    def test_trailing_comment_kept(self) -> None:
        assert format(">> x = 1 -- one\n") == ">> x = 1 -- one\n"


# ###############
# Keyword Lines
# ###############


class TestKeywordLines:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("*if:           x     >           7\n", "*if: x > 7\n"),
            ("*while:    counter   <    100\n", "*while: counter < 100\n"),
            ("*for:   item    in     items\n", "*for: item in items\n"),
            ("*question:        What is your name?\n", "*question: What is your name?\n"),
            ('*if: name = "hello     world"\n', '*if: name = "hello     world"\n'),
            ("*question:What?\n", "*question: What?\n"),
            ("*header: Two  spaces  kept\n", "*header: Two  spaces  kept\n"),
            ("*if:\n", "*if:\n"),
            ("*page\n", "*page\n"),
        ],
    )
    def test_keyword_argument(self, source: str, expected: str) -> None:
        assert format(source) == expected

    def test_emphasis_line_is_not_a_keyword(self) -> None:
        assert format("*bold*  text\n") == "*bold*  text\n"


# ###############
# Comments and Blank Lines
# ###############


class TestCommentsAndBlankLines:
    def test_preserves_comments(self) -> None:
        assert format("-- this is a comment\n") == "-- this is a comment\n"

    def test_trims_comment_trailing_whitespace(self) -> None:
        assert format("-- comment with trailing space   \n") == "-- comment with trailing space\n"

    def test_preserves_single_blank_line(self) -> None:
        assert format("First line\n\nSecond line\n") == "First line\n\nSecond line\n"

    def test_collapses_blank_runs(self) -> None:
        assert format("First line\n\n\n\nSecond line\n") == "First line\n\nSecond line\n"


class TestBlankLinesBetweenBlocks:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            (
                "*question: Name?\n\t*save: name\nHi, {name}!\n",
                "*question: Name?\n\t*save: name\n\nHi, {name}!\n",
            ),
            (
                "*question: Name?\n\t*save: name\n*question: Age?\n\t*save: age\n",
                "*question: Name?\n\t*save: name\n\n*question: Age?\n\t*save: age\n",
            ),
            ("*header: Welcome\nSome text here\n", "*header: Welcome\n\nSome text here\n"),
            ("Some text here\n*header: Welcome\n", "Some text here\n\n*header: Welcome\n"),
            ("Line one\nLine two\nLine three\n", "Line one\nLine two\nLine three\n"),
            (
                "*question: Email?\n\t*type: text\n\t*save: email\n\t*placeholder: you@example.com\n",
                "*question: Email?\n\t*type: text\n\t*save: email\n\t*placeholder: you@example.com\n",
            ),
            (
                "*page\n\t*question: Q1\n\t\t*save: a\n\t*question: Q2\n\t\t*save: b\n\tThanks!\n",
                "*page\n\t*question: Q1\n\t\t*save: a\n\n\t*question: Q2\n\t\t*save: b\n\n\tThanks!\n",
            ),
            (
                "*question: Name?\n\t*save: name\n\n*question: Age?\n\t*save: age\n",
                "*question: Name?\n\t*save: name\n\n*question: Age?\n\t*save: age\n",
            ),
            ("*if: x\n\t*if: y\n\t\tDeep\n*header: Next\n", "*if: x\n\t*if: y\n\t\tDeep\n\n*header: Next\n"),
            (
                "*service: API\n\t*method: PUT\n\t*send: data\n\t*success\n\t\t>> r = it\n\t*error\n\t\t>> e = 1\n",
                "*service: API\n\t*method: PUT\n\t*send: data\n\t*success\n\t\t>> r = it\n\n"
                "\t*error\n\t\t>> e = 1\n",
            ),
            (
                "*question: Name?\n\t*save: name\n-- a comment\n*header: Next\n",
                "*question: Name?\n\t*save: name\n-- a comment\n\n*header: Next\n",
            ),
            ("*question: Pick one\n\tOption A\n\tOption B\n", "*question: Pick one\n\tOption A\n\tOption B\n"),
        ],
    )
    def test_blank_line_insertion(self, source: str, expected: str) -> None:
        assert format(source) == expected

    def test_disabled_when_zero(self) -> None:
        config = FormatterConfig(blank_lines_between_blocks=0)
        source = "*question: Name?\n\t*save: name\n*header: Welcome\nSome text\n"
        assert format(source, config) == source

    def test_disabled_region(self) -> None:
        source = "-- gtformat-disable\n*question: Name?\n\t*save: name\nHi!   \n>> x=1\n-- gtformat-enable\n>> y=2\n"
        expected = "-- gtformat-disable\n*question: Name?\n\t*save: name\nHi!   \n>> x=1\n-- gtformat-enable\n>> y = 2\n"
        assert format(source) == expected


# ###############
# Configuration
# ###############


class TestConfiguration:
    def test_insert_final_newline_off(self) -> None:
        config = FormatterConfig(insert_final_newline=False)
        assert format("Hello world", config) == "Hello world"
        assert format("Hello world\n", config) == "Hello world\n"

    def test_trim_trailing_whitespace_off(self) -> None:
        config = FormatterConfig(trim_trailing_whitespace=False)
        assert format("Hello world   \n", config) == "Hello world   \n"

    def test_space_around_operators_off(self) -> None:
        config = FormatterConfig(space_around_operators=False)
        assert format(">> x=1+2\n", config) == ">> x=1+2\n"

    def test_space_after_comma_off(self) -> None:
        config = FormatterConfig(space_after_comma=False)
        assert format(">> x = [1,2,3]\n", config) == ">> x = [1,2,3]\n"

    def test_space_around_arrow_off(self) -> None:
        config = FormatterConfig(space_around_arrow=False)
        assert format('>> x = {"a"->1}\n', config) == '>> x = {"a"->1}\n'

    def test_kebab_case_aliases(self) -> None:
        config = FormatterConfig.model_validate({"space-after-comma": False, "blank-lines-between-blocks": 2})
        assert config.space_after_comma is False
        assert config.blank_lines_between_blocks == 2


# ###############
# Idempotence
# ###############

_IDEMPOTENCE_SOURCES = [
    ">> x=1+2",
    "*question: Name?\n\t*save: name\nHi!\n*question: Age?\n\t*save: age\nBye!\n",
    "*if:   a  and  b\n\t>>  total=total+ -1\n\t>> xs = [ 1 ,2 ]\n\n\n\tDone   \n",
    '>> o = {"a"->1,"b" ->[1,2]}\n-- note\n*goto:   start\n',
    "-- gtformat-disable\n>> x=1\n-- gtformat-enable\n>> y=2",
    "Hello {name}!\r\n*page\r\n\tInside\r\n",
]

_IDEMPOTENCE_CONFIGS = [
    FormatterConfig(),
    FormatterConfig(blank_lines_between_blocks=0),
    FormatterConfig(space_around_operators=False, space_after_comma=False, space_around_arrow=False),
    FormatterConfig(trim_trailing_whitespace=False, insert_final_newline=False),
]


class TestIdempotence:
    @pytest.mark.parametrize("config", _IDEMPOTENCE_CONFIGS)
    @pytest.mark.parametrize("source", _IDEMPOTENCE_SOURCES)
    def test_format_is_idempotent(self, source: str, config: FormatterConfig) -> None:
        formatter = Formatter(config)
        once = formatter.format(source)
        assert formatter.format(once) == once

    def test_repeated_calls_agree(self) -> None:
        formatter = Formatter()
        assert formatter.format(">> x=1+2") == formatter.format(">> x=1+2")
