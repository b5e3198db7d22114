# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Configuration models for the linter and formatter.

Keys are written in kebab-case in configuration files; the snake_case Python
names are accepted as well.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# ###############
# Public Interface
# ###############

RuleSetting = Literal["off", "warn", "error"]


class FormatterConfig(BaseModel):
    """Options controlling the formatter's rewrites."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    blank_lines_between_blocks: int = Field(default=1, ge=0, alias="blank-lines-between-blocks")
    space_around_operators: bool = Field(default=True, alias="space-around-operators")
    space_after_comma: bool = Field(default=True, alias="space-after-comma")
    space_around_arrow: bool = Field(default=True, alias="space-around-arrow")
    trim_trailing_whitespace: bool = Field(default=True, alias="trim-trailing-whitespace")
    insert_final_newline: bool = Field(default=True, alias="insert-final-newline")


class LinterConfig(BaseModel):
    """Complete configuration handed to the linter.

    Attributes:
        rules: Severity override per rule name. Rules not listed run with
            their default severity; ``off`` disables a rule.
        format: Formatter options.
        ignore: Glob patterns of files excluded from discovery.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    rules: dict[str, RuleSetting] = Field(default_factory=dict)
    format: FormatterConfig = Field(default_factory=FormatterConfig)
    ignore: list[str] = Field(default_factory=list)


DEFAULT_FORMATTER_CONFIG = FormatterConfig()

DEFAULT_LINTER_CONFIG = LinterConfig(
    rules={
        "valid-keyword": "error",
        "valid-sub-keyword": "error",
        "required-subkeywords": "error",
        "no-inline-argument": "error",
        "purchase-subkeyword-constraints": "error",
        "goto-needs-reset-in-events": "warn",
        "no-invalid-goto": "error",
        "no-unused-labels": "warn",
        "indent-style": "error",
        "no-unclosed-string": "error",
        "no-unclosed-bracket": "error",
        "no-undefined-vars": "error",
        "no-unused-vars": "warn",
    },
    format=DEFAULT_FORMATTER_CONFIG,
    ignore=["**/node_modules/**", "**/dist/**"],
)
