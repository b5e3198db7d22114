# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declarative knowledge about the GuidedTrack language."""

from gtlint.language.keyword_spec import (
    KEYWORD_SPECS,
    ArgumentSpec,
    BodySpec,
    ConditionalRequirement,
    KeywordSpec,
    SubKeywordSpec,
    get_keyword_spec,
    get_required_sub_keywords,
    get_sub_keyword_enum_values,
    get_sub_keyword_spec,
    get_valid_sub_keywords,
    is_expression_keyword,
    is_valid_keyword,
    is_valid_sub_keyword,
)

__all__ = [
    "KEYWORD_SPECS",
    "ArgumentSpec",
    "BodySpec",
    "ConditionalRequirement",
    "KeywordSpec",
    "SubKeywordSpec",
    "get_keyword_spec",
    "is_valid_keyword",
    "get_required_sub_keywords",
    "get_valid_sub_keywords",
    "is_valid_sub_keyword",
    "get_sub_keyword_spec",
    "get_sub_keyword_enum_values",
    "is_expression_keyword",
]
