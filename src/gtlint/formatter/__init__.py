# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Whitespace formatter for GuidedTrack programs."""

from gtlint.formatter.formatter import EXPRESSION_LIKE_KEYWORDS, Formatter, format

__all__ = [
    "Formatter",
    "format",
    "EXPRESSION_LIKE_KEYWORDS",
]
