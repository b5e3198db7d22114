# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Linter and formatter configuration: models, defaults and file loading."""

from gtlint.config.loader import (
    CONFIG_FILE_NAMES,
    ConfigError,
    UserConfig,
    find_config_file,
    is_ignored,
    load_config,
    load_config_file,
    merge_config,
)
from gtlint.config.models import (
    DEFAULT_FORMATTER_CONFIG,
    DEFAULT_LINTER_CONFIG,
    FormatterConfig,
    LinterConfig,
    RuleSetting,
)

__all__ = [
    # Models
    "RuleSetting",
    "FormatterConfig",
    "LinterConfig",
    "DEFAULT_FORMATTER_CONFIG",
    "DEFAULT_LINTER_CONFIG",
    # Files
    "CONFIG_FILE_NAMES",
    "ConfigError",
    "UserConfig",
    "find_config_file",
    "load_config_file",
    "merge_config",
    "load_config",
    "is_ignored",
]
