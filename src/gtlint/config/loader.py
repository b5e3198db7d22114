# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Discovery, loading and merging of ``.gtlint.yaml`` configuration files."""

from fnmatch import fnmatchcase
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from gtlint.config.models import DEFAULT_LINTER_CONFIG, FormatterConfig, LinterConfig, RuleSetting

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAMES = (".gtlint.yaml", ".gtlint.yml")


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or is invalid."""


class UserConfig(BaseModel):
    """The contents of a configuration file, every section optional."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    rules: dict[str, RuleSetting] = Field(default_factory=dict)
    format: FormatterConfig | None = None
    ignore: list[str] = Field(default_factory=list)


def find_config_file(start: Path) -> Path | None:
    """Search ``start`` and its parent directories for a configuration file.

    Args:
        start: A directory, or a file whose directory is searched first.

    Returns:
        The path of the nearest configuration file, or None.
    """
    directory = start.resolve()
    if not directory.is_dir():
        directory = directory.parent
    for candidate_dir in (directory, *directory.parents):
        for name in CONFIG_FILE_NAMES:
            candidate = candidate_dir / name
            if candidate.is_file():
                return candidate
    return None


def load_config_file(path: Path) -> UserConfig:
    """Load and validate a configuration file.

    An empty file is treated as an empty configuration.

    Args:
        path: Path to the ``.gtlint.yaml`` file.

    Returns:
        A validated UserConfig instance.

    Raises:
        ConfigError: If the file cannot be read, contains invalid YAML,
            or does not conform to the expected schema.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file '{path}': {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in config file '{path}': {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config file '{path}': expected a mapping at the top level")

    try:
        return UserConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file '{path}': {exc}") from exc


def merge_config(user: UserConfig) -> LinterConfig:
    """Overlay user settings onto the defaults.

    Rule settings and formatter options replace the defaults key by key.
    Ignore patterns are appended to the default patterns.
    """
    rules = {**DEFAULT_LINTER_CONFIG.rules, **user.rules}
    formatter = DEFAULT_LINTER_CONFIG.format
    if user.format is not None:
        formatter = formatter.model_copy(update=user.format.model_dump(exclude_unset=True))
    ignore = list(DEFAULT_LINTER_CONFIG.ignore)
    ignore.extend(pattern for pattern in user.ignore if pattern not in ignore)
    return LinterConfig(rules=rules, format=formatter, ignore=ignore)


def load_config(path_or_dir: Path) -> tuple[LinterConfig, Path | None]:
    """Load the effective configuration for a file, directory or config file.

    Args:
        path_or_dir: Either a configuration file, or a file or directory from
            which to search upwards for one.

    Returns:
        The merged configuration and the path of the file it came from (None
        when only defaults apply).

    Raises:
        ConfigError: If the configuration file is invalid.
    """
    if path_or_dir.is_file() and path_or_dir.name in CONFIG_FILE_NAMES:
        config_path: Path | None = path_or_dir
    else:
        config_path = find_config_file(path_or_dir)
    if config_path is None:
        return DEFAULT_LINTER_CONFIG, None
    return merge_config(load_config_file(config_path)), config_path


def is_ignored(path: Path, patterns: list[str], root: Path) -> bool:
    """Return True if ``path`` matches any ignore glob.

    Patterns are matched against the POSIX form of the path relative to
    ``root``. A leading ``**/`` also matches at the root itself.
    """
    try:
        relative = path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        relative = path.as_posix()
    for pattern in patterns:
        candidates = [pattern]
        if pattern.startswith("**/"):
            candidates.append(pattern[3:])
        if any(fnmatchcase(relative, candidate) for candidate in candidates):
            return True
    return False
