# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for configuration discovery, loading and merging."""

from pathlib import Path

import pytest

from gtlint.config import (
    DEFAULT_LINTER_CONFIG,
    ConfigError,
    LinterConfig,
    UserConfig,
    find_config_file,
    is_ignored,
    load_config,
    load_config_file,
    merge_config,
)

# ###############
# Helpers
# ###############


def _write_config(directory: Path, content: str, name: str = ".gtlint.yaml") -> Path:
    """Write a config file into ``directory`` and return its path."""
    config_file = directory / name
    config_file.write_text(content, encoding="utf-8")
    return config_file


# ###############
# Discovery
# ###############


def test_find_config_in_start_directory(tmp_path: Path) -> None:
    config_file = _write_config(tmp_path, "")
    assert find_config_file(tmp_path) == config_file.resolve()


def test_find_config_walks_up(tmp_path: Path) -> None:
    """A config in an ancestor directory is found from a nested directory."""
    config_file = _write_config(tmp_path, "")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert find_config_file(nested) == config_file.resolve()


def test_find_config_from_file(tmp_path: Path) -> None:
    config_file = _write_config(tmp_path, "", name=".gtlint.yml")
    source = tmp_path / "intro.gt"
    source.write_text("Hello\n", encoding="utf-8")
    assert find_config_file(source) == config_file.resolve()


def test_nearest_config_wins(tmp_path: Path) -> None:
    _write_config(tmp_path, "")
    nested = tmp_path / "sub"
    nested.mkdir()
    inner = _write_config(nested, "")
    assert find_config_file(nested) == inner.resolve()


# ###############
# Loading
# ###############


def test_empty_file_is_empty_config(tmp_path: Path) -> None:
    config = load_config_file(_write_config(tmp_path, ""))
    assert config == UserConfig()


def test_full_config(tmp_path: Path) -> None:
    content = """\
rules:
  no-unused-labels: "off"
  indent-style: warn
format:
  space-after-comma: false
  blank-lines-between-blocks: 0
ignore:
  - "generated/**"
"""
    config = load_config_file(_write_config(tmp_path, content))

    assert config.rules == {"no-unused-labels": "off", "indent-style": "warn"}
    assert config.format is not None
    assert config.format.space_after_comma is False
    assert config.format.blank_lines_between_blocks == 0
    assert config.ignore == ["generated/**"]


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Cannot read config file"):
        load_config_file(tmp_path / ".gtlint.yaml")


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config_file(_write_config(tmp_path, "rules: [unclosed\n"))


def test_non_mapping_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="expected a mapping"):
        load_config_file(_write_config(tmp_path, "- a\n- b\n"))


@pytest.mark.parametrize(
    "content",
    [
        "unknown-section: 1\n",
        "rules:\n  indent-style: loud\n",
        "format:\n  no-such-option: true\n",
        "format:\n  blank-lines-between-blocks: -1\n",
    ],
)
def test_schema_violations_raise(tmp_path: Path, content: str) -> None:
    with pytest.raises(ConfigError, match="Invalid config file"):
        load_config_file(_write_config(tmp_path, content))


# ###############
# Merging
# ###############


def test_merge_empty_config_gives_defaults() -> None:
    assert merge_config(UserConfig()) == DEFAULT_LINTER_CONFIG


def test_merge_overrides_rules() -> None:
    merged = merge_config(UserConfig(rules={"indent-style": "off", "custom-rule": "warn"}))

    assert merged.rules["indent-style"] == "off"
    assert merged.rules["custom-rule"] == "warn"
    assert merged.rules["valid-keyword"] == "error"


def test_merge_overrides_only_set_format_options() -> None:
    user = UserConfig.model_validate({"format": {"space-around-arrow": False}})
    merged = merge_config(user)

    assert merged.format.space_around_arrow is False
    assert merged.format.space_after_comma is True
    assert merged.format.blank_lines_between_blocks == 1


def test_merge_appends_ignore_patterns() -> None:
    merged = merge_config(UserConfig(ignore=["build/**", "**/dist/**"]))
    assert merged.ignore == ["**/node_modules/**", "**/dist/**", "build/**"]


def test_merged_config_is_linter_config() -> None:
    assert isinstance(merge_config(UserConfig()), LinterConfig)


# ###############
# Effective Configuration
# ###############


def test_load_config_from_directory(tmp_path: Path) -> None:
    config_file = _write_config(tmp_path, "rules:\n  no-unused-labels: error\n")
    config, found = load_config(tmp_path)

    assert found == config_file.resolve()
    assert config.rules["no-unused-labels"] == "error"


def test_load_config_from_explicit_file(tmp_path: Path) -> None:
    config_file = _write_config(tmp_path, "ignore: ['tmp/**']\n")
    config, found = load_config(config_file)

    assert found == config_file
    assert "tmp/**" in config.ignore


def test_load_config_propagates_errors(tmp_path: Path) -> None:
    _write_config(tmp_path, "rules: 3\n")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


# ###############
# Ignore Patterns
# ###############


@pytest.mark.parametrize(
    ("relative", "expected"),
    [
        ("node_modules/lib.gt", True),
        ("packages/app/node_modules/lib.gt", True),
        ("dist/out.gt", True),
        ("src/main.gt", False),
        ("main.gt", False),
    ],
)
def test_default_ignore_patterns(tmp_path: Path, relative: str, expected: bool) -> None:
    path = tmp_path / relative
    assert is_ignored(path, DEFAULT_LINTER_CONFIG.ignore, tmp_path) is expected


def test_plain_pattern_is_relative_to_root(tmp_path: Path) -> None:
    assert is_ignored(tmp_path / "generated" / "a.gt", ["generated/**"], tmp_path)
    assert not is_ignored(tmp_path / "src" / "generated" / "a.gt", ["generated/**"], tmp_path)
