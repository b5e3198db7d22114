# Copyright 2026 GTLint Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the GTLint command-line interface."""

import argparse
import json
import sys
from pathlib import Path

from yachalk import chalk

from gtlint.config import ConfigError, LinterConfig, is_ignored, load_config, load_config_file, merge_config
from gtlint.formatter import Formatter
from gtlint.linter import LintMessage, LintResult, Linter

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the GTLint CLI."""
    parser = argparse.ArgumentParser(
        prog="gtlint",
        description="GTLint: linter and formatter for GuidedTrack programs",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # lint subcommand
    lint_parser = subparsers.add_parser(
        "lint",
        help="Report problems in GuidedTrack files",
        description="Lint .gt files and report problems found by the enabled rules.",
    )
    lint_parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="Files or directories to lint (default: current directory)",
    )
    lint_parser.add_argument(
        "--fix",
        action="store_true",
        help="Apply automatic fixes and write the files back",
    )
    lint_parser.add_argument(
        "--config",
        default=None,
        help="Path to a configuration file (default: nearest .gtlint.yaml)",
    )
    lint_parser.add_argument(
        "--format",
        dest="output_format",
        choices=("stylish", "json"),
        default="stylish",
        help="Output format (default: stylish)",
    )

    # format subcommand
    format_parser = subparsers.add_parser(
        "format",
        help="Format GuidedTrack files in place",
        description="Rewrite the whitespace of .gt files according to the formatter settings.",
    )
    format_parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="Files or directories to format (default: current directory)",
    )
    format_parser.add_argument(
        "--check",
        action="store_true",
        help="List files that would change instead of writing them",
    )
    format_parser.add_argument(
        "--config",
        default=None,
        help="Path to a configuration file (default: nearest .gtlint.yaml)",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################

_SOURCE_SUFFIX = ".gt"
_MAX_FIX_PASSES = 10


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "lint":
        return _cmd_lint(args)
    if args.command == "format":
        return _cmd_format(args)
    return 0


def _cmd_lint(args: argparse.Namespace) -> int:
    """Handle the lint subcommand."""
    try:
        config, root = _resolve_config(args)
        files = _collect_files(args.paths, config, root)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except FileNotFoundError as exc:
        print(f"Error: path '{exc.filename}' does not exist.", file=sys.stderr)
        return 1

    linter = Linter(config)
    results: list[LintResult] = []
    for path in files:
        try:
            source = path.read_text(encoding="utf-8")
        except OSError as exc:
            print(f"Error: cannot read '{path}': {exc}", file=sys.stderr)
            return 1

        if args.fix:
            fixed = _fix_until_stable(linter, source)
            if fixed != source:
                try:
                    path.write_text(fixed, encoding="utf-8")
                except OSError as exc:
                    print(f"Error: cannot write '{path}': {exc}", file=sys.stderr)
                    return 1
                source = fixed
        results.append(linter.lint(source, str(path)))

    if args.output_format == "json":
        print(_render_json(results))
    else:
        report = _render_stylish(results)
        if report:
            print(report)

    return 1 if any(result.error_count for result in results) else 0


def _cmd_format(args: argparse.Namespace) -> int:
    """Handle the format subcommand."""
    try:
        config, root = _resolve_config(args)
        files = _collect_files(args.paths, config, root)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except FileNotFoundError as exc:
        print(f"Error: path '{exc.filename}' does not exist.", file=sys.stderr)
        return 1

    formatter = Formatter(config.format)
    changed: list[Path] = []
    for path in files:
        try:
            source = path.read_text(encoding="utf-8")
            formatted = formatter.format(source)
            if formatted == source:
                continue
            changed.append(path)
            if not args.check:
                path.write_text(formatted, encoding="utf-8")
        except OSError as exc:
            print(f"Error: cannot format '{path}': {exc}", file=sys.stderr)
            return 1

    if args.check:
        for path in changed:
            print(chalk.yellow(f"Would reformat {path}"))
        if changed:
            print(f"{len(changed)} file(s) would be reformatted.")
            return 1
        print(f"All {len(files)} file(s) are formatted.")
        return 0

    for path in changed:
        print(f"Formatted {path}")
    return 0


def _resolve_config(args: argparse.Namespace) -> tuple[LinterConfig, Path]:
    """Return the effective configuration and the root for ignore globs."""
    if args.config is not None:
        config_path = Path(args.config)
        return merge_config(load_config_file(config_path)), config_path.resolve().parent
    start = Path(args.paths[0]) if args.paths else Path.cwd()
    config, found = load_config(start)
    if found is not None:
        return config, found.parent
    root = start.resolve()
    return config, root if root.is_dir() else root.parent


def _collect_files(paths: list[str], config: LinterConfig, root: Path) -> list[Path]:
    """Expand files and directories into the sorted list of source files.

    Files named explicitly are always included; files found while walking a
    directory are filtered by suffix and by the ignore globs.

    Raises:
        FileNotFoundError: If a given path does not exist.
    """
    found: dict[Path, None] = {}
    for raw in paths:
        path = Path(raw)
        if not path.exists():
            raise FileNotFoundError(2, "No such file or directory", raw)
        if path.is_file():
            found[path] = None
            continue
        for candidate in sorted(path.rglob(f"*{_SOURCE_SUFFIX}")):
            if candidate.is_file() and not is_ignored(candidate, config.ignore, root):
                found[candidate] = None
    return list(found)


def _fix_until_stable(linter: Linter, source: str) -> str:
    """Apply fixes repeatedly until the text stops changing."""
    current = source
    for _ in range(_MAX_FIX_PASSES):
        output = linter.lint(current, fix=True).output
        if output is None or output == current:
            break
        current = output
    return current


def _render_stylish(results: list[LintResult]) -> str:
    lines: list[str] = []
    errors = 0
    warnings = 0
    for result in results:
        if not result.messages:
            continue
        errors += result.error_count
        warnings += result.warning_count
        lines.append(chalk.underline(result.file_path))
        for message in result.messages:
            lines.append(_format_message(message))
        lines.append("")

    total = errors + warnings
    if total == 0:
        return ""
    summary = f"{total} problem(s) ({errors} error(s), {warnings} warning(s))"
    lines.append(chalk.red.bold(summary) if errors else chalk.yellow.bold(summary))
    return "\n".join(lines)


def _format_message(message: LintMessage) -> str:
    position = chalk.dim(f"{message.line}:{message.column}")
    if message.severity == "error":
        severity = chalk.red("error")
    elif message.severity == "warning":
        severity = chalk.yellow("warning")
    else:
        severity = chalk.blue("info")
    return f"  {position}  {severity}  {message.message}  {chalk.dim(message.rule_id)}"


def _render_json(results: list[LintResult]) -> str:
    payload = [result.model_dump(mode="json", exclude={"source", "output"}) for result in results]
    return json.dumps(payload, indent=2)
