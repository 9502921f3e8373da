#!/usr/bin/env python3
"""
codebundle: Bundle a project's source files into one annotated text file

Common usage:
  codebundle .
  codebundle path/to/project -o snapshot.txt
  codebundle --list-files .

Files come from `git ls-files` when git is available (plus untracked .txt files),
otherwise from a walk of the tree filtered by the project's .gitignore.
Dependency, cache, log and secret files are always left out.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from codebundle.config import find_config_file, load_config, merge_cli_with_config
from codebundle.logs import setup_logging
from codebundle.selection import FileSelector, SelectionConfig
from codebundle.selection.defaults import DEFAULT_UNTRACKED_EXTENSION, IGNORE_FILE_NAME
from codebundle.writer import (
    display_path,
    write_bundle,
    write_bundle_file,
    without_output_file,
)

_IGNORE_SYNTAXES = ("loose", "gitignore")


@dataclass
class Options:
    """Command-line options for the codebundle tool."""

    project_dir: str
    output: str | None
    list_files: bool
    version: bool
    verbosity: int
    # File selection options
    explicit_include: list[str] | None
    extend_explicit_include: list[str]
    hard_exclude: list[str] | None
    extend_hard_exclude: list[str]
    untracked_extension: str
    ignore_file: str
    ignore_syntax: str
    # Git options
    use_git: bool
    trust_directory: bool
    git_timeout: float | None


# Built-in defaults for options that a config file may also set. The parser uses
# `None` for all of them so explicitly passed flags can be told apart.
_MERGEABLE_DEFAULTS: dict[str, Any] = {
    "output": None,
    "explicit_include": None,
    "extend_explicit_include": [],
    "hard_exclude": None,
    "extend_hard_exclude": [],
    "untracked_extension": DEFAULT_UNTRACKED_EXTENSION,
    "ignore_file": IGNORE_FILE_NAME,
    "ignore_syntax": "loose",
    "use_git": True,
    "trust_directory": True,
    "git_timeout": None,
}


def _build_parser() -> argparse.ArgumentParser:
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="codebundle",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "project_dir",
        nargs="?",
        default=".",
        help="Project directory to bundle (default: current directory)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Output file (use '-' for stdout, default: <project name>_bundle.txt)",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print the selected file paths without writing a bundle",
    )
    # File selection options
    parser.add_argument(
        "--explicit-include",
        action="append",
        default=None,
        metavar="PATH",
        help="Replace the default forced inclusions. Can be repeated",
    )
    parser.add_argument(
        "--extend-explicit-include",
        action="append",
        default=None,
        metavar="PATH",
        help="Always bundle this relative path if it exists. Can be repeated",
    )
    parser.add_argument(
        "--hard-exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Replace all default hard exclusion patterns. Can be repeated",
    )
    parser.add_argument(
        "--extend-hard-exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Add to default hard exclusion patterns (e.g., '*.csv'). Can be repeated",
    )
    parser.add_argument(
        "--untracked-extension",
        type=str,
        default=None,
        metavar="EXT",
        help=f"Extension of untracked files to add to git's listing "
        f"(default: {DEFAULT_UNTRACKED_EXTENSION})",
    )
    parser.add_argument(
        "--ignore-file",
        type=str,
        default=None,
        metavar="NAME",
        help=f"Ignore file read when git is unavailable (default: {IGNORE_FILE_NAME})",
    )
    parser.add_argument(
        "--ignore-syntax",
        type=str,
        choices=_IGNORE_SYNTAXES,
        default=None,
        help="How to read the ignore file: 'loose' substring matching, or full "
        "'gitignore' rules (default: loose)",
    )
    # Git options
    parser.add_argument(
        "--no-git",
        action="store_const",
        const=False,
        dest="use_git",
        default=None,
        help="Do not ask git for the file list; always walk the directory",
    )
    parser.add_argument(
        "--no-trust-directory",
        action="store_const",
        const=False,
        dest="trust_directory",
        default=None,
        help="Do not add the project to git's global safe.directory list",
    )
    parser.add_argument(
        "--git-timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Give up on git calls after this many seconds (default: no limit)",
    )
    # Logging
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Show more detail on stderr (-vv for debug output)",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only report errors",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    return parser


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns a tuple of (options, explicit_flags) where `explicit_flags` tracks
    which flags the user explicitly passed (for config merge precedence).
    """
    opts = _build_parser().parse_args(args)

    explicit_flags: set[str] = set()
    values: dict[str, Any] = {}
    for name, default in _MERGEABLE_DEFAULTS.items():
        value = getattr(opts, name)
        if value is None:
            values[name] = list(default) if isinstance(default, list) else default
        else:
            explicit_flags.add(name)
            values[name] = value

    return (
        Options(
            project_dir=opts.project_dir,
            list_files=opts.list_files,
            version=opts.version,
            verbosity=-1 if opts.quiet else opts.verbose,
            **values,
        ),
        explicit_flags,
    )


def _selection_config(options: Options) -> SelectionConfig:
    if options.ignore_syntax not in _IGNORE_SYNTAXES:
        raise ValueError(
            f"Invalid ignore-syntax {options.ignore_syntax!r} "
            f"(expected one of: {', '.join(_IGNORE_SYNTAXES)})"
        )
    return SelectionConfig(
        explicit_include=options.explicit_include,
        extend_explicit_include=options.extend_explicit_include,
        hard_exclude=options.hard_exclude,
        extend_hard_exclude=options.extend_hard_exclude,
        untracked_extension=options.untracked_extension,
        use_git=options.use_git,
        trust_directory=options.trust_directory,
        ignore_file=options.ignore_file,
        ignore_syntax=options.ignore_syntax,  # pyright: ignore[reportArgumentType]
        git_timeout=options.git_timeout,
    )


def _default_output(project_root: Path) -> str:
    return f"{project_root.name or 'project'}_bundle.txt"


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the codebundle CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for usage or configuration errors,
        2 if the bundle could not be written)
    """
    options, explicit_flags = _parse_args(args)
    setup_logging(options.verbosity)

    if options.version:
        try:
            version = importlib.metadata.version("codebundle")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    project_root = Path(options.project_dir).resolve()
    if not project_root.is_dir():
        print(f"Error: project directory not found: {options.project_dir}", file=sys.stderr)
        return 1

    # Load and merge config file settings
    try:
        config_path = find_config_file(project_root)
        if config_path:
            merge_cli_with_config(options, load_config(config_path), explicit_flags)
        selection_config = _selection_config(options)
    except (ValueError, OSError) as e:
        print(f"Error: invalid config: {e}", file=sys.stderr)
        return 1

    try:
        selection = FileSelector(selection_config).select(project_root)
    except NotADirectoryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Handle --list-files mode (print and exit)
    if options.list_files:
        for f in selection.files:
            print(display_path(f))
        return 0

    output = options.output or _default_output(project_root)
    try:
        if output == "-":
            write_bundle(project_root, selection.files, sys.stdout)
            return 0
        output_path = Path(output)
        files = without_output_file(project_root, selection.files, output_path)
        report = write_bundle_file(project_root, files, output_path)
    except OSError as e:
        print(f"Error: could not write bundle: {e}", file=sys.stderr)
        return 2

    print(f"Wrote {len(report.written)} files to {output_path}")
    if report.skipped:
        print(f"Skipped {len(report.skipped)} unreadable files", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
