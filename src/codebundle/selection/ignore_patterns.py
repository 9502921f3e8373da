"""
Ignore-file handling for the manual resolver.

The default `loose` syntax is a deliberate approximation of `.gitignore`: each
pattern matches if it occurs anywhere in the relative path, with `*` and `?` as
the only wildcards and either path separator accepted. Root anchoring,
directory-only patterns and negation are not modeled. The `gitignore` syntax
hands the same lines to `pathspec` instead.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import pathspec
import structlog

from codebundle.selection.types import IgnoreSyntax

log = structlog.get_logger()

# Glob-to-regex translation; every other character is matched literally.
_GLOB_TRANSLATION: dict[str, str] = {
    "*": ".*",
    "?": ".",
    "/": r"[/\\]",
    "\\": r"[/\\]",
}


@dataclass(frozen=True)
class IgnorePattern:
    """A compiled line of an ignore file."""

    source: str
    regex: re.Pattern[str]

    def matches(self, rel_path: str) -> bool:
        return self.regex.search(rel_path) is not None


def compile_pattern(text: str) -> IgnorePattern | None:
    """
    Compile one ignore-file line. Returns `None` for blank lines, comments and
    lines that are nothing but a separator.
    """
    stripped = text.strip()
    if not stripped or stripped.startswith("#"):
        return None
    if stripped[-1] in "/\\":
        stripped = stripped[:-1]
    if not stripped:
        return None
    regex = "".join(_GLOB_TRANSLATION.get(ch, re.escape(ch)) for ch in stripped)
    return IgnorePattern(source=text, regex=re.compile(regex))


def read_ignore_lines(ignore_path: Path) -> list[str]:
    """
    Return the raw lines of an ignore file, or an empty list if it is missing
    or cannot be read.
    """
    if not ignore_path.is_file():
        return []
    try:
        return ignore_path.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError as e:
        log.warning("ignore_file_unreadable", path=str(ignore_path), error=str(e))
        return []


def load_ignore_patterns(root: Path, ignore_file: str) -> list[IgnorePattern]:
    """Compile every pattern line of `root / ignore_file`."""
    patterns: list[IgnorePattern] = []
    for line in read_ignore_lines(root / ignore_file):
        pattern = compile_pattern(line)
        if pattern is not None:
            patterns.append(pattern)
    return patterns


def load_ignore_spec(root: Path, ignore_file: str) -> pathspec.PathSpec | None:
    """
    Read `root / ignore_file` as real gitignore rules and return a compiled
    `PathSpec`, or `None` if the file is missing or has no patterns.
    """
    lines = [
        line
        for line in read_ignore_lines(root / ignore_file)
        if line.strip() and not line.strip().startswith("#")
    ]
    if not lines:
        return None
    return pathspec.PathSpec.from_lines("gitignore", lines)


def build_ignore_matcher(
    root: Path, ignore_file: str, syntax: IgnoreSyntax = "loose"
) -> Callable[[str], bool]:
    """
    Build a predicate telling whether a relative path is ignored by the
    project's ignore file under the given syntax.
    """
    if syntax == "gitignore":
        spec = load_ignore_spec(root, ignore_file)
        if spec is None:
            return lambda rel_path: False
        return spec.match_file

    patterns = load_ignore_patterns(root, ignore_file)
    log.debug("ignore_patterns_loaded", count=len(patterns))
    return lambda rel_path: any(p.matches(rel_path) for p in patterns)
