"""Configuration and result types for file selection."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Protocol, Union

from codebundle.selection.defaults import (
    DEFAULT_EXPLICIT_INCLUDES,
    DEFAULT_HARD_EXCLUDES,
    DEFAULT_UNTRACKED_EXTENSION,
    IGNORE_FILE_NAME,
)

IgnoreSyntax = Literal["loose", "gitignore"]


@dataclass
class SelectionConfig:
    """
    Configuration for file selection.

    `explicit_include=None` / `hard_exclude=None` mean use the defaults; providing
    a list replaces them entirely. The `extend_*` lists are appended either way.
    `ignore_syntax="loose"` keeps the substring approximation of `.gitignore`;
    `"gitignore"` matches ignore-file lines with full gitignore semantics.
    `git_timeout=None` lets git calls run without a limit.
    """

    explicit_include: list[str] | None = None
    extend_explicit_include: list[str] = field(default_factory=list)
    hard_exclude: list[str] | None = None
    extend_hard_exclude: list[str] = field(default_factory=list)
    untracked_extension: str = DEFAULT_UNTRACKED_EXTENSION
    use_git: bool = True
    trust_directory: bool = True
    ignore_file: str = IGNORE_FILE_NAME
    ignore_syntax: IgnoreSyntax = "loose"
    git_timeout: float | None = None

    @property
    def effective_explicit_include(self) -> list[str]:
        """Combined forced inclusions: defaults (or `explicit_include`) + extensions."""
        base = (
            self.explicit_include
            if self.explicit_include is not None
            else list(DEFAULT_EXPLICIT_INCLUDES)
        )
        return base + self.extend_explicit_include

    @property
    def effective_hard_exclude(self) -> list[str]:
        """Combined hard exclusions: defaults (or `hard_exclude`) + extensions."""
        base = self.hard_exclude if self.hard_exclude is not None else list(DEFAULT_HARD_EXCLUDES)
        return base + self.extend_hard_exclude


@dataclass(frozen=True)
class Listed:
    """A lister ran and produced these relative paths (possibly none)."""

    paths: list[str]


@dataclass(frozen=True)
class Unavailable:
    """The lister's external tool is not installed."""

    reason: str


@dataclass(frozen=True)
class Failed:
    """The lister's tool was found but the listing failed."""

    reason: str


ListResult = Union[Listed, Unavailable, Failed]


class CandidateLister(Protocol):
    """Produces the pre-exclusion candidate list for a project root."""

    name: str

    def list_candidates(self, root: Path) -> ListResult: ...


@dataclass
class Selection:
    """
    Outcome of a selection run. `files` is the final ordered, deduplicated list of
    relative paths; `source` names the lister that supplied the candidates (or
    `None` if none did); `attempts` records every lister's result in order.
    """

    files: list[str]
    source: str | None
    attempts: list[tuple[str, ListResult]] = field(default_factory=list)
