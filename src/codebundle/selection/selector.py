"""
FileSelector — main entry point for file selection.

Takes candidates from the first lister that produces any, forces in the explicit
includes, deduplicates, then strips hard exclusions and paths missing on disk.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from pathlib import Path

import pathspec
import structlog

from codebundle.selection.git_lister import GitLister
from codebundle.selection.manual_lister import ManualLister
from codebundle.selection.types import (
    CandidateLister,
    Failed,
    Listed,
    ListResult,
    Selection,
    SelectionConfig,
    Unavailable,
)

log = structlog.get_logger()

# Hosts whose filesystem convention is case-insensitive (Windows).
_CASE_INSENSITIVE = os.path.normcase("A") == "a"


def default_listers(config: SelectionConfig) -> list[CandidateLister]:
    """Git first (unless disabled), then the manual tree walk."""
    listers: list[CandidateLister] = []
    if config.use_git:
        listers.append(
            GitLister(
                untracked_extension=config.untracked_extension,
                trust_directory=config.trust_directory,
                timeout=config.git_timeout,
            )
        )
    listers.append(ManualLister(config.ignore_file, config.ignore_syntax))
    return listers


class FileSelector:
    """
    Decides which files of a project directory go into the bundle, and in what
    order.

    Hard exclusions always win: a path matching one is dropped even if git
    tracks it or it is an explicit include.
    """

    def __init__(
        self,
        config: SelectionConfig | None = None,
        listers: Sequence[CandidateLister] | None = None,
    ) -> None:
        self._config: SelectionConfig = config or SelectionConfig()
        self._listers: list[CandidateLister] = (
            list(listers) if listers is not None else default_listers(self._config)
        )
        self._exclude_spec: pathspec.PathSpec = pathspec.PathSpec.from_lines(
            "gitignore", [_fold_case(p) for p in self._config.effective_hard_exclude]
        )

    def select(self, root: str | Path) -> Selection:
        """
        Select the files to bundle from `root`.

        Raises `NotADirectoryError` if `root` is not an existing directory; every
        other problem degrades to fewer files rather than an error.
        """
        project_root = Path(root).resolve()
        if not project_root.is_dir():
            raise NotADirectoryError(f"Project directory not found: {root}")

        candidates, source, attempts = self._collect_candidates(project_root)
        combined = candidates + self._config.effective_explicit_include

        files = [
            path
            for path in _unique(_normalize(p) for p in combined)
            if path and not self.is_hard_excluded(path) and (project_root / path).is_file()
        ]
        log.info("files_selected", source=source, count=len(files))
        return Selection(files=files, source=source, attempts=attempts)

    def is_hard_excluded(self, rel_path: str) -> bool:
        """Check a relative path, or any of its components, against the hard exclusions."""
        return self._exclude_spec.match_file(_fold_case(rel_path))

    def _collect_candidates(
        self, root: Path
    ) -> tuple[list[str], str | None, list[tuple[str, ListResult]]]:
        """Try each lister in order; the first non-empty listing wins."""
        attempts: list[tuple[str, ListResult]] = []
        for lister in self._listers:
            result = lister.list_candidates(root)
            attempts.append((lister.name, result))
            if isinstance(result, Listed) and result.paths:
                return list(result.paths), lister.name, attempts
            if isinstance(result, Failed):
                log.warning("lister_failed", lister=lister.name, reason=result.reason)
            elif isinstance(result, Unavailable):
                log.info("lister_unavailable", lister=lister.name, reason=result.reason)
            else:
                log.info("lister_empty", lister=lister.name)
        return [], None, attempts


def _normalize(path: str) -> str:
    """Forward slashes, no leading `./` or separators."""
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path.lstrip("/")


def _unique(paths: Iterable[str]) -> list[str]:
    """Drop duplicates, keeping first-seen order."""
    return list(dict.fromkeys(paths))


def _fold_case(text: str) -> str:
    return text.lower() if _CASE_INSENSITIVE else text
