"""
Manual candidate listing: walk the project tree and apply the project's ignore
file, without any external tool.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path

import structlog

from codebundle.selection.defaults import VCS_DIR_NAME
from codebundle.selection.ignore_patterns import build_ignore_matcher
from codebundle.selection.types import IgnoreSyntax, Listed, ListResult

log = structlog.get_logger()


class ManualLister:
    """
    Walks every regular file under the root, dropping the version-control
    metadata directory and anything the ignore file matches.
    """

    name = "manual"

    def __init__(self, ignore_file: str, ignore_syntax: IgnoreSyntax = "loose") -> None:
        self._ignore_file: str = ignore_file
        self._ignore_syntax: IgnoreSyntax = ignore_syntax

    def list_candidates(self, root: Path) -> ListResult:
        is_ignored = build_ignore_matcher(root, self._ignore_file, self._ignore_syntax)
        return Listed(list(self._walk(root, is_ignored)))

    def _walk(self, root: Path, is_ignored: Callable[[str], bool]) -> Iterator[str]:
        for dirpath, dirnames, filenames in os.walk(root, onerror=self._on_walk_error):
            rel_dir = _relative(Path(dirpath), root)

            # Prune in place so excluded directories are never entered.
            dirnames[:] = [
                d
                for d in dirnames
                if not self._is_excluded(_join(rel_dir, d), is_ignored, is_dir=True)
            ]

            for filename in filenames:
                rel_path = _join(rel_dir, filename)
                if self._is_excluded(rel_path, is_ignored):
                    continue
                if not os.path.isfile(os.path.join(dirpath, filename)):
                    continue
                yield rel_path

    @staticmethod
    def _is_excluded(
        rel_path: str, is_ignored: Callable[[str], bool], is_dir: bool = False
    ) -> bool:
        # Plain prefix test: also drops `.gitignore`, `.gitattributes` and friends.
        if rel_path.startswith(VCS_DIR_NAME):
            return True
        return is_ignored(rel_path + "/" if is_dir else rel_path)

    @staticmethod
    def _on_walk_error(error: OSError) -> None:
        log.warning("directory_unreadable", path=error.filename, error=error.strerror)


def _relative(path: Path, root: Path) -> str:
    """Relative path with forward slashes and no leading separator; `""` for the root."""
    rel = path.relative_to(root).as_posix()
    return "" if rel == "." else rel.lstrip("/")


def _join(rel_dir: str, name: str) -> str:
    return f"{rel_dir}/{name}" if rel_dir else name
