"""
Tracked-file listing through git.

Git applies its own ignore rules, so no pattern interpretation happens here.
Any failure is reported as a `ListResult` variant rather than raised, so the
selector can fall back to the manual resolver.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

import structlog

from codebundle.selection.types import Failed, Listed, ListResult, Unavailable

log = structlog.get_logger()


class GitLister:
    """
    Lists files git tracks, plus untracked files with one designated extension
    that git's ignore rules do not exclude.
    """

    name = "git"

    def __init__(
        self,
        untracked_extension: str,
        trust_directory: bool = True,
        timeout: float | None = None,
        executable: str = "git",
    ) -> None:
        self._untracked_extension: str = untracked_extension
        self._trust_directory: bool = trust_directory
        self._timeout: float | None = timeout
        self._executable: str = executable

    def is_available(self) -> bool:
        return shutil.which(self._executable) is not None

    def list_candidates(self, root: Path) -> ListResult:
        if not self.is_available():
            return Unavailable(f"`{self._executable}` not found on PATH")

        if self._trust_directory:
            self._ensure_safe_directory(root)

        untracked_glob = f"*{self._untracked_extension}"
        try:
            tracked = self._ls_files(root)
            untracked = self._ls_files(
                root, "--others", "--exclude-standard", "--", untracked_glob
            )
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
            return Failed(f"git exited with status {e.returncode}: {stderr}")
        except subprocess.TimeoutExpired:
            return Failed(f"git did not finish within {self._timeout} seconds")
        except OSError as e:
            return Failed(f"could not run git: {e}")

        log.debug("git_listing", tracked=len(tracked), untracked=len(untracked))
        return Listed(tracked + untracked)

    def _run(self, root: Path, *args: str) -> bytes:
        completed = subprocess.run(
            [self._executable, *args],
            cwd=root,
            capture_output=True,
            check=True,
            timeout=self._timeout,
        )
        return completed.stdout

    def _ls_files(self, root: Path, *args: str) -> list[str]:
        # -z gives raw, unquoted paths separated by NUL. fsdecode keeps undecodable
        # bytes as surrogate escapes, matching what os.walk yields.
        output = self._run(root, "ls-files", "-z", *args)
        return [os.fsdecode(path) for path in output.split(b"\0") if path]

    def _ensure_safe_directory(self, root: Path) -> None:
        """
        Add `root` to git's global `safe.directory` list so repositories owned by
        another user are not refused. Best effort: failures are only logged.
        """
        directory = root.as_posix()
        try:
            existing = subprocess.run(
                [self._executable, "config", "--global", "--get-all", "safe.directory"],
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
            if directory in existing.stdout.splitlines():
                return
            subprocess.run(
                [self._executable, "config", "--global", "--add", "safe.directory", directory],
                capture_output=True,
                check=True,
                timeout=self._timeout,
            )
            log.debug("git_safe_directory_added", directory=directory)
        except (subprocess.SubprocessError, OSError) as e:
            log.debug("git_safe_directory_failed", directory=directory, error=str(e))
