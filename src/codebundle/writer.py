"""Writes selected files into a single concatenated bundle."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

import structlog

log = structlog.get_logger()


def display_path(rel_path: str) -> str:
    """
    Printable form of a relative path. Bytes that are not valid UTF-8 (carried as
    surrogate escapes by `os.walk` and `os.fsdecode`) are shown as `\\xNN`.
    """
    try:
        raw = rel_path.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        return rel_path.encode("utf-8", "backslashreplace").decode("utf-8")
    return raw.decode("utf-8", "backslashreplace")


def delimiter_line(rel_path: str) -> str:
    """Header line written before each file's content."""
    return f"===== {display_path(rel_path)} ====="


@dataclass
class BundleReport:
    """Paths actually written, and paths skipped because they could not be read."""

    written: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def write_bundle(root: Path, files: Sequence[str], out: TextIO) -> BundleReport:
    """
    Write each file under `root` to `out`, in order, preceded by its delimiter
    line. Files that vanished or cannot be read are skipped with a warning.
    """
    report = BundleReport()
    for rel_path in files:
        try:
            content = (root / rel_path).read_bytes().decode("utf-8", errors="replace")
        except OSError as e:
            log.warning("file_skipped", path=display_path(rel_path), error=e.strerror or str(e))
            report.skipped.append(rel_path)
            continue

        out.write(delimiter_line(rel_path) + "\n")
        out.write(content)
        if content and not content.endswith("\n"):
            out.write("\n")
        out.write("\n")
        report.written.append(rel_path)
    return report


def write_bundle_file(root: Path, files: Sequence[str], output_path: Path) -> BundleReport:
    """Write the bundle to `output_path`, creating parent directories as needed."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8", newline="") as out:
        return write_bundle(root, files, out)


def without_output_file(root: Path, files: Sequence[str], output_path: Path) -> list[str]:
    """Drop the bundle's own output file from `files` if it lives inside `root`."""
    try:
        own = output_path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return list(files)
    return [f for f in files if f != own]
