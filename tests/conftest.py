from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
import structlog

# A filename that is not valid UTF-8, as `os.walk` and `os.fsdecode` return it.
_UNDECODABLE_NAME = os.fsdecode(b"bad\xff.py")


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo logging configuration done by CLI tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def make_undecodable_file() -> Callable[[Path], str]:
    """Create `bad\\xff.py` in a directory, skipping where the filesystem refuses."""
    if sys.platform == "win32" or sys.getfilesystemencoding().lower() != "utf-8":
        pytest.skip("needs a POSIX filesystem with UTF-8 filename encoding")

    def make(root: Path) -> str:
        try:
            (root / _UNDECODABLE_NAME).write_text("print('bad')\n")
        except (OSError, UnicodeEncodeError) as e:
            pytest.skip(f"filesystem rejects non-UTF-8 names: {e}")
        return _UNDECODABLE_NAME

    return make
