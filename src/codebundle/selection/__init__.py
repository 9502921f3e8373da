"""
File selection engine: decides which files of a project directory are bundled.

Candidates come from git when it is available, otherwise from a walk of the
tree filtered by the project's `.gitignore`. Explicit includes are then forced
in and hard exclusions stripped out.

Usage::

    from codebundle.selection import FileSelector, SelectionConfig

    config = SelectionConfig(extend_hard_exclude=["*.csv"])
    selection = FileSelector(config).select("path/to/project")
    for rel_path in selection.files:
        ...
"""

from codebundle.selection.defaults import (
    DEFAULT_EXPLICIT_INCLUDES,
    DEFAULT_HARD_EXCLUDES,
    DEFAULT_UNTRACKED_EXTENSION,
)
from codebundle.selection.git_lister import GitLister
from codebundle.selection.ignore_patterns import IgnorePattern, compile_pattern
from codebundle.selection.manual_lister import ManualLister
from codebundle.selection.selector import FileSelector
from codebundle.selection.types import (
    CandidateLister,
    Failed,
    Listed,
    ListResult,
    Selection,
    SelectionConfig,
    Unavailable,
)

__all__ = [
    "DEFAULT_EXPLICIT_INCLUDES",
    "DEFAULT_HARD_EXCLUDES",
    "DEFAULT_UNTRACKED_EXTENSION",
    "CandidateLister",
    "Failed",
    "FileSelector",
    "GitLister",
    "IgnorePattern",
    "ListResult",
    "Listed",
    "ManualLister",
    "Selection",
    "SelectionConfig",
    "Unavailable",
    "compile_pattern",
]
