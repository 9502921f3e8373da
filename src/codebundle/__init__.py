"""
codebundle: bundle a project's source files into one annotated text file.
"""

from codebundle.selection import FileSelector, Selection, SelectionConfig
from codebundle.writer import BundleReport, write_bundle, write_bundle_file

__all__ = [
    "BundleReport",
    "FileSelector",
    "Selection",
    "SelectionConfig",
    "write_bundle",
    "write_bundle_file",
]
