"""
Fixed selection constants: forced inclusions, hard exclusions and the
untracked-file extension handed to git.

Hard exclusions use gitignore syntax. A pattern without a `/` matches a path
component anywhere in the tree; a trailing `/` marks a directory, and everything
beneath it is excluded.
"""

from __future__ import annotations

# Name of the version-control metadata directory.
VCS_DIR_NAME = ".git"

# Ignore-rule file read by the manual resolver.
IGNORE_FILE_NAME = ".gitignore"

# Untracked files with this extension are listed alongside git-tracked files.
DEFAULT_UNTRACKED_EXTENSION = ".txt"

# Always bundled when present on disk and not hard-excluded.
DEFAULT_EXPLICIT_INCLUDES: list[str] = [
    "config/config.yaml",
]

# Removed unconditionally, even when tracked or explicitly included.
DEFAULT_HARD_EXCLUDES: list[str] = [
    # Version control
    ".git/",
    ".hg/",
    ".svn/",
    # Dependencies
    "node_modules/",
    ".venv/",
    "venv/",
    "env/",
    "bower_components/",
    "site-packages/",
    # Build output
    "build/",
    "dist/",
    "*.egg-info/",
    # Caches
    "__pycache__/",
    "*.pyc",
    "*.pyo",
    ".pytest_cache/",
    ".mypy_cache/",
    ".ruff_cache/",
    ".tox/",
    ".cache/",
    ".parcel-cache/",
    ".next/",
    # IDE/Editor
    ".idea/",
    ".vscode/",
    ".vs/",
    # Logs, temp and backup files
    "*.log",
    "*.tmp",
    "*.temp",
    "*.bak",
    "*.swp",
    "*.swo",
    "*~",
    ".DS_Store",
    "Thumbs.db",
    # Secrets
    ".env",
    ".env.*",
    "*.pem",
    "*.key",
    "*.p12",
    "*.pfx",
    "id_rsa",
    "id_rsa.*",
    "id_ed25519",
    "id_ed25519.*",
    ".netrc",
    ".npmrc",
    ".pypirc",
    # Databases
    "*.db",
    "*.sqlite",
    "*.sqlite3",
]
