"""
Project config for codebundle, read from TOML.

The first of `.codebundle.toml`, `codebundle.toml` or a `pyproject.toml` with a
`[tool.codebundle]` table, looking in the project directory and then each parent.
Explicit CLI flags win over the config file, which wins over built-in defaults.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar, cast

import structlog

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

log = structlog.get_logger()


@dataclass
class CodebundleConfig:
    """
    Settings found in a config file. `None` means the file did not set the key,
    so the CLI value (default or explicit) is kept.
    """

    output: str | None = None
    explicit_include: list[str] | None = None
    extend_explicit_include: list[str] | None = None
    hard_exclude: list[str] | None = None
    extend_hard_exclude: list[str] | None = None
    untracked_extension: str | None = None
    ignore_file: str | None = None
    ignore_syntax: str | None = None
    use_git: bool | None = None
    trust_directory: bool | None = None
    git_timeout: float | None = None


_STANDALONE_NAMES = (".codebundle.toml", "codebundle.toml")
_PYPROJECT_NAME = "pyproject.toml"


def _str_list(key: str, value: Any) -> list[str]:
    # A single pattern may be written without brackets.
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(v, str) for v in cast(list[Any], value)):
        return list(cast(list[str], value))
    raise ValueError(f"`{key}` must be a string or a list of strings, got {value!r}")


def _string(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"`{key}` must be a string, got {value!r}")
    return value


def _flag(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"`{key}` must be true or false, got {value!r}")
    return value


def _seconds(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError(f"`{key}` must be a positive number of seconds, got {value!r}")
    return float(value)


# How each config field's TOML value is checked and converted.
_CONVERTERS: dict[str, Callable[[str, Any], Any]] = {
    "output": _string,
    "explicit_include": _str_list,
    "extend_explicit_include": _str_list,
    "hard_exclude": _str_list,
    "extend_hard_exclude": _str_list,
    "untracked_extension": _string,
    "ignore_file": _string,
    "ignore_syntax": _string,
    "use_git": _flag,
    "trust_directory": _flag,
    "git_timeout": _seconds,
}


def _codebundle_table(path: Path) -> dict[str, Any] | None:
    """
    The codebundle settings in `path`: the whole document for a standalone file,
    `[tool.codebundle]` for `pyproject.toml` (`None` if that table is absent).
    Raises `tomllib.TOMLDecodeError` or `OSError`.
    """
    data = tomllib.loads(path.read_text(encoding="utf-8"))
    if path.name != _PYPROJECT_NAME:
        return data
    table = data.get("tool", {}).get("codebundle")
    return cast(dict[str, Any], table) if isinstance(table, dict) else None


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` and return the first config file found, or `None`.
    A `pyproject.toml` counts only if it has a readable `[tool.codebundle]` table.
    """
    for directory in (start_dir.resolve(), *start_dir.resolve().parents):
        for name in _STANDALONE_NAMES:
            if (directory / name).is_file():
                return directory / name
        pyproject = directory / _PYPROJECT_NAME
        if pyproject.is_file():
            try:
                if _codebundle_table(pyproject) is not None:
                    return pyproject
            except (tomllib.TOMLDecodeError, OSError):
                pass
    return None


def load_config(config_path: Path) -> CodebundleConfig:
    """
    Read `config_path` into a `CodebundleConfig`. Malformed TOML is a warning and
    gives an empty config. A value of the wrong type raises `ValueError`.
    """
    try:
        table = _codebundle_table(config_path)
    except tomllib.TOMLDecodeError as e:
        log.warning("config_invalid", path=str(config_path), error=str(e))
        return CodebundleConfig()
    return _parse_config_data(table or {})


def _parse_config_data(data: dict[str, Any]) -> CodebundleConfig:
    # Tables such as [selection] and [git] only group keys; their contents are
    # read as if written at the top level.
    entries: list[tuple[str, Any]] = []
    for key, value in data.items():
        if isinstance(value, dict):
            entries.extend(cast(dict[str, Any], value).items())
        else:
            entries.append((key, value))

    settings: dict[str, Any] = {}
    for key, value in entries:
        name = key.replace("-", "_")
        convert = _CONVERTERS.get(name)
        if convert is None:
            log.warning("config_key_unrecognized", key=key)
            continue
        settings[name] = convert(key, value)
    return CodebundleConfig(**settings)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: CodebundleConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Copy every setting the config file made onto `cli_opts`, except those the
    user passed explicitly on the command line (named in `explicit_flags`).
    """
    if config is None:
        return cli_opts

    for name in _CONVERTERS:
        value = getattr(config, name)
        if value is None or name in explicit_flags or not hasattr(cli_opts, name):
            continue
        setattr(cli_opts, name, value)
    return cli_opts
