"""Tests for config file loading and merging."""

from __future__ import annotations

from pathlib import Path

import pytest
from structlog.testing import capture_logs

from codebundle.cli import Options
from codebundle.config import (
    CodebundleConfig,
    find_config_file,
    load_config,
    merge_cli_with_config,
)


def test_find_config_codebundle_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "codebundle.toml"
    config_file.write_text('untracked-extension = ".md"\n')
    assert find_config_file(tmp_path) == config_file


def test_find_config_dot_codebundle_toml_takes_precedence(tmp_path: Path) -> None:
    (tmp_path / "codebundle.toml").write_text('untracked-extension = ".md"\n')
    dot_config = tmp_path / ".codebundle.toml"
    dot_config.write_text('untracked-extension = ".rst"\n')
    assert find_config_file(tmp_path) == dot_config


def test_find_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text("[tool.codebundle]\nuse-git = false\n")
    assert find_config_file(tmp_path) == config_file


def test_find_config_pyproject_without_section_skipped(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.ruff]\nline-length = 100\n")
    assert find_config_file(tmp_path) is None


def test_find_config_walks_up(tmp_path: Path) -> None:
    config_file = tmp_path / "codebundle.toml"
    config_file.write_text("use-git = false\n")
    subdir = tmp_path / "sub" / "deep"
    subdir.mkdir(parents=True)
    assert find_config_file(subdir) == config_file


def test_find_config_none_when_missing(tmp_path: Path) -> None:
    assert find_config_file(tmp_path) is None


def test_load_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text(
        '[project]\nname = "demo"\n\n[tool.codebundle]\nextend-hard-exclude = ["*.csv"]\n'
    )
    config = load_config(config_file)
    assert config.extend_hard_exclude == ["*.csv"]
    assert config.use_git is None


def test_load_config_sections_and_kebab_case(tmp_path: Path) -> None:
    config_file = tmp_path / "codebundle.toml"
    config_file.write_text(
        'output = "snapshot.txt"\n'
        "\n"
        "[selection]\n"
        'explicit-include = ["setup.cfg"]\n'
        'extend-hard-exclude = ["fixtures/"]\n'
        'untracked-extension = ".md"\n'
        'ignore-syntax = "gitignore"\n'
        "\n"
        "[git]\n"
        "use-git = false\n"
        "trust-directory = false\n"
        "git-timeout = 30\n"
    )
    config = load_config(config_file)
    assert config.output == "snapshot.txt"
    assert config.explicit_include == ["setup.cfg"]
    assert config.extend_hard_exclude == ["fixtures/"]
    assert config.untracked_extension == ".md"
    assert config.ignore_syntax == "gitignore"
    assert config.use_git is False
    assert config.trust_directory is False
    assert config.git_timeout == 30


def test_load_config_partial(tmp_path: Path) -> None:
    config_file = tmp_path / "codebundle.toml"
    config_file.write_text("use-git = false\n")
    config = load_config(config_file)
    assert config.use_git is False
    assert config.hard_exclude is None
    assert config.output is None


def test_load_config_malformed_toml(tmp_path: Path) -> None:
    """Malformed TOML should warn and return an empty config, not crash."""
    config_file = tmp_path / "codebundle.toml"
    config_file.write_text("this is not valid toml [[[")
    with capture_logs() as logs:
        config = load_config(config_file)
    assert config == CodebundleConfig()
    assert logs[0]["event"] == "config_invalid"


def test_load_config_warns_unknown_keys(tmp_path: Path) -> None:
    config_file = tmp_path / "codebundle.toml"
    config_file.write_text("unknown-key = true\nuse-git = false\n")
    with capture_logs() as logs:
        config = load_config(config_file)
    assert config.use_git is False
    assert [(e["event"], e["key"]) for e in logs] == [("config_key_unrecognized", "unknown-key")]


def test_load_config_bare_string_becomes_list(tmp_path: Path) -> None:
    config_file = tmp_path / "codebundle.toml"
    config_file.write_text(
        'extend-hard-exclude = "*.csv"\n\n[selection]\nexplicit-include = "Makefile"\n'
    )
    config = load_config(config_file)
    assert config.extend_hard_exclude == ["*.csv"]
    assert config.explicit_include == ["Makefile"]


def test_load_config_timeout_is_float(tmp_path: Path) -> None:
    config_file = tmp_path / "codebundle.toml"
    config_file.write_text("git-timeout = 5\n")
    timeout = load_config(config_file).git_timeout
    assert timeout == 5.0
    assert isinstance(timeout, float)


@pytest.mark.parametrize(
    ("line", "key"),
    [
        ('git-timeout = "soon"', "git-timeout"),
        ("git-timeout = true", "git-timeout"),
        ("git-timeout = -1", "git-timeout"),
        ('use-git = "no"', "use-git"),
        ("trust-directory = 0", "trust-directory"),
        ("hard-exclude = [1, 2]", "hard-exclude"),
        ("extend-explicit-include = 3", "extend-explicit-include"),
        ("untracked-extension = 7", "untracked-extension"),
        ("output = false", "output"),
    ],
)
def test_load_config_rejects_wrong_types(tmp_path: Path, line: str, key: str) -> None:
    config_file = tmp_path / "codebundle.toml"
    config_file.write_text(line + "\n")
    with pytest.raises(ValueError, match=key):
        load_config(config_file)


def _make_options(
    project_dir: str = ".",
    output: str | None = None,
    explicit_include: list[str] | None = None,
    extend_hard_exclude: list[str] | None = None,
    untracked_extension: str = ".txt",
    use_git: bool = True,
) -> Options:
    """Create an Options with defaults for all required fields."""
    return Options(
        project_dir=project_dir,
        output=output,
        list_files=False,
        version=False,
        verbosity=0,
        explicit_include=explicit_include,
        extend_explicit_include=[],
        hard_exclude=None,
        extend_hard_exclude=extend_hard_exclude if extend_hard_exclude is not None else [],
        untracked_extension=untracked_extension,
        ignore_file=".gitignore",
        ignore_syntax="loose",
        use_git=use_git,
        trust_directory=True,
        git_timeout=None,
    )


def test_merge_no_config() -> None:
    opts = _make_options(use_git=True)
    result = merge_cli_with_config(opts, config=None, explicit_flags=set())
    assert result.use_git is True


def test_merge_config_overrides_defaults() -> None:
    config = CodebundleConfig(use_git=False, extend_hard_exclude=["*.csv"], output="out.txt")
    result = merge_cli_with_config(_make_options(), config=config, explicit_flags=set())
    assert result.use_git is False
    assert result.extend_hard_exclude == ["*.csv"]
    assert result.output == "out.txt"


def test_merge_explicit_cli_overrides_config() -> None:
    opts = _make_options(untracked_extension=".md")
    config = CodebundleConfig(untracked_extension=".rst")
    result = merge_cli_with_config(opts, config=config, explicit_flags={"untracked_extension"})
    assert result.untracked_extension == ".md"


def test_merge_unset_config_fields_keep_cli_values() -> None:
    opts = _make_options(explicit_include=["Makefile"])
    result = merge_cli_with_config(opts, config=CodebundleConfig(), explicit_flags=set())
    assert result.explicit_include == ["Makefile"]
