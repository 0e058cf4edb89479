from __future__ import annotations

import textwrap
import pytest
from pathlib import Path

from md_spellfilter.config import (
    ConfigError,
    FilterConfig,
    apply_overrides,
    build_config,
    load_config,
    normalize_config,
    validate_config,
)


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _write_dotfile(base: Path, body: str) -> Path:
    path = base / ".md-spellfilter.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_loads_config_from_pyproject(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-spellfilter]
        multiline_tags = false
        raw_start_tags = ["SCRIPT", "style"]
        block_start_tags = ["div"]
        blank_markup = true
        max_file_size = 1
        """,
    )

    config = load_config(tmp_path)

    assert config == FilterConfig(
        multiline_tags=False,
        raw_start_tags=("script", "style"),
        block_start_tags=("div",),
        blank_markup=True,
        max_file_size=1,
    )


def test_loads_config_from_dotfile(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [md-spellfilter]
        blank-markup = true
        """,
    )
    nested = tmp_path / "child"
    nested.mkdir()

    config = load_config(nested)

    assert config.blank_markup is True
    assert config.multiline_tags is True


def test_dotfile_accepts_tool_table(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [tool.md-spellfilter]
        multiline-tags = false
        """,
    )

    assert load_config(tmp_path).multiline_tags is False


def test_load_config_walks_up_directories(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-spellfilter]
        blank_markup = true
        """,
    )
    nested = tmp_path / "a" / "b" / "c"
    nested.mkdir(parents=True)

    config = load_config(nested)

    assert config.blank_markup is True


def test_pyproject_without_table_is_skipped(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-spellfilter]
        blank_markup = true
        """,
    )
    child = tmp_path / "child"
    child.mkdir()
    _write_pyproject(
        child,
        """
        [project]
        name = "docs"
        """,
    )

    assert load_config(child).blank_markup is True


def test_empty_config_table_stops_inheritance(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-spellfilter]
        blank_markup = true
        """,
    )
    child = tmp_path / "child"
    child.mkdir()
    _write_pyproject(
        child,
        """
        [tool.md-spellfilter]
        """,
    )

    config = load_config(child)

    assert config == FilterConfig()


def test_load_config_returns_defaults_when_missing(tmp_path: Path):
    config = load_config(tmp_path)

    assert config == FilterConfig()


def test_load_config_skips_invalid_toml(tmp_path: Path):
    invalid_dir = tmp_path / "invalid"
    invalid_dir.mkdir()
    _write_pyproject(invalid_dir, "not = {valid")
    _write_pyproject(
        tmp_path,
        """
        [tool.md-spellfilter]
        multiline_tags = false
        """,
    )

    nested = invalid_dir / "child"
    nested.mkdir()
    config = load_config(nested)

    assert config.multiline_tags is False


def test_load_config_errors_on_unknown_key(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-spellfilter]
        blank_markup = true
        unexpected = true
        """,
    )

    with pytest.raises(ConfigError, match="Invalid `\\[tool.md-spellfilter\\]` settings"):
        load_config(tmp_path)


def test_load_config_errors_on_non_table(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool]
        md-spellfilter = "yes"
        """,
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_normalize_config_splits_and_lowercases_tags():
    config = normalize_config(FilterConfig(raw_start_tags="Script, STYLE,", block_start_tags=["P"]))

    assert config.raw_start_tags == ("script", "style")
    assert config.block_start_tags == ("p",)


@pytest.mark.parametrize(
    ("config", "message"),
    [
        (FilterConfig(multiline_tags="yes"), "`multiline_tags` must be a boolean"),
        (FilterConfig(blank_markup=1), "`blank_markup` must be a boolean"),
        (FilterConfig(raw_start_tags=42), "`raw_start_tags` must be a list of tag names"),
        (FilterConfig(block_start_tags=["div", 3]), "`block_start_tags` must be a list"),
        (FilterConfig(raw_start_tags=["1abc"]), "invalid tag name"),
        (FilterConfig(block_start_tags=["d v"]), "invalid tag name"),
        (FilterConfig(max_file_size=0), "`max_file_size` must be a positive integer"),
        (FilterConfig(max_file_size="big"), "`max_file_size` must be an integer"),
        (FilterConfig(max_file_size=True), "`max_file_size` must be an integer"),
    ],
)
def test_validate_config_rejects_invalid_values(config: FilterConfig, message: str):
    with pytest.raises(ConfigError, match=message):
        validate_config(config)


def test_validate_config_accepts_defaults():
    validate_config(FilterConfig())


def test_apply_overrides_ignores_none():
    config = FilterConfig()

    assert apply_overrides(config, multiline_tags=None) is config
    assert apply_overrides(config, blank_markup=True).blank_markup is True


def test_build_config_applies_overrides_after_loading(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-spellfilter]
        multiline_tags = false
        blank_markup = true
        """,
    )

    config = build_config(tmp_path, multiline_tags=True, blank_markup=None)

    assert config.multiline_tags is True
    assert config.blank_markup is True


def test_build_config_validates(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-spellfilter]
        max_file_size = -5
        """,
    )

    with pytest.raises(ConfigError, match="max_file_size"):
        build_config(tmp_path)
