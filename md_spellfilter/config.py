"""Filter configuration: defaults, TOML files and command line overrides."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
import tomllib

from .constants import DEFAULT_BLOCK_START_TAGS, DEFAULT_MAX_FILE_SIZE, DEFAULT_RAW_START_TAGS

TOOL_NAME = "md-spellfilter"

# File name and the tables read from it, in lookup order within one directory.
CONFIG_SOURCES: tuple[tuple[str, tuple[tuple[str, ...], ...]], ...] = (
    ("pyproject.toml", (("tool", TOOL_NAME),)),
    (f".{TOOL_NAME}.toml", ((TOOL_NAME,), ("tool", TOOL_NAME))),
)


@dataclass
class FilterConfig:
    """Options of the Markdown spell-checking filter.

    Attributes:
        multiline_tags: Keep an HTML tag that is still open at end of line
            pending into the next line instead of rejecting it.
        raw_start_tags: Tags whose content is meant to be treated as raw text.
            Accepted and validated, not yet consulted by the filter.
        block_start_tags: Tags meant to start block-level HTML. Accepted and
            validated, not yet consulted by the filter.
        blank_markup: Blank HTML tag syntax and comment delimiters instead of
            leaving them for a downstream markup filter. Text between tags
            and comment content are kept.
        max_file_size: Largest file, in bytes, the command line reads.

    Examples:
        FilterConfig(multiline_tags=False, raw_start_tags=("script",))
    """

    # Inline HTML
    multiline_tags: bool = True
    raw_start_tags: tuple[str, ...] = field(default=DEFAULT_RAW_START_TAGS)
    block_start_tags: tuple[str, ...] = field(default=DEFAULT_BLOCK_START_TAGS)
    blank_markup: bool = False

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """Raised when an option has the wrong type or value.

    Setup of a filter fails as a whole; a filter whose setup raised is not
    usable.

    Examples:
        raise ConfigError("`blank_markup` must be a boolean")
    """


_MISSING = object()


def load_config(search_path: Path) -> FilterConfig:
    """Find the closest configuration table above `search_path`.

    Each directory from `search_path` up to the filesystem root is checked for
    ``pyproject.toml`` (table ``[tool.md-spellfilter]``) and then
    ``.md-spellfilter.toml`` (``[md-spellfilter]`` or ``[tool.md-spellfilter]``).
    The first table found wins, even when empty. Files that are not valid TOML
    are ignored. Keys may use dashes or underscores.

    Args:
        search_path: Directory where the lookup starts.

    Returns:
        FilterConfig: The configuration from the table found, or the defaults.

    Raises:
        ConfigError: If the table found is not a mapping or has unknown keys.

    Examples:
        load_config(Path("docs"))
    """
    start = search_path.resolve()
    for directory in (start, *start.parents):
        for filename, table_paths in CONFIG_SOURCES:
            config_file = directory / filename
            table, table_path = _read_table(config_file, table_paths)
            if table is not _MISSING:
                return normalize_config(_config_from_table(table, config_file, table_path))
    return FilterConfig()


def _read_table(
    config_file: Path, table_paths: tuple[tuple[str, ...], ...]
) -> tuple[object, tuple[str, ...]]:
    if not config_file.is_file():
        return _MISSING, ()

    try:
        with open(config_file, "rb") as stream:
            document = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return _MISSING, ()

    for table_path in table_paths:
        table: object = document
        for key in table_path:
            if not isinstance(table, dict) or key not in table:
                table = _MISSING
                break
            table = table[key]
        if table is not _MISSING:
            return table, table_path
    return _MISSING, ()


def _config_from_table(
    table: object, config_file: Path, table_path: tuple[str, ...]
) -> FilterConfig:
    error_message = f"Invalid `[{'.'.join(table_path)}]` settings in {config_file}"
    if not isinstance(table, dict):
        raise ConfigError(error_message)

    options = {key.replace("-", "_"): value for key, value in table.items()}
    known = {option.name for option in fields(FilterConfig)}
    unknown = sorted(set(options) - known)
    if unknown:
        raise ConfigError(f"{error_message}: unknown option {', '.join(unknown)}")
    return FilterConfig(**options)


def normalize_config(config: FilterConfig) -> FilterConfig:
    """Lowercase tag names and turn tag lists into tuples.

    A comma-separated string such as ``"script,style"`` is accepted as a list.
    Values of the wrong type are passed through for `validate_config` to report.
    """
    return replace(
        config,
        raw_start_tags=_normalize_tags(config.raw_start_tags),
        block_start_tags=_normalize_tags(config.block_start_tags),
    )


def _normalize_tags(tags: object) -> object:
    if isinstance(tags, str):
        tags = tags.split(",")
    if not isinstance(tags, (list, tuple, set, frozenset)):
        return tags
    if not all(isinstance(tag, str) for tag in tags):
        return tags
    return tuple(tag.strip().lower() for tag in tags if tag.strip())


def validate_config(config: FilterConfig) -> None:
    """Check every option of `config`.

    Raises:
        ConfigError: If a flag is not a boolean, a tag list holds anything but
            tag names, or `max_file_size` is not a positive integer.

    Examples:
        validate_config(FilterConfig(multiline_tags=False))
    """
    for key in ("multiline_tags", "blank_markup"):
        _require_bool(key, getattr(config, key))

    config = normalize_config(config)
    for key in ("raw_start_tags", "block_start_tags"):
        _require_tag_names(key, getattr(config, key))

    _require_positive_int("max_file_size", config.max_file_size)


def _require_bool(key: str, value: object) -> None:
    if not isinstance(value, bool):
        raise ConfigError(f"`{key}` must be a boolean")


def _require_tag_names(key: str, tags: object) -> None:
    if not isinstance(tags, tuple) or not all(isinstance(tag, str) for tag in tags):
        raise ConfigError(f"`{key}` must be a list of tag names")
    for tag in tags:
        if not tag[0].isalpha() or not tag.replace("-", "").isalnum():
            raise ConfigError(f"`{key}` contains an invalid tag name: {tag!r}")


def _require_positive_int(key: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"`{key}` must be an integer")
    if value <= 0:
        raise ConfigError(f"`{key}` must be a positive integer")


def apply_overrides(config: FilterConfig, **overrides: object) -> FilterConfig:
    """Return `config` with every override that is not None applied.

    `config` itself is returned when nothing changes.

    Raises:
        TypeError: If an override is not a `FilterConfig` field.

    Examples:
        apply_overrides(config, multiline_tags=False, blank_markup=None)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> FilterConfig:
    """Load the configuration for `search_path`, apply overrides, then validate.

    Args:
        search_path: Directory where the configuration lookup starts.
        overrides: Command line values keyed by option name; None means "not given".

    Returns:
        FilterConfig: A validated configuration.

    Raises:
        ConfigError: If the file or the resulting options are invalid.

    Examples:
        build_config(Path.cwd(), blank_markup=True)
    """
    config = apply_overrides(load_config(search_path), **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config
