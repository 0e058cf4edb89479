"""Reading Markdown sources for the command line host."""

from __future__ import annotations

import os
import stat
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE

MAX_FILE_SIZE_ENV_VAR = "MD_SPELLFILTER_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Return the file size limit, letting the environment override `default`.

    Args:
        default: Limit in bytes used when ``MD_SPELLFILTER_MAX_FILE_SIZE`` is unset.

    Returns:
        int: Limit in bytes.

    Raises:
        ValueError: If the environment variable is not a positive integer.

    Examples:
        os.environ["MD_SPELLFILTER_MAX_FILE_SIZE"] = "65536"
        get_max_file_size()  # 65536
    """
    raw_limit = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if raw_limit is None:
        return default

    try:
        limit = int(raw_limit)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {raw_limit!r} is not an integer"
        )
        raise ValueError(error_message) from error

    if limit <= 0:
        raise ValueError(f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {limit}")
    return limit


def check_source_file(filepath: Path, max_size: int) -> int:
    """Make sure `filepath` is a regular file of at most `max_size` bytes.

    Returns:
        int: Size of the file in bytes.

    Raises:
        IOError: If the file is inaccessible, not a regular file, or too large.
    """
    try:
        file_stat = filepath.stat()
    except OSError as error:
        raise IOError(f"Cannot access {filepath}: {error.strerror}") from error

    if not stat.S_ISREG(file_stat.st_mode):
        raise IOError(f"{filepath} is not a regular file")

    if file_stat.st_size > max_size:
        error_message = (
            f"{filepath} is {file_stat.st_size} bytes, "
            f"over the maximum allowed size of {max_size} bytes"
        )
        raise IOError(error_message)
    return file_stat.st_size


def read_source(filepath: Path) -> str:
    """Read a UTF-8 Markdown file without translating line terminators.

    ``\\r\\n``, ``\\r`` and ``\\n\\r`` come back as written, so the filtered
    output lines up character for character with the file.

    Raises:
        IOError: If the file cannot be opened or read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    try:
        with open(filepath, encoding="utf-8", newline="") as stream:
            return stream.read()
    except OSError as error:
        raise IOError(f"Cannot read {filepath}: {error.strerror}") from error
