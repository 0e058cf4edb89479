"""
Blanks Markdown syntax in a file so a spell checker sees only prose.
The filtered text, with the same length and line breaks, is written to stdout.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import click
from .config import ConfigError, build_config
from .filesystem import check_source_file, get_max_file_size, read_source
from .filter import MarkdownFilter

__all__ = ["cli"]

LINE_PATTERN = re.compile(r"[^\r\n]*(?:\r\n|\n\r|\r|\n)?")


def split_lines(content: str) -> list[str]:
    """Split text into lines, keeping ``\\n``, ``\\r``, ``\\r\\n`` and ``\\n\\r`` terminators.

    Examples:
        split_lines("a\\r\\nb")  # ["a\\r\\n", "b"]
    """
    return [line for line in LINE_PATTERN.findall(content) if line]


@click.command()
@click.version_option()
@click.option(
    "--multiline-tags/--no-multiline-tags",
    default=None,
    help="Let an unfinished HTML tag continue on the next line",
)
@click.option(
    "--blank-markup/--no-blank-markup",
    default=None,
    help="Blank HTML tag syntax and comment delimiters as well",
)
@click.option(
    "--per-line/--whole-buffer",
    default=True,
    help="Feed the filter one line per buffer (default) or the whole file at once",
)
@click.option("-v", "--verbose", is_flag=True, help="Log block and span decisions to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
def cli(
    filepath: str,
    multiline_tags: bool | None = None,
    blank_markup: bool | None = None,
    per_line: bool = True,
    verbose: bool = False,
):
    """
    Entry point for filtering a Markdown file.

    Args:
        filepath: Path to the Markdown file to filter, or ``-`` for stdin.
        multiline_tags: Override for the `multiline_tags` option.
        blank_markup: Override for the `blank_markup` option.
        per_line: Whether to call the filter once per line.
        verbose: Whether to enable debug logging.

    Returns:
        None.

    Raises:
        click.BadParameter: If the configuration is invalid.
        click.ClickException: If the file cannot be read or is too large.

    Examples:
        md-spellfilter README.md --no-multiline-tags | aspell list
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    from_stdin = filepath == "-"
    search_path = Path.cwd() if from_stdin else Path(filepath).resolve().parent
    try:
        config = build_config(
            search_path,
            multiline_tags=multiline_tags,
            blank_markup=blank_markup,
        )
        md_filter = MarkdownFilter(config)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    if from_stdin:
        # No newline translation: \r and \r\n stay as written.
        try:
            content = click.get_binary_stream("stdin").read().decode("utf-8")
        except UnicodeDecodeError as error:
            raise click.ClickException(f"Invalid UTF-8 sequence on stdin: {error}") from error
    else:
        path = Path(filepath)
        try:
            max_file_size = get_max_file_size(default=config.max_file_size)
        except ValueError as error:
            raise click.ClickException(str(error)) from error

        try:
            check_source_file(path, max_file_size)
            content = read_source(path)
        except UnicodeDecodeError as error:
            raise click.ClickException(f"Invalid UTF-8 sequence in {path}: {error}") from error
        except IOError as error:
            raise click.ClickException(str(error)) from error

    if per_line:
        for line in md_filter.filter_lines(split_lines(content)):
            click.echo(line, nl=False)
    else:
        click.echo(md_filter.filter_text(content), nl=False)


if __name__ == "__main__":
    cli()
