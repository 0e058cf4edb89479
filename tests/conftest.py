import pytest
from click.testing import CliRunner

from md_spellfilter.filter import MarkdownFilter
from md_spellfilter.inline import InlineContext


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def md_filter() -> MarkdownFilter:
    """Provides a filter with the default configuration."""
    return MarkdownFilter()


class MarkupRecorder:
    """Markup collaborator that records the sub-ranges it receives."""

    def __init__(self):
        self.calls: list[tuple[int, int]] = []

    def __call__(self, buffer: list[str], start: int, stop: int) -> None:
        self.calls.append((start, stop))


@pytest.fixture()
def markup_recorder() -> MarkupRecorder:
    return MarkupRecorder()


@pytest.fixture()
def inline_context() -> InlineContext:
    return InlineContext()
