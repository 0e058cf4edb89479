"""
md-spellfilter: Markdown filter for spell checkers.

Blanks Markdown syntax in place so a spell checker can scan the same text
without parsing Markdown. Buffer length and line breaks never change.

CLI Usage:
    md-spellfilter README.md | aspell list

Library Usage:
    from md_spellfilter import MarkdownFilter

    md_filter = MarkdownFilter()
    buffer = list("> Some *quoted* `code`\\n")
    md_filter.process(buffer)
    text = "".join(buffer)
    md_filter.reset()  # before the next document
"""

from .config import ConfigError, FilterConfig, build_config, load_config
from .cursor import Cursor
from .exceptions import FilterError, InvalidRangeError, ReentrantCallError, SetupFailedError
from .filter import MarkdownFilter, filter_markdown
from .markup import HtmlMarkupBlanker, MarkupBlanker, passthrough_markup
from .models import (
    BlockQuote,
    Continuation,
    FencedCodeBlock,
    HtmlBlock,
    HtmlComment,
    HtmlTag,
    IndentedCodeBlock,
    InlineCode,
    ListItem,
    Root,
    SingleLineBlock,
    TagState,
)

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "MarkdownFilter",
    "filter_markdown",
    "Cursor",
    # Markup collaborators
    "MarkupBlanker",
    "HtmlMarkupBlanker",
    "passthrough_markup",
    # Data models
    "Root",
    "BlockQuote",
    "ListItem",
    "IndentedCodeBlock",
    "FencedCodeBlock",
    "SingleLineBlock",
    "HtmlBlock",
    "InlineCode",
    "HtmlComment",
    "HtmlTag",
    "Continuation",
    "TagState",
    # Configuration
    "FilterConfig",
    "build_config",
    "load_config",
    # Exceptions
    "ConfigError",
    "FilterError",
    "InvalidRangeError",
    "ReentrantCallError",
    "SetupFailedError",
    # Version
    "__version__",
]
