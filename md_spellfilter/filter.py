"""In-place Markdown filter for spell checking.

`MarkdownFilter` blanks Markdown syntax in a character buffer so a spell
checker can read the same buffer as prose. Two pieces of state carry from
line to line and from one `process` call to the next: the chain of open
blocks and at most one pending inline span. `reset` discards both between
documents.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from .blocks import continue_block, open_block
from .config import FilterConfig, normalize_config, validate_config
from .cursor import Cursor
from .exceptions import InvalidRangeError, ReentrantCallError, SetupFailedError
from .inline import InlineContext, scan_line
from .markup import HtmlMarkupBlanker, MarkupBlanker, passthrough_markup, reset_markup
from .models import Block, Continuation, HtmlTag, Root, Span

logger = logging.getLogger(__name__)


class MarkdownFilter:
    """Blank Markdown syntax in place, one buffer at a time.

    Args:
        config: Filter configuration; defaults to a new `FilterConfig`.
        markup: Collaborator for HTML sub-ranges. When omitted it is chosen from
            `config.blank_markup`.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        md_filter = MarkdownFilter()
        buffer = list("> hello world\\n")
        md_filter.process(buffer)
        "".join(buffer)  # "  hello world\\n"
    """

    def __init__(self, config: FilterConfig | None = None, markup: MarkupBlanker | None = None):
        self._markup_override = markup
        self._chain: list[Block] = [Root()]
        self._prev_blank = True
        self._pending: Span | None = None
        self._processing = False
        self._usable = False
        self.setup(config or FilterConfig())

    def setup(self, config: FilterConfig) -> None:
        """Apply a configuration, validating it first.

        A failed setup leaves the filter unusable: `process` raises
        `SetupFailedError` until a later `setup` succeeds.

        Raises:
            ConfigError: If the configuration fails validation.
        """
        self._usable = False
        validate_config(config)
        config = normalize_config(config)
        self.config = config
        self.raw_start_tags = frozenset(config.raw_start_tags)
        self.block_start_tags = frozenset(config.block_start_tags)
        markup = self._markup_override
        if markup is None:
            markup = HtmlMarkupBlanker() if config.blank_markup else passthrough_markup
        self._inline = InlineContext(multiline_tags=config.multiline_tags, markup=markup)
        self._usable = True

    def reset(self) -> None:
        """Forget all state carried from previous buffers."""
        self._chain = [Root()]
        self._prev_blank = True
        self._pending = None
        self._inline.tag = HtmlTag()
        reset_markup(self._inline.markup)

    @property
    def blocks(self) -> tuple[Block, ...]:
        return tuple(self._chain)

    @property
    def pending(self) -> Span | None:
        return self._pending

    def process(self, buffer: list[str], start: int = 0, stop: int | None = None) -> None:
        """Blank Markdown syntax in ``buffer[start:stop]`` in place.

        Only non-whitespace characters are replaced, always by a space; the
        buffer length and all line terminators are unchanged.

        Args:
            buffer: Characters to filter, one element per character.
            start: First position of the view.
            stop: Position one past the view; defaults to the buffer length.

        Raises:
            InvalidRangeError: If the view does not fit in the buffer.
            ReentrantCallError: If called while another call is running.
            SetupFailedError: If the last `setup` call failed.

        Examples:
            buffer = list("Some `code` here\\n")
            MarkdownFilter().process(buffer)
            "".join(buffer)  # "Some        here\\n"
        """
        if stop is None:
            stop = len(buffer)
        if not 0 <= start <= stop <= len(buffer):
            raise InvalidRangeError(start, stop, len(buffer))
        if not self._usable:
            raise SetupFailedError()
        if self._processing:
            raise ReentrantCallError()

        self._processing = True
        try:
            self._inline.tag.clear()
            cursor = Cursor(buffer, start, stop)
            while not cursor.at_end_of_buffer():
                self._process_line(cursor)
                cursor.advance_to_next_line()
        finally:
            self._processing = False

    def _process_line(self, cursor: Cursor) -> None:
        if self._pending is not None:
            logger.debug("Continuing %s", type(self._pending).__name__)
            self._pending = scan_line(cursor, self._pending, self._inline)
            self._prev_blank = False
            return

        self._inline.tag.clear()
        cursor.eat_space()

        break_index, continuation = self._walk_chain(cursor, 0)
        blank_line = cursor.at_end_of_line()

        new_block = None
        if not blank_line and not (
            continuation is Continuation.CONTINUES and self._chain[-1].leaf
        ):
            new_block = open_block(cursor, self._prev_blank, self._inline)

        if (
            new_block is not None
            or continuation is Continuation.CANNOT_CONTINUE
            or (self._prev_blank and not blank_line)
        ):
            self._kill(break_index)
        else:
            self._rewalk_chain(cursor, break_index)

        while new_block is not None:
            self._add(new_block)
            self._prev_blank = True
            if new_block.leaf:
                break
            new_block = open_block(cursor, self._prev_blank, self._inline)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Blocks: %s", " > ".join(type(block).__name__ for block in self._chain))

        self._pending = scan_line(cursor, None, self._inline)
        self._prev_blank = blank_line

    def _walk_chain(self, cursor: Cursor, start_index: int) -> tuple[int, Continuation]:
        continuation = Continuation.CONTINUES
        for index in range(start_index, len(self._chain)):
            continuation = continue_block(self._chain[index], cursor, self._inline)
            if continuation is not Continuation.CONTINUES:
                return index, continuation
        return len(self._chain), continuation

    def _rewalk_chain(self, cursor: Cursor, start_index: int) -> None:
        for index in range(start_index, len(self._chain)):
            if continue_block(self._chain[index], cursor, self._inline) is (
                Continuation.CANNOT_CONTINUE
            ):
                self._kill(index)
                return

    def _kill(self, index: int) -> None:
        # Root is never removed.
        index = max(index, 1)
        if index < len(self._chain):
            logger.debug(
                "Closing %s", ", ".join(type(block).__name__ for block in self._chain[index:])
            )
            del self._chain[index:]

    def _add(self, block: Block) -> None:
        logger.debug("Opening %s", block)
        self._chain.append(block)

    def filter_text(self, text: str) -> str:
        """Filter `text` as a single buffer and return the result."""
        buffer = list(text)
        self.process(buffer)
        return "".join(buffer)

    def filter_lines(self, lines: Iterable[str]) -> Iterator[str]:
        """Filter each line as its own buffer, carrying state between them.

        Args:
            lines: Lines of one document, usually with their terminators.

        Yields:
            str: Each filtered line.
        """
        for line in lines:
            yield self.filter_text(line)


def filter_markdown(text: str, config: FilterConfig | None = None) -> str:
    """Filter a whole document with a fresh `MarkdownFilter`.

    Examples:
        filter_markdown("```\\ncode\\n```\\n")  # "   \\n    \\n   \\n"
    """
    return MarkdownFilter(config).filter_text(text)
