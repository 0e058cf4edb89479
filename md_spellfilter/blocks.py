"""Block openers and continuation tests.

Each block variant has one continuation test, looked up by type, that
decides whether the current line stays inside the block. Openers are tried
in priority order by `open_block`; an opener that does not match leaves the
cursor where it found it.
"""

from __future__ import annotations

from collections.abc import Callable

from .constants import (
    BULLET_MARKERS,
    CODE_INDENT,
    FENCE_CHARS,
    MAX_LIST_MARKER_SPACING,
    MIN_FENCE_LENGTH,
    ORDERED_DELIMITERS,
    SETEXT_UNDERLINE_CHARS,
    THEMATIC_BREAK_CHARS,
)
from .cursor import Cursor
from .inline import InlineContext, open_tag, run_length
from .markup import reset_markup
from .models import (
    Block,
    BlockQuote,
    Continuation,
    FencedCodeBlock,
    HtmlBlock,
    IndentedCodeBlock,
    ListItem,
    Root,
    SingleLineBlock,
    SpanResult,
)


def _is_ascii_digit(character: str) -> bool:
    return character.isascii() and character.isdigit()


# Openers


def open_indented_code(
    cursor: Cursor, prev_blank: bool, context: InlineContext
) -> IndentedCodeBlock | None:
    """Open an indented code block after a blank line.

    The code on the opening line is blanked like every later line.
    """
    if prev_blank and not cursor.at_end_of_line() and cursor.indent >= CODE_INDENT:
        cursor.indent -= CODE_INDENT
        cursor.blank_to_end_of_line()
        return IndentedCodeBlock()
    return None


def open_fenced_code(
    cursor: Cursor, prev_blank: bool, context: InlineContext
) -> FencedCodeBlock | None:
    """Open a fenced code block on three or more backticks or tildes.

    Blanks the fence and its info string.

    Examples:
        cursor = Cursor(list("~~~~ python"), 0, 11)
        open_fenced_code(cursor, False, InlineContext())  # FencedCodeBlock("~", 4)
    """
    fence_char = cursor.peek()
    if fence_char not in FENCE_CHARS:
        return None

    fence_length = run_length(cursor, fence_char)
    if fence_length < MIN_FENCE_LENGTH:
        return None

    cursor.blank_advance(fence_length)
    cursor.blank_to_end_of_line()
    return FencedCodeBlock(fence_char=fence_char, fence_length=fence_length)


def open_block_quote(
    cursor: Cursor, prev_blank: bool, context: InlineContext
) -> BlockQuote | None:
    if cursor.peek() != ">":
        return None
    cursor.blank_advance()
    return BlockQuote()


def open_list_item(cursor: Cursor, prev_blank: bool, context: InlineContext) -> ListItem | None:
    """Open a bullet (``-``, ``+``, ``*``) or ordered (``1.``, ``1)``) list item.

    The marker must be followed by whitespace or end of line. Up to four
    columns of spacing after the marker count toward the continuation
    indent; wider spacing collapses to one column, and the rest stays in
    `cursor.indent` for nested openers (typically an indented code block).

    Args:
        cursor: Cursor on the candidate marker.
        prev_blank: Whether the previous line was blank (unused).
        context: Inline settings (unused).

    Returns:
        ListItem | None: The new item, or None when there is no marker.

    Examples:
        open_list_item(Cursor(list("- item"), 0, 6), True, InlineContext())
        # ListItem(marker="-", required_indent=2)
        open_list_item(Cursor(list("12) item"), 0, 8), True, InlineContext())
        # ListItem(marker=")", required_indent=4)
    """
    character = cursor.peek()
    if character in BULLET_MARKERS:
        marker = character
        width = 1
    elif _is_ascii_digit(character):
        width = 1
        while _is_ascii_digit(cursor.peek(width)):
            width += 1
        if cursor.peek(width) not in ORDERED_DELIMITERS:
            return None
        marker = cursor.peek(width)
        width += 1
    else:
        return None

    following = cursor.peek(width)
    if following and not following.isspace():
        return None

    cursor.advance_and_eat_space(width)
    spacing = cursor.indent
    if spacing <= MAX_LIST_MARKER_SPACING:
        required_indent = width + spacing
        cursor.indent = 0
    else:
        required_indent = width + 1
        cursor.indent = spacing - 1
    return ListItem(marker=marker, required_indent=required_indent)


def _match_thematic_break(cursor: Cursor, character: str) -> Cursor | None:
    probe = cursor.copy()
    probe.advance_and_eat_space()
    while probe.peek() == character:
        probe.advance_and_eat_space()
    return probe if probe.at_end_of_line() else None


def _match_setext_underline(cursor: Cursor, character: str) -> Cursor | None:
    probe = cursor.copy()
    probe.advance_raw()
    while probe.peek() == character:
        probe.advance_raw()
    probe.eat_space()
    return probe if probe.at_end_of_line() else None


def _match_link_definition(cursor: Cursor) -> bool:
    probe = cursor.copy()
    probe.advance_and_eat_space()
    if probe.peek() == "]":
        return False
    while not probe.at_end_of_line() and probe.peek() != "]":
        probe.advance_raw()
    if probe.at_end_of_line():
        return False
    probe.advance_raw()
    return probe.peek() == ":"


def open_single_line_block(
    cursor: Cursor, prev_blank: bool, context: InlineContext
) -> SingleLineBlock | None:
    """Recognize headings, thematic breaks, setext underlines and link definitions.

    Breaks and underlines are consumed; headings and link definitions leave
    the cursor on their text so it is still scanned for inline spans.

    Examples:
        open_single_line_block(Cursor(list("* * *"), 0, 5), False, InlineContext())
        open_single_line_block(Cursor(list("[id]: /url"), 0, 10), False, InlineContext())
    """
    character = cursor.peek()
    if character in THEMATIC_BREAK_CHARS:
        probe = _match_thematic_break(cursor, character)
        if probe is not None:
            cursor.restore(probe)
            return SingleLineBlock()
    elif character in SETEXT_UNDERLINE_CHARS:
        probe = _match_setext_underline(cursor, character)
        if probe is not None:
            cursor.restore(probe)
            return SingleLineBlock()
    elif character == "#":
        return SingleLineBlock()
    elif character == "[" and _match_link_definition(cursor):
        return SingleLineBlock()
    return None


def open_html_block(cursor: Cursor, prev_blank: bool, context: InlineContext) -> HtmlBlock | None:
    """Open an HTML block when a complete tag starts the block.

    A tag still open at end of line does not open a block; its parse stays
    cached so the inline scan at the same position picks it up.
    """
    start = cursor.copy()
    result, _ = open_tag(cursor, context)
    if result is SpanResult.CLOSED:
        context.markup(cursor.buffer, start.position, cursor.position)
        return HtmlBlock()
    cursor.restore(start)
    return None


BlockOpener = Callable[[Cursor, bool, InlineContext], Block | None]

BLOCK_OPENERS: tuple[BlockOpener, ...] = (
    open_indented_code,
    open_fenced_code,
    open_block_quote,
    open_list_item,
    open_single_line_block,
    open_html_block,
)


def open_block(cursor: Cursor, prev_blank: bool, context: InlineContext) -> Block | None:
    """Try every opener in priority order and return the first block opened."""
    context.tag.clear()
    for opener in BLOCK_OPENERS:
        block = opener(cursor, prev_blank, context)
        if block is not None:
            return block
    return None


# Continuation tests


def continue_root(block: Root, cursor: Cursor, context: InlineContext) -> Continuation:
    return Continuation.CONTINUES


def continue_block_quote(
    block: BlockQuote, cursor: Cursor, context: InlineContext
) -> Continuation:
    """Blank a continuing ``>``; a blank line ends the quote, anything else may be lazy."""
    if cursor.peek() == ">":
        cursor.blank_advance()
        return Continuation.CONTINUES
    if cursor.at_end_of_line():
        return Continuation.CANNOT_CONTINUE
    return Continuation.UNDECIDED


def continue_list_item(block: ListItem, cursor: Cursor, context: InlineContext) -> Continuation:
    if not cursor.at_end_of_line() and cursor.indent >= block.required_indent:
        cursor.indent -= block.required_indent
        return Continuation.CONTINUES
    return Continuation.UNDECIDED


def continue_indented_code(
    block: IndentedCodeBlock, cursor: Cursor, context: InlineContext
) -> Continuation:
    if cursor.indent >= CODE_INDENT:
        cursor.indent -= CODE_INDENT
        cursor.blank_to_end_of_line()
        return Continuation.CONTINUES
    if cursor.at_end_of_line():
        return Continuation.CONTINUES
    return Continuation.CANNOT_CONTINUE


def continue_fenced_code(
    block: FencedCodeBlock, cursor: Cursor, context: InlineContext
) -> Continuation:
    """Blank the line; a fence run at least as long as the opener closes the block.

    Examples:
        block = FencedCodeBlock(fence_char="`", fence_length=3)
        continue_fenced_code(block, Cursor(list("````"), 0, 4), InlineContext())
        # Continuation.CANNOT_CONTINUE
    """
    if cursor.peek() == block.fence_char:
        length = run_length(cursor, block.fence_char)
        cursor.blank_advance(length)
        if length >= block.fence_length and cursor.at_end_of_line():
            return Continuation.CANNOT_CONTINUE
    cursor.blank_to_end_of_line()
    return Continuation.CONTINUES


def continue_single_line_block(
    block: SingleLineBlock, cursor: Cursor, context: InlineContext
) -> Continuation:
    return Continuation.CANNOT_CONTINUE


def continue_html_block(block: HtmlBlock, cursor: Cursor, context: InlineContext) -> Continuation:
    """Hand every non-blank line to the markup collaborator; a blank line ends the block."""
    if cursor.at_end_of_line():
        reset_markup(context.markup)
        return Continuation.CANNOT_CONTINUE
    start = cursor.position
    cursor.skip_to_end_of_line()
    context.markup(cursor.buffer, start, cursor.position)
    return Continuation.CONTINUES


_CONTINUATION_TESTS = {
    Root: continue_root,
    BlockQuote: continue_block_quote,
    ListItem: continue_list_item,
    IndentedCodeBlock: continue_indented_code,
    FencedCodeBlock: continue_fenced_code,
    SingleLineBlock: continue_single_line_block,
    HtmlBlock: continue_html_block,
}


def continue_block(block: Block, cursor: Cursor, context: InlineContext) -> Continuation:
    return _CONTINUATION_TESTS[type(block)](block, cursor, context)
