"""Inline spans that may straddle line boundaries.

Code spans, HTML comments and HTML tags are recognized left to right on the
part of a line left over after block processing. At most one of them can be
left pending at end of line; the filter stores it and hands it back here on
the next line, where it resumes from its saved state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from .constants import CODE_SPAN_CHAR, COMMENT_CLOSE, COMMENT_OPEN, UNQUOTED_VALUE_STOP_CHARS
from .cursor import Cursor
from .markup import MarkupBlanker, passthrough_markup, reset_markup
from .models import HtmlComment, HtmlTag, InlineCode, Span, SpanResult, TagState

logger = logging.getLogger(__name__)


@dataclass
class InlineContext:
    """Settings and scratch state shared by the inline openers.

    Attributes:
        multiline_tags: Whether an unfinished tag may carry over to the next line.
        markup: Collaborator receiving recognized HTML sub-ranges.
        tag: Tag parser used for fresh open attempts; doubles as a position cache.
    """

    multiline_tags: bool = True
    markup: MarkupBlanker = passthrough_markup
    tag: HtmlTag = field(default_factory=HtmlTag)


def _is_ascii_alpha(character: str) -> bool:
    return character.isascii() and character.isalpha()


def _is_ascii_alnum(character: str) -> bool:
    return character.isascii() and character.isalnum()


def run_length(cursor: Cursor, character: str) -> int:
    """Count consecutive occurrences of `character` starting at the cursor."""
    length = 0
    while cursor.peek(length) == character:
        length += 1
    return length


# Code spans


def open_inline_code(cursor: Cursor, context: InlineContext) -> tuple[SpanResult, Span | None]:
    """Open a code span on a run of backticks.

    The opening run, the span content and the closing run are all blanked.

    Args:
        cursor: Cursor positioned on the candidate opener.
        context: Inline settings (unused by code spans).

    Returns:
        tuple[SpanResult, Span | None]: The outcome and the span object.

    Examples:
        cursor = Cursor(list("``a`b``"), 0, 7)
        open_inline_code(cursor, InlineContext())  # (SpanResult.CLOSED, InlineCode(2))
    """
    if cursor.peek() != CODE_SPAN_CHAR or cursor.is_escaped():
        return SpanResult.NO_MATCH, None

    marker_len = run_length(cursor, CODE_SPAN_CHAR)
    cursor.blank_advance(marker_len)
    span = InlineCode(marker_len=marker_len)
    return resume_inline_code(span, cursor, context), span


def resume_inline_code(span: InlineCode, cursor: Cursor, context: InlineContext) -> SpanResult:
    """Blank code span content until a backtick run of exactly the opener's length."""
    while not cursor.at_end_of_line():
        if cursor.peek() == CODE_SPAN_CHAR:
            length = run_length(cursor, CODE_SPAN_CHAR)
            cursor.blank_advance(length)
            if length == span.marker_len:
                return SpanResult.CLOSED
        else:
            cursor.blank_advance()
    return SpanResult.PENDING


# Comments


def open_comment(cursor: Cursor, context: InlineContext) -> tuple[SpanResult, Span | None]:
    if not cursor.startswith(COMMENT_OPEN) or cursor.is_escaped():
        return SpanResult.NO_MATCH, None

    cursor.advance_and_eat_space(len(COMMENT_OPEN))
    span = HtmlComment()
    return resume_comment(span, cursor, context), span


def resume_comment(span: HtmlComment, cursor: Cursor, context: InlineContext) -> SpanResult:
    while not cursor.at_end_of_line():
        if cursor.startswith(COMMENT_CLOSE):
            cursor.advance_and_eat_space(len(COMMENT_CLOSE))
            return SpanResult.CLOSED
        cursor.advance_raw()
    return SpanResult.PENDING


# Tags


def parse_tag_close(cursor: Cursor) -> bool:
    """Consume ``>`` or ``/>`` and any following whitespace."""
    if cursor.peek() == ">":
        cursor.advance_and_eat_space()
        return True
    if cursor.peek() == "/" and cursor.peek(1) == ">":
        cursor.advance_and_eat_space(2)
        return True
    return False


def parse_tag_name(cursor: Cursor) -> str:
    """Consume a tag name without eating trailing whitespace.

    Returns:
        str: The name, or an empty string when the cursor is not on a name.
    """
    if not _is_ascii_alpha(cursor.peek()):
        return ""

    characters = [cursor.peek()]
    cursor.advance_raw()
    while _is_ascii_alnum(cursor.peek()) or cursor.peek() == "-":
        characters.append(cursor.peek())
        cursor.advance_raw()
    return "".join(characters)


def _is_attribute_name_start(character: str) -> bool:
    return _is_ascii_alpha(character) or character in ("_", ":")


def _is_attribute_name_char(character: str) -> bool:
    return _is_ascii_alnum(character) or character in ("_", ":", ".", "-")


def _is_unquoted_value_char(character: str) -> bool:
    return (
        character != ""
        and not character.isspace()
        and character not in UNQUOTED_VALUE_STOP_CHARS
    )


def parse_attribute(cursor: Cursor, state: TagState) -> TagState:
    """Advance the attribute automaton from `state` as far as the line allows.

    Each stage falls through into the next one, so resuming at any saved state
    continues exactly where the previous line stopped. Does not eat trailing
    whitespace.

    Args:
        cursor: Cursor inside a tag.
        state: State to resume from; must not be `VALID` or `INVALID`.

    Returns:
        TagState: `BETWEEN` after a complete attribute, the unchanged in-progress
            state at end of line, or `INVALID`.

    Raises:
        ValueError: If `state` is already resolved.

    Examples:
        parse_attribute(Cursor(list('href="x"'), 0, 8), TagState.BETWEEN)  # BETWEEN
        parse_attribute(Cursor(list("href="), 0, 5), TagState.BETWEEN)  # AFTER_EQ
    """
    if state.resolved:
        raise ValueError(f"Cannot resume attribute parsing from {state.name}")

    if state is TagState.BETWEEN:
        if not _is_attribute_name_start(cursor.peek()):
            return TagState.INVALID
        cursor.advance_raw()
        while _is_attribute_name_char(cursor.peek()):
            cursor.advance_raw()
        state = TagState.AFTER_NAME

    if state is TagState.AFTER_NAME:
        cursor.eat_space()
        if cursor.at_end_of_line():
            return TagState.AFTER_NAME
        if cursor.peek() != "=":
            return TagState.INVALID
        cursor.advance_raw()
        state = TagState.AFTER_EQ

    if state is TagState.AFTER_EQ:
        cursor.eat_space()
        if cursor.at_end_of_line():
            return TagState.AFTER_EQ
        if cursor.peek() == "'":
            cursor.advance_raw()
            state = TagState.IN_SINGLE_QUOTE
        elif cursor.peek() == '"':
            cursor.advance_raw()
            state = TagState.IN_DOUBLE_QUOTE
        else:
            start = cursor.position
            while _is_unquoted_value_char(cursor.peek()):
                cursor.advance_raw()
            if cursor.position == start:
                return TagState.INVALID
            return TagState.BETWEEN

    quote = "'" if state is TagState.IN_SINGLE_QUOTE else '"'
    while not cursor.at_end_of_line() and cursor.peek() != quote:
        cursor.advance_raw()
    if cursor.at_end_of_line():
        return state
    cursor.advance_raw()
    return TagState.BETWEEN


def _finish_tag(
    tag: HtmlTag, start: Cursor, cursor: Cursor, state: TagState, context: InlineContext
) -> SpanResult:
    if state is TagState.VALID:
        tag.state = TagState.VALID
        tag.resume_cursor = cursor.copy()
        return SpanResult.CLOSED

    if state is not TagState.INVALID and context.multiline_tags:
        tag.state = state
        tag.resume_cursor = cursor.copy()
        return SpanResult.PENDING

    tag.state = TagState.INVALID
    tag.resume_cursor = None
    cursor.restore(start)
    return SpanResult.NO_MATCH


def _continue_tag(tag: HtmlTag, cursor: Cursor) -> TagState:
    state = tag.state
    while not cursor.at_end_of_line():
        if state is TagState.BETWEEN:
            leading_space = cursor.peek().isspace()
            if leading_space:
                cursor.eat_space()
            if parse_tag_close(cursor):
                return TagState.VALID
            if cursor.column != 0 and not leading_space:
                return TagState.INVALID
            if cursor.at_end_of_line():
                break

        state = parse_attribute(cursor, state)
        if state is TagState.INVALID:
            return TagState.INVALID
    return state


def open_tag(cursor: Cursor, context: InlineContext) -> tuple[SpanResult, Span | None]:
    """Try to parse an HTML start or end tag at the cursor.

    Repeated calls at the same buffer position reuse the cached outcome
    instead of parsing again. An invalid candidate leaves the cursor where it
    was.

    Args:
        cursor: Cursor positioned on the candidate ``<``.
        context: Inline settings; `context.tag` is the parser and cache.

    Returns:
        tuple[SpanResult, Span | None]: The outcome and the tag object.

    Examples:
        open_tag(Cursor(list("<br/>"), 0, 5), InlineContext())[0]  # SpanResult.CLOSED
        open_tag(Cursor(list("< b"), 0, 3), InlineContext())[0]  # SpanResult.NO_MATCH
    """
    tag = context.tag
    if tag.start_position == cursor.position and tag.start_position is not None:
        if tag.state is TagState.INVALID or tag.resume_cursor is None:
            return SpanResult.NO_MATCH, None
        cursor.restore(tag.resume_cursor)
        if tag.state is TagState.VALID:
            return SpanResult.CLOSED, tag
        return SpanResult.PENDING, tag

    if cursor.peek() != "<" or cursor.is_escaped():
        return SpanResult.NO_MATCH, None

    tag.clear()
    tag.start_position = cursor.position
    start = cursor.copy()

    cursor.advance_raw()
    if cursor.peek() == "/":
        cursor.advance_raw()
        tag.closing = True
    tag.tag_name = parse_tag_name(cursor)
    if not tag.tag_name:
        return _finish_tag(tag, start, cursor, TagState.INVALID, context), None

    tag.state = TagState.BETWEEN
    if cursor.at_end_of_line():
        state = TagState.BETWEEN
    elif parse_tag_close(cursor):
        state = TagState.VALID
    elif cursor.peek().isspace():
        state = _continue_tag(tag, cursor)
    else:
        state = TagState.INVALID

    result = _finish_tag(tag, start, cursor, state, context)
    return result, (None if result is SpanResult.NO_MATCH else tag)


def resume_tag(tag: HtmlTag, cursor: Cursor, context: InlineContext) -> SpanResult:
    """Continue a tag left pending on a previous line.

    An invalid continuation rewinds to where this line's attempt began.
    """
    start = cursor.copy()
    state = _continue_tag(tag, cursor)
    return _finish_tag(tag, start, cursor, state, context)


Opener = Callable[[Cursor, InlineContext], tuple[SpanResult, Span | None]]

OPENERS: tuple[Opener, ...] = (open_inline_code, open_comment, open_tag)

_RESUMERS = {
    InlineCode: resume_inline_code,
    HtmlComment: resume_comment,
    HtmlTag: resume_tag,
}

_MARKUP_SPANS = (HtmlComment, HtmlTag)


def resume_span(span: Span, cursor: Cursor, context: InlineContext) -> SpanResult:
    return _RESUMERS[type(span)](span, cursor, context)


def _hand_off_markup(span: Span, start: int, cursor: Cursor, context: InlineContext) -> None:
    if isinstance(span, _MARKUP_SPANS) and cursor.position > start:
        context.markup(cursor.buffer, start, cursor.position)


def scan_line(cursor: Cursor, pending: Span | None, context: InlineContext) -> Span | None:
    """Scan the rest of the line for inline spans.

    Args:
        cursor: Cursor positioned after the line's block syntax.
        pending: Span carried over from the previous line, if any.
        context: Inline settings and tag cache.

    Returns:
        Span | None: The span left pending at end of line, or None.

    Examples:
        scan_line(Cursor(list("a `b` c"), 0, 7), None, InlineContext())  # None
        scan_line(Cursor(list("a `b"), 0, 4), None, InlineContext())  # InlineCode(1)
    """
    if pending is not None:
        start = cursor.position
        result = resume_span(pending, cursor, context)
        if result is not SpanResult.NO_MATCH:
            _hand_off_markup(pending, start, cursor, context)
        if result is SpanResult.PENDING:
            return pending
        if result is SpanResult.NO_MATCH:
            reset_markup(context.markup)
        logger.debug("Resolved %s carried from previous line", type(pending).__name__)

    while not cursor.at_end_of_line():
        for opener in OPENERS:
            start = cursor.position
            result, span = opener(cursor, context)
            if result is SpanResult.NO_MATCH:
                continue
            _hand_off_markup(span, start, cursor, context)
            if result is SpanResult.PENDING:
                if span is context.tag:
                    context.tag = HtmlTag()
                logger.debug("%s pending at end of line", type(span).__name__)
                return span
            break
        else:
            if cursor.peek() in ("<", ">"):
                cursor.blank_advance()
            else:
                cursor.advance_and_eat_space()
    return None
