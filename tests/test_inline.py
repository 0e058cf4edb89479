import pytest

from md_spellfilter.cursor import Cursor
from md_spellfilter.inline import (
    InlineContext,
    open_comment,
    open_inline_code,
    open_tag,
    parse_attribute,
    parse_tag_name,
    resume_comment,
    resume_inline_code,
    scan_line,
)
from md_spellfilter.models import HtmlComment, HtmlTag, InlineCode, SpanResult, TagState


def _cursor(text: str, position: int = 0) -> Cursor:
    return Cursor(list(text), position, len(text))


def _text(cursor: Cursor) -> str:
    return "".join(cursor.buffer)


@pytest.mark.parametrize(
    ("text", "state", "expected", "position"),
    [
        ('href="x"', TagState.BETWEEN, TagState.BETWEEN, 8),
        ("a=b c", TagState.BETWEEN, TagState.BETWEEN, 3),
        ("data-x='1'", TagState.BETWEEN, TagState.BETWEEN, 10),
        ("href=", TagState.BETWEEN, TagState.AFTER_EQ, 5),
        ("href  ", TagState.BETWEEN, TagState.AFTER_NAME, 6),
        ('href="a b', TagState.BETWEEN, TagState.IN_DOUBLE_QUOTE, 9),
        ('b" c', TagState.IN_DOUBLE_QUOTE, TagState.BETWEEN, 2),
        ("= 'v'", TagState.AFTER_NAME, TagState.BETWEEN, 5),
    ],
)
def test_parse_attribute_resumes_from_any_state(text, state, expected, position):
    cursor = _cursor(text)

    assert parse_attribute(cursor, state) is expected
    assert cursor.position == position


@pytest.mark.parametrize(
    ("text", "state"),
    [
        ("=x", TagState.BETWEEN),
        ("href x", TagState.BETWEEN),
        ("a= >", TagState.BETWEEN),
    ],
)
def test_parse_attribute_rejects_malformed_attributes(text, state):
    assert parse_attribute(_cursor(text), state) is TagState.INVALID


@pytest.mark.parametrize("state", [TagState.VALID, TagState.INVALID])
def test_parse_attribute_refuses_resolved_state(state):
    with pytest.raises(ValueError, match="Cannot resume"):
        parse_attribute(_cursor("a=b"), state)


def test_parse_tag_name_stops_before_whitespace():
    cursor = _cursor("my-tag2 x")

    assert parse_tag_name(cursor) == "my-tag2"
    assert cursor.peek() == " "
    assert parse_tag_name(_cursor("2b")) == ""


@pytest.mark.parametrize(
    ("text", "closing", "position"),
    [
        ("<br/>", False, 5),
        ("</a>", True, 4),
        ("<b>  x", False, 5),
        ('<a href="x" title=t>', False, 20),
    ],
)
def test_open_tag_closes_complete_tags(inline_context, text, closing, position):
    cursor = _cursor(text)

    result, span = open_tag(cursor, inline_context)

    assert result is SpanResult.CLOSED
    assert span is inline_context.tag
    assert span.closing is closing
    assert span.state is TagState.VALID
    assert cursor.position == position


@pytest.mark.parametrize("text", ["< b>", "<1>", "<ab!>", "<a\tb>", "<input disabled>"])
def test_open_tag_rejects_without_moving(inline_context, text):
    cursor = _cursor(text)

    assert open_tag(cursor, inline_context) == (SpanResult.NO_MATCH, None)
    assert cursor.position == 0


def test_open_tag_skips_escaped_bracket(inline_context):
    cursor = _cursor("\\<b>", position=1)

    assert open_tag(cursor, inline_context) == (SpanResult.NO_MATCH, None)
    assert cursor.position == 1


def test_open_tag_pending_only_with_multiline_tags():
    cursor = _cursor("<a href=")
    result, span = open_tag(cursor, InlineContext(multiline_tags=True))
    assert result is SpanResult.PENDING
    assert span.tag_name == "a"
    assert span.state is TagState.AFTER_EQ
    assert cursor.at_end_of_line()

    cursor = _cursor("<a href=")
    result, span = open_tag(cursor, InlineContext(multiline_tags=False))
    assert (result, span) == (SpanResult.NO_MATCH, None)
    assert cursor.position == 0


def test_open_tag_at_end_of_line_is_pending(inline_context):
    result, span = open_tag(_cursor("<div"), inline_context)

    assert result is SpanResult.PENDING
    assert span.state is TagState.BETWEEN


def test_open_tag_reuses_cached_result(inline_context):
    buffer = list("<b>x")
    assert open_tag(Cursor(buffer, 0, 4), inline_context)[0] is SpanResult.CLOSED

    # A fresh parse would now fail; the cached outcome is used instead.
    buffer[1] = "1"
    cursor = Cursor(buffer, 0, 4)
    assert open_tag(cursor, inline_context)[0] is SpanResult.CLOSED
    assert cursor.position == 3

    inline_context.tag.clear()
    assert open_tag(Cursor(buffer, 0, 4), inline_context)[0] is SpanResult.NO_MATCH


def test_open_tag_caches_rejections(inline_context):
    cursor = _cursor("<1>")
    open_tag(cursor, inline_context)

    assert inline_context.tag.start_position == 0
    assert open_tag(cursor, inline_context) == (SpanResult.NO_MATCH, None)


def test_open_inline_code_blanks_whole_span(inline_context):
    cursor = _cursor("``a`b`` c")

    result, span = open_inline_code(cursor, inline_context)

    assert result is SpanResult.CLOSED
    assert span == InlineCode(marker_len=2)
    assert _text(cursor) == "        c"
    assert cursor.peek() == "c"


def test_open_inline_code_pending_at_end_of_line(inline_context):
    cursor = _cursor("`abc")

    assert open_inline_code(cursor, inline_context) == (SpanResult.PENDING, InlineCode(1))
    assert _text(cursor) == "    "


def test_open_inline_code_skips_escaped_backtick(inline_context):
    cursor = _cursor("\\`a`", position=1)

    assert open_inline_code(cursor, inline_context) == (SpanResult.NO_MATCH, None)
    assert _text(cursor) == "\\`a`"


def test_resume_inline_code_closes_on_matching_run(inline_context):
    cursor = _cursor("x` y")

    assert resume_inline_code(InlineCode(1), cursor, inline_context) is SpanResult.CLOSED
    assert _text(cursor) == "   y"

    cursor = _cursor("x` y")
    assert resume_inline_code(InlineCode(2), cursor, inline_context) is SpanResult.PENDING
    assert _text(cursor) == "    "


def test_open_comment_leaves_content_alone(inline_context):
    cursor = _cursor("<!-- hi -->x")

    result, span = open_comment(cursor, inline_context)

    assert (result, span) == (SpanResult.CLOSED, HtmlComment())
    assert cursor.peek() == "x"
    assert _text(cursor) == "<!-- hi -->x"


def test_open_comment_pending_and_resumed(inline_context):
    cursor = _cursor("<!-- hi")
    assert open_comment(cursor, inline_context)[0] is SpanResult.PENDING

    cursor = _cursor("a --> b")
    assert resume_comment(HtmlComment(), cursor, inline_context) is SpanResult.CLOSED
    assert cursor.peek() == "b"


def test_open_comment_requires_full_opener(inline_context):
    assert open_comment(_cursor("<!- x"), inline_context) == (SpanResult.NO_MATCH, None)
    assert open_comment(_cursor("<!-\n-"), inline_context) == (SpanResult.NO_MATCH, None)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("a `b` c", "a     c"),
        ("`a` `b`", "       "),
        ("x < y > z", "x   y   z"),
        ("1 \\`a 2", "1 \\`a 2"),
        ("a <b>bold</b> c", "a <b>bold</b> c"),
    ],
)
def test_scan_line_blanks_code_and_stray_brackets(inline_context, text, expected):
    cursor = _cursor(text)

    assert scan_line(cursor, None, inline_context) is None
    assert _text(cursor) == expected


def test_scan_line_hands_tags_to_markup(markup_recorder):
    context = InlineContext(markup=markup_recorder)

    scan_line(_cursor("a <b>x</b>"), None, context)

    assert markup_recorder.calls == [(2, 5), (6, 10)]


def test_scan_line_returns_pending_tag_and_replaces_parser(markup_recorder):
    context = InlineContext(markup=markup_recorder)
    parser = context.tag

    pending = scan_line(_cursor("<a href="), None, context)

    assert pending is parser
    assert context.tag is not parser
    assert pending.state is TagState.AFTER_EQ
    assert markup_recorder.calls == [(0, 8)]

    assert scan_line(_cursor('"x">link'), pending, context) is None
    assert markup_recorder.calls == [(0, 8), (0, 4)]


def test_scan_line_resumes_pending_code_span(inline_context):
    cursor = _cursor("x` y")

    assert scan_line(cursor, InlineCode(1), inline_context) is None
    assert _text(cursor) == "   y"


def test_scan_line_rewinds_invalid_tag_continuation(inline_context):
    cursor = _cursor("!oops `c`")
    pending = HtmlTag(tag_name="a", state=TagState.BETWEEN)

    assert scan_line(cursor, pending, inline_context) is None
    assert _text(cursor) == "!oops    "
