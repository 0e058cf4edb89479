"""Data models for md-spellfilter."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .cursor import Cursor


class Continuation(Enum):
    """Answer of a block's continuation test for the current line.

    Attributes:
        CONTINUES: The line belongs to the block; keep walking the chain.
        CANNOT_CONTINUE: The line closes the block.
        UNDECIDED: The block may still continue lazily; decide after openers run.
    """

    CONTINUES = auto()
    CANNOT_CONTINUE = auto()
    UNDECIDED = auto()


class TagState(Enum):
    """States of the resumable HTML tag micro-parser.

    Attributes:
        BETWEEN: Expecting an attribute name or the tag close.
        AFTER_NAME: An attribute name was read; expecting ``=`` or more space.
        AFTER_EQ: Expecting an attribute value.
        IN_SINGLE_QUOTE: Inside a single-quoted attribute value.
        IN_DOUBLE_QUOTE: Inside a double-quoted attribute value.
        VALID: The tag closed with ``>`` or ``/>``.
        INVALID: The candidate is not a tag.
    """

    BETWEEN = auto()
    AFTER_NAME = auto()
    AFTER_EQ = auto()
    IN_SINGLE_QUOTE = auto()
    IN_DOUBLE_QUOTE = auto()
    VALID = auto()
    INVALID = auto()

    @property
    def resolved(self) -> bool:
        return self in (TagState.VALID, TagState.INVALID)


class SpanResult(Enum):
    """Outcome of trying an inline span opener at the cursor.

    Attributes:
        NO_MATCH: Nothing was recognized; the cursor did not move.
        CLOSED: A span opened and closed; the cursor moved past it.
        PENDING: A span reached end of line unresolved and carries to the next line.
    """

    NO_MATCH = auto()
    CLOSED = auto()
    PENDING = auto()


# Blocks


@dataclass
class Root:
    """Permanent first node of the open-block chain."""

    leaf = False


@dataclass
class BlockQuote:
    """A ``>`` block quote."""

    leaf = False


@dataclass
class ListItem:
    """A bullet or ordered list item.

    Attributes:
        marker: ``-``, ``+`` or ``*`` for bullets; ``.`` or ``)`` for ordered items.
        required_indent: Indentation a line needs to stay inside the item.
    """

    marker: str
    required_indent: int
    leaf = False


@dataclass
class IndentedCodeBlock:
    """A code block indented by four or more columns."""

    leaf = True


@dataclass
class FencedCodeBlock:
    """A code block delimited by backtick or tilde fences.

    Attributes:
        fence_char: Character of the opening fence.
        fence_length: Number of fence characters that opened the block.
    """

    fence_char: str
    fence_length: int
    leaf = True


@dataclass
class SingleLineBlock:
    """A heading, thematic break, setext underline or link reference definition."""

    leaf = True


@dataclass
class HtmlBlock:
    """Raw HTML opened by a valid tag at the start of a block."""

    leaf = True


Block = Union[
    Root, BlockQuote, ListItem, IndentedCodeBlock, FencedCodeBlock, SingleLineBlock, HtmlBlock
]


# Inline spans


@dataclass
class InlineCode:
    """A backtick code span.

    Attributes:
        marker_len: Number of backticks in the opening run.
    """

    marker_len: int


@dataclass
class HtmlComment:
    """An ``<!-- ... -->`` comment."""


@dataclass
class HtmlTag:
    """An HTML start or end tag being parsed, possibly across lines.

    Attributes:
        tag_name: Name of the tag as written.
        closing: Whether the tag is an end tag (``</name``).
        state: Current micro-parser state.
        start_position: Buffer position of the last open attempt, used as a cache key.
        resume_cursor: Cursor where the cached attempt left off, when pending.
    """

    tag_name: str = ""
    closing: bool = False
    state: TagState = TagState.INVALID
    start_position: int | None = None
    resume_cursor: Cursor | None = field(default=None, repr=False, compare=False)

    def clear(self) -> None:
        self.tag_name = ""
        self.closing = False
        self.state = TagState.INVALID
        self.start_position = None
        self.resume_cursor = None


Span = Union[InlineCode, HtmlComment, HtmlTag]
