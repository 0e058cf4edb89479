"""Markup-blanking collaborators for HTML found inside Markdown.

A collaborator receives the buffer and a ``[start, stop)`` sub-range that the
filter recognized as an HTML tag, comment or HTML block line. It may blank
markup in place but must never change the buffer length. Ranges arrive in
buffer order, one line at a time, so a tag or comment that spans lines is
handed over in several pieces.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum, auto

from .constants import COMMENT_CLOSE, COMMENT_OPEN
from .cursor import blank

MarkupBlanker = Callable[[list[str], int, int], None]


def passthrough_markup(buffer: list[str], start: int, stop: int) -> None:
    """Leave HTML untouched for a downstream markup filter."""


def reset_markup(markup: MarkupBlanker) -> None:
    """Forget state a collaborator carries between ranges, if it has any."""
    reset = getattr(markup, "reset", None)
    if reset is not None:
        reset()


class _MarkupState(Enum):
    TEXT = auto()
    TAG = auto()
    COMMENT = auto()


def _matches(buffer: list[str], index: int, stop: int, text: str) -> bool:
    return index + len(text) <= stop and "".join(buffer[index : index + len(text)]) == text


def _starts_tag(buffer: list[str], index: int, stop: int) -> bool:
    if index + 1 >= stop:
        return False
    following = buffer[index + 1]
    return (following.isascii() and following.isalpha()) or following in ("/", "!", "?")


class HtmlMarkupBlanker:
    """Blank HTML tag syntax and comment delimiters, keeping text in between.

    Everything from ``<`` to the closing ``>`` of a tag is blanked, attribute
    values included. Text between tags, entity references and comment
    content stay readable for the spell checker. Whether the previous range
    ended inside a tag or comment is remembered, so the continuation of a
    multi-line tag is blanked too.

    Examples:
        blanker = HtmlMarkupBlanker()
        buffer = list("<p class='x'>Some &amp; text</p>")
        blanker(buffer, 0, len(buffer))
        "".join(buffer)  # "             Some &amp; text    "
    """

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self._state = _MarkupState.TEXT
        self._quote = ""

    def __call__(self, buffer: list[str], start: int, stop: int) -> None:
        index = start
        while index < stop:
            if self._state is _MarkupState.COMMENT:
                if _matches(buffer, index, stop, COMMENT_CLOSE):
                    index = self._blank_run(buffer, index, len(COMMENT_CLOSE))
                    self._state = _MarkupState.TEXT
                else:
                    index += 1
            elif self._state is _MarkupState.TAG:
                index = self._blank_tag(buffer, index, stop)
            elif _matches(buffer, index, stop, COMMENT_OPEN):
                index = self._blank_run(buffer, index, len(COMMENT_OPEN))
                self._state = _MarkupState.COMMENT
            elif buffer[index] == "<" and _starts_tag(buffer, index, stop):
                self._state = _MarkupState.TAG
                self._quote = ""
            else:
                index += 1

    @staticmethod
    def _blank_run(buffer: list[str], index: int, length: int) -> int:
        for offset in range(length):
            blank(buffer, index + offset)
        return index + length

    def _blank_tag(self, buffer: list[str], index: int, stop: int) -> int:
        while index < stop:
            character = buffer[index]
            blank(buffer, index)
            index += 1
            if self._quote:
                if character == self._quote:
                    self._quote = ""
            elif character in ("'", '"'):
                self._quote = character
            elif character == ">":
                self._state = _MarkupState.TEXT
                break
        return index
