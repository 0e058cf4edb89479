"""Line-scoped cursor over a mutable character buffer."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .constants import BLANK, EOL, LINE_TERMINATORS, TAB_STOP


def blank(buffer: list[str], index: int) -> None:
    """Overwrite a non-whitespace character with a space.

    Whitespace (including tabs) is left alone so display columns are kept.
    """
    if not buffer[index].isspace():
        buffer[index] = BLANK


@dataclass
class Cursor:
    """Position inside a buffer with tab-aware column tracking.

    The cursor never crosses a line terminator except through
    `advance_to_next_line`; at a terminator, or at `stop`, reads return the
    `EOL` sentinel.

    Attributes:
        buffer: Characters being filtered, one element per character.
        position: Index of the character under the cursor.
        stop: Index one past the last character of the view.
        column: Display column of `position`, with tab stops every four columns.
        indent: Whitespace width consumed by the most recent whitespace-eating step.
        line_end: Index of the terminator ending the current line, or `stop`.
            Found once per line; negative means "not computed yet".

    Examples:
        cursor = Cursor(list("> quote\\n"), 0, 8)
        cursor.peek()  # ">"
    """

    buffer: list[str]
    position: int
    stop: int
    column: int = 0
    indent: int = 0
    line_end: int = -1

    def __post_init__(self) -> None:
        if self.line_end < 0:
            self.line_end = self._find_line_end()

    def _find_line_end(self) -> int:
        index = self.position
        while index < self.stop and self.buffer[index] not in LINE_TERMINATORS:
            index += 1
        return index

    def copy(self) -> Cursor:
        return replace(self)

    def restore(self, other: Cursor) -> None:
        """Move back to a position captured with `copy`."""
        self.position = other.position
        self.column = other.column
        self.indent = other.indent
        self.line_end = other.line_end

    def peek(self, offset: int = 0) -> str:
        """Return the character `offset` positions ahead, or `EOL`.

        Args:
            offset: Number of characters to look ahead.

        Returns:
            str: The character, or `EOL` when the lookahead would reach a line
                terminator or the end of the view.

        Examples:
            Cursor(list("ab\\ncd"), 0, 5).peek(2)  # ""
        """
        if self.position + offset >= self.line_end:
            return EOL
        return self.buffer[self.position + offset]

    def width(self) -> int:
        if self.position >= self.stop:
            return 0
        if self.buffer[self.position] == "\t":
            return TAB_STOP - (self.column % TAB_STOP)
        return 1

    def startswith(self, text: str) -> bool:
        return all(self.peek(offset) == character for offset, character in enumerate(text))

    def at_end_of_line(self) -> bool:
        return self.peek() == EOL

    def at_end_of_buffer(self) -> bool:
        return self.position >= self.stop

    def is_escaped(self) -> bool:
        """Check whether the character under the cursor follows an odd run of backslashes."""
        backslash_count = 0
        index = self.position - 1
        while index >= 0 and self.buffer[index] == "\\":
            backslash_count += 1
            index -= 1
        return backslash_count % 2 == 1

    def advance_raw(self, count: int = 1) -> None:
        """Move `count` characters forward without eating whitespace."""
        for _ in range(count):
            self.indent = 0
            if self.position >= self.stop:
                return
            self.column += self.width()
            self.position += 1

    def eat_space(self) -> int:
        """Consume spaces and tabs, recording their display width in `indent`.

        Returns:
            int: The width consumed.
        """
        self.indent = 0
        while not self.at_end_of_line():
            character = self.buffer[self.position]
            if character not in " \t":
                break
            step = self.width()
            self.position += 1
            self.indent += step
            self.column += step
        return self.indent

    def advance_and_eat_space(self, count: int = 1) -> None:
        self.advance_raw(count)
        self.eat_space()

    def blank_advance(self, count: int = 1) -> None:
        """Blank up to `count` characters while advancing, then eat whitespace.

        Stops early at end of line.
        """
        for _ in range(count):
            if self.at_end_of_line():
                break
            blank(self.buffer, self.position)
            self.advance_raw()
        self.eat_space()

    def blank_to_end_of_line(self) -> None:
        while not self.at_end_of_line():
            blank(self.buffer, self.position)
            self.advance_raw()

    def skip_to_end_of_line(self) -> None:
        while not self.at_end_of_line():
            self.advance_raw()

    def advance_to_next_line(self) -> None:
        """Skip the rest of the line and its terminator.

        Accepts ``\\n``, ``\\r``, ``\\r\\n`` and ``\\n\\r`` terminators.
        """
        self.skip_to_end_of_line()
        if not self.at_end_of_buffer():
            first = self.buffer[self.position]
            self.position += 1
            if not self.at_end_of_buffer():
                second = self.buffer[self.position]
                if second in LINE_TERMINATORS and second != first:
                    self.position += 1
        self.column = 0
        self.indent = 0
        self.line_end = self._find_line_end()
