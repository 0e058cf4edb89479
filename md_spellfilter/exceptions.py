"""Package-specific exception types."""

from __future__ import annotations


class FilterError(Exception):
    """Base class for errors raised by the Markdown filter.

    Malformed Markdown never raises; these errors report misuse of the filter
    by its host.
    """


class InvalidRangeError(FilterError, ValueError):
    """Raised when a processing view does not fit inside its buffer.

    Args:
        start: First position of the requested view.
        stop: Position one past the end of the requested view.
        size: Length of the buffer.
    """

    def __init__(self, start: int, stop: int, size: int):
        self.start = start
        self.stop = stop
        self.size = size
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return (
            f"Invalid buffer view [{self.start}:{self.stop}] "
            f"for a buffer of {self.size} characters"
        )


class ReentrantCallError(FilterError, RuntimeError):
    """Raised when `process` is called while another call is still running."""

    def __init__(self):
        super().__init__("MarkdownFilter.process is not reentrant")


class SetupFailedError(FilterError, RuntimeError):
    """Raised by `process` after the most recent `setup` call failed."""

    def __init__(self):
        super().__init__(
            "MarkdownFilter setup failed; call setup() with a valid configuration first"
        )
