from __future__ import annotations

from typing import Iterator

DEFAULT_LINE_WIDTH = 45


class WrappedLines:
    """Lines of a phrase packed to a maximum width.

    Lines are produced lazily; iterating again re-runs the packing.
    """

    def __init__(self, text: str, max_line_chars: int) -> None:
        self._text = text
        self._max_line_chars = max_line_chars

    def __iter__(self) -> Iterator[str]:
        line: list[str] = []
        length = 0
        for word in self._text.split():
            add = len(word) if not line else len(word) + 1
            if line and length + add > self._max_line_chars:
                yield " ".join(line)
                line = []
                length = 0
                add = len(word)
            line.append(word)
            length += add
        if line:
            yield " ".join(line)


def wrap_lines(text: str, max_line_chars: int = DEFAULT_LINE_WIDTH) -> WrappedLines:
    """Greedily pack the words of *text* into lines of at most *max_line_chars*.

    A word longer than the width gets a line of its own and is never split.
    """
    return WrappedLines(text, max_line_chars)
