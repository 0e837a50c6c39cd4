"""Structural line arithmetic over plain text.

Every helper here works on the raw text only, so a "line start" is always the
offset right after a newline (or 0), never a display-adjusted position such
as the end of a shell prompt.
"""

from __future__ import annotations

from typing import Iterator, Tuple

NEWLINE = "\n"

LineSpan = Tuple[int, int]  # (start, end) where end is the newline offset or len(text)


def true_line_start(text: str, position: int) -> int:
    """Return the offset of the first character of the line holding ``position``."""

    position = max(0, min(position, len(text)))
    return text.rfind(NEWLINE, 0, position) + 1


def line_end(text: str, position: int) -> int:
    """Return the offset of the newline ending ``position``'s line, or ``len(text)``."""

    position = max(0, min(position, len(text)))
    found = text.find(NEWLINE, position)
    return len(text) if found < 0 else found


def line_span(text: str, position: int) -> LineSpan:
    return true_line_start(text, position), line_end(text, position)


def next_line_start(text: str, position: int) -> int | None:
    """Start of the line after ``position``'s line, or ``None`` on the last line."""

    end = line_end(text, position)
    if end >= len(text):
        return None
    return end + 1


def previous_line_start(text: str, position: int) -> int | None:
    start = true_line_start(text, position)
    if start == 0:
        return None
    return true_line_start(text, start - 1)


def iter_line_starts(text: str, begin: int, end: int) -> Iterator[int]:
    """Yield line starts from ``begin``'s line through the line holding ``end``."""

    start: int | None = true_line_start(text, begin)
    end = min(end, len(text))
    while start is not None and start <= end:
        yield start
        start = next_line_start(text, start)


def iter_line_starts_backward(text: str, end: int, stop: int = 0) -> Iterator[int]:
    """Yield line starts walking backward from ``end``'s line down to ``stop``'s."""

    floor = true_line_start(text, stop)
    start: int | None = true_line_start(text, end)
    while start is not None and start >= floor:
        yield start
        start = previous_line_start(text, start)


__all__ = [
    "LineSpan",
    "iter_line_starts",
    "iter_line_starts_backward",
    "line_end",
    "line_span",
    "next_line_start",
    "previous_line_start",
    "true_line_start",
]
