"""Positions that follow the text they point into.

An :class:`AnchorSet` is owned by a :class:`~linestamp.buffer.buffer.Buffer`
and rebased on every edit before edit notifications go out, so anything
reading an anchor from inside a notification sees post-edit coordinates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List


@dataclass(eq=False, slots=True)
class Anchor:
    """Handle onto a buffer offset. Compared by identity."""

    offset: int
    released: bool = field(default=False, repr=False)

    def shift(self, begin: int, old_end: int, inserted: int) -> None:
        # text inserted exactly at the anchor lands after it
        if self.offset <= begin:
            return
        if self.offset >= old_end:
            self.offset += inserted - (old_end - begin)
        else:
            self.offset = begin


class AnchorSet:
    """Arena of live anchors for one buffer."""

    def __init__(self) -> None:
        self._anchors: List[Anchor] = []

    def __len__(self) -> int:
        return len(self._anchors)

    def __iter__(self) -> Iterator[Anchor]:
        return iter(list(self._anchors))

    def create(self, offset: int) -> Anchor:
        anchor = Anchor(offset)
        self._anchors.append(anchor)
        return anchor

    def release(self, anchor: Anchor) -> None:
        if anchor.released:
            return
        anchor.released = True
        self._anchors.remove(anchor)

    def rebase(self, begin: int, old_end: int, inserted: int) -> None:
        """Apply the replacement of ``[begin, old_end)`` by ``inserted`` chars."""

        for anchor in self._anchors:
            anchor.shift(begin, old_end, inserted)

    def clear(self) -> None:
        for anchor in self._anchors:
            anchor.released = True
        self._anchors.clear()


__all__ = ["Anchor", "AnchorSet"]
