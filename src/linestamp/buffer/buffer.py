"""In-memory text buffer with anchors, narrowing and edit notifications."""

from __future__ import annotations

from contextlib import AbstractContextManager, contextmanager
from typing import ContextManager, Iterator, List, Optional, Tuple

from linestamp.runtime import telemetry

from . import lines
from .anchors import Anchor, AnchorSet
from .sync import BufferChange, EditCallback
from .validation import ensure_offset, ensure_range


class Buffer:
    """Editable text that tells subscribers what changed.

    Edits are applied in three steps: the text is replaced, live anchors are
    rebased, then subscribers are called with ``(begin, end, pre_length)``
    describing the changed range in post-edit coordinates. Subscribers are
    skipped while :meth:`suppress_notifications` is active, which is how a
    host that never reports edits is modelled.
    """

    def __init__(self, text: str = "", *, name: str = "default") -> None:
        self.name = name
        self._text = text
        self.version = 0
        self.modified = False
        self.anchors = AnchorSet()
        self._subscribers: List[EditCallback] = []
        self._suppressed = 0
        self._narrowed: Optional[Tuple[Anchor, Anchor]] = None

    @classmethod
    def from_text(cls, text: str, *, name: str = "default") -> "Buffer":
        return cls(text, name=name)

    def __len__(self) -> int:
        return len(self._text)

    def __repr__(self) -> str:
        return f"Buffer(name={self.name!r}, length={len(self._text)})"

    @property
    def text(self) -> str:
        return self._text

    def substring(self, begin: int, end: int) -> str:
        begin, end = ensure_range(len(self._text), begin, end)
        return self._text[begin:end]

    # lines -------------------------------------------------------------

    def true_line_start(self, position: int) -> int:
        return lines.true_line_start(self._text, position)

    def line_span(self, position: int) -> lines.LineSpan:
        return lines.line_span(self._text, position)

    def line_starts(self, begin: int, end: int) -> Iterator[int]:
        """Line starts covering ``[begin, end]``, clipped to the accessible range."""

        low, high = self.accessible_range
        yield from lines.iter_line_starts(self._text, max(begin, low), min(end, high))

    def line_starts_backward(self, end: int, stop: int = 0) -> Iterator[int]:
        low, high = self.accessible_range
        yield from lines.iter_line_starts_backward(
            self._text, min(end, high), max(stop, low)
        )

    # edits -------------------------------------------------------------

    def replace_range(self, begin: int, end: int, text: str) -> BufferChange:
        begin, end = ensure_range(len(self._text), begin, end)
        with Transaction(self, "replace_range"):
            pre_length = end - begin
            self._text = self._text[:begin] + text + self._text[end:]
            self.version += 1
            self.modified = True
            self.anchors.rebase(begin, end, len(text))
            change = BufferChange(
                begin=begin,
                end=begin + len(text),
                pre_edit_length=pre_length,
                version=self.version,
            )
        self._notify(change)
        return change

    def insert_text(self, offset: int, text: str) -> BufferChange:
        return self.replace_range(offset, offset, text)

    def append_text(self, text: str) -> BufferChange:
        return self.insert_text(len(self._text), text)

    def delete_range(self, begin: int, end: int) -> BufferChange:
        return self.replace_range(begin, end, "")

    def set_modified(self, value: bool) -> None:
        self.modified = value

    # notifications ---------------------------------------------------

    def subscribe(self, callback: EditCallback) -> None:
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: EditCallback) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @contextmanager
    def suppress_notifications(self) -> Iterator["Buffer"]:
        self._suppressed += 1
        try:
            yield self
        finally:
            self._suppressed -= 1

    def _notify(self, change: BufferChange) -> None:
        if self._suppressed:
            return
        for callback in list(self._subscribers):
            callback(change.begin, change.end, change.pre_edit_length)

    # anchors ----------------------------------------------------------

    def create_anchor(self, offset: int) -> Anchor:
        return self.anchors.create(ensure_offset(len(self._text), offset))

    def release_anchor(self, anchor: Anchor) -> None:
        self.anchors.release(anchor)

    # narrowing ---------------------------------------------------------

    @property
    def accessible_range(self) -> Tuple[int, int]:
        if self._narrowed is None:
            return 0, len(self._text)
        low, high = self._narrowed
        return low.offset, high.offset

    @property
    def is_narrowed(self) -> bool:
        return self._narrowed is not None

    def narrow(self, begin: int, end: int) -> None:
        begin, end = ensure_range(len(self._text), begin, end)
        self.widen()
        self._narrowed = (self.anchors.create(begin), self.anchors.create(end))

    def widen(self) -> None:
        if self._narrowed is None:
            return
        for anchor in self._narrowed:
            self.anchors.release(anchor)
        self._narrowed = None

    @contextmanager
    def widened(self) -> Iterator["Buffer"]:
        """Temporarily lift any narrowing, restoring it (rebased) afterwards."""

        saved = self._narrowed
        self._narrowed = None
        try:
            yield self
        finally:
            if saved is not None and self._narrowed is None:
                self._narrowed = saved
            elif saved is not None:
                for anchor in saved:
                    self.anchors.release(anchor)


class Transaction(AbstractContextManager["Transaction"]):
    """Telemetry span around a single text mutation."""

    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name, "version": self.buffer.version},
        )
        self._span_cm.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["Buffer", "Transaction"]
