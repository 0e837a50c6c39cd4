"""Reconciler and gap filler: the only code paths that mutate a store.

Both walk the widened buffer so lines hidden by narrowing stay stamped.
"""

from __future__ import annotations

from typing import Optional

from linestamp.runtime.telemetry import span

from .models import AnnotationKind
from .store import AnnotationStore


def _clamp(store: AnnotationStore, begin: int, end: int) -> tuple[int, int]:
    length = len(store.buffer)
    begin = max(0, min(begin, length))
    end = max(0, min(end, length))
    return (begin, end) if begin <= end else (end, begin)


def _is_border_line(
    text: str,
    start: int,
    stop: int,
    begin: int,
    end: int,
    pre_length: Optional[int],
) -> bool:
    """Whether line ``[start, stop]`` only borders a non-empty changed range.

    The line starting right where the range ends always keeps its content.
    The line whose newline opens the range keeps it only for a pure
    insertion (``pre_length == 0``) whose old text resumed at a line break
    or at the end of the buffer; any other edit cut or extended it.
    """

    if begin == end:
        return False
    if start == end:
        return True
    if stop != begin or pre_length != 0:
        return False
    return end == len(text) or text[end] == "\n"


def _restamp_line(store: AnnotationStore, start: int, stop: int) -> None:
    store.remove_overlapping(start, stop)
    store.add(start, AnnotationKind.REAL)


def reconcile(
    store: AnnotationStore,
    begin: int,
    end: int,
    pre_length: Optional[int] = None,
) -> int:
    """Re-stamp every line whose content lies in ``[begin, end]``.

    Touched lines lose whatever annotations they carry and get one fresh
    REAL annotation. Lines that only border a non-empty range keep a single
    well-placed annotation and are otherwise repaired the same way. Returns
    the number of lines given a new annotation.

    ``pre_length`` is the length of the text the edit replaced. Without it
    the line whose newline opens the range is always re-stamped.
    """

    buffer = store.buffer
    with span(
        "annotations::reconcile",
        component="annotations",
        metadata={"buffer": buffer.name, "begin": begin, "end": end},
    ) as handle, buffer.widened():
        begin, end = _clamp(store, begin, end)
        stamped = 0
        for start in list(buffer.line_starts(begin, end)):
            stop = buffer.line_span(start)[1]
            if _is_border_line(buffer.text, start, stop, begin, end, pre_length):
                existing = store.annotations_overlapping(start, stop)
                if len(existing) == 1 and existing[0].position == start:
                    continue
            _restamp_line(store, start, stop)
            stamped += 1
        handle.add_metadata("stamped", stamped)
        return stamped


def fill_gaps(
    store: AnnotationStore,
    begin: Optional[int] = None,
    end: Optional[int] = None,
    *,
    use_placeholder: bool = False,
) -> int:
    """Annotate every line in ``[begin, end]`` that has no annotation yet.

    ``None`` bounds default to the whole buffer. Lines that already carry an
    annotation are left alone, so calling this twice is the same as once.
    """

    buffer = store.buffer
    kind = AnnotationKind.PLACEHOLDER if use_placeholder else AnnotationKind.REAL
    with span(
        "annotations::fill_gaps",
        component="annotations",
        metadata={"buffer": buffer.name, "kind": kind.value},
    ) as handle, buffer.widened():
        begin, end = _clamp(
            store, 0 if begin is None else begin, len(buffer) if end is None else end
        )
        added = 0
        for start in list(buffer.line_starts(begin, end)):
            if store.annotations_on_line(start):
                continue
            store.add(start, kind)
            added += 1
        handle.add_metadata("added", added)
        return added


def fill_tail_gaps(store: AnnotationStore, *, use_placeholder: bool = False) -> int:
    """Annotate the unannotated suffix of the buffer.

    Walks backward from the last line and stops at the first line that
    already has an annotation. Only sound for buffers that grow at the end.
    """

    buffer = store.buffer
    kind = AnnotationKind.PLACEHOLDER if use_placeholder else AnnotationKind.REAL
    with span(
        "annotations::fill_tail_gaps",
        component="annotations",
        metadata={"buffer": buffer.name, "kind": kind.value},
    ) as handle, buffer.widened():
        added = 0
        for start in buffer.line_starts_backward(len(buffer)):
            if store.annotations_on_line(start):
                break
            store.add(start, kind)
            added += 1
        handle.add_metadata("added", added)
        return added


__all__ = ["fill_gaps", "fill_tail_gaps", "reconcile"]
