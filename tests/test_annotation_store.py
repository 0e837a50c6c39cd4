from __future__ import annotations

import itertools
from datetime import datetime

import pytest

from linestamp.annotations import (
    AnnotationKind,
    AnnotationStore,
    CallbackRenderer,
    TimestampRenderer,
)
from linestamp.buffer import Buffer
from linestamp.errors import RendererFailure


def make_renderer() -> CallbackRenderer:
    counter = itertools.count(1)
    return CallbackRenderer(
        real=lambda _buffer: f"T{next(counter)}",
        placeholder=lambda _buffer: "--",
    )


def make_store(text: str = "a\nb\nc") -> AnnotationStore:
    return AnnotationStore(Buffer(text, name="store"), make_renderer())


def test_add_anchors_at_true_line_start() -> None:
    store = make_store()

    annotation = store.add(3, AnnotationKind.REAL)

    assert annotation.position == 2
    assert annotation.text == "T1"
    assert annotation.is_placeholder is False
    assert store.annotations_on_line(2) == [annotation]
    assert store.annotations_on_line(3) == [annotation]
    assert store.annotations_overlapping(0, 1) == []


def test_queries_are_sorted_by_position() -> None:
    store = make_store()
    last = store.add(4, AnnotationKind.PLACEHOLDER)
    first = store.add(0, AnnotationKind.REAL)
    middle = store.add(2, AnnotationKind.REAL)

    assert store.annotations() == [first, middle, last]
    assert store.annotations_overlapping(5, 1) == [middle, last]
    assert store.line_texts() == {0: "T1", 2: "T2", 4: "--"}


def test_annotations_move_with_the_buffer() -> None:
    store = make_store()
    annotation = store.add(2, AnnotationKind.REAL)

    store.buffer.insert_text(0, "zz\n")

    assert annotation.position == 5
    assert store.annotations_on_line(5) == [annotation]


def test_remove_overlapping_releases_anchors() -> None:
    store = make_store()
    for position in (0, 2, 4):
        store.add(position, AnnotationKind.PLACEHOLDER)

    removed = store.remove_overlapping(1, 3)

    assert removed == 1
    assert [item.position for item in store] == [0, 4]
    assert len(store.buffer.anchors) == 2

    assert store.remove_all() == 2
    assert len(store) == 0
    assert len(store.buffer.anchors) == 0


def test_renderer_failure_propagates_and_records_nothing() -> None:
    def broken(_buffer: Buffer) -> str:
        raise KeyError("no clock")

    store = AnnotationStore(Buffer("a"), CallbackRenderer(real=broken))

    with pytest.raises(RendererFailure) as info:
        store.add(0, AnnotationKind.REAL)

    assert isinstance(info.value.__cause__, KeyError)
    assert info.value.kind == "real"
    assert len(store) == 0
    assert len(store.buffer.anchors) == 0


def test_add_follows_edits_made_by_the_renderer() -> None:
    def real(buffer: Buffer) -> str:
        buffer.insert_text(0, "zz")
        return "T"

    store = AnnotationStore(Buffer("a\nb"), CallbackRenderer(real=real))

    annotation = store.add(2, AnnotationKind.REAL)

    assert store.buffer.text == "zza\nb"
    assert annotation.position == 4
    assert len(store.buffer.anchors) == 1


def test_timestamp_renderer_pads_placeholders() -> None:
    renderer = TimestampRenderer(clock=lambda: datetime(2024, 1, 2, 3, 4, 5))
    buffer = Buffer()

    assert renderer.render_real(buffer) == "03:04:05 "
    assert renderer.render_placeholder(buffer) == " " * 9

    narrow = TimestampRenderer(fmt="%H:%M", placeholder_matches_width=False)
    assert narrow.render_placeholder(buffer) == ""
