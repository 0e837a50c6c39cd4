"""Per-buffer annotation storage keyed by anchor position."""

from __future__ import annotations

from bisect import bisect_left, bisect_right, insort
from typing import Dict, Iterator, List

from linestamp.buffer import Buffer
from linestamp.errors import RendererFailure
from linestamp.runtime import telemetry

from .models import Annotation, AnnotationKind
from .render import Renderer


class AnnotationStore:
    """Holds the annotations of one buffer.

    Membership of a line is decided by anchor position only: an annotation
    belongs to whichever line span its anchor currently falls in. Queries
    treat ranges as closed (``begin <= position <= end``) so an anchor
    collapsed onto the end of a line by a deletion is still found.

    ``add`` does not check for an existing annotation on the target line;
    the reconciler and gap filler are responsible for that.
    """

    def __init__(
        self, buffer: Buffer, renderer: Renderer, *, logger_name: str | None = None
    ) -> None:
        self.buffer = buffer
        self.renderer = renderer
        # sorted by position; anchor rebasing never reorders anchors
        self._annotations: List[Annotation] = []
        self.logger = telemetry.get_logger(logger_name or "linestamp.store")

    def __len__(self) -> int:
        return len(self._annotations)

    def __iter__(self) -> Iterator[Annotation]:
        return iter(self.annotations())

    def annotations(self) -> List[Annotation]:
        return list(self._annotations)

    def annotations_overlapping(self, begin: int, end: int) -> List[Annotation]:
        if begin > end:
            begin, end = end, begin
        low = bisect_left(self._annotations, begin, key=_position)
        high = bisect_right(self._annotations, end, key=_position)
        return self._annotations[low:high]

    def annotations_on_line(self, position: int) -> List[Annotation]:
        start, end = self.buffer.line_span(position)
        return self.annotations_overlapping(start, end)

    def remove_overlapping(self, begin: int, end: int) -> int:
        doomed = self.annotations_overlapping(begin, end)
        for item in doomed:
            self._discard(item)
        return len(doomed)

    def add(self, position: int, kind: AnnotationKind) -> Annotation:
        """Anchor a new annotation at the start of ``position``'s line.

        The anchor exists before the renderer runs, so a renderer that edits
        the buffer moves it along with the text. A renderer exception releases
        the anchor and is raised as :class:`RendererFailure`.
        """

        anchor = self.buffer.create_anchor(self.buffer.true_line_start(position))
        try:
            if kind is AnnotationKind.REAL:
                text = self.renderer.render_real(self.buffer)
            else:
                text = self.renderer.render_placeholder(self.buffer)
        except Exception as exc:
            self.buffer.release_anchor(anchor)
            self.logger.error(
                f"renderer failed buffer={self.buffer.name} kind={kind.value} "
                f"at={anchor.offset}"
            )
            raise RendererFailure(kind.value, anchor.offset, exc) from exc
        annotation = Annotation(anchor=anchor, kind=kind, text=text)
        insort(self._annotations, annotation, key=_position)
        return annotation

    def remove_all(self) -> int:
        count = len(self._annotations)
        for item in list(self._annotations):
            self._discard(item)
        return count

    def line_texts(self) -> Dict[int, str]:
        """Map of line start offset to rendered text, for hosts that draw a gutter."""

        return {item.position: item.text for item in self.annotations()}

    def _discard(self, annotation: Annotation) -> None:
        self._annotations.remove(annotation)
        self.buffer.release_anchor(annotation.anchor)


def _position(annotation: Annotation) -> int:
    return annotation.position


__all__ = ["AnnotationStore"]
