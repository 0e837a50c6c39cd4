"""Dataclasses describing per-line annotations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from linestamp.buffer import Anchor


class AnnotationKind(str, Enum):
    REAL = "real"
    PLACEHOLDER = "placeholder"


@dataclass(eq=False, slots=True)
class Annotation:
    """Marker attached to the start of one line.

    ``anchor`` belongs to the buffer's anchor set, so ``position`` tracks
    edits made before it without the store recomputing anything.
    """

    anchor: Anchor
    kind: AnnotationKind
    text: str
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def position(self) -> int:
        return self.anchor.offset

    @property
    def is_placeholder(self) -> bool:
        return self.kind is AnnotationKind.PLACEHOLDER
