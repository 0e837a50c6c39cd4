"""Annotation model, renderers, storage and the reconcile/gap-fill walkers."""

from .models import Annotation, AnnotationKind
from .reconcile import fill_gaps, fill_tail_gaps, reconcile
from .render import (
    DEFAULT_TIMESTAMP_FORMAT,
    CallbackRenderer,
    Renderer,
    TimestampRenderer,
)
from .store import AnnotationStore

__all__ = [
    "Annotation",
    "AnnotationKind",
    "AnnotationStore",
    "CallbackRenderer",
    "DEFAULT_TIMESTAMP_FORMAT",
    "Renderer",
    "TimestampRenderer",
    "fill_gaps",
    "fill_tail_gaps",
    "reconcile",
]
