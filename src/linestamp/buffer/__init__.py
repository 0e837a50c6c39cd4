"""Host buffer: text storage, anchors, line arithmetic and edit notifications."""

from .anchors import Anchor, AnchorSet
from .buffer import Buffer, Transaction
from .lines import (
    iter_line_starts,
    iter_line_starts_backward,
    line_end,
    line_span,
    true_line_start,
)
from .sync import BufferChange, BufferValidationError, EditCallback, EditNotifier
from .validation import ensure_offset, ensure_range

__all__ = [
    "Anchor",
    "AnchorSet",
    "Buffer",
    "BufferChange",
    "BufferValidationError",
    "EditCallback",
    "EditNotifier",
    "Transaction",
    "ensure_offset",
    "ensure_range",
    "iter_line_starts",
    "iter_line_starts_backward",
    "line_end",
    "line_span",
    "true_line_start",
]
