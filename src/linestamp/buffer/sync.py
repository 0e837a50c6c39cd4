"""Boundary types for edit notifications between buffers and observers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

EditCallback = Callable[[int, int, int], None]
"""``callback(begin, end, pre_edit_length)`` in post-edit coordinates."""


@dataclass(frozen=True, slots=True)
class BufferChange:
    """Description of one applied edit."""

    begin: int
    end: int
    pre_edit_length: int
    version: int


class EditNotifier(Protocol):
    """What an observer needs from a host buffer to hear about edits."""

    def subscribe(self, callback: EditCallback) -> None:
        """Register ``callback``; registering the same callback twice is a no-op."""
        ...

    def unsubscribe(self, callback: EditCallback) -> None:
        """Drop ``callback``; unknown callbacks are ignored."""
        ...


class BufferValidationError(RuntimeError):
    """Raised when an edit or query addresses offsets outside the buffer."""

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message)
        self.offset = offset


__all__ = ["BufferChange", "BufferValidationError", "EditCallback", "EditNotifier"]
