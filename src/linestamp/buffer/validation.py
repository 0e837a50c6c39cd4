"""Validation helpers shared across buffer services."""

from __future__ import annotations

from typing import Tuple

from .sync import BufferValidationError


def ensure_offset(length: int, offset: int) -> int:
    if offset < 0 or offset > length:
        raise BufferValidationError(
            f"Offset {offset} outside buffer of length {length}", offset=offset
        )
    return offset


def ensure_range(length: int, begin: int, end: int) -> Tuple[int, int]:
    ensure_offset(length, begin)
    ensure_offset(length, end)
    if begin > end:
        begin, end = end, begin
    return begin, end
