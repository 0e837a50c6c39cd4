"""Renderers turning an annotation kind into display text."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Protocol

from linestamp.buffer import Buffer

DEFAULT_TIMESTAMP_FORMAT = "%H:%M:%S "


class Renderer(Protocol):
    """Produces annotation text; ``buffer`` is the buffer being stamped."""

    def render_real(self, buffer: Buffer) -> str: ...

    def render_placeholder(self, buffer: Buffer) -> str: ...


@dataclass(slots=True)
class TimestampRenderer:
    """Formats the current time with ``strftime``.

    With ``placeholder_matches_width`` the placeholder is a run of blanks as
    wide as a freshly rendered stamp, so stamped and unstamped lines align.
    """

    fmt: str = DEFAULT_TIMESTAMP_FORMAT
    clock: Callable[[], datetime] = datetime.now
    placeholder_matches_width: bool = True
    placeholder_char: str = " "

    def render_real(self, buffer: Buffer) -> str:
        del buffer
        return self.clock().strftime(self.fmt)

    def render_placeholder(self, buffer: Buffer) -> str:
        if not self.placeholder_matches_width:
            return ""
        return self.placeholder_char * len(self.render_real(buffer))


@dataclass(slots=True)
class CallbackRenderer:
    """Adapts two plain callables to the :class:`Renderer` protocol."""

    real: Callable[[Buffer], str]
    placeholder: Callable[[Buffer], str] = lambda _buffer: ""

    def render_real(self, buffer: Buffer) -> str:
        return self.real(buffer)

    def render_placeholder(self, buffer: Buffer) -> str:
        return self.placeholder(buffer)


__all__ = [
    "CallbackRenderer",
    "DEFAULT_TIMESTAMP_FORMAT",
    "Renderer",
    "TimestampRenderer",
]
