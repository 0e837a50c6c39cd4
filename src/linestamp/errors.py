"""Exception types raised by the stamping engine."""

from __future__ import annotations


class LineStampError(RuntimeError):
    """Base class for engine errors."""


class RendererFailure(LineStampError):
    """The pluggable renderer raised while producing annotation text."""

    def __init__(self, kind: str, position: int, cause: BaseException) -> None:
        super().__init__(f"Renderer failed for {kind} annotation at {position}: {cause}")
        self.kind = kind
        self.position = position
        self.cause = cause


class DetachedBufferError(LineStampError):
    """An operation addressed a buffer that has no enabled stamping session."""

    def __init__(self, buffer_name: str) -> None:
        super().__init__(f"Buffer '{buffer_name}' is not stamped")
        self.buffer_name = buffer_name


class ConfigError(LineStampError, ValueError):
    """Invalid stamping configuration."""


__all__ = ["ConfigError", "DetachedBufferError", "LineStampError", "RendererFailure"]
