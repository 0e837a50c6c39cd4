"""Stamping configuration and detection modes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from linestamp.annotations.render import (
    DEFAULT_TIMESTAMP_FORMAT,
    Renderer,
    TimestampRenderer,
)
from linestamp.errors import ConfigError
from linestamp.runtime.telemetry import env, env_flag

DEFAULT_POLL_PERIOD = 0.5


class DetectionMode(str, Enum):
    """How edits are discovered for a buffer."""

    NOTIFICATION = "notification"
    POLL = "poll"


@dataclass
class StampConfig:
    """Options recognised by :class:`~linestamp.engine.manager.LineStampEngine`.

    ``renderer`` defaults to a :class:`TimestampRenderer` built from
    ``timestamp_format`` and ``placeholder_width_matches_timestamp``.
    """

    detection_mode: DetectionMode = DetectionMode.NOTIFICATION
    poll_period_seconds: float = DEFAULT_POLL_PERIOD
    renderer: Optional[Renderer] = None
    placeholder_width_matches_timestamp: bool = True
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT

    def __post_init__(self) -> None:
        try:
            self.detection_mode = DetectionMode(self.detection_mode)
        except ValueError as exc:
            raise ConfigError(
                f"Unknown detection mode '{self.detection_mode}'"
            ) from exc
        if self.poll_period_seconds <= 0:
            raise ConfigError(
                f"poll_period_seconds must be positive, got {self.poll_period_seconds}"
            )
        if self.renderer is None:
            self.renderer = TimestampRenderer(
                fmt=self.timestamp_format,
                placeholder_matches_width=self.placeholder_width_matches_timestamp,
            )

    @classmethod
    def from_env(cls, **overrides: object) -> "StampConfig":
        """Build a config from ``LINESTAMP_*`` variables; ``overrides`` win."""

        values: dict[str, object] = {}
        mode = env("DETECTION_MODE")
        if mode:
            values["detection_mode"] = mode.strip().lower()
        period = env("POLL_PERIOD")
        if period:
            try:
                values["poll_period_seconds"] = float(period)
            except ValueError as exc:
                raise ConfigError(
                    f"LINESTAMP_POLL_PERIOD is not a number: {period!r}"
                ) from exc
        fmt = env("TIMESTAMP_FORMAT")
        if fmt:
            values["timestamp_format"] = fmt
        values["placeholder_width_matches_timestamp"] = env_flag(
            "PLACEHOLDER_MATCHES_WIDTH", True
        )
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]


__all__ = ["DEFAULT_POLL_PERIOD", "DetectionMode", "StampConfig"]
