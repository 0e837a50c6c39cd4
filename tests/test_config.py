from __future__ import annotations

import pytest

from linestamp.annotations import CallbackRenderer, TimestampRenderer
from linestamp.config import DEFAULT_POLL_PERIOD, DetectionMode, StampConfig
from linestamp.errors import ConfigError


def test_defaults_build_timestamp_renderer() -> None:
    config = StampConfig()

    assert config.detection_mode is DetectionMode.NOTIFICATION
    assert config.poll_period_seconds == DEFAULT_POLL_PERIOD
    assert isinstance(config.renderer, TimestampRenderer)
    assert config.renderer.placeholder_matches_width is True


def test_mode_accepts_plain_strings() -> None:
    config = StampConfig(detection_mode="poll")  # type: ignore[arg-type]

    assert config.detection_mode is DetectionMode.POLL


def test_explicit_renderer_is_kept() -> None:
    renderer = CallbackRenderer(real=lambda _buffer: "now")

    assert StampConfig(renderer=renderer).renderer is renderer


@pytest.mark.parametrize(
    "kwargs",
    [
        {"detection_mode": "inotify"},
        {"poll_period_seconds": 0},
        {"poll_period_seconds": -1.5},
    ],
)
def test_invalid_values_raise_config_error(kwargs: dict) -> None:
    with pytest.raises(ConfigError):
        StampConfig(**kwargs)


def test_from_env_reads_prefixed_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LINESTAMP_DETECTION_MODE", "POLL")
    monkeypatch.setenv("LINESTAMP_POLL_PERIOD", "2.5")
    monkeypatch.setenv("LINESTAMP_TIMESTAMP_FORMAT", "[%H:%M] ")
    monkeypatch.setenv("LINESTAMP_PLACEHOLDER_MATCHES_WIDTH", "off")

    config = StampConfig.from_env()

    assert config.detection_mode is DetectionMode.POLL
    assert config.poll_period_seconds == 2.5
    assert config.timestamp_format == "[%H:%M] "
    assert isinstance(config.renderer, TimestampRenderer)
    assert config.renderer.fmt == "[%H:%M] "
    assert config.renderer.placeholder_matches_width is False


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LINESTAMP_DETECTION_MODE", "poll")

    config = StampConfig.from_env(detection_mode="notification")

    assert config.detection_mode is DetectionMode.NOTIFICATION


def test_from_env_rejects_bad_period(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LINESTAMP_POLL_PERIOD", "soon")

    with pytest.raises(ValueError):
        StampConfig.from_env()
