from __future__ import annotations

import itertools
from typing import List

from linestamp.adapters.textual import TextualStampAdapter, TextualUIHooks
from linestamp.annotations import CallbackRenderer
from linestamp.buffer import Buffer
from linestamp.config import DetectionMode, StampConfig
from linestamp.engine import LineStampEngine


def make_engine(mode: DetectionMode = DetectionMode.NOTIFICATION) -> LineStampEngine:
    counter = itertools.count(1)
    renderer = CallbackRenderer(
        real=lambda _buffer: f"T{next(counter)}",
        placeholder=lambda _buffer: "--",
    )
    return LineStampEngine(
        StampConfig(detection_mode=mode, poll_period_seconds=1.0, renderer=renderer)
    )


def test_adapter_renders_gutter_and_follows_edits() -> None:
    engine = make_engine()
    buffer = Buffer("a\nb", name="demo")
    views: List[List[str]] = []
    statuses: List[str] = []
    logs: List[str] = []
    hooks = TextualUIHooks(
        update_view=views.append,
        update_status=statuses.append,
        log=logs.append,
    )

    adapter = TextualStampAdapter(engine, buffer, hooks)
    assert views[-1] == ["--a", "--b"]
    assert statuses[-1].startswith("demo: notification | 2 stamps")

    adapter.submit_line("c")

    assert buffer.text == "a\nb\nc"
    assert views[-1] == ["--a", "--b", "T1c"]
    assert any(line.startswith("submit ->") for line in logs)
    assert any(line.startswith("update <-") for line in logs)


def test_adapter_poll_mode_picks_up_silent_appends() -> None:
    engine = make_engine(DetectionMode.POLL)
    buffer = Buffer("", name="log")
    views: List[List[str]] = []
    logs: List[str] = []
    adapter = TextualStampAdapter(
        engine, buffer, TextualUIHooks(update_view=views.append, log=logs.append)
    )
    session = engine.session(buffer)
    assert session is not None and session.poller is not None
    ticks = itertools.count(start=10**12, step=10)
    session.poller.clock = lambda: float(next(ticks))

    adapter.submit_line("first")
    assert adapter.process_timers() == {"log": 0}

    adapter.submit_line("second")
    assert adapter.process_timers() == {"log": 1}

    assert views[-1] == ["--first", "T1second"]
    assert any(line.startswith("poll ->") for line in logs)


def test_adapter_toggle_and_close() -> None:
    engine = make_engine()
    buffer = Buffer("a\nb", name="demo")
    views: List[List[str]] = []
    statuses: List[str] = []
    adapter = TextualStampAdapter(
        engine,
        buffer,
        TextualUIHooks(update_view=views.append, update_status=statuses.append),
    )

    assert adapter.toggle() is False
    assert statuses[-1] == "demo: stamping off"
    assert views[-1] == ["a", "b"]

    assert adapter.toggle() is True
    assert views[-1] == ["--a", "--b"]

    adapter.close()
    assert engine.is_enabled(buffer) is False
    assert len(engine.hooks.after_update) == 0
