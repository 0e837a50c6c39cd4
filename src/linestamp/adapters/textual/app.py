"""Executable Textual app showing a stamped, growing buffer."""

from __future__ import annotations

import argparse
import os
from typing import List, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Input, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use linestamp.adapters.textual.app"
    ) from exc

from linestamp.buffer import Buffer
from linestamp.config import DetectionMode, StampConfig
from linestamp.engine import LineStampEngine
from linestamp.runtime import telemetry

from .controller import TextualStampAdapter, TextualUIHooks

TIMER_RESOLUTION = 0.1


class LineStampApp(App[None]):
    """Type lines at the bottom; each one shows up with its stamp."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 0 1;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+t", "toggle_stamps", "Toggle stamps"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, config: StampConfig, *, initial_text: str = "") -> None:
        super().__init__()
        self.config = config
        self.buffer = Buffer(initial_text, name="demo")
        self.engine = LineStampEngine(config)
        self.adapter: TextualStampAdapter | None = None
        self._view: Static | None = None
        self._status: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._view = Static("", id="buffer-view", markup=False)
            yield self._view
        yield Input(placeholder="type a line and press enter", id="line-input")
        self._status = Static("", id="status-line")
        yield self._status
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_view=self._update_view,
            update_status=self._update_status,
            log=self.log,
        )
        self.adapter = TextualStampAdapter(self.engine, self.buffer, hooks)
        self.set_interval(TIMER_RESOLUTION, self._process_timers)

    def on_unmount(self) -> None:
        if self.adapter:
            self.adapter.close()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if self.adapter:
            self.adapter.submit_line(event.value)
        event.input.value = ""

    def action_toggle_stamps(self) -> None:
        if self.adapter:
            self.adapter.toggle()

    def _process_timers(self) -> None:
        if self.adapter:
            self.adapter.process_timers()

    def _update_view(self, lines: List[str]) -> None:
        if self._view:
            self._view.update("\n".join(lines))

    def _update_status(self, status: str) -> None:
        if self._status:
            self._status.update(status)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the linestamp Textual demo.")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in DetectionMode],
        default=os.environ.get("LINESTAMP_DETECTION_MODE"),
        help="Edit detection mode (default: notification)",
    )
    parser.add_argument(
        "--poll-period",
        type=float,
        default=None,
        help="Seconds between idle-poll checks in poll mode",
    )
    parser.add_argument(
        "--format",
        dest="timestamp_format",
        default=None,
        help="strftime format for stamps (default: '%%H:%%M:%%S ')",
    )
    parser.add_argument(
        "--file",
        default=None,
        help="Seed the buffer with this file's contents",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if not telemetry.env("LOG_FILE"):
        # Textual owns the terminal
        telemetry.configure(preset="quiet")
    overrides: dict[str, object] = {}
    if args.mode:
        overrides["detection_mode"] = args.mode
    if args.poll_period is not None:
        overrides["poll_period_seconds"] = args.poll_period
    if args.timestamp_format:
        overrides["timestamp_format"] = args.timestamp_format
    config = StampConfig.from_env(**overrides)

    initial_text = ""
    if args.file:
        with open(args.file, encoding="utf-8") as handle:
            initial_text = handle.read()

    LineStampApp(config, initial_text=initial_text).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
