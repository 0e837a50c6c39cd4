"""Bridges a stamped buffer to Textual-friendly callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from linestamp.buffer import Buffer
from linestamp.config import DetectionMode
from linestamp.engine import LineStampEngine, UpdateEvent


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_view: Callable[[List[str]], None]
    update_status: Callable[[str], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


class TextualStampAdapter:
    """Keeps a gutter-prefixed rendering of one buffer in sync with the engine.

    In poll mode the adapter writes to the buffer with notifications
    suppressed, standing in for a host (process output, say) that never
    reports its edits; the engine's idle poller picks the lines up.
    """

    def __init__(
        self, engine: LineStampEngine, buffer: Buffer, hooks: TextualUIHooks
    ) -> None:
        self.engine = engine
        self.buffer = buffer
        self.hooks = hooks
        self._updates = 0
        engine.hooks.after_update.register(self._after_update)
        engine.enable(buffer)
        self.refresh()

    @property
    def mode(self) -> DetectionMode:
        session = self.engine.session(self.buffer)
        config = session.config if session is not None else self.engine.config
        return config.detection_mode

    def render_lines(self) -> List[str]:
        store = self.engine.store(self.buffer)
        gutter: Dict[int, str] = store.line_texts() if store is not None else {}
        width = max((len(text) for text in gutter.values()), default=0)
        lines: List[str] = []
        offset = 0
        for line in self.buffer.text.split("\n"):
            lines.append(f"{gutter.get(offset, ' ' * width)}{line}")
            offset += len(line) + 1
        return lines

    def submit_line(self, text: str) -> None:
        """Append ``text`` as a new line at the end of the buffer."""

        payload = text if not self.buffer.text else f"\n{text}"
        if self.mode is DetectionMode.POLL:
            with self.buffer.suppress_notifications():
                self.buffer.append_text(payload)
        else:
            self.buffer.append_text(payload)
        self._log_state("submit ->", length=len(text))

    def process_timers(self) -> Dict[str, int]:
        """Forward the host's interval tick to the engine's idle pollers."""

        results = self.engine.process_timers()
        for name, added in results.items():
            self._log_state("poll ->", buffer=name, added=added)
        return results

    def toggle(self) -> bool:
        """Enable or disable stamping; returns the new enabled state."""

        if self.engine.is_enabled(self.buffer):
            self.engine.disable(self.buffer)
        else:
            self.engine.enable(self.buffer)
        self.refresh()
        return self.engine.is_enabled(self.buffer)

    def refresh(self) -> None:
        self.hooks.update_view(self.render_lines())
        self.hooks.update_status(self._status_text())

    def close(self) -> None:
        self.engine.hooks.after_update.unregister(self._after_update)
        self.engine.disable(self.buffer)

    def _after_update(self, event: UpdateEvent) -> None:
        if event.buffer is not self.buffer:
            return
        self._updates += 1
        self._log_state(
            "update <-", source=event.source.value, begin=event.begin, end=event.end
        )
        self.refresh()

    def _status_text(self) -> str:
        store = self.engine.store(self.buffer)
        if store is None:
            return f"{self.buffer.name}: stamping off"
        return (
            f"{self.buffer.name}: {self.mode.value} | "
            f"{len(store)} stamps | {self._updates} updates"
        )

    def _log_state(self, prefix: str, **fields: Optional[object]) -> None:
        parts = [prefix, f"buffer={self.buffer.name!r}"]
        parts.extend(f"{key}={value!r}" for key, value in fields.items())
        self.hooks.log(" ".join(parts))


__all__ = ["TextualStampAdapter", "TextualUIHooks"]
