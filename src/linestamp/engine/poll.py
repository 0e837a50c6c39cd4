"""Idle-poll fallback for buffers whose host never reports edits."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from linestamp.annotations import fill_tail_gaps
from linestamp.buffer import Buffer
from linestamp.runtime import telemetry

from .hooks import UpdateSource
from .session import StampSession

TAIL_WINDOW = 256


@dataclass(frozen=True, slots=True)
class TailSnapshot:
    """Cheap fingerprint of a buffer's end: version, length, tail hash."""

    version: int
    length: int
    tail_hash: int

    @classmethod
    def capture(cls, buffer: Buffer, window: int = TAIL_WINDOW) -> "TailSnapshot":
        text = buffer.text
        return cls(
            version=buffer.version,
            length=len(text),
            tail_hash=hash(text[-window:]),
        )


class IdlePoller:
    """Periodically fills the unannotated tail of an append-mostly buffer.

    The poller does not own a thread or a timer. The host calls
    :meth:`process_timers` from whatever periodic callback it has; the
    poller only acts once its monotonic deadline has passed. Dirtiness is
    either flagged explicitly with :meth:`mark_dirty` or detected by
    comparing a :class:`TailSnapshot` against the one recorded after the
    last successful fill. A failing fill leaves the poller dirty.
    """

    def __init__(
        self,
        session: StampSession,
        period: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.session = session
        self.period = period
        self.clock = clock
        self._deadline: Optional[float] = None
        self._dirty = False
        self._snapshot: Optional[TailSnapshot] = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._deadline is not None

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def start(self, now: Optional[float] = None) -> bool:
        """Arm the timer. Returns ``False`` if it was already running."""

        if self._deadline is not None:
            return False
        now = self.clock() if now is None else now
        self._deadline = now + self.period
        self._snapshot = TailSnapshot.capture(self.session.buffer)
        self._dirty = False
        return True

    def stop(self) -> bool:
        if self._deadline is None:
            return False
        self._deadline = None
        self._snapshot = None
        self._dirty = False
        return True

    def mark_dirty(self) -> None:
        self._dirty = True

    @property
    def dirty(self) -> bool:
        if self._dirty:
            return True
        return TailSnapshot.capture(self.session.buffer) != self._snapshot

    def process_timers(self, now: Optional[float] = None) -> Optional[int]:
        """Tick if the deadline has passed; ``None`` when nothing ran."""

        if self._deadline is None:
            return None
        now = self.clock() if now is None else now
        if now < self._deadline:
            return None
        self._deadline = now + self.period
        return self.tick()

    def force_tick(self) -> Optional[int]:
        if self._deadline is None:
            return None
        return self.tick()

    def tick(self) -> Optional[int]:
        session = self.session
        if not session.enabled or not self.dirty:
            return None
        self.ticks += 1
        previous = self._snapshot.length if self._snapshot is not None else 0
        buffer = session.buffer
        added = session.run_update(
            UpdateSource.POLL,
            min(previous, len(buffer)),
            len(buffer),
            lambda: fill_tail_gaps(session.store, use_placeholder=False),
        )
        if added is None:
            # deferred behind a running update; stay dirty until it has run
            return None
        self._dirty = False
        self._snapshot = TailSnapshot.capture(buffer)
        telemetry.record_event(
            "stamp.poll",
            level="debug",
            data={"buffer": buffer.name, "added": added, "tick": self.ticks},
        )
        return added


__all__ = ["IdlePoller", "TAIL_WINDOW", "TailSnapshot"]
