"""Engine owning one stamping session per enabled buffer."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from linestamp.annotations import AnnotationStore, fill_gaps, fill_tail_gaps, reconcile
from linestamp.buffer import Buffer
from linestamp.config import DetectionMode, StampConfig
from linestamp.errors import DetachedBufferError
from linestamp.runtime import telemetry

from .hooks import UpdateHooks, UpdateSource
from .observer import ChangeObserver
from .poll import IdlePoller
from .session import SessionState, StampSession


class LineStampEngine:
    """Enables, drives and tears down line stamping for buffers.

    Lifecycle per buffer: ``DISABLED -> ENABLING -> ENABLED -> DISABLING ->
    DISABLED``. Enabling stamps every existing line with a placeholder and
    then either subscribes to edit notifications or arms the idle poller,
    depending on the detection mode. Both transitions are all-or-nothing.

    Operations addressed to a buffer that is not enabled do nothing and
    return ``0``; timers firing after ``disable`` are expected.
    """

    def __init__(
        self,
        config: Optional[StampConfig] = None,
        *,
        logger_name: str | None = None,
    ) -> None:
        self.config = config or StampConfig()
        self.hooks = UpdateHooks()
        self._logger_name = logger_name or "linestamp.engine"
        self.logger = telemetry.get_logger(self._logger_name)
        self._sessions: Dict[Buffer, StampSession] = {}

    # lifecycle ---------------------------------------------------------

    def enable(
        self, buffer: Buffer, *, config: Optional[StampConfig] = None
    ) -> StampSession:
        existing = self._sessions.get(buffer)
        if existing is not None and existing.state is not SessionState.DISABLED:
            return existing

        cfg = config or self.config
        session = StampSession(buffer, cfg, self.hooks, logger_name=self._logger_name)
        session.observer = ChangeObserver(session)
        session.poller = IdlePoller(session, cfg.poll_period_seconds)
        self._sessions[buffer] = session

        with telemetry.span(
            "engine::enable",
            logger_name=self._logger_name,
            component="engine",
            metadata={"buffer": buffer.name, "mode": cfg.detection_mode.value},
        ) as handle:
            session.state = SessionState.ENABLING
            try:
                added = session.run_update(
                    UpdateSource.ENABLE,
                    0,
                    len(buffer),
                    lambda: fill_gaps(session.store, use_placeholder=True),
                )
                if cfg.detection_mode is DetectionMode.NOTIFICATION:
                    session.observer.attach()
                else:
                    session.poller.start()
            except Exception:
                self._teardown(session)
                self._sessions.pop(buffer, None)
                raise
            session.state = SessionState.ENABLED
            handle.add_metadata("placeholders", added)

        telemetry.record_event(
            "stamp.enable",
            data={
                "buffer": buffer.name,
                "mode": cfg.detection_mode.value,
                "lines": len(session.store),
            },
            logger_name=self._logger_name,
        )
        return session

    def disable(self, buffer: Buffer) -> bool:
        session = self._sessions.get(buffer)
        if session is None or session.state is not SessionState.ENABLED:
            return False
        session.state = SessionState.DISABLING
        removed = self._teardown(session)
        self._sessions.pop(buffer, None)
        telemetry.record_event(
            "stamp.disable",
            data={"buffer": buffer.name, "removed": removed},
            logger_name=self._logger_name,
        )
        return True

    def disable_all(self) -> int:
        count = 0
        for buffer in list(self._sessions):
            if self.disable(buffer):
                count += 1
        return count

    def _teardown(self, session: StampSession) -> int:
        if session.observer is not None:
            session.observer.detach()
        if session.poller is not None:
            session.poller.stop()
        session.discard_pending()
        removed = session.store.remove_all()
        session.state = SessionState.DISABLED
        return removed

    # queries ------------------------------------------------------------

    def session(self, buffer: Buffer) -> Optional[StampSession]:
        session = self._sessions.get(buffer)
        if session is None or not session.enabled:
            return None
        return session

    def require_session(self, buffer: Buffer) -> StampSession:
        session = self.session(buffer)
        if session is None:
            raise DetachedBufferError(buffer.name)
        return session

    def is_enabled(self, buffer: Buffer) -> bool:
        return self.session(buffer) is not None

    def store(self, buffer: Buffer) -> Optional[AnnotationStore]:
        session = self.session(buffer)
        return session.store if session is not None else None

    def buffers(self) -> List[Buffer]:
        return [buffer for buffer, session in self._sessions.items() if session.enabled]

    # operations ---------------------------------------------------------

    def reconcile(
        self,
        buffer: Buffer,
        begin: int,
        end: int,
        pre_length: Optional[int] = None,
    ) -> int:
        session = self.session(buffer)
        if session is None:
            return 0
        result = session.run_update(
            UpdateSource.MANUAL,
            begin,
            end,
            lambda: reconcile(session.store, begin, end, pre_length),
        )
        return result or 0

    def fill_gaps(
        self,
        buffer: Buffer,
        begin: Optional[int] = None,
        end: Optional[int] = None,
        *,
        use_placeholder: bool = False,
    ) -> int:
        """Stamp unannotated lines in ``[begin, end]`` (whole buffer by default)."""

        session = self.session(buffer)
        if session is None:
            return 0
        result = session.run_update(
            UpdateSource.MANUAL,
            0 if begin is None else begin,
            len(buffer) if end is None else end,
            lambda: fill_gaps(
                session.store, begin, end, use_placeholder=use_placeholder
            ),
        )
        return result or 0

    def fill_tail_gaps(self, buffer: Buffer, *, use_placeholder: bool = False) -> int:
        session = self.session(buffer)
        if session is None:
            return 0
        result = session.run_update(
            UpdateSource.MANUAL,
            0,
            len(buffer),
            lambda: fill_tail_gaps(session.store, use_placeholder=use_placeholder),
        )
        return result or 0

    def restamp(self, buffer: Buffer) -> int:
        """Replace every annotation in ``buffer`` with a fresh real stamp."""

        session = self.session(buffer)
        if session is None:
            return 0

        def _restamp() -> int:
            session.store.remove_all()
            return fill_gaps(session.store, use_placeholder=False)

        result = session.run_update(UpdateSource.MANUAL, 0, len(buffer), _restamp)
        return result or 0

    def mark_dirty(self, buffer: Buffer) -> None:
        session = self.session(buffer)
        if session is not None and session.poller is not None:
            session.poller.mark_dirty()

    def process_timers(self, now: Optional[float] = None) -> Dict[str, int]:
        """Drive every poll-mode session; returns lines added per buffer name."""

        return self._poll(
            list(self._sessions.values()), lambda poller: poller.process_timers(now)
        )

    def force_poll(self, buffer: Optional[Buffer] = None) -> Dict[str, int]:
        """Run a poll check now, ignoring deadlines."""

        if buffer is None:
            sessions = list(self._sessions.values())
        else:
            sessions = [s for b, s in self._sessions.items() if b is buffer]
        return self._poll(sessions, lambda poller: poller.force_tick())

    def _poll(
        self,
        sessions: List[StampSession],
        tick: Callable[[IdlePoller], Optional[int]],
    ) -> Dict[str, int]:
        # the first failure is re-raised after every session has ticked
        results: Dict[str, int] = {}
        failure: Optional[Exception] = None
        for session in sessions:
            if not session.enabled or session.poller is None:
                continue
            try:
                added = tick(session.poller)
            except Exception as exc:
                self.logger.error(f"poll failed buffer={session.buffer.name}: {exc}")
                if failure is None:
                    failure = exc
                continue
            if added is not None:
                results[session.buffer.name] = added
        if failure is not None:
            raise failure
        return results


__all__ = ["LineStampEngine"]
