"""Per-buffer stamping session: state, store and the update gate."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Deque, Optional

from linestamp.annotations import AnnotationStore
from linestamp.buffer import Buffer
from linestamp.config import StampConfig
from linestamp.errors import ConfigError
from linestamp.runtime import telemetry

from .hooks import UpdateEvent, UpdateHooks, UpdateSource

if TYPE_CHECKING:
    from .observer import ChangeObserver
    from .poll import IdlePoller


class SessionState(str, Enum):
    DISABLED = "disabled"
    ENABLING = "enabling"
    ENABLED = "enabled"
    DISABLING = "disabling"


@dataclass
class PendingUpdate:
    event: UpdateEvent
    action: Callable[[], int]


class StampSession:
    """Everything the engine keeps for one stamped buffer.

    All store mutations go through :meth:`run_update`, which wraps them in
    the engine's before/after hooks. A request arriving while another update
    is running (a hook or renderer that edits the buffer, say) is queued and
    run after the current one finishes, in arrival order.
    """

    def __init__(
        self,
        buffer: Buffer,
        config: StampConfig,
        hooks: UpdateHooks,
        *,
        logger_name: str | None = None,
    ) -> None:
        if config.renderer is None:
            raise ConfigError("StampConfig has no renderer")
        self.buffer = buffer
        self.config = config
        self.hooks = hooks
        self.store = AnnotationStore(buffer, config.renderer, logger_name=logger_name)
        self.state = SessionState.DISABLED
        self.logger = telemetry.get_logger(logger_name or "linestamp.engine")
        self._updating = False
        self._pending: Deque[PendingUpdate] = deque()
        # wired by the engine
        self.observer: Optional["ChangeObserver"] = None
        self.poller: Optional["IdlePoller"] = None

    @property
    def enabled(self) -> bool:
        return self.state is SessionState.ENABLED

    @property
    def live(self) -> bool:
        """Whether updates may still touch the store (enabling or enabled)."""

        return self.state in (SessionState.ENABLING, SessionState.ENABLED)

    @property
    def updating(self) -> bool:
        return self._updating

    def discard_pending(self) -> int:
        count = len(self._pending)
        self._pending.clear()
        return count

    def run_update(
        self,
        source: UpdateSource,
        begin: int,
        end: int,
        action: Callable[[], int],
    ) -> Optional[int]:
        """Run ``action`` between the hooks, or queue it if an update is live.

        Returns the action's result, or ``None`` when the request was queued.
        A session torn down by a hook or the action itself returns ``0`` and
        leaves its store empty.
        """

        pending = PendingUpdate(
            event=UpdateEvent(buffer=self.buffer, begin=begin, end=end, source=source),
            action=action,
        )
        if self._updating:
            self.logger.debug(
                f"deferring nested {source.value} update buffer={self.buffer.name}"
            )
            self._pending.append(pending)
            return None

        self._updating = True
        try:
            result = self._apply(pending)
            while self._pending and self.live:
                self._apply(self._pending.popleft())
            return result
        finally:
            if self._pending:
                self.logger.warning(
                    f"dropping {len(self._pending)} queued updates "
                    f"buffer={self.buffer.name}"
                )
                self._pending.clear()
            self._updating = False

    def _apply(self, pending: PendingUpdate) -> int:
        self.hooks.before_update.run(pending.event)
        if not self.live:
            return 0
        result = pending.action()
        if not self.live:
            # torn down mid-action; drop whatever it added
            self.store.remove_all()
            return 0
        self.hooks.after_update.run(pending.event)
        return result


__all__ = ["PendingUpdate", "SessionState", "StampSession"]
