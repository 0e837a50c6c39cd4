"""Edit-notification driven reconciliation."""

from __future__ import annotations

from typing import Optional

from linestamp.annotations import reconcile

from .hooks import UpdateSource
from .session import StampSession


class ChangeObserver:
    """Subscribes to one buffer and reconciles every reported range."""

    def __init__(self, session: StampSession) -> None:
        self.session = session
        self._attached = False

    @property
    def attached(self) -> bool:
        return self._attached

    def attach(self) -> None:
        if self._attached:
            return
        self.session.buffer.subscribe(self.on_change)
        self._attached = True

    def detach(self) -> None:
        if not self._attached:
            return
        self.session.buffer.unsubscribe(self.on_change)
        self._attached = False

    def on_change(self, begin: int, end: int, pre_length: int) -> Optional[int]:
        """Notification callback: ``[begin, end)`` is in post-edit coordinates."""

        session = self.session
        if not session.enabled:
            return None
        return session.run_update(
            UpdateSource.NOTIFICATION,
            begin,
            end,
            lambda: reconcile(session.store, begin, end, pre_length),
        )


__all__ = ["ChangeObserver"]
