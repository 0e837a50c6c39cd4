"""Before/after update hooks shared by both detection paths."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, List

from linestamp.buffer import Buffer


class UpdateSource(str, Enum):
    """What triggered an update."""

    ENABLE = "enable"
    NOTIFICATION = "notification"
    POLL = "poll"
    MANUAL = "manual"


@dataclass(frozen=True, slots=True)
class UpdateEvent:
    buffer: Buffer
    begin: int
    end: int
    source: UpdateSource


HookCallback = Callable[[UpdateEvent], None]


class HookList:
    """Ordered callbacks; registering one twice keeps a single entry."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._callbacks: List[HookCallback] = []

    def __len__(self) -> int:
        return len(self._callbacks)

    def __iter__(self) -> Iterator[HookCallback]:
        return iter(list(self._callbacks))

    def __contains__(self, callback: object) -> bool:
        return callback in self._callbacks

    def register(self, callback: HookCallback, *, first: bool = False) -> HookCallback:
        if callback in self._callbacks:
            return callback
        if first:
            self._callbacks.insert(0, callback)
        else:
            self._callbacks.append(callback)
        return callback

    def unregister(self, callback: HookCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def clear(self) -> None:
        self._callbacks.clear()

    def run(self, event: UpdateEvent) -> None:
        for callback in list(self._callbacks):
            callback(event)


class UpdateHooks:
    """The ``before_update`` / ``after_update`` pair owned by one engine."""

    def __init__(self) -> None:
        self.before_update = HookList("before_update")
        self.after_update = HookList("after_update")

    def clear(self) -> None:
        self.before_update.clear()
        self.after_update.clear()


__all__ = ["HookCallback", "HookList", "UpdateEvent", "UpdateHooks", "UpdateSource"]
