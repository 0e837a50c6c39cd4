"""Stamping engine: sessions, change observer, idle poller and hooks."""

from .hooks import HookCallback, HookList, UpdateEvent, UpdateHooks, UpdateSource
from .manager import LineStampEngine
from .observer import ChangeObserver
from .poll import IdlePoller, TailSnapshot
from .session import SessionState, StampSession

__all__ = [
    "ChangeObserver",
    "HookCallback",
    "HookList",
    "IdlePoller",
    "LineStampEngine",
    "SessionState",
    "StampSession",
    "TailSnapshot",
    "UpdateEvent",
    "UpdateHooks",
    "UpdateSource",
]
