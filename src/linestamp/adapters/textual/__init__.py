"""Textual adapter; ``app`` holds the runnable demo and needs ``textual``."""

from .controller import TextualStampAdapter, TextualUIHooks

__all__ = ["TextualStampAdapter", "TextualUIHooks"]
