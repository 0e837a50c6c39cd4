"""Per-line timestamps that stay attached to an editable text buffer."""

__all__ = [
    "adapters",
    "annotations",
    "buffer",
    "config",
    "engine",
    "errors",
    "runtime",
]

__version__ = "0.1.0"
