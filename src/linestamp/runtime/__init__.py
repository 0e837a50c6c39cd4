"""Runtime services shared across the engine (telemetry)."""

from . import telemetry

__all__ = ["telemetry"]
