"""Concurrent task execution."""

from .engine import EngineState, TaskEngine

__all__ = ["TaskEngine", "EngineState"]
