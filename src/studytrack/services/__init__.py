"""Services layer for StudyTrack."""

from .timer_engine import EngineSnapshot, SessionTimerEngine

__all__ = ["EngineSnapshot", "SessionTimerEngine"]
