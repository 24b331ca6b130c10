"""Data models for StudyTrack."""

from .history import SessionHistory
from .study_session import StudySession, StudySubject
from .timer_mode import Paused, Pomodoro, Running, Stopped, TimerMode

__all__ = [
    "SessionHistory",
    "StudySession",
    "StudySubject",
    "TimerMode",
    "Stopped",
    "Running",
    "Paused",
    "Pomodoro",
]
