"""StudyTrack - study session and Pomodoro tracker."""

__version__ = "0.1.0"
