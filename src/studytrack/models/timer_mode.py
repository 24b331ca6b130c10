"""Timer mode variants owned by the session timer engine."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Stopped:
    """No session is being timed."""


@dataclass(frozen=True)
class Running:
    """A plain study session is ticking."""


@dataclass(frozen=True)
class Paused:
    """Ticking is suspended; the session and elapsed time are kept."""


@dataclass(frozen=True)
class Pomodoro:
    """A Pomodoro session is ticking in its work or break phase."""

    is_work_period: bool


TimerMode = Union[Stopped, Running, Paused, Pomodoro]

STOPPED = Stopped()
RUNNING = Running()
PAUSED = Paused()
POMODORO_WORK = Pomodoro(is_work_period=True)
POMODORO_BREAK = Pomodoro(is_work_period=False)


def describe(mode: TimerMode) -> str:
    """Short human-readable label for a mode."""
    match mode:
        case Stopped():
            return "stopped"
        case Running():
            return "running"
        case Paused():
            return "paused"
        case Pomodoro(is_work_period=True):
            return "pomodoro:work"
        case Pomodoro(is_work_period=False):
            return "pomodoro:break"
    raise TypeError(f"Unknown timer mode: {mode!r}")

