"""Study session and Pomodoro timer engine.

The engine owns the single current session, the active timer mode and the
elapsed-time counter. Elapsed time advances on a periodic tick; in Pomodoro
mode it drives the work/break phase transitions. Finalized sessions are
appended to the persisted history.

All state is mutated only from the engine's own operations and tick callback,
on the host's event loop. Consumers read snapshots or subscribe to changes.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from studytrack.models.history import SessionHistory
from studytrack.models.study_session import StudySession
from studytrack.models.timer_mode import (
    PAUSED,
    RUNNING,
    STOPPED,
    Paused,
    Pomodoro,
    Running,
    Stopped,
    TimerMode,
    describe,
)
from studytrack.repositories.record_store import RecordStore
from studytrack.utils.logger import get_logger
from studytrack.utils.ticker import AsyncioTicker, Ticker

POMODORO_SUBJECT = "Pomodoro Session"
DEFAULT_WORK_DURATION = 25 * 60.0
DEFAULT_BREAK_DURATION = 5 * 60.0

# Tolerance when comparing tick-derived elapsed time with a phase duration
_PHASE_EPSILON = 1e-9


@dataclass(frozen=True)
class EngineSnapshot:
    """Read-only view of the engine state at one instant."""

    mode: TimerMode
    elapsed_time: float
    current_session: StudySession | None
    completed_cycles: int
    history: tuple[StudySession, ...]
    work_duration: float
    break_duration: float
    phase_duration: float | None = None

    @property
    def phase_remaining(self) -> float | None:
        """Seconds left in the current Pomodoro phase, if any."""
        if self.phase_duration is None:
            return None
        return max(0.0, self.phase_duration - self.elapsed_time)


Listener = Callable[[EngineSnapshot], None]


class SessionTimerEngine:
    """Tracks the active study session and cycles Pomodoro phases."""

    def __init__(
        self,
        store: RecordStore | None = None,
        *,
        history: SessionHistory | None = None,
        ticker: Ticker | None = None,
        clock: Callable[[], datetime] | None = None,
        work_duration: float = DEFAULT_WORK_DURATION,
        break_duration: float = DEFAULT_BREAK_DURATION,
        tick_interval: float = 1.0,
    ):
        """
        Initialize the engine and load persisted history.

        Args:
            store: Record store for history; ignored when *history* is given
            history: Ready-made session history
            ticker: Tick source; defaults to an asyncio event-loop ticker
            clock: Returns the current timezone-aware time
            work_duration: Seconds in a Pomodoro work phase
            break_duration: Seconds in a Pomodoro break phase
            tick_interval: Seconds each tick adds to the elapsed time
        """
        self.clock = clock or (lambda: datetime.now().astimezone())
        if history is None:
            if store is None:
                from studytrack.adapters.json_store import JsonRecordStore

                store = JsonRecordStore()
            history = SessionHistory(store, clock=self.clock)

        self._history = history
        self.ticker = ticker or AsyncioTicker()
        self.tick_interval = tick_interval
        self.log = get_logger("engine")

        self._mode: TimerMode = STOPPED
        self._paused_from: TimerMode | None = None
        self._session: StudySession | None = None
        self._ticks = 0
        self._phase_duration: float | None = None
        self._completed_cycles = 0
        self._work_duration = float(work_duration)
        self._break_duration = float(break_duration)
        self._listeners: list[Listener] = []

    # Observable state

    @property
    def mode(self) -> TimerMode:
        return self._mode

    @property
    def elapsed_time(self) -> float:
        # Whole ticks times the interval, so float error does not accumulate
        return self._ticks * self.tick_interval

    @property
    def current_session(self) -> StudySession | None:
        return self._session.copy() if self._session else None

    @property
    def completed_cycles(self) -> int:
        return self._completed_cycles

    @property
    def history(self) -> tuple[StudySession, ...]:
        return self._history.sessions

    @property
    def session_history(self) -> SessionHistory:
        return self._history

    @property
    def phase_duration(self) -> float | None:
        """Duration in effect for the current Pomodoro phase."""
        return self._phase_duration

    @property
    def work_duration(self) -> float:
        return self._work_duration

    @work_duration.setter
    def work_duration(self, seconds: float) -> None:
        # Applies from the next work phase; the running phase keeps its duration
        self._work_duration = float(seconds)
        self.log.info("Work duration set to %ss", seconds)
        self._notify()

    @property
    def break_duration(self) -> float:
        return self._break_duration

    @break_duration.setter
    def break_duration(self, seconds: float) -> None:
        self._break_duration = float(seconds)
        self.log.info("Break duration set to %ss", seconds)
        self._notify()

    def snapshot(self) -> EngineSnapshot:
        """Capture the current state."""
        return EngineSnapshot(
            mode=self._mode,
            elapsed_time=self.elapsed_time,
            current_session=self.current_session,
            completed_cycles=self._completed_cycles,
            history=self._history.sessions,
            work_duration=self._work_duration,
            break_duration=self._break_duration,
            phase_duration=self._phase_duration,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call *listener* with a snapshot after every state change and tick.

        Returns:
            A callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Session lifecycle

    def start_new_session(self, subject: str) -> StudySession:
        """Start a plain session, finalizing any ongoing one first."""
        self._finalize_current()
        self._session = StudySession(subject=subject, start_time=self.clock())
        self._ticks = 0
        self._phase_duration = None
        self._paused_from = None
        self._mode = RUNNING
        self._start_ticking()

        self.log.info("Started session %s (%s)", self._session.id, subject)
        self._notify()
        return self._session.copy()

    def end_current_session(self) -> StudySession | None:
        """
        Finalize the ongoing session into history.

        Returns:
            The finalized session, or None if no session was ongoing
        """
        finalized = self._finalize_current()
        if finalized is None:
            self.log.debug("end_current_session ignored: no ongoing session")
            return None

        self._notify()
        return finalized

    def pause_session(self) -> None:
        """Suspend ticking while a session is running or in a Pomodoro phase."""
        if self._session is None or not self._session.is_ongoing:
            self.log.debug("pause_session ignored: no ongoing session")
            return

        match self._mode:
            case Running() | Pomodoro():
                self.ticker.cancel()
                self._paused_from = self._mode
                self._mode = PAUSED
                self.log.info("Paused at %.0fs", self.elapsed_time)
                self._notify()
            case Stopped() | Paused():
                self.log.debug("pause_session ignored in mode %s", describe(self._mode))

    def resume_session(self) -> None:
        """Resume ticking from the current elapsed time.

        A paused Pomodoro resumes in the phase it was paused in.
        """
        match self._mode:
            case Paused() if self._session is not None:
                self._mode = self._paused_from or RUNNING
                self._paused_from = None
                self._start_ticking()
                self.log.info(
                    "Resumed in mode %s at %.0fs", describe(self._mode), self.elapsed_time
                )
                self._notify()
            case Paused() | Stopped() | Running() | Pomodoro():
                self.log.debug("resume_session ignored in mode %s", describe(self._mode))

    # Pomodoro

    def start_pomodoro(self) -> StudySession:
        """Start a Pomodoro session in its work phase."""
        self._finalize_current()
        self._session = StudySession(subject=POMODORO_SUBJECT, start_time=self.clock())
        self._paused_from = None
        self._enter_phase(is_work_period=True)
        self._start_ticking()

        self.log.info(
            "Started pomodoro %s (work %ss, break %ss)",
            self._session.id,
            self._work_duration,
            self._break_duration,
        )
        self._notify()
        return self._session.copy()

    def stop_pomodoro(self) -> StudySession | None:
        """End the current session and reset the completed-cycle counter."""
        self._completed_cycles = 0
        finalized = self._finalize_current()
        self._notify()
        return finalized

    # Analytics

    def total_study_time(self) -> float:
        """Seconds studied across history; the ongoing session is excluded."""
        return self._history.total_study_time()

    def total_study_time_for_subject(self, subject: str) -> float:
        return self._history.total_study_time_for_subject(subject)

    def sessions_grouped_by_subject(self) -> dict[str, list[StudySession]]:
        return self._history.sessions_grouped_by_subject()

    # Internals

    def _start_ticking(self) -> None:
        self.ticker.start(self._on_tick, self.tick_interval)

    def _enter_phase(self, is_work_period: bool) -> None:
        self._mode = Pomodoro(is_work_period=is_work_period)
        self._ticks = 0
        self._phase_duration = (
            self._work_duration if is_work_period else self._break_duration
        )

    def _finalize_current(self) -> StudySession | None:
        if self._session is None or not self._session.is_ongoing:
            return None

        self.ticker.cancel()
        finalized = self._session.finalize(self.clock())
        self._session = None
        self._ticks = 0
        self._phase_duration = None
        self._paused_from = None
        self._mode = STOPPED

        try:
            self._history.append(finalized)
        except RuntimeError:
            # Stopped state is already committed
            self._notify()
            raise
        self.log.info(
            "Ended session %s after %.0fs", finalized.id, finalized.total_duration()
        )
        return finalized

    def _on_tick(self) -> None:
        match self._mode:
            case Running():
                self._ticks += 1
            case Pomodoro(is_work_period=is_work_period):
                self._ticks += 1
                if self.elapsed_time >= self._phase_duration - _PHASE_EPSILON:
                    self._complete_phase(is_work_period)
            case Stopped() | Paused():
                # Schedules are cancelled before leaving a ticking mode
                self.log.debug("Dropped tick in mode %s", describe(self._mode))
                return

        self._notify()

    def _complete_phase(self, was_work_period: bool) -> None:
        if was_work_period:
            self._session.pomodoro_cycles += 1
            self._enter_phase(is_work_period=False)
            self.log.info(
                "Work phase complete (%d this session), starting break",
                self._session.pomodoro_cycles,
            )
        else:
            self._completed_cycles += 1
            self._enter_phase(is_work_period=True)
            self.log.info(
                "Break complete (%d cycles), starting work", self._completed_cycles
            )

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
