"""Study session history with record store persistence."""

from collections.abc import Callable
from datetime import date, datetime, timedelta
from typing import Any

from studytrack.repositories.record_store import RecordStore
from studytrack.utils.logger import get_logger

from .study_session import StudySession

HISTORY_KEY = "study_sessions"


class SessionHistory:
    """Append-only, insertion-ordered collection of finalized sessions."""

    def __init__(
        self,
        store: RecordStore,
        namespace_key: str = HISTORY_KEY,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the history and load whatever the store holds."""
        self.store = store
        self.namespace_key = namespace_key
        self.clock = clock or (lambda: datetime.now().astimezone())
        self.log = get_logger("history")
        self._sessions: list[StudySession] = []
        self.load()

    @property
    def sessions(self) -> tuple[StudySession, ...]:
        return tuple(s.copy() for s in self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def load(self) -> None:
        """Reload from the store. Malformed history is treated as empty."""
        records = self.store.load(self.namespace_key)
        try:
            sessions = [StudySession.from_dict(r) for r in records]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            self.log.warning("Discarding malformed %s history: %s", self.namespace_key, e)
            sessions = []

        if any(s.is_ongoing for s in sessions):
            self.log.warning("Discarding %s history with unfinished records", self.namespace_key)
            sessions = []

        self._sessions = sessions

    def save(self) -> None:
        """Persist the full history."""
        self.store.save(self.namespace_key, [s.to_dict() for s in self._sessions])

    def append(self, session: StudySession) -> None:
        """
        Append a finalized session and persist synchronously.

        The session is only kept in memory once the store accepted it.

        Raises:
            ValueError: If the session is still ongoing
            RuntimeError: If the store could not be written
        """
        if session.is_ongoing:
            raise ValueError("Can only append finalized sessions to history")

        sessions = [*self._sessions, session.copy()]
        try:
            self.store.save(self.namespace_key, [s.to_dict() for s in sessions])
        except OSError as e:
            self.log.error("Failed to save session %s: %s", session.id, e)
            raise RuntimeError(f"Failed to save study history: {e}") from e

        self._sessions = sessions
        self.log.info(
            "Recorded session %s (%s, %.0fs)",
            session.id,
            session.subject,
            session.total_duration(),
        )

    # Analytics

    def total_study_time(self) -> float:
        """Sum of session durations in seconds."""
        return sum(s.total_duration() for s in self._sessions)

    def total_study_time_for_subject(self, subject: str) -> float:
        """Sum of session durations in seconds for an exact subject match."""
        return sum(s.total_duration() for s in self._sessions if s.subject == subject)

    def sessions_grouped_by_subject(self) -> dict[str, list[StudySession]]:
        """Partition history by subject, keeping each subject's order."""
        grouped: dict[str, list[StudySession]] = {}
        for session in self._sessions:
            grouped.setdefault(session.subject, []).append(session.copy())
        return grouped

    def get_recent_sessions(
        self, limit: int = 20, subject: str | None = None
    ) -> list[StudySession]:
        """
        Get the most recent sessions, newest first.

        Args:
            limit: Maximum number of sessions to return
            subject: Only include sessions with this exact subject
        """
        sessions = [
            s for s in reversed(self._sessions) if subject is None or s.subject == subject
        ]
        return [s.copy() for s in sessions[: max(0, limit)]]

    def get_daily_summary(self, day: date | None = None) -> dict[str, Any]:
        """
        Get a summary of sessions started on a given local calendar day.

        Args:
            day: Day to summarise, defaults to today

        Returns:
            Daily summary statistics
        """
        if day is None:
            day = self.clock().date()

        sessions = [s for s in self._sessions if s.start_time.astimezone().date() == day]
        total_seconds = sum(s.total_duration() for s in sessions)

        return {
            "date": day.isoformat(),
            "total_sessions": len(sessions),
            "total_seconds": total_seconds,
            "total_hours": round(total_seconds / 3600, 1),
            "pomodoro_cycles": sum(s.pomodoro_cycles for s in sessions),
        }

    def get_stats(self, days: int = 7) -> dict[str, Any]:
        """
        Get study statistics for sessions started in the last N days.

        Args:
            days: Number of days to analyze

        Returns:
            Dictionary with statistics
        """
        cutoff = self.clock() - timedelta(days=days)
        sessions = [s for s in self._sessions if s.start_time >= cutoff]

        by_subject: dict[str, float] = {}
        for session in sessions:
            by_subject[session.subject] = (
                by_subject.get(session.subject, 0.0) + session.total_duration()
            )

        total_seconds = sum(by_subject.values())
        total = len(sessions)

        return {
            "days": days,
            "total_sessions": total,
            "total_seconds": total_seconds,
            "total_hours": round(total_seconds / 3600, 1),
            "avg_session_seconds": round(total_seconds / total if total > 0 else 0, 1),
            "pomodoro_cycles": sum(s.pomodoro_cycles for s in sessions),
            "by_subject": by_subject,
        }
