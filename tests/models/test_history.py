"""Unit tests for SessionHistory.

Uses a real JsonRecordStore in a temporary directory for the persistence
tests and a MemoryRecordStore elsewhere.
"""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest

from studytrack.adapters.json_store import JsonRecordStore
from studytrack.adapters.memory_store import MemoryRecordStore
from studytrack.models.history import HISTORY_KEY, SessionHistory
from studytrack.models.study_session import StudySession

_NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Fixtures & helpers
# ---------------------------------------------------------------------------


def _ended(
    subject: str = "Math",
    seconds: int = 60,
    days_ago: int = 0,
    cycles: int = 0,
) -> StudySession:
    start = _NOW - timedelta(days=days_ago, hours=1)
    return StudySession(
        subject=subject,
        start_time=start,
        end_time=start + timedelta(seconds=seconds),
        pomodoro_cycles=cycles,
    )


@pytest.fixture()
def history() -> SessionHistory:
    return SessionHistory(MemoryRecordStore(), clock=lambda: _NOW)


@pytest.fixture()
def json_store(tmp_path: Path) -> JsonRecordStore:
    return JsonRecordStore(tmp_path / "records")


# ---------------------------------------------------------------------------
# Append & persistence
# ---------------------------------------------------------------------------


class TestAppend:
    def test_append_keeps_insertion_order(self, history) -> None:
        sessions = [_ended("Math"), _ended("Art"), _ended("Math")]
        for s in sessions:
            history.append(s)

        assert [s.id for s in history.sessions] == [s.id for s in sessions]
        assert len(history) == 3

    def test_rejects_ongoing_session(self, history) -> None:
        ongoing = StudySession(subject="Math", start_time=_NOW)

        with pytest.raises(ValueError, match="finalized"):
            history.append(ongoing)
        assert len(history) == 0

    def test_appended_session_is_copied(self, history) -> None:
        session = _ended()
        history.append(session)
        session.subject = "Changed"

        assert history.sessions[0].subject == "Math"

    def test_sessions_are_copies(self, history) -> None:
        history.append(_ended("Math"))

        history.sessions[0].end_time = None
        history.sessions[0].subject = "Changed"

        assert history.sessions[0].subject == "Math"
        assert not history.sessions[0].is_ongoing

    def test_failed_save_is_not_recorded(self) -> None:
        class FailingStore(MemoryRecordStore):
            def save(self, namespace_key, records) -> None:
                raise OSError("No space left on device")

        history = SessionHistory(FailingStore(), clock=lambda: _NOW)

        with pytest.raises(RuntimeError, match="Failed to save study history"):
            history.append(_ended())
        assert len(history) == 0

    def test_persists_after_every_append(self, json_store) -> None:
        history = SessionHistory(json_store)
        history.append(_ended("Math"))
        history.append(_ended("Art"))

        data = json.loads(json_store.path_for(HISTORY_KEY).read_text())
        assert [r["subject"] for r in data] == ["Math", "Art"]

    def test_reload_from_disk(self, json_store) -> None:
        first = SessionHistory(json_store)
        first.append(_ended("Math", seconds=90, cycles=2))

        second = SessionHistory(json_store)

        assert len(second) == 1
        assert second.sessions[0].pomodoro_cycles == 2
        assert second.total_study_time() == 90


class TestLoadFailures:
    def test_corrupt_file_means_no_history(self, json_store) -> None:
        json_store.path_for(HISTORY_KEY).write_text("{not json")

        assert len(SessionHistory(json_store)) == 0

    def test_malformed_record_means_no_history(self) -> None:
        store = MemoryRecordStore()
        store.save(HISTORY_KEY, [_ended().to_dict(), {"id": "x"}])

        assert len(SessionHistory(store)) == 0

    def test_unfinished_record_means_no_history(self) -> None:
        store = MemoryRecordStore()
        ongoing = StudySession(subject="Math", start_time=_NOW)
        store.save(HISTORY_KEY, [_ended().to_dict(), ongoing.to_dict()])

        assert len(SessionHistory(store)) == 0

    def test_custom_namespace(self) -> None:
        store = MemoryRecordStore()
        history = SessionHistory(store, namespace_key="other")
        history.append(_ended())

        assert store.load(HISTORY_KEY) == []
        assert len(store.load("other")) == 1


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------


class TestAnalytics:
    def test_totals(self, history) -> None:
        history.append(_ended("Math", 600))
        history.append(_ended("Art", 300))
        history.append(_ended("Math", 60))

        assert history.total_study_time() == 960
        assert history.total_study_time_for_subject("Math") == 660
        assert history.total_study_time_for_subject("math") == 0

    def test_grouping(self, history) -> None:
        a, b, c = _ended("Math", 1), _ended("Art", 2), _ended("Math", 3)
        for s in (a, b, c):
            history.append(s)

        grouped = history.sessions_grouped_by_subject()

        assert [s.id for s in grouped["Math"]] == [a.id, c.id]
        assert [s.id for s in grouped["Art"]] == [b.id]

    def test_recent_sessions_newest_first(self, history) -> None:
        sessions = [_ended("Math"), _ended("Art"), _ended("Math")]
        for s in sessions:
            history.append(s)

        recent = history.get_recent_sessions(limit=2)
        assert [s.id for s in recent] == [sessions[2].id, sessions[1].id]

        math_only = history.get_recent_sessions(subject="Math")
        assert [s.id for s in math_only] == [sessions[2].id, sessions[0].id]

        assert history.get_recent_sessions(limit=0) == []

    def test_daily_summary(self, history) -> None:
        history.append(_ended("Math", 600, cycles=1))
        history.append(_ended("Art", 1200))
        history.append(_ended("Math", 900, days_ago=1))

        summary = history.get_daily_summary(_NOW.astimezone().date())

        assert summary["total_sessions"] == 2
        assert summary["total_seconds"] == 1800
        assert summary["total_hours"] == 0.5
        assert summary["pomodoro_cycles"] == 1

    def test_daily_summary_for_empty_day(self, history) -> None:
        summary = history.get_daily_summary(date(2000, 1, 1))

        assert summary == {
            "date": "2000-01-01",
            "total_sessions": 0,
            "total_seconds": 0,
            "total_hours": 0.0,
            "pomodoro_cycles": 0,
        }

    def test_stats_window(self, history) -> None:
        history.append(_ended("Math", 3600, cycles=2))
        history.append(_ended("Art", 1800, days_ago=3))
        history.append(_ended("Math", 600, days_ago=30))

        stats = history.get_stats(days=7)

        assert stats["total_sessions"] == 2
        assert stats["total_seconds"] == 5400
        assert stats["total_hours"] == 1.5
        assert stats["avg_session_seconds"] == 2700
        assert stats["pomodoro_cycles"] == 2
        assert stats["by_subject"] == {"Math": 3600, "Art": 1800}

    def test_stats_empty(self, history) -> None:
        stats = history.get_stats()

        assert stats["total_sessions"] == 0
        assert stats["avg_session_seconds"] == 0
        assert stats["by_subject"] == {}
