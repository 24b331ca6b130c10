"""Shared test fixtures and configuration.

Isolates tests from the real platform directories and gives engine tests a
deterministic clock and tick source.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from studytrack.adapters.memory_store import MemoryRecordStore
from studytrack.services.timer_engine import SessionTimerEngine
from studytrack.utils.ticker import ManualTicker


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path):
    """Send log output to tmp_path and reset the logger singleton."""
    import studytrack.utils.logger as logger_mod

    def reset() -> None:
        logger_mod._logger = None
        app_logger = logging.getLogger("studytrack")
        for handler in list(app_logger.handlers):
            app_logger.removeHandler(handler)
            handler.close()

    reset()
    with patch("studytrack.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")):
        yield
    reset()


# ---------------------------------------------------------------------------
# Engine fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def ticker() -> ManualTicker:
    return ManualTicker()


@pytest.fixture()
def store() -> MemoryRecordStore:
    return MemoryRecordStore()


@pytest.fixture()
def engine(store, ticker, clock) -> SessionTimerEngine:
    """Engine with 2s work / 1s break phases driven by the manual ticker."""
    return SessionTimerEngine(
        store, ticker=ticker, clock=clock, work_duration=2, break_duration=1
    )


@pytest.fixture()
def advance(ticker, clock):
    """Advance the fake clock and fire one tick per second, *n* times."""

    def _advance(n: int = 1) -> None:
        for _ in range(n):
            clock.advance(1)
            ticker.advance(1)

    return _advance


# ---------------------------------------------------------------------------
# Config isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_config_dirs(tmp_path):
    """Point platform config/data dirs at *tmp_path* for every test.

    Clears the get_config_service cache so each test builds a fresh service
    inside its own temporary directory.
    """
    from studytrack.services.config_service import get_config_service

    get_config_service.cache_clear()
    with patch(
        "studytrack.services.config_service.user_config_dir",
        return_value=str(tmp_path / "config"),
    ):
        with patch(
            "studytrack.services.config_service.user_data_dir",
            return_value=str(tmp_path / "data"),
        ):
            yield
    get_config_service.cache_clear()


@pytest.fixture()
def tmp_config(isolated_config_dirs):
    """The ConfigService every command in this test will use."""
    from studytrack.services.config_service import get_config_service

    return get_config_service()
