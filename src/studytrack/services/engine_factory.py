"""Wiring of the timer engine and history from the application config."""

from studytrack.adapters.json_store import JsonRecordStore
from studytrack.models.history import SessionHistory
from studytrack.utils.ticker import Ticker

from .config_service import ConfigService, get_config_service
from .timer_engine import SessionTimerEngine


def create_history(config_service: ConfigService | None = None) -> SessionHistory:
    """Open the persisted session history."""
    svc = config_service or get_config_service()
    return SessionHistory(JsonRecordStore(svc.records_dir))


def create_engine(
    config_service: ConfigService | None = None,
    ticker: Ticker | None = None,
) -> SessionTimerEngine:
    """Build an engine configured from the current settings.

    The default ticker runs on the asyncio event loop, so sessions must be
    started from inside a running loop.
    """
    svc = config_service or get_config_service()
    timer = svc.config.timer
    return SessionTimerEngine(
        history=create_history(svc),
        ticker=ticker,
        work_duration=timer.work_seconds,
        break_duration=timer.break_seconds,
        tick_interval=timer.tick_seconds,
    )
