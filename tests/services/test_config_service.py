"""Tests for ConfigService and the config models."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from studytrack.models.config_models import AppConfig, TimerConfig
from studytrack.services.engine_factory import create_engine, create_history
from studytrack.utils.ticker import ManualTicker


class TestModels:
    def test_defaults(self) -> None:
        config = AppConfig()

        assert config.timer.work_minutes == 25
        assert config.timer.break_minutes == 5
        assert config.timer.tick_seconds == 1.0
        assert config.timer.work_seconds == 1500
        assert config.timer.break_seconds == 300
        assert config.storage.data_dir is None
        assert config.output.format == "pretty"

    @pytest.mark.parametrize("field", ["work_minutes", "break_minutes", "tick_seconds"])
    @pytest.mark.parametrize("value", [0, -1])
    def test_durations_must_be_positive(self, field: str, value: float) -> None:
        with pytest.raises(ValidationError):
            TimerConfig(**{field: value})


class TestConfigService:
    def test_first_run_uses_defaults(self, tmp_config) -> None:
        assert tmp_config.config == AppConfig()
        assert not tmp_config.config_path.exists()

    def test_set_persists_and_coerces(self, tmp_config) -> None:
        tmp_config.set("timer.work_minutes", "50")

        assert tmp_config.get("timer.work_minutes") == 50
        saved = json.loads(tmp_config.config_path.read_text())
        assert saved["timer"]["work_minutes"] == 50

    def test_set_invalid_value_keeps_config(self, tmp_config) -> None:
        with pytest.raises(ValueError):
            tmp_config.set("timer.break_minutes", "0")

        assert tmp_config.get("timer.break_minutes") == 5

    def test_unknown_key(self, tmp_config) -> None:
        with pytest.raises(KeyError):
            tmp_config.get("timer.nope")
        with pytest.raises(KeyError):
            tmp_config.set("nope", 1)
        with pytest.raises(KeyError):
            tmp_config.get("timer.work_minutes.deeper")

    def test_reset_key_and_all(self, tmp_config) -> None:
        tmp_config.set("timer.work_minutes", 40)
        tmp_config.set("output.format", "json")

        tmp_config.reset("timer.work_minutes")
        assert tmp_config.get("timer.work_minutes") == 25
        assert tmp_config.get("output.format") == "json"

        tmp_config.reset()
        assert tmp_config.config == AppConfig()

    def test_corrupt_file_falls_back_to_defaults(self, tmp_config) -> None:
        tmp_config.config_path.write_text("{oops")
        tmp_config._config = None

        assert tmp_config.config == AppConfig()

    def test_invalid_values_in_file_fall_back_to_defaults(self, tmp_config) -> None:
        tmp_config.config_path.write_text(json.dumps({"timer": {"work_minutes": -3}}))
        tmp_config._config = None

        assert tmp_config.config.timer.work_minutes == 25

    def test_records_dir(self, tmp_config, tmp_path: Path) -> None:
        assert tmp_config.records_dir == tmp_config.data_dir / "records"

        tmp_config.set("storage.data_dir", str(tmp_path / "elsewhere"))
        assert tmp_config.records_dir == tmp_path / "elsewhere"


class TestEngineFactory:
    def test_engine_uses_configured_durations(self, tmp_config) -> None:
        tmp_config.set("timer.work_minutes", 1)
        tmp_config.set("timer.break_minutes", 0.5)
        tmp_config.set("timer.tick_seconds", 2)

        engine = create_engine(tmp_config, ticker=ManualTicker())

        assert engine.work_duration == 60
        assert engine.break_duration == 30
        assert engine.tick_interval == 2

    def test_engine_and_history_share_records(self, tmp_config) -> None:
        ticker = ManualTicker()
        engine = create_engine(tmp_config, ticker=ticker)
        engine.start_new_session("Math")
        ticker.advance(3)
        engine.end_current_session()

        history = create_history(tmp_config)

        assert [s.subject for s in history.sessions] == ["Math"]
        assert (tmp_config.records_dir / "study_sessions.json").exists()
