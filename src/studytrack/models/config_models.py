"""Configuration models for StudyTrack."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class TimerConfig(BaseModel):
    """Timer engine configuration."""

    work_minutes: float = Field(default=25, gt=0, description="Pomodoro work phase")
    break_minutes: float = Field(default=5, gt=0, description="Pomodoro break phase")
    tick_seconds: float = Field(default=1.0, gt=0, description="Tick interval")

    @property
    def work_seconds(self) -> float:
        return self.work_minutes * 60

    @property
    def break_seconds(self) -> float:
        return self.break_minutes * 60


class StorageConfig(BaseModel):
    """Storage configuration."""

    data_dir: str | None = Field(
        default=None, description="Records directory (defaults to the user data dir)"
    )


class OutputConfig(BaseModel):
    """Output configuration."""

    format: Literal["pretty", "json", "yaml"] = Field(
        default="pretty", description="Default --output for history, stats and config show"
    )
    color: bool = Field(default=True, description="Colored terminal output")


class AppConfig(BaseModel):
    """Main StudyTrack configuration"""

    model_config = {"validate_assignment": True}

    timer: TimerConfig = Field(default_factory=TimerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
