"""Pomodoro timer settings model."""

from pydantic import BaseModel, Field


class TimerSettingsInput(BaseModel):
    """Durations in minutes. One row per user, written by upsert."""

    work_duration: int = Field(..., gt=0, le=240)
    break_duration: int = Field(..., gt=0, le=120)
