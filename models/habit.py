"""Habit request models."""

from datetime import date
from typing import Any, Dict, Optional

import pydantic
from pydantic import BaseModel, Field


def check_iso_date(value: Optional[str]) -> Optional[str]:
    """Accept "YYYY-MM-DD" or a full ISO timestamp; only the date part is checked."""
    if value is not None:
        date.fromisoformat(value[:10])
    return value


class HabitCreate(BaseModel):
    """Fields a client may set when creating a habit."""

    emoji: str = Field(..., min_length=1, max_length=32)
    start_date: str

    @pydantic.field_validator("start_date")
    def start_date_must_be_a_date(cls, v):
        return check_iso_date(v)

    def to_insert_row(self, user_id: str) -> Dict[str, Any]:
        """Row for the habits table; a new habit starts without a streak."""
        return {
            **self.model_dump(),
            "user_id": user_id,
            "current_streak": 0,
            "last_check_date": None,
        }


class HabitUpdate(BaseModel):
    """Partial habit update. Only fields present in the request are written."""

    emoji: Optional[str] = Field(None, min_length=1, max_length=32)
    start_date: Optional[str] = None
    current_streak: Optional[int] = Field(None, ge=0)
    last_check_date: Optional[str] = None

    @pydantic.field_validator("start_date", "last_check_date")
    def dates_must_be_dates(cls, v):
        return check_iso_date(v)

    def to_update_values(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class HabitLogCreate(BaseModel):
    """Marks a habit as done on ``log_date``."""

    log_date: str

    @pydantic.field_validator("log_date")
    def log_date_must_be_a_date(cls, v):
        return date.fromisoformat(v[:10]).isoformat()
