"""Request models and streak calculation."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from models import (HabitCreate, HabitLogCreate, HabitUpdate, TimerSettingsInput,
                    TodoUpdate)
from services.habits import calculate_streak


class TestHabitModels:
    def test_insert_row(self):
        row = HabitCreate(emoji="🏃", start_date="2026-01-01").to_insert_row("u1")

        assert row == {
            "emoji": "🏃",
            "start_date": "2026-01-01",
            "user_id": "u1",
            "current_streak": 0,
            "last_check_date": None,
        }

    def test_update_only_sent_fields(self):
        assert HabitUpdate(emoji="📚").to_update_values() == {"emoji": "📚"}

    def test_negative_streak(self):
        with pytest.raises(ValidationError):
            HabitUpdate(current_streak=-1)

    def test_log_date_is_normalised(self):
        assert HabitLogCreate(log_date="2026-01-05T10:00:00Z").log_date == "2026-01-05"


class TestTodoUpdate:
    NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    def test_completing_stamps_time(self):
        values = TodoUpdate(is_completed=True).to_update_values(now=self.NOW)

        assert values == {"is_completed": True, "completed_at": self.NOW.isoformat()}

    def test_explicit_completed_at_wins(self):
        values = TodoUpdate(
            is_completed=True, completed_at="2026-01-01T00:00:00Z"
        ).to_update_values(now=self.NOW)

        assert values["completed_at"] == "2026-01-01T00:00:00Z"

    def test_content_only(self):
        assert TodoUpdate(content="x").to_update_values() == {"content": "x"}


class TestTimerSettingsInput:
    @pytest.mark.parametrize("work,brk", [(0, 5), (25, 0), (241, 5), (25, 121)])
    def test_out_of_range(self, work, brk):
        with pytest.raises(ValidationError):
            TimerSettingsInput(work_duration=work, break_duration=brk)


class TestCalculateStreak:
    def test_no_logs(self):
        assert calculate_streak([]) == {"current_streak": 0, "last_check_date": None}

    def test_run_ending_at_latest_log(self):
        streak = calculate_streak(
            ["2026-01-01", "2026-01-03", "2026-01-04", "2026-01-05"]
        )

        assert streak == {"current_streak": 3, "last_check_date": "2026-01-05"}

    def test_gap_before_latest_log(self):
        assert calculate_streak(["2026-01-01", "2026-01-02", "2026-01-04"]) == {
            "current_streak": 1,
            "last_check_date": "2026-01-04",
        }

    def test_duplicates_and_order_do_not_matter(self):
        streak = calculate_streak(["2026-02-02", "2026-02-01", "2026-02-02"])

        assert streak["current_streak"] == 2

    def test_month_boundary(self):
        assert calculate_streak(["2026-01-31", "2026-02-01"])["current_streak"] == 2
