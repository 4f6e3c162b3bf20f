"""
Models package for request payloads and response shapes.

Database rows are passed through as plain dictionaries; these Pydantic
models only describe what clients may send and the computed responses.
"""

from .habit import HabitCreate, HabitLogCreate, HabitUpdate
from .subscription import FeatureLimits, SubscriptionStatus
from .timer import TimerSettingsInput
from .todo import TodoCreate, TodoUpdate

__all__ = [
    "HabitCreate",
    "HabitUpdate",
    "HabitLogCreate",
    "TodoCreate",
    "TodoUpdate",
    "TimerSettingsInput",
    "FeatureLimits",
    "SubscriptionStatus",
]
