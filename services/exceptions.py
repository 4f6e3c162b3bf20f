"""Exceptions raised by the service layer."""

from typing import Any, Optional


class ConfigurationError(Exception):
    """A required configuration value is missing or malformed."""


class DatabaseError(Exception):
    """
    A PostgREST request failed.

    ``code`` is the PostgREST/Postgres error code when the server sent one
    (e.g. ``PGRST116`` when a single-row request matched no rows).
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details

    def __str__(self) -> str:
        if self.code:
            return f"{self.message} (code={self.code}, status={self.status_code})"
        return self.message


class HabitNotFoundError(Exception):
    """The habit does not exist or belongs to another user."""

    def __init__(self, habit_id: str):
        super().__init__("Habit not found or access denied")
        self.habit_id = habit_id
