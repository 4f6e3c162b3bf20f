"""
Habit persistence for the habit tracker.

All queries are scoped to the authenticated user. Rows are returned exactly
as PostgREST sends them.
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from models.habit import HabitCreate, HabitLogCreate, HabitUpdate
from services import supabase_db
from services.exceptions import DatabaseError, HabitNotFoundError
from utils.logging import setup_logger

logger = setup_logger(__name__)

HABITS_TABLE = "habits"
HABIT_LOGS_TABLE = "habit_logs"


def calculate_streak(log_dates: Iterable[str]) -> Dict[str, Any]:
    """
    Work out ``current_streak`` and ``last_check_date`` from logged days.

    The streak is the run of consecutive days ending at the most recent log.
    Duplicate dates count once.
    """
    days = sorted({date.fromisoformat(d[:10]) for d in log_dates})
    if not days:
        return {"current_streak": 0, "last_check_date": None}

    streak = 1
    for newer, older in zip(reversed(days), reversed(days[:-1])):
        if (newer - older).days != 1:
            break
        streak += 1

    return {"current_streak": streak, "last_check_date": days[-1].isoformat()}


class HabitsService:
    """
    CRUD for habits and their daily completion logs.
    """

    def __init__(self, client: Optional[supabase_db.SupabaseClient] = None):
        """
        :param client: PostgREST client; the shared one is used when omitted.
        """
        self._client = client

    @property
    def client(self) -> supabase_db.SupabaseClient:
        return self._client or supabase_db.get_supabase_client()

    def get_habits(self, user_id: str) -> List[Dict[str, Any]]:
        """
        Lists the user's habits, newest first.
        """
        try:
            return self.client.select(
                HABITS_TABLE,
                filters={"user_id": user_id},
                order=("created_at", False),
            )
        except DatabaseError as err:
            logger.error(
                "Couldn't fetch habits for user %s. Error: %s", user_id, err
            )
            raise

    def create_habit(self, user_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Creates a habit owned by ``user_id``.

        :raises pydantic.ValidationError: if the payload is malformed.
        """
        habit = HabitCreate(**payload)
        try:
            return self.client.insert(HABITS_TABLE, habit.to_insert_row(user_id))
        except DatabaseError as err:
            logger.error(
                "Couldn't create habit %s for user %s. Error: %s",
                habit.emoji,
                user_id,
                err,
            )
            raise

    def update_habit(
        self, user_id: str, habit_id: str, payload: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Applies a partial update. An id the user does not own matches no row
        and surfaces as a ``DatabaseError``.
        """
        values = HabitUpdate(**payload).to_update_values()
        try:
            return self.client.update(
                HABITS_TABLE, values, filters={"id": habit_id, "user_id": user_id}
            )
        except DatabaseError as err:
            logger.error(
                "Couldn't update habit %s for user %s. Error: %s",
                habit_id,
                user_id,
                err,
            )
            raise

    def delete_habit(self, user_id: str, habit_id: str) -> None:
        """
        Deletes a habit. Deleting a missing habit is not an error.
        """
        try:
            self.client.delete(
                HABITS_TABLE, filters={"id": habit_id, "user_id": user_id}
            )
        except DatabaseError as err:
            logger.error(
                "Couldn't delete habit %s for user %s. Error: %s",
                habit_id,
                user_id,
                err,
            )
            raise

    def _verify_ownership(self, user_id: str, habit_id: str) -> None:
        rows = self.client.select(
            HABITS_TABLE, filters={"id": habit_id, "user_id": user_id}, columns="id"
        )
        if not rows:
            logger.warning(
                "Habit not found or not owned by user",
                extra={"habit_id": habit_id, "user_id": user_id},
            )
            raise HabitNotFoundError(habit_id)

    def get_habit_logs(self, user_id: str, habit_id: str) -> List[Dict[str, Any]]:
        """
        Lists completion logs for one habit, most recent first.
        """
        self._verify_ownership(user_id, habit_id)
        try:
            return self.client.select(
                HABIT_LOGS_TABLE,
                filters={"habit_id": habit_id},
                order=("log_date", False),
            )
        except DatabaseError as err:
            logger.error("Couldn't fetch logs for habit %s. Error: %s", habit_id, err)
            raise

    def log_habit_completion(
        self, user_id: str, habit_id: str, payload: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Records a completion and refreshes the habit's streak.
        """
        log = HabitLogCreate(**payload)
        self._verify_ownership(user_id, habit_id)
        try:
            created = self.client.insert(
                HABIT_LOGS_TABLE, {"habit_id": habit_id, "log_date": log.log_date}
            )
        except DatabaseError as err:
            logger.error(
                "Couldn't log completion of habit %s on %s. Error: %s",
                habit_id,
                log.log_date,
                err,
            )
            raise

        self.refresh_streak(user_id, habit_id)
        return created

    def delete_habit_log(self, user_id: str, habit_id: str, log_date: str) -> None:
        """
        Removes the completion for ``log_date`` and refreshes the streak.
        """
        log_date = HabitLogCreate(log_date=log_date).log_date
        self._verify_ownership(user_id, habit_id)
        try:
            self.client.delete(
                HABIT_LOGS_TABLE, filters={"habit_id": habit_id, "log_date": log_date}
            )
        except DatabaseError as err:
            logger.error(
                "Couldn't delete log of habit %s on %s. Error: %s",
                habit_id,
                log_date,
                err,
            )
            raise

        self.refresh_streak(user_id, habit_id)

    def refresh_streak(self, user_id: str, habit_id: str) -> Dict[str, Any]:
        """
        Recomputes ``current_streak`` and ``last_check_date`` from the logs.
        """
        logs = self.client.select(
            HABIT_LOGS_TABLE, filters={"habit_id": habit_id}, columns="log_date"
        )
        streak = calculate_streak(log["log_date"] for log in logs)
        logger.info(
            "Refreshing habit streak",
            extra={"habit_id": habit_id, **streak},
        )
        return self.client.update(
            HABITS_TABLE, streak, filters={"id": habit_id, "user_id": user_id}
        )


habits_service = HabitsService()
