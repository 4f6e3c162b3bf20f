"""Pomodoro timer settings for the habit tracker."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from models.timer import TimerSettingsInput
from services import supabase_db
from services.exceptions import DatabaseError
from utils.logging import setup_logger

logger = setup_logger(__name__)

TIMER_SETTINGS_TABLE = "timer_settings"


class TimerService:
    """
    Reads and upserts the single timer settings row each user has.
    """

    def __init__(self, client: Optional[supabase_db.SupabaseClient] = None):
        self._client = client

    @property
    def client(self) -> supabase_db.SupabaseClient:
        return self._client or supabase_db.get_supabase_client()

    def get_timer_settings(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        :return: The user's settings, or None if they never saved any.
        """
        try:
            return self.client.select(
                TIMER_SETTINGS_TABLE, filters={"user_id": user_id}, single=True
            )
        except DatabaseError as err:
            if err.code == supabase_db.NO_ROWS_CODE:
                return None
            logger.error(
                "Couldn't fetch timer settings for user %s. Error: %s", user_id, err
            )
            raise

    def create_or_update_timer_settings(
        self, user_id: str, payload: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Updates the existing row if there is one, otherwise inserts it.
        """
        settings = TimerSettingsInput(**payload).model_dump()
        existing = self.client.select(
            TIMER_SETTINGS_TABLE, filters={"user_id": user_id}, columns="id"
        )

        try:
            if existing:
                values = {
                    **settings,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                }
                return self.client.update(
                    TIMER_SETTINGS_TABLE, values, filters={"user_id": user_id}
                )

            return self.client.insert(
                TIMER_SETTINGS_TABLE, {**settings, "user_id": user_id}
            )
        except DatabaseError as err:
            logger.error(
                "Couldn't save timer settings for user %s. Error: %s",
                user_id,
                err,
                extra={"existing": bool(existing)},
            )
            raise


timer_service = TimerService()
