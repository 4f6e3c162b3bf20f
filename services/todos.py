"""Todo persistence for the habit tracker."""

from typing import Any, Dict, List, Optional

from models.todo import TodoCreate, TodoUpdate
from services import supabase_db
from services.exceptions import DatabaseError
from utils.logging import setup_logger

logger = setup_logger(__name__)

TODOS_TABLE = "todos"


class TodosService:
    """CRUD for a user's todos."""

    def __init__(self, client: Optional[supabase_db.SupabaseClient] = None):
        self._client = client

    @property
    def client(self) -> supabase_db.SupabaseClient:
        return self._client or supabase_db.get_supabase_client()

    def get_todos(self, user_id: str) -> List[Dict[str, Any]]:
        try:
            return self.client.select(
                TODOS_TABLE, filters={"user_id": user_id}, order=("created_at", False)
            )
        except DatabaseError as err:
            logger.error("Couldn't fetch todos for user %s. Error: %s", user_id, err)
            raise

    def create_todo(self, user_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        todo = TodoCreate(**payload)
        try:
            return self.client.insert(TODOS_TABLE, todo.to_insert_row(user_id))
        except DatabaseError as err:
            logger.error("Couldn't create todo for user %s. Error: %s", user_id, err)
            raise

    def update_todo(
        self, user_id: str, todo_id: str, payload: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Partial update; see ``TodoUpdate.to_update_values`` for the
        completion timestamp rule.
        """
        values = TodoUpdate(**payload).to_update_values()
        try:
            return self.client.update(
                TODOS_TABLE, values, filters={"id": todo_id, "user_id": user_id}
            )
        except DatabaseError as err:
            logger.error(
                "Couldn't update todo %s for user %s. Error: %s", todo_id, user_id, err
            )
            raise

    def delete_todo(self, user_id: str, todo_id: str) -> None:
        try:
            self.client.delete(TODOS_TABLE, filters={"id": todo_id, "user_id": user_id})
        except DatabaseError as err:
            logger.error(
                "Couldn't delete todo %s for user %s. Error: %s", todo_id, user_id, err
            )
            raise

    def toggle_todo_complete(
        self, user_id: str, todo_id: str, is_completed: bool
    ) -> Dict[str, Any]:
        return self.update_todo(user_id, todo_id, {"is_completed": is_completed})


todos_service = TodosService()
