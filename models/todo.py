"""Todo request models."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class TodoCreate(BaseModel):
    """Fields a client may set when creating a todo."""

    content: str = Field(..., min_length=1, max_length=500)
    is_completed: bool = False

    def to_insert_row(self, user_id: str) -> Dict[str, Any]:
        return {**self.model_dump(), "user_id": user_id}


class TodoUpdate(BaseModel):
    """Partial todo update."""

    content: Optional[str] = Field(None, min_length=1, max_length=500)
    is_completed: Optional[bool] = None
    completed_at: Optional[str] = None

    def to_update_values(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Values to write. Changing ``is_completed`` without an explicit
        ``completed_at`` stamps the completion time, or clears it.
        """
        values = self.model_dump(exclude_unset=True)

        if self.is_completed is not None and "completed_at" not in values:
            if self.is_completed:
                now = now or datetime.now(timezone.utc)
                values["completed_at"] = now.isoformat()
            else:
                values["completed_at"] = None

        return values
