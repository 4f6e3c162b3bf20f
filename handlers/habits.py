"""
Habit handlers for the habit tracker API.

Routes:
- GET    /api/habits
- POST   /api/habits
- PATCH  /api/habits/{id}
- DELETE /api/habits/{id}
- GET    /api/habits/{id}/logs
- POST   /api/habits/{id}/logs
- DELETE /api/habits/{id}/logs?log_date=YYYY-MM-DD

Every route requires a session. Failures of any kind are answered with a
generic 500 by ``lambda_handler``; the cause is only logged.
"""

from services.habits import habits_service
from utils.decorators import (extract_path_params, json_body, lambda_handler,
                              require_auth)
from utils.responses import json_response, success_response


@lambda_handler()
@require_auth
def list_habits(event, context):
    """
    List the authenticated user's habits, newest first.

    GET /api/habits
    """
    habits = habits_service.get_habits(event["auth"]["user_id"])
    return json_response(habits)


@lambda_handler()
@require_auth
@json_body
def create_habit(event, context):
    """
    Create a habit for the authenticated user.

    POST /api/habits

    The owner comes from the session, never from the body. A new habit
    starts with no streak.
    """
    habit = habits_service.create_habit(event["auth"]["user_id"], event["json_body"])
    return json_response(habit)


@lambda_handler()
@require_auth
@json_body
@extract_path_params("id")
def update_habit(event, context):
    """
    PATCH /api/habits/{id}

    An unknown id is reported as a 500 like any other failure.
    """
    habit = habits_service.update_habit(
        event["auth"]["user_id"], event["path_params"]["id"], event["json_body"]
    )
    return json_response(habit)


@lambda_handler()
@require_auth
@extract_path_params("id")
def delete_habit(event, context):
    """
    DELETE /api/habits/{id}

    Always answers ``{"success": true}``, whether or not the habit existed.
    """
    habits_service.delete_habit(event["auth"]["user_id"], event["path_params"]["id"])
    return success_response()


@lambda_handler()
@require_auth
@extract_path_params("id")
def list_habit_logs(event, context):
    """GET /api/habits/{id}/logs"""
    logs = habits_service.get_habit_logs(
        event["auth"]["user_id"], event["path_params"]["id"]
    )
    return json_response(logs)


@lambda_handler()
@require_auth
@json_body
@extract_path_params("id")
def create_habit_log(event, context):
    """
    POST /api/habits/{id}/logs with ``{"log_date": "YYYY-MM-DD"}``.

    Also refreshes the habit's streak.
    """
    log = habits_service.log_habit_completion(
        event["auth"]["user_id"], event["path_params"]["id"], event["json_body"]
    )
    return json_response(log)


@lambda_handler()
@require_auth
@extract_path_params("id")
def delete_habit_log(event, context):
    """DELETE /api/habits/{id}/logs?log_date=YYYY-MM-DD"""
    log_date = (event.get("queryStringParameters") or {}).get("log_date")
    if not log_date:
        raise ValueError("log_date query parameter is required")

    habits_service.delete_habit_log(
        event["auth"]["user_id"], event["path_params"]["id"], log_date
    )
    return success_response()
