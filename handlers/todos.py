"""
Todo handlers for the habit tracker API.

Same conventions as the habit routes: session required, results returned
unwrapped, any failure is a generic 500.
"""

from services.todos import todos_service
from utils.decorators import (extract_path_params, json_body, lambda_handler,
                              require_auth)
from utils.responses import json_response, success_response


@lambda_handler()
@require_auth
def list_todos(event, context):
    """GET /api/todos"""
    return json_response(todos_service.get_todos(event["auth"]["user_id"]))


@lambda_handler()
@require_auth
@json_body
def create_todo(event, context):
    """POST /api/todos"""
    todo = todos_service.create_todo(event["auth"]["user_id"], event["json_body"])
    return json_response(todo)


@lambda_handler()
@require_auth
@json_body
@extract_path_params("id")
def update_todo(event, context):
    """
    PATCH /api/todos/{id}

    Sending ``is_completed`` alone also sets or clears ``completed_at``.
    """
    todo = todos_service.update_todo(
        event["auth"]["user_id"], event["path_params"]["id"], event["json_body"]
    )
    return json_response(todo)


@lambda_handler()
@require_auth
@extract_path_params("id")
def delete_todo(event, context):
    """DELETE /api/todos/{id}"""
    todos_service.delete_todo(event["auth"]["user_id"], event["path_params"]["id"])
    return success_response()
