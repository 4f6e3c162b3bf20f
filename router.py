"""
Single-entry dispatcher for the habit tracker API.

API Gateway can route each path to its own function; this module serves the
whole route table from one function instead, and is what local invocations
and tests call.
"""

import re
from typing import Any, Callable, Dict, List, Optional, Pattern, Tuple

from handlers import diagnostics, habits, subscription, timer_settings, todos
from main import healthz
from utils.logging import setup_logger
from utils.responses import HTTPStatus, create_response, not_found_response

logger = setup_logger(__name__)

ROUTES: Dict[Tuple[str, str], Callable] = {
    ("GET", "/healthz"): healthz,
    ("GET", "/api/habits"): habits.list_habits,
    ("POST", "/api/habits"): habits.create_habit,
    ("PATCH", "/api/habits/{id}"): habits.update_habit,
    ("DELETE", "/api/habits/{id}"): habits.delete_habit,
    ("GET", "/api/habits/{id}/logs"): habits.list_habit_logs,
    ("POST", "/api/habits/{id}/logs"): habits.create_habit_log,
    ("DELETE", "/api/habits/{id}/logs"): habits.delete_habit_log,
    ("GET", "/api/todos"): todos.list_todos,
    ("POST", "/api/todos"): todos.create_todo,
    ("PATCH", "/api/todos/{id}"): todos.update_todo,
    ("DELETE", "/api/todos/{id}"): todos.delete_todo,
    ("GET", "/api/timer-settings"): timer_settings.get_timer_settings,
    ("POST", "/api/timer-settings"): timer_settings.save_timer_settings,
    ("GET", "/api/subscription"): subscription.get_subscription,
    ("GET", "/api/test-connection"): diagnostics.connection_check,
    ("GET", "/api/auth-debug"): diagnostics.auth_debug,
}


def _compile(template: str) -> Pattern:
    pattern = re.sub(r"\{(\w+)\}", r"(?P<\1>[^/]+)", template)
    return re.compile(f"^{pattern}$")


_COMPILED: List[Tuple[str, Pattern, Callable]] = [
    (method, _compile(template), handler)
    for (method, template), handler in ROUTES.items()
]


def request_method(event: Dict[str, Any]) -> str:
    method = event.get("requestContext", {}).get("http", {}).get("method")
    return (method or event.get("httpMethod") or "GET").upper()


def request_path(event: Dict[str, Any]) -> str:
    path = event.get("rawPath") or event.get("path") or "/"
    if len(path) > 1:
        path = path.rstrip("/")
    return path


def match_route(
    method: str, path: str
) -> Optional[Tuple[Callable, Dict[str, str]]]:
    """
    Find the handler for a request.

    Returns:
        The handler and the path parameters it was matched with, or None
    """
    for route_method, pattern, handler in _COMPILED:
        if route_method != method:
            continue
        match = pattern.match(path)
        if match:
            return handler, match.groupdict()
    return None


def dispatch(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda entry point for the single-function deployment.

    Path parameters found while matching are merged into
    ``event["pathParameters"]`` before the handler runs.
    """
    method = request_method(event)
    path = request_path(event)

    if method == "OPTIONS":
        return create_response(HTTPStatus.OK)

    matched = match_route(method, path)
    if matched is None:
        logger.info("No route matched", extra={"method": method, "path": path})
        return not_found_response("Route", f"{method} {path}")

    handler, path_params = matched
    if path_params:
        event["pathParameters"] = {**(event.get("pathParameters") or {}), **path_params}

    return handler(event, context)
