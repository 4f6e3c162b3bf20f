"""
Decorators for Lambda function handlers.

This module provides decorators that add consistent logging, error handling,
authentication and request parsing to Lambda functions.

Stacking order matters: ``lambda_handler`` must be outermost so that any
exception raised below it becomes a logged 500, and ``require_auth`` must run
before the body is parsed so unauthenticated calls never reach a service.
"""

import base64
import json
import time
from functools import wraps
from typing import Any, Callable, Dict, Optional

from services.supabase_auth import supabase_auth

from .logging import log_error, log_lambda_event, log_lambda_response, setup_logger
from .responses import internal_error_response, unauthorized_response


def lambda_handler(
    logger_name: Optional[str] = None,
    log_event: bool = True,
    log_response: bool = True,
    structured_logging: bool = True,
) -> Callable:
    """
    Decorator for Lambda function handlers that provides:
    - Consistent logging setup
    - Automatic event/response logging
    - Conversion of any exception into a generic 500 response
    - Execution time tracking

    Args:
        logger_name: Logger name (defaults to function module name)
        log_event: Whether to log incoming events
        log_response: Whether to log responses
        structured_logging: Whether to use structured JSON logging

    Returns:
        Decorated function
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
            logger = setup_logger(
                logger_name or func.__module__, structured=structured_logging
            )

            start_time = time.time()

            try:
                if log_event:
                    log_lambda_event(logger, event, context)

                response = func(event, context)

                if not isinstance(response, dict) or "statusCode" not in response:
                    logger.warning("Handler returned invalid response format")
                    response = internal_error_response()

            except Exception as e:
                execution_time = (time.time() - start_time) * 1000

                log_error(
                    logger,
                    e,
                    {
                        "handler": func.__name__,
                        "request_id": getattr(context, "aws_request_id", "unknown"),
                        "execution_time_ms": execution_time,
                        "event_path": event.get("rawPath") or event.get("path"),
                        "event_method": event.get("httpMethod")
                        or event.get("requestContext", {})
                        .get("http", {})
                        .get("method"),
                        "user_id": (event.get("auth") or {}).get("user_id"),
                    },
                )

                return internal_error_response()

            if log_response:
                execution_time = (time.time() - start_time) * 1000
                log_lambda_response(logger, response, execution_time)

            return response

        return wrapper

    return decorator


def get_authorizer_context(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Context set by the API Gateway Lambda authorizer, if any.

    HTTP APIs nest it under ``authorizer.lambda``; REST APIs do not.
    """
    authorizer_context = event.get("requestContext", {}).get("authorizer") or {}
    return authorizer_context.get("lambda", authorizer_context) or {}


def resolve_session(event: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Find the authenticated session for a request.

    The authorizer context is trusted when present; otherwise the bearer
    token is verified here (single-function deployments, local runs).
    """
    auth_context = get_authorizer_context(event)
    if auth_context.get("user_id"):
        return {
            "user_id": auth_context.get("user_id"),
            "session_id": auth_context.get("session_id"),
            "email": auth_context.get("email"),
        }

    user_info = supabase_auth.get_user_from_request(event)
    if not user_info or not user_info.get("user_id"):
        return None

    return {
        "user_id": user_info["user_id"],
        "session_id": user_info.get("session_id"),
        "email": user_info.get("email"),
    }


def require_auth(func: Callable) -> Callable:
    """
    Decorator that ensures the request carries a valid session.

    Unauthenticated requests get a 401 and the handler is never called.
    The session is exposed to the handler as ``event["auth"]``.

    Args:
        func: Function to decorate

    Returns:
        Decorated function
    """

    @wraps(func)
    def wrapper(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
        session = resolve_session(event)

        if not session:
            logger = setup_logger(__name__)
            logger.info(
                "Authorization failed - no valid session",
                extra={
                    "path": event.get("rawPath"),
                    "has_authorization_header": bool(
                        (event.get("headers") or {}).get("authorization")
                        or (event.get("headers") or {}).get("Authorization")
                    ),
                },
            )
            return unauthorized_response()

        event["auth"] = session

        return func(event, context)

    return wrapper


def json_body(func: Callable) -> Callable:
    """
    Decorator that parses the JSON request body into ``event["json_body"]``.

    A body that is not a JSON object raises ``ValueError`` and, like any
    other failure, is answered with a 500 by ``lambda_handler``.

    Args:
        func: Function to decorate

    Returns:
        Decorated function
    """

    @wraps(func)
    def wrapper(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
        body_str = event.get("body") or "{}"

        if event.get("isBase64Encoded"):
            body_str = base64.b64decode(body_str).decode("utf-8")

        body = json.loads(body_str)
        if not isinstance(body, dict):
            raise ValueError("Request body must be a JSON object")

        event["json_body"] = body

        return func(event, context)

    return wrapper


def extract_path_params(*param_names: str) -> Callable:
    """
    Decorator that extracts path parameters into ``event["path_params"]``.

    A missing parameter means the route was wired incorrectly and raises
    ``KeyError``.

    Args:
        param_names: Names of path parameters to extract

    Returns:
        Decorated function
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
            path_params = event.get("pathParameters") or {}

            missing_params = [
                param for param in param_names if not path_params.get(param)
            ]

            if missing_params:
                raise KeyError(f"Missing path parameters: {', '.join(missing_params)}")

            event["path_params"] = {param: path_params[param] for param in param_names}

            return func(event, context)

        return wrapper

    return decorator
