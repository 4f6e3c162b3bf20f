"""
Standardized HTTP response utilities for Lambda functions.

This module provides consistent response formatting and JSON serialization
across all API endpoints.
"""

import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Union


class HTTPStatus(Enum):
    """HTTP status codes used by the API."""

    OK = 200
    UNAUTHORIZED = 401
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500


cors_headers = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,PATCH,DELETE,OPTIONS",
}


class APIJSONEncoder(json.JSONEncoder):
    """
    JSON encoder for API responses that handles:
    - Decimal values
    - date and datetime values
    - Pydantic models
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if hasattr(obj, "model_dump"):
            return obj.model_dump(mode="json")
        return super().default(obj)


def create_response(
    status_code: Union[int, HTTPStatus],
    body: Any = None,
    headers: Optional[Dict[str, str]] = None,
    cors_enabled: bool = True,
) -> Dict[str, Any]:
    """
    Create a Lambda proxy response with a JSON body.

    A body of None is serialized as JSON ``null``; handlers that have nothing
    to return (e.g. no timer settings yet) rely on that.

    Args:
        status_code: HTTP status code
        body: Response body (will be JSON serialized)
        headers: Additional headers
        cors_enabled: Whether to include CORS headers

    Returns:
        Lambda HTTP response dictionary
    """
    if isinstance(status_code, HTTPStatus):
        status_code = status_code.value

    response_headers = {"Content-Type": "application/json"}

    if cors_enabled:
        response_headers.update(cors_headers)

    if headers:
        response_headers.update(headers)

    return {
        "statusCode": status_code,
        "headers": response_headers,
        "body": json.dumps(body, cls=APIJSONEncoder),
    }


def json_response(
    data: Any, status_code: Union[int, HTTPStatus] = HTTPStatus.OK
) -> Dict[str, Any]:
    """Return ``data`` as the response body, unwrapped."""
    return create_response(status_code, data)


def success_response(
    data: Optional[Dict[str, Any]] = None,
    message: Optional[str] = None,
    status_code: Union[int, HTTPStatus] = HTTPStatus.OK,
) -> Dict[str, Any]:
    """
    Create a ``{"success": true, ...}`` response.

    Args:
        data: Extra top-level fields merged into the body
        message: Optional human readable message
        status_code: HTTP status code

    Returns:
        Lambda HTTP response dictionary
    """
    body: Dict[str, Any] = {"success": True}

    if message:
        body["message"] = message

    if data:
        body.update(data)

    return create_response(status_code, body)


def error_response(
    message: str,
    status_code: Union[int, HTTPStatus] = HTTPStatus.INTERNAL_SERVER_ERROR,
    error_code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Create an error response.

    Args:
        message: Error message
        status_code: HTTP status code
        error_code: Application-specific error code
        details: Additional error details

    Returns:
        Lambda HTTP response dictionary
    """
    body = {"error": message}

    if error_code:
        body["error_code"] = error_code

    if details:
        body["details"] = details

    return create_response(status_code, body)


def internal_error_response() -> Dict[str, Any]:
    """Generic 500; the cause only goes to the log."""
    return error_response("Internal server error", HTTPStatus.INTERNAL_SERVER_ERROR)


def not_found_response(
    resource: str, identifier: Optional[str] = None
) -> Dict[str, Any]:
    """404 for an unknown resource, e.g. ``not_found_response("Route", "GET /x")``."""
    label = f"{resource} '{identifier}'" if identifier else resource
    return error_response(
        f"{label} not found", HTTPStatus.NOT_FOUND, error_code="RESOURCE_NOT_FOUND"
    )


def unauthorized_response(message: str = "Unauthorized") -> Dict[str, Any]:
    """401 sent when a request carries no valid session."""
    return error_response(message, HTTPStatus.UNAUTHORIZED, error_code="UNAUTHORIZED")
