"""
JWT Authorization Lambda for API Gateway.

This module provides JWT token validation for protected API endpoints.
It validates Supabase access tokens and passes the session's user to the
route handlers through the authorizer context.
"""

from typing import Any, Dict

from services.supabase_auth import supabase_auth
from utils.logging import log_error, setup_logger

# Module level so warm starts reuse the logger and cached secrets
logger = setup_logger(__name__)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    HTTP API Gateway Lambda Authorizer (simple response format).

    Args:
        event: API Gateway authorizer event
        context: Lambda context object

    Returns:
        Authorization response for API Gateway
    """
    logger.info(
        "Authorization request received",
        extra={
            "request_id": getattr(context, "aws_request_id", "unknown"),
            "method": event.get("requestContext", {}).get("http", {}).get("method"),
            "path": event.get("rawPath"),
        },
    )

    try:
        user_info = supabase_auth.get_user_from_request(event)
        if not user_info or not user_info.get("user_id"):
            logger.warning("Authorization failed: no valid Supabase session in token")
            return {"isAuthorized": False}

        logger.info(
            "User authorized successfully",
            extra={"user_id": user_info["user_id"]},
        )

        # Authorizer context values must be scalars
        return {
            "isAuthorized": True,
            "context": {
                "user_id": user_info["user_id"],
                "session_id": user_info.get("session_id") or "",
                "email": user_info.get("email") or "",
            },
        }

    except Exception as e:
        log_error(
            logger,
            e,
            {
                "event_path": event.get("rawPath"),
                "event_method": event.get("requestContext", {})
                .get("http", {})
                .get("method"),
            },
        )
        return {"isAuthorized": False}
