"""
Diagnostic endpoints used while wiring up a deployment.

Neither route goes through ``require_auth``: test-connection reports a
failed session in its own body, and auth-debug works without one. Only the
presence of configuration values is reported, never the values themselves.
"""

from datetime import datetime, timezone

from services import supabase_db
from services.parameter_store import config
from utils.decorators import lambda_handler, resolve_session
from utils.logging import log_error, setup_logger
from utils.responses import HTTPStatus, create_response

logger = setup_logger(__name__)


def _presence(key: str) -> str:
    return "Set" if config.is_set(key) else "Missing"


@lambda_handler()
def connection_check(event, context):
    """
    GET /api/test-connection

    Verifies the caller's session and that the database answers.
    """
    try:
        session = resolve_session(event)
        if not session:
            return create_response(
                HTTPStatus.UNAUTHORIZED,
                {
                    "success": False,
                    "error": "Authentication failed",
                    "details": "No valid session token provided",
                },
            )

        return create_response(
            HTTPStatus.OK,
            {
                "success": True,
                "auth": {"userId": session["user_id"], "authenticated": True},
                "supabase": supabase_db.check_connection(),
                "environment": {
                    "supabaseUrl": _presence("supabase/url"),
                    "supabaseKey": (
                        "Set"
                        if config.is_set("supabase/service-role-key")
                        or config.is_set("supabase/anon-key")
                        else "Missing"
                    ),
                },
            },
        )
    except Exception as e:
        log_error(logger, e, {"handler": "connection_check"})
        return create_response(
            HTTPStatus.INTERNAL_SERVER_ERROR,
            {"success": False, "error": "Connection test failed", "details": str(e)},
        )


@lambda_handler()
def auth_debug(event, context):
    """
    GET /api/auth-debug

    Shows what the API sees for the current request: the resolved user
    (if any) and which keys are configured.
    """
    timestamp = datetime.now(timezone.utc).isoformat()

    try:
        session = resolve_session(event) or {}

        return create_response(
            HTTPStatus.OK,
            {
                "success": True,
                "data": {
                    "userId": session.get("user_id"),
                    "sessionId": session.get("session_id"),
                    "timestamp": timestamp,
                    "environment": config.environment,
                    "hasAuthKeys": {
                        "jwtSecret": config.is_set("supabase/jwt-secret"),
                        "anonKey": config.is_set("supabase/anon-key"),
                    },
                    "hasRevenueCatKey": config.is_set("revenuecat/api-key"),
                    "hasSupabaseKeys": {
                        "url": config.is_set("supabase/url"),
                        "anonKey": config.is_set("supabase/anon-key"),
                        "serviceRoleKey": config.is_set("supabase/service-role-key"),
                    },
                },
            },
        )
    except Exception as e:
        log_error(logger, e, {"handler": "auth_debug"})
        return create_response(
            HTTPStatus.INTERNAL_SERVER_ERROR,
            {"success": False, "error": str(e), "timestamp": timestamp},
        )
