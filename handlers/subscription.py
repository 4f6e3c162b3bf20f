"""Subscription status handler."""

from services.subscription import subscription_service
from utils.decorators import lambda_handler, require_auth
from utils.responses import json_response


@lambda_handler()
@require_auth
def get_subscription(event, context):
    """
    GET /api/subscription

    Reports the user's plan and feature limits. Lookup failures fall back to
    the free plan rather than an error.
    """
    status = subscription_service.get_subscription_status(event["auth"]["user_id"])
    return json_response(status)
