"""
Pomodoro timer settings handlers.

GET answers JSON ``null`` until the user saves settings for the first time.
"""

from services.timer import timer_service
from utils.decorators import json_body, lambda_handler, require_auth
from utils.responses import json_response


@lambda_handler()
@require_auth
def get_timer_settings(event, context):
    """GET /api/timer-settings"""
    return json_response(timer_service.get_timer_settings(event["auth"]["user_id"]))


@lambda_handler()
@require_auth
@json_body
def save_timer_settings(event, context):
    """
    POST /api/timer-settings

    Upsert: the first call creates the row, later calls update it.
    """
    settings = timer_service.create_or_update_timer_settings(
        event["auth"]["user_id"], event["json_body"]
    )
    return json_response(settings)
