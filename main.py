"""
Health check endpoint for the habit tracker API.

This module provides a simple health check endpoint that can be used
for monitoring and load balancer health checks.
"""

from utils.decorators import lambda_handler
from utils.responses import success_response

SERVICE_NAME = "habit-tracker-api"
SERVICE_VERSION = "1.0.0"


@lambda_handler()
def healthz(event, context):
    """
    Health check endpoint for the habit tracker API.

    Does not require authentication and never touches the database, so it
    stays green while Supabase is unreachable.

    Args:
        event: Lambda event object
        context: Lambda context object

    Returns:
        HTTP response indicating service health
    """
    return success_response(
        data={
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
        },
        message="Service is running",
    )
