"""
Utils package for shared utilities and cross-cutting concerns.

This package contains logging utilities and response formatters. Handler
decorators live in ``utils.decorators`` and are imported from there
directly, since they depend on the services package.
"""

from .logging import log_error, log_lambda_event, log_lambda_response, setup_logger
from .responses import (HTTPStatus, error_response, internal_error_response,
                        json_response, not_found_response, success_response,
                        unauthorized_response)

__all__ = [
    # Logging
    "setup_logger",
    "log_lambda_event",
    "log_lambda_response",
    "log_error",
    # Responses
    "HTTPStatus",
    "json_response",
    "success_response",
    "error_response",
    "internal_error_response",
    "not_found_response",
    "unauthorized_response",
]
