"""
Handlers package for Lambda function handlers.

This package contains the API endpoint handlers for habits, todos, timer
settings, subscription status and deployment diagnostics.
"""

from . import diagnostics, habits, subscription, timer_settings, todos

__all__ = ["habits", "todos", "timer_settings", "subscription", "diagnostics"]
