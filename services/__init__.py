"""
Services package for persistence and external integrations.

This package contains the PostgREST client, the per-resource service
objects, and the Supabase Auth and RevenueCat integrations.
"""

from .habits import habits_service
from .subscription import subscription_service
from .supabase_auth import supabase_auth
from .timer import timer_service
from .todos import todos_service

__all__ = [
    "habits_service",
    "todos_service",
    "timer_service",
    "subscription_service",
    "supabase_auth",
]
