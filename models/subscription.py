"""Subscription status and feature limit models."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class FeatureLimits(BaseModel):
    """What the current plan allows. A limit of None means unlimited."""

    max_habits: Optional[int]
    max_todos: Optional[int]
    max_timer_sessions: Optional[int]
    can_export_data: bool
    can_sync_across_devices: bool
    can_access_premium_features: bool

    @classmethod
    def for_plan(cls, is_premium: bool) -> "FeatureLimits":
        if is_premium:
            return cls(
                max_habits=None,
                max_todos=None,
                max_timer_sessions=None,
                can_export_data=True,
                can_sync_across_devices=True,
                can_access_premium_features=True,
            )
        return cls(
            max_habits=3,
            max_todos=3,
            max_timer_sessions=10,
            can_export_data=True,
            can_sync_across_devices=True,
            can_access_premium_features=False,
        )


class SubscriptionStatus(BaseModel):
    """Entitlement summary returned by GET /api/subscription."""

    user_id: str
    is_premium: bool
    user_type: Literal["free", "premium"]
    active_entitlements: List[str] = Field(default_factory=list)
    limits: FeatureLimits
