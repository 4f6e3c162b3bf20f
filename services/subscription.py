"""
RevenueCat entitlement lookup.

Subscription status is read-only here: purchases happen in the mobile and
web clients, which share RevenueCat app user ids with the auth user id.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from models.subscription import FeatureLimits, SubscriptionStatus
from services.parameter_store import config
from utils.logging import setup_logger

logger = setup_logger(__name__)

# Entitlement identifiers that unlock premium, as configured in RevenueCat
PREMIUM_ENTITLEMENTS = frozenset(
    {
        "Growmoji Premium",
        "pro",
        "premium",
        "plus",
        "Yearly",
        "Monthly",
        "yearly",
        "monthly",
    }
)


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def active_entitlements(
    subscriber: Dict[str, Any], now: Optional[datetime] = None
) -> List[str]:
    """
    Names of entitlements that have not expired.

    A null ``expires_date`` means a lifetime grant; an unreadable one is
    treated as expired.
    """
    now = now or datetime.now(timezone.utc)
    active = []
    for name, entitlement in (subscriber.get("entitlements") or {}).items():
        expires = (entitlement or {}).get("expires_date")
        if expires is None:
            active.append(name)
            continue

        try:
            expires_at = _parse_timestamp(expires)
        except (TypeError, ValueError):
            logger.warning(
                "Skipping entitlement with unreadable expiry",
                extra={"entitlement": name, "expires_date": str(expires)},
            )
            continue

        if expires_at > now:
            active.append(name)
    return sorted(active)


def is_premium(entitlements: List[str]) -> bool:
    return any(name in PREMIUM_ENTITLEMENTS for name in entitlements)


class SubscriptionService:
    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()

    def fetch_subscriber(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        GET /subscribers/{app_user_id}. Returns None when the lookup is not
        possible or fails; the caller falls back to the free plan.
        """
        revenuecat = config.load_revenuecat_config()
        if not revenuecat["api_key"]:
            logger.warning("RevenueCat API key not configured, treating user as free")
            return None

        base_url = revenuecat["api_url"].rstrip("/")
        url = f"{base_url}/subscribers/{quote(user_id, safe='')}"
        try:
            response = self.session.get(
                url,
                headers={
                    "Authorization": f"Bearer {revenuecat['api_key']}",
                    "Content-Type": "application/json",
                },
                timeout=10,
            )
        except requests.RequestException as e:
            logger.error(
                "RevenueCat request failed",
                extra={"user_id": user_id, "error_message": str(e)},
            )
            return None

        if not response.ok:
            logger.error(
                "RevenueCat returned an error",
                extra={"user_id": user_id, "status_code": response.status_code},
            )
            return None

        try:
            payload = response.json()
        except ValueError:
            logger.error(
                "RevenueCat returned a body that is not JSON",
                extra={"user_id": user_id, "status_code": response.status_code},
            )
            return None

        subscriber = payload.get("subscriber") if isinstance(payload, dict) else None
        if not isinstance(subscriber, dict):
            logger.error(
                "RevenueCat response has no subscriber object",
                extra={"user_id": user_id},
            )
            return None

        return subscriber

    def get_subscription_status(self, user_id: str) -> SubscriptionStatus:
        subscriber = self.fetch_subscriber(user_id)
        entitlements = active_entitlements(subscriber) if subscriber else []
        premium = is_premium(entitlements)

        logger.info(
            "Premium status check",
            extra={
                "user_id": user_id,
                "is_premium": premium,
                "active_entitlements": entitlements,
            },
        )

        return SubscriptionStatus(
            user_id=user_id,
            is_premium=premium,
            user_type="premium" if premium else "free",
            active_entitlements=entitlements,
            limits=self.get_feature_limits(premium),
        )

    @staticmethod
    def get_feature_limits(premium: bool) -> FeatureLimits:
        return FeatureLimits.for_plan(premium)


subscription_service = SubscriptionService()
