"""Subscription and entitlement models."""

from app.subscriptions.models.subscription import (
    Entitlement,
    EntitlementStatus,
    Subscription,
    SubscriptionStatus,
)

__all__ = [
    "Subscription",
    "SubscriptionStatus",
    "Entitlement",
    "EntitlementStatus",
]
