from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.constants import ALL_ACCESS_PRODUCT
from app.core.datetime_utils import utcnow
from app.subscriptions.models import Entitlement, EntitlementStatus, Subscription, SubscriptionStatus


class AccessService:
    @staticmethod
    def has_active_subscription(user_id: UUID, db: Session, now: datetime | None = None) -> bool:
        """Active subscription with a future period end, or a live all-access entitlement."""
        now = now or utcnow()

        subscriptions = (
            db.query(Subscription)
            .filter(
                Subscription.user_id == user_id,
                Subscription.status == SubscriptionStatus.ACTIVE,
            )
            .all()
        )
        if any(s.is_active_at(now) for s in subscriptions):
            return True

        entitlements = (
            db.query(Entitlement)
            .filter(
                Entitlement.user_id == user_id,
                Entitlement.product == ALL_ACCESS_PRODUCT,
                Entitlement.status == EntitlementStatus.ACTIVE,
            )
            .all()
        )
        return any(e.is_active_at(now) for e in entitlements)
