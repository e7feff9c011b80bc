import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.constants import ALL_ACCESS_PRODUCT
from app.core.datetime_utils import ensure_utc
from app.db.session import Base


class SubscriptionStatus(str, enum.Enum):
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"


class EntitlementStatus(str, enum.Enum):
    ACTIVE = "active"
    REVOKED = "revoked"


class Subscription(Base):
    __tablename__ = "subscriptions"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    plan: Mapped[str] = mapped_column(default="monthly")
    status: Mapped[SubscriptionStatus] = mapped_column(
        Enum(SubscriptionStatus, values_callable=lambda obj: [e.value for e in obj]),
        default=SubscriptionStatus.ACTIVE,
    )
    current_period_end: Mapped[datetime] = mapped_column()
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC)
    )

    user = relationship("User", backref="subscriptions")

    def is_active_at(self, now: datetime) -> bool:
        return self.status == SubscriptionStatus.ACTIVE and ensure_utc(self.current_period_end) > now

    def __repr__(self) -> str:
        return f"<Subscription(id={self.id}, user_id={self.user_id}, status={self.status})>"


class Entitlement(Base):
    """Access grant that is independent of a recurring subscription."""

    __tablename__ = "entitlements"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    product: Mapped[str] = mapped_column(default=ALL_ACCESS_PRODUCT)
    status: Mapped[EntitlementStatus] = mapped_column(
        Enum(EntitlementStatus, values_callable=lambda obj: [e.value for e in obj]),
        default=EntitlementStatus.ACTIVE,
    )
    expires_at: Mapped[datetime | None] = mapped_column(default=None)
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    user = relationship("User", backref="entitlements")

    def is_active_at(self, now: datetime) -> bool:
        if self.status != EntitlementStatus.ACTIVE:
            return False
        return self.expires_at is None or ensure_utc(self.expires_at) > now

    def __repr__(self) -> str:
        return f"<Entitlement(id={self.id}, user_id={self.user_id}, product={self.product})>"
