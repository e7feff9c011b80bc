"""
Tests for subscription and entitlement access checks.
"""

from datetime import UTC, datetime, timedelta

from app.subscriptions.models import EntitlementStatus, SubscriptionStatus
from app.subscriptions.services.access_service import AccessService
from tests.utils.factories import create_entitlement_factory, create_subscription_factory

NOW = datetime(2026, 6, 1, tzinfo=UTC)


def test_no_subscription_no_access(db_session, test_user):
    assert AccessService.has_active_subscription(test_user.id, db_session, now=NOW) is False


def test_active_subscription_grants_access(db_session, test_user):
    create_subscription_factory(
        db_session, user=test_user, current_period_end=NOW + timedelta(days=3)
    )

    assert AccessService.has_active_subscription(test_user.id, db_session, now=NOW) is True


def test_subscription_past_period_end(db_session, test_user):
    create_subscription_factory(
        db_session, user=test_user, current_period_end=NOW - timedelta(seconds=1)
    )

    assert AccessService.has_active_subscription(test_user.id, db_session, now=NOW) is False


def test_past_due_subscription(db_session, test_user):
    create_subscription_factory(
        db_session,
        user=test_user,
        status=SubscriptionStatus.PAST_DUE,
        current_period_end=NOW + timedelta(days=3),
    )

    assert AccessService.has_active_subscription(test_user.id, db_session, now=NOW) is False


def test_entitlement_without_expiry(db_session, test_user):
    create_entitlement_factory(db_session, user=test_user)

    assert AccessService.has_active_subscription(test_user.id, db_session, now=NOW) is True


def test_expired_or_revoked_entitlement(db_session, test_user):
    create_entitlement_factory(db_session, user=test_user, expires_at=NOW - timedelta(days=1))
    create_entitlement_factory(db_session, user=test_user, status=EntitlementStatus.REVOKED)

    assert AccessService.has_active_subscription(test_user.id, db_session, now=NOW) is False


def test_naive_period_end_is_treated_as_utc(db_session, test_user):
    subscription = create_subscription_factory(
        db_session,
        user=test_user,
        current_period_end=(NOW + timedelta(hours=1)).replace(tzinfo=None),
    )

    assert subscription.is_active_at(NOW) is True
