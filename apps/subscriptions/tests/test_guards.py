from uuid import uuid4

import pytest

from shared.domain.exceptions import ForbiddenError
from apps.subscriptions.application.command_handlers import ActivateSubscriptionCommand
from apps.subscriptions.bootstrap import build_activate_handler
from apps.subscriptions.domain.entities import SubscriptionPlan
from apps.subscriptions.guards import TierLimits, ensure_premium, resolve_tier


def test_tier_limits():
    assert TierLimits.for_tier(SubscriptionPlan.PREMIUM) == TierLimits(10000, 365)
    assert TierLimits.for_tier(SubscriptionPlan.FREE) == TierLimits(100, 90)


def test_free_tier_is_refused():
    with pytest.raises(ForbiddenError) as exc_info:
        ensure_premium(SubscriptionPlan.FREE, "Excel export", user_id=1)

    assert exc_info.value.code == "premium_required"
    assert str(exc_info.value) == "Excel export is a PREMIUM feature. Upgrade your subscription to access it."


def test_premium_tier_passes():
    ensure_premium(SubscriptionPlan.PREMIUM, "Excel export")


@pytest.mark.django_db
def test_resolve_tier(user):
    assert resolve_tier(user.id) == SubscriptionPlan.FREE

    build_activate_handler().handle(ActivateSubscriptionCommand(user_id=user.id, payment_id=uuid4()))

    assert resolve_tier(user.id) == SubscriptionPlan.PREMIUM
