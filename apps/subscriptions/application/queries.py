"""
Subscription read models.

Read-only use cases behind the status and upgrade endpoints.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from shared.domain.base import utcnow
from shared.domain.exceptions import NotFoundError, ValidationError
from apps.subscriptions.domain.entities import SubscriptionPlan
from apps.subscriptions.guards import TierLimits


@dataclass(frozen=True)
class SubscriptionStatusView:
    subscription_id: UUID
    plan: str
    status: str
    started_at: datetime
    ended_at: Optional[datetime]
    is_premium: bool
    is_trial: bool
    days_remaining: Optional[int]
    trial_eligible: bool
    limits: TierLimits


@dataclass(frozen=True)
class UpgradeOffer:
    plan: str
    price: Decimal
    currency: str
    duration: str
    payment_endpoint: str


def get_subscription_status(user_id, subscription_repo, eligibility) -> SubscriptionStatusView:
    now = utcnow()
    subscription = subscription_repo.get_active_for_user(user_id, now=now)
    if subscription is None:
        raise NotFoundError("No active subscription found")

    tier = SubscriptionPlan.PREMIUM if subscription.is_premium(now) else SubscriptionPlan.FREE
    return SubscriptionStatusView(
        subscription_id=subscription.id,
        plan=subscription.plan.value,
        status=subscription.status.value,
        started_at=subscription.started_at,
        ended_at=subscription.ended_at,
        is_premium=subscription.is_premium(now),
        is_trial=subscription.is_trial(now),
        days_remaining=subscription.days_remaining(now),
        trial_eligible=eligibility.is_eligible(user_id),
        limits=TierLimits.for_tier(tier),
    )


def get_upgrade_offer(user_id, subscription_repo, *, price: Decimal, currency: str,
                      duration_days: int, payment_endpoint: str) -> UpgradeOffer:
    subscription = subscription_repo.get_active_for_user(user_id)
    if subscription is not None and subscription.is_premium():
        raise ValidationError(
            "You already have an active PREMIUM subscription", code='already_premium'
        )
    return UpgradeOffer(
        plan=SubscriptionPlan.PREMIUM.value,
        price=price,
        currency=currency,
        duration=f"{duration_days} days",
        payment_endpoint=payment_endpoint,
    )
