"""
Premium access guard and tier limits.

Nothing in this service is premium-gated itself. This module is the
entry point for premium-only features (reports, exports, backups) served
elsewhere: their handlers resolve the caller's tier once and pass it to
``ensure_premium`` as their first statement:

    tier = resolve_tier(request.user.id)
    ensure_premium(tier, "Excel export", user_id=request.user.id)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from shared.domain.exceptions import ForbiddenError
from shared.infrastructure import metrics

from .domain.entities import SubscriptionPlan
from .repositories import DjangoSubscriptionRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TierLimits:
    max_export_rows: int
    max_report_range_days: int

    @classmethod
    def for_tier(cls, tier: SubscriptionPlan) -> "TierLimits":
        if tier == SubscriptionPlan.PREMIUM:
            return cls(max_export_rows=10000, max_report_range_days=365)
        return cls(max_export_rows=100, max_report_range_days=90)


def resolve_tier(user_id, subscription_repo=None) -> SubscriptionPlan:
    repo = subscription_repo or DjangoSubscriptionRepository()
    subscription = repo.get_active_for_user(user_id)
    if subscription is not None and subscription.is_premium():
        return SubscriptionPlan.PREMIUM
    return SubscriptionPlan.FREE


def ensure_premium(tier: SubscriptionPlan, feature: str, user_id=None) -> None:
    """Raise ForbiddenError unless ``tier`` is PREMIUM."""

    if tier == SubscriptionPlan.PREMIUM:
        return

    logger.warning(f"Premium access denied: user {user_id} tried to use {feature}")
    metrics.PREMIUM_ACCESS_DENIED.labels(feature=feature).inc()
    raise ForbiddenError(
        f"{feature} is a PREMIUM feature. Upgrade your subscription to access it.",
        code="premium_required",
    )
