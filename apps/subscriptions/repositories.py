"""
Subscription repository.

Every read goes to the database; subscription state is never cached
between requests.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from django.db.models import Q  # type: ignore

from shared.domain.base import utcnow
from shared.infrastructure.db import lock_queryset_if_possible

from .domain.entities import Subscription, SubscriptionPlan, SubscriptionStatus
from .models import Subscription as SubscriptionModel

LIVE = (SubscriptionModel.Status.ACTIVE, SubscriptionModel.Status.TRIAL)


class DjangoSubscriptionRepository:
    def get(self, subscription_id: UUID, lock: bool = False) -> Optional[Subscription]:
        queryset = SubscriptionModel.objects.filter(pk=subscription_id)
        if lock:
            queryset = lock_queryset_if_possible(queryset)
        row = queryset.first()
        return self._to_domain(row) if row else None

    def get_active_for_user(self, user_id, lock: bool = False, now: Optional[datetime] = None) -> Optional[Subscription]:
        """Latest live record that has not run past its end date"""
        moment = now or utcnow()
        queryset = SubscriptionModel.objects.filter(
            Q(ended_at__isnull=True) | Q(ended_at__gt=moment),
            user_id=user_id,
            status__in=LIVE,
        ).order_by("-started_at")
        if lock:
            queryset = lock_queryset_if_possible(queryset)
        row = queryset.first()
        return self._to_domain(row) if row else None

    def add(self, subscription: Subscription) -> None:
        SubscriptionModel.objects.create(
            id=subscription.id,
            user_id=subscription.user_id,
            **self._fields(subscription),
        )

    def save(self, subscription: Subscription) -> None:
        updated = SubscriptionModel.objects.filter(pk=subscription.id).update(**self._fields(subscription))
        if not updated:
            raise LookupError(f"Subscription {subscription.id} is not persisted")

    def has_had_trial(self, user_id) -> bool:
        return SubscriptionModel.objects.filter(user_id=user_id, started_as_trial=True).exists()

    def has_had_premium(self, user_id) -> bool:
        return SubscriptionModel.objects.filter(
            user_id=user_id,
            plan=SubscriptionModel.Plan.PREMIUM,
            status__in=(
                SubscriptionModel.Status.ACTIVE,
                SubscriptionModel.Status.TRIAL,
                SubscriptionModel.Status.EXPIRED,
            ),
        ).exists()

    def list_lapsed_ids(self, cutoff: datetime) -> List[UUID]:
        """Live records whose end date is before ``cutoff``"""
        return list(
            SubscriptionModel.objects.filter(status__in=LIVE, ended_at__lt=cutoff)
            .order_by("ended_at")
            .values_list("id", flat=True)
        )

    @staticmethod
    def _fields(subscription: Subscription) -> dict:
        return {
            "plan": subscription.plan.value,
            "status": subscription.status.value,
            "provider": subscription.provider,
            "provider_reference_id": subscription.provider_reference_id,
            "started_as_trial": subscription.started_as_trial,
            "started_at": subscription.started_at,
            "ended_at": subscription.ended_at,
            "created_at": subscription.created_at,
            "updated_at": subscription.updated_at,
        }

    @staticmethod
    def _to_domain(row: SubscriptionModel) -> Subscription:
        return Subscription(
            id=row.id,
            user_id=row.user_id,
            plan=SubscriptionPlan(row.plan),
            status=SubscriptionStatus(row.status),
            started_at=row.started_at,
            ended_at=row.ended_at,
            provider=row.provider,
            provider_reference_id=row.provider_reference_id,
            started_as_trial=row.started_as_trial,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
