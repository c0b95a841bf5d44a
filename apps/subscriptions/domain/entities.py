"""
Subscription Domain Entities

- Subscription: Aggregate for one period of a user's plan
- SubscriptionPlan: FREE or PREMIUM
- SubscriptionStatus: FSM states for a subscription record
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from shared.domain.base import Aggregate, utcnow
from shared.domain.exceptions import InvalidStateTransition, ValidationError


class SubscriptionPlan(Enum):
    FREE = 'FREE'
    PREMIUM = 'PREMIUM'


class SubscriptionStatus(Enum):
    """
    Subscription Status Finite State Machine

    State transitions:
    - ACTIVE -> EXPIRED (end date passed, daily job)
    - ACTIVE -> CANCELLED (user cancelled, or superseded by a new record)
    - TRIAL -> ACTIVE (paid while on trial)
    - TRIAL -> EXPIRED
    - TRIAL -> CANCELLED
    """
    ACTIVE = 'ACTIVE'
    TRIAL = 'TRIAL'
    EXPIRED = 'EXPIRED'
    CANCELLED = 'CANCELLED'


LIVE_STATUSES = frozenset({SubscriptionStatus.ACTIVE, SubscriptionStatus.TRIAL})


@dataclass(kw_only=True, eq=False)
class Subscription(Aggregate):
    """
    Subscription Aggregate Root

    One record per period of a plan. A user has at most one active record:
    ACTIVE or TRIAL and not past ``ended_at``. Records are superseded by
    cancelling them, never by deleting them.

    Key invariants:
    - PREMIUM always has an end date
    - FREE has no end date while it is live
    """

    user_id: int
    plan: SubscriptionPlan
    status: SubscriptionStatus
    started_at: datetime
    ended_at: Optional[datetime] = None
    provider: Optional[str] = None
    provider_reference_id: Optional[str] = None
    started_as_trial: bool = False

    def __post_init__(self):
        if self.plan == SubscriptionPlan.PREMIUM and self.ended_at is None:
            raise ValidationError("A PREMIUM subscription must have an end date")

    # ----- Factories -----

    @classmethod
    def free(cls, user_id: int, now: Optional[datetime] = None) -> 'Subscription':
        """
        Open-ended FREE record

        Events: FreeSubscriptionCreated
        """
        from apps.subscriptions.domain.events import FreeSubscriptionCreated

        moment = now or utcnow()
        subscription = cls(
            user_id=user_id,
            plan=SubscriptionPlan.FREE,
            status=SubscriptionStatus.ACTIVE,
            started_at=moment,
        )
        subscription.add_event(FreeSubscriptionCreated(**subscription._event_fields()))
        return subscription

    @classmethod
    def trial(cls, user_id: int, days: int, now: Optional[datetime] = None) -> 'Subscription':
        """
        PREMIUM trial for ``days`` days

        Events: TrialStarted
        """
        from apps.subscriptions.domain.events import TrialStarted

        _require_positive_days(days)
        moment = now or utcnow()
        subscription = cls(
            user_id=user_id,
            plan=SubscriptionPlan.PREMIUM,
            status=SubscriptionStatus.TRIAL,
            started_at=moment,
            ended_at=moment + timedelta(days=days),
            started_as_trial=True,
        )
        subscription.add_event(TrialStarted(days=days, **subscription._event_fields()))
        return subscription

    @classmethod
    def premium(cls, user_id: int, days: int, payment_id: str, provider: str,
                now: Optional[datetime] = None) -> 'Subscription':
        """
        Paid PREMIUM record starting now

        Events: SubscriptionActivated
        """
        from apps.subscriptions.domain.events import SubscriptionActivated

        _require_positive_days(days)
        moment = now or utcnow()
        subscription = cls(
            user_id=user_id,
            plan=SubscriptionPlan.PREMIUM,
            status=SubscriptionStatus.ACTIVE,
            started_at=moment,
            ended_at=moment + timedelta(days=days),
            provider=provider,
            provider_reference_id=payment_id,
        )
        subscription.add_event(SubscriptionActivated(
            payment_id=payment_id,
            days=days,
            **subscription._event_fields(),
        ))
        return subscription

    # ----- Queries -----

    def is_active(self, now: Optional[datetime] = None) -> bool:
        moment = now or utcnow()
        return self.status in LIVE_STATUSES and (self.ended_at is None or moment < self.ended_at)

    def is_premium(self, now: Optional[datetime] = None) -> bool:
        return self.plan == SubscriptionPlan.PREMIUM and self.is_active(now)

    def is_trial(self, now: Optional[datetime] = None) -> bool:
        return self.status == SubscriptionStatus.TRIAL and self.is_active(now)

    def days_remaining(self, now: Optional[datetime] = None) -> Optional[int]:
        """Whole days left, None for open-ended records"""
        if self.ended_at is None:
            return None
        remaining = self.ended_at - (now or utcnow())
        return max(remaining.days, 0)

    # ----- Transitions -----

    def extend_by(self, days: int, payment_id: Optional[str] = None, provider: Optional[str] = None,
                  now: Optional[datetime] = None):
        """
        Add ``days`` to a live PREMIUM record

        Time is added to whichever is later, the current end date or now,
        so paying early never loses remaining days. A trial that gets paid
        for becomes ACTIVE.

        Events: SubscriptionExtended
        """
        from apps.subscriptions.domain.events import SubscriptionExtended

        _require_positive_days(days)
        moment = now or utcnow()
        if not self.is_premium(moment):
            raise InvalidStateTransition(self.status, 'extended', entity=f"subscription {self.id}")

        previous_ended_at = self.ended_at
        changes = {'ended_at': max(self.ended_at, moment) + timedelta(days=days)}
        if payment_id:
            changes['provider_reference_id'] = payment_id
            changes['provider'] = provider or self.provider
        if self.status == SubscriptionStatus.TRIAL:
            changes['status'] = SubscriptionStatus.ACTIVE
        self._apply(moment, **changes)

        self.add_event(SubscriptionExtended(
            payment_id=payment_id,
            days=days,
            previous_ended_at=previous_ended_at,
            **self._event_fields(),
        ))

    def cancel(self, reason: str = '', now: Optional[datetime] = None):
        """
        Cancel a live record (ACTIVE/TRIAL -> CANCELLED)

        The end date is pulled in to now unless it already passed.

        Events: SubscriptionCancelled
        """
        from apps.subscriptions.domain.events import SubscriptionCancelled

        if self.status not in LIVE_STATUSES:
            raise InvalidStateTransition(self.status, SubscriptionStatus.CANCELLED, entity=f"subscription {self.id}")

        moment = now or utcnow()
        ended_at = self.ended_at
        if ended_at is None or ended_at > moment:
            ended_at = moment
        self._apply(moment, status=SubscriptionStatus.CANCELLED, ended_at=ended_at)

        self.add_event(SubscriptionCancelled(reason=reason, **self._event_fields()))

    def mark_expired(self, now: Optional[datetime] = None):
        """
        Expire a lapsed record (ACTIVE/TRIAL -> EXPIRED)

        Events: SubscriptionExpired
        """
        from apps.subscriptions.domain.events import SubscriptionExpired

        if self.status not in LIVE_STATUSES:
            raise InvalidStateTransition(self.status, SubscriptionStatus.EXPIRED, entity=f"subscription {self.id}")

        was_trial = self.status == SubscriptionStatus.TRIAL
        self._apply(now or utcnow(), status=SubscriptionStatus.EXPIRED)

        self.add_event(SubscriptionExpired(was_trial=was_trial, **self._event_fields()))

    # ----- Internals -----

    def _apply(self, moment: datetime, **changes):
        replace(self, **changes)
        for name, value in changes.items():
            setattr(self, name, value)
        self.touch(moment)

    def _event_fields(self) -> dict:
        return {
            'aggregate_id': self.id,
            'subscription_id': self.id,
            'user_id': self.user_id,
            'plan': self.plan.value,
            'ended_at': self.ended_at,
        }


def _require_positive_days(days: int):
    if not isinstance(days, int) or days <= 0:
        raise ValidationError(f"Subscription length must be a positive number of days, got {days!r}")
