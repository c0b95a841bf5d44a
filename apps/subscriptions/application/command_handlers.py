"""
Subscription Command Handlers

Use cases for the subscription domain. Each handler gets its collaborators
through the constructor and runs its writes inside one unit of work.

Commands:
- ActivateSubscriptionCommand: Activate or extend PREMIUM after a payment
- CreateFreeSubscriptionCommand: Open the FREE record for a new user
- StartTrialCommand: Start the one-time PREMIUM trial
- CancelSubscriptionCommand: Cancel the user's current subscription
- ExpireLapsedSubscriptionsCommand: Expire records past their end date
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID
import logging

from shared.application.uow import DjangoUnitOfWork
from shared.domain.base import utcnow
from shared.domain.exceptions import ForbiddenError, NotFoundError, ValidationError
from shared.infrastructure import metrics
from apps.subscriptions.domain.entities import LIVE_STATUSES, Subscription, SubscriptionPlan

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class ActivateSubscriptionCommand:
    """Grant ``days`` of PREMIUM to the user for a successful payment"""
    user_id: int
    payment_id: UUID
    days: int = 30


@dataclass
class CreateFreeSubscriptionCommand:
    user_id: int


@dataclass
class StartTrialCommand:
    user_id: int


@dataclass
class CancelSubscriptionCommand:
    user_id: int
    reason: str = 'cancelled by user'


@dataclass
class ExpireLapsedSubscriptionsCommand:
    now: Optional[datetime] = None


@dataclass
class ExpiryReport:
    processed: int = 0
    failed: int = 0


# ===== Command Handlers =====

class ActivateSubscriptionHandler:
    """
    Handler for ActivateSubscription command

    - Live PREMIUM record (paid or trial): extend it. Time is added from
      the later of now and its current end date.
    - Anything else: cancel the live record if there is one, then open a
      new PREMIUM/ACTIVE record for ``days`` days referencing the payment.

    The user row is locked first, so two payments settling at once for the
    same user end in one extended record, never two PREMIUM rows.
    """

    def __init__(self, subscription_repo, user_repo, provider: str = 'MIDTRANS'):
        self.subscription_repo = subscription_repo
        self.user_repo = user_repo
        self.provider = provider

    def handle(self, command: ActivateSubscriptionCommand) -> Subscription:
        payment_ref = str(command.payment_id)

        with DjangoUnitOfWork() as uow:
            # Concurrent settlements for one user queue on the user row.
            user = self.user_repo.get(command.user_id, lock=True)
            now = utcnow()
            current = self.subscription_repo.get_active_for_user(user.id, lock=True, now=now)

            if current is not None and current.is_premium(now):
                current.extend_by(command.days, payment_id=payment_ref, provider=self.provider, now=now)
                self.subscription_repo.save(current)
                uow.collect_events(current)
                logger.info(
                    f"Extended subscription {current.id} for user {user.id} "
                    f"by {command.days} days until {current.ended_at.isoformat()}"
                )
                return current

            if current is not None:
                current.cancel(reason='superseded by paid subscription', now=now)
                self.subscription_repo.save(current)
                uow.collect_events(current)

            subscription = Subscription.premium(
                user.id,
                command.days,
                payment_id=payment_ref,
                provider=self.provider,
                now=now,
            )
            self.subscription_repo.add(subscription)
            uow.collect_events(subscription)

        logger.info(
            f"Activated PREMIUM subscription {subscription.id} for user {user.id} "
            f"until {subscription.ended_at.isoformat()}"
        )
        return subscription


class CreateFreeSubscriptionHandler:
    """
    Handler for CreateFreeSubscription command

    Idempotent: a user who already has a live record keeps it.
    """

    def __init__(self, subscription_repo):
        self.subscription_repo = subscription_repo

    def handle(self, command: CreateFreeSubscriptionCommand) -> Subscription:
        with DjangoUnitOfWork() as uow:
            current = self.subscription_repo.get_active_for_user(command.user_id, lock=True)
            if current is not None:
                return current

            subscription = Subscription.free(command.user_id)
            self.subscription_repo.add(subscription)
            uow.collect_events(subscription)

        logger.info(f"Created FREE subscription {subscription.id} for user {command.user_id}")
        return subscription


class StartTrialHandler:
    """Handler for StartTrial command"""

    def __init__(self, subscription_repo, user_repo, eligibility, trial_days: int = 14):
        self.subscription_repo = subscription_repo
        self.user_repo = user_repo
        self.eligibility = eligibility
        self.trial_days = trial_days

    def handle(self, command: StartTrialCommand) -> Subscription:
        with DjangoUnitOfWork() as uow:
            user = self.user_repo.get(command.user_id, lock=True)
            if not self.eligibility.is_eligible(user.id):
                logger.info(f"User {user.id} is not eligible for a trial")
                raise ForbiddenError(
                    "You are not eligible for a free trial", code='trial_not_eligible'
                )

            now = utcnow()
            current = self.subscription_repo.get_active_for_user(user.id, lock=True, now=now)
            if current is not None:
                current.cancel(reason='superseded by trial', now=now)
                self.subscription_repo.save(current)
                uow.collect_events(current)

            subscription = Subscription.trial(user.id, self.trial_days, now=now)
            self.subscription_repo.add(subscription)
            uow.collect_events(subscription)

        logger.info(
            f"Started {self.trial_days}-day trial {subscription.id} for user {user.id}"
        )
        return subscription


class CancelSubscriptionHandler:
    """Handler for CancelSubscription command"""

    def __init__(self, subscription_repo):
        self.subscription_repo = subscription_repo

    def handle(self, command: CancelSubscriptionCommand) -> Subscription:
        with DjangoUnitOfWork() as uow:
            current = self.subscription_repo.get_active_for_user(command.user_id, lock=True)
            if current is None:
                raise NotFoundError("No active subscription found")
            if current.plan == SubscriptionPlan.FREE:
                raise ValidationError("Cannot cancel FREE subscription", code='free_not_cancellable')

            current.cancel(reason=command.reason)
            self.subscription_repo.save(current)
            uow.collect_events(current)

        logger.info(f"Cancelled subscription {current.id} for user {command.user_id}")
        return current


class ExpireLapsedSubscriptionsHandler:
    """
    Handler for ExpireLapsedSubscriptions command

    Every lapsed record is expired and replaced with a FREE one in its own
    unit of work, so one bad row does not hold back the rest.
    """

    def __init__(self, subscription_repo):
        self.subscription_repo = subscription_repo

    def handle(self, command: ExpireLapsedSubscriptionsCommand) -> ExpiryReport:
        now = command.now or utcnow()
        report = ExpiryReport()

        for subscription_id in self.subscription_repo.list_lapsed_ids(now):
            try:
                if self._expire_one(subscription_id, now):
                    report.processed += 1
            except Exception as e:
                report.failed += 1
                metrics.SUBSCRIPTION_EXPIRY_FAILED.inc()
                logger.error(f"Failed to expire subscription {subscription_id}: {e}", exc_info=True)

        logger.info(
            f"Lapsed subscription run finished: {report.processed} expired, {report.failed} failed"
        )
        return report

    def _expire_one(self, subscription_id: UUID, now: datetime) -> bool:
        with DjangoUnitOfWork() as uow:
            subscription = self.subscription_repo.get(subscription_id, lock=True)
            # Cancelled or extended since the id list was read.
            if subscription is None or subscription.status not in LIVE_STATUSES or subscription.is_active(now):
                return False

            subscription.mark_expired(now=now)
            self.subscription_repo.save(subscription)
            uow.collect_events(subscription)

            # A newer record may already be live (paid after this one lapsed).
            if self.subscription_repo.get_active_for_user(subscription.user_id, now=now) is None:
                free = Subscription.free(subscription.user_id, now=now)
                self.subscription_repo.add(free)
                uow.collect_events(free)

        return True
