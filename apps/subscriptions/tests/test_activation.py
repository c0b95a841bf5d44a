"""Tests for activating and extending PREMIUM after a payment."""

from datetime import timedelta
from uuid import uuid4
from unittest.mock import MagicMock

import pytest
from django.db import transaction

from shared.domain.base import utcnow
from shared.domain.exceptions import NotFoundError
from apps.subscriptions.application.command_handlers import (
    ActivateSubscriptionCommand,
    ActivateSubscriptionHandler,
    StartTrialCommand,
    StartTrialHandler,
)
from apps.subscriptions.domain.entities import SubscriptionPlan, SubscriptionStatus
from apps.subscriptions.models import Subscription as SubscriptionModel
from apps.users.repositories import DjangoUserRepository


@pytest.fixture
def activate(subscription_repo):
    return ActivateSubscriptionHandler(subscription_repo, DjangoUserRepository())


def _live_rows(user):
    return SubscriptionModel.objects.filter(user=user, status__in=["ACTIVE", "TRIAL"])


@pytest.mark.django_db
def test_new_user_starts_on_free(user, subscription_repo):
    current = subscription_repo.get_active_for_user(user.id)

    assert current.plan == SubscriptionPlan.FREE
    assert _live_rows(user).count() == 1


@pytest.mark.django_db
def test_activation_replaces_free_with_premium(user, activate, subscription_repo):
    payment_id = uuid4()
    before = utcnow()

    subscription = activate.handle(ActivateSubscriptionCommand(user_id=user.id, payment_id=payment_id, days=30))

    assert subscription.plan == SubscriptionPlan.PREMIUM
    assert subscription.status == SubscriptionStatus.ACTIVE
    assert subscription.provider == "MIDTRANS"
    assert subscription.provider_reference_id == str(payment_id)
    assert before + timedelta(days=30) <= subscription.ended_at <= utcnow() + timedelta(days=30)
    assert subscription_repo.get_active_for_user(user.id).id == subscription.id
    assert _live_rows(user).count() == 1
    assert SubscriptionModel.objects.get(user=user, plan="FREE").status == "CANCELLED"


@pytest.mark.django_db
def test_second_activation_extends_same_record(user, activate):
    first = activate.handle(ActivateSubscriptionCommand(user_id=user.id, payment_id=uuid4()))
    second = activate.handle(ActivateSubscriptionCommand(user_id=user.id, payment_id=uuid4()))

    assert second.id == first.id
    assert second.ended_at == first.ended_at + timedelta(days=30)
    assert SubscriptionModel.objects.filter(user=user, plan="PREMIUM").count() == 1


@pytest.mark.django_db
def test_paying_during_trial_keeps_trial_days(user, activate, subscription_repo, eligibility):
    trial = StartTrialHandler(subscription_repo, DjangoUserRepository(), eligibility, trial_days=14).handle(
        StartTrialCommand(user_id=user.id)
    )

    subscription = activate.handle(ActivateSubscriptionCommand(user_id=user.id, payment_id=uuid4()))

    assert subscription.id == trial.id
    assert subscription.status == SubscriptionStatus.ACTIVE
    assert subscription.ended_at == trial.ended_at + timedelta(days=30)
    assert _live_rows(user).count() == 1


@pytest.mark.django_db
def test_lapsed_premium_is_replaced_not_extended(user, activate, subscription_repo):
    first = activate.handle(ActivateSubscriptionCommand(user_id=user.id, payment_id=uuid4()))
    past = utcnow() - timedelta(days=1)
    SubscriptionModel.objects.filter(pk=first.id).update(
        started_at=past - timedelta(days=30), ended_at=past
    )

    renewed = activate.handle(ActivateSubscriptionCommand(user_id=user.id, payment_id=uuid4()))

    assert renewed.id != first.id
    assert renewed.ended_at > utcnow() + timedelta(days=29)


@pytest.mark.django_db
def test_unknown_user(activate):
    with pytest.raises(NotFoundError):
        activate.handle(ActivateSubscriptionCommand(user_id=424242, payment_id=uuid4()))


@pytest.mark.django_db
def test_activation_locks_user_row_before_reading_subscriptions(user, subscription_repo):
    users = DjangoUserRepository()
    seen = []

    def locked_get(user_id, lock=False):
        seen.append((lock, transaction.get_connection().in_atomic_block))
        return users.get(user_id, lock=lock)

    user_repo = MagicMock(get=MagicMock(side_effect=locked_get))
    activate = ActivateSubscriptionHandler(subscription_repo, user_repo)
    # No live record at all: both settlements would otherwise insert.
    SubscriptionModel.objects.filter(user=user).delete()

    first = activate.handle(ActivateSubscriptionCommand(user_id=user.id, payment_id=uuid4()))
    second = activate.handle(ActivateSubscriptionCommand(user_id=user.id, payment_id=uuid4()))

    assert seen == [(True, True), (True, True)]
    assert second.id == first.id
    assert SubscriptionModel.objects.filter(user=user, plan="PREMIUM").count() == 1
    assert _live_rows(user).count() == 1
