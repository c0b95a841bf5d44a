"""Tests for one-time trial eligibility."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from shared.domain.base import utcnow
from shared.domain.value_objects import Money
from apps.payments.domain.entities import PaymentMethod, PaymentTransaction
from apps.payments.repositories import DjangoPaymentRepository
from apps.subscriptions.domain.entities import Subscription
from apps.subscriptions.eligibility import TrialEligibilityChecker


@pytest.mark.django_db
def test_new_user_is_eligible(user, eligibility):
    assert eligibility.is_eligible(user.id)


@pytest.mark.django_db
def test_cancelled_trial_still_counts(user, subscription_repo, eligibility):
    trial = Subscription.trial(user.id, 14)
    trial.cancel(reason="changed my mind")
    subscription_repo.add(trial)

    assert not eligibility.is_eligible(user.id)


@pytest.mark.django_db
def test_expired_premium_disqualifies(user, subscription_repo, eligibility):
    premium = Subscription.premium(
        user.id, 30, payment_id="pay-1", provider="MIDTRANS", now=utcnow() - timedelta(days=60)
    )
    premium.mark_expired()
    subscription_repo.add(premium)

    assert not eligibility.is_eligible(user.id)


@pytest.mark.django_db
def test_successful_payment_disqualifies(user, eligibility):
    payment = PaymentTransaction.create(order_id="ORDER-elig", user_id=user.id, amount=Money("25000"))
    payment.mark_success("tx-1", PaymentMethod.CREDIT_CARD)
    DjangoPaymentRepository().add(payment)

    assert not eligibility.is_eligible(user.id)


@pytest.mark.django_db
def test_failed_payment_does_not_disqualify(user, eligibility):
    payment = PaymentTransaction.create(order_id="ORDER-failed", user_id=user.id, amount=Money("25000"))
    payment.mark_failed(reason="deny")
    DjangoPaymentRepository().add(payment)

    assert eligibility.is_eligible(user.id)


def test_checks_stop_at_first_disqualifier():
    subscription_repo = MagicMock()
    subscription_repo.has_had_trial.return_value = True
    payment_repo = MagicMock()

    assert not TrialEligibilityChecker(subscription_repo, payment_repo).is_eligible(1)
    subscription_repo.has_had_premium.assert_not_called()
    payment_repo.has_successful_payment.assert_not_called()
