"""Fixtures for subscription tests."""

import pytest

from apps.payments.repositories import DjangoPaymentRepository
from apps.subscriptions.eligibility import TrialEligibilityChecker
from apps.subscriptions.repositories import DjangoSubscriptionRepository


@pytest.fixture
def subscription_repo():
    return DjangoSubscriptionRepository()


@pytest.fixture
def eligibility(subscription_repo):
    return TrialEligibilityChecker(subscription_repo, DjangoPaymentRepository())
