"""Fixtures for payment tests."""

import pytest

from apps.payments.domain.entities import PaymentTransaction
from apps.payments.repositories import DjangoPaymentRepository

from apps.payments.tests.factories import PRICE


@pytest.fixture
def payment_repo():
    return DjangoPaymentRepository()


@pytest.fixture
def make_payment(payment_repo):
    """Persist a PENDING payment; keyword overrides are set before saving."""

    def factory(user, order_id="ORDER-test-1", **overrides):
        payment = PaymentTransaction.create(order_id=order_id, user_id=user.id, amount=PRICE)
        for name, value in overrides.items():
            setattr(payment, name, value)
        payment.clear_events()
        payment_repo.add(payment)
        return payment

    return factory
