"""Unit tests for the payment aggregate and notification parsing."""

from datetime import timedelta

import pytest

from shared.domain.base import utcnow
from shared.domain.exceptions import InvalidStateTransition, ValidationError
from shared.domain.value_objects import Money
from apps.payments.domain.entities import PaymentMethod, PaymentStatus, PaymentTransaction
from apps.payments.domain.events import PaymentCreated, PaymentExpired, PaymentSucceeded
from apps.payments.domain.methods import map_payment_method
from apps.payments.domain.notifications import StatusFamily, WebhookNotification


def _pending(**kwargs):
    return PaymentTransaction.create(order_id="ORDER-1", user_id=1, amount=Money("25000.00"), **kwargs)


def test_create_starts_pending_with_created_event():
    payment = _pending(idempotency_key="key-1")

    assert payment.status == PaymentStatus.PENDING
    assert payment.currency == "IDR"
    assert not payment.is_final()
    [event] = payment.events
    assert isinstance(event, PaymentCreated)
    assert event.order_id == "ORDER-1"
    assert event.idempotency_key == "key-1"


@pytest.mark.parametrize("amount", ["0", "-1", "abc"])
def test_amount_must_be_positive(amount):
    with pytest.raises(ValidationError):
        Money(amount)


def test_currency_must_be_three_letters():
    with pytest.raises(ValidationError):
        Money("10", "RUPIAH")


def test_mark_success_sets_paid_at_and_method():
    payment = _pending()
    now = utcnow()

    payment.mark_success("tx-1", PaymentMethod.EWALLET, now=now)

    assert payment.status == PaymentStatus.SUCCESS
    assert payment.paid_at == now
    assert payment.transaction_id == "tx-1"
    assert payment.payment_method == PaymentMethod.EWALLET
    assert payment.is_successful()
    assert isinstance(payment.events[-1], PaymentSucceeded)


def test_success_is_terminal():
    payment = _pending()
    payment.mark_success("tx-1", PaymentMethod.CREDIT_CARD)
    paid_at = payment.paid_at

    for transition in (payment.mark_failed, payment.mark_expired, payment.mark_cancelled):
        with pytest.raises(InvalidStateTransition):
            transition()
    with pytest.raises(InvalidStateTransition):
        payment.mark_success("tx-2", PaymentMethod.CREDIT_CARD)

    assert payment.status == PaymentStatus.SUCCESS
    assert payment.paid_at == paid_at
    assert payment.transaction_id == "tx-1"


def test_expired_may_only_be_cancelled():
    payment = _pending()
    payment.mark_expired()

    assert payment.expired_at is not None
    assert isinstance(payment.events[-1], PaymentExpired)
    with pytest.raises(InvalidStateTransition):
        payment.mark_success("tx-1", PaymentMethod.OTHER)
    with pytest.raises(InvalidStateTransition):
        payment.mark_failed()

    payment.mark_cancelled()
    assert payment.status == PaymentStatus.CANCELLED


def test_failed_and_cancelled_are_terminal():
    failed = _pending()
    failed.mark_failed(reason="deny")
    cancelled = _pending()
    cancelled.mark_cancelled()

    for payment in (failed, cancelled):
        assert payment.is_final()
        with pytest.raises(InvalidStateTransition):
            payment.mark_expired()


def test_rehydrating_success_without_paid_at_is_rejected():
    with pytest.raises(ValidationError):
        PaymentTransaction(
            order_id="ORDER-1",
            user_id=1,
            amount=Money("25000.00"),
            status=PaymentStatus.SUCCESS,
        )


def test_attach_session_only_while_pending():
    payment = _pending()
    payment.attach_session("token-1", "https://pay.example/1")
    assert payment.snap_token == "token-1"

    payment.mark_failed()
    with pytest.raises(InvalidStateTransition):
        payment.attach_session("token-2", "https://pay.example/2")


def test_transition_refreshes_updated_at():
    payment = _pending()
    later = payment.updated_at + timedelta(minutes=5)

    payment.mark_expired(now=later)

    assert payment.updated_at == later


@pytest.mark.parametrize(
    "payment_type, method",
    [
        ("credit_card", PaymentMethod.CREDIT_CARD),
        ("bank_transfer", PaymentMethod.BANK_TRANSFER),
        ("echannel", PaymentMethod.BANK_TRANSFER),
        ("GOPAY", PaymentMethod.EWALLET),
        ("qris", PaymentMethod.EWALLET),
        ("cstore", PaymentMethod.CONVENIENCE_STORE),
        ("kredivo", PaymentMethod.KREDIVO),
        ("akulaku", PaymentMethod.AKULAKU),
        ("bitcoin", PaymentMethod.OTHER),
        (None, PaymentMethod.OTHER),
    ],
)
def test_map_payment_method(payment_type, method):
    assert map_payment_method(payment_type) == method


@pytest.mark.parametrize(
    "status, family",
    [
        ("settlement", StatusFamily.SUCCESS),
        ("capture", StatusFamily.SUCCESS),
        ("pending", StatusFamily.PENDING),
        ("deny", StatusFamily.FAILURE),
        ("cancel", StatusFamily.FAILURE),
        ("expire", StatusFamily.FAILURE),
        ("refund", StatusFamily.UNKNOWN),
    ],
)
def test_notification_status_family(status, family):
    notification = WebhookNotification.from_payload({"order_id": "ORDER-1", "transaction_status": status})

    assert notification.family == family


def test_notification_keeps_amount_string_and_raw_payload():
    payload = {
        "order_id": "ORDER-1",
        "status_code": 200,
        "gross_amount": "25000.00",
        "transaction_status": "Settlement",
        "fraud_status": "CHALLENGE",
    }

    notification = WebhookNotification.from_payload(payload)

    assert notification.gross_amount == "25000.00"
    assert notification.status_code == "200"
    assert notification.transaction_status == "settlement"
    assert notification.is_fraud_flagged()
    assert notification.raw == payload
