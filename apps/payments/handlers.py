"""
Payment event handlers.

Registered on the message bus in ``PaymentsConfig.ready()``; each turns a
committed payment event into a structured business event.
"""

from __future__ import annotations

from shared.application.message_bus import message_bus
from shared.infrastructure.business_events import log_business_event

from .domain.events import (
    PaymentCancelled,
    PaymentCreated,
    PaymentExpired,
    PaymentFailed,
    PaymentSucceeded,
)

BUSINESS_EVENT_NAMES = {
    PaymentCreated: "PAYMENT_CREATED",
    PaymentSucceeded: "PAYMENT_SUCCEEDED",
    PaymentFailed: "PAYMENT_FAILED",
    PaymentExpired: "PAYMENT_EXPIRED",
    PaymentCancelled: "PAYMENT_CANCELLED",
}


def record_payment_event(event) -> None:
    attributes = {
        "payment_id": event.payment_id,
        "order_id": event.order_id,
        "amount": str(event.amount),
        "currency": event.currency,
    }
    if isinstance(event, PaymentSucceeded):
        attributes["payment_method"] = event.payment_method
        attributes["transaction_id"] = event.transaction_id
    elif isinstance(event, PaymentFailed) and event.reason:
        attributes["reason"] = event.reason[:200]
    elif isinstance(event, PaymentCreated) and event.idempotency_key:
        attributes["idempotent"] = True

    log_business_event(BUSINESS_EVENT_NAMES[type(event)], event.user_id, **attributes)


def register() -> None:
    for event_type in BUSINESS_EVENT_NAMES:
        message_bus.register_event_handler(event_type, record_payment_event)
