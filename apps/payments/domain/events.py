"""
Payment Domain Events

Raised by the PaymentTransaction aggregate and published after commit.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from uuid import UUID

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class PaymentEvent(DomainEvent):
    """Fields every payment event carries"""
    payment_id: UUID
    order_id: str
    user_id: int
    amount: Decimal
    currency: str


@dataclass(kw_only=True)
class PaymentCreated(PaymentEvent):
    """
    Event: A PENDING payment was recorded for a user

    Triggers:
    - PAYMENT_CREATED business event
    """
    idempotency_key: Optional[str] = None


@dataclass(kw_only=True)
class PaymentSucceeded(PaymentEvent):
    """
    Event: The gateway settled or captured the payment (PENDING -> SUCCESS)

    Triggers:
    - PAYMENT_SUCCEEDED business event
    """
    transaction_id: Optional[str] = None
    payment_method: Optional[str] = None


@dataclass(kw_only=True)
class PaymentFailed(PaymentEvent):
    """Event: The gateway denied the payment, or the session could not be opened"""
    reason: str = ''


@dataclass(kw_only=True)
class PaymentExpired(PaymentEvent):
    """Event: The payment window closed without payment (PENDING -> EXPIRED)"""


@dataclass(kw_only=True)
class PaymentCancelled(PaymentEvent):
    """Event: The payment was cancelled (PENDING/EXPIRED -> CANCELLED)"""
