"""
Gateway notification value object.

A ``WebhookNotification`` is the already-parsed shape of one inbound
notification. The raw dict travels with it so it can be stored verbatim.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from shared.domain.base import ValueObject


class StatusFamily(Enum):
    SUCCESS = 'success'
    PENDING = 'pending'
    FAILURE = 'failure'
    UNKNOWN = 'unknown'


STATUS_FAMILIES = {
    'settlement': StatusFamily.SUCCESS,
    'capture': StatusFamily.SUCCESS,
    'pending': StatusFamily.PENDING,
    'deny': StatusFamily.FAILURE,
    'cancel': StatusFamily.FAILURE,
    'expire': StatusFamily.FAILURE,
}

FRAUD_FLAGS = frozenset({'deny', 'challenge'})


@dataclass(frozen=True)
class WebhookNotification(ValueObject):
    order_id: str
    status_code: str
    gross_amount: str
    signature_key: str
    transaction_status: str
    transaction_id: Optional[str] = None
    payment_type: Optional[str] = None
    fraud_status: Optional[str] = None
    transaction_time: Optional[str] = None
    settlement_time: Optional[str] = None
    currency: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'WebhookNotification':
        def text(key):
            value = payload.get(key)
            return None if value is None else str(value)

        return cls(
            order_id=text('order_id') or '',
            status_code=text('status_code') or '',
            gross_amount=text('gross_amount') or '',
            signature_key=text('signature_key') or '',
            transaction_status=(text('transaction_status') or '').lower(),
            transaction_id=text('transaction_id'),
            payment_type=text('payment_type'),
            fraud_status=(text('fraud_status') or '').lower() or None,
            transaction_time=text('transaction_time'),
            settlement_time=text('settlement_time'),
            currency=text('currency'),
            raw=dict(payload),
        )

    @property
    def family(self) -> StatusFamily:
        return STATUS_FAMILIES.get(self.transaction_status, StatusFamily.UNKNOWN)

    def is_fraud_flagged(self) -> bool:
        return self.fraud_status in FRAUD_FLAGS
