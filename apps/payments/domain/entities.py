"""
Payment Domain Entities

Core business entities for the payment domain:
- PaymentTransaction: Aggregate for one attempt to pay for a subscription
- PaymentStatus: FSM states for the payment lifecycle
- PaymentMethod: Closed set of payment method families
- PaymentProvider: Who processed the payment
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID

from shared.domain.base import Aggregate, utcnow
from shared.domain.exceptions import InvalidStateTransition, ValidationError
from shared.domain.value_objects import Money


class PaymentStatus(Enum):
    """
    Payment Status Finite State Machine

    State transitions:
    - PENDING -> SUCCESS (gateway settled or captured)
    - PENDING -> FAILED (gateway denied, or session creation failed)
    - PENDING -> EXPIRED (payment window closed)
    - PENDING -> CANCELLED (gateway or user cancelled)
    - EXPIRED -> CANCELLED

    SUCCESS, FAILED and CANCELLED are terminal.
    """
    PENDING = 'PENDING'
    SUCCESS = 'SUCCESS'
    FAILED = 'FAILED'
    EXPIRED = 'EXPIRED'
    CANCELLED = 'CANCELLED'


class PaymentMethod(Enum):
    CREDIT_CARD = 'CREDIT_CARD'
    BANK_TRANSFER = 'BANK_TRANSFER'
    EWALLET = 'EWALLET'
    CONVENIENCE_STORE = 'CONVENIENCE_STORE'
    KREDIVO = 'KREDIVO'
    AKULAKU = 'AKULAKU'
    OTHER = 'OTHER'


class PaymentProvider(Enum):
    MIDTRANS = 'MIDTRANS'
    MANUAL = 'MANUAL'


FINAL_STATUSES = frozenset({
    PaymentStatus.SUCCESS,
    PaymentStatus.FAILED,
    PaymentStatus.EXPIRED,
    PaymentStatus.CANCELLED,
})

ALLOWED_TRANSITIONS = {
    PaymentStatus.PENDING: frozenset({
        PaymentStatus.SUCCESS,
        PaymentStatus.FAILED,
        PaymentStatus.EXPIRED,
        PaymentStatus.CANCELLED,
    }),
    PaymentStatus.EXPIRED: frozenset({PaymentStatus.CANCELLED}),
}


@dataclass(kw_only=True, eq=False)
class PaymentTransaction(Aggregate):
    """
    PaymentTransaction Aggregate Root

    One attempt by a user to pay for the premium subscription. Created in
    PENDING, moved forward only by gateway notifications, never deleted.

    Key invariants (checked on construction and before every change):
    - amount is strictly positive (guaranteed by Money)
    - SUCCESS has paid_at
    - EXPIRED has expired_at
    """

    order_id: str
    user_id: int
    amount: Money

    status: PaymentStatus = PaymentStatus.PENDING
    provider: PaymentProvider = PaymentProvider.MIDTRANS
    payment_method: Optional[PaymentMethod] = None

    # Gateway artifacts
    transaction_id: Optional[str] = None
    snap_token: Optional[str] = None
    snap_redirect_url: Optional[str] = None
    webhook_payload: Optional[Dict[str, Any]] = None

    idempotency_key: Optional[str] = None
    subscription_id: Optional[UUID] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    paid_at: Optional[datetime] = None
    expired_at: Optional[datetime] = None

    def __post_init__(self):
        self._check_invariants()

    @classmethod
    def create(
        cls,
        *,
        order_id: str,
        user_id: int,
        amount: Money,
        idempotency_key: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> 'PaymentTransaction':
        """
        Create a new PENDING payment

        Events: PaymentCreated
        """
        from apps.payments.domain.events import PaymentCreated

        if not order_id:
            raise ValidationError("Order id is required")

        payment = cls(
            order_id=order_id,
            user_id=user_id,
            amount=amount,
            idempotency_key=idempotency_key or None,
            metadata=dict(metadata or {}),
        )
        payment.add_event(PaymentCreated(
            aggregate_id=payment.id,
            idempotency_key=payment.idempotency_key,
            **payment._event_fields(),
        ))
        return payment

    @property
    def currency(self) -> str:
        return self.amount.currency

    def is_final(self) -> bool:
        return self.status in FINAL_STATUSES

    def is_successful(self) -> bool:
        return self.status == PaymentStatus.SUCCESS and self.paid_at is not None

    # ----- Transitions -----

    def mark_success(self, transaction_id: Optional[str], payment_method: PaymentMethod,
                     now: Optional[datetime] = None):
        """
        Record a settled payment (PENDING -> SUCCESS)

        Events: PaymentSucceeded
        """
        from apps.payments.domain.events import PaymentSucceeded

        moment = now or utcnow()
        self._transition(
            PaymentStatus.SUCCESS,
            moment,
            transaction_id=transaction_id or self.transaction_id,
            payment_method=payment_method,
            paid_at=moment,
        )
        self.add_event(PaymentSucceeded(
            aggregate_id=self.id,
            transaction_id=self.transaction_id,
            payment_method=payment_method.value,
            **self._event_fields(),
        ))

    def mark_failed(self, reason: str = '', now: Optional[datetime] = None):
        """
        Record a failed payment (PENDING -> FAILED)

        Events: PaymentFailed
        """
        from apps.payments.domain.events import PaymentFailed

        self._transition(PaymentStatus.FAILED, now or utcnow())
        self.add_event(PaymentFailed(aggregate_id=self.id, reason=reason, **self._event_fields()))

    def mark_expired(self, now: Optional[datetime] = None):
        """
        Close the payment window (PENDING -> EXPIRED)

        Events: PaymentExpired
        """
        from apps.payments.domain.events import PaymentExpired

        moment = now or utcnow()
        self._transition(PaymentStatus.EXPIRED, moment, expired_at=moment)
        self.add_event(PaymentExpired(aggregate_id=self.id, **self._event_fields()))

    def mark_cancelled(self, now: Optional[datetime] = None):
        """
        Cancel the payment (PENDING/EXPIRED -> CANCELLED)

        Events: PaymentCancelled
        """
        from apps.payments.domain.events import PaymentCancelled

        self._transition(PaymentStatus.CANCELLED, now or utcnow())
        self.add_event(PaymentCancelled(aggregate_id=self.id, **self._event_fields()))

    # ----- Non-status updates -----

    def attach_session(self, snap_token: str, redirect_url: str):
        """Store the hosted payment page returned by the gateway"""
        if self.status != PaymentStatus.PENDING:
            raise InvalidStateTransition(self.status, 'session attached', entity=f"payment {self.order_id}")
        if not snap_token:
            raise ValidationError("Gateway session token is required")
        self._apply(utcnow(), snap_token=snap_token, snap_redirect_url=redirect_url)

    def record_webhook(self, payload: Dict[str, Any]):
        """Keep the raw notification for audit, whatever it says"""
        self._apply(utcnow(), webhook_payload=dict(payload))

    def record_gateway_transaction(self, transaction_id: Optional[str]):
        """Remember the gateway's id while the payment is still pending"""
        if transaction_id:
            self._apply(utcnow(), transaction_id=transaction_id)

    def link_subscription(self, subscription_id: UUID):
        self._apply(utcnow(), subscription_id=subscription_id)

    # ----- Internals -----

    def _transition(self, target: PaymentStatus, moment: datetime, **changes):
        if target not in ALLOWED_TRANSITIONS.get(self.status, frozenset()):
            raise InvalidStateTransition(self.status, target, entity=f"payment {self.order_id}")
        self._apply(moment, status=target, **changes)

    def _apply(self, moment: datetime, **changes):
        # Building the candidate runs __post_init__, so a bad change never lands.
        replace(self, **changes)
        for name, value in changes.items():
            setattr(self, name, value)
        self.touch(moment)

    def _check_invariants(self):
        if not isinstance(self.amount, Money):
            raise ValidationError("Payment amount must be Money")
        if self.status == PaymentStatus.SUCCESS and self.paid_at is None:
            raise ValidationError(f"Payment {self.order_id} is SUCCESS without paid_at")
        if self.status == PaymentStatus.EXPIRED and self.expired_at is None:
            raise ValidationError(f"Payment {self.order_id} is EXPIRED without expired_at")

    def _event_fields(self) -> Dict[str, Any]:
        return {
            'payment_id': self.id,
            'order_id': self.order_id,
            'user_id': self.user_id,
            'amount': self.amount.amount,
            'currency': self.amount.currency,
        }
