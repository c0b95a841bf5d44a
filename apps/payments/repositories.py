"""
Payment repository.

Maps between the ``PaymentTransaction`` ORM row and the domain aggregate.
Callers that intend to change a payment load it with ``lock=True`` inside a
unit of work, which serializes concurrent webhooks for the same order.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from shared.domain.value_objects import Money
from shared.infrastructure.db import lock_queryset_if_possible

from .domain.entities import PaymentMethod, PaymentProvider, PaymentStatus, PaymentTransaction
from .models import PaymentTransaction as PaymentTransactionModel


class DjangoPaymentRepository:
    def get(self, payment_id: UUID, lock: bool = False) -> Optional[PaymentTransaction]:
        queryset = PaymentTransactionModel.objects.filter(pk=payment_id)
        if lock:
            queryset = lock_queryset_if_possible(queryset)
        row = queryset.first()
        return self._to_domain(row) if row else None

    def get_by_order_id(self, order_id: str, lock: bool = False) -> Optional[PaymentTransaction]:
        queryset = PaymentTransactionModel.objects.filter(order_id=order_id)
        if lock:
            queryset = lock_queryset_if_possible(queryset)
        row = queryset.first()
        return self._to_domain(row) if row else None

    def get_by_idempotency_key(self, idempotency_key: str) -> Optional[PaymentTransaction]:
        if not idempotency_key:
            return None
        row = PaymentTransactionModel.objects.filter(idempotency_key=idempotency_key).first()
        return self._to_domain(row) if row else None

    def add(self, payment: PaymentTransaction) -> None:
        PaymentTransactionModel.objects.create(
            id=payment.id,
            user_id=payment.user_id,
            **self._fields(payment),
        )

    def save(self, payment: PaymentTransaction) -> None:
        updated = PaymentTransactionModel.objects.filter(pk=payment.id).update(**self._fields(payment))
        if not updated:
            raise LookupError(f"Payment {payment.id} is not persisted")

    def has_successful_payment(self, user_id) -> bool:
        return PaymentTransactionModel.objects.filter(
            user_id=user_id,
            status=PaymentTransactionModel.Status.SUCCESS,
        ).exists()

    @staticmethod
    def _fields(payment: PaymentTransaction) -> dict:
        return {
            "order_id": payment.order_id,
            "subscription_id": payment.subscription_id,
            "transaction_id": payment.transaction_id,
            "amount": payment.amount.quantize(),
            "currency": payment.amount.currency,
            "payment_method": payment.payment_method.value if payment.payment_method else None,
            "status": payment.status.value,
            "provider": payment.provider.value,
            "snap_token": payment.snap_token,
            "snap_redirect_url": payment.snap_redirect_url,
            "webhook_payload": payment.webhook_payload,
            "idempotency_key": payment.idempotency_key,
            "metadata": payment.metadata,
            "paid_at": payment.paid_at,
            "expired_at": payment.expired_at,
            "created_at": payment.created_at,
            "updated_at": payment.updated_at,
        }

    @staticmethod
    def _to_domain(row: PaymentTransactionModel) -> PaymentTransaction:
        return PaymentTransaction(
            id=row.id,
            order_id=row.order_id,
            user_id=row.user_id,
            amount=Money(row.amount, row.currency),
            status=PaymentStatus(row.status),
            provider=PaymentProvider(row.provider),
            payment_method=PaymentMethod(row.payment_method) if row.payment_method else None,
            transaction_id=row.transaction_id,
            snap_token=row.snap_token,
            snap_redirect_url=row.snap_redirect_url,
            webhook_payload=row.webhook_payload,
            idempotency_key=row.idempotency_key,
            subscription_id=row.subscription_id,
            metadata=dict(row.metadata or {}),
            paid_at=row.paid_at,
            expired_at=row.expired_at,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
