"""Persistence models for payments.

The model is a storage shape only. State changes happen on
``apps.payments.domain.entities.PaymentTransaction`` and reach the table
through ``DjangoPaymentRepository``.
"""

from __future__ import annotations

import uuid

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class PaymentTransaction(models.Model):
    """One attempt to pay for the premium subscription through the gateway."""

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        SUCCESS = "SUCCESS", _("Paid")
        FAILED = "FAILED", _("Failed")
        EXPIRED = "EXPIRED", _("Expired")
        CANCELLED = "CANCELLED", _("Cancelled")

    class Method(models.TextChoices):
        CREDIT_CARD = "CREDIT_CARD", _("Credit card")
        BANK_TRANSFER = "BANK_TRANSFER", _("Bank transfer")
        EWALLET = "EWALLET", _("E-wallet")
        CONVENIENCE_STORE = "CONVENIENCE_STORE", _("Convenience store")
        KREDIVO = "KREDIVO", _("Kredivo")
        AKULAKU = "AKULAKU", _("Akulaku")
        OTHER = "OTHER", _("Other")

    class Provider(models.TextChoices):
        MIDTRANS = "MIDTRANS", _("Midtrans")
        MANUAL = "MANUAL", _("Manual")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_id = models.CharField(_("Order ID"), max_length=64, unique=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="payment_transactions",
    )
    subscription_id = models.UUIDField(null=True, blank=True, help_text=_("Subscription activated or extended by this payment."))
    transaction_id = models.CharField(_("Gateway transaction ID"), max_length=100, null=True, blank=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3, default="IDR")
    payment_method = models.CharField(max_length=20, choices=Method.choices, null=True, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    provider = models.CharField(max_length=20, choices=Provider.choices, default=Provider.MIDTRANS)
    snap_token = models.CharField(max_length=255, null=True, blank=True)
    snap_redirect_url = models.URLField(max_length=500, null=True, blank=True)
    webhook_payload = models.JSONField(null=True, blank=True)
    idempotency_key = models.CharField(max_length=100, unique=True, null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    expired_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        verbose_name = _("Payment transaction")
        verbose_name_plural = _("Payment transactions")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "status"], name="payment_user_status_idx"),
            models.Index(fields=["status", "created_at"], name="payment_status_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(amount__gt=0), name="payment_amount_positive"),
            models.CheckConstraint(
                condition=~Q(status="SUCCESS") | Q(paid_at__isnull=False),
                name="payment_success_has_paid_at",
            ),
            models.CheckConstraint(
                condition=~Q(status="EXPIRED") | Q(expired_at__isnull=False),
                name="payment_expired_has_expired_at",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} ({self.status})"
