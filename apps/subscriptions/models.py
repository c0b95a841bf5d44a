"""Persistence models for subscriptions."""

from __future__ import annotations

import uuid

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Subscription(models.Model):
    """One period of a user's plan. Superseded records are kept."""

    class Plan(models.TextChoices):
        FREE = "FREE", _("Free")
        PREMIUM = "PREMIUM", _("Premium")

    class Status(models.TextChoices):
        ACTIVE = "ACTIVE", _("Active")
        TRIAL = "TRIAL", _("Trial")
        EXPIRED = "EXPIRED", _("Expired")
        CANCELLED = "CANCELLED", _("Cancelled")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="subscriptions",
    )
    plan = models.CharField(max_length=20, choices=Plan.choices, default=Plan.FREE)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    provider = models.CharField(max_length=50, null=True, blank=True)
    provider_reference_id = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        help_text=_("Payment that activated or last extended this record."),
    )
    started_as_trial = models.BooleanField(default=False, help_text=_("Record began as the one-time trial."))
    started_at = models.DateTimeField()
    ended_at = models.DateTimeField(null=True, blank=True, help_text=_("Empty means the record does not expire."))
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        verbose_name = _("Subscription")
        verbose_name_plural = _("Subscriptions")
        ordering = ["-started_at"]
        indexes = [
            models.Index(fields=["user", "status"], name="subscription_user_status_idx"),
            models.Index(fields=["status", "ended_at"], name="subscription_status_end_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~Q(plan="PREMIUM") | Q(ended_at__isnull=False),
                name="subscription_premium_has_end",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.user_id}: {self.plan}/{self.status}"
