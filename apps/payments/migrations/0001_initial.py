import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PaymentTransaction",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("order_id", models.CharField(max_length=64, unique=True, verbose_name="Order ID")),
                (
                    "subscription_id",
                    models.UUIDField(
                        blank=True,
                        help_text="Subscription activated or extended by this payment.",
                        null=True,
                    ),
                ),
                (
                    "transaction_id",
                    models.CharField(blank=True, max_length=100, null=True, verbose_name="Gateway transaction ID"),
                ),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("currency", models.CharField(default="IDR", max_length=3)),
                (
                    "payment_method",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("CREDIT_CARD", "Credit card"),
                            ("BANK_TRANSFER", "Bank transfer"),
                            ("EWALLET", "E-wallet"),
                            ("CONVENIENCE_STORE", "Convenience store"),
                            ("KREDIVO", "Kredivo"),
                            ("AKULAKU", "Akulaku"),
                            ("OTHER", "Other"),
                        ],
                        max_length=20,
                        null=True,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("SUCCESS", "Paid"),
                            ("FAILED", "Failed"),
                            ("EXPIRED", "Expired"),
                            ("CANCELLED", "Cancelled"),
                        ],
                        default="PENDING",
                        max_length=20,
                    ),
                ),
                (
                    "provider",
                    models.CharField(
                        choices=[("MIDTRANS", "Midtrans"), ("MANUAL", "Manual")],
                        default="MIDTRANS",
                        max_length=20,
                    ),
                ),
                ("snap_token", models.CharField(blank=True, max_length=255, null=True)),
                ("snap_redirect_url", models.URLField(blank=True, max_length=500, null=True)),
                ("webhook_payload", models.JSONField(blank=True, null=True)),
                ("idempotency_key", models.CharField(blank=True, max_length=100, null=True, unique=True)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("expired_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField()),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payment_transactions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Payment transaction",
                "verbose_name_plural": "Payment transactions",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user", "status"], name="payment_user_status_idx"),
                    models.Index(fields=["status", "created_at"], name="payment_status_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(amount__gt=0), name="payment_amount_positive"),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(_negated=True, status="SUCCESS"),
                            models.Q(paid_at__isnull=False),
                            _connector="OR",
                        ),
                        name="payment_success_has_paid_at",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(_negated=True, status="EXPIRED"),
                            models.Q(expired_at__isnull=False),
                            _connector="OR",
                        ),
                        name="payment_expired_has_expired_at",
                    ),
                ],
            },
        ),
    ]
