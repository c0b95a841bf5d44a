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
            name="Subscription",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "plan",
                    models.CharField(
                        choices=[("FREE", "Free"), ("PREMIUM", "Premium")],
                        default="FREE",
                        max_length=20,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("ACTIVE", "Active"),
                            ("TRIAL", "Trial"),
                            ("EXPIRED", "Expired"),
                            ("CANCELLED", "Cancelled"),
                        ],
                        default="ACTIVE",
                        max_length=20,
                    ),
                ),
                ("provider", models.CharField(blank=True, max_length=50, null=True)),
                (
                    "provider_reference_id",
                    models.CharField(
                        blank=True,
                        help_text="Payment that activated or last extended this record.",
                        max_length=100,
                        null=True,
                    ),
                ),
                (
                    "started_as_trial",
                    models.BooleanField(default=False, help_text="Record began as the one-time trial."),
                ),
                ("started_at", models.DateTimeField()),
                (
                    "ended_at",
                    models.DateTimeField(blank=True, help_text="Empty means the record does not expire.", null=True),
                ),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField()),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="subscriptions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Subscription",
                "verbose_name_plural": "Subscriptions",
                "ordering": ["-started_at"],
                "indexes": [
                    models.Index(fields=["user", "status"], name="subscription_user_status_idx"),
                    models.Index(fields=["status", "ended_at"], name="subscription_status_end_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(_negated=True, plan="PREMIUM"),
                            models.Q(ended_at__isnull=False),
                            _connector="OR",
                        ),
                        name="subscription_premium_has_end",
                    ),
                ],
            },
        ),
    ]
