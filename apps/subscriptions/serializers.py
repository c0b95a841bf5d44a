"""Serializers for subscription endpoints."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore


class TierLimitsSerializer(serializers.Serializer):
    max_export_rows = serializers.IntegerField()
    max_report_range_days = serializers.IntegerField()


class SubscriptionStatusSerializer(serializers.Serializer):
    subscription_id = serializers.UUIDField()
    plan = serializers.CharField()
    status = serializers.CharField()
    started_at = serializers.DateTimeField()
    ended_at = serializers.DateTimeField(allow_null=True)
    is_premium = serializers.BooleanField()
    is_trial = serializers.BooleanField()
    days_remaining = serializers.IntegerField(allow_null=True)
    trial_eligible = serializers.BooleanField()
    limits = TierLimitsSerializer()


class SubscriptionSerializer(serializers.Serializer):
    """Serializes the domain aggregate returned by command handlers."""

    id = serializers.UUIDField()
    plan = serializers.SerializerMethodField()
    status = serializers.SerializerMethodField()
    started_at = serializers.DateTimeField()
    ended_at = serializers.DateTimeField(allow_null=True)
    provider = serializers.CharField(allow_null=True)

    def get_plan(self, obj) -> str:
        return obj.plan.value

    def get_status(self, obj) -> str:
        return obj.status.value


class UpgradeOfferSerializer(serializers.Serializer):
    plan = serializers.CharField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    currency = serializers.CharField()
    duration = serializers.CharField()
    payment_endpoint = serializers.CharField()
