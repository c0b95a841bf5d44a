"""Serializers for payment endpoints."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import PaymentTransaction


class PaymentSessionSerializer(serializers.Serializer):
    """Response of the create-payment endpoint, built from the aggregate."""

    payment_id = serializers.UUIDField(source="id")
    order_id = serializers.CharField()
    amount = serializers.SerializerMethodField()
    currency = serializers.CharField()
    status = serializers.SerializerMethodField()
    snap_token = serializers.CharField(allow_null=True)
    redirect_url = serializers.CharField(source="snap_redirect_url", allow_null=True)

    def get_amount(self, obj) -> str:
        return str(obj.amount.quantize())

    def get_status(self, obj) -> str:
        return obj.status.value


class PaymentTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = PaymentTransaction
        fields = (
            "id",
            "order_id",
            "amount",
            "currency",
            "status",
            "payment_method",
            "provider",
            "snap_redirect_url",
            "paid_at",
            "expired_at",
            "created_at",
        )
        read_only_fields = fields


class MidtransNotificationSerializer(serializers.Serializer):
    """Shape check for gateway notifications. Values stay strings for the signature."""

    order_id = serializers.CharField(max_length=64)
    status_code = serializers.CharField(max_length=10)
    gross_amount = serializers.CharField(max_length=32)
    signature_key = serializers.CharField(max_length=256)
    transaction_status = serializers.CharField(max_length=32)
    transaction_id = serializers.CharField(max_length=100, required=False, allow_null=True, allow_blank=True)
    payment_type = serializers.CharField(max_length=50, required=False, allow_null=True, allow_blank=True)
    fraud_status = serializers.CharField(max_length=32, required=False, allow_null=True, allow_blank=True)
    transaction_time = serializers.CharField(max_length=40, required=False, allow_null=True, allow_blank=True)
    settlement_time = serializers.CharField(max_length=40, required=False, allow_null=True, allow_blank=True)
    currency = serializers.CharField(max_length=3, required=False, allow_null=True, allow_blank=True)
