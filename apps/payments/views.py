"""API views for payments."""

from __future__ import annotations

from rest_framework import generics, status  # type: ignore
from rest_framework.permissions import AllowAny, IsAuthenticated  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from .application.command_handlers import CreatePaymentCommand, ProcessWebhookCommand
from .bootstrap import build_create_payment_handler, build_webhook_handler
from .domain.notifications import WebhookNotification
from .models import PaymentTransaction
from .serializers import (
    MidtransNotificationSerializer,
    PaymentSessionSerializer,
    PaymentTransactionSerializer,
)

IDEMPOTENCY_HEADER = "X-Idempotency-Key"


class CreateSubscriptionPaymentView(APIView):
    """Start paying for PREMIUM. Replays with the same idempotency key return the first payment."""

    permission_classes = [IsAuthenticated]

    def post(self, request):  # type: ignore
        command = CreatePaymentCommand(
            user_id=request.user.id,
            idempotency_key=request.headers.get(IDEMPOTENCY_HEADER),
        )
        result = build_create_payment_handler().handle(command)
        return Response(
            PaymentSessionSerializer(result.payment).data,
            status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK,
        )


class PaymentHistoryView(generics.ListAPIView):
    serializer_class = PaymentTransactionSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["status"]

    def get_queryset(self):  # type: ignore
        return PaymentTransaction.objects.filter(user=self.request.user).order_by("-created_at")


class MidtransWebhookView(APIView):
    """Gateway notifications. Authenticated by signature only."""

    authentication_classes: list = []
    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        serializer = MidtransNotificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payload = request.data.dict() if hasattr(request.data, "dict") else dict(request.data)
        result = build_webhook_handler().handle(
            ProcessWebhookCommand(notification=WebhookNotification.from_payload(payload))
        )
        return Response({"status": "ok", "result": result.outcome}, status=status.HTTP_200_OK)
