"""URL declarations for the payments app."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import CreateSubscriptionPaymentView, MidtransWebhookView, PaymentHistoryView

app_name = "payments"

urlpatterns = [
    path("", PaymentHistoryView.as_view(), name="history"),
    path("subscription/", CreateSubscriptionPaymentView.as_view(), name="create-subscription-payment"),
    path("webhook/midtrans/", MidtransWebhookView.as_view(), name="midtrans-webhook"),
]
