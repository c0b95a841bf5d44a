"""Integration tests for payment API endpoints."""

from __future__ import annotations

from unittest.mock import patch

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from shared.domain.exceptions import ExternalServiceError
from apps.payments.domain.entities import PaymentMethod, PaymentTransaction
from apps.payments.models import PaymentTransaction as PaymentTransactionModel
from apps.payments.repositories import DjangoPaymentRepository
from apps.subscriptions.models import Subscription
from apps.users.models import User
from apps.payments.tests.factories import PRICE, FakeSnapGateway, notification_payload

BUILD_GATEWAY = "apps.payments.bootstrap.build_gateway"


class CreateSubscriptionPaymentAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(
            email="payer@example.com",
            phone="+6281200000002",
            password="PayerPass123",
            first_name="Siti",
        )
        self.client.force_authenticate(self.user)
        self.url = reverse("payments:create-subscription-payment")
        self.gateway = FakeSnapGateway()
        patcher = patch(BUILD_GATEWAY, return_value=self.gateway)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_returns_session_for_new_payment(self) -> None:
        response = self.client.post(self.url, HTTP_X_IDEMPOTENCY_KEY="key-1")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["amount"], "25000.00")
        self.assertEqual(response.data["currency"], "IDR")
        self.assertEqual(response.data["status"], "PENDING")
        self.assertTrue(response.data["order_id"].startswith("ORDER-"))
        self.assertEqual(response.data["snap_token"], f"snap-{response.data['order_id']}")
        self.assertTrue(response.data["redirect_url"])

    def test_replay_returns_same_payment(self) -> None:
        first = self.client.post(self.url, HTTP_X_IDEMPOTENCY_KEY="key-2")
        second = self.client.post(self.url, HTTP_X_IDEMPOTENCY_KEY="key-2")

        self.assertEqual(first.status_code, status.HTTP_201_CREATED, first.data)
        self.assertEqual(second.status_code, status.HTTP_200_OK, second.data)
        self.assertEqual(first.data["payment_id"], second.data["payment_id"])
        self.assertEqual(PaymentTransactionModel.objects.count(), 1)
        self.assertEqual(len(self.gateway.requests), 1)

    def test_other_users_idempotency_key_is_rejected(self) -> None:
        first = self.client.post(self.url, HTTP_X_IDEMPOTENCY_KEY="key-shared")
        intruder = User.objects.create_user(
            email="intruder@example.com",
            phone="+6281200000009",
            password="IntruderPass123",
        )
        self.client.force_authenticate(intruder)

        response = self.client.post(self.url, HTTP_X_IDEMPOTENCY_KEY="key-shared")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "idempotency_key_conflict")
        self.assertNotIn("snap_token", response.data)
        self.assertNotIn(first.data["order_id"], str(response.data))

    def test_gateway_error_returns_bad_gateway(self) -> None:
        self.gateway.error = ExternalServiceError(
            "Payment gateway is unreachable", service="midtrans", code="gateway_unavailable"
        )

        response = self.client.post(self.url)

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY, response.data)
        self.assertEqual(response.data["code"], "gateway_unavailable")
        self.assertEqual(
            PaymentTransactionModel.objects.get().status, PaymentTransactionModel.Status.FAILED
        )

    def test_requires_authentication(self) -> None:
        self.client.force_authenticate(None)

        response = self.client.post(self.url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class MidtransWebhookAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="hook@example.com", password="HookPass123")
        self.url = reverse("payments:midtrans-webhook")
        self.payment = PaymentTransaction.create(order_id="ORDER-hook-1", user_id=self.user.id, amount=PRICE)
        DjangoPaymentRepository().add(self.payment)

    def test_settlement_activates_premium_without_auth(self) -> None:
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(self.url, notification_payload("ORDER-hook-1"), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data, {"status": "ok", "result": "success"})
        row = PaymentTransactionModel.objects.get(order_id="ORDER-hook-1")
        self.assertEqual(row.status, PaymentTransactionModel.Status.SUCCESS)
        self.assertTrue(
            Subscription.objects.filter(user=self.user, plan="PREMIUM", status="ACTIVE").exists()
        )

    def test_duplicate_delivery_is_acknowledged(self) -> None:
        payload = notification_payload("ORDER-hook-1")
        self.client.post(self.url, payload, format="json")

        response = self.client.post(self.url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["result"], "duplicate")

    def test_bad_signature_is_forbidden(self) -> None:
        payload = notification_payload("ORDER-hook-1", server_key="not-the-key")

        response = self.client.post(self.url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)
        self.assertEqual(response.data["code"], "invalid_signature")
        self.assertEqual(
            PaymentTransactionModel.objects.get(order_id="ORDER-hook-1").status,
            PaymentTransactionModel.Status.PENDING,
        )

    def test_unknown_order_is_not_found(self) -> None:
        response = self.client.post(self.url, notification_payload("ORDER-unknown"), format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)

    def test_malformed_notification_is_bad_request(self) -> None:
        response = self.client.post(self.url, {"order_id": "ORDER-hook-1"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("signature_key", response.data)


class PaymentHistoryAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="history@example.com", password="HistoryPass123")
        self.other = User.objects.create_user(email="someone@example.com", password="SomeonePass123")
        repo = DjangoPaymentRepository()
        paid = PaymentTransaction.create(order_id="ORDER-h-paid", user_id=self.user.id, amount=PRICE)
        paid.mark_success("tx-1", PaymentMethod.EWALLET)
        repo.add(paid)
        repo.add(PaymentTransaction.create(order_id="ORDER-h-open", user_id=self.user.id, amount=PRICE))
        repo.add(PaymentTransaction.create(order_id="ORDER-h-other", user_id=self.other.id, amount=PRICE))
        self.client.force_authenticate(self.user)
        self.url = reverse("payments:history")

    def test_lists_only_own_payments(self) -> None:
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        order_ids = {item["order_id"] for item in response.data}
        self.assertEqual(order_ids, {"ORDER-h-paid", "ORDER-h-open"})

    def test_filter_by_status(self) -> None:
        response = self.client.get(self.url, {"status": "SUCCESS"})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([item["order_id"] for item in response.data], ["ORDER-h-paid"])
        self.assertEqual(response.data[0]["payment_method"], "EWALLET")
