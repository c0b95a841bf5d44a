"""Integration tests for subscription API endpoints."""

from __future__ import annotations

from uuid import uuid4

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.subscriptions.application.command_handlers import ActivateSubscriptionCommand
from apps.subscriptions.bootstrap import build_activate_handler
from apps.subscriptions.models import Subscription
from apps.users.models import User


class SubscriptionAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(
            email="subscriber@example.com",
            phone="+6281200000003",
            password="SubscriberPass123",
        )
        self.client.force_authenticate(self.user)

    def test_status_for_new_user(self) -> None:
        response = self.client.get(reverse("subscriptions:status"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["plan"], "FREE")
        self.assertEqual(response.data["status"], "ACTIVE")
        self.assertIsNone(response.data["ended_at"])
        self.assertTrue(response.data["trial_eligible"])
        self.assertEqual(response.data["limits"]["max_report_range_days"], 90)

    def test_start_trial_once(self) -> None:
        url = reverse("subscriptions:trial")

        first = self.client.post(url)
        second = self.client.post(url)

        self.assertEqual(first.status_code, status.HTTP_201_CREATED, first.data)
        self.assertEqual(first.data["plan"], "PREMIUM")
        self.assertEqual(first.data["status"], "TRIAL")
        self.assertEqual(second.status_code, status.HTTP_403_FORBIDDEN, second.data)
        self.assertEqual(second.data["code"], "trial_not_eligible")

    def test_upgrade_points_to_payment_endpoint(self) -> None:
        response = self.client.post(reverse("subscriptions:upgrade"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["price"], "25000.00")
        self.assertEqual(response.data["currency"], "IDR")
        self.assertEqual(response.data["duration"], "30 days")
        self.assertEqual(response.data["payment_endpoint"], reverse("payments:create-subscription-payment"))

    def test_upgrade_refused_for_premium(self) -> None:
        build_activate_handler().handle(ActivateSubscriptionCommand(user_id=self.user.id, payment_id=uuid4()))

        response = self.client.post(reverse("subscriptions:upgrade"))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "already_premium")

    def test_cancel_free_is_rejected(self) -> None:
        response = self.client.post(reverse("subscriptions:cancel"))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "free_not_cancellable")

    def test_cancel_premium(self) -> None:
        build_activate_handler().handle(ActivateSubscriptionCommand(user_id=self.user.id, payment_id=uuid4()))

        response = self.client.post(reverse("subscriptions:cancel"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "CANCELLED")
        self.assertFalse(
            Subscription.objects.filter(user=self.user, status__in=["ACTIVE", "TRIAL"]).exists()
        )

    def test_requires_authentication(self) -> None:
        self.client.force_authenticate(None)

        response = self.client.get(reverse("subscriptions:status"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
