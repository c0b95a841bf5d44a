"""API tests for authentication endpoints."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.subscriptions.models import Subscription
from apps.users.models import User


class AuthAPITests(APITestCase):
    def test_register_returns_tokens_and_free_plan(self) -> None:
        payload = {
            "email": "member@example.com",
            "phone": "+6281234567890",
            "first_name": "Dewi",
            "last_name": "Lestari",
            "password": "StrongPass123",
            "password_confirm": "StrongPass123",
        }

        response = self.client.post(reverse("auth:register"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIn("access", response.data["tokens"])
        self.assertEqual(response.data["user"]["email"], payload["email"])
        user = User.objects.get(email=payload["email"])
        subscription = Subscription.objects.get(user=user)
        self.assertEqual(subscription.plan, Subscription.Plan.FREE)
        self.assertEqual(subscription.status, Subscription.Status.ACTIVE)
        self.assertIsNone(subscription.ended_at)

    def test_register_rejects_mismatched_passwords(self) -> None:
        payload = {
            "email": "mismatch@example.com",
            "password": "StrongPass123",
            "password_confirm": "OtherPass123",
        }

        response = self.client.post(reverse("auth:register"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("password_confirm", response.data)
        self.assertFalse(User.objects.filter(email=payload["email"]).exists())

    def test_register_rejects_duplicate_email(self) -> None:
        User.objects.create_user(email="taken@example.com", password="TakenPass123")
        payload = {
            "email": "TAKEN@example.com",
            "password": "StrongPass123",
            "password_confirm": "StrongPass123",
        }

        response = self.client.post(reverse("auth:register"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("email", response.data)

    def test_obtain_token_with_email(self) -> None:
        User.objects.create_user(email="login@example.com", password="LoginPass123")

        response = self.client.post(
            reverse("auth:token"),
            {"email": "login@example.com", "password": "LoginPass123"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)

    def test_phone_is_normalized(self) -> None:
        user = User.objects.create_user(email="phone@example.com", phone="+62 812-0000-0004")

        self.assertEqual(user.phone, "+6281200000004")
        self.assertFalse(user.has_usable_password())
