"""API views for subscriptions."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.urls import reverse  # type: ignore
from rest_framework import status  # type: ignore
from rest_framework.permissions import IsAuthenticated  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from .application.command_handlers import CancelSubscriptionCommand, StartTrialCommand
from .application.queries import get_subscription_status, get_upgrade_offer
from .bootstrap import build_cancel_handler, build_eligibility_checker, build_start_trial_handler
from .repositories import DjangoSubscriptionRepository
from .serializers import SubscriptionSerializer, SubscriptionStatusSerializer, UpgradeOfferSerializer


class SubscriptionStatusView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):  # type: ignore
        view = get_subscription_status(
            request.user.id,
            DjangoSubscriptionRepository(),
            build_eligibility_checker(),
        )
        return Response(SubscriptionStatusSerializer(view).data)


class StartTrialView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):  # type: ignore
        subscription = build_start_trial_handler().handle(StartTrialCommand(user_id=request.user.id))
        return Response(SubscriptionSerializer(subscription).data, status=status.HTTP_201_CREATED)


class UpgradeView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):  # type: ignore
        offer = get_upgrade_offer(
            request.user.id,
            DjangoSubscriptionRepository(),
            price=settings.SUBSCRIPTION_PRICE,
            currency=settings.SUBSCRIPTION_CURRENCY,
            duration_days=settings.PREMIUM_DURATION_DAYS,
            payment_endpoint=reverse("payments:create-subscription-payment"),
        )
        return Response(UpgradeOfferSerializer(offer).data)


class CancelSubscriptionView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):  # type: ignore
        subscription = build_cancel_handler().handle(CancelSubscriptionCommand(user_id=request.user.id))
        return Response(SubscriptionSerializer(subscription).data)
