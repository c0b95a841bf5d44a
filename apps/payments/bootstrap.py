"""Composition root for payment use cases."""

from __future__ import annotations

from django.conf import settings  # type: ignore

from shared.domain.value_objects import Money
from apps.subscriptions.bootstrap import build_activate_handler
from apps.users.repositories import DjangoUserRepository

from .application.command_handlers import (
    CreatePaymentHandler,
    ProcessWebhookHandler,
    SubscriptionProduct,
)
from .gateway import MidtransConfig, MidtransSnapClient
from .repositories import DjangoPaymentRepository


def subscription_product() -> SubscriptionProduct:
    return SubscriptionProduct(
        product_id=settings.SUBSCRIPTION_PRODUCT_ID,
        name=settings.SUBSCRIPTION_PRODUCT_NAME,
        price=Money(settings.SUBSCRIPTION_PRICE, settings.SUBSCRIPTION_CURRENCY),
    )


def build_gateway() -> MidtransSnapClient:
    return MidtransSnapClient(MidtransConfig.from_settings())


def build_create_payment_handler(gateway=None) -> CreatePaymentHandler:
    return CreatePaymentHandler(
        DjangoPaymentRepository(),
        DjangoUserRepository(),
        gateway or build_gateway(),
        subscription_product(),
    )


def build_webhook_handler() -> ProcessWebhookHandler:
    return ProcessWebhookHandler(
        DjangoPaymentRepository(),
        build_activate_handler(),
        server_key=settings.MIDTRANS_SERVER_KEY,
        premium_days=settings.PREMIUM_DURATION_DAYS,
    )

