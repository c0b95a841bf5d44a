"""Composition root for subscription use cases."""

from __future__ import annotations

from django.conf import settings  # type: ignore

from apps.payments.repositories import DjangoPaymentRepository
from apps.users.repositories import DjangoUserRepository

from .application.command_handlers import (
    ActivateSubscriptionHandler,
    CancelSubscriptionHandler,
    CreateFreeSubscriptionHandler,
    ExpireLapsedSubscriptionsHandler,
    StartTrialHandler,
)
from .eligibility import TrialEligibilityChecker
from .repositories import DjangoSubscriptionRepository


def build_eligibility_checker() -> TrialEligibilityChecker:
    return TrialEligibilityChecker(DjangoSubscriptionRepository(), DjangoPaymentRepository())


def build_activate_handler() -> ActivateSubscriptionHandler:
    return ActivateSubscriptionHandler(DjangoSubscriptionRepository(), DjangoUserRepository())


def build_create_free_handler() -> CreateFreeSubscriptionHandler:
    return CreateFreeSubscriptionHandler(DjangoSubscriptionRepository())


def build_start_trial_handler() -> StartTrialHandler:
    return StartTrialHandler(
        DjangoSubscriptionRepository(),
        DjangoUserRepository(),
        build_eligibility_checker(),
        trial_days=settings.TRIAL_DURATION_DAYS,
    )


def build_cancel_handler() -> CancelSubscriptionHandler:
    return CancelSubscriptionHandler(DjangoSubscriptionRepository())


def build_expire_lapsed_handler() -> ExpireLapsedSubscriptionsHandler:
    return ExpireLapsedSubscriptionsHandler(DjangoSubscriptionRepository())
