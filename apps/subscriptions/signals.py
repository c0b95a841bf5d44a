"""Signal handlers for the subscriptions app."""

from __future__ import annotations

import logging

from django.conf import settings  # type: ignore
from django.db.models.signals import post_save  # type: ignore
from django.dispatch import receiver  # type: ignore

from .application.command_handlers import CreateFreeSubscriptionCommand
from .bootstrap import build_create_free_handler

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL, dispatch_uid="subscriptions_free_on_signup")
def create_free_subscription(sender, instance, created, raw=False, **kwargs):
    """Every new user starts on the FREE plan."""

    if not created or raw:
        return
    build_create_free_handler().handle(CreateFreeSubscriptionCommand(user_id=instance.pk))
    logger.debug(f"FREE subscription ensured for new user {instance.pk}")
