"""Celery tasks for subscriptions."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .application.command_handlers import ExpireLapsedSubscriptionsCommand
from .bootstrap import build_expire_lapsed_handler

logger = logging.getLogger(__name__)


@shared_task(name="subscriptions.expire_lapsed_subscriptions")
def expire_lapsed_subscriptions() -> dict[str, int]:
    """Expire ACTIVE/TRIAL records past their end date and move users to FREE."""

    report = build_expire_lapsed_handler().handle(ExpireLapsedSubscriptionsCommand())
    if report.failed:
        logger.warning(f"{report.failed} lapsed subscriptions could not be expired")
    return {"processed": report.processed, "failed": report.failed}
