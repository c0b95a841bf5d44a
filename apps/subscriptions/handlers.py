"""
Subscription event handlers.

Registered on the message bus in ``SubscriptionsConfig.ready()``. They run
after commit and only observe: business event log lines and counters.
"""

from __future__ import annotations

from shared.application.message_bus import message_bus
from shared.infrastructure import metrics
from shared.infrastructure.business_events import log_business_event

from .domain.events import (
    FreeSubscriptionCreated,
    SubscriptionActivated,
    SubscriptionCancelled,
    SubscriptionExpired,
    SubscriptionExtended,
    TrialStarted,
)

BUSINESS_EVENT_NAMES = {
    FreeSubscriptionCreated: "SUBSCRIPTION_CREATED",
    TrialStarted: "TRIAL_STARTED",
    SubscriptionActivated: "SUBSCRIPTION_ACTIVATED",
    SubscriptionExtended: "SUBSCRIPTION_EXTENDED",
    SubscriptionCancelled: "SUBSCRIPTION_CANCELLED",
    SubscriptionExpired: "SUBSCRIPTION_EXPIRED",
}


def record_subscription_event(event) -> None:
    name = BUSINESS_EVENT_NAMES[type(event)]
    metrics.SUBSCRIPTION_EVENTS.labels(event=name.lower()).inc()

    attributes = {
        "subscription_id": event.subscription_id,
        "plan": event.plan,
        "ended_at": event.ended_at.isoformat() if event.ended_at else None,
    }
    for extra in ("payment_id", "days", "reason", "was_trial"):
        if hasattr(event, extra):
            attributes[extra] = getattr(event, extra)
    if isinstance(event, SubscriptionExtended) and event.previous_ended_at:
        attributes["previous_ended_at"] = event.previous_ended_at.isoformat()

    log_business_event(name, event.user_id, **attributes)


def register() -> None:
    for event_type in BUSINESS_EVENT_NAMES:
        message_bus.register_event_handler(event_type, record_subscription_event)
