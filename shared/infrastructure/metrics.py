"""
Prometheus metrics for the billing core.

Collectors live in the default registry, which ``django_prometheus`` serves
at ``/metrics`` next to its own request and database metrics.
"""

from prometheus_client import Counter, Histogram

PAYMENT_CREATED = Counter(
    "fintrack_payment_created",
    "Payment creation attempts by result.",
    ["result"],
)

PAYMENT_CREATION_SECONDS = Histogram(
    "fintrack_payment_creation_seconds",
    "Time spent creating a payment, gateway call included.",
)

WEBHOOK_PROCESSED = Counter(
    "fintrack_webhook_processed",
    "Gateway notifications handled, by result and gateway status.",
    ["result", "transaction_status"],
)

WEBHOOK_PROCESSING_SECONDS = Histogram(
    "fintrack_webhook_processing_seconds",
    "Time spent handling one gateway notification.",
    ["result"],
)

WEBHOOK_INVALID_SIGNATURE = Counter(
    "fintrack_webhook_invalid_signature",
    "Gateway notifications rejected for a bad signature.",
)

SUBSCRIPTION_ACTIVATION_FAILED = Counter(
    "fintrack_subscription_activation_failed",
    "Successful payments whose subscription activation raised.",
)

SUBSCRIPTION_EVENTS = Counter(
    "fintrack_subscription_events",
    "Subscription lifecycle events by type.",
    ["event"],
)

SUBSCRIPTION_EXPIRY_FAILED = Counter(
    "fintrack_subscription_expiry_failed",
    "Lapsed subscriptions the daily job could not expire.",
)

PREMIUM_ACCESS_DENIED = Counter(
    "fintrack_premium_access_denied",
    "Requests for premium features refused to FREE users.",
    ["feature"],
)
