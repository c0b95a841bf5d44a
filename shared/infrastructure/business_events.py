"""
Structured business events.

Operational logs go through ``logging``; facts the business cares about
(a payment was created, a subscription was extended) go through this
structlog logger, so they come out as one JSON line with stable keys.
"""

from __future__ import annotations

from typing import Any

import structlog

logger = structlog.get_logger("fintrack.business")


def log_business_event(event_type: str, user_id: Any = None, **attributes: Any) -> None:
    """Emit one business event with its attributes as top-level keys."""

    logger.info(
        "business_event",
        event_type=event_type,
        user_id=str(user_id) if user_id is not None else None,
        **{key: _plain(value) for key, value in attributes.items()},
    )


def _plain(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)
