"""
Message Bus

Routes domain events, published after commit, to the handlers each app
registers in its ``AppConfig.ready()``. Handlers only observe (business
event log, counters). A failing handler is logged and skipped; it never
reaches the request that raised the event.
"""

from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    """In-process 1:N dispatch keyed by exact event type"""

    def __init__(self):
        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = defaultdict(list)

    def register_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        # ready() can run more than once (tests, autoreload).
        if handler not in self._handlers[event_type]:
            self._handlers[event_type].append(handler)
            logger.debug(f"Registered {handler.__name__} for {event_type.__name__}")

    def publish_events(self, events: Iterable[DomainEvent]):
        for event in events:
            name = type(event).__name__
            handlers = self._handlers.get(type(event))
            if not handlers:
                logger.debug(f"No handlers for {name}")
                continue

            for handler in handlers:
                try:
                    handler(event)
                except Exception as e:
                    logger.error(
                        f"Handler {handler.__name__} failed for {name} {event.event_id}: {e}",
                        exc_info=True,
                    )


message_bus = MessageBus()
