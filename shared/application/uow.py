"""
Unit of Work

One ``DjangoUnitOfWork`` is one ``transaction.atomic()`` block plus the
domain events raised by the aggregates changed inside it. Events reach the
message bus only after the outermost transaction commits; a rollback drops
them together with the writes.

Units of work nest. An inner one opens a savepoint, so a failure inside it
undoes only its own writes and events while the outer transaction goes on.
This is what lets a webhook keep the payment SUCCESS when the subscription
activation nested inside it fails.

Usage:
    with DjangoUnitOfWork() as uow:
        payment = payment_repo.get_by_order_id(order_id, lock=True)
        payment.mark_success(transaction_id, method)
        payment_repo.save(payment)
        uow.collect_events(payment)
    # PaymentSucceeded is published here, after commit
"""

from typing import List
import logging

from django.db import transaction

from shared.domain.base import Aggregate, DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork:
    """Transaction boundary that defers domain events until commit"""

    def __init__(self, using: str = 'default'):
        self.using = using
        self._events: List[DomainEvent] = []
        self._atomic = None

    def __enter__(self):
        self._atomic = transaction.atomic(using=self.using)
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self._schedule_publish()
            elif self._events:
                logger.warning(
                    f"Rolling back unit of work after {exc_type.__name__}, "
                    f"dropping {len(self._events)} events"
                )
        finally:
            self._events = []
            self._atomic.__exit__(exc_type, exc_val, exc_tb)

    def collect_events(self, *aggregates: Aggregate):
        """Take pending events off the aggregates; they are published after commit"""
        for aggregate in aggregates:
            events = aggregate.events
            if not events:
                continue
            self._events.extend(events)
            aggregate.clear_events()
            logger.debug(
                f"Collected {len(events)} events from "
                f"{aggregate.__class__.__name__} {aggregate.id}"
            )

    def _schedule_publish(self):
        if not self._events:
            return
        events = list(self._events)
        # Inside a savepoint this attaches to the outer transaction's commit.
        transaction.on_commit(lambda: _publish(events), using=self.using)


def _publish(events: List[DomainEvent]):
    from shared.application.message_bus import message_bus

    logger.info(f"Publishing {len(events)} domain events after commit")
    try:
        message_bus.publish_events(events)
    except Exception as e:
        # Writes are committed already; a lost notification is a monitoring concern.
        logger.error(f"Error publishing events: {e}", exc_info=True)
