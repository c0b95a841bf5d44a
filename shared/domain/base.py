"""
Domain building blocks shared by the payments and subscriptions apps.

- Entity: identity plus creation/update timestamps
- ValueObject: frozen, compared by value
- Aggregate: an entity that buffers DomainEvents until a unit of work takes them
- DomainEvent: an immutable record of a state change

Domain code never asks Django for the time. ``utcnow`` returns an aware
datetime in UTC, which is what the ORM stores when ``USE_TZ`` is enabled.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID, uuid4


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(eq=False)
class Entity(ABC):
    """Equal when ids are equal, whatever the other fields say"""
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __eq__(self, other):
        return isinstance(other, self.__class__) and self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def touch(self, moment: Optional[datetime] = None):
        self.updated_at = moment or utcnow()


@dataclass(frozen=True)
class ValueObject(ABC):
    pass


@dataclass(eq=False)
class Aggregate(Entity):
    """
    Aggregate root

    State changes append events with ``add_event``; ``DjangoUnitOfWork``
    drains them with ``events`` + ``clear_events`` and publishes them once
    the transaction commits.
    """
    _events: List['DomainEvent'] = field(default_factory=list, repr=False, init=False)

    def add_event(self, event: 'DomainEvent'):
        self._events.append(event)

    def clear_events(self):
        self._events.clear()

    @property
    def events(self) -> List['DomainEvent']:
        return list(self._events)


@dataclass(kw_only=True)
class DomainEvent:
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=utcnow)
    aggregate_id: Optional[UUID] = None
