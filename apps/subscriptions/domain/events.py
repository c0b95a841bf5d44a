"""
Subscription Domain Events

Events that represent things that have happened to a user's subscription.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class SubscriptionEvent(DomainEvent):
    subscription_id: UUID
    user_id: int
    plan: str
    ended_at: Optional[datetime] = None


@dataclass(kw_only=True)
class FreeSubscriptionCreated(SubscriptionEvent):
    """Event: A FREE record was opened (registration or downgrade after expiry)"""


@dataclass(kw_only=True)
class TrialStarted(SubscriptionEvent):
    """Event: The user's one-time PREMIUM trial started"""
    days: int


@dataclass(kw_only=True)
class SubscriptionActivated(SubscriptionEvent):
    """
    Event: A paid PREMIUM record was created

    Triggers:
    - SUBSCRIPTION_ACTIVATED business event
    """
    payment_id: Optional[str] = None
    days: int


@dataclass(kw_only=True)
class SubscriptionExtended(SubscriptionEvent):
    """Event: A PREMIUM record got more time from a payment"""
    payment_id: Optional[str] = None
    days: int
    previous_ended_at: Optional[datetime] = None


@dataclass(kw_only=True)
class SubscriptionCancelled(SubscriptionEvent):
    """Event: A record was cancelled by the user or superseded by a new one"""
    reason: str = ''


@dataclass(kw_only=True)
class SubscriptionExpired(SubscriptionEvent):
    """Event: An ACTIVE or TRIAL record ran past its end date"""
    was_trial: bool = False
