"""Unit tests for the subscription aggregate."""

from datetime import timedelta

import pytest

from shared.domain.base import utcnow
from shared.domain.exceptions import InvalidStateTransition, ValidationError
from apps.subscriptions.domain.entities import Subscription, SubscriptionPlan, SubscriptionStatus
from apps.subscriptions.domain.events import SubscriptionExpired, SubscriptionExtended, TrialStarted


def _premium(days=30, now=None):
    return Subscription.premium(1, days, payment_id="pay-1", provider="MIDTRANS", now=now)


def test_free_is_open_ended():
    subscription = Subscription.free(1)

    assert subscription.plan == SubscriptionPlan.FREE
    assert subscription.status == SubscriptionStatus.ACTIVE
    assert subscription.ended_at is None
    assert subscription.is_active()
    assert not subscription.is_premium()
    assert subscription.days_remaining() is None


def test_trial_runs_for_given_days():
    now = utcnow()

    trial = Subscription.trial(1, 14, now=now)

    assert trial.plan == SubscriptionPlan.PREMIUM
    assert trial.status == SubscriptionStatus.TRIAL
    assert trial.ended_at == now + timedelta(days=14)
    assert trial.started_as_trial
    assert trial.is_trial(now) and trial.is_premium(now)
    assert trial.days_remaining(now) == 14
    assert isinstance(trial.events[-1], TrialStarted)


def test_premium_requires_end_date():
    with pytest.raises(ValidationError):
        Subscription(
            user_id=1,
            plan=SubscriptionPlan.PREMIUM,
            status=SubscriptionStatus.ACTIVE,
            started_at=utcnow(),
        )


@pytest.mark.parametrize("days", [0, -3])
def test_days_must_be_positive(days):
    with pytest.raises(ValidationError):
        _premium(days=days)


def test_extend_adds_to_current_end():
    now = utcnow()
    subscription = _premium(now=now)
    end = subscription.ended_at

    subscription.extend_by(30, payment_id="pay-2", provider="MIDTRANS", now=now + timedelta(days=10))

    assert subscription.ended_at == end + timedelta(days=30)
    assert subscription.provider_reference_id == "pay-2"
    event = subscription.events[-1]
    assert isinstance(event, SubscriptionExtended)
    assert event.previous_ended_at == end


def test_extend_promotes_trial_to_active():
    now = utcnow()
    trial = Subscription.trial(1, 14, now=now)

    trial.extend_by(30, payment_id="pay-1", provider="MIDTRANS", now=now + timedelta(days=1))

    assert trial.status == SubscriptionStatus.ACTIVE
    assert trial.ended_at == now + timedelta(days=44)
    assert trial.started_as_trial


def test_lapsed_or_free_records_cannot_be_extended():
    now = utcnow()
    lapsed = _premium(now=now - timedelta(days=40))

    with pytest.raises(InvalidStateTransition):
        lapsed.extend_by(30, now=now)
    with pytest.raises(InvalidStateTransition):
        Subscription.free(1).extend_by(30)


def test_cancel_pulls_end_date_in():
    now = utcnow()
    subscription = _premium(now=now)

    subscription.cancel(reason="user request", now=now + timedelta(days=1))

    assert subscription.status == SubscriptionStatus.CANCELLED
    assert subscription.ended_at == now + timedelta(days=1)
    assert not subscription.is_active()
    with pytest.raises(InvalidStateTransition):
        subscription.cancel()


def test_mark_expired_remembers_trial():
    now = utcnow()
    trial = Subscription.trial(1, 14, now=now - timedelta(days=20))

    trial.mark_expired(now=now)

    assert trial.status == SubscriptionStatus.EXPIRED
    event = trial.events[-1]
    assert isinstance(event, SubscriptionExpired)
    assert event.was_trial
    with pytest.raises(InvalidStateTransition):
        trial.mark_expired(now=now)


def test_past_end_date_is_not_active():
    now = utcnow()
    subscription = _premium(now=now - timedelta(days=31))

    assert subscription.status == SubscriptionStatus.ACTIVE
    assert not subscription.is_active(now)
    assert subscription.days_remaining(now) == 0


def test_extension_keeps_remaining_days():
    now = utcnow()
    subscription = _premium(now=now - timedelta(days=20))

    subscription.extend_by(30, now=now)

    assert subscription.days_remaining(now) >= 39
    assert subscription.ended_at - now == timedelta(days=40)
