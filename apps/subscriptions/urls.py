"""URL declarations for the subscriptions app."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import CancelSubscriptionView, StartTrialView, SubscriptionStatusView, UpgradeView

app_name = "subscriptions"

urlpatterns = [
    path("status/", SubscriptionStatusView.as_view(), name="status"),
    path("trial/", StartTrialView.as_view(), name="trial"),
    path("upgrade/", UpgradeView.as_view(), name="upgrade"),
    path("cancel/", CancelSubscriptionView.as_view(), name="cancel"),
]
