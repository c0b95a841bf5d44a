"""Admin registrations for subscriptions."""

from __future__ import annotations

from django.contrib import admin

from .models import Subscription


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    list_display = ("user", "plan", "status", "started_at", "ended_at", "provider_reference_id")
    list_filter = ("plan", "status", "started_as_trial")
    search_fields = ("user__email", "provider_reference_id")
    readonly_fields = ("id", "created_at", "updated_at")
    ordering = ("-started_at",)
