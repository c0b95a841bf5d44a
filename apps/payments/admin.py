"""Admin registrations for payments.

Payments are an audit trail: the admin shows them but never edits them.
"""

from __future__ import annotations

from django.contrib import admin

from .models import PaymentTransaction


@admin.register(PaymentTransaction)
class PaymentTransactionAdmin(admin.ModelAdmin):
    list_display = ("order_id", "user", "amount", "currency", "status", "payment_method", "paid_at", "created_at")
    list_filter = ("status", "payment_method", "provider")
    search_fields = ("order_id", "transaction_id", "idempotency_key", "user__email")
    ordering = ("-created_at",)

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
