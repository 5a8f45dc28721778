# src/events/admin/payment.py
"""Admin classes for merchandise orders and payments."""

from django.contrib import admin
from unfold.admin import ModelAdmin, StackedInline

from events import models
from events.admin.base import EventLinkMixin, UserLinkMixin


class PaymentInline(StackedInline):  # type: ignore[misc]
    model = models.Payment
    extra = 0
    can_delete = False
    fields = ["payment_method", "amount", "status", "reviewed_by", "reviewed_at", "rejection_reason"]
    readonly_fields = fields


@admin.register(models.Order)
class OrderAdmin(ModelAdmin, UserLinkMixin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["id", "user_link", "event_link", "quantity", "total_amount", "payment_status", "order_status"]
    list_filter = ["payment_status", "order_status"]
    search_fields = ["participant__email", "event__name"]
    autocomplete_fields = ["participant", "event"]
    readonly_fields = ["credential_image", "approved_at"]
    inlines = [PaymentInline]


@admin.register(models.Payment)
class PaymentAdmin(ModelAdmin, UserLinkMixin, EventLinkMixin):  # type: ignore[misc]
    """Read-mostly view; approvals go through the API so tickets get issued."""

    list_display = ["id", "user_link", "event_link", "amount", "payment_method", "status", "reviewed_at"]
    list_filter = ["status", "payment_method"]
    search_fields = ["participant__email", "event__name", "order__id"]
    autocomplete_fields = ["participant", "event", "order", "reviewed_by"]
    readonly_fields = ["status", "reviewed_by", "reviewed_at", "rejection_reason"]
