# src/events/admin/participation.py
"""Admin classes for Participation and its attendance audit trail."""

from django.contrib import admin
from unfold.admin import ModelAdmin

from events import models
from events.admin.base import AttendanceOverrideInline, EventLinkMixin, UserLinkMixin


@admin.register(models.Participation)
class ParticipationAdmin(ModelAdmin, UserLinkMixin, EventLinkMixin):  # type: ignore[misc]
    list_display = [
        "ticket_id",
        "user_link",
        "event_link",
        "status",
        "payment_status",
        "attendance_status",
        "check_in_time",
        "manual_override",
        "scan_count",
    ]
    list_filter = ["status", "payment_status", "attendance_status", "manual_override", "event__event_type"]
    search_fields = ["ticket_id", "participant__email", "participant__username", "event__name"]
    autocomplete_fields = ["participant", "event", "override_by"]
    readonly_fields = [
        "ticket_id",
        "credential_payload",
        "check_in_time",
        "check_in_by",
        "scan_count",
        "registration_date",
        "cancelled_at",
    ]
    date_hierarchy = "registration_date"
    inlines = [AttendanceOverrideInline]


@admin.register(models.AttendanceOverride)
class AttendanceOverrideAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["participation", "overridden_by", "was_already_checked_in", "participation_status", "created_at"]
    list_filter = ["was_already_checked_in", "participation_status"]
    search_fields = ["participation__ticket_id", "reason", "overridden_by__email"]
    readonly_fields = ["participation", "overridden_by", "reason", "was_already_checked_in", "participation_status"]

    def has_add_permission(self, request: object) -> bool:
        return False
