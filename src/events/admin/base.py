# src/events/admin/base.py
"""Base admin components: link mixins and inlines."""

import typing as t

from django.urls import reverse
from django.utils.html import format_html
from unfold.admin import TabularInline

from events import models


class UserLinkMixin:
    """Mixin to add a link to the participant."""

    def user_link(self, obj: t.Any) -> str:
        user = obj.participant
        url = reverse("admin:accounts_felicityuser_change", args=[user.id])
        return format_html('<a href="{}">{}</a>', url, user.email or user.username)

    user_link.short_description = "Participant"  # type: ignore[attr-defined]


class EventLinkMixin:
    """Mixin to add a link to an event."""

    def event_link(self, obj: t.Any) -> str:
        url = reverse("admin:events_event_change", args=[obj.event.id])
        return format_html('<a href="{}">{}</a>', url, obj.event.name)

    event_link.short_description = "Event"  # type: ignore[attr-defined]


class AttendanceOverrideInline(TabularInline):  # type: ignore[misc]
    model = models.AttendanceOverride
    extra = 0
    can_delete = False
    fields = ["created_at", "overridden_by", "reason", "was_already_checked_in", "participation_status"]
    readonly_fields = fields

    def has_add_permission(self, request: t.Any, obj: t.Any = None) -> bool:
        return False
