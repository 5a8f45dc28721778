# src/events/admin/event.py
"""Admin classes for Event."""

from django.contrib import admin
from django.db.models import Count, Q, QuerySet
from django.http import HttpRequest
from unfold.admin import ModelAdmin

from events import models


@admin.register(models.Event)
class EventAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = [
        "name",
        "organizer",
        "event_type",
        "eligibility",
        "status",
        "start",
        "registration_limit",
        "registration_count",
        "active_count",
    ]
    list_filter = ["event_type", "eligibility", "status"]
    search_fields = ["name", "organizer__email", "organizer__username"]
    autocomplete_fields = ["organizer"]
    readonly_fields = ["registration_count", "created_at", "updated_at"]
    date_hierarchy = "start"

    def get_queryset(self, request: HttpRequest) -> QuerySet[models.Event]:
        return (
            super()
            .get_queryset(request)
            .select_related("organizer")
            .annotate(
                _active_count=Count(
                    "participations", filter=~Q(participations__status=models.Participation.Status.CANCELLED)
                )
            )
        )

    @admin.display(description="Active (live)")
    def active_count(self, obj: models.Event) -> int:
        return getattr(obj, "_active_count", 0)
