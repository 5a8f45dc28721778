"""Admin interface for accounts app."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from unfold.admin import ModelAdmin, StackedInline

from accounts.models import FelicityUser, ParticipantProfile


class ParticipantProfileInline(StackedInline):  # type: ignore[misc]
    model = ParticipantProfile
    extra = 0
    can_delete = False
    fields = ["participant_type", "contact_number", "college_or_org"]


@admin.register(FelicityUser)
class FelicityUserAdmin(UserAdmin, ModelAdmin):  # type: ignore[misc]
    list_display = ["username", "email", "first_name", "last_name", "role", "is_active"]
    list_filter = ["role", "is_active", "is_staff", "is_superuser"]
    search_fields = ["username", "email", "first_name", "last_name"]
    ordering = ["username"]
    fieldsets = (*UserAdmin.fieldsets, ("Platform", {"fields": ("role",)}))  # type: ignore[misc]
    inlines = [ParticipantProfileInline]


@admin.register(ParticipantProfile)
class ParticipantProfileAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["user", "participant_type", "college_or_org"]
    list_filter = ["participant_type"]
    search_fields = ["user__email", "college_or_org"]
    autocomplete_fields = ["user"]
