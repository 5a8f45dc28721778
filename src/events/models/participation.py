import typing as t

from django.conf import settings
from django.db import models
from django.db.models import Q

from common.models import TimeStampedModel

from .event import Event

if t.TYPE_CHECKING:
    from accounts.models import FelicityUser


class ParticipationQuerySet(models.QuerySet["Participation"]):
    def active(self) -> t.Self:
        """Participations that count toward capacity."""
        return self.exclude(status=Participation.Status.CANCELLED)

    def payment_cleared(self) -> t.Self:
        """Participations whose payment does not block attendance."""
        return self.filter(
            payment_status__in=[Participation.PaymentStatus.PAID, Participation.PaymentStatus.NOT_REQUIRED]
        )

    def with_people(self) -> t.Self:
        return self.select_related("participant", "participant__participant_profile", "check_in_by", "event")


class Participation(TimeStampedModel):
    """A participant's registration for an event. Carries the ticket once issued."""

    class Status(models.TextChoices):
        REGISTERED = "registered", "Registered"
        CANCELLED = "cancelled", "Cancelled"
        COMPLETED = "completed", "Completed"

    class PaymentStatus(models.TextChoices):
        NOT_REQUIRED = "not_required", "Not Required"
        PENDING = "pending", "Pending"
        PAID = "paid", "Paid"

    class AttendanceStatus(models.TextChoices):
        NOT_SCANNED = "not-scanned", "Not scanned"
        CHECKED_IN = "checked-in", "Checked in"

    participant = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="participations")
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="participations")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.REGISTERED, db_index=True)
    payment_status = models.CharField(
        max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.NOT_REQUIRED, db_index=True
    )

    ticket_id = models.CharField(max_length=64, unique=True, null=True, blank=True)
    credential_payload = models.TextField(null=True, blank=True, editable=False)
    credential_image = models.TextField(null=True, blank=True, editable=False, help_text="PNG data URL")

    merchandise_selection = models.JSONField(null=True, blank=True)
    custom_field_responses = models.JSONField(null=True, blank=True)

    attendance_status = models.CharField(
        max_length=20, choices=AttendanceStatus.choices, default=AttendanceStatus.NOT_SCANNED, db_index=True
    )
    check_in_time = models.DateTimeField(null=True, blank=True, editable=False)
    check_in_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="checked_in_participations",
        editable=False,
    )
    scan_count = models.PositiveIntegerField(default=0, editable=False)

    manual_override = models.BooleanField(default=False)
    override_reason = models.TextField(null=True, blank=True)
    override_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="overridden_participations",
    )
    override_timestamp = models.DateTimeField(null=True, blank=True)

    registration_date = models.DateTimeField(auto_now_add=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    objects = ParticipationQuerySet.as_manager()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["participant", "event"], name="unique_participation_participant_event"),
            models.CheckConstraint(
                condition=~Q(attendance_status="checked-in")
                | (Q(check_in_time__isnull=False) & Q(check_in_by__isnull=False)),
                name="checked_in_requires_time_and_by",
            ),
        ]
        ordering = ["-registration_date"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.participant_id} @ {self.event_id} ({self.ticket_id or 'no ticket'})"

    def is_owned_by(self, user: "FelicityUser") -> bool:
        return self.participant_id == user.id


class AttendanceOverride(TimeStampedModel):
    """Append-only audit row written for every manual check-in."""

    participation = models.ForeignKey(Participation, on_delete=models.CASCADE, related_name="overrides")
    overridden_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name="attendance_overrides"
    )
    reason = models.TextField()
    was_already_checked_in = models.BooleanField(default=False)
    participation_status = models.CharField(max_length=20, choices=Participation.Status.choices)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover
        return f"Override on {self.participation_id} by {self.overridden_by_id}"
