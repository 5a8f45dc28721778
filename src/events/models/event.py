import typing as t
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import MinValueValidator
from django.db import models
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from common.models import TimeStampedModel


class CustomFormField(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: str = "text"
    required: bool = False


class MerchandiseOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    sizes: list[str] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)
    stock: int | None = Field(default=None, ge=0)
    purchase_limit_per_user: int | None = Field(default=None, ge=1)


class NormalEvent(BaseModel):
    """A regular event: the ticket is issued on registration."""

    model_config = ConfigDict(frozen=True)

    custom_form_fields: tuple[CustomFormField, ...] = ()

    @property
    def required_fields(self) -> list[str]:
        return [f.name for f in self.custom_form_fields if f.required]


class MerchandiseEvent(BaseModel):
    """A paid merchandise event: the ticket is issued once payment is approved."""

    model_config = ConfigDict(frozen=True)

    options: MerchandiseOptions


EventKind = NormalEvent | MerchandiseEvent


class EventQuerySet(models.QuerySet["Event"]):
    def organized_by(self, user: t.Any) -> t.Self:
        """Events run by the given organizer; admins see every event."""
        if getattr(user, "is_platform_admin", False):
            return self
        return self.filter(organizer=user)


class Event(TimeStampedModel):
    class EventType(models.TextChoices):
        NORMAL = "NORMAL", "Normal"
        MERCHANDISE = "MERCHANDISE", "Merchandise"

    class Eligibility(models.TextChoices):
        IIIT_ONLY = "IIIT_ONLY", "IIIT only"
        NON_IIIT_ONLY = "NON_IIIT_ONLY", "Non-IIIT only"
        ALL = "ALL", "All"

    class EventStatus(models.TextChoices):
        DRAFT = "draft"
        PUBLISHED = "published"
        ONGOING = "ongoing"
        COMPLETED = "completed"
        CLOSED = "closed"

    organizer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="organized_events")
    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True, default="")
    event_type = models.CharField(choices=EventType.choices, max_length=20, default=EventType.NORMAL, db_index=True)
    eligibility = models.CharField(choices=Eligibility.choices, max_length=20, default=Eligibility.ALL)
    status = models.CharField(choices=EventStatus.choices, max_length=10, default=EventStatus.DRAFT, db_index=True)
    registration_deadline = models.DateTimeField(db_index=True)
    start = models.DateTimeField(db_index=True)
    end = models.DateTimeField(db_index=True)
    registration_limit = models.PositiveIntegerField(default=0, help_text="0 means unlimited.")
    registration_fee = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0"), validators=[MinValueValidator(Decimal("0"))]
    )
    merchandise_options = models.JSONField(
        blank=True, default=dict, help_text="sizes, colors, stock and purchase_limit_per_user."
    )
    custom_form_fields = models.JSONField(blank=True, default=list, help_text="List of {name, type, required}.")

    # cache only, see the recount_registrations command
    registration_count = models.PositiveIntegerField(default=0, editable=False)

    objects = EventQuerySet.as_manager()

    class Meta:
        ordering = ["start"]
        indexes = [models.Index(fields=["organizer", "start"], name="idx_event_organizer_start")]

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Override save to set default end date if not provided."""
        if self.start and not self.end:
            self.end = self.start + timedelta(days=1)
        super().save(*args, **kwargs)

    def clean(self) -> None:
        """Validate the type-specific JSON blobs and the schedule."""
        super().clean()
        if self.start and self.end and self.end < self.start:
            raise DjangoValidationError({"end": "Event cannot end before it starts."})
        try:
            self.kind
        except PydanticValidationError as e:
            field = "merchandise_options" if self.event_type == self.EventType.MERCHANDISE else "custom_form_fields"
            raise DjangoValidationError({field: str(e)}) from e

    @property
    def kind(self) -> EventKind:
        """The event's type as a closed variant carrying its type-specific configuration."""
        if self.event_type == self.EventType.MERCHANDISE:
            return MerchandiseEvent(options=MerchandiseOptions.model_validate(self.merchandise_options or {}))
        fields = tuple(CustomFormField.model_validate(f) for f in self.custom_form_fields or [])
        return NormalEvent(custom_form_fields=fields)

    @property
    def short_id(self) -> str:
        """Last six hex characters of the id, used in ticket ids."""
        return self.id.hex[-6:].upper()

    def __str__(self) -> str:
        return self.name
