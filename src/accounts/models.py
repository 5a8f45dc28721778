import typing as t
import uuid

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models

from accounts.validators import normalize_contact_number, validate_contact_number
from common.models import TimeStampedModel


class FelicityUserQueryset(models.QuerySet["FelicityUser"]):
    """Queryset for FelicityUser."""

    def organizers(self) -> t.Self:
        """Users that can run events."""
        return self.filter(role=FelicityUser.Role.ORGANIZER)


class FelicityUserManager(UserManager["FelicityUser"]):
    def get_queryset(self) -> FelicityUserQueryset:
        """Get queryset for FelicityUser."""
        return FelicityUserQueryset(self.model, using=self._db)


class FelicityUser(AbstractUser):
    class Role(models.TextChoices):
        PARTICIPANT = "participant", "Participant"
        ORGANIZER = "organizer", "Organizer"
        ADMIN = "admin", "Admin"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.PARTICIPANT, db_index=True)

    objects = FelicityUserManager()  # type: ignore[misc]

    class Meta:
        ordering = ["username"]

    @property
    def display_name(self) -> str:
        """Display name."""
        return self.get_display_name()

    def get_display_name(self) -> str:
        """Returns the user's full name, or their email as a fallback."""
        return self.get_full_name() or self.email

    @property
    def is_organizer(self) -> bool:
        return self.role == self.Role.ORGANIZER

    @property
    def is_platform_admin(self) -> bool:
        return self.role == self.Role.ADMIN or self.is_superuser


class ParticipantProfile(TimeStampedModel):
    """Participant-specific profile data used for eligibility checks."""

    class ParticipantType(models.TextChoices):
        IIIT = "IIIT", "IIIT"
        NON_IIIT = "NON_IIIT", "Non-IIIT"

    user = models.OneToOneField(FelicityUser, on_delete=models.CASCADE, related_name="participant_profile")
    participant_type = models.CharField(max_length=10, choices=ParticipantType.choices, db_index=True)
    contact_number = models.CharField(
        max_length=20,
        null=True,
        blank=True,
        validators=[validate_contact_number],
        help_text="Contact number, stored without separators",
    )
    college_or_org = models.CharField(max_length=255, blank=True, default="")

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Normalize the contact number before validating."""
        if self.contact_number:
            self.contact_number = normalize_contact_number(self.contact_number)
        super().save(*args, **kwargs)

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.user.email} ({self.participant_type})"
