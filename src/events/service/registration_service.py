"""Registration workflow: admission, ticket issuance and cancellation."""

import typing as t
import uuid
from dataclasses import dataclass, field
from datetime import datetime

import structlog
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone
from pydantic import BaseModel

from accounts.models import FelicityUser, ParticipantProfile
from events.exceptions import AuthorizationError, ConflictError, EligibilityError
from events.models import Event, MerchandiseEvent, NormalEvent, Participation
from events.service import notifications
from events.service.eligibility import Reasons, evaluate
from events.service.ticket_ids import issue_ticket, save_issued

logger = structlog.get_logger(__name__)


def _profile_for(user: FelicityUser) -> ParticipantProfile | None:
    return ParticipantProfile.objects.filter(user=user).first()


def _active_count(event: Event) -> int:
    return Participation.objects.filter(event=event).active().count()


def _active_participation(participant: FelicityUser, event: Event) -> Participation | None:
    return Participation.objects.filter(participant=participant, event=event).active().first()


def _pair_taken(participation: Participation) -> bool:
    return (
        Participation.objects.filter(participant_id=participation.participant_id, event_id=participation.event_id)
        .exclude(pk=participation.pk)
        .exists()
    )


def _prepare(participation: Participation, event: Event, now: datetime, **fields: t.Any) -> None:
    """Reset a (possibly reactivated) participation to a fresh registration of this event's kind."""
    participation.status = Participation.Status.REGISTERED
    participation.attendance_status = Participation.AttendanceStatus.NOT_SCANNED
    participation.cancelled_at = None
    participation.check_in_time = None
    participation.check_in_by = None
    participation.manual_override = False
    participation.override_reason = None
    participation.override_by = None
    participation.override_timestamp = None
    participation.registration_date = now
    participation.ticket_id = None
    participation.credential_payload = None
    participation.credential_image = None
    match event.kind:
        case MerchandiseEvent():
            participation.payment_status = Participation.PaymentStatus.PENDING
            participation.merchandise_selection = fields.get("merchandise_selection")
            participation.custom_field_responses = None
        case NormalEvent():
            participation.payment_status = Participation.PaymentStatus.NOT_REQUIRED
            participation.merchandise_selection = None
            participation.custom_field_responses = fields.get("custom_field_responses") or []
            issue_ticket(participation)


def register(
    participant: FelicityUser,
    event: Event,
    merchandise_selection: dict[str, t.Any] | None = None,
    custom_field_responses: list[dict[str, t.Any]] | None = None,
) -> Participation:
    """Register a participant for an event.

    Normal events get their ticket immediately; merchandise events wait for an approved payment.

    Raises:
        EligibilityError: if any registration rule rejects the request.
    """
    now = timezone.now()
    profile = _profile_for(participant)
    admission = evaluate(
        event,
        profile,
        _active_participation(participant, event),
        _active_count(event),
        now,
        merchandise_selection=merchandise_selection,
        custom_field_responses=custom_field_responses,
    )
    if not admission.allowed:
        logger.info(
            "registration_rejected",
            event_id=str(event.id),
            participant_id=str(participant.id),
            reason=admission.reason,
        )
        raise EligibilityError(admission.reason or "not eligible")

    try:
        with transaction.atomic():
            locked_event = Event.objects.select_for_update().get(pk=event.pk)
            if locked_event.registration_limit and _active_count(locked_event) >= locked_event.registration_limit:
                raise EligibilityError(Reasons.LIMIT_REACHED)
            participation = (
                Participation.objects.select_for_update()
                .filter(participant=participant, event=locked_event)
                .first()
            )
            if participation is not None and participation.status != Participation.Status.CANCELLED:
                raise EligibilityError(Reasons.ALREADY_REGISTERED)
            if participation is None:
                participation = Participation(participant=participant, event=locked_event)
            else:
                logger.info("registration_reactivated", participation_id=str(participation.pk))
            _prepare(
                participation,
                locked_event,
                now,
                merchandise_selection=merchandise_selection,
                custom_field_responses=custom_field_responses,
            )
            save_issued(participation)
            Event.objects.filter(pk=locked_event.pk).update(registration_count=F("registration_count") + 1)
    except (IntegrityError, DjangoValidationError) as e:
        if _pair_taken(participation):
            raise EligibilityError(Reasons.ALREADY_REGISTERED) from e
        raise

    logger.info(
        "registration_created",
        participation_id=str(participation.pk),
        event_id=str(event.id),
        ticket_id=participation.ticket_id,
        payment_status=participation.payment_status,
    )
    notifications.on_registered(participation)
    return participation


def cancel(participation: Participation, principal: FelicityUser) -> Participation:
    """Cancel a registration before the event starts.

    Raises:
        AuthorizationError: if the principal neither owns the registration nor is an admin.
        EligibilityError: if the event has already started.
        ConflictError: if the registration is already cancelled.
    """
    if not (participation.is_owned_by(principal) or principal.is_platform_admin):
        raise AuthorizationError("not authorized")
    event = participation.event
    now = timezone.now()
    if now >= event.start:
        raise EligibilityError("event already started")

    with transaction.atomic():
        updated = (
            Participation.objects.filter(pk=participation.pk)
            .exclude(status=Participation.Status.CANCELLED)
            .update(status=Participation.Status.CANCELLED, cancelled_at=now, updated_at=now)
        )
        if not updated:
            raise ConflictError("already cancelled")
        Event.objects.filter(pk=event.pk, registration_count__gt=0).update(
            registration_count=F("registration_count") - 1
        )

    participation.refresh_from_db()
    logger.info("registration_cancelled", participation_id=str(participation.pk), by=str(principal.id))
    notifications.on_cancelled(participation)
    return participation


@dataclass
class MyRegistrations:
    upcoming: list[Participation] = field(default_factory=list)
    completed: list[Participation] = field(default_factory=list)
    cancelled: list[Participation] = field(default_factory=list)


def my_registrations(participant: FelicityUser) -> MyRegistrations:
    """Group the participant's registrations for their dashboard."""
    now = timezone.now()
    result = MyRegistrations()
    participations = Participation.objects.filter(participant=participant).select_related("event")
    for participation in participations.order_by("event__start"):
        if participation.status == Participation.Status.CANCELLED:
            result.cancelled.append(participation)
        elif participation.event.end < now or participation.status == Participation.Status.COMPLETED:
            result.completed.append(participation)
        else:
            result.upcoming.append(participation)
    return result


def get_ticket(participation: Participation, principal: FelicityUser) -> Participation:
    """Return the participant's ticket, regenerating a missing image for the same ticket id."""
    if not participation.is_owned_by(principal):
        raise AuthorizationError("not authorized")
    if participation.ticket_id and not participation.credential_image:
        with transaction.atomic():
            locked = Participation.objects.select_for_update().select_related("participant", "event").get(
                pk=participation.pk
            )
            if not locked.credential_image:
                issue_ticket(locked)
                locked.save(update_fields=["credential_payload", "credential_image", "updated_at"])
                logger.info("credential_regenerated", ticket_id=locked.ticket_id)
        participation = locked
    return participation


class AttendanceView(BaseModel):
    participation_id: uuid.UUID
    ticket_id: str | None
    attendance_status: str
    check_in_time: datetime | None
    checked_in_by: str | None
    manual_override: bool


def attendance_status(participation: Participation, principal: FelicityUser) -> AttendanceView:
    """Attendance details, visible to the owning participant or the event organizer."""
    event = participation.event
    if not (
        participation.is_owned_by(principal) or event.organizer_id == principal.id or principal.is_platform_admin
    ):
        raise AuthorizationError("not authorized")
    return AttendanceView(
        participation_id=participation.pk,
        ticket_id=participation.ticket_id,
        attendance_status=participation.attendance_status,
        check_in_time=participation.check_in_time,
        checked_in_by=participation.check_in_by.get_display_name() if participation.check_in_by else None,
        manual_override=participation.manual_override,
    )
