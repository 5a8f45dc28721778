"""Check-in state machine.

A participation moves from not-scanned to checked-in exactly once through the scan
path. Manual overrides may be re-applied and are audited.
"""

import typing as t
import uuid

import structlog
from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from accounts.models import FelicityUser
from events.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from events.models import AttendanceOverride, Participation
from events.service import credentials

logger = structlog.get_logger(__name__)


def _ensure_organizer(participation: Participation, organizer: FelicityUser) -> None:
    if participation.event.organizer_id != organizer.id:
        raise AuthorizationError("not authorized")


def _reject_unscannable(participation: Participation) -> None:
    """Raise for the states that block a scan: cancelled, unpaid, already checked in."""
    if participation.status == Participation.Status.CANCELLED:
        raise ValidationError("ticket cancelled")
    if participation.payment_status == Participation.PaymentStatus.PENDING:
        raise ValidationError("payment pending")
    if participation.attendance_status == Participation.AttendanceStatus.CHECKED_IN:
        raise ConflictError(
            "already scanned",
            already_scanned=True,
            check_in_time=participation.check_in_time.isoformat() if participation.check_in_time else None,
            check_in_by=participation.check_in_by.get_display_name() if participation.check_in_by else None,
        )


def scan(credential_text: str, event_id: uuid.UUID, organizer: FelicityUser) -> Participation:
    """Validate a scanned credential and check the participant in.

    Raises:
        CodecError: if the credential cannot be decoded.
        ValidationError: on a failed verification, wrong event, email mismatch, or a cancelled or unpaid ticket.
        NotFoundError: if no participation holds the ticket id.
        AuthorizationError: if the organizer does not run the event.
        ConflictError: if the ticket was already scanned.
    """
    payload = credentials.decode(credential_text)
    if not credentials.verify(payload):
        raise ValidationError("verification failed")

    participation = (
        Participation.objects.select_related("participant", "event", "check_in_by")
        .filter(ticket_id=payload.ticket_id)
        .first()
    )
    if participation is None:
        raise NotFoundError("ticket not found")
    if participation.event_id != event_id:
        raise ValidationError("not valid for this event")
    _ensure_organizer(participation, organizer)
    if participation.participant.email != payload.participant_email:
        logger.warning("scan_email_mismatch", ticket_id=payload.ticket_id, event_id=str(event_id))
        raise ValidationError("email mismatch")
    _reject_unscannable(participation)

    now = timezone.now()
    updated = (
        Participation.objects.filter(
            pk=participation.pk, attendance_status=Participation.AttendanceStatus.NOT_SCANNED
        )
        .exclude(status=Participation.Status.CANCELLED)
        .exclude(payment_status=Participation.PaymentStatus.PENDING)
        .update(
            attendance_status=Participation.AttendanceStatus.CHECKED_IN,
            check_in_time=now,
            check_in_by=organizer,
            status=Participation.Status.COMPLETED,
            scan_count=F("scan_count") + 1,
            updated_at=now,
        )
    )
    participation = Participation.objects.select_related("participant", "event", "check_in_by").get(
        pk=participation.pk
    )
    if not updated:
        # the row changed after the checks above
        _reject_unscannable(participation)
        raise ConflictError("already scanned", already_scanned=True)

    logger.info(
        "ticket_scanned",
        ticket_id=participation.ticket_id,
        event_id=str(event_id),
        organizer_id=str(organizer.id),
    )
    return participation


def manual_check_in(participation: Participation, reason: str, organizer: FelicityUser) -> Participation:
    """Check a participant in by hand, with a mandatory audit reason.

    Re-applying an override is allowed. The first check-in time and organizer are kept.

    Raises:
        ValidationError: if the reason is too short.
        AuthorizationError: if the organizer does not run the event.
    """
    reason = (reason or "").strip()
    if len(reason) < settings.MANUAL_CHECK_IN_MIN_REASON_LENGTH:
        raise ValidationError("reason too short")
    _ensure_organizer(participation, organizer)

    now = timezone.now()
    with transaction.atomic():
        locked = Participation.objects.select_for_update().get(pk=participation.pk)
        was_checked_in = locked.attendance_status == Participation.AttendanceStatus.CHECKED_IN
        previous_status = locked.status
        if previous_status == Participation.Status.CANCELLED:
            logger.warning("manual_check_in_on_cancelled", participation_id=str(locked.pk))

        extra: dict[str, t.Any] = {}
        if locked.check_in_time is None or locked.check_in_by_id is None:
            extra.update(check_in_time=now, check_in_by=organizer)
        # a cancelled record keeps its status
        if previous_status != Participation.Status.CANCELLED:
            extra["status"] = Participation.Status.COMPLETED
        Participation.objects.filter(pk=locked.pk).update(
            attendance_status=Participation.AttendanceStatus.CHECKED_IN,
            manual_override=True,
            override_reason=reason,
            override_by=organizer,
            override_timestamp=now,
            scan_count=F("scan_count") + 1,
            updated_at=now,
            **extra,
        )
        AttendanceOverride.objects.create(
            participation=locked,
            overridden_by=organizer,
            reason=reason,
            was_already_checked_in=was_checked_in,
            participation_status=previous_status,
        )

    logger.info(
        "manual_check_in",
        participation_id=str(participation.pk),
        organizer_id=str(organizer.id),
        was_already_checked_in=was_checked_in,
    )
    return Participation.objects.select_related("participant", "event", "check_in_by", "override_by").get(
        pk=participation.pk
    )
