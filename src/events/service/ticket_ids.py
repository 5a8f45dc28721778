"""Ticket id allocation and credential issuance."""

import secrets

import structlog
from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from qrcode.exceptions import DataOverflowError

from events.exceptions import ConflictError, DependencyError
from events.models import Event, Participation
from events.service import credentials

logger = structlog.get_logger(__name__)


def _candidate(event: Event) -> str:
    return f"{settings.TICKET_ID_PREFIX}-{event.short_id}-{100000 + secrets.randbelow(900000)}"


def generate_ticket_id(event: Event) -> str:
    """Generate a ticket id unique across all participations.

    Raises:
        ConflictError: if no free id is found within TICKET_ID_MAX_ATTEMPTS tries.
    """
    for _ in range(settings.TICKET_ID_MAX_ATTEMPTS):
        ticket_id = _candidate(event)
        if not Participation.objects.filter(ticket_id=ticket_id).exists():
            return ticket_id
    logger.error("ticket_id_allocation_exhausted", event_id=str(event.id))
    raise ConflictError("could not allocate a ticket id")


def _render_image(payload: credentials.CredentialPayload) -> str:
    try:
        return credentials.render(payload)
    except (DataOverflowError, OSError, ValueError) as e:
        raise DependencyError("credential image rendering failed") from e


def issue_ticket(participation: Participation) -> Participation:
    """Attach a ticket id and credential to the participation. The caller saves it.

    An existing ticket id is reused so re-issuing always produces a credential for the
    same ticket. A rendering failure keeps the ticket id and leaves the image empty; it
    can be regenerated later.
    """
    event = participation.event
    if not participation.ticket_id:
        participation.ticket_id = generate_ticket_id(event)
    payload = credentials.encode(participation.ticket_id, participation.participant.email, event.name)
    participation.credential_payload = credentials.serialize(payload)
    try:
        participation.credential_image = _render_image(payload)
    except DependencyError:
        logger.exception("credential_image_failed", ticket_id=participation.ticket_id)
        participation.credential_image = None
    return participation


def _ticket_id_taken(participation: Participation) -> bool:
    return (
        bool(participation.ticket_id)
        and Participation.objects.filter(ticket_id=participation.ticket_id).exclude(pk=participation.pk).exists()
    )


def save_issued(participation: Participation) -> None:
    """Save a participation that carries a newly issued ticket.

    When a concurrent registration claimed the same ticket id between generation and
    insert, a new id is drawn and the save retried.

    Raises:
        ConflictError: if every one of TICKET_ID_MAX_ATTEMPTS saves collides.
    """
    for _ in range(settings.TICKET_ID_MAX_ATTEMPTS):
        try:
            with transaction.atomic():
                participation.save()
            return
        except (IntegrityError, DjangoValidationError):
            if not _ticket_id_taken(participation):
                raise
        logger.warning("ticket_id_collision", ticket_id=participation.ticket_id)
        participation.ticket_id = None
        issue_ticket(participation)
    logger.error("ticket_id_allocation_exhausted", event_id=str(participation.event_id))
    raise ConflictError("could not allocate a ticket id")
