"""Celery tasks for participant notifications.

Every task loads its records by id and sends a single email through
``common.tasks.send_email``.
"""

import typing as t

import structlog
from celery import shared_task
from django.conf import settings
from django.template.loader import render_to_string
from django.utils.translation import gettext as _

from common.tasks import Attachment, send_email

from .models import Participation, Payment

logger = structlog.get_logger(__name__)


def _qr_attachment(ticket_id: str, credential_image: str | None) -> list[Attachment]:
    if not credential_image or "," not in credential_image:
        return []
    _header, encoded = credential_image.split(",", 1)
    return [(f"ticket_{ticket_id}.png", encoded, "image/png")]


def _base_context(participation: Participation) -> dict[str, t.Any]:
    return {
        "participant_name": participation.participant.get_display_name(),
        "event_name": participation.event.name,
        "event_start": participation.event.start,
        "ticket_id": participation.ticket_id,
        "site_name": settings.SITE_NAME,
    }


@shared_task
def send_registration_confirmation(participation_id: str) -> None:
    """Email the participant their registration confirmation, with the QR code when issued."""
    participation = Participation.objects.select_related("participant", "event").get(pk=participation_id)
    logger.info("registration_confirmation_sending", participation_id=participation_id)
    context = {**_base_context(participation), "credential_image": participation.credential_image}
    subject = _("Registration confirmed: %(event_name)s") % {"event_name": participation.event.name}
    send_email(
        to=participation.participant.email,
        subject=subject,
        body=render_to_string("events/emails/registration_confirmation_body.txt", context),
        html_body=render_to_string("events/emails/registration_confirmation_body.html", context),
        attachments=_qr_attachment(participation.ticket_id or "", participation.credential_image),
    )
    logger.info("registration_confirmation_sent", participation_id=participation_id)


@shared_task
def send_payment_approved(payment_id: str) -> None:
    """Email the participant their merchandise ticket after payment approval."""
    payment = Payment.objects.select_related("order", "participant", "event").get(pk=payment_id)
    participation = Participation.objects.select_related("participant", "event").get(
        participant_id=payment.participant_id, event_id=payment.event_id
    )
    logger.info("payment_approved_email_sending", payment_id=payment_id)
    context = {
        **_base_context(participation),
        "amount": payment.amount,
        "order_id": payment.order_id,
        "quantity": payment.order.quantity,
    }
    subject = _("Payment approved: %(event_name)s") % {"event_name": payment.event.name}
    send_email(
        to=payment.participant.email,
        subject=subject,
        body=render_to_string("events/emails/payment_approved_body.txt", context),
        attachments=_qr_attachment(participation.ticket_id or "", participation.credential_image),
    )
    logger.info("payment_approved_email_sent", payment_id=payment_id)


@shared_task
def send_payment_rejected(payment_id: str) -> None:
    """Tell the participant their payment proof was rejected and why."""
    payment = Payment.objects.select_related("participant", "event").get(pk=payment_id)
    context = {
        "participant_name": payment.participant.get_display_name(),
        "event_name": payment.event.name,
        "order_id": payment.order_id,
        "reason": payment.rejection_reason,
        "site_name": settings.SITE_NAME,
    }
    subject = _("Payment rejected: %(event_name)s") % {"event_name": payment.event.name}
    send_email(
        to=payment.participant.email,
        subject=subject,
        body=render_to_string("events/emails/payment_rejected_body.txt", context),
    )
    logger.info("payment_rejected_email_sent", payment_id=payment_id)


@shared_task
def send_cancellation_notice(participation_id: str) -> None:
    """Confirm a cancelled registration to the participant."""
    participation = Participation.objects.select_related("participant", "event").get(pk=participation_id)
    subject = _("Registration cancelled: %(event_name)s") % {"event_name": participation.event.name}
    send_email(
        to=participation.participant.email,
        subject=subject,
        body=render_to_string("events/emails/registration_cancelled_body.txt", _base_context(participation)),
    )
    logger.info("cancellation_notice_sent", participation_id=participation_id)
