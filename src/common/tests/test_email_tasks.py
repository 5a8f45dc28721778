import base64
import typing as t
from datetime import timedelta

import pytest
from django.core import mail
from django.utils import timezone
from freezegun import freeze_time

from common.models import EmailLog
from common.tasks import cleanup_email_logs, send_email, to_safe_email_address

pytestmark = pytest.mark.django_db


def test_send_email_logs_a_compressed_copy() -> None:
    send_email(to="guest@example.com", subject="Hello", body="plain body", html_body="<p>html body</p>")

    assert len(mail.outbox) == 1
    log = EmailLog.objects.get()
    assert log.subject == "Hello"
    assert log.body == "plain body"
    assert log.html == "<p>html body</p>"


def test_send_email_decodes_attachments() -> None:
    content = b"\x89PNG fake image"

    send_email(
        to=["a@example.com", "b@example.com"],
        subject="Ticket",
        body="see attached",
        attachments=[("ticket.png", base64.b64encode(content).decode(), "image/png")],
    )

    message = mail.outbox[0]
    assert message.attachments[0][0] == "ticket.png"
    assert message.attachments[0][1] == content
    assert len(message.bcc) == 2
    assert EmailLog.objects.count() == 2


def test_safe_address_rewrites_when_live_emails_disabled(settings: t.Any) -> None:
    settings.LIVE_EMAILS = False
    settings.INTERNAL_CATCHALL_EMAIL = "inbox@felicity.test"

    assert to_safe_email_address("jane.doe@example.com") == "inbox+jane_dot_doe_at_example_dot_com@felicity.test"


def test_safe_address_passes_through_when_live(settings: t.Any) -> None:
    settings.LIVE_EMAILS = True

    assert to_safe_email_address("jane@example.com") == "jane@example.com"


def test_cleanup_email_logs() -> None:
    with freeze_time(timezone.now() - timedelta(days=8)):
        send_email(to="old@example.com", subject="old", body="old")
    with freeze_time(timezone.now() - timedelta(days=2)):
        send_email(to="mid@example.com", subject="mid", body="mid")
    send_email(to="new@example.com", subject="new", body="new")

    cleanup_email_logs()

    assert set(EmailLog.objects.values_list("subject", flat=True)) == {"mid", "new"}
    assert EmailLog.objects.get(subject="mid").body is None
    assert EmailLog.objects.get(subject="new").body == "new"
