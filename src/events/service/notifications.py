"""Best-effort notification dispatch.

Notifications are queued after the surrounding transaction commits. A failure to
queue is logged and never reaches the caller.
"""

import structlog
from celery import Task
from django.db import transaction

from events import tasks
from events.models import Participation, Payment

logger = structlog.get_logger(__name__)


def _dispatch(task: Task, notification: str, **kwargs: str) -> None:
    try:
        task.delay(**kwargs)
    except Exception:
        logger.exception("notification_dispatch_failed", notification=notification, **kwargs)


def _after_commit(task: Task, notification: str, **kwargs: str) -> None:
    transaction.on_commit(lambda: _dispatch(task, notification, **kwargs))


def on_registered(participation: Participation) -> None:
    _after_commit(tasks.send_registration_confirmation, "on_registered", participation_id=str(participation.pk))


def on_payment_approved(payment: Payment) -> None:
    _after_commit(tasks.send_payment_approved, "on_payment_approved", payment_id=str(payment.pk))


def on_payment_rejected(payment: Payment) -> None:
    _after_commit(tasks.send_payment_rejected, "on_payment_rejected", payment_id=str(payment.pk))


def on_cancelled(participation: Participation) -> None:
    _after_commit(tasks.send_cancellation_notice, "on_cancelled", participation_id=str(participation.pk))
