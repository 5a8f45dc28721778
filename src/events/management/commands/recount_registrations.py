# src/events/management/commands/recount_registrations.py

import typing as t

import structlog
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from events.models import Event, Participation

logger = structlog.get_logger(__name__)


class Command(BaseCommand):
    """Recompute the cached registration_count of events from their active participations."""

    help = "Recompute Event.registration_count from non-cancelled participations."

    def add_arguments(self, parser: t.Any) -> None:
        """Add command arguments.

        Args:
            parser: The argument parser.
        """
        parser.add_argument("--event", dest="event_id", help="Only recount this event id.")

    def handle(self, *args: t.Any, **options: t.Any) -> None:
        """Execute the recount.

        Raises:
            CommandError: If the given event does not exist.
        """
        events = Event.objects.all()
        if options.get("event_id"):
            events = events.filter(pk=options["event_id"])
            if not events.exists():
                raise CommandError(f"Event {options['event_id']} does not exist.")

        fixed = 0
        for event_id in events.values_list("id", flat=True):
            with transaction.atomic():
                event = Event.objects.select_for_update().get(pk=event_id)
                actual = Participation.objects.filter(event=event).active().count()
                if event.registration_count != actual:
                    logger.warning(
                        "registration_count_drift",
                        event_id=str(event.id),
                        cached=event.registration_count,
                        actual=actual,
                    )
                    Event.objects.filter(pk=event.pk).update(registration_count=actual)
                    fixed += 1

        self.stdout.write(self.style.SUCCESS(f"Recounted registrations, corrected {fixed} event(s)."))
