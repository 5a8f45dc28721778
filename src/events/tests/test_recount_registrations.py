import pytest
from django.core.management import CommandError, call_command

from events.models import Event, Participation

pytestmark = pytest.mark.django_db


def test_recount_fixes_drift(registration: Participation) -> None:
    Event.objects.filter(pk=registration.event_id).update(registration_count=7)

    call_command("recount_registrations")

    assert Event.objects.get(pk=registration.event_id).registration_count == 1


def test_recount_ignores_cancelled(registration: Participation) -> None:
    Participation.objects.filter(pk=registration.pk).update(status=Participation.Status.CANCELLED)

    call_command("recount_registrations", event_id=str(registration.event_id))

    assert Event.objects.get(pk=registration.event_id).registration_count == 0


def test_recount_unknown_event() -> None:
    with pytest.raises(CommandError):
        call_command("recount_registrations", event_id="00000000-0000-0000-0000-000000000000")
