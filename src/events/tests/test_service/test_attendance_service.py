"""Tests for the attendance dashboard and CSV export."""

import csv
import io

import pytest
from freezegun import freeze_time

from accounts.models import FelicityUser
from common.testing import FelicityUserFactory
from events.exceptions import AuthorizationError
from events.models import Event, Participation
from events.service import attendance_service, check_in_service, registration_service

pytestmark = pytest.mark.django_db


@pytest.fixture
def crowd(user_factory: FelicityUserFactory, normal_event: Event) -> list[Participation]:
    return [registration_service.register(user_factory(), normal_event) for _ in range(4)]


class TestDashboard:
    def test_empty_event(self, normal_event: Event, organizer: FelicityUser) -> None:
        result = attendance_service.dashboard(normal_event, organizer)

        assert result.total == 0
        assert result.percentage == 0.0
        assert result.participants == []

    def test_counts_and_percentage(
        self, crowd: list[Participation], normal_event: Event, organizer: FelicityUser
    ) -> None:
        check_in_service.scan(crowd[0].credential_payload or "", normal_event.id, organizer)
        check_in_service.manual_check_in(crowd[1], "badge printer jammed", organizer)

        result = attendance_service.dashboard(normal_event, organizer)

        assert result.total == 4
        assert result.checked_in == 2
        assert result.not_scanned == 2
        assert result.manual_overrides == 1
        assert result.percentage == 50.0

    def test_percentage_is_rounded_to_one_decimal(
        self, user_factory: FelicityUserFactory, normal_event: Event, organizer: FelicityUser
    ) -> None:
        people = [registration_service.register(user_factory(), normal_event) for _ in range(3)]
        check_in_service.scan(people[0].credential_payload or "", normal_event.id, organizer)

        assert attendance_service.dashboard(normal_event, organizer).percentage == 33.3

    def test_cancelled_and_unpaid_are_excluded(
        self,
        crowd: list[Participation],
        normal_event: Event,
        organizer: FelicityUser,
    ) -> None:
        registration_service.cancel(crowd[0], crowd[0].participant)
        Participation.objects.filter(pk=crowd[1].pk).update(payment_status=Participation.PaymentStatus.PENDING)

        result = attendance_service.dashboard(normal_event, organizer)

        assert result.total == 2
        assert {r.participation_id for r in result.participants} == {crowd[2].pk, crowd[3].pk}

    def test_latest_check_ins_first_then_not_scanned(
        self, crowd: list[Participation], normal_event: Event, organizer: FelicityUser
    ) -> None:
        with freeze_time("2030-01-01 10:00:00"):
            check_in_service.scan(crowd[2].credential_payload or "", normal_event.id, organizer)
        with freeze_time("2030-01-01 11:00:00"):
            check_in_service.scan(crowd[0].credential_payload or "", normal_event.id, organizer)

        rows = attendance_service.dashboard(normal_event, organizer).participants

        assert [r.participation_id for r in rows[:2]] == [crowd[0].pk, crowd[2].pk]
        assert all(r.check_in_time is None for r in rows[2:])

    def test_other_organizer_is_refused(self, normal_event: Event, other_organizer: FelicityUser) -> None:
        with pytest.raises(AuthorizationError):
            attendance_service.dashboard(normal_event, other_organizer)


class TestExportCsv:
    def test_header_and_quoting(
        self, registration: Participation, normal_event: Event, organizer: FelicityUser
    ) -> None:
        content = attendance_service.export_csv(normal_event, organizer)

        lines = content.splitlines()
        assert lines[0] == (
            '"TicketID","Name","Email","Phone","AttendanceStatus",'
            '"CheckInTime","CheckedInBy","ManualOverride","OverrideReason"'
        )
        row = next(csv.reader(io.StringIO(lines[1])))
        assert row == [
            registration.ticket_id,
            "Priya Participant",
            registration.participant.email,
            "+919876543210",
            "not-scanned",
            "N/A",
            "N/A",
            "No",
            "N/A",
        ]

    def test_manual_override_row(
        self, registration: Participation, normal_event: Event, organizer: FelicityUser
    ) -> None:
        check_in_service.manual_check_in(registration, 'said "lost phone", verified ID', organizer)

        content = attendance_service.export_csv(normal_event, organizer)

        row = list(csv.reader(io.StringIO(content)))[1]
        assert row[4] == "checked-in"
        assert row[6] == "Olga Organizer"
        assert row[7] == "Yes"
        assert row[8] == 'said "lost phone", verified ID'
        registration.refresh_from_db()
        assert row[5] == registration.check_in_time.isoformat()  # type: ignore[union-attr]

    def test_export_filename(self, normal_event: Event) -> None:
        normal_event.name = "Battle of Bands: 2026!"

        with freeze_time("2026-02-14 18:30:05"):
            assert attendance_service.export_filename(normal_event) == "attendance_Battle_of_Bands_2026_20260214183005.csv"
