"""Tests for the /registrations endpoints."""

import typing as t
from datetime import timedelta

import orjson
import pytest
from django.test.client import Client
from django.urls import reverse
from django.utils import timezone

from accounts.models import FelicityUser
from events.models import Event, Participation

pytestmark = pytest.mark.django_db


def register(client: Client, event: Event, payload: dict[str, t.Any] | None = None) -> t.Any:
    return client.post(
        reverse("api:register", kwargs={"event_id": event.id}),
        data=orjson.dumps(payload or {}),
        content_type="application/json",
    )


class TestRegister:
    def test_register_for_normal_event(self, participant_client: Client, normal_event: Event) -> None:
        response = register(participant_client, normal_event)

        assert response.status_code == 201, response.content
        data = response.json()
        participation = Participation.objects.get(pk=data["participation_id"])
        assert data["ticket_id"] == participation.ticket_id
        assert data["payment_status"] == "not_required"

    def test_register_for_merchandise_event_has_no_ticket(
        self, participant_client: Client, merch_event: Event
    ) -> None:
        response = register(participant_client, merch_event, {"merchandise_selection": {"size": "M", "color": "Black"}})

        assert response.status_code == 201, response.content
        assert response.json()["ticket_id"] is None
        assert response.json()["payment_status"] == "pending"

    def test_rejection_returns_reason(self, participant_client: Client, normal_event: Event) -> None:
        normal_event.registration_deadline = timezone.now() - timedelta(minutes=1)
        normal_event.save()

        response = register(participant_client, normal_event)

        assert response.status_code == 400
        assert response.json() == {"detail": "deadline passed"}

    def test_missing_required_field(self, participant_client: Client, normal_event: Event) -> None:
        normal_event.custom_form_fields = [{"name": "roll_number", "required": True}]
        normal_event.save()

        response = register(participant_client, normal_event, {"custom_field_responses": [{"name": "roll_number"}]})

        assert response.status_code == 400
        assert response.json()["detail"] == "missing field roll_number"

    def test_unknown_event(self, participant_client: Client) -> None:
        response = participant_client.post(
            reverse("api:register", kwargs={"event_id": "00000000-0000-0000-0000-000000000000"}),
            data=b"{}",
            content_type="application/json",
        )

        assert response.status_code == 404
        assert response.json() == {"detail": "event not found"}

    def test_organizer_cannot_register(self, organizer_client: Client, normal_event: Event) -> None:
        assert register(organizer_client, normal_event).status_code == 403


class TestMyRegistrations:
    def test_lists_upcoming(self, participant_client: Client, registration: Participation) -> None:
        response = participant_client.get(reverse("api:my_registrations"))

        assert response.status_code == 200
        data = response.json()
        assert [p["id"] for p in data["upcoming"]] == [str(registration.pk)]
        assert data["upcoming"][0]["event"]["name"] == "Hackathon"


class TestTicket:
    def test_owner_gets_ticket_with_image(self, participant_client: Client, registration: Participation) -> None:
        response = participant_client.get(reverse("api:get_ticket", kwargs={"participation_id": registration.pk}))

        assert response.status_code == 200
        data = response.json()
        assert data["participation_id"] == str(registration.pk)
        assert data["ticket_id"] == registration.ticket_id
        assert data["credential_image"].startswith("data:image/png;base64,")
        assert orjson.loads(data["credential_payload"])["ticketId"] == registration.ticket_id

    def test_other_participant_is_forbidden(
        self, other_participant_client: Client, registration: Participation
    ) -> None:
        response = other_participant_client.get(
            reverse("api:get_ticket", kwargs={"participation_id": registration.pk})
        )

        assert response.status_code == 403


class TestCancel:
    def test_owner_cancels(self, participant_client: Client, registration: Participation) -> None:
        response = participant_client.post(
            reverse("api:cancel_registration", kwargs={"participation_id": registration.pk})
        )

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

    def test_second_cancel_is_rejected(self, participant_client: Client, registration: Participation) -> None:
        url = reverse("api:cancel_registration", kwargs={"participation_id": registration.pk})
        participant_client.post(url)

        response = participant_client.post(url)

        assert response.status_code == 400
        assert response.json()["detail"] == "already cancelled"

    def test_admin_cancels(self, admin_client_jwt: Client, registration: Participation) -> None:
        response = admin_client_jwt.post(
            reverse("api:cancel_registration", kwargs={"participation_id": registration.pk})
        )

        assert response.status_code == 200

    def test_organizer_role_cannot_cancel(self, organizer_client: Client, registration: Participation) -> None:
        response = organizer_client.post(
            reverse("api:cancel_registration", kwargs={"participation_id": registration.pk})
        )

        assert response.status_code == 403


class TestAttendanceStatus:
    def test_owner_and_organizer_can_read(
        self, participant_client: Client, organizer_client: Client, registration: Participation
    ) -> None:
        url = reverse("api:registration_attendance", kwargs={"participation_id": registration.pk})

        for client in (participant_client, organizer_client):
            response = client.get(url)
            assert response.status_code == 200
            assert response.json()["attendance_status"] == "not-scanned"

    def test_other_organizer_is_forbidden(
        self, other_organizer_client: Client, registration: Participation, participant: FelicityUser
    ) -> None:
        url = reverse("api:registration_attendance", kwargs={"participation_id": registration.pk})

        assert other_organizer_client.get(url).status_code == 403
