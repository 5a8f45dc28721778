"""Tests for the /orders and /payments endpoints."""

import typing as t
from decimal import Decimal

import orjson
import pytest
from django.test.client import Client
from django.urls import reverse

from events.models import Event, Order, Participation, Payment

pytestmark = pytest.mark.django_db


def post_json(client: Client, url: str, payload: dict[str, t.Any]) -> t.Any:
    return client.post(url, data=orjson.dumps(payload), content_type="application/json")


class TestOrders:
    def test_create_order(
        self, participant_client: Client, merch_event: Event, merch_registration: Participation
    ) -> None:
        response = post_json(
            participant_client, reverse("api:create_order"), {"event_id": str(merch_event.id), "quantity": 3}
        )

        assert response.status_code == 201, response.content
        data = response.json()
        assert data["quantity"] == 3
        assert Decimal(data["total_amount"]) == Decimal("1500")
        assert data["payment_status"] == "pending_approval"
        assert data["payment"] is None

    def test_zero_quantity_fails_schema_validation(
        self, participant_client: Client, merch_event: Event, merch_registration: Participation
    ) -> None:
        response = post_json(
            participant_client, reverse("api:create_order"), {"event_id": str(merch_event.id), "quantity": 0}
        )

        assert response.status_code == 422

    def test_limit_exceeded(
        self, participant_client: Client, merch_event: Event, merch_registration: Participation
    ) -> None:
        response = post_json(
            participant_client, reverse("api:create_order"), {"event_id": str(merch_event.id), "quantity": 4}
        )

        assert response.status_code == 400
        assert response.json() == {"detail": "purchase limit exceeded"}

    def test_my_orders_include_payment(self, participant_client: Client, payment: Payment) -> None:
        response = participant_client.get(reverse("api:my_orders"))

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["payment"]["status"] == "pending"


class TestUpload:
    def test_upload_proof(self, participant_client: Client, order: Order) -> None:
        response = post_json(
            participant_client,
            reverse("api:upload_payment_proof"),
            {"order_id": str(order.id), "method": "Bank Transfer", "proof_image": "data:image/png;base64,AAAA"},
        )

        assert response.status_code == 201, response.content
        assert response.json()["payment_method"] == "Bank Transfer"
        assert Decimal(response.json()["amount"]) == Decimal("1000")

    def test_unknown_method_fails_schema_validation(self, participant_client: Client, order: Order) -> None:
        response = post_json(
            participant_client,
            reverse("api:upload_payment_proof"),
            {"order_id": str(order.id), "method": "Barter", "proof_image": "x"},
        )

        assert response.status_code == 422

    def test_upload_after_approval_is_flagged(
        self, participant_client: Client, organizer_client: Client, order: Order, payment: Payment
    ) -> None:
        organizer_client.post(reverse("api:approve_payment", kwargs={"payment_id": payment.pk}))

        response = post_json(
            participant_client,
            reverse("api:upload_payment_proof"),
            {"order_id": str(order.id), "method": "UPI", "proof_image": "x"},
        )

        assert response.status_code == 400
        assert response.json() == {"detail": "already processed", "already_processed": True}


class TestReview:
    def test_pending_list(self, organizer_client: Client, payment: Payment) -> None:
        response = organizer_client.get(reverse("api:pending_payments"))

        assert response.status_code == 200
        data = response.json()
        assert [p["id"] for p in data] == [str(payment.pk)]
        assert data[0]["quantity"] == 2
        assert data[0]["proof_image"] == "data:image/png;base64,AAAA"
        assert data[0]["participant"]["email"] == payment.participant.email

    def test_pending_list_is_empty_for_other_organizer(
        self, other_organizer_client: Client, payment: Payment
    ) -> None:
        assert other_organizer_client.get(reverse("api:pending_payments")).json() == []

    def test_participant_cannot_review(self, participant_client: Client, payment: Payment) -> None:
        response = participant_client.post(reverse("api:approve_payment", kwargs={"payment_id": payment.pk}))

        assert response.status_code == 403

    def test_approve_issues_ticket(self, organizer_client: Client, payment: Payment) -> None:
        response = organizer_client.post(reverse("api:approve_payment", kwargs={"payment_id": payment.pk}))

        assert response.status_code == 200
        assert response.json()["status"] == "approved"
        participation = Participation.objects.get(participant=payment.participant, event=payment.event)
        assert participation.ticket_id
        assert participation.payment_status == Participation.PaymentStatus.PAID

    def test_approve_twice(self, organizer_client: Client, payment: Payment) -> None:
        url = reverse("api:approve_payment", kwargs={"payment_id": payment.pk})
        organizer_client.post(url)

        response = organizer_client.post(url)

        assert response.status_code == 400
        assert response.json()["already_processed"] is True

    def test_admin_approves(self, admin_client_jwt: Client, payment: Payment) -> None:
        response = admin_client_jwt.post(reverse("api:approve_payment", kwargs={"payment_id": payment.pk}))

        assert response.status_code == 200

    def test_other_organizer_cannot_approve(self, other_organizer_client: Client, payment: Payment) -> None:
        response = other_organizer_client.post(reverse("api:approve_payment", kwargs={"payment_id": payment.pk}))

        assert response.status_code == 403
        assert response.json() == {"detail": "not authorized"}

    def test_reject(self, organizer_client: Client, payment: Payment) -> None:
        response = post_json(
            organizer_client,
            reverse("api:reject_payment", kwargs={"payment_id": payment.pk}),
            {"reason": "screenshot is cropped"},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "rejected"
        assert response.json()["rejection_reason"] == "screenshot is cropped"

    def test_unknown_payment(self, organizer_client: Client) -> None:
        response = organizer_client.post(
            reverse("api:approve_payment", kwargs={"payment_id": "00000000-0000-0000-0000-000000000000"})
        )

        assert response.status_code == 404
        assert response.json() == {"detail": "payment not found"}
