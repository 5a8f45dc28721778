"""Tests for scanning and manual check-in."""

from unittest.mock import patch

import orjson
import pytest

from accounts.models import FelicityUser
from events.exceptions import AuthorizationError, CodecError, ConflictError, NotFoundError, ValidationError
from events.models import AttendanceOverride, Event, Participation, Payment
from events.service import check_in_service, payment_service, registration_service

pytestmark = pytest.mark.django_db


def credential_of(participation: Participation) -> str:
    assert participation.credential_payload
    return participation.credential_payload


class TestScan:
    def test_first_scan_checks_in(self, registration: Participation, organizer: FelicityUser) -> None:
        result = check_in_service.scan(credential_of(registration), registration.event_id, organizer)

        assert result.attendance_status == Participation.AttendanceStatus.CHECKED_IN
        assert result.status == Participation.Status.COMPLETED
        assert result.check_in_time is not None
        assert result.check_in_by == organizer
        assert result.scan_count == 1
        assert result.manual_override is False

    def test_second_scan_reports_original_check_in(
        self, registration: Participation, organizer: FelicityUser
    ) -> None:
        first = check_in_service.scan(credential_of(registration), registration.event_id, organizer)

        with pytest.raises(ConflictError) as exc_info:
            check_in_service.scan(credential_of(registration), registration.event_id, organizer)

        assert exc_info.value.message == "already scanned"
        assert exc_info.value.flags["already_scanned"] is True
        assert exc_info.value.flags["check_in_time"] == first.check_in_time.isoformat()  # type: ignore[union-attr]
        assert exc_info.value.flags["check_in_by"] == "Olga Organizer"
        registration.refresh_from_db()
        assert registration.scan_count == 1

    def test_garbage_credential(self, registration: Participation, organizer: FelicityUser) -> None:
        with pytest.raises(CodecError, match="invalid format"):
            check_in_service.scan("{not json", registration.event_id, organizer)

    def test_credential_marked_invalid_fails_verification(
        self, registration: Participation, organizer: FelicityUser
    ) -> None:
        data = orjson.loads(credential_of(registration))
        data["valid"] = False

        with pytest.raises(ValidationError, match="verification failed"):
            check_in_service.scan(orjson.dumps(data).decode(), registration.event_id, organizer)

    def test_unknown_ticket(self, registration: Participation, organizer: FelicityUser) -> None:
        data = orjson.loads(credential_of(registration))
        data["ticketId"] = "FEL-000000-999999"

        with pytest.raises(NotFoundError, match="ticket not found"):
            check_in_service.scan(orjson.dumps(data).decode(), registration.event_id, organizer)

    def test_wrong_event(self, registration: Participation, organizer: FelicityUser, merch_event: Event) -> None:
        with pytest.raises(ValidationError, match="not valid for this event"):
            check_in_service.scan(credential_of(registration), merch_event.id, organizer)

    def test_other_organizer_is_refused(self, registration: Participation, other_organizer: FelicityUser) -> None:
        with pytest.raises(AuthorizationError):
            check_in_service.scan(credential_of(registration), registration.event_id, other_organizer)

    def test_email_mismatch(self, registration: Participation, organizer: FelicityUser) -> None:
        data = orjson.loads(credential_of(registration))
        data["participantEmail"] = "someone.else@example.com"

        with pytest.raises(ValidationError, match="email mismatch"):
            check_in_service.scan(orjson.dumps(data).decode(), registration.event_id, organizer)

    def test_cancelled_ticket(
        self, registration: Participation, participant: FelicityUser, organizer: FelicityUser
    ) -> None:
        registration_service.cancel(registration, participant)

        with pytest.raises(ValidationError, match="ticket cancelled"):
            check_in_service.scan(credential_of(registration), registration.event_id, organizer)

    def test_pending_payment(self, payment: Payment, organizer: FelicityUser) -> None:
        payment_service.approve(payment, organizer)
        participation = Participation.objects.get(participant=payment.participant, event=payment.event)
        Participation.objects.filter(pk=participation.pk).update(payment_status=Participation.PaymentStatus.PENDING)

        with pytest.raises(ValidationError, match="payment pending"):
            check_in_service.scan(credential_of(participation), participation.event_id, organizer)

    def test_paid_merchandise_ticket_scans(self, payment: Payment, organizer: FelicityUser) -> None:
        payment_service.approve(payment, organizer)
        participation = Participation.objects.get(participant=payment.participant, event=payment.event)

        result = check_in_service.scan(credential_of(participation), participation.event_id, organizer)

        assert result.attendance_status == Participation.AttendanceStatus.CHECKED_IN

    def test_concurrent_scan_loses_the_race(self, registration: Participation, organizer: FelicityUser) -> None:
        """A scan that passed the checks but lost the conditional update reports already scanned."""

        def other_device_scans_first(participation: Participation) -> None:
            Participation.objects.filter(pk=participation.pk).update(
                attendance_status=Participation.AttendanceStatus.CHECKED_IN,
                check_in_time=participation.created_at,
                check_in_by=organizer,
                scan_count=1,
            )

        original = check_in_service._reject_unscannable
        calls = []

        def reject_then_race(participation: Participation) -> None:
            calls.append(participation.pk)
            if len(calls) == 1:
                original(participation)
                other_device_scans_first(participation)
                return
            original(participation)

        with patch.object(check_in_service, "_reject_unscannable", side_effect=reject_then_race):
            with pytest.raises(ConflictError) as exc_info:
                check_in_service.scan(credential_of(registration), registration.event_id, organizer)

        assert exc_info.value.flags["already_scanned"] is True
        registration.refresh_from_db()
        assert registration.scan_count == 1


class TestManualCheckIn:
    REASON = "QR code damaged at the gate"

    def test_manual_check_in_records_override(self, registration: Participation, organizer: FelicityUser) -> None:
        result = check_in_service.manual_check_in(registration, self.REASON, organizer)

        assert result.attendance_status == Participation.AttendanceStatus.CHECKED_IN
        assert result.manual_override is True
        assert result.override_reason == self.REASON
        assert result.override_by == organizer
        assert result.override_timestamp is not None
        assert result.check_in_by == organizer
        audit = AttendanceOverride.objects.get(participation=registration)
        assert audit.reason == self.REASON
        assert audit.was_already_checked_in is False
        assert audit.participation_status == Participation.Status.REGISTERED

    def test_reason_is_stripped_before_length_check(
        self, registration: Participation, organizer: FelicityUser
    ) -> None:
        with pytest.raises(ValidationError, match="reason too short"):
            check_in_service.manual_check_in(registration, "   short    ", organizer)
        assert not AttendanceOverride.objects.exists()

    def test_other_organizer_is_refused(self, registration: Participation, other_organizer: FelicityUser) -> None:
        with pytest.raises(AuthorizationError):
            check_in_service.manual_check_in(registration, self.REASON, other_organizer)

    def test_override_after_scan_keeps_first_check_in(
        self, registration: Participation, organizer: FelicityUser
    ) -> None:
        scanned = check_in_service.scan(credential_of(registration), registration.event_id, organizer)

        result = check_in_service.manual_check_in(registration, "wristband reissued at desk", organizer)

        assert result.check_in_time == scanned.check_in_time
        assert result.manual_override is True
        assert AttendanceOverride.objects.get(participation=registration).was_already_checked_in is True

    def test_override_can_be_reapplied(self, registration: Participation, organizer: FelicityUser) -> None:
        check_in_service.manual_check_in(registration, self.REASON, organizer)
        result = check_in_service.manual_check_in(registration, "second confirmation by lead", organizer)

        assert result.override_reason == "second confirmation by lead"
        assert AttendanceOverride.objects.filter(participation=registration).count() == 2

    def test_override_on_cancelled_registration_is_audited(
        self,
        registration: Participation,
        participant: FelicityUser,
        other_participant: FelicityUser,
        organizer: FelicityUser,
    ) -> None:
        event = registration.event
        event.registration_limit = 1
        event.save(update_fields=["registration_limit"])
        registration_service.cancel(registration, participant)
        registration_service.register(other_participant, event)

        result = check_in_service.manual_check_in(registration, self.REASON, organizer)

        audit = AttendanceOverride.objects.get(participation=registration)
        assert audit.participation_status == Participation.Status.CANCELLED
        assert result.status == Participation.Status.CANCELLED
        assert result.attendance_status == Participation.AttendanceStatus.CHECKED_IN
        assert result.manual_override is True
        assert Participation.objects.active().filter(event=event).count() == 1
