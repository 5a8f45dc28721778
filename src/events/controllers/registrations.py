from uuid import UUID

from ninja_extra import api_controller, route

from common.throttling import WriteThrottle
from events import models, schema
from events.service import registration_service

from .base import ERROR_RESPONSES, AnyRoleAuth, CancelAuth, ParticipantAuth, TicketingController


@api_controller("/registrations", auth=ParticipantAuth, tags=["Registrations"])
class RegistrationController(TicketingController):
    def _participation(self, participation_id: UUID) -> models.Participation:
        return self.get_or_not_found(
            models.Participation.objects.select_related("participant", "event", "check_in_by"),
            "registration",
            participation_id,
        )

    @route.get("/me", url_name="my_registrations", response=schema.MyRegistrationsSchema)
    def my_registrations(self) -> registration_service.MyRegistrations:
        """List the current participant's registrations, grouped into upcoming, completed and cancelled."""
        return registration_service.my_registrations(self.user())

    @route.post(
        "/{event_id}",
        url_name="register",
        response={201: schema.RegistrationCreatedSchema, **ERROR_RESPONSES},
        throttle=WriteThrottle(),
    )
    def register(
        self, event_id: UUID, payload: schema.RegistrationCreateSchema
    ) -> tuple[int, schema.RegistrationCreatedSchema]:
        """Register for an event.

        Normal events return the ticket id right away. Merchandise events return no ticket id until
        an order's payment is approved.
        """
        event = self.get_or_not_found(models.Event.objects.all(), "event", event_id)
        participation = registration_service.register(
            self.user(),
            event,
            merchandise_selection=(
                payload.merchandise_selection.model_dump() if payload.merchandise_selection else None
            ),
            custom_field_responses=(
                [r.model_dump() for r in payload.custom_field_responses]
                if payload.custom_field_responses is not None
                else None
            ),
        )
        return 201, schema.RegistrationCreatedSchema(
            participation_id=participation.pk,
            ticket_id=participation.ticket_id,
            payment_status=participation.payment_status,
        )

    @route.get(
        "/{participation_id}/ticket",
        url_name="get_ticket",
        response={200: schema.TicketSchema, **ERROR_RESPONSES},
    )
    def get_ticket(self, participation_id: UUID) -> models.Participation:
        """Show the ticket and its QR code. A missing image is regenerated for the same ticket id."""
        return registration_service.get_ticket(self._participation(participation_id), self.user())

    @route.post(
        "/{participation_id}/cancel",
        url_name="cancel_registration",
        response={200: schema.ParticipationSchema, **ERROR_RESPONSES},
        auth=CancelAuth,
        throttle=WriteThrottle(),
    )
    def cancel(self, participation_id: UUID) -> models.Participation:
        """Cancel a registration before the event starts."""
        return registration_service.cancel(self._participation(participation_id), self.user())

    @route.get(
        "/{participation_id}/attendance",
        url_name="registration_attendance",
        response={200: schema.AttendanceStatusSchema, **ERROR_RESPONSES},
        auth=AnyRoleAuth,
    )
    def attendance(self, participation_id: UUID) -> registration_service.AttendanceView:
        """Attendance details, for the participant who owns the registration or the event organizer."""
        return registration_service.attendance_status(self._participation(participation_id), self.user())
