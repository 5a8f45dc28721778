from uuid import UUID

from django.http import HttpResponse
from ninja_extra import api_controller, route

from common.throttling import ScanThrottle
from events import models, schema
from events.service import attendance_service, check_in_service

from .base import ERROR_RESPONSES, OrganizerAuth, TicketingController


@api_controller("/attendance", auth=OrganizerAuth, tags=["Attendance"])
class AttendanceController(TicketingController):
    def _event(self, event_id: UUID) -> models.Event:
        return self.get_or_not_found(models.Event.objects.all(), "event", event_id)

    @route.post(
        "/scan",
        url_name="scan_ticket",
        response={200: schema.CheckInResultSchema, **ERROR_RESPONSES},
        throttle=ScanThrottle(),
    )
    def scan(self, payload: schema.ScanSchema) -> models.Participation:
        """Check a participant in from the scanned QR code text.

        Scanning an already used ticket returns 400 with `already_scanned: true` plus the original
        check-in time and organizer.
        """
        return check_in_service.scan(payload.credential, payload.event_id, self.user())

    @route.post(
        "/manual-checkin",
        url_name="manual_check_in",
        response={200: schema.CheckInResultSchema, **ERROR_RESPONSES},
    )
    def manual_check_in(self, payload: schema.ManualCheckInSchema) -> models.Participation:
        """Check a participant in without a scan. A reason of at least 10 characters is required."""
        participation = self.get_or_not_found(
            models.Participation.objects.select_related("event"), "registration", payload.participation_id
        )
        return check_in_service.manual_check_in(participation, payload.reason, self.user())

    @route.get(
        "/dashboard/{event_id}",
        url_name="attendance_dashboard",
        response={200: schema.AttendanceDashboardSchema, **ERROR_RESPONSES},
    )
    def dashboard(self, event_id: UUID) -> attendance_service.AttendanceDashboard:
        """Live attendance counts and the per-participant list, latest check-ins first."""
        return attendance_service.dashboard(self._event(event_id), self.user())

    @route.get("/export/{event_id}", url_name="attendance_export", response={200: None, **ERROR_RESPONSES})
    def export(self, event_id: UUID) -> HttpResponse:
        """Download the attendance list as CSV."""
        event = self._event(event_id)
        content = attendance_service.export_csv(event, self.user())
        response = HttpResponse(content, content_type="text/csv")
        response["Content-Disposition"] = f'attachment; filename="{attendance_service.export_filename(event)}"'
        return response
