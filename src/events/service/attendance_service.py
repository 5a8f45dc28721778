"""Attendance dashboard and CSV export for organizers."""

import csv
import io
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime

from django.db.models import F
from django.utils import timezone

from accounts.models import FelicityUser
from events.exceptions import AuthorizationError
from events.models import Event, Participation

CSV_HEADER = [
    "TicketID",
    "Name",
    "Email",
    "Phone",
    "AttendanceStatus",
    "CheckInTime",
    "CheckedInBy",
    "ManualOverride",
    "OverrideReason",
]
MISSING = "N/A"


@dataclass
class AttendanceRow:
    participation_id: uuid.UUID
    name: str
    email: str
    phone: str | None
    ticket_id: str | None
    attendance_status: str
    check_in_time: datetime | None
    checked_in_by: str | None
    manual_override: bool
    override_reason: str | None


@dataclass
class AttendanceDashboard:
    event_id: uuid.UUID
    event_name: str
    total: int = 0
    checked_in: int = 0
    not_scanned: int = 0
    manual_overrides: int = 0
    percentage: float = 0.0
    participants: list[AttendanceRow] = field(default_factory=list)


def _ensure_organizer(event: Event, organizer: FelicityUser) -> None:
    if event.organizer_id != organizer.id:
        raise AuthorizationError("not authorized")


def _rows(event: Event) -> list[AttendanceRow]:
    participations = (
        Participation.objects.filter(event=event)
        .active()
        .payment_cleared()
        .with_people()
        .order_by(F("check_in_time").desc(nulls_last=True), "registration_date")
    )
    rows = []
    for p in participations:
        profile = getattr(p.participant, "participant_profile", None)
        rows.append(
            AttendanceRow(
                participation_id=p.pk,
                name=p.participant.get_display_name(),
                email=p.participant.email,
                phone=profile.contact_number if profile else None,
                ticket_id=p.ticket_id,
                attendance_status=p.attendance_status,
                check_in_time=p.check_in_time,
                checked_in_by=p.check_in_by.get_display_name() if p.check_in_by else None,
                manual_override=p.manual_override,
                override_reason=p.override_reason,
            )
        )
    return rows


def dashboard(event: Event, organizer: FelicityUser) -> AttendanceDashboard:
    """Live attendance counts for an event, over active and payment-cleared participations."""
    _ensure_organizer(event, organizer)
    rows = _rows(event)
    result = AttendanceDashboard(event_id=event.id, event_name=event.name, participants=rows)
    result.total = len(rows)
    result.checked_in = sum(1 for r in rows if r.attendance_status == Participation.AttendanceStatus.CHECKED_IN)
    result.not_scanned = result.total - result.checked_in
    result.manual_overrides = sum(1 for r in rows if r.manual_override)
    result.percentage = round(result.checked_in / result.total * 100, 1) if result.total else 0.0
    return result


def export_csv(event: Event, organizer: FelicityUser) -> str:
    """Render the attendance rows as CSV with every field quoted."""
    _ensure_organizer(event, organizer)
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for row in _rows(event):
        writer.writerow(
            [
                row.ticket_id or MISSING,
                row.name or MISSING,
                row.email or MISSING,
                row.phone or MISSING,
                row.attendance_status,
                row.check_in_time.isoformat() if row.check_in_time else MISSING,
                row.checked_in_by or MISSING,
                "Yes" if row.manual_override else "No",
                row.override_reason or MISSING,
            ]
        )
    return buffer.getvalue()


def export_filename(event: Event) -> str:
    safe_name = re.sub(r"[^A-Za-z0-9]+", "_", event.name).strip("_") or "event"
    return f"attendance_{safe_name}_{timezone.now().strftime('%Y%m%d%H%M%S')}.csv"
