"""Check-in and attendance schemas."""

from datetime import datetime
from uuid import UUID

from ninja import Schema
from pydantic import Field

from common.schema import StrippedString


class ScanSchema(Schema):
    credential: str = Field(..., min_length=1)
    event_id: UUID


class ManualCheckInSchema(Schema):
    participation_id: UUID
    reason: StrippedString


class CheckInResultSchema(Schema):
    participation_id: UUID = Field(alias="id")
    ticket_id: str | None
    participant_name: str = Field(alias="participant.display_name")
    participant_email: str = Field(alias="participant.email")
    attendance_status: str
    check_in_time: datetime | None
    manual_override: bool
    scan_count: int


class AttendanceRowSchema(Schema):
    participation_id: UUID
    name: str
    email: str
    ticket_id: str | None
    attendance_status: str
    check_in_time: datetime | None
    checked_in_by: str | None
    manual_override: bool
    override_reason: str | None


class AttendanceDashboardSchema(Schema):
    event_id: UUID
    event_name: str
    total: int
    checked_in: int
    not_scanned: int
    manual_overrides: int
    percentage: float
    participants: list[AttendanceRowSchema]
