"""Registration and ticket schemas."""

import typing as t
from datetime import datetime
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import Field

from common.schema import StrippedString
from events.models import Participation

from .event import MinimalEventSchema


class MerchandiseSelectionSchema(Schema):
    size: StrippedString = ""
    color: StrippedString = ""


class CustomFieldResponseSchema(Schema):
    name: StrippedString
    value: t.Any = None


class RegistrationCreateSchema(Schema):
    merchandise_selection: MerchandiseSelectionSchema | None = None
    custom_field_responses: list[CustomFieldResponseSchema] | None = None


class RegistrationCreatedSchema(Schema):
    participation_id: UUID
    ticket_id: str | None = None
    payment_status: str


class ParticipationSchema(ModelSchema):
    id: UUID
    event: MinimalEventSchema

    class Meta:
        model = Participation
        fields = [
            "id",
            "ticket_id",
            "status",
            "payment_status",
            "attendance_status",
            "check_in_time",
            "merchandise_selection",
            "custom_field_responses",
            "registration_date",
            "cancelled_at",
        ]


class MyRegistrationsSchema(Schema):
    upcoming: list[ParticipationSchema]
    completed: list[ParticipationSchema]
    cancelled: list[ParticipationSchema]


class TicketSchema(Schema):
    participation_id: UUID = Field(alias="id")
    ticket_id: str | None
    event: MinimalEventSchema
    status: str
    payment_status: str
    attendance_status: str
    credential_payload: str | None
    credential_image: str | None


class AttendanceStatusSchema(Schema):
    participation_id: UUID
    ticket_id: str | None
    attendance_status: str
    check_in_time: datetime | None
    checked_in_by: str | None
    manual_override: bool
