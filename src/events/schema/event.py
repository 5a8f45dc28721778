"""Event schemas."""

from decimal import Decimal
from uuid import UUID

from ninja import ModelSchema

from events.models import Event


class MinimalEventSchema(ModelSchema):
    id: UUID
    registration_fee: Decimal

    class Meta:
        model = Event
        fields = ["id", "name", "event_type", "eligibility", "status", "start", "end", "registration_deadline"]
