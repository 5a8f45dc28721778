"""Order and payment schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import Field

from accounts.schema import MinimalUserSchema
from common.schema import StrippedString
from events.models import Order, Payment

from .event import MinimalEventSchema


class OrderCreateSchema(Schema):
    event_id: UUID
    quantity: int = Field(1, ge=1)


class PaymentUploadSchema(Schema):
    order_id: UUID
    method: Payment.PaymentMethod
    proof_image: StrippedString = Field(..., min_length=1)


class PaymentRejectSchema(Schema):
    reason: StrippedString = Field(..., min_length=1)


class PaymentSchema(ModelSchema):
    id: UUID
    order_id: UUID
    event_id: UUID
    reviewed_at: datetime | None = None

    class Meta:
        model = Payment
        fields = ["id", "amount", "payment_method", "status", "reviewed_at", "rejection_reason", "created_at"]


class PendingPaymentSchema(PaymentSchema):
    participant: MinimalUserSchema
    event: MinimalEventSchema
    proof_image: str
    quantity: int = Field(alias="order.quantity")


class OrderSchema(ModelSchema):
    id: UUID
    event: MinimalEventSchema
    total_amount: Decimal
    payment: PaymentSchema | None = None

    class Meta:
        model = Order
        fields = [
            "id",
            "quantity",
            "total_amount",
            "payment_status",
            "order_status",
            "credential_image",
            "approved_at",
            "rejection_reason",
            "created_at",
        ]

    @staticmethod
    def resolve_payment(obj: Order) -> Payment | None:
        return getattr(obj, "payment", None)
