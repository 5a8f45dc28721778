"""Events schema package."""

from .attendance import (
    AttendanceDashboardSchema,
    AttendanceRowSchema,
    CheckInResultSchema,
    ManualCheckInSchema,
    ScanSchema,
)
from .event import MinimalEventSchema
from .payment import (
    OrderCreateSchema,
    OrderSchema,
    PaymentRejectSchema,
    PaymentSchema,
    PaymentUploadSchema,
    PendingPaymentSchema,
)
from .registration import (
    AttendanceStatusSchema,
    CustomFieldResponseSchema,
    MerchandiseSelectionSchema,
    MyRegistrationsSchema,
    ParticipationSchema,
    RegistrationCreatedSchema,
    RegistrationCreateSchema,
    TicketSchema,
)

__all__ = [
    "AttendanceDashboardSchema",
    "AttendanceRowSchema",
    "AttendanceStatusSchema",
    "CheckInResultSchema",
    "CustomFieldResponseSchema",
    "ManualCheckInSchema",
    "MerchandiseSelectionSchema",
    "MinimalEventSchema",
    "MyRegistrationsSchema",
    "OrderCreateSchema",
    "OrderSchema",
    "ParticipationSchema",
    "PaymentRejectSchema",
    "PaymentSchema",
    "PaymentUploadSchema",
    "PendingPaymentSchema",
    "RegistrationCreateSchema",
    "RegistrationCreatedSchema",
    "ScanSchema",
    "TicketSchema",
]
