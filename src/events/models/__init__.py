from .event import CustomFormField, Event, EventKind, MerchandiseEvent, MerchandiseOptions, NormalEvent
from .order import Order, Payment
from .participation import AttendanceOverride, Participation

__all__ = [
    "AttendanceOverride",
    "CustomFormField",
    "Event",
    "EventKind",
    "MerchandiseEvent",
    "MerchandiseOptions",
    "NormalEvent",
    "Order",
    "Participation",
    "Payment",
]
