# src/events/admin/__init__.py
"""Events admin module.

Django autodiscover imports this module, which registers every admin class
through the @admin.register decorators in the submodules.
"""

from events.admin.event import EventAdmin
from events.admin.participation import AttendanceOverrideAdmin, ParticipationAdmin
from events.admin.payment import OrderAdmin, PaymentAdmin

__all__ = ["AttendanceOverrideAdmin", "EventAdmin", "OrderAdmin", "ParticipationAdmin", "PaymentAdmin"]
