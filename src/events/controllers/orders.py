from ninja_extra import api_controller, route

from common.throttling import WriteThrottle
from events import models, schema
from events.service import payment_service

from .base import ERROR_RESPONSES, ParticipantAuth, TicketingController


@api_controller("/orders", auth=ParticipantAuth, tags=["Orders"])
class OrderController(TicketingController):
    @route.post(
        "",
        url_name="create_order",
        response={201: schema.OrderSchema, **ERROR_RESPONSES},
        throttle=WriteThrottle(),
    )
    def create_order(self, payload: schema.OrderCreateSchema) -> tuple[int, models.Order]:
        """Order merchandise for an event the participant registered for and has not yet paid."""
        event = self.get_or_not_found(models.Event.objects.all(), "event", payload.event_id)
        order = payment_service.create_order(self.user(), event, payload.quantity)
        return 201, models.Order.objects.select_related("event").get(pk=order.pk)

    @route.get("/me", url_name="my_orders", response=list[schema.OrderSchema])
    def my_orders(self) -> list[models.Order]:
        """List the participant's orders with their payment, newest first."""
        return list(payment_service.my_orders(self.user()))
