from uuid import UUID

from ninja_extra import api_controller, route

from common.throttling import PaymentProofThrottle, WriteThrottle
from events import models, schema
from events.service import payment_service

from .base import ERROR_RESPONSES, ParticipantAuth, ReviewerAuth, TicketingController


@api_controller("/payments", auth=ReviewerAuth, tags=["Payments"])
class PaymentController(TicketingController):
    def _payment(self, payment_id: UUID) -> models.Payment:
        return self.get_or_not_found(
            models.Payment.objects.select_related("order", "event", "participant"), "payment", payment_id
        )

    @route.post(
        "/upload",
        url_name="upload_payment_proof",
        response={201: schema.PaymentSchema, **ERROR_RESPONSES},
        auth=ParticipantAuth,
        throttle=PaymentProofThrottle(),
    )
    def upload(self, payload: schema.PaymentUploadSchema) -> tuple[int, models.Payment]:
        """Upload a payment proof for an order. Re-uploading replaces the previous proof until it is reviewed."""
        order = self.get_or_not_found(models.Order.objects.all(), "order", payload.order_id)
        return 201, payment_service.upload_proof(order, self.user(), payload.method, payload.proof_image)

    @route.get("/pending", url_name="pending_payments", response=list[schema.PendingPaymentSchema])
    def pending(self) -> list[models.Payment]:
        """Payments awaiting review for the organizer's events. Admins see every event."""
        return list(payment_service.pending_payments(self.user()))

    @route.post(
        "/{payment_id}/approve",
        url_name="approve_payment",
        response={200: schema.PaymentSchema, **ERROR_RESPONSES},
        throttle=WriteThrottle(),
    )
    def approve(self, payment_id: UUID) -> models.Payment:
        """Approve a payment. This issues the participant's ticket and emails it to them."""
        return payment_service.approve(self._payment(payment_id), self.user())

    @route.post(
        "/{payment_id}/reject",
        url_name="reject_payment",
        response={200: schema.PaymentSchema, **ERROR_RESPONSES},
        throttle=WriteThrottle(),
    )
    def reject(self, payment_id: UUID, payload: schema.PaymentRejectSchema) -> models.Payment:
        """Reject a payment with a reason. The registration stays without a ticket."""
        return payment_service.reject(self._payment(payment_id), self.user(), payload.reason)
