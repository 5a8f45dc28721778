"""Payment gate for merchandise events.

A merchandise participation stays ticket-less until an organizer approves the
payment proof for one of its orders.
"""

from decimal import Decimal

import structlog
from django.db import transaction
from django.db.models import QuerySet, Sum
from django.utils import timezone

from accounts.models import FelicityUser
from events.exceptions import AuthorizationError, ConflictError, EligibilityError, NotFoundError, ValidationError
from events.models import Event, MerchandiseEvent, NormalEvent, Order, Participation, Payment
from events.service import notifications
from events.service.ticket_ids import issue_ticket, save_issued

logger = structlog.get_logger(__name__)


def _ordered_quantity(orders: QuerySet[Order]) -> int:
    return orders.exclude(payment_status=Order.PaymentStatus.REJECTED).aggregate(total=Sum("quantity"))["total"] or 0


def create_order(participant: FelicityUser, event: Event, quantity: int) -> Order:
    """Create an order for a participant whose merchandise registration awaits payment.

    Raises:
        ValidationError: if the quantity is below one.
        EligibilityError: without a pending registration, or when the purchase limit or stock is exceeded.
    """
    if quantity < 1:
        raise ValidationError("quantity must be at least 1")
    match event.kind:
        case MerchandiseEvent(options=options):
            pass
        case NormalEvent():
            raise EligibilityError("event does not sell merchandise")

    has_pending_registration = (
        Participation.objects.active()
        .filter(participant=participant, event=event, payment_status=Participation.PaymentStatus.PENDING)
        .exists()
    )
    if not has_pending_registration:
        raise EligibilityError("no registration awaiting payment")

    with transaction.atomic():
        Event.objects.select_for_update().get(pk=event.pk)
        event_orders = Order.objects.filter(event=event)
        if options.purchase_limit_per_user is not None:
            already = _ordered_quantity(event_orders.filter(participant=participant))
            if already + quantity > options.purchase_limit_per_user:
                raise EligibilityError("purchase limit exceeded")
        if options.stock is not None and _ordered_quantity(event_orders) + quantity > options.stock:
            raise EligibilityError("insufficient stock")
        order = Order.objects.create(
            participant=participant,
            event=event,
            quantity=quantity,
            total_amount=Decimal(quantity) * event.registration_fee,
        )

    logger.info("order_created", order_id=str(order.id), event_id=str(event.id), quantity=quantity)
    return order


def upload_proof(order: Order, participant: FelicityUser, method: str, proof_image: str) -> Payment:
    """Attach (or replace) the payment proof of an order.

    Raises:
        AuthorizationError: if the order belongs to someone else.
        ConflictError: if the order was already reviewed.
        ValidationError: on an unknown method or an empty proof.
    """
    if order.participant_id != participant.id:
        raise AuthorizationError("not authorized")
    if method not in Payment.PaymentMethod.values:
        raise ValidationError("invalid payment method")
    if not proof_image or not proof_image.strip():
        raise ValidationError("payment proof is required")

    with transaction.atomic():
        locked_order = Order.objects.select_for_update().get(pk=order.pk)
        if locked_order.payment_status != Order.PaymentStatus.PENDING_APPROVAL:
            raise ConflictError("already processed", already_processed=True)
        payment, created = Payment.objects.update_or_create(
            order=locked_order,
            defaults={
                "participant": participant,
                "event_id": locked_order.event_id,
                "amount": locked_order.total_amount,
                "payment_method": method,
                "proof_image": proof_image,
                "status": Payment.Status.PENDING,
                "reviewed_by": None,
                "reviewed_at": None,
                "rejection_reason": None,
            },
        )

    logger.info("payment_proof_uploaded", payment_id=str(payment.id), order_id=str(order.id), replaced=not created)
    return payment


def _ensure_reviewer(payment: Payment, reviewer: FelicityUser) -> None:
    if not (payment.event.organizer_id == reviewer.id or reviewer.is_platform_admin):
        raise AuthorizationError("not authorized")


def approve(payment: Payment, reviewer: FelicityUser) -> Payment:
    """Approve a pending payment and issue the merchandise ticket.

    Safe to retry: a participation that already holds a ticket id keeps it.

    Raises:
        AuthorizationError: if the reviewer does not run the event.
        ConflictError: if the payment was already reviewed.
        NotFoundError: if the participant has no registration for the event.
    """
    _ensure_reviewer(payment, reviewer)
    now = timezone.now()
    with transaction.atomic():
        updated = Payment.objects.filter(pk=payment.pk, status=Payment.Status.PENDING).update(
            status=Payment.Status.APPROVED, reviewed_by=reviewer, reviewed_at=now, updated_at=now
        )
        if not updated:
            raise ConflictError("already processed", already_processed=True)
        participation = (
            Participation.objects.select_for_update()
            .select_related("participant", "event")
            .filter(participant_id=payment.participant_id, event_id=payment.event_id)
            .first()
        )
        if participation is None:
            raise NotFoundError("registration not found")
        if participation.status == Participation.Status.CANCELLED:
            raise ConflictError("registration cancelled")
        issue_ticket(participation)
        participation.payment_status = Participation.PaymentStatus.PAID
        save_issued(participation)
        Order.objects.filter(pk=payment.order_id).update(
            payment_status=Order.PaymentStatus.APPROVED,
            order_status=Order.OrderStatus.SUCCESSFUL,
            credential_image=participation.credential_image,
            approved_at=now,
            updated_at=now,
        )

    payment.refresh_from_db()
    logger.info(
        "payment_approved",
        payment_id=str(payment.id),
        ticket_id=participation.ticket_id,
        reviewer_id=str(reviewer.id),
    )
    notifications.on_payment_approved(payment)
    return payment


def reject(payment: Payment, reviewer: FelicityUser, reason: str) -> Payment:
    """Reject a pending payment. The participation stays ticket-less.

    Raises:
        AuthorizationError: if the reviewer does not run the event.
        ValidationError: without a reason.
        ConflictError: if the payment was already reviewed.
    """
    _ensure_reviewer(payment, reviewer)
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("rejection reason is required")
    now = timezone.now()
    with transaction.atomic():
        updated = Payment.objects.filter(pk=payment.pk, status=Payment.Status.PENDING).update(
            status=Payment.Status.REJECTED,
            reviewed_by=reviewer,
            reviewed_at=now,
            rejection_reason=reason,
            updated_at=now,
        )
        if not updated:
            raise ConflictError("already processed", already_processed=True)
        Order.objects.filter(pk=payment.order_id).update(
            payment_status=Order.PaymentStatus.REJECTED,
            order_status=Order.OrderStatus.CANCELLED,
            rejection_reason=reason,
            updated_at=now,
        )

    payment.refresh_from_db()
    logger.info("payment_rejected", payment_id=str(payment.id), reviewer_id=str(reviewer.id))
    notifications.on_payment_rejected(payment)
    return payment


def pending_payments(reviewer: FelicityUser) -> QuerySet[Payment]:
    """Payments awaiting review for the events the reviewer runs; admins see all."""
    return (
        Payment.objects.filter(status=Payment.Status.PENDING, event__in=Event.objects.organized_by(reviewer))
        .select_related("order", "participant", "event")
        .order_by("created_at")
    )


def my_orders(participant: FelicityUser) -> QuerySet[Order]:
    return Order.objects.filter(participant=participant).select_related("event", "payment")
