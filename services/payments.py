"""
Simulated payments and the booking status changes they drive.

Payment and booking rows are always written in one transaction: readers never
see a completed payment next to a pending booking, or a failed/refunded
payment next to a live one.
"""
import logging
import uuid
from decimal import Decimal, InvalidOperation

from models import db
from models.booking import STATUS_CANCELLED, STATUS_CONFIRMED, Booking
from models.location import Location
from models.payment import (
    BLOCKING_PAYMENT_STATUSES,
    PAYMENT_COMPLETED,
    PAYMENT_FAILED,
    PAYMENT_REFUNDED,
    PAYMENT_STATUSES,
    Payment,
)
from models.space import Space
from models.user import ROLE_MANAGER
from security.capabilities import CREATE_PAYMENT, PAY_FOR_CLIENT, UPDATE_PAYMENT_STATUS, VIEW_PAYMENT
from security.rbac import authorize
from services.booking_status import apply_transition, ensure_transition
from utils.errors import Conflict, NotFound, ValidationError
from utils.transactions import transaction

logger = logging.getLogger(__name__)

# booking status implied by each payment status
BOOKING_STATUS_FOR_PAYMENT = {
    PAYMENT_COMPLETED: STATUS_CONFIRMED,
    PAYMENT_FAILED: STATUS_CANCELLED,
    PAYMENT_REFUNDED: STATUS_CANCELLED,
}


def parse_amount(value) -> Decimal:
    if value is None or isinstance(value, bool):
        raise ValidationError("amount is required")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError("amount must be a number")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("amount must be a positive number")
    return amount


def create_payment(actor, booking_id, amount, payment_method, transaction_id=None):
    if not booking_id or amount is None or not payment_method:
        raise ValidationError("booking_id, amount and payment_method are required")
    amount = parse_amount(amount)

    with transaction():
        booking = Booking.query.filter_by(id=booking_id).with_for_update().first()
        if booking is None:
            raise NotFound("Booking not found")
        if booking.user_id == actor.id:
            authorize(actor, CREATE_PAYMENT, booking)
        else:
            # staff settling a client's booking at the desk
            authorize(actor, PAY_FOR_CLIENT, booking)
            transaction_id = transaction_id or f"MANAGER_{booking.id}_{uuid.uuid4().hex[:12]}"
        ensure_transition(booking.status, STATUS_CONFIRMED)

        existing = (
            Payment.query
            .filter(Payment.booking_id == booking.id, Payment.status.in_(BLOCKING_PAYMENT_STATUSES))
            .first()
        )
        if existing is not None:
            raise Conflict("This booking already has a payment in progress or completed")

        # exact match, no rounding tolerance
        if amount != booking.total_price:
            raise ValidationError(
                f"Payment amount ({amount}) does not match the booking total ({booking.total_price})"
            )

        apply_transition(booking, STATUS_CONFIRMED)
        payment = Payment(
            booking_id=booking.id,
            amount=amount,
            payment_method=str(payment_method).strip(),
            status=PAYMENT_COMPLETED,
            transaction_id=transaction_id or None,
        )
        db.session.add(payment)
        db.session.flush()

    logger.info(
        "payment %s recorded for booking %s by user %s, booking confirmed", payment.id, booking_id, actor.id,
    )
    return payment


def update_payment_status(actor, payment_id, status):
    if not status:
        raise ValidationError("status is required")
    if status not in PAYMENT_STATUSES:
        raise ValidationError(f"Invalid status. Allowed: {', '.join(PAYMENT_STATUSES)}")

    with transaction():
        payment = Payment.query.filter_by(id=payment_id).with_for_update().first()
        if payment is None:
            raise NotFound("Payment not found")
        authorize(actor, UPDATE_PAYMENT_STATUS, payment)

        # the booking may have been cancelled since the payment was taken
        booking = Booking.query.filter_by(id=payment.booking_id).with_for_update().first()
        apply_transition(booking, BOOKING_STATUS_FOR_PAYMENT[status])

        previous = payment.status
        payment.status = status

    logger.info(
        "payment %s status %s -> %s; booking %s now %s",
        payment.id, previous, status, booking.id, booking.status,
    )
    return payment, previous


def scoped_query(actor):
    q = Payment.query.join(Booking, Payment.booking_id == Booking.id)
    if actor.is_admin:
        return q
    if actor.role == ROLE_MANAGER:
        return (
            q.join(Space, Booking.space_id == Space.id)
            .join(Location, Space.location_id == Location.id)
            .filter(Location.manager_id == actor.id)
        )
    return q.filter(Booking.user_id == actor.id)


def list_payments(actor, status=None):
    q = scoped_query(actor)
    if status:
        q = q.filter(Payment.status == status)
    return q.order_by(Payment.payment_date.desc(), Payment.id.desc()).all()


def get_payment(actor, payment_id):
    payment = db.session.get(Payment, payment_id)
    if payment is None:
        raise NotFound("Payment not found")
    authorize(actor, VIEW_PAYMENT, payment)
    return payment
