from flask import Blueprint, g, request

from services import payments as payment_service
from utils.audit import log_event
from utils.auth_context import login_required
from utils.errors import ValidationError
from utils.responses import listing, success

payments_bp = Blueprint("payments", __name__, url_prefix="/payments")


@payments_bp.post("")
@login_required
def create_payment():
    data = request.get_json(silent=True) or {}
    booking_id = data.get("booking_id")
    if booking_id is not None and (isinstance(booking_id, bool) or not str(booking_id).isdigit()):
        raise ValidationError("booking_id must be an integer")

    payment = payment_service.create_payment(
        g.user,
        booking_id=int(booking_id) if booking_id is not None else None,
        amount=data.get("amount"),
        payment_method=data.get("payment_method"),
        transaction_id=data.get("transaction_id"),
    )

    metadata = {
        "booking_id": payment.booking_id,
        "amount": payment.amount,
        "payment_method": payment.payment_method,
    }
    if payment.booking.user_id != g.user.id:
        metadata["client_id"] = payment.booking.user_id

    log_event(
        "PAYMENT_CREATE",
        user_id=g.user.id,
        entity="payment",
        entity_id=payment.id,
        metadata=metadata,
    )
    return success(
        201,
        message="Payment processed successfully",
        payment=payment.to_dict(),
        booking=payment.booking.to_dict(),
    )


@payments_bp.get("")
@login_required
def list_payments():
    rows = payment_service.list_payments(g.user, status=request.args.get("status"))
    return listing("payments", [p.to_dict() for p in rows])


@payments_bp.get("/<int:payment_id>")
@login_required
def get_payment(payment_id: int):
    payment = payment_service.get_payment(g.user, payment_id)
    return success(payment=payment.to_dict(), booking=payment.booking.to_dict())


@payments_bp.patch("/<int:payment_id>/status")
@login_required
def update_status(payment_id: int):
    data = request.get_json(silent=True) or {}
    payment, previous = payment_service.update_payment_status(g.user, payment_id, data.get("status"))

    log_event(
        "PAYMENT_STATUS_UPDATE",
        user_id=g.user.id,
        entity="payment",
        entity_id=payment.id,
        metadata={
            "from": previous,
            "to": payment.status,
            "booking_id": payment.booking_id,
            "booking_status": payment.booking.status,
        },
    )
    return success(payment=payment.to_dict(), booking=payment.booking.to_dict())
