from flask import Blueprint, g, request

from services import bookings as booking_service
from utils.audit import log_event
from utils.auth_context import login_required
from utils.errors import ValidationError
from utils.partial_update import as_date, as_int
from utils.responses import listing, no_content, success

bookings_bp = Blueprint("bookings", __name__, url_prefix="/bookings")


def _date_arg(name):
    raw = request.args.get(name)
    if not raw:
        return None
    try:
        return as_date(raw)
    except ValueError as exc:
        raise ValidationError(f"Invalid {name}: {exc}")


def _client_id(data):
    raw = (data or {}).get("user_id")
    if raw in (None, ""):
        return None
    try:
        return as_int(minimum=1)(raw)
    except ValueError as exc:
        raise ValidationError(f"Invalid user_id: {exc}")


@bookings_bp.post("")
@login_required
def create_booking():
    data = request.get_json(silent=True)
    window = booking_service.parse_window(data)
    booking = booking_service.create_booking(g.user, user_id=_client_id(data), **window)

    metadata = {
        "space_id": booking.space_id,
        "booking_date": booking.booking_date,
        "start_time": booking.start_time,
        "end_time": booking.end_time,
        "total_price": booking.total_price,
    }
    if booking.user_id != g.user.id:
        metadata["client_id"] = booking.user_id

    log_event(
        "BOOKING_CREATE",
        user_id=g.user.id,
        entity="booking",
        entity_id=booking.id,
        metadata=metadata,
    )
    return success(201, message="Booking created successfully", booking=booking.to_dict())


@bookings_bp.get("")
@login_required
def list_bookings():
    filters = {
        "status": request.args.get("status"),
        "space_id": request.args.get("space_id", type=int),
        "booking_date": _date_arg("booking_date"),
        "date_from": _date_arg("date_from"),
        "date_to": _date_arg("date_to"),
    }
    rows = booking_service.list_bookings(g.user, filters)
    return listing("bookings", [b.to_dict() for b in rows])


@bookings_bp.get("/<int:booking_id>")
@login_required
def get_booking(booking_id: int):
    booking = booking_service.get_booking(g.user, booking_id)
    return success(booking=booking.to_dict())


@bookings_bp.patch("/<int:booking_id>/status")
@login_required
def update_status(booking_id: int):
    data = request.get_json(silent=True) or {}
    status = data.get("status")
    if not status:
        raise ValidationError("status is required")

    booking, previous = booking_service.update_booking_status(g.user, booking_id, status)

    log_event(
        "BOOKING_STATUS_UPDATE",
        user_id=g.user.id,
        entity="booking",
        entity_id=booking.id,
        metadata={"from": previous, "to": booking.status},
    )
    return success(booking=booking.to_dict())


@bookings_bp.delete("/<int:booking_id>")
@login_required
def delete_booking(booking_id: int):
    snapshot = booking_service.delete_booking(g.user, booking_id)

    log_event(
        "BOOKING_DELETE",
        user_id=g.user.id,
        entity="booking",
        entity_id=booking_id,
        metadata={"status": snapshot["status"], "space_id": snapshot["space_id"]},
    )
    return no_content()


@bookings_bp.post("/check-availability")
@login_required
def check_availability():
    window = booking_service.parse_window(request.get_json(silent=True))
    result = booking_service.check_availability(**window)
    return success(**result)


@bookings_bp.post("/quote")
def quote():
    # the price does not depend on the date
    window = booking_service.parse_window(request.get_json(silent=True), with_date=False)
    result = booking_service.quote(window["space_id"], window["start_time"], window["end_time"])
    return success(
        space_id=result["space_id"],
        total_hours=str(result["total_hours"]),
        total_price=str(result["total_price"]),
    )


@bookings_bp.get("/space/<int:space_id>/schedule")
def space_schedule(space_id: int):
    schedule = booking_service.space_schedule(space_id, _date_arg("date_from"), _date_arg("date_to"))
    return success(
        space_id=space_id,
        date_from=schedule["date_from"].isoformat(),
        date_to=schedule["date_to"].isoformat(),
        bookings=[b.to_dict() for b in schedule["bookings"]],
    )
