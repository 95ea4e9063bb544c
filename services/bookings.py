"""
Booking lifecycle: availability/overlap checks, pricing and status changes.

Creation takes a write lock on the space row before reading availability and
existing bookings, and inserts inside the same transaction. Two requests for
the same window therefore serialize: the second one sees the first booking
and fails with a conflict.
"""
import logging
from datetime import date, timedelta

from flask import current_app

from models import db
from models.availability import Availability
from models.booking import ACTIVE_STATUSES, STATUS_COMPLETED, STATUS_CONFIRMED, STATUS_PENDING, Booking
from models.location import Location
from models.space import Space
from models.user import ROLE_MANAGER, User
from security.capabilities import (
    BOOK_FOR_CLIENT,
    CREATE_BOOKING,
    DELETE_BOOKING,
    UPDATE_BOOKING_STATUS,
    VIEW_BOOKING,
)
from security.rbac import authorize
from services.booking_status import apply_transition, validate_status
from services.pricing import DEFAULT_DAY_RATE_HOURS, calculate_booking_price, compute_total_hours
from utils.errors import Conflict, InvalidState, NotFound, ValidationError
from utils.partial_update import as_date, as_int, as_time
from utils.transactions import transaction

logger = logging.getLogger(__name__)


def parse_window(data, with_date=True):
    """Read ``space_id``/``booking_date``/``start_time``/``end_time`` from a JSON body."""
    data = data or {}
    fields = ["space_id", "booking_date", "start_time", "end_time"]
    if not with_date:
        fields.remove("booking_date")
    missing = [f for f in fields if data.get(f) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    errors = {}
    parsed = {}
    for field, coerce in (
        ("space_id", as_int(minimum=1)),
        ("booking_date", as_date),
        ("start_time", as_time),
        ("end_time", as_time),
    ):
        if field not in fields:
            continue
        try:
            parsed[field] = coerce(data[field])
        except ValueError as exc:
            errors[field] = str(exc)
    if errors:
        raise ValidationError("Invalid booking window", details=errors)
    return parsed


def _day_rate_hours():
    return current_app.config.get("DAY_RATE_MIN_HOURS", DEFAULT_DAY_RATE_HOURS)


def _lock_space(space_id):
    space = Space.query.filter_by(id=space_id).with_for_update().first()
    if space is None:
        raise NotFound("Space not found")
    return space


def _lock_booking(booking_id):
    booking = Booking.query.filter_by(id=booking_id).with_for_update().first()
    if booking is None:
        raise NotFound("Booking not found")
    return booking


def find_covering_block(space_id, booking_date, start_time, end_time):
    return (
        Availability.query
        .filter(
            Availability.space_id == space_id,
            Availability.availability_date == booking_date,
            Availability.start_time <= start_time,
            Availability.end_time >= end_time,
            Availability.is_available.is_(True),
        )
        .order_by(Availability.start_time.asc())
        .first()
    )


def find_conflicts(space_id, booking_date, start_time, end_time, exclude_id=None):
    # half-open overlap: existing.start < requested.end AND existing.end > requested.start
    q = Booking.query.filter(
        Booking.space_id == space_id,
        Booking.booking_date == booking_date,
        Booking.start_time < end_time,
        Booking.end_time > start_time,
        Booking.status.in_(ACTIVE_STATUSES),
    )
    if exclude_id is not None:
        q = q.filter(Booking.id != exclude_id)
    return q.order_by(Booking.start_time.asc()).all()


def quote(space_id, start_time, end_time):
    space = db.session.get(Space, space_id)
    if space is None:
        raise NotFound("Space not found")
    total_hours = compute_total_hours(start_time, end_time)
    total_price = calculate_booking_price(
        total_hours, space.price_per_hour, space.price_per_day, _day_rate_hours()
    )
    return {"space_id": space.id, "total_hours": total_hours, "total_price": total_price}


def create_booking(actor, space_id, booking_date, start_time, end_time, user_id=None):
    """
    Book a window for ``actor``, or for the client ``user_id`` when staff book
    on someone's behalf. Staff may only do that at spaces they manage.
    """
    client_id = actor.id if user_id is None else user_id
    if client_id == actor.id:
        authorize(actor, CREATE_BOOKING)
    total_hours = compute_total_hours(start_time, end_time)

    with transaction():
        space = _lock_space(space_id)

        if client_id != actor.id:
            authorize(actor, BOOK_FOR_CLIENT, space)
            if db.session.get(User, client_id) is None:
                raise NotFound("User not found")

        if find_covering_block(space_id, booking_date, start_time, end_time) is None:
            raise Conflict("The space is not available at the requested time")

        if find_conflicts(space_id, booking_date, start_time, end_time):
            raise Conflict("The space is already booked for the requested time")

        booking = Booking(
            user_id=client_id,
            space_id=space.id,
            booking_date=booking_date,
            start_time=start_time,
            end_time=end_time,
            total_hours=total_hours,
            total_price=calculate_booking_price(
                total_hours, space.price_per_hour, space.price_per_day, _day_rate_hours()
            ),
            status=STATUS_PENDING,
        )
        db.session.add(booking)
        db.session.flush()

    logger.info(
        "booking %s created for user %s by user %s: space=%s date=%s %s-%s price=%s",
        booking.id, client_id, actor.id, space_id, booking_date, start_time, end_time,
        booking.total_price,
    )
    return booking


def check_availability(space_id, booking_date, start_time, end_time):
    """Read-only version of the creation checks."""
    if db.session.get(Space, space_id) is None:
        raise NotFound("Space not found")
    compute_total_hours(start_time, end_time)

    block = find_covering_block(space_id, booking_date, start_time, end_time)
    conflicts = find_conflicts(space_id, booking_date, start_time, end_time)

    reason = None
    if block is None:
        reason = "not available"
    elif conflicts:
        reason = "already booked"

    return {
        "available": reason is None,
        "reason": reason,
        "covering_block": block.to_dict() if block else None,
        "conflicts": [b.to_dict() for b in conflicts],
    }


def scoped_query(actor):
    """Bookings visible to ``actor``: own for users, own locations for managers, all for admins."""
    q = Booking.query
    if actor.is_admin:
        return q
    if actor.role == ROLE_MANAGER:
        return (
            q.join(Space, Booking.space_id == Space.id)
            .join(Location, Space.location_id == Location.id)
            .filter(Location.manager_id == actor.id)
        )
    return q.filter(Booking.user_id == actor.id)


def list_bookings(actor, filters=None):
    filters = filters or {}
    q = scoped_query(actor)

    if filters.get("status"):
        q = q.filter(Booking.status == validate_status(filters["status"]))
    if filters.get("space_id"):
        q = q.filter(Booking.space_id == filters["space_id"])
    if filters.get("booking_date"):
        q = q.filter(Booking.booking_date == filters["booking_date"])
    if filters.get("date_from"):
        q = q.filter(Booking.booking_date >= filters["date_from"])
    if filters.get("date_to"):
        q = q.filter(Booking.booking_date <= filters["date_to"])

    limit = current_app.config.get("BOOKING_LIST_LIMIT", 200)
    return q.order_by(Booking.created_at.desc(), Booking.id.desc()).limit(limit).all()


def get_booking(actor, booking_id):
    booking = db.session.get(Booking, booking_id)
    if booking is None:
        raise NotFound("Booking not found")
    authorize(actor, VIEW_BOOKING, booking)
    return booking


def update_booking_status(actor, booking_id, status):
    validate_status(status)

    with transaction():
        booking = _lock_booking(booking_id)
        authorize(actor, UPDATE_BOOKING_STATUS, booking)
        previous = apply_transition(booking, status)

    logger.info("booking %s status %s -> %s by user %s", booking.id, previous, status, actor.id)
    return booking, previous


def delete_booking(actor, booking_id):
    with transaction():
        booking = _lock_booking(booking_id)
        authorize(actor, DELETE_BOOKING, booking)

        if not actor.is_admin and booking.status in (STATUS_CONFIRMED, STATUS_COMPLETED):
            raise InvalidState(
                "A confirmed or completed booking cannot be deleted. Contact support."
            )
        snapshot = booking.to_dict()
        db.session.delete(booking)

    logger.info("booking %s deleted by user %s", booking_id, actor.id)
    return snapshot


def space_schedule(space_id, date_from=None, date_to=None):
    if db.session.get(Space, space_id) is None:
        raise NotFound("Space not found")

    date_from = date_from or date.today()
    date_to = date_to or date_from + timedelta(days=7)
    if date_to < date_from:
        raise ValidationError("date_to must not be before date_from")

    rows = (
        Booking.query
        .filter(
            Booking.space_id == space_id,
            Booking.booking_date >= date_from,
            Booking.booking_date <= date_to,
            Booking.status.in_(ACTIVE_STATUSES),
        )
        .order_by(Booking.booking_date.asc(), Booking.start_time.asc())
        .all()
    )
    return {"space_id": space_id, "date_from": date_from, "date_to": date_to, "bookings": rows}
