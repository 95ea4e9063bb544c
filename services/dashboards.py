"""
Read-only aggregates for the admin and manager dashboards.

Booking and payment figures are built on the same scoped queries as the
listings, so a manager's dashboard never counts rows they could not list.
"""
from decimal import Decimal

from sqlalchemy import func

from models import db
from models.booking import ACTIVE_STATUSES, BOOKING_STATUSES, Booking
from models.location import Location
from models.payment import PAYMENT_COMPLETED, Payment
from models.space import Space
from models.user import ROLES, User
from security.capabilities import VIEW_MANAGER_DASHBOARD, VIEW_SYSTEM_DASHBOARD
from security.rbac import authorize
from services import bookings as booking_service
from services import payments as payment_service

RECENT_LIMIT = 5


def _by_status(bookings_q):
    counts = dict.fromkeys(BOOKING_STATUSES, 0)
    rows = (
        bookings_q.with_entities(Booking.status, func.count(Booking.id))
        .group_by(Booking.status)
        .all()
    )
    counts.update(rows)
    return counts


def _revenue(payments_q):
    total = (
        payments_q.filter(Payment.status == PAYMENT_COMPLETED)
        .with_entities(func.sum(Payment.amount))
        .scalar()
    )
    return Decimal(str(total or 0)).quantize(Decimal("0.01"))


def _recent(bookings_q):
    rows = bookings_q.order_by(Booking.created_at.desc(), Booking.id.desc()).limit(RECENT_LIMIT).all()
    return [b.to_dict() for b in rows]


def _bookings_summary(actor):
    bookings_q = booking_service.scoped_query(actor)
    by_status = _by_status(bookings_q)
    return {
        "total": sum(by_status.values()),
        "by_status": by_status,
        "recent": _recent(bookings_q),
    }


def admin_dashboard(actor):
    authorize(actor, VIEW_SYSTEM_DASHBOARD)

    users_by_role = dict.fromkeys(ROLES, 0)
    users_by_role.update(
        db.session.query(User.role, func.count(User.id)).group_by(User.role).all()
    )
    locations_total = db.session.query(func.count(Location.id)).scalar()
    with_managers = (
        db.session.query(func.count(Location.id)).filter(Location.manager_id.isnot(None)).scalar()
    )

    return {
        "users": {"total": sum(users_by_role.values()), "by_role": users_by_role},
        "locations": {
            "total": locations_total,
            "with_managers": with_managers,
            "without_managers": locations_total - with_managers,
        },
        "spaces": {"total": db.session.query(func.count(Space.id)).scalar()},
        "bookings": _bookings_summary(actor),
        "revenue": str(_revenue(payment_service.scoped_query(actor))),
    }


def manager_dashboard(actor, date_from=None):
    authorize(actor, VIEW_MANAGER_DASHBOARD)

    locations_q = Location.query
    if not actor.is_admin:
        locations_q = locations_q.filter(Location.manager_id == actor.id)
    locations = locations_q.order_by(Location.location_name.asc()).all()

    space_counts = dict(
        db.session.query(Space.location_id, func.count(Space.id))
        .filter(Space.location_id.in_([loc.id for loc in locations]))
        .group_by(Space.location_id)
        .all()
    )

    upcoming_q = booking_service.scoped_query(actor).filter(Booking.status.in_(ACTIVE_STATUSES))
    if date_from is not None:
        upcoming_q = upcoming_q.filter(Booking.booking_date >= date_from)
    upcoming = (
        upcoming_q.order_by(Booking.booking_date.asc(), Booking.start_time.asc())
        .limit(RECENT_LIMIT)
        .all()
    )

    return {
        "locations": {
            "total": len(locations),
            "items": [
                {**loc.to_dict(), "spaces": space_counts.get(loc.id, 0)} for loc in locations
            ],
        },
        "bookings": _bookings_summary(actor),
        "upcoming": [b.to_dict() for b in upcoming],
        "revenue": str(_revenue(payment_service.scoped_query(actor))),
    }
