from flask import Blueprint, g, request

from models import db
from models.booking import Booking
from models.location import Location
from models.space import Space
from models.user import ROLE_MANAGER, User
from security.capabilities import CREATE_LOCATION, DELETE_LOCATION, UPDATE_LOCATION
from security.rbac import authorize
from utils.errors import Conflict, NotFound, ValidationError
from utils.auth_context import login_required
from utils.partial_update import apply_changes, as_int, as_str, build_changes
from utils.responses import listing, no_content, success

location_bp = Blueprint("locations", __name__, url_prefix="/locations")

LOCATION_SCHEMA = {
    "location_name": as_str(120),
    "address": as_str(255),
    "city": as_str(120),
    "description": as_str(required=False),
    "manager_id": as_int(minimum=1, nullable=True),
}


def _get_location(location_id):
    location = db.session.get(Location, location_id)
    if not location:
        raise NotFound("Location not found")
    return location


def _check_manager(manager_id):
    if manager_id is None:
        return
    manager = db.session.get(User, manager_id)
    if not manager or manager.role != ROLE_MANAGER:
        raise ValidationError("manager_id does not reference a manager")


@location_bp.get("")
def list_locations():
    city = (request.args.get("city") or "").strip()
    q = Location.query
    if city:
        q = q.filter(Location.city.ilike(f"%{city}%"))
    rows = q.order_by(Location.location_name.asc()).all()
    return listing("locations", [loc.to_dict() for loc in rows])


@location_bp.get("/<int:location_id>")
def get_location(location_id: int):
    return success(location=_get_location(location_id).to_dict())


@location_bp.post("")
@login_required
def create_location():
    authorize(g.user, CREATE_LOCATION)
    data = request.get_json(silent=True) or {}
    missing = [f for f in ("location_name", "address", "city") if not data.get(f)]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    fields = build_changes(data, LOCATION_SCHEMA)
    _check_manager(fields.get("manager_id"))

    location = Location(**fields)
    db.session.add(location)
    db.session.commit()
    return success(201, location=location.to_dict())


@location_bp.patch("/<int:location_id>")
@login_required
def update_location(location_id: int):
    location = _get_location(location_id)
    authorize(g.user, UPDATE_LOCATION, location)

    changes = build_changes(request.get_json(silent=True), LOCATION_SCHEMA)
    if "manager_id" in changes:
        # reassigning ownership is an admin decision
        authorize(g.user, CREATE_LOCATION)
        _check_manager(changes["manager_id"])

    apply_changes(location, changes)
    db.session.commit()
    return success(location=location.to_dict())


@location_bp.delete("/<int:location_id>")
@login_required
def delete_location(location_id: int):
    authorize(g.user, DELETE_LOCATION)
    location = _get_location(location_id)
    has_bookings = (
        Booking.query.join(Space, Booking.space_id == Space.id)
        .filter(Space.location_id == location.id)
        .first()
    )
    if has_bookings is not None:
        raise Conflict("Location has bookings and cannot be deleted")
    db.session.delete(location)
    db.session.commit()
    return no_content()
