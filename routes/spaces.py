from flask import Blueprint, g, request

from models import db
from models.booking import Booking
from models.location import Location
from models.space import Space
from models.space_type import SpaceType
from security.capabilities import CREATE_SPACE, MANAGE_SPACE
from security.rbac import authorize
from utils.auth_context import login_required
from utils.errors import Conflict, NotFound, ValidationError
from utils.partial_update import apply_changes, as_int, as_money, as_str, build_changes
from utils.responses import listing, no_content, success

space_bp = Blueprint("spaces", __name__, url_prefix="/spaces")

SPACE_SCHEMA = {
    "location_id": as_int(minimum=1),
    "space_type_id": as_int(minimum=1),
    "space_name": as_str(120),
    "description": as_str(required=False),
    "capacity": as_int(minimum=1),
    "price_per_hour": as_money,
    "price_per_day": as_money,
}
REQUIRED_FIELDS = ("location_id", "space_type_id", "space_name", "capacity", "price_per_hour", "price_per_day")


def _get_space(space_id):
    space = db.session.get(Space, space_id)
    if not space:
        raise NotFound("Space not found")
    return space


def _require_location(location_id):
    location = db.session.get(Location, location_id)
    if not location:
        raise ValidationError("Invalid location_id")
    return location


def _require_space_type(space_type_id):
    if not db.session.get(SpaceType, space_type_id):
        raise ValidationError("Invalid space_type_id")


@space_bp.get("")
def list_spaces():
    location_id = request.args.get("location_id", type=int)
    space_type_id = request.args.get("space_type_id", type=int)

    q = Space.query
    if location_id:
        q = q.filter_by(location_id=location_id)
    if space_type_id:
        q = q.filter_by(space_type_id=space_type_id)

    rows = q.order_by(Space.space_name.asc()).all()
    return listing("spaces", [s.to_dict() for s in rows])


@space_bp.get("/<int:space_id>")
def get_space(space_id: int):
    return success(space=_get_space(space_id).to_dict())


@space_bp.post("")
@login_required
def create_space():
    data = request.get_json(silent=True) or {}
    missing = [f for f in REQUIRED_FIELDS if data.get(f) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    fields = build_changes(data, SPACE_SCHEMA)
    location = _require_location(fields["location_id"])
    authorize(g.user, CREATE_SPACE, location)
    _require_space_type(fields["space_type_id"])

    space = Space(**fields)
    db.session.add(space)
    db.session.commit()
    return success(201, space=space.to_dict())


@space_bp.patch("/<int:space_id>")
@login_required
def update_space(space_id: int):
    space = _get_space(space_id)
    authorize(g.user, MANAGE_SPACE, space)

    changes = build_changes(request.get_json(silent=True), SPACE_SCHEMA)
    if "location_id" in changes:
        # moving a space requires rights on the destination as well
        authorize(g.user, CREATE_SPACE, _require_location(changes["location_id"]))
    if "space_type_id" in changes:
        _require_space_type(changes["space_type_id"])

    apply_changes(space, changes)
    db.session.commit()
    return success(space=space.to_dict())


@space_bp.delete("/<int:space_id>")
@login_required
def delete_space(space_id: int):
    space = _get_space(space_id)
    authorize(g.user, MANAGE_SPACE, space)
    if Booking.query.filter_by(space_id=space.id).first() is not None:
        raise Conflict("Space has bookings and cannot be deleted")
    db.session.delete(space)
    db.session.commit()
    return no_content()
