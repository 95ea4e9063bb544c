from flask import Blueprint, g, request

from models import db
from models.availability import Availability
from models.space import Space
from security.capabilities import CREATE_AVAILABILITY, MANAGE_AVAILABILITY
from security.rbac import authorize
from utils.auth_context import login_required
from utils.errors import NotFound, ValidationError
from utils.partial_update import apply_changes, as_bool, as_date, as_int, as_time, build_changes
from utils.responses import listing, no_content, success

availability_bp = Blueprint("availability", __name__, url_prefix="/availability")

AVAILABILITY_SCHEMA = {
    "space_id": as_int(minimum=1),
    "availability_date": as_date,
    "start_time": as_time,
    "end_time": as_time,
    "is_available": as_bool,
}


def _get_block(availability_id):
    block = db.session.get(Availability, availability_id)
    if not block:
        raise NotFound("Availability not found")
    return block


def _get_space(space_id):
    space = db.session.get(Space, space_id)
    if not space:
        raise NotFound("Space not found")
    return space


def _check_window(block):
    if block.end_time <= block.start_time:
        raise ValidationError("end_time must be after start_time")


@availability_bp.get("")
def list_availability():
    space_id = request.args.get("space_id", type=int)
    if not space_id:
        raise ValidationError("space_id is required")
    _get_space(space_id)

    q = Availability.query.filter(
        Availability.space_id == space_id,
        Availability.is_available.is_(True),
    )
    try:
        if request.args.get("start_date"):
            q = q.filter(Availability.availability_date >= as_date(request.args["start_date"]))
        if request.args.get("end_date"):
            q = q.filter(Availability.availability_date <= as_date(request.args["end_date"]))
    except ValueError as exc:
        raise ValidationError(f"Invalid date filter: {exc}")

    rows = q.order_by(Availability.availability_date.asc(), Availability.start_time.asc()).all()
    return listing("availability", [b.to_dict() for b in rows])


@availability_bp.post("")
@login_required
def create_availability():
    data = request.get_json(silent=True) or {}
    missing = [f for f in ("space_id", "availability_date", "start_time", "end_time") if not data.get(f)]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    fields = build_changes(data, AVAILABILITY_SCHEMA)
    space = _get_space(fields["space_id"])
    authorize(g.user, CREATE_AVAILABILITY, space)

    block = Availability(**fields)
    _check_window(block)
    db.session.add(block)
    db.session.commit()
    return success(201, availability=block.to_dict())


@availability_bp.patch("/<int:availability_id>")
@login_required
def update_availability(availability_id: int):
    block = _get_block(availability_id)
    authorize(g.user, MANAGE_AVAILABILITY, block)

    changes = build_changes(request.get_json(silent=True), AVAILABILITY_SCHEMA)
    if "space_id" in changes:
        authorize(g.user, CREATE_AVAILABILITY, _get_space(changes["space_id"]))

    apply_changes(block, changes)
    _check_window(block)
    db.session.commit()
    return success(availability=block.to_dict())


@availability_bp.delete("/<int:availability_id>")
@login_required
def delete_availability(availability_id: int):
    block = _get_block(availability_id)
    authorize(g.user, MANAGE_AVAILABILITY, block)
    db.session.delete(block)
    db.session.commit()
    return no_content()
