from flask import Blueprint, g, request

from models import db
from models.space import Space
from models.space_type import SpaceType
from security.capabilities import MANAGE_SPACE_TYPES
from security.rbac import authorize
from utils.auth_context import login_required
from utils.errors import Conflict, NotFound, ValidationError
from utils.partial_update import apply_changes, as_str, build_changes
from utils.responses import listing, no_content, success

space_type_bp = Blueprint("space_types", __name__, url_prefix="/space-types")

SPACE_TYPE_SCHEMA = {
    "type_name": as_str(80),
    "description": as_str(required=False),
}


def _get_space_type(space_type_id):
    space_type = db.session.get(SpaceType, space_type_id)
    if not space_type:
        raise NotFound("Space type not found")
    return space_type


@space_type_bp.get("")
def list_space_types():
    rows = SpaceType.query.order_by(SpaceType.type_name.asc()).all()
    return listing("space_types", [st.to_dict() for st in rows])


@space_type_bp.get("/<int:space_type_id>")
def get_space_type(space_type_id: int):
    return success(space_type=_get_space_type(space_type_id).to_dict())


@space_type_bp.post("")
@login_required
def create_space_type():
    authorize(g.user, MANAGE_SPACE_TYPES)
    data = request.get_json(silent=True) or {}
    if not data.get("type_name"):
        raise ValidationError("type_name is required")

    space_type = SpaceType(**build_changes(data, SPACE_TYPE_SCHEMA))
    db.session.add(space_type)
    # duplicate names surface as IntegrityError -> 409
    db.session.commit()
    return success(201, space_type=space_type.to_dict())


@space_type_bp.patch("/<int:space_type_id>")
@login_required
def update_space_type(space_type_id: int):
    authorize(g.user, MANAGE_SPACE_TYPES)
    space_type = _get_space_type(space_type_id)
    apply_changes(space_type, build_changes(request.get_json(silent=True), SPACE_TYPE_SCHEMA))
    db.session.commit()
    return success(space_type=space_type.to_dict())


@space_type_bp.delete("/<int:space_type_id>")
@login_required
def delete_space_type(space_type_id: int):
    authorize(g.user, MANAGE_SPACE_TYPES)
    space_type = _get_space_type(space_type_id)
    if Space.query.filter_by(space_type_id=space_type.id).first() is not None:
        raise Conflict("Space type is in use")
    db.session.delete(space_type)
    db.session.commit()
    return no_content()
