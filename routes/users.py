from flask import Blueprint, g, request

from models import db
from models.user import ROLE_ADMIN, ROLES, User
from security.capabilities import ASSIGN_ROLES
from security.rbac import authorize, require_roles
from utils.audit import log_event
from utils.errors import Forbidden, NotFound, ValidationError
from utils.responses import listing, success

users_bp = Blueprint("users", __name__, url_prefix="/users")


@users_bp.get("")
@require_roles(ROLE_ADMIN)
def list_users():
    role_filter = (request.args.get("role") or "").strip().lower()
    q = User.query
    if role_filter:
        q = q.filter(User.role == role_filter)
    users = q.order_by(User.created_at.desc()).limit(200).all()
    return listing("users", [u.to_dict() for u in users])


@users_bp.patch("/<int:user_id>/role")
@require_roles(ROLE_ADMIN)
def update_user_role(user_id: int):
    authorize(g.user, ASSIGN_ROLES)
    data = request.get_json(silent=True) or {}
    role = (data.get("role") or "").strip().lower()
    if role not in ROLES:
        raise ValidationError(f"Invalid role. Allowed: {', '.join(ROLES)}")

    user = db.session.get(User, user_id)
    if not user:
        raise NotFound("User not found")

    if user.id == g.user.id and role != ROLE_ADMIN:
        raise Forbidden("Cannot remove your own admin role")

    previous = user.role
    user.role = role
    db.session.commit()

    log_event(
        "ADMIN_UPDATE_ROLE",
        user_id=g.user.id,
        entity="user",
        entity_id=user.id,
        metadata={"from": previous, "to": role},
    )
    return success(200, "Role updated", user=user.to_dict())
