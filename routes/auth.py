from flask import Blueprint, request, g

from models import db
from models.user import ROLE_USER, ROLES, User
from security.password import hash_password, verify_password
from security.tokens import issue_token
from utils.audit import log_event
from utils.auth_context import login_required
from utils.errors import Conflict, Forbidden, Unauthenticated, ValidationError
from utils.responses import success


auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def _is_valid_email(email: str) -> bool:
    return isinstance(email, str) and "@" in email and len(email) <= 255


def _token_payload(user: User):
    return {"token": issue_token(user.id, user.role), "user": user.to_dict()}


@auth_bp.post("/register")
def register():
    data = request.get_json(silent=True) or {}
    name = (data.get("name") or "").strip()
    surname = (data.get("surname") or "").strip()
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    role = (data.get("role") or ROLE_USER).strip().lower()

    if not name or not surname or not email or not password:
        raise ValidationError("name, surname, email and password are required")
    if not _is_valid_email(email):
        raise ValidationError("Invalid email")
    if role not in ROLES:
        raise ValidationError(f"Invalid role. Allowed: {', '.join(ROLES)}")

    # only an admin may hand out elevated roles
    actor = getattr(g, "user", None)
    if role != ROLE_USER and (actor is None or not actor.is_admin):
        raise Forbidden("Only an admin can register managers or admins")

    if User.query.filter_by(email=email).first():
        log_event("REGISTER_FAIL_EMAIL_EXISTS", metadata={"email": email})
        raise Conflict("Email already registered")

    user = User(
        name=name,
        surname=surname,
        email=email,
        password_hash=hash_password(password),
        role=role,
    )
    db.session.add(user)
    db.session.commit()
    log_event("REGISTER_SUCCESS", user_id=user.id, metadata={"role": role})

    return success(201, "Registered successfully", **_token_payload(user))


@auth_bp.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    if not email or not password:
        raise ValidationError("email and password are required")

    user = User.query.filter_by(email=email).first()
    if not user or not verify_password(password, user.password_hash):
        log_event("LOGIN_FAIL", user_id=user.id if user else None, metadata={"email": email})
        raise Unauthenticated("Invalid credentials")

    log_event("LOGIN_SUCCESS", user_id=user.id)
    return success(200, "Login OK", **_token_payload(user))


@auth_bp.get("/me")
@login_required
def me():
    return success(user=g.user.to_dict())
