from functools import wraps
from flask import g, request
from models import db
from models.user import User
from security.tokens import bearer_token, verify_token
from utils.errors import AppError, Unauthenticated

def load_current_user():
    g.user = None
    g.auth_error = None

    token = bearer_token(request.headers.get("Authorization"))
    if not token:
        return

    try:
        claims = verify_token(token)
    except AppError as exc:
        g.auth_error = exc.message
        return

    # role comes from the row, not from the token claims
    user = db.session.get(User, claims.user_id)
    if user is None:
        g.auth_error = "User no longer exists"
        return
    g.user = user

def current_user():
    user = getattr(g, "user", None)
    if user is None:
        raise Unauthenticated(getattr(g, "auth_error", None) or "Authentication required")
    return user

def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        current_user()
        return fn(*args, **kwargs)
    return wrapper
