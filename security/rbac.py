"""
Declarative authorization.

Each protected operation declares a :class:`Capability`: the roles allowed
to attempt it and, optionally, an ownership predicate that the scoped roles
must also satisfy for the concrete resource. :func:`authorize` is the one
gate that evaluates both.
"""
from functools import wraps

from models.user import ROLE_ADMIN, ROLE_MANAGER, ROLE_USER, ROLES
from utils.auth_context import current_user
from utils.errors import Forbidden


class Capability:
    def __init__(self, name, roles, owns=None, scoped_roles=None):
        self.name = name
        self.roles = frozenset(roles)
        self.owns = owns
        # admins are unscoped unless listed explicitly
        if scoped_roles is None:
            scoped_roles = self.roles - {ROLE_ADMIN} if owns else ()
        self.scoped_roles = frozenset(scoped_roles)

    def __repr__(self):
        return f"<Capability {self.name}>"


def authorize(actor, capability, resource=None):
    if actor is None:
        current_user()  # raises Unauthenticated

    if actor.role not in capability.roles:
        raise Forbidden(f"Not allowed to {capability.name.replace('_', ' ')}")

    if actor.role in capability.scoped_roles:
        if capability.owns is None or not capability.owns(actor, resource):
            raise Forbidden(f"Not allowed to {capability.name.replace('_', ' ')} for this resource")
    return actor


def require_roles(*role_names: str):
    """
    Usage: @require_roles("admin", "manager")
    """
    unknown = set(role_names) - set(ROLES)
    if unknown:
        raise ValueError(f"Unknown role(s): {sorted(unknown)}")

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = current_user()
            if user.role not in role_names:
                raise Forbidden("Forbidden")
            return fn(*args, **kwargs)
        return wrapper
    return decorator


ANY_ROLE = (ROLE_USER, ROLE_MANAGER, ROLE_ADMIN)
STAFF = (ROLE_MANAGER, ROLE_ADMIN)
