from collections import namedtuple

from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from utils.errors import Unauthenticated

TokenClaims = namedtuple("TokenClaims", ["user_id", "role"])


def issue_token(user_id: int, role: str) -> str:
    # PyJWT requires a string subject
    return create_access_token(identity=str(user_id), additional_claims={"role": role})


def verify_token(token: str) -> TokenClaims:
    if not token:
        raise Unauthenticated("Authentication required")
    try:
        claims = decode_token(token)
    except (JWTExtendedException, PyJWTError):
        raise Unauthenticated("Invalid or expired token")

    try:
        user_id = int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        raise Unauthenticated("Invalid or expired token")
    return TokenClaims(user_id=user_id, role=claims.get("role"))


def bearer_token(auth_header):
    """Extract the raw token from an ``Authorization: Bearer <token>`` header."""
    if not auth_header:
        return None
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
