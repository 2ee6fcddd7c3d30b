"""
Access control — bearer-token authentication and role gating.

Usage:
    @bp.route("/profil-inovasi", methods=["GET"])
    @require_auth(ROLE_ADMIN, ROLE_OPD)
    def list_profil(auth):
        ...

    @bp.route("/users", methods=["GET"])
    @require_auth(ROLE_ADMIN)
    def list_users(auth):
        ...

The decorated view receives the verified identity as the ``auth``
keyword argument, with the role read from the stored account.
Missing/invalid/expired tokens and tokens of deleted or deactivated
accounts answer 401; a role outside the allowed set answers 403. In
both cases the view never runs.
Calling ``require_auth()`` with no roles admits any authenticated user.
"""

import functools
import logging
from dataclasses import dataclass

import jwt as pyjwt
from flask import request

from inovasi.core.exceptions import AuthError, PermissionDeniedError
from inovasi.models import db
from inovasi.models.user import ROLE_ADMIN, User
from inovasi.services.jwt_service import decode_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthContext:
    """Identity carried by a verified token."""

    user_id: str
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def owns(self, owner_id: str) -> bool:
        return self.user_id == owner_id

    def can_access(self, owner_id: str) -> bool:
        """ADMIN sees everything; other roles only their own records."""
        return self.is_admin or self.owns(owner_id)


def authenticate_request() -> AuthContext:
    """Parse ``Authorization: Bearer <token>`` into an AuthContext or raise AuthError."""
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        raise AuthError("Access token is required")

    token = auth_header[7:].strip()  # Strip "Bearer "
    if not token:
        raise AuthError("Access token is required")

    try:
        payload = decode_token(token)
    except pyjwt.ExpiredSignatureError:
        raise AuthError("Token has expired")
    except pyjwt.InvalidTokenError:
        raise AuthError("Invalid token")

    user = db.session.get(User, str(payload["sub"]))
    if user is None:
        raise AuthError("User no longer exists")
    if not user.is_active:
        raise AuthError("Account is inactive")

    return AuthContext(user_id=user.id, username=user.username, role=user.role)


def require_auth(*roles: str):
    """
    Decorator: require a valid bearer token and, if roles are given,
    one of those roles.
    """
    def decorator(f):
        @functools.wraps(f)
        def decorated(*args, **kwargs):
            auth = authenticate_request()
            if roles and auth.role not in roles:
                logger.warning(
                    "User %s (%s) denied on %s: requires %s",
                    auth.user_id, auth.role, f.__name__, roles,
                )
                raise PermissionDeniedError("Insufficient permissions")
            return f(*args, auth=auth, **kwargs)
        return decorated
    return decorator
