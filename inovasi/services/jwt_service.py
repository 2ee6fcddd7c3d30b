"""
JWT Service — bearer token issuing and verification.

Access token: 24 hours (configurable via JWT_EXPIRES, seconds)
Algorithm:    HS256

Token payload:
{
    "sub": <user_id>,
    "username": <username>,
    "role": "ADMIN" | "OPD",
    "iat": <issued_at>,
    "exp": <expires_at>,
    "jti": <unique_id>
}

There is no server-side session store: logout is a client-side discard
and a token stays valid until it expires, unless its account is deleted
or deactivated first (checked in middleware/access_control.py).
"""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app

DEFAULT_EXPIRES = 86400  # 24 hours
ALGORITHM = "HS256"


def _get_secret():
    """Return the signing secret; a missing secret is a deployment error."""
    secret = current_app.config.get("JWT_SECRET_KEY")
    if not secret:
        raise RuntimeError("JWT_SECRET_KEY is not configured")
    return secret


def _get_expires():
    return int(current_app.config.get("JWT_EXPIRES", DEFAULT_EXPIRES))


def issue_token(user_id: str, username: str, role: str) -> str:
    """Sign a login-session token for the given identity."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "username": username,
        "role": role,
        "iat": now,
        "exp": now + timedelta(seconds=_get_expires()),
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, _get_secret(), algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """
    Decode and verify a token.

    Returns the payload dict on success.
    Raises jwt.ExpiredSignatureError / jwt.InvalidTokenError on failure.
    """
    payload = jwt.decode(
        token, _get_secret(), algorithms=[ALGORITHM],
        options={"require": ["sub", "exp"]},
    )
    if not payload.get("role"):
        raise jwt.InvalidTokenError("Token carries no role")
    return payload


def token_response(user) -> dict:
    """Login payload: serialised user plus a fresh token."""
    return {
        "user": user.to_dict(),
        "token": issue_token(user.id, user.username, user.role),
        "tokenType": "Bearer",
        "expiresIn": _get_expires(),
    }
