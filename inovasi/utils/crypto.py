"""
Crypto utilities — bcrypt password hashing.

The cost factor comes from ``BCRYPT_ROUNDS`` in app config (12 by
default). bcrypt embeds the cost in every digest, so digests written
with any cost keep verifying after the setting changes.
"""

import secrets
import string

import bcrypt
from flask import current_app, has_app_context

DEFAULT_ROUNDS = 12
# Symbols accepted by the account password pattern
_PASSWORD_GROUPS = (string.ascii_lowercase, string.ascii_uppercase, string.digits, "@$!%*?&_")
_RANDOM_PASSWORD_CHARSET = "".join(_PASSWORD_GROUPS)


def _rounds() -> int:
    if has_app_context():
        return int(current_app.config.get("BCRYPT_ROUNDS", DEFAULT_ROUNDS))
    return DEFAULT_ROUNDS


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password with bcrypt."""
    salt = bcrypt.gensalt(rounds=_rounds())
    return bcrypt.hashpw(plain_password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Verify a plain-text password against its bcrypt digest."""
    if not password_hash or plain_password is None:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            password_hash.encode("utf-8"),
        )
    except ValueError:
        # Not a bcrypt digest
        return False


def generate_random_password(length: int = 12) -> str:
    """Generate a random password (used by the ``create-admin`` CLI).

    Always holds a lowercase letter, an uppercase letter, a digit and a
    symbol, so it passes the account password rules.
    """
    chars = [secrets.choice(group) for group in _PASSWORD_GROUPS]
    chars += [secrets.choice(_RANDOM_PASSWORD_CHARSET) for _ in range(length - len(chars))]
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)
