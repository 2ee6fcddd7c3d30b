"""
Seed data — default accounts for a fresh database.

Used by the ``flask seed-users`` and ``flask create-admin`` commands.
Idempotent: existing usernames are left untouched.
"""

import logging

from inovasi.core.exceptions import ConflictError
from inovasi.models import db
from inovasi.models.user import ROLE_ADMIN, ROLE_OPD, STATUS_AKTIF, STATUS_TIDAK_AKTIF, User
from inovasi.services.user_service import check_password, check_username
from inovasi.utils.crypto import generate_random_password, hash_password
from inovasi.utils.validators import FieldErrors

logger = logging.getLogger(__name__)

# (username, password, nama, role, status)
DEFAULT_USERS = [
    ("admin", "admin123", "Administrator", ROLE_ADMIN, STATUS_AKTIF),
    ("opd1", "opd123", "OPD Dinas Kesehatan", ROLE_OPD, STATUS_AKTIF),
    ("opd2", "opd456", "OPD Dinas Pendidikan", ROLE_OPD, STATUS_TIDAK_AKTIF),
]


def seed_default_users(users=None) -> list[str]:
    """Insert missing default users; returns the usernames created."""
    created = []
    for username, password, nama, role, status in users or DEFAULT_USERS:
        if User.query.filter_by(username=username).first():
            logger.debug("Seed user %s already exists", username)
            continue
        db.session.add(User(
            username=username,
            password=hash_password(password),
            nama=nama,
            role=role,
            status=status,
        ))
        created.append(username)
    db.session.commit()
    if created:
        logger.info("Seeded users: %s", ", ".join(created))
    return created


def create_admin(username, nama="Administrator", password=None):
    """Create an ADMIN account; returns ``(user, plain_password)``.

    A supplied password must meet the same rules as one set through the API.
    """
    password = password or generate_random_password()
    errors = FieldErrors()
    username = check_username(errors, {"username": username})
    check_password(errors, {"password": password})
    errors.raise_if_any()
    if User.query.filter_by(username=username).first():
        raise ConflictError("User", "username", username)
    user = User(
        username=username,
        password=hash_password(password),
        nama=nama,
        role=ROLE_ADMIN,
        status=STATUS_AKTIF,
    )
    db.session.add(user)
    db.session.commit()
    logger.info("Created admin %s", username)
    return user, password
