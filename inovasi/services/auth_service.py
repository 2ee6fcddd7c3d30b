"""Self-service account flows: register, login, own profile."""

import logging

from inovasi.core.exceptions import PermissionDeniedError, ValidationError
from inovasi.models import db
from inovasi.models.user import ROLE_OPD, STATUS_AKTIF, User
from inovasi.services import user_service
from inovasi.services.jwt_service import token_response
from inovasi.utils.crypto import hash_password, verify_password
from inovasi.utils.helpers import db_commit_or_raise, get_or_404
from inovasi.utils.validators import FieldErrors, check_string

logger = logging.getLogger(__name__)


def register(data: dict) -> User:
    """Public sign-up. Always creates an active OPD account."""
    errors = FieldErrors()
    username = user_service.check_username(errors, data)
    password = user_service.check_password(errors, data)
    nama = user_service.check_nama(errors, data)
    errors.raise_if_any()

    user_service.ensure_username_available(username)
    user = User(
        username=username,
        password=hash_password(password),
        nama=nama,
        role=ROLE_OPD,
        status=STATUS_AKTIF,
    )
    db.session.add(user)
    db_commit_or_raise("User", "username", username)
    logger.info("Registered user %s", user.username)
    return user


def login(data: dict) -> dict:
    errors = FieldErrors()
    username = check_string(errors, data, "username")
    password = check_string(errors, data, "password", strip=False)
    errors.raise_if_any()

    user = user_service.authenticate(username, password)
    if not user.is_active:
        logger.warning("Login refused for inactive user %s", user.id)
        raise PermissionDeniedError("Account is inactive. Please contact the administrator")

    logger.info("User %s logged in", user.id)
    return token_response(user)


def get_profile(user_id) -> User:
    return get_or_404(User, user_id, "User")


def update_profile(user_id, data: dict) -> User:
    """Change own ``nama`` and/or password (password needs ``currentPassword``)."""
    user = get_profile(user_id)
    errors = FieldErrors()
    nama = user_service.check_nama(errors, data, required=False)
    password = user_service.check_password(errors, data, required=False)
    current = None
    if password is not None:
        current = check_string(errors, data, "currentPassword", strip=False)
    errors.raise_if_any()

    if nama is None and password is None:
        raise ValidationError("No fields to update")
    if password is not None:
        if not verify_password(current, user.password):
            raise ValidationError.for_field("currentPassword", "Current password is incorrect")
        user.password = hash_password(password)
    if nama is not None:
        user.nama = nama

    db.session.commit()
    logger.info("User %s updated own profile", user.id)
    return user
