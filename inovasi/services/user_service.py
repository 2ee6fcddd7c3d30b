"""
User service — ADMIN-side account management.

Operations:
    list_users / user_stats / get_user
    create_user / update_user / change_password
    toggle_status / delete_user

Deletion is soft (status → TIDAK_AKTIF) when the account still owns
ProfilInovasi records, hard otherwise. An admin can never delete their own
account or change its role or status.
"""

import logging
from dataclasses import dataclass, fields
from typing import Optional

from sqlalchemy import func

from inovasi.core.exceptions import AuthError, ConflictError, ValidationError
from inovasi.models import db
from inovasi.models.inovasi import ProfilInovasi
from inovasi.models.user import (
    ROLE_ADMIN, ROLE_OPD, STATUS_AKTIF, STATUS_TIDAK_AKTIF,
    USER_ROLES, USER_STATUSES, User,
)
from inovasi.utils.crypto import hash_password, verify_password
from inovasi.utils.helpers import apply_search, apply_sort, db_commit_or_raise, get_or_404
from inovasi.utils.validators import (
    PASSWORD_RE, PASSWORD_RULE, USERNAME_RE, FieldErrors, check_choice, check_string,
)

logger = logging.getLogger(__name__)

PASSWORD_MAX_LEN = 72

SORT_COLUMNS = {
    "username": User.username,
    "nama": User.nama,
    "role": User.role,
    "status": User.status,
    "createdAt": User.created_at,
}


# ── Validation ───────────────────────────────────────────────────────────


def check_username(errors, data, *, required=True):
    return check_string(
        errors, data, "username", min_len=4, max_len=20, required=required,
        pattern=USERNAME_RE,
        pattern_message="username may only contain letters, digits and underscores",
    )


def check_password(errors, data, field="password", *, required=True):
    # bcrypt reads at most 72 bytes; the pattern admits ASCII only
    return check_string(
        errors, data, field, min_len=8, max_len=PASSWORD_MAX_LEN, required=required,
        pattern=PASSWORD_RE, pattern_message=f"{field} {PASSWORD_RULE}", strip=False,
    )


def check_nama(errors, data, *, required=True):
    return check_string(errors, data, "nama", min_len=2, max_len=100, required=required)


def ensure_username_available(username, exclude_id=None):
    q = User.query.filter(User.username == username)
    if exclude_id:
        q = q.filter(User.id != exclude_id)
    if q.first() is not None:
        raise ConflictError("User", "username", username)


@dataclass
class UserPatch:
    """Fields an admin may change on an account; None means untouched."""

    username: Optional[str] = None
    nama: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None

    @classmethod
    def from_payload(cls, data: dict) -> "UserPatch":
        errors = FieldErrors()
        patch = cls(
            username=check_username(errors, data, required=False),
            nama=check_nama(errors, data, required=False),
            role=check_choice(errors, data, "role", USER_ROLES, required=False),
            status=check_choice(errors, data, "status", USER_STATUSES, required=False),
        )
        errors.raise_if_any()
        if patch.is_empty():
            raise ValidationError("No fields to update")
        return patch

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def apply(self, user: User) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                setattr(user, f.name, value)


# ── Queries ──────────────────────────────────────────────────────────────


def list_users(*, search=None, role=None, status=None, sort_by=None, sort_order=None):
    """Filtered, ordered User query (pagination is applied by the caller)."""
    q = User.query
    q = apply_search(q, search, User.username, User.nama)
    if role:
        if role not in USER_ROLES:
            raise ValidationError.for_field("role", f"role must be one of: {', '.join(USER_ROLES)}")
        q = q.filter(User.role == role)
    if status:
        if status not in USER_STATUSES:
            raise ValidationError.for_field(
                "status", f"status must be one of: {', '.join(USER_STATUSES)}",
            )
        q = q.filter(User.status == status)
    return apply_sort(q, SORT_COLUMNS, sort_by, sort_order, default_by="createdAt")


def user_stats() -> dict:
    counts = dict(
        db.session.query(User.status, func.count(User.id)).group_by(User.status).all()
    )
    by_role = dict(db.session.query(User.role, func.count(User.id)).group_by(User.role).all())
    return {
        "total": sum(counts.values()),
        "active": counts.get(STATUS_AKTIF, 0),
        "inactive": counts.get(STATUS_TIDAK_AKTIF, 0),
        "admin": by_role.get(ROLE_ADMIN, 0),
        "opd": by_role.get(ROLE_OPD, 0),
    }


def get_user(user_id) -> User:
    return get_or_404(User, user_id, "User")


# ── Mutations ────────────────────────────────────────────────────────────


def create_user(data: dict) -> User:
    errors = FieldErrors()
    username = check_username(errors, data)
    password = check_password(errors, data)
    nama = check_nama(errors, data)
    role = check_choice(errors, data, "role", USER_ROLES, required=False) or ROLE_OPD
    status = check_choice(errors, data, "status", USER_STATUSES, required=False) or STATUS_AKTIF
    errors.raise_if_any()

    ensure_username_available(username)
    user = User(
        username=username,
        password=hash_password(password),
        nama=nama,
        role=role,
        status=status,
    )
    db.session.add(user)
    db_commit_or_raise("User", "username", username)
    logger.info("Created user %s (%s)", user.username, user.role)
    return user


def update_user(user_id, data: dict, acting_user_id=None) -> User:
    user = get_user(user_id)
    patch = UserPatch.from_payload(data)
    if user.id == acting_user_id and (
        patch.role not in (None, user.role) or patch.status not in (None, user.status)
    ):
        raise ValidationError("You cannot change the role or status of your own account")
    if patch.username is not None and patch.username != user.username:
        ensure_username_available(patch.username, exclude_id=user.id)
    patch.apply(user)
    db_commit_or_raise("User", "username", patch.username)
    logger.info("Updated user %s", user.id)
    return user


def change_password(user_id, data: dict, *, require_current=True) -> User:
    """Set a new password after confirming it (and, optionally, the current one)."""
    user = get_user(user_id)
    errors = FieldErrors()
    current = None
    if require_current:
        current = check_string(errors, data, "currentPassword", strip=False)
    new = check_password(errors, data, "newPassword")
    confirm = check_string(errors, data, "confirmPassword", strip=False)
    if new and confirm is not None and new != confirm:
        errors.add("confirmPassword", "confirmPassword does not match newPassword")
    errors.raise_if_any()

    if require_current and not verify_password(current, user.password):
        raise ValidationError.for_field("currentPassword", "Current password is incorrect")

    user.password = hash_password(new)
    db.session.commit()
    logger.info("Password changed for user %s", user.id)
    return user


def toggle_status(user_id, acting_user_id) -> User:
    user = get_user(user_id)
    if user.id == acting_user_id:
        raise ValidationError("You cannot change the status of your own account")
    user.status = STATUS_TIDAK_AKTIF if user.is_active else STATUS_AKTIF
    db.session.commit()
    logger.info("User %s status set to %s", user.id, user.status)
    return user


def delete_user(user_id, acting_user_id) -> dict:
    """Delete an account; returns ``{"id", "softDeleted"}``."""
    user = get_user(user_id)
    if user.id == acting_user_id:
        raise ValidationError("You cannot delete your own account")

    owned = ProfilInovasi.query.filter_by(user_id=user.id).count()
    if owned:
        user.status = STATUS_TIDAK_AKTIF
        db.session.commit()
        logger.info("Soft-deleted user %s (owns %d profil)", user.id, owned)
        return {"id": user.id, "softDeleted": True}

    db.session.delete(user)
    db.session.commit()
    logger.info("Deleted user %s", user_id)
    return {"id": user_id, "softDeleted": False}


def authenticate(username, password) -> User:
    """Credential check used by login. Wrong credentials never reveal which part failed."""
    user = User.query.filter_by(username=username).first() if username else None
    if user is None or not verify_password(password, user.password):
        logger.warning("Failed login for username=%s", username)
        raise AuthError("Invalid username or password")
    return user
