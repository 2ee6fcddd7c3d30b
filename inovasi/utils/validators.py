"""Field-level validation helpers.

Services validate payloads by collecting every problem into a
``FieldErrors`` and raising once, so a client sees all failing fields
in a single 400 response::

    errors = FieldErrors()
    nama = check_string(errors, data, "nama", min_len=2, max_len=100)
    role = check_choice(errors, data, "role", USER_ROLES, required=False)
    errors.raise_if_any()
"""

from __future__ import annotations

import re

from email_validator import EmailNotValidError, validate_email

from inovasi.core.exceptions import ValidationError
from inovasi.utils.helpers import parse_bool, parse_date_input

USERNAME_RE = re.compile(r"^[a-zA-Z0-9_]+$")
PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&_])[A-Za-z\d@$!%*?&_]+$")
PASSWORD_RULE = (
    "must contain at least one lowercase letter, one uppercase letter, "
    "one digit and one symbol (@$!%*?&_)"
)
YOUTUBE_RE = re.compile(r"^https://(www\.)?(youtube\.com|youtu\.be)/\S+$")
UUID_RE = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")
PHONE_RE = re.compile(r"^[0-9\-+()\s]+$")
DIGITS_RE = re.compile(r"^[0-9]+$")
LATITUDE_RE = re.compile(r"^-?([0-8]?[0-9](\.[0-9]+)?|90(\.0+)?)$")
LONGITUDE_RE = re.compile(r"^-?((1?[0-7]?|[0-9]?)[0-9](\.[0-9]+)?|180(\.0+)?)$")


class FieldErrors:
    """Accumulates ``{"field", "message"}`` entries."""

    def __init__(self):
        self.errors: list[dict] = []

    def add(self, field: str, message: str) -> None:
        self.errors.append({"field": field, "message": message})

    def has(self, field: str) -> bool:
        return any(e["field"] == field for e in self.errors)

    def __bool__(self):
        return bool(self.errors)

    def raise_if_any(self, message: str = "Validation error") -> None:
        if self.errors:
            raise ValidationError(message, errors=list(self.errors))


def is_uuid(value) -> bool:
    return isinstance(value, str) and bool(UUID_RE.match(value))


def check_string(errors, data, field, *, min_len=1, max_len=None, required=True,
                 pattern=None, pattern_message=None, strip=True):
    """Validate a string field; returns the cleaned value or None.

    A missing key is an error only when ``required``. A present key is
    always validated (so partial updates re-check touched fields).
    """
    if field not in data or data[field] is None:
        if required:
            errors.add(field, f"{field} is required")
        return None
    value = data[field]
    if not isinstance(value, str):
        errors.add(field, f"{field} must be a string")
        return None
    if strip:
        value = value.strip()
    if len(value) < min_len:
        if min_len <= 1:
            errors.add(field, f"{field} must not be empty")
        else:
            errors.add(field, f"{field} must be at least {min_len} characters")
        return None
    if max_len is not None and len(value) > max_len:
        errors.add(field, f"{field} must be at most {max_len} characters")
        return None
    if pattern is not None and not pattern.match(value):
        errors.add(field, pattern_message or f"{field} has an invalid format")
        return None
    return value


def check_choice(errors, data, field, choices, *, required=True):
    if field not in data or data[field] in (None, ""):
        if required:
            errors.add(field, f"{field} is required")
        return None
    value = data[field]
    if value not in choices:
        errors.add(field, f"{field} must be one of: {', '.join(choices)}")
        return None
    return value


def check_date(errors, data, field, *, required=True):
    if field not in data or data[field] in (None, ""):
        if required:
            errors.add(field, f"{field} is required")
        return None
    try:
        return parse_date_input(data[field])
    except (TypeError, ValueError):
        errors.add(field, f"{field} has an invalid date format")
        return None


def check_int(errors, data, field, *, minimum=None, required=True):
    if field not in data or data[field] in (None, ""):
        if required:
            errors.add(field, f"{field} is required")
        return None
    value = data[field]
    if isinstance(value, bool):
        errors.add(field, f"{field} must be an integer")
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        errors.add(field, f"{field} must be an integer")
        return None
    if isinstance(value, float) and value != number:
        errors.add(field, f"{field} must be an integer")
        return None
    if minimum is not None and number < minimum:
        errors.add(field, f"{field} must be at least {minimum}")
        return None
    return number


def check_bool(errors, data, field, *, required=False):
    if field not in data or data[field] in (None, ""):
        if required:
            errors.add(field, f"{field} is required")
        return None
    try:
        return parse_bool(data[field])
    except ValueError:
        errors.add(field, f"{field} must be a boolean")
        return None


def check_email(errors, data, field="email", *, required=True, max_len=200):
    """Syntax-only email check; returns the normalized address."""
    value = check_string(errors, data, field, max_len=max_len, required=required)
    if value is None:
        return None
    try:
        return validate_email(value, check_deliverability=False).normalized
    except EmailNotValidError as e:
        errors.add(field, f"{field} is not a valid email address: {e}")
        return None
