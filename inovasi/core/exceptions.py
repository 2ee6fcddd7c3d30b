"""
Application-wide exception hierarchy.

Services raise these; the handlers registered in ``create_app()`` turn
them into the standard JSON envelope with a fixed HTTP status, so
blueprints never build error responses for business-rule failures.

Usage:
    from inovasi.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="ProfilInovasi", resource_id=profil_id)
    raise ValidationError("Validation error", errors=[
        {"field": "rancangBangun", "message": "rancangBangun must be at least 300 characters"},
    ])
"""


class AppError(Exception):
    """Base class carrying the HTTP status used by the error handlers."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(AppError):
    """Input failed field-level or business-rule validation. Maps to 400.

    Args:
        message: Summary shown as the envelope ``message``.
        errors: Field-level breakdown, a list of ``{"field", "message"}``
            dicts rendered as the envelope ``errors``.
    """

    status_code = 400

    def __init__(self, message: str = "Validation error", errors: list[dict] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, errors=[{"field": field, "message": message}])


class AuthError(AppError):
    """Missing, malformed, expired or otherwise invalid credentials. Maps to 401."""

    status_code = 401


class PermissionDeniedError(AppError):
    """Authenticated caller lacks the role or ownership required. Maps to 403."""

    status_code = 403


class NotFoundError(AppError):
    """Requested resource does not exist. Maps to 404.

    Args:
        resource: Human-readable entity name (e.g. "ProfilInovasi").
        resource_id: The key that was looked up. Logged, not rendered.
    """

    status_code = 404

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found")


class ConflictError(AppError):
    """Operation would violate a uniqueness rule. Maps to 409.

    Args:
        resource: Model name.
        field: The unique field that would be duplicated.
        value: The conflicting value (kept for logs).
    """

    status_code = 409

    def __init__(self, resource: str, field: str, value: str | None = None) -> None:
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(f"{resource} with this {field} already exists")
