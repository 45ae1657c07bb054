"""Domain errors raised by services and rendered by the API layer."""

from __future__ import annotations


class TimesheetError(Exception):
    """Base class for all expected failures.

    Each subclass carries the HTTP status and machine-readable code the
    API layer responds with.
    """

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AuthenticationError(TimesheetError):
    """Missing, malformed, forged or expired credential."""

    status_code = 401
    code = "UNAUTHENTICATED"


class AuthorizationError(TimesheetError):
    """Authenticated identity lacks permission for the action."""

    status_code = 403
    code = "FORBIDDEN"


class ValidationError(TimesheetError):
    """Input data is missing or invalid."""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, fields: list[str] | None = None):
        self.fields = fields or []
        super().__init__(message)


class InvalidCredentialsError(ValidationError):
    """Login failed. Deliberately does not say which part was wrong."""

    code = "INVALID_CREDENTIALS"

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class NotFoundError(TimesheetError):
    """Referenced entity does not exist."""

    status_code = 404
    code = "NOT_FOUND"


class ConflictError(TimesheetError):
    """Request conflicts with the current state of the entity."""

    status_code = 409
    code = "CONFLICT"
