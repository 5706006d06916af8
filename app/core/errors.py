"""
Service error taxonomy.

Every error raised deliberately by the service layer derives from
:class:`ServiceError` and carries a stable machine-readable ``code``.
The HTTP layer matches on the class (never on the message) to pick the
status code and envelope status.
"""

from typing import ClassVar, Literal, Optional


class ServiceError(Exception):
    """Base class for errors whose message can be shown to the caller.

    Messages must never contain sensitive information.
    """

    code: ClassVar[str] = "SERVICE_ERROR"
    status_code: ClassVar[int] = 400
    envelope_status: ClassVar[Literal["fail", "error"]] = "fail"
    default_message: ClassVar[str] = "Request could not be processed"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# Validation failures (client-correctable)


class InvalidEmailError(ServiceError):
    code = "INVALID_EMAIL"
    default_message = "Email format is invalid"


class InvalidNameError(ServiceError):
    code = "INVALID_NAME"
    default_message = "Name is required and must be between 1 and 255 characters"


class InvalidPasswordError(ServiceError):
    code = "INVALID_PASSWORD"
    default_message = "Password must be between 8 and 128 characters"


# Business rule failures


class UserAlreadyExistsError(ServiceError):
    code = "USER_ALREADY_EXISTS"
    status_code = 409
    default_message = "User with this email already exists"


class UserNotFoundError(ServiceError):
    code = "USER_NOT_FOUND"
    status_code = 404
    default_message = "User not found"


class SessionNotFoundError(ServiceError):
    code = "SESSION_NOT_FOUND"
    status_code = 404
    default_message = "Session not found"


# Authentication failures


class SessionExpiredError(ServiceError):
    code = "SESSION_EXPIRED"
    status_code = 401
    envelope_status = "error"
    default_message = "Session has expired"


class InvalidCredentialsError(ServiceError):
    """Raised for an unknown email *and* for a wrong password alike."""

    code = "INVALID_CREDENTIALS"
    status_code = 401
    envelope_status = "error"
    default_message = "Invalid email or password"


class UnauthorizedError(ServiceError):
    code = "UNAUTHORIZED"
    status_code = 401
    envelope_status = "error"
    default_message = "Unauthorized access"


class AccessDeniedError(ServiceError):
    """Raised when an authenticated user targets an account that is not theirs."""

    code = "FORBIDDEN"
    status_code = 403
    envelope_status = "error"
    default_message = "Access denied"


class InternalError(ServiceError):
    """Unexpected lower-layer failure. Details are logged, never returned."""

    code = "INTERNAL_ERROR"
    status_code = 500
    envelope_status = "error"
    default_message = "Internal server error"


class ServiceUnavailableError(ServiceError):
    code = "SERVICE_UNAVAILABLE"
    status_code = 503
    envelope_status = "error"
    default_message = "Service temporarily unavailable"
