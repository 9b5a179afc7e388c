"""Domain exceptions for the application.

These exceptions represent business-logic errors and are automatically
converted to RFC 7807 Problem Details responses by the exception handlers.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    All domain exceptions should inherit from this class.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500
    headers: dict[str, str] | None = None

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Raised when a requested resource is not found.

    Example:
        raise NotFoundError("Account not found", resource="account")
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class ConflictError(AppException):
    """Raised when there's a conflict with existing data.

    Example:
        raise ConflictError("Username already registered")
    """

    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class ValidationError(AppException):
    """Raised when input data fails validation.

    Example:
        raise ValidationError(
            "Invalid input data",
            errors=[{"field": "password", "message": "Password is required"}]
        )
    """

    message = "Validation error"
    error_code = "validation_error"
    status_code = 400

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if errors:
            details["errors"] = errors
        super().__init__(message=message, details=details, **kwargs)


class UnauthorizedError(AppException):
    """Raised when a bearer credential is missing or malformed.

    Example:
        raise UnauthorizedError("Missing authentication token")
    """

    message = "Authentication required"
    error_code = "unauthorized"
    status_code = 401
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidCredentialsError(AppException):
    """Raised when a username/password pair does not authenticate.

    Unknown usernames and wrong passwords both raise this exception with
    the same message so callers cannot tell them apart.
    """

    message = "Invalid username or password"
    error_code = "invalid_credentials"
    status_code = 401
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidTokenError(AppException):
    """Raised when a token fails signature, structure or validity checks.

    The message never says which check failed. The underlying error, if
    any, is chained as ``__cause__``.
    """

    message = "Invalid or expired token"
    error_code = "invalid_token"
    status_code = 401
    headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenError(AppException):
    """Raised when an authenticated caller does not own the resource.

    Example:
        raise ForbiddenError("No right to access this account")
    """

    message = "Access forbidden"
    error_code = "forbidden"
    status_code = 403


class ServiceUnavailableError(AppException):
    """Raised when a required service is unavailable.

    Example:
        raise ServiceUnavailableError("Email delivery failed")
    """

    message = "Service temporarily unavailable"
    error_code = "service_unavailable"
    status_code = 503
