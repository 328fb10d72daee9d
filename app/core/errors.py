"""
Application error taxonomy.

Every error that crosses a request boundary is an ``AppError``; the exception
handlers in ``app.main`` turn it into ``{"error": ..., "message": ...}`` with
the matching status code.
"""

from typing import Optional

from fastapi import status


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal Server Error"
    message: str = "An internal error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        error: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        if message is not None:
            self.message = message
        if error is not None:
            self.error = error
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.error, "message": self.message}


# =============================================================================
# Categories
# =============================================================================

class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation error"
    message = "The request is invalid"


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"
    message = "Authentication required"


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"
    message = "Insufficient permissions"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"
    message = "The requested resource was not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"
    message = "The resource already exists"


class InternalError(AppError):
    pass


class UpstreamError(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    error = "Upstream error"
    message = "An upstream service failed"


class ServiceUnavailableError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error = "Service unavailable"
    message = "The service is temporarily unavailable"


class RateLimitError(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    error = "Rate limit exceeded"
    message = "Too many requests from this IP, please try again later."


# =============================================================================
# Authentication flow
# =============================================================================

class MissingFieldsError(ValidationError):
    error = "Missing required fields"
    message = "All required fields must be provided"


class MissingCredentialsError(ValidationError):
    error = "Missing credentials"
    message = "Email and password are required"


class WeakPasswordError(ValidationError):
    error = "Invalid password"
    message = "Password must be at least 8 characters"


class InvalidApprovalTokenError(ValidationError):
    error = "Invalid approval token"
    message = "The approval token is invalid, expired or already used"


class AlreadyExistsError(ConflictError):
    error = "User already exists"
    message = "An account with this email already exists"


class InvalidCredentialsError(AuthenticationError):
    # Same shape whether the email or the password was wrong
    error = "Invalid credentials"
    message = "Email or password is incorrect"


class AccountInactiveError(AuthenticationError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Account inactive"
    message = "Your account is not active. Please contact support."


class MissingTokenError(AuthenticationError):
    error = "Unauthorized"
    message = "Access token is required"


class InvalidTokenError(AuthenticationError):
    error = "Invalid token"
    message = "Token is invalid or malformed"


class TokenExpiredError(AuthenticationError):
    error = "Token expired"
    message = "Your session has expired. Please login again."


class InvalidPasswordError(AuthenticationError):
    error = "Invalid password"
    message = "Current password is incorrect"


class UserNotFoundError(NotFoundError):
    error = "User not found"
    message = "User account not found"
