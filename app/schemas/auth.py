"""
Authentication-related schemas.

Request fields are optional at the schema level: presence checks belong to
the auth service so missing input yields the documented 400 errors.
"""

from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    """Account creation for an approved investor."""

    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=128)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    approval_token: Optional[str] = Field(default=None, max_length=255)


class LoginRequest(CamelModel):
    """Login request with email and password."""

    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=128)


class VerifyRequest(CamelModel):
    token: Optional[str] = None


class PasswordChangeRequest(CamelModel):
    """Request to change password. ``token`` falls back to the bearer header."""

    token: Optional[str] = None
    current_password: Optional[str] = Field(default=None, max_length=128)
    new_password: Optional[str] = Field(default=None, max_length=128)


class PublicUser(CamelModel):
    """User fields safe to send to the client."""

    id: int
    email: str
    first_name: str
    last_name: str
    role: str
    status: str


class AuthResponse(CamelModel):
    """Register / login response."""

    message: str
    token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Token lifetime in seconds")
    user: PublicUser


class VerifyResponse(CamelModel):
    valid: bool = True
    user: PublicUser


def public_user(user) -> PublicUser:
    """Convert a User model to its public shape."""
    return PublicUser(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role.value,
        status=user.status.value,
    )
