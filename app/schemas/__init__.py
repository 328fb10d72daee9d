"""
Pydantic schemas for API request/response validation.

These schemas provide:
- camelCase JSON on the wire
- Output serialization without sensitive fields
- OpenAPI documentation generation
"""

from app.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    VerifyRequest,
    PasswordChangeRequest,
    PublicUser,
    AuthResponse,
    VerifyResponse,
)
from app.schemas.common import (
    CamelModel,
    PaginatedResponse,
    MessageResponse,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    # Auth
    "RegisterRequest",
    "LoginRequest",
    "VerifyRequest",
    "PasswordChangeRequest",
    "PublicUser",
    "AuthResponse",
    "VerifyResponse",
    # Common
    "CamelModel",
    "PaginatedResponse",
    "MessageResponse",
    "ErrorResponse",
    "HealthResponse",
]
