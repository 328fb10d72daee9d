"""
Authentication and Authorization module.

Provides:
- JWT session tokens with a tagged verification result
- Password hashing (Argon2id)
- The authentication service (register, login, verify, change password)
- Request dependencies for identity and role checks
"""

from app.auth.jwt import (
    TokenService,
    TokenClaims,
    TokenVerification,
    ValidToken,
    ExpiredToken,
    InvalidToken,
)
from app.auth.password import PasswordManager
from app.auth.service import AuthService, AuthResult
from app.auth.dependencies import (
    Identity,
    get_current_identity,
    get_optional_identity,
    require_role,
    get_auth_service,
    get_token_service,
)

__all__ = [
    # JWT
    "TokenService",
    "TokenClaims",
    "TokenVerification",
    "ValidToken",
    "ExpiredToken",
    "InvalidToken",
    # Password
    "PasswordManager",
    # Service
    "AuthService",
    "AuthResult",
    # Dependencies
    "Identity",
    "get_current_identity",
    "get_optional_identity",
    "require_role",
    "get_auth_service",
    "get_token_service",
]
