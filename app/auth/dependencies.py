"""
FastAPI dependencies for authentication and authorization.

Provides:
- get_current_identity: Extract and verify the bearer token (mandatory)
- get_optional_identity: Same, but anonymous requests pass through
- require_role: Gate a route to specific roles
- Providers for the token service, password manager and auth service

Protected handlers take an ``Identity`` parameter; having one in hand means
the token check already ran. Handlers never re-verify the token.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.jwt import ExpiredToken, TokenService, ValidToken
from app.auth.password import PasswordManager, get_password_manager_for
from app.auth.service import AuthService
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import (
    AuthorizationError,
    InvalidTokenError,
    MissingTokenError,
    TokenExpiredError,
)
from app.models.user import UserRole
from app.repositories.application_repository import ApplicationRepository
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor
security = HTTPBearer(auto_error=False)


class Identity(BaseModel):
    """Per-request identity context populated from a verified token."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    email: str
    role: str

    def has_role(self, *roles: str) -> bool:
        return self.role in {str(getattr(r, "value", r)) for r in roles}


# =============================================================================
# Service providers
# =============================================================================

def get_token_service(settings: Settings = Depends(get_settings)) -> TokenService:
    return TokenService(
        secret_key=settings.jwt_secret_key,
        ttl=settings.token_ttl,
        algorithm=settings.jwt_algorithm,
        issuer=settings.token_issuer,
    )


def get_password_manager(settings: Settings = Depends(get_settings)) -> PasswordManager:
    return get_password_manager_for(
        settings.password_time_cost,
        settings.password_memory_cost,
        settings.password_parallelism,
    )


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    passwords: PasswordManager = Depends(get_password_manager),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(
        users=UserRepository(db),
        passwords=passwords,
        tokens=tokens,
        applications=ApplicationRepository(db),
        require_approval_token=settings.require_approval_token,
    )


# =============================================================================
# Token check
# =============================================================================

def authenticate(token: str, tokens: TokenService) -> Identity:
    """
    Verify a bearer token and build the identity context.

    Raises:
        TokenExpiredError (401): token lifetime is over
        InvalidTokenError (403): bad signature or malformed token
    """
    result = tokens.verify(token)
    if isinstance(result, ValidToken):
        claims = result.claims
        return Identity(user_id=claims.user_id, email=claims.email, role=claims.role)
    if isinstance(result, ExpiredToken):
        raise TokenExpiredError()

    logger.debug("Rejected bearer token: %s", result.reason)
    raise InvalidTokenError(status_code=403)


async def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    """
    Mandatory authentication.

    Looks for ``Authorization: Bearer <token>``; no database access.
    """
    if not credentials or not credentials.credentials:
        raise MissingTokenError()

    identity = authenticate(credentials.credentials, tokens)
    request.state.user_id = identity.user_id
    return identity


async def get_optional_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenService = Depends(get_token_service),
) -> Optional[Identity]:
    """
    Optional authentication.

    Returns None for anonymous requests and for tokens that fail
    verification; never rejects the request.
    """
    if not credentials or not credentials.credentials:
        return None

    result = tokens.verify(credentials.credentials)
    if not isinstance(result, ValidToken):
        return None

    claims = result.claims
    request.state.user_id = claims.user_id
    return Identity(user_id=claims.user_id, email=claims.email, role=claims.role)


def require_role(*allowed_roles: UserRole):
    """
    Dependency to require specific role(s).

    Usage:
        @router.get("/admin-only")
        async def admin_endpoint(
            identity: Identity = Depends(require_role(UserRole.ADMIN))
        ):
            ...

    Runs after get_current_identity, so a missing or bad token is reported
    as such before the role is looked at.
    """
    async def role_checker(
        identity: Identity = Depends(get_current_identity),
    ) -> Identity:
        if not identity.has_role(*allowed_roles):
            logger.info("User %s with role %r denied", identity.user_id, identity.role)
            raise AuthorizationError()
        return identity

    return role_checker


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.
    Handles X-Forwarded-For header for proxied requests.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # Take the first IP (original client)
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"
